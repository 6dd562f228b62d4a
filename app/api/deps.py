from fastapi import HTTPException, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
import logging

from app.db.database import get_db
from app.models import User
from app.core.exceptions import AuthenticationError, ForbiddenError
from app.services.auth_service import AuthService

logger = logging.getLogger(__name__)

# Security scheme for Swagger UI
security = HTTPBearer()


# =====================================================
# Get Current user
# =====================================================
async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> User:
    """
    Dependency that validates JWT token and returns current user,
    with role membership loaded.

    Raises:
        HTTPException 401: If token is invalid or missing
    """
    token = credentials.credentials

    auth_service = AuthService(db)

    try:
        return await auth_service.get_current_user(token)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"}
        )


async def get_current_active_user(
    current_user: User = Depends(get_current_user)
) -> User:
    if not current_user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Inactive user"
        )
    return current_user


# =====================================================
# Role membership
# =====================================================
def require_roles(*role_names: str):
    """
    Dependency factory: the caller must hold at least one of the roles.

    Usage:
        current_user: User = Depends(require_roles("Admin", "Instructor"))
    """
    async def checker(current_user: User = Depends(get_current_active_user)) -> User:
        if not current_user.has_role(*role_names):
            logger.warning(
                f"User {current_user.id} lacks roles {role_names} (has {current_user.role_names})"
            )
            raise ForbiddenError()
        return current_user

    return checker
