import logging
from datetime import datetime, timezone
from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from app.models import User, RoleName
from app.repositories.user_repo import UserRepository
from app.schemas.auth import (
    UserRegister,
    UserLogin,
    TokenResponse,
    TokenRefreshResponse,
    UserResponse,
)
from app.core.exceptions import AuthenticationError, ValidationFailedError
from app.core.security import (
    verify_password,
    get_password_hash,
    create_token_pair,
    create_access_token,
    read_access_token,
    read_refresh_token,
)
from app.core.config import settings

logger = logging.getLogger(__name__)


def build_user_response(user: User) -> UserResponse:
    """User with role names; `roles` must already be loaded."""
    return UserResponse(
        id=user.id,
        email=user.email,
        full_name=user.full_name,
        is_active=user.is_active,
        roles=user.role_names,
        created_at=user.created_at,
        last_login=user.last_login,
    )


class AuthService:
    """
    Service class for authentication operations.
    """
    def __init__(self, db: AsyncSession):
        self.db = db
        self.user_repo = UserRepository(db)

    # ============================================================
    # User Registration
    # ============================================================
    async def register(self, user_data: UserRegister) -> TokenResponse:
        """
        Register a new user.

        Every account holds the User role. The account whose email
        matches BOOTSTRAP_ADMIN_EMAIL is also made an Admin.

        Raises:
            ValidationFailedError: If email already exists
        """
        existing_user = await self.user_repo.get_by_email(user_data.email)
        if existing_user:
            raise ValidationFailedError("A user with this email already exists")

        roles: List[str] = [RoleName.USER.value]
        bootstrap_email = settings.BOOTSTRAP_ADMIN_EMAIL
        if bootstrap_email and user_data.email.lower() == bootstrap_email.lower():
            roles.append(RoleName.ADMIN.value)
            logger.info(f"Granting Admin to bootstrap account {user_data.email}")

        user = await self.user_repo.create_user(
            email=user_data.email,
            password_hash=get_password_hash(user_data.password),
            full_name=user_data.full_name,
            roles=roles,
        )
        logger.info(f"User registered: {user.id}")

        return self._create_token_response(user)

    # ============================================================
    # User Login
    # ============================================================
    async def login(self, login_data: UserLogin) -> TokenResponse:
        """
        Authenticate user and return tokens.

        Raises:
            AuthenticationError: If credentials are invalid or the account is inactive
        """
        user = await self.user_repo.get_by_email(login_data.email)

        if not user or not verify_password(login_data.password, user.password_hash):
            raise AuthenticationError("Invalid email or password")

        if not user.is_active:
            raise AuthenticationError("This account has been deactivated")

        user.last_login = datetime.now(timezone.utc)
        await self.db.commit()

        return self._create_token_response(user)

    # ============================================================
    # Token Refresh
    # ============================================================
    async def refresh_token(self, refresh_token: str) -> TokenRefreshResponse:
        user_id = read_refresh_token(refresh_token)
        if not user_id:
            raise AuthenticationError("Invalid or expired refresh token")

        user = await self.user_repo.get_by_id(user_id)
        if not user or not user.is_active:
            raise AuthenticationError("User not found or inactive")

        return TokenRefreshResponse(
            access_token=create_access_token(user.id),
            expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        )

    # ============================================================
    # Get Current User
    # ============================================================
    async def get_current_user(self, token: str) -> User:
        """
        Resolve an access token to an active user, roles loaded.

        Raises:
            AuthenticationError: If the token or the account is not valid
        """
        user_id = read_access_token(token)
        if not user_id:
            raise AuthenticationError("Invalid or expired token")

        user = await self.user_repo.get_with_roles(user_id)
        if not user:
            raise AuthenticationError("User not found")

        if not user.is_active:
            raise AuthenticationError("User account is deactivated")

        return user

    # ============================================================
    # Helper Methods
    # ============================================================
    def _create_token_response(self, user: User) -> TokenResponse:
        tokens = create_token_pair(user.id)
        return TokenResponse(**tokens, user=build_user_response(user))
