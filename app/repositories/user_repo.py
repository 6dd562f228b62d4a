"""
User Repository

Data access layer for User and UserRole models.
"""

from typing import Optional, List, Any
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.orm import selectinload

from app.repositories.base import BaseRepository
from app.models.user import User
from app.models.user_role import UserRole


class UserRepository(BaseRepository[User]):
    """Repository for User model."""

    def __init__(self, db: AsyncSession):
        super().__init__(User, db)

    # =================
    # Get with roles
    # =================
    async def get_with_roles(self, user_id: Any) -> Optional[User]:
        """Get a user with role membership loaded."""
        result = await self.db.execute(
            select(User)
            .options(selectinload(User.roles))
            .where(User.id == user_id)
        )
        return result.scalar_one_or_none()

    # =================
    # Get by email
    # =================
    async def get_by_email(self, email: str) -> Optional[User]:
        """Get a user by email address, roles loaded."""
        result = await self.db.execute(
            select(User)
            .options(selectinload(User.roles))
            .where(User.email == email)
        )
        return result.scalar_one_or_none()

    # =================
    # Create user
    # =================
    async def create_user(
        self,
        email: str,
        password_hash: str,
        full_name: str,
        roles: List[str],
    ) -> User:
        """Create a new user holding the given roles."""
        user = User(
            email=email,
            password_hash=password_hash,
            full_name=full_name,
            is_active=True,
        )
        user.roles = [UserRole(role=name) for name in roles]

        self.db.add(user)
        await self.db.commit()

        return await self.get_with_roles(user.id)

    # =================
    # Role membership
    # =================
    async def add_role(self, user_id: Any, role: str) -> UserRole:
        """
        Stage a role grant in the current transaction.

        The caller commits; nothing is flushed here.
        """
        user_role = UserRole(user_id=user_id, role=role)
        self.db.add(user_role)
        return user_role

    async def has_role(self, user_id: Any, role: str) -> bool:
        result = await self.db.execute(
            select(UserRole.id).where(
                UserRole.user_id == user_id,
                UserRole.role == role,
            )
        )
        return result.first() is not None
