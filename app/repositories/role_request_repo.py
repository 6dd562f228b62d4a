"""
Role Request Repository
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.orm import selectinload

from app.repositories.base import BaseRepository
from app.models.role_request import RoleRequest, RoleRequestStatus


class RoleRequestRepository(BaseRepository[RoleRequest]):
    """Repository for RoleRequest model."""

    def __init__(self, db: AsyncSession):
        super().__init__(RoleRequest, db)

    async def get_pending(self, user_id: UUID, role: str) -> Optional[RoleRequest]:
        stmt = (
            select(self.model)
            .where(
                self.model.user_id == user_id,
                self.model.requested_role == role,
                self.model.status == RoleRequestStatus.PENDING,
            )
            .limit(1)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_user(self, user_id: UUID) -> List[RoleRequest]:
        stmt = (
            select(self.model)
            .where(self.model.user_id == user_id)
            .order_by(self.model.requested_at.desc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def list_all(self, status: Optional[RoleRequestStatus] = None) -> List[RoleRequest]:
        """All requests, newest first, with the requesting user loaded."""
        stmt = select(self.model).options(selectinload(self.model.user))
        if status is not None:
            stmt = stmt.where(self.model.status == status)
        stmt = stmt.order_by(self.model.requested_at.desc())

        result = await self.db.execute(stmt)
        return list(result.scalars().all())
