"""
Role Request Service

Users ask for the Instructor role; an admin approves or rejects.
Requests are append-only: a processed request is never reopened, the
user files a new one instead.
"""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError, ForbiddenError, ValidationFailedError
from app.models.base import utcnow
from app.models.user import User
from app.models.user_role import RoleName
from app.models.role_request import RoleRequest, RoleRequestStatus
from app.repositories.role_request_repo import RoleRequestRepository
from app.repositories.user_repo import UserRepository
from app.services.catalog_service import is_admin

logger = logging.getLogger(__name__)

REQUESTABLE_ROLES = {RoleName.INSTRUCTOR.value}


class RoleRequestService:
    """Service for the role request workflow."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.request_repo = RoleRequestRepository(db)
        self.user_repo = UserRepository(db)

    async def submit(
        self,
        user: User,
        requested_role: str = RoleName.INSTRUCTOR.value,
        reason: Optional[str] = None,
    ) -> RoleRequest:
        """
        File a role request.

        Raises:
            ValidationFailedError: role not requestable, already held,
                or a pending request for it already exists
        """
        if requested_role not in REQUESTABLE_ROLES:
            raise ValidationFailedError(f"The {requested_role} role cannot be requested")

        if user.has_role(requested_role):
            raise ValidationFailedError(f"You already have the {requested_role} role.")

        if await self.request_repo.get_pending(user.id, requested_role):
            raise ValidationFailedError("You already have a pending request for this role.")

        request = await self.request_repo.create(
            user_id=user.id,
            requested_role=requested_role,
            reason=reason,
            requested_at=utcnow(),
            status=RoleRequestStatus.PENDING,
        )
        logger.info(f"Role request {request.id} submitted by {user.id} for {requested_role}")
        return request

    async def list_for_user(self, user_id: UUID) -> List[RoleRequest]:
        return await self.request_repo.get_by_user(user_id)

    async def list_all(
        self,
        admin: User,
        status: Optional[RoleRequestStatus] = None
    ) -> List[RoleRequest]:
        self._ensure_admin(admin)
        return await self.request_repo.list_all(status)

    async def approve(
        self,
        admin: User,
        request_id: UUID,
        notes: Optional[str] = None
    ) -> RoleRequest:
        """Grant the requested role (if not already held) and close the request."""
        request = await self._get_pending(admin, request_id)

        if not await self.user_repo.has_role(request.user_id, request.requested_role):
            await self.user_repo.add_role(request.user_id, request.requested_role)

        return await self._close(admin, request, RoleRequestStatus.APPROVED, notes)

    async def reject(
        self,
        admin: User,
        request_id: UUID,
        notes: Optional[str] = None
    ) -> RoleRequest:
        request = await self._get_pending(admin, request_id)
        return await self._close(admin, request, RoleRequestStatus.REJECTED, notes)

    # ============================================================
    # Helpers
    # ============================================================

    def _ensure_admin(self, user: User) -> None:
        if not is_admin(user):
            logger.warning(f"User {user.id} refused access to role request administration")
            raise ForbiddenError("Only administrators can manage role requests")

    async def _get_pending(self, admin: User, request_id: UUID) -> RoleRequest:
        self._ensure_admin(admin)

        request = await self.request_repo.get_by_id(request_id)
        if not request:
            raise NotFoundError("Role request not found")
        if request.status != RoleRequestStatus.PENDING:
            raise ValidationFailedError("This request has already been processed.")
        return request

    async def _close(
        self,
        admin: User,
        request: RoleRequest,
        status: RoleRequestStatus,
        notes: Optional[str],
    ) -> RoleRequest:
        # Role grant (if any) and the status change commit together
        request.status = status
        request.processed_at = utcnow()
        request.processed_by = admin.id
        request.admin_notes = notes
        await self.db.commit()
        await self.db.refresh(request)

        logger.info(f"Role request {request.id} {status.value} by {admin.id}")
        return request
