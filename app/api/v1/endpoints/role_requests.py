"""
Role Request Endpoints

Endpoints:
----------
- POST /role-requests                              - Ask for the Instructor role
- GET  /role-requests                              - The caller's own requests
- GET  /admin/role-requests                        - All requests (admin)
- POST /admin/role-requests/{request_id}/approve   - Approve (admin)
- POST /admin/role-requests/{request_id}/reject    - Reject (admin)
"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.database import get_db
from app.api.deps import get_current_active_user, require_roles
from app.models.user import User
from app.models.user_role import RoleName
from app.models.role_request import RoleRequestStatus
from app.schemas.role_request import (
    RoleRequestCreate,
    RoleRequestDecision,
    RoleRequestResponse,
)
from app.services.role_request_service import RoleRequestService

router = APIRouter(tags=["Role Requests"])

admin_only = require_roles(RoleName.ADMIN.value)


def get_role_request_service(db: AsyncSession = Depends(get_db)) -> RoleRequestService:
    return RoleRequestService(db)


@router.post(
    "/role-requests",
    response_model=RoleRequestResponse,
    status_code=status.HTTP_201_CREATED,
)
async def submit_role_request(
    data: RoleRequestCreate,
    current_user: User = Depends(get_current_active_user),
    service: RoleRequestService = Depends(get_role_request_service),
):
    return await service.submit(current_user, data.requested_role.value, data.reason)


@router.get("/role-requests", response_model=List[RoleRequestResponse])
async def list_my_role_requests(
    current_user: User = Depends(get_current_active_user),
    service: RoleRequestService = Depends(get_role_request_service),
):
    return await service.list_for_user(current_user.id)


# ============================================================
# ADMIN
# ============================================================

@router.get("/admin/role-requests", response_model=List[RoleRequestResponse])
async def list_role_requests(
    status_filter: Optional[RoleRequestStatus] = Query(None, alias="status"),
    current_user: User = Depends(admin_only),
    service: RoleRequestService = Depends(get_role_request_service),
):
    return await service.list_all(current_user, status_filter)


@router.post(
    "/admin/role-requests/{request_id}/approve",
    response_model=RoleRequestResponse,
)
async def approve_role_request(
    request_id: UUID,
    decision: RoleRequestDecision,
    current_user: User = Depends(admin_only),
    service: RoleRequestService = Depends(get_role_request_service),
):
    return await service.approve(current_user, request_id, decision.admin_notes)


@router.post(
    "/admin/role-requests/{request_id}/reject",
    response_model=RoleRequestResponse,
)
async def reject_role_request(
    request_id: UUID,
    decision: RoleRequestDecision,
    current_user: User = Depends(admin_only),
    service: RoleRequestService = Depends(get_role_request_service),
):
    return await service.reject(current_user, request_id, decision.admin_notes)
