"""
Role Request Schemas
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from app.models.user_role import RoleName
from app.models.role_request import RoleRequestStatus


class RoleRequestCreate(BaseModel):
    requested_role: RoleName = RoleName.INSTRUCTOR
    reason: Optional[str] = Field(None, max_length=2000)


class RoleRequestDecision(BaseModel):
    """Admin approve/reject body."""
    admin_notes: Optional[str] = Field(None, max_length=2000)


class RoleRequestResponse(BaseModel):
    id: UUID
    user_id: UUID
    requested_role: str
    reason: Optional[str] = None
    requested_at: datetime
    status: RoleRequestStatus
    processed_at: Optional[datetime] = None
    processed_by: Optional[UUID] = None
    admin_notes: Optional[str] = None

    class Config:
        from_attributes = True
