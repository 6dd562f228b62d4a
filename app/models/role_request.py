"""
Role Request Model

Append-only record of a user asking for an elevated role. An admin
approves or rejects it; processed requests are never reopened.
"""

import enum
from sqlalchemy import Column, String, Text, ForeignKey, DateTime, Enum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from .base import BaseModel, utcnow


class RoleRequestStatus(enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class RoleRequest(BaseModel):
    __tablename__ = "role_requests"

    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    requested_role = Column(String(50), nullable=False, default="Instructor")
    reason = Column(Text, nullable=True)
    requested_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

    status = Column(
        Enum(
            RoleRequestStatus,
            name="role_request_status",
            values_callable=lambda x: [e.value for e in x]
        ),
        default=RoleRequestStatus.PENDING,
        nullable=False,
        index=True
    )

    # Filled when an admin processes the request
    processed_at = Column(DateTime(timezone=True), nullable=True)
    processed_by = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    admin_notes = Column(Text, nullable=True)

    user = relationship("User", back_populates="role_requests", foreign_keys=[user_id])
