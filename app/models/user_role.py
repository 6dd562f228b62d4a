"""
User Role Model

Role membership for a user. A user may hold several roles.
"""

import enum
from sqlalchemy import Column, String, ForeignKey, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from .base import BaseModel


class RoleName(str, enum.Enum):
    ADMIN = "Admin"
    INSTRUCTOR = "Instructor"
    USER = "User"


class UserRole(BaseModel):
    __tablename__ = "user_roles"
    __table_args__ = (
        UniqueConstraint("user_id", "role", name="uq_user_roles_user_role"),
    )

    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    role = Column(String(50), nullable=False)

    user = relationship("User", back_populates="roles")
