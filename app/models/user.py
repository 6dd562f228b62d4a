from sqlalchemy import Column, String, Boolean, DateTime
from sqlalchemy.orm import relationship
from .base import BaseModel


class User(BaseModel):
    __tablename__ = "users"

    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    full_name = Column(String(100), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    last_login = Column(DateTime(timezone=True), nullable=True)

    # Relationships - User OWNS these
    roles = relationship("UserRole", back_populates="user", cascade="all, delete-orphan")
    enrollments = relationship("Enrollment", back_populates="user", cascade="all, delete-orphan")
    course_ratings = relationship("CourseRating", back_populates="user", cascade="all, delete-orphan")
    quiz_attempts = relationship("QuizAttempt", back_populates="user", cascade="all, delete-orphan")
    progress_records = relationship("Progress", back_populates="user", cascade="all, delete-orphan")
    role_requests = relationship(
        "RoleRequest",
        back_populates="user",
        cascade="all, delete-orphan",
        foreign_keys="RoleRequest.user_id",
    )

    @property
    def role_names(self) -> list:
        """Names of the roles held; requires `roles` to be loaded."""
        return sorted(r.role for r in self.roles)

    def has_role(self, *names: str) -> bool:
        held = {r.role for r in self.roles}
        return any(name in held for name in names)
