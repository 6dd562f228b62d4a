from sqlalchemy import Column, Integer, String, ForeignKey, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from .base import BaseModel


class CourseRating(BaseModel):
    __tablename__ = "course_ratings"
    __table_args__ = (
        UniqueConstraint("user_id", "course_id", name="uq_course_ratings_user_course"),
    )

    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    course_id = Column(UUID(as_uuid=True), ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)

    rating = Column(Integer, nullable=False)  # 1-5
    feedback = Column(String(1000), nullable=True)

    user = relationship("User", back_populates="course_ratings")
    course = relationship("Course", back_populates="ratings")
