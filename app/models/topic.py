from sqlalchemy import Column, String, Integer, Boolean, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from .base import BaseModel


class Topic(BaseModel):
    __tablename__ = "topics"

    # Which course does this topic belong to?
    course_id = Column(
        UUID(as_uuid=True),
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    title = Column(String(150), nullable=False)
    description = Column(String(500), nullable=False, default="")

    # Display order within the course
    order = Column(Integer, default=1, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    course = relationship("Course", back_populates="topics")
    content_items = relationship(
        "ContentItem",
        back_populates="topic",
        cascade="all, delete-orphan",
        order_by="ContentItem.order"
    )
