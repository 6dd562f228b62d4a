"""
Progress Model

One row per user and content item, recording that the user worked
through the item. The course and topic ids are copied from the item so
a course's progress can be read without walking the outline.
"""

import enum
from sqlalchemy import Column, ForeignKey, DateTime, Enum, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from .base import BaseModel


class ProgressStatus(enum.Enum):
    INCOMPLETE = "incomplete"
    COMPLETE = "complete"


class Progress(BaseModel):
    __tablename__ = "progress"
    __table_args__ = (
        UniqueConstraint("user_id", "content_item_id", name="uq_progress_user_content_item"),
    )

    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    course_id = Column(UUID(as_uuid=True), ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)
    topic_id = Column(UUID(as_uuid=True), ForeignKey("topics.id", ondelete="CASCADE"), nullable=False)
    content_item_id = Column(
        UUID(as_uuid=True),
        ForeignKey("content_items.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    status = Column(
        Enum(
            ProgressStatus,
            name="progress_status",
            values_callable=lambda x: [e.value for e in x]
        ),
        default=ProgressStatus.INCOMPLETE,
        nullable=False
    )
    completed_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    user = relationship("User", back_populates="progress_records")
    content_item = relationship("ContentItem", back_populates="progress_records")
