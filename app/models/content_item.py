from sqlalchemy import Column, String, Integer, Boolean, ForeignKey, Text, Enum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
import enum
from .base import BaseModel


class ContentType(enum.Enum):
    TEXT = "text"
    VIDEO = "video"
    PDF = "pdf"
    QUIZ = "quiz"


class ContentItem(BaseModel):
    __tablename__ = "content_items"

    topic_id = Column(
        UUID(as_uuid=True),
        ForeignKey("topics.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    title = Column(String(150), nullable=False)
    description = Column(String(500), nullable=False, default="")
    order = Column(Integer, default=1, nullable=False)
    content_type = Column(
        Enum(
            ContentType,
            name="content_type",
            values_callable=lambda x: [e.value for e in x]
        ),
        default=ContentType.TEXT,
        nullable=False
    )

    # Payload, depending on content_type
    content = Column(Text, nullable=False, default="")
    video_url = Column(String(500), nullable=True)
    pdf_file_path = Column(String(500), nullable=True)

    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    topic = relationship("Topic", back_populates="content_items")
    quizzes = relationship("Quiz", back_populates="content_item", cascade="all, delete-orphan")
    progress_records = relationship("Progress", back_populates="content_item", cascade="all, delete-orphan")
