from sqlalchemy import Column, String, Integer, Boolean, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from .base import BaseModel


class Quiz(BaseModel):
    __tablename__ = "quizzes"

    # One quiz per content item, enforced by the authoring service
    content_item_id = Column(
        UUID(as_uuid=True),
        ForeignKey("content_items.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    # Quiz info
    title = Column(String(200), nullable=False)
    description = Column(String(1000), nullable=False, default="")

    # Settings
    time_limit_minutes = Column(Integer, default=30, nullable=False)
    passing_score = Column(Integer, default=70, nullable=False)  # percent, 1-100
    max_attempts = Column(Integer, default=3, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    # Optimistic concurrency token, bumped by SQLAlchemy on every UPDATE
    version_id = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version_id}

    # Relationships
    content_item = relationship("ContentItem", back_populates="quizzes")
    questions = relationship(
        "QuizQuestion",
        back_populates="quiz",
        cascade="all, delete-orphan",
        order_by="QuizQuestion.order"
    )
    attempts = relationship("QuizAttempt", back_populates="quiz", cascade="all, delete-orphan")
