from sqlalchemy import Column, Integer, Boolean, ForeignKey, DateTime, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from app.db.database import Base
from .base import utcnow
import uuid


class QuizAttemptAnswer(Base):
    __tablename__ = "quiz_attempt_answers"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    quiz_attempt_id = Column(
        UUID(as_uuid=True),
        ForeignKey("quiz_attempts.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    quiz_question_id = Column(
        UUID(as_uuid=True),
        ForeignKey("quiz_questions.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )

    # Answer, one of these depending on question type
    answer_text = Column(Text, nullable=True)
    selected_option_id = Column(
        UUID(as_uuid=True),
        ForeignKey("quiz_question_options.id", ondelete="SET NULL"),
        nullable=True
    )
    boolean_answer = Column(Boolean, nullable=True)

    points_earned = Column(Integer, default=0, nullable=False)
    is_correct = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    # Relationships
    attempt = relationship("QuizAttempt", back_populates="answers")
    question = relationship("QuizQuestion", back_populates="answers")
    selected_option = relationship("QuizQuestionOption")
