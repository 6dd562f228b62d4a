from sqlalchemy import Column, String, Integer, Boolean, ForeignKey, DateTime, Enum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from app.db.database import Base
from .base import utcnow
import uuid
import enum


class QuestionType(enum.Enum):
    MULTIPLE_CHOICE = "multiple_choice"
    TRUE_FALSE = "true_false"
    SHORT_ANSWER = "short_answer"
    ESSAY = "essay"


class QuizQuestion(Base):
    __tablename__ = "quiz_questions"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    quiz_id = Column(UUID(as_uuid=True), ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False, index=True)

    # Question content
    question_text = Column(String(500), nullable=False)
    question_type = Column(
        Enum(
            QuestionType,
            name="question_type",
            values_callable=lambda x: [e.value for e in x]
        ),
        default=QuestionType.MULTIPLE_CHOICE,
        nullable=False
    )

    # Metadata
    order = Column(Integer, default=1, nullable=False)
    points = Column(Integer, default=1, nullable=False)
    is_required = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    # Relationships
    quiz = relationship("Quiz", back_populates="questions")
    options = relationship(
        "QuizQuestionOption",
        back_populates="question",
        cascade="all, delete-orphan",
        order_by="QuizQuestionOption.order"
    )
    # No delete cascade: graded answers stay with their attempt, unlinked
    answers = relationship("QuizAttemptAnswer", back_populates="question")


class QuizQuestionOption(Base):
    __tablename__ = "quiz_question_options"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    quiz_question_id = Column(
        UUID(as_uuid=True),
        ForeignKey("quiz_questions.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    option_text = Column(String(500), nullable=False)
    is_correct = Column(Boolean, default=False, nullable=False)
    order = Column(Integer, default=1, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    question = relationship("QuizQuestion", back_populates="options")
