"""
Quiz Schemas

Pydantic models for quiz authoring, attempt taking and results.
"""

from datetime import datetime
from typing import Optional, List, Any, Dict
from uuid import UUID
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from app.core.config import settings
from app.models.quiz_question import QuestionType


# ============================================================
# Enums
# ============================================================

class AttemptRoute(str, Enum):
    """Where the client should go next after an attempt operation."""
    CONTINUE = "continue"
    RESULTS = "results"


# ============================================================
# Authoring Request Schemas
# ============================================================

class OptionCreate(BaseModel):
    option_text: str = Field(..., min_length=1, max_length=500)
    is_correct: bool = False
    order: int = Field(default=1, ge=0)


class OptionUpdate(BaseModel):
    option_text: Optional[str] = Field(None, min_length=1, max_length=500)
    is_correct: Optional[bool] = None
    order: Optional[int] = Field(None, ge=0)

    @field_validator("option_text", "is_correct", "order")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class QuestionCreate(BaseModel):
    question_text: str = Field(..., min_length=1, max_length=500)
    question_type: QuestionType = QuestionType.MULTIPLE_CHOICE
    order: int = Field(default=1, ge=0)
    points: int = Field(default=1, ge=1, le=10, description="Points for this question")
    is_required: bool = True
    options: List[OptionCreate] = Field(default_factory=list)


class QuestionUpdate(BaseModel):
    question_text: Optional[str] = Field(None, min_length=1, max_length=500)
    question_type: Optional[QuestionType] = None
    order: Optional[int] = Field(None, ge=0)
    points: Optional[int] = Field(None, ge=1, le=10)
    is_required: Optional[bool] = None

    @field_validator("question_text", "question_type", "order", "points", "is_required")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class QuizCreate(BaseModel):
    """Request to create a quiz for a content item."""
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(default="", max_length=1000)
    content_item_id: UUID
    time_limit_minutes: int = Field(
        default_factory=lambda: settings.QUIZ_DEFAULT_TIME_LIMIT_MINUTES,
        ge=1,
        le=180,
        description="Time limit must be between 1 and 180 minutes"
    )
    passing_score: int = Field(
        default_factory=lambda: settings.QUIZ_DEFAULT_PASSING_SCORE,
        ge=1,
        le=100,
        description="Passing score must be between 1 and 100"
    )
    max_attempts: int = Field(
        default_factory=lambda: settings.QUIZ_DEFAULT_MAX_ATTEMPTS,
        ge=1,
        le=10,
        description="Max attempts must be between 1 and 10"
    )

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Title is required")
        return v


class QuizUpdate(BaseModel):
    """Free-form quiz edit; only provided fields change."""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    time_limit_minutes: Optional[int] = Field(None, ge=1, le=180)
    passing_score: Optional[int] = Field(None, ge=1, le=100)
    max_attempts: Optional[int] = Field(None, ge=1, le=10)
    is_active: Optional[bool] = None

    @field_validator(
        "title",
        "description",
        "time_limit_minutes",
        "passing_score",
        "max_attempts",
        "is_active",
    )
    @classmethod
    def reject_null(cls, v):
        # Omit a field to leave it unchanged; null is not a value here
        if v is None:
            raise ValueError("Field cannot be null")
        return v

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Title is required")
        return v


# ============================================================
# Attempt Request Schemas
# ============================================================

class QuizSubmitRequest(BaseModel):
    """Answers for one attempt, keyed by question id."""
    attempt_id: UUID
    answers: Dict[UUID, Any] = Field(
        default_factory=dict,
        description="question_id -> option id, true/false, or free text"
    )


# ============================================================
# Response Schemas
# ============================================================

class OptionPublicResponse(BaseModel):
    """An option as shown while taking a quiz (no correctness flag)."""
    id: UUID
    option_text: str
    order: int

    class Config:
        from_attributes = True


class OptionResponse(OptionPublicResponse):
    is_correct: bool


class QuestionPublicResponse(BaseModel):
    id: UUID
    question_text: str
    question_type: QuestionType
    order: int
    points: int
    is_required: bool
    options: List[OptionPublicResponse] = Field(default_factory=list)

    class Config:
        from_attributes = True


class QuestionResponse(QuestionPublicResponse):
    options: List[OptionResponse] = Field(default_factory=list)


class QuizResponse(BaseModel):
    """Quiz metadata response."""
    id: UUID
    content_item_id: UUID
    title: str
    description: str
    time_limit_minutes: int
    passing_score: int
    max_attempts: int
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class QuizDetailResponse(QuizResponse):
    """Quiz with ordered questions and options, for authors."""
    questions: List[QuestionResponse] = Field(default_factory=list)


class AttemptSummaryResponse(BaseModel):
    id: UUID
    quiz_id: UUID
    attempt_number: int
    started_at: datetime
    completed_at: Optional[datetime] = None
    score: int
    total_points: int
    percentage_score: float
    is_passed: bool
    is_completed: bool


class AttemptSessionResponse(BaseModel):
    """Everything needed to keep answering an in-progress attempt."""
    attempt: AttemptSummaryResponse
    quiz: QuizResponse
    questions: List[QuestionPublicResponse]
    time_remaining_minutes: int


class AttemptFlowResponse(BaseModel):
    """Result of take / continue / submit."""
    route: AttemptRoute
    quiz_id: UUID
    attempt_id: Optional[UUID] = None
    message: Optional[str] = None
    time_remaining_minutes: Optional[int] = None
    session: Optional[AttemptSessionResponse] = None
    attempt: Optional[AttemptSummaryResponse] = None


class AnswerDetailResponse(BaseModel):
    question: Optional[QuestionResponse] = None
    answer_text: Optional[str] = None
    selected_option_id: Optional[UUID] = None
    boolean_answer: Optional[bool] = None
    points_earned: int
    is_correct: bool


class AttemptResultResponse(AttemptSummaryResponse):
    answers: List[AnswerDetailResponse] = Field(default_factory=list)


class QuizResultsResponse(BaseModel):
    quiz: QuizResponse
    attempts: List[AttemptResultResponse]
    best_attempt: Optional[AttemptResultResponse] = None
    total_attempts: int
    passed_attempts: int
    average_score: float
