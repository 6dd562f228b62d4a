"""
Grading

Pure scoring and timing rules for quiz attempts. Nothing here touches
the database; the attempt service feeds in loaded rows and persists
what comes back.

Each question type has exactly one grader, registered in GRADERS.
Adding a QuestionType without a grader fails at import time.
"""

import math
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from app.models.quiz_question import QuestionType, QuizQuestion

_MISSING = object()


@dataclass(frozen=True)
class GradedAnswer:
    """One answer row's worth of grading output."""
    quiz_question_id: uuid.UUID
    answer_text: Optional[str] = None
    selected_option_id: Optional[uuid.UUID] = None
    boolean_answer: Optional[bool] = None
    points_earned: int = 0
    is_correct: bool = False

    def as_row(self) -> dict:
        return {
            "quiz_question_id": self.quiz_question_id,
            "answer_text": self.answer_text,
            "selected_option_id": self.selected_option_id,
            "boolean_answer": self.boolean_answer,
            "points_earned": self.points_earned,
            "is_correct": self.is_correct,
        }


Grader = Callable[[QuizQuestion, Any], GradedAnswer]


# ============================================================
# Value parsing
# ============================================================

def parse_option_id(value: Any) -> Optional[uuid.UUID]:
    """Parse a submitted value as an option id, None if it is not one."""
    if isinstance(value, uuid.UUID):
        return value
    if value is None or isinstance(value, bool):
        return None
    try:
        return uuid.UUID(str(value).strip())
    except (ValueError, AttributeError):
        return None


def parse_boolean(value: Any) -> Optional[bool]:
    """Accept a real bool or a case-insensitive "true"/"false" string."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        text = value.strip().lower()
        if text == "true":
            return True
        if text == "false":
            return False
    return None


# ============================================================
# Graders, one per question type
# ============================================================

def grade_multiple_choice(question: QuizQuestion, value: Any) -> GradedAnswer:
    option_id = parse_option_id(value)
    selected = next((o for o in question.options if o.id == option_id), None)
    if selected is None:
        return GradedAnswer(quiz_question_id=question.id)

    if selected.is_correct:
        return GradedAnswer(
            quiz_question_id=question.id,
            selected_option_id=selected.id,
            points_earned=question.points,
            is_correct=True,
        )
    return GradedAnswer(quiz_question_id=question.id, selected_option_id=selected.id)


def grade_true_false(question: QuizQuestion, value: Any) -> GradedAnswer:
    answer = parse_boolean(value)
    if answer is None:
        return GradedAnswer(quiz_question_id=question.id)

    # Compared against the option text, so options must read "True"/"False"
    correct = next((o for o in question.options if o.is_correct), None)
    if correct is not None and correct.option_text.lower() == str(answer).lower():
        return GradedAnswer(
            quiz_question_id=question.id,
            boolean_answer=answer,
            points_earned=question.points,
            is_correct=True,
        )
    return GradedAnswer(quiz_question_id=question.id, boolean_answer=answer)


def grade_free_text(question: QuizQuestion, value: Any) -> GradedAnswer:
    # Needs manual grading, which this engine does not do
    text = value if isinstance(value, str) or value is None else str(value)
    return GradedAnswer(quiz_question_id=question.id, answer_text=text)


GRADERS: Dict[QuestionType, Grader] = {
    QuestionType.MULTIPLE_CHOICE: grade_multiple_choice,
    QuestionType.TRUE_FALSE: grade_true_false,
    QuestionType.SHORT_ANSWER: grade_free_text,
    QuestionType.ESSAY: grade_free_text,
}

_ungraded = set(QuestionType) - set(GRADERS)
if _ungraded:
    raise RuntimeError(f"No grader registered for question types: {sorted(t.value for t in _ungraded)}")


def grade_answer(question: QuizQuestion, value: Any = _MISSING) -> GradedAnswer:
    """
    Grade one question.

    A question with no submitted value still yields a zero-point row.
    """
    if value is _MISSING:
        return GradedAnswer(quiz_question_id=question.id)
    return GRADERS[question.question_type](question, value)


# ============================================================
# Scores
# ============================================================

def percentage_score(score: int, total_points: int) -> float:
    if not total_points:
        return 0.0
    return score / total_points * 100


def is_passed(percentage: float, passing_score: int) -> bool:
    return percentage >= passing_score


# ============================================================
# Time limits
# ============================================================

def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes (as some drivers return them) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def elapsed_minutes(started_at: datetime, now: datetime) -> float:
    return (as_utc(now) - as_utc(started_at)).total_seconds() / 60


def is_expired(started_at: datetime, now: datetime, time_limit_minutes: int) -> bool:
    return elapsed_minutes(started_at, now) > time_limit_minutes


def time_remaining_minutes(started_at: datetime, now: datetime, time_limit_minutes: int) -> int:
    """Whole minutes left; elapsed time is truncated before subtracting."""
    return time_limit_minutes - math.floor(elapsed_minutes(started_at, now))
