"""
Quiz Attempt Service

The attempt lifecycle: NotStarted -> InProgress -> Completed.

Time limits are enforced lazily. Nothing runs in the background; an
in-progress attempt whose time is up is finalized the next time it is
touched (take, continue or results), with its score left as it was.

The caller's identity is always passed in explicitly, and "now" comes
from an injectable clock.
"""

import logging
from datetime import datetime
from typing import Any, Callable, List, Mapping, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError, ForbiddenError, ValidationFailedError
from app.models.base import utcnow
from app.models.quiz import Quiz
from app.models.quiz_attempt import QuizAttempt
from app.repositories.quiz_repo import (
    QuizRepository,
    QuizAttemptRepository,
    QuizAttemptAnswerRepository,
)
from app.schemas.quiz import (
    AttemptRoute,
    AttemptFlowResponse,
    AttemptSessionResponse,
    AttemptSummaryResponse,
    AttemptResultResponse,
    AnswerDetailResponse,
    QuestionPublicResponse,
    QuestionResponse,
    QuizResponse,
    QuizResultsResponse,
)
from app.services.enrollment_service import EnrollmentService
from app.services.grading import (
    grade_answer,
    percentage_score,
    is_passed,
    is_expired,
    time_remaining_minutes,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

MAX_ATTEMPTS_MESSAGE = "You have exceeded the maximum number of attempts for this quiz."
PREVIOUS_ATTEMPT_EXPIRED_MESSAGE = "Time limit exceeded for your previous attempt."
ATTEMPT_EXPIRED_MESSAGE = "Time limit exceeded."
ALREADY_SUBMITTED_MESSAGE = "This attempt has already been submitted."


class QuizAttemptService:
    """Service for taking, resuming, submitting and reviewing quiz attempts."""

    def __init__(self, db: AsyncSession, clock: Clock = utcnow):
        self.db = db
        self.clock = clock
        self.quiz_repo = QuizRepository(db)
        self.attempt_repo = QuizAttemptRepository(db)
        self.answer_repo = QuizAttemptAnswerRepository(db)
        self.enrollment_service = EnrollmentService(db)

    # ============================================================
    # TAKE (start or resume)
    # ============================================================

    async def take_quiz(self, user_id: UUID, quiz_id: UUID) -> AttemptFlowResponse:
        quiz = await self.quiz_repo.get_full(quiz_id)
        if not quiz or not quiz.is_active:
            raise NotFoundError("Quiz not found")

        await self._ensure_enrolled(user_id, quiz)

        attempt_count = await self.attempt_repo.count_user_attempts(user_id, quiz_id)
        if attempt_count >= quiz.max_attempts:
            return AttemptFlowResponse(
                route=AttemptRoute.RESULTS,
                quiz_id=quiz_id,
                message=MAX_ATTEMPTS_MESSAGE,
            )

        now = self.clock()
        in_progress = await self.attempt_repo.get_incomplete(user_id, quiz_id)
        if in_progress:
            if is_expired(in_progress.started_at, now, quiz.time_limit_minutes):
                await self._expire(in_progress, now)
                return AttemptFlowResponse(
                    route=AttemptRoute.RESULTS,
                    quiz_id=quiz_id,
                    attempt_id=in_progress.id,
                    message=PREVIOUS_ATTEMPT_EXPIRED_MESSAGE,
                )
            return self._continue_flow(quiz, in_progress, now)

        attempt = await self.attempt_repo.create(
            user_id=user_id,
            quiz_id=quiz_id,
            started_at=now,
            score=0,
            total_points=sum(q.points for q in quiz.questions),
            attempt_number=attempt_count + 1,
            is_completed=False,
        )
        logger.info(
            f"Attempt {attempt.id} started: user={user_id} quiz={quiz_id} "
            f"number={attempt.attempt_number}/{quiz.max_attempts}"
        )
        return self._continue_flow(quiz, attempt, now)

    # ============================================================
    # CONTINUE
    # ============================================================

    async def continue_attempt(self, user_id: UUID, attempt_id: UUID) -> AttemptFlowResponse:
        attempt = await self._get_owned_attempt(user_id, attempt_id)
        quiz = attempt.quiz

        if attempt.is_completed:
            return AttemptFlowResponse(
                route=AttemptRoute.RESULTS,
                quiz_id=quiz.id,
                attempt_id=attempt.id,
                attempt=self._summarize(attempt, quiz),
            )

        now = self.clock()
        if is_expired(attempt.started_at, now, quiz.time_limit_minutes):
            await self._expire(attempt, now)
            return AttemptFlowResponse(
                route=AttemptRoute.RESULTS,
                quiz_id=quiz.id,
                attempt_id=attempt.id,
                message=ATTEMPT_EXPIRED_MESSAGE,
                attempt=self._summarize(attempt, quiz),
            )

        return self._continue_flow(quiz, attempt, now)

    # ============================================================
    # SUBMIT
    # ============================================================

    async def submit_attempt(
        self,
        user_id: UUID,
        attempt_id: UUID,
        answers: Mapping[Any, Any],
    ) -> AttemptFlowResponse:
        """
        Grade a full answer set and complete the attempt.

        Every question gets exactly one answer row, answered or not. The
        old answers, the new answers and the attempt's score are written
        in one transaction.
        """
        attempt = await self._get_owned_attempt(user_id, attempt_id)
        quiz = attempt.quiz

        if attempt.is_completed:
            raise ValidationFailedError(ALREADY_SUBMITTED_MESSAGE)

        submitted = {str(question_id): value for question_id, value in answers.items()}
        graded = []
        for question in quiz.questions:
            key = str(question.id)
            if key in submitted:
                graded.append(grade_answer(question, submitted[key]))
            else:
                graded.append(grade_answer(question))

        now = self.clock()
        try:
            await self.answer_repo.replace_for_attempt(
                attempt.id,
                [g.as_row() for g in graded],
            )
            attempt.score = sum(g.points_earned for g in graded)
            attempt.is_completed = True
            attempt.completed_at = now
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Grading attempt {attempt_id} failed: {e}")
            raise

        summary = self._summarize(attempt, quiz)
        logger.info(
            f"Attempt {attempt.id} graded: score={attempt.score}/{attempt.total_points} "
            f"passed={summary.is_passed}"
        )
        return AttemptFlowResponse(
            route=AttemptRoute.RESULTS,
            quiz_id=quiz.id,
            attempt_id=attempt.id,
            attempt=summary,
        )

    # ============================================================
    # RESULTS
    # ============================================================

    async def get_results(self, user_id: UUID, quiz_id: UUID) -> QuizResultsResponse:
        quiz = await self.quiz_repo.get_with_course(quiz_id)
        if not quiz:
            raise NotFoundError("Quiz not found")

        await self._ensure_enrolled(user_id, quiz)

        now = self.clock()
        in_progress = await self.attempt_repo.get_incomplete(user_id, quiz_id)
        if in_progress and is_expired(in_progress.started_at, now, quiz.time_limit_minutes):
            await self._expire(in_progress, now)

        attempts = await self.attempt_repo.get_user_attempts_with_answers(user_id, quiz_id)
        results = [self._build_attempt_result(a, quiz) for a in attempts]

        # Most recent first, so the first maximum wins ties. Compare the
        # unrounded percentage; rounding can make distinct scores equal.
        best_attempt: Optional[AttemptResultResponse] = None
        best_percentage = -1.0
        for attempt, result in zip(attempts, results):
            percentage = percentage_score(attempt.score, attempt.total_points)
            if percentage > best_percentage:
                best_attempt, best_percentage = result, percentage

        completed = [r for r in results if r.is_completed]
        average_score = (
            sum(r.percentage_score for r in completed) / len(completed) if completed else 0.0
        )

        return QuizResultsResponse(
            quiz=QuizResponse.model_validate(quiz),
            attempts=results,
            best_attempt=best_attempt,
            total_attempts=len(results),
            passed_attempts=sum(1 for r in completed if r.is_passed),
            average_score=round(average_score, 2),
        )

    # ============================================================
    # Helpers
    # ============================================================

    async def _ensure_enrolled(self, user_id: UUID, quiz: Quiz) -> None:
        course = quiz.content_item.topic.course
        if not await self.enrollment_service.is_enrolled(user_id, course.id):
            logger.warning(f"User {user_id} not enrolled in course {course.id} for quiz {quiz.id}")
            raise ForbiddenError("You must be enrolled in this course to access its quizzes")

    async def _get_owned_attempt(self, user_id: UUID, attempt_id: UUID) -> QuizAttempt:
        attempt = await self.attempt_repo.get_with_quiz(attempt_id)
        if not attempt:
            raise NotFoundError("Attempt not found")
        if attempt.user_id != user_id:
            logger.warning(f"User {user_id} refused access to attempt {attempt_id}")
            raise ForbiddenError("This attempt belongs to another user")
        return attempt

    async def _expire(self, attempt: QuizAttempt, now: datetime) -> None:
        """Close an attempt whose time is up. The score is not touched."""
        attempt.is_completed = True
        attempt.completed_at = now
        await self.db.commit()
        logger.info(f"Attempt {attempt.id} expired with score={attempt.score}")

    def _continue_flow(self, quiz: Quiz, attempt: QuizAttempt, now: datetime) -> AttemptFlowResponse:
        remaining = time_remaining_minutes(attempt.started_at, now, quiz.time_limit_minutes)
        session = AttemptSessionResponse(
            attempt=self._summarize(attempt, quiz),
            quiz=QuizResponse.model_validate(quiz),
            questions=[QuestionPublicResponse.model_validate(q) for q in quiz.questions],
            time_remaining_minutes=remaining,
        )
        return AttemptFlowResponse(
            route=AttemptRoute.CONTINUE,
            quiz_id=quiz.id,
            attempt_id=attempt.id,
            time_remaining_minutes=remaining,
            session=session,
        )

    def _summarize(self, attempt: QuizAttempt, quiz: Quiz) -> AttemptSummaryResponse:
        percentage = percentage_score(attempt.score, attempt.total_points)
        return AttemptSummaryResponse(
            id=attempt.id,
            quiz_id=attempt.quiz_id,
            attempt_number=attempt.attempt_number,
            started_at=attempt.started_at,
            completed_at=attempt.completed_at,
            score=attempt.score,
            total_points=attempt.total_points,
            percentage_score=round(percentage, 2),
            is_passed=is_passed(percentage, quiz.passing_score),
            is_completed=attempt.is_completed,
        )

    def _build_attempt_result(self, attempt: QuizAttempt, quiz: Quiz) -> AttemptResultResponse:
        # Answers to since-deleted questions have no question and sort last
        ordered = sorted(
            attempt.answers,
            key=lambda a: (a.question is None, a.question.order if a.question else 0),
        )
        answers: List[AnswerDetailResponse] = [
            AnswerDetailResponse(
                question=QuestionResponse.model_validate(a.question) if a.question else None,
                answer_text=a.answer_text,
                selected_option_id=a.selected_option_id,
                boolean_answer=a.boolean_answer,
                points_earned=a.points_earned,
                is_correct=a.is_correct,
            )
            for a in ordered
        ]
        return AttemptResultResponse(
            **self._summarize(attempt, quiz).model_dump(),
            answers=answers,
        )
