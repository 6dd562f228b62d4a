"""
Quiz Repository

Data access layer for Quiz, QuizQuestion, QuizQuestionOption,
QuizAttempt, and QuizAttemptAnswer models.
"""

from typing import List, Optional, Sequence
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, delete
from sqlalchemy.orm import selectinload

from app.repositories.base import BaseRepository
from app.models.quiz import Quiz
from app.models.quiz_question import QuizQuestion, QuizQuestionOption
from app.models.quiz_attempt import QuizAttempt
from app.models.quiz_attempt_answer import QuizAttemptAnswer
from app.models.content_item import ContentItem
from app.models.topic import Topic


def _quiz_course_path():
    """Loader path quiz -> content item -> topic -> course."""
    return (
        selectinload(Quiz.content_item)
        .selectinload(ContentItem.topic)
        .selectinload(Topic.course)
    )


def _quiz_questions_path():
    """Loader path quiz -> ordered questions -> ordered options."""
    return selectinload(Quiz.questions).selectinload(QuizQuestion.options)


class QuizRepository(BaseRepository[Quiz]):
    """Repository for Quiz model."""

    def __init__(self, db: AsyncSession):
        super().__init__(Quiz, db)

    async def get_by_content_item(self, content_item_id: UUID) -> Optional[Quiz]:
        stmt = (
            select(self.model)
            .where(self.model.content_item_id == content_item_id)
            .limit(1)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_with_course(self, quiz_id: UUID) -> Optional[Quiz]:
        stmt = (
            select(self.model)
            .options(_quiz_course_path())
            .where(self.model.id == quiz_id)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_full(self, quiz_id: UUID) -> Optional[Quiz]:
        """Quiz with its owning course and ordered questions/options."""
        stmt = (
            select(self.model)
            .options(_quiz_course_path(), _quiz_questions_path())
            .where(self.model.id == quiz_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()


class QuizQuestionRepository(BaseRepository[QuizQuestion]):
    """Repository for QuizQuestion model."""

    def __init__(self, db: AsyncSession):
        super().__init__(QuizQuestion, db)

    async def get_with_options(self, question_id: UUID) -> Optional[QuizQuestion]:
        stmt = (
            select(self.model)
            .options(selectinload(self.model.options))
            .where(self.model.id == question_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_quiz(self, quiz_id: UUID) -> List[QuizQuestion]:
        stmt = (
            select(self.model)
            .where(self.model.quiz_id == quiz_id)
            .order_by(self.model.order)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def total_points(self, quiz_id: UUID) -> int:
        stmt = (
            select(func.coalesce(func.sum(self.model.points), 0))
            .where(self.model.quiz_id == quiz_id)
        )
        result = await self.db.execute(stmt)
        return int(result.scalar() or 0)


class QuizQuestionOptionRepository(BaseRepository[QuizQuestionOption]):
    """Repository for QuizQuestionOption model."""

    def __init__(self, db: AsyncSession):
        super().__init__(QuizQuestionOption, db)


class QuizAttemptRepository(BaseRepository[QuizAttempt]):
    """Repository for QuizAttempt model."""

    def __init__(self, db: AsyncSession):
        super().__init__(QuizAttempt, db)

    async def count_user_attempts(self, user_id: UUID, quiz_id: UUID) -> int:
        """Completed and in-progress attempts alike."""
        stmt = (
            select(func.count(self.model.id))
            .where(
                self.model.user_id == user_id,
                self.model.quiz_id == quiz_id
            )
        )
        result = await self.db.execute(stmt)
        return result.scalar() or 0

    async def get_incomplete(self, user_id: UUID, quiz_id: UUID) -> Optional[QuizAttempt]:
        stmt = (
            select(self.model)
            .where(
                self.model.user_id == user_id,
                self.model.quiz_id == quiz_id,
                self.model.is_completed.is_(False)
            )
            .order_by(self.model.started_at.desc())
            .limit(1)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_with_quiz(self, attempt_id: UUID) -> Optional[QuizAttempt]:
        """Attempt with its quiz, ordered questions and ordered options."""
        stmt = (
            select(self.model)
            .options(
                selectinload(self.model.quiz)
                .selectinload(Quiz.questions)
                .selectinload(QuizQuestion.options)
            )
            .where(self.model.id == attempt_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_user_attempts_with_answers(
        self,
        user_id: UUID,
        quiz_id: UUID
    ) -> List[QuizAttempt]:
        """
        All of a user's attempts at a quiz, most recent first.

        attempt_number breaks ties between rows created in the same instant.
        """
        stmt = (
            select(self.model)
            .options(
                selectinload(self.model.answers)
                .selectinload(QuizAttemptAnswer.question)
                .selectinload(QuizQuestion.options)
            )
            .where(
                self.model.user_id == user_id,
                self.model.quiz_id == quiz_id
            )
            .order_by(self.model.created_at.desc(), self.model.attempt_number.desc())
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())


class QuizAttemptAnswerRepository(BaseRepository[QuizAttemptAnswer]):
    """Repository for QuizAttemptAnswer model."""

    def __init__(self, db: AsyncSession):
        super().__init__(QuizAttemptAnswer, db)

    async def replace_for_attempt(
        self,
        attempt_id: UUID,
        answers: Sequence[dict]
    ) -> List[QuizAttemptAnswer]:
        """
        Discard the attempt's stored answers and stage a new set.

        Only flushes; the caller owns the transaction so the delete,
        the inserts and any attempt update commit together.
        """
        await self.db.execute(
            delete(self.model).where(self.model.quiz_attempt_id == attempt_id)
        )

        instances = []
        for a_data in answers:
            instance = QuizAttemptAnswer(quiz_attempt_id=attempt_id, **a_data)
            self.db.add(instance)
            instances.append(instance)
        await self.db.flush()
        return instances

    async def get_by_attempt(self, attempt_id: UUID) -> List[QuizAttemptAnswer]:
        stmt = (
            select(self.model)
            .where(self.model.quiz_attempt_id == attempt_id)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())
