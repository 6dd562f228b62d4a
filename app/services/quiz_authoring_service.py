"""
Quiz Authoring Service

Create and edit quizzes, their questions and their options.

Every operation is limited to admins and to the instructor of record of
the course that owns the quiz (content item -> topic -> course). Edits
are free-form; nothing is locked once attempts exist.
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from app.core.exceptions import (
    NotFoundError,
    ForbiddenError,
    ValidationFailedError,
    ConcurrencyConflictError,
)
from app.models.base import utcnow
from app.models.user import User
from app.models.quiz import Quiz
from app.models.quiz_question import QuizQuestion, QuizQuestionOption
from app.repositories.quiz_repo import (
    QuizRepository,
    QuizQuestionRepository,
    QuizQuestionOptionRepository,
)
from app.schemas.quiz import (
    QuizCreate,
    QuizUpdate,
    QuestionCreate,
    QuestionUpdate,
    OptionCreate,
    OptionUpdate,
)
from app.services.catalog_service import CatalogService, can_manage_course

logger = logging.getLogger(__name__)


class QuizAuthoringService:
    """Service for building and editing quizzes."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.quiz_repo = QuizRepository(db)
        self.question_repo = QuizQuestionRepository(db)
        self.option_repo = QuizQuestionOptionRepository(db)
        self.catalog_service = CatalogService(db)

    # ============================================================
    # Authorization helpers
    # ============================================================

    async def _get_authorized_quiz(self, user: User, quiz_id: UUID) -> Quiz:
        quiz = await self.quiz_repo.get_with_course(quiz_id)
        if not quiz:
            raise NotFoundError("Quiz not found")

        course = quiz.content_item.topic.course
        if not can_manage_course(user, course):
            logger.warning(f"User {user.id} refused edit access to quiz {quiz_id}")
            raise ForbiddenError("You are not allowed to edit this quiz")
        return quiz

    async def _get_authorized_question(self, user: User, question_id: UUID) -> QuizQuestion:
        question = await self.question_repo.get_with_options(question_id)
        if not question:
            raise NotFoundError("Question not found")
        await self._get_authorized_quiz(user, question.quiz_id)
        return question

    async def _get_authorized_option(self, user: User, option_id: UUID) -> QuizQuestionOption:
        option = await self.option_repo.get_by_id(option_id)
        if not option:
            raise NotFoundError("Option not found")
        await self._get_authorized_question(user, option.quiz_question_id)
        return option

    # ============================================================
    # Quiz
    # ============================================================

    async def create_quiz(self, user: User, data: QuizCreate) -> Quiz:
        """
        Create the quiz for a content item.

        Raises:
            NotFoundError: content item missing
            ForbiddenError: caller is neither admin nor instructor of record
            ValidationFailedError: the content item already has a quiz
        """
        course = await self.catalog_service.resolve_course_for_content_item(data.content_item_id)
        if not can_manage_course(user, course):
            logger.warning(
                f"User {user.id} refused quiz creation on content item {data.content_item_id}"
            )
            raise ForbiddenError("You are not allowed to create quizzes for this course")

        existing = await self.quiz_repo.get_by_content_item(data.content_item_id)
        if existing:
            raise ValidationFailedError("A quiz already exists for this content item.")

        quiz = await self.quiz_repo.create(
            content_item_id=data.content_item_id,
            title=data.title,
            description=data.description,
            time_limit_minutes=data.time_limit_minutes,
            passing_score=data.passing_score,
            max_attempts=data.max_attempts,
            is_active=True,
        )
        logger.info(f"Quiz created: {quiz.id} for content item {data.content_item_id}")
        return await self.quiz_repo.get_full(quiz.id)

    async def get_quiz_for_edit(self, user: User, quiz_id: UUID) -> Quiz:
        await self._get_authorized_quiz(user, quiz_id)
        return await self.quiz_repo.get_full(quiz_id)

    async def update_quiz(self, user: User, quiz_id: UUID, data: QuizUpdate) -> Quiz:
        """
        Apply a free-form edit.

        A concurrent edit or delete between our read and our write shows up
        as a StaleDataError on the version column. If the quiz is gone it
        is reported as NotFound, otherwise as a conflict.
        """
        quiz = await self._get_authorized_quiz(user, quiz_id)

        update_data = data.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            setattr(quiz, field, value)
        quiz.updated_at = utcnow()

        try:
            await self.db.commit()
        except StaleDataError:
            await self.db.rollback()
            if not await self.quiz_repo.exists(quiz_id):
                raise NotFoundError("Quiz not found")
            logger.warning(f"Concurrent edit detected on quiz {quiz_id}")
            raise ConcurrencyConflictError(
                "The quiz was changed by someone else. Reload it and try again."
            )

        logger.info(f"Quiz updated: {quiz_id} fields={sorted(update_data)}")
        return await self.quiz_repo.get_full(quiz_id)

    # ============================================================
    # Questions
    # ============================================================

    async def add_question(self, user: User, quiz_id: UUID, data: QuestionCreate) -> QuizQuestion:
        await self._get_authorized_quiz(user, quiz_id)

        question = QuizQuestion(
            quiz_id=quiz_id,
            question_text=data.question_text,
            question_type=data.question_type,
            order=data.order,
            points=data.points,
            is_required=data.is_required,
        )
        question.options = [
            QuizQuestionOption(
                option_text=o.option_text,
                is_correct=o.is_correct,
                order=o.order,
            )
            for o in data.options
        ]
        self.db.add(question)
        await self.db.commit()

        return await self.question_repo.get_with_options(question.id)

    async def update_question(
        self,
        user: User,
        question_id: UUID,
        data: QuestionUpdate
    ) -> QuizQuestion:
        question = await self._get_authorized_question(user, question_id)

        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(question, field, value)
        await self.db.commit()

        return await self.question_repo.get_with_options(question_id)

    async def delete_question(self, user: User, question_id: UUID) -> bool:
        """Delete a question together with its options."""
        question = await self._get_authorized_question(user, question_id)
        await self.db.delete(question)
        await self.db.commit()
        return True

    # ============================================================
    # Options
    # ============================================================

    async def add_option(self, user: User, question_id: UUID, data: OptionCreate) -> QuizQuestionOption:
        await self._get_authorized_question(user, question_id)
        return await self.option_repo.create(
            quiz_question_id=question_id,
            option_text=data.option_text,
            is_correct=data.is_correct,
            order=data.order,
        )

    async def update_option(self, user: User, option_id: UUID, data: OptionUpdate) -> QuizQuestionOption:
        await self._get_authorized_option(user, option_id)
        return await self.option_repo.update(option_id, **data.model_dump(exclude_unset=True))

    async def delete_option(self, user: User, option_id: UUID) -> bool:
        await self._get_authorized_option(user, option_id)
        return await self.option_repo.delete(option_id)
