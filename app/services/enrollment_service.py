"""
Enrollment Service

Which user is enrolled in which course and how far they got through
its content. The quiz engine only ever calls is_enrolled().
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError, ForbiddenError
from app.models.enrollment import Enrollment
from app.models.progress import Progress, ProgressStatus
from app.repositories.course_repo import CourseRepository, ContentItemRepository
from app.repositories.enrollment_repo import EnrollmentRepository, ProgressRepository

logger = logging.getLogger(__name__)


class EnrollmentService:
    """Service for course enrollment."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.enrollment_repo = EnrollmentRepository(db)
        self.course_repo = CourseRepository(db)
        self.content_item_repo = ContentItemRepository(db)
        self.progress_repo = ProgressRepository(db)

    async def enroll(self, user_id: UUID, course_id: UUID) -> Enrollment:
        """
        Enroll a user in a course.

        Enrolling twice returns the existing enrollment unchanged.
        """
        course = await self.course_repo.get_by_id(course_id)
        if not course:
            raise NotFoundError("Course not found")

        existing = await self.enrollment_repo.get_for_user_course(user_id, course_id)
        if existing:
            return existing

        enrollment = await self.enrollment_repo.create(
            user_id=user_id,
            course_id=course_id,
            enrolled_at=datetime.now(timezone.utc),
            is_completed=False,
        )
        logger.info(f"User {user_id} enrolled in course {course_id}")
        return enrollment

    async def is_enrolled(self, user_id: UUID, course_id: UUID) -> bool:
        return await self.enrollment_repo.is_enrolled(user_id, course_id)

    async def mark_complete(self, user_id: UUID, course_id: UUID) -> Optional[Enrollment]:
        """
        Mark the user's enrollment complete.

        Returns None, changing nothing, when the user is not enrolled.
        """
        enrollment = await self.enrollment_repo.get_for_user_course(user_id, course_id)
        if not enrollment:
            return None

        enrollment.is_completed = True
        enrollment.completed_at = datetime.now(timezone.utc)
        await self.db.commit()
        await self.db.refresh(enrollment)
        return enrollment

    async def list_for_user(self, user_id: UUID) -> List[Enrollment]:
        return await self.enrollment_repo.get_by_user(user_id)

    # ============================================================
    # Content progress
    # ============================================================

    async def complete_content_item(self, user_id: UUID, content_item_id: UUID) -> Progress:
        """
        Record that the user finished a content item.

        Only enrolled users can complete content. Completing an item again
        keeps the original completion time.
        """
        item = await self.content_item_repo.get_with_course(content_item_id)
        if not item:
            raise NotFoundError("Content item not found")

        course_id = item.topic.course_id
        if not await self.is_enrolled(user_id, course_id):
            logger.warning(f"User {user_id} not enrolled in course {course_id}, completion refused")
            raise ForbiddenError("You must be enrolled in this course to complete its content")

        progress = await self.progress_repo.get_for_user_item(user_id, content_item_id)
        if progress is None:
            progress = await self.progress_repo.create(
                user_id=user_id,
                course_id=course_id,
                topic_id=item.topic_id,
                content_item_id=content_item_id,
                status=ProgressStatus.COMPLETE,
                completed_at=datetime.now(timezone.utc),
            )
        elif progress.status != ProgressStatus.COMPLETE:
            progress.status = ProgressStatus.COMPLETE
            progress.completed_at = datetime.now(timezone.utc)
            await self.db.commit()
            await self.db.refresh(progress)

        logger.info(f"User {user_id} completed content item {content_item_id}")
        return progress

    async def list_progress(self, user_id: UUID, course_id: UUID) -> List[Progress]:
        course = await self.course_repo.get_by_id(course_id)
        if not course:
            raise NotFoundError("Course not found")
        return await self.progress_repo.get_for_user_course(user_id, course_id)
