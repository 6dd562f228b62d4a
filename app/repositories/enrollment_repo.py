"""
Enrollment Repository

Data access layer for Enrollment, CourseRating and Progress models.
"""

from typing import List, Optional, Tuple
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.orm import selectinload

from app.repositories.base import BaseRepository
from app.models.enrollment import Enrollment
from app.models.course_rating import CourseRating
from app.models.progress import Progress


class EnrollmentRepository(BaseRepository[Enrollment]):
    """Repository for Enrollment model."""

    def __init__(self, db: AsyncSession):
        super().__init__(Enrollment, db)

    async def get_for_user_course(self, user_id: UUID, course_id: UUID) -> Optional[Enrollment]:
        stmt = select(self.model).where(
            self.model.user_id == user_id,
            self.model.course_id == course_id,
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def is_enrolled(self, user_id: UUID, course_id: UUID) -> bool:
        stmt = select(func.count(self.model.id)).where(
            self.model.user_id == user_id,
            self.model.course_id == course_id,
        )
        result = await self.db.execute(stmt)
        return (result.scalar() or 0) > 0

    async def get_by_user(self, user_id: UUID) -> List[Enrollment]:
        stmt = (
            select(self.model)
            .options(selectinload(self.model.course))
            .where(self.model.user_id == user_id)
            .order_by(self.model.enrolled_at.desc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())


class CourseRatingRepository(BaseRepository[CourseRating]):
    """Repository for CourseRating model."""

    def __init__(self, db: AsyncSession):
        super().__init__(CourseRating, db)

    async def get_for_user_course(self, user_id: UUID, course_id: UUID) -> Optional[CourseRating]:
        stmt = select(self.model).where(
            self.model.user_id == user_id,
            self.model.course_id == course_id,
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def summary_for_course(self, course_id: UUID) -> Tuple[float, int]:
        """Return (average rating, rating count) for a course."""
        stmt = select(
            func.avg(self.model.rating),
            func.count(self.model.id),
        ).where(self.model.course_id == course_id)
        result = await self.db.execute(stmt)
        average, count = result.one()
        return float(average or 0), count or 0


class ProgressRepository(BaseRepository[Progress]):
    """Repository for Progress model."""

    def __init__(self, db: AsyncSession):
        super().__init__(Progress, db)

    async def get_for_user_item(self, user_id: UUID, content_item_id: UUID) -> Optional[Progress]:
        stmt = select(self.model).where(
            self.model.user_id == user_id,
            self.model.content_item_id == content_item_id,
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_for_user_course(self, user_id: UUID, course_id: UUID) -> List[Progress]:
        stmt = (
            select(self.model)
            .where(
                self.model.user_id == user_id,
                self.model.course_id == course_id,
            )
            .order_by(self.model.completed_at)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())
