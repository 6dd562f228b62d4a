"""
Rating Service
Business logic for course ratings. One rating per user per course.
"""

from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError, ValidationFailedError
from app.models.course_rating import CourseRating
from app.repositories.course_repo import CourseRepository
from app.repositories.enrollment_repo import CourseRatingRepository
from app.schemas.course import RatingRequest, RatingSummaryResponse


class RatingService:
    """Service class for course ratings."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.rating_repo = CourseRatingRepository(db)
        self.course_repo = CourseRepository(db)

    async def rate(self, user_id: UUID, course_id: UUID, data: RatingRequest) -> CourseRating:
        """
        Rate a course for the first time.

        Raises:
            NotFoundError: If the course does not exist
            ValidationFailedError: If the user already rated this course
        """
        if not await self.course_repo.exists(course_id):
            raise NotFoundError("Course not found")

        existing = await self.rating_repo.get_for_user_course(user_id, course_id)
        if existing:
            raise ValidationFailedError("You have already rated this course. Edit your rating instead.")

        return await self.rating_repo.create(
            user_id=user_id,
            course_id=course_id,
            rating=data.rating,
            feedback=data.feedback,
        )

    async def update_rating(self, user_id: UUID, course_id: UUID, data: RatingRequest) -> CourseRating:
        existing = await self.rating_repo.get_for_user_course(user_id, course_id)
        if not existing:
            raise NotFoundError("Rating not found")

        return await self.rating_repo.update(
            existing.id,
            rating=data.rating,
            feedback=data.feedback,
        )

    async def get_summary(self, course_id: UUID) -> RatingSummaryResponse:
        if not await self.course_repo.exists(course_id):
            raise NotFoundError("Course not found")

        average, count = await self.rating_repo.summary_for_course(course_id)
        return RatingSummaryResponse(course_id=course_id, average=round(average, 2), count=count)
