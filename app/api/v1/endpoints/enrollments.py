"""
Enrollment & Rating Endpoints

Endpoints:
----------
- POST /courses/{course_id}/enroll      - Enroll in a course
- POST /courses/{course_id}/complete    - Mark the course complete
- GET  /enrollments                     - The caller's enrollments
- POST /content-items/{content_item_id}/complete - Mark a content item complete
- GET  /courses/{course_id}/progress    - The caller's completed content items
- POST /courses/{course_id}/rating      - Rate a course
- PUT  /courses/{course_id}/rating      - Edit your rating
- GET  /courses/{course_id}/rating      - Average rating and count
"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.database import get_db
from app.api.deps import get_current_active_user
from app.models.user import User
from app.schemas.course import (
    EnrollmentResponse,
    ProgressResponse,
    RatingRequest,
    RatingResponse,
    RatingSummaryResponse,
)
from app.services.enrollment_service import EnrollmentService
from app.services.rating_service import RatingService

router = APIRouter(tags=["Enrollments"])


def get_enrollment_service(db: AsyncSession = Depends(get_db)) -> EnrollmentService:
    return EnrollmentService(db)


def get_rating_service(db: AsyncSession = Depends(get_db)) -> RatingService:
    return RatingService(db)


# ============================================================
# ENROLLMENT
# ============================================================

@router.post("/courses/{course_id}/enroll", response_model=EnrollmentResponse)
async def enroll(
    course_id: UUID,
    current_user: User = Depends(get_current_active_user),
    service: EnrollmentService = Depends(get_enrollment_service),
):
    return await service.enroll(current_user.id, course_id)


@router.post("/courses/{course_id}/complete", response_model=Optional[EnrollmentResponse])
async def mark_complete(
    course_id: UUID,
    current_user: User = Depends(get_current_active_user),
    service: EnrollmentService = Depends(get_enrollment_service),
):
    """Returns null when the caller is not enrolled."""
    return await service.mark_complete(current_user.id, course_id)


@router.get("/enrollments", response_model=List[EnrollmentResponse])
async def list_enrollments(
    current_user: User = Depends(get_current_active_user),
    service: EnrollmentService = Depends(get_enrollment_service),
):
    return await service.list_for_user(current_user.id)


# ============================================================
# CONTENT PROGRESS
# ============================================================

@router.post("/content-items/{content_item_id}/complete", response_model=ProgressResponse)
async def complete_content_item(
    content_item_id: UUID,
    current_user: User = Depends(get_current_active_user),
    service: EnrollmentService = Depends(get_enrollment_service),
):
    return await service.complete_content_item(current_user.id, content_item_id)


@router.get("/courses/{course_id}/progress", response_model=List[ProgressResponse])
async def list_progress(
    course_id: UUID,
    current_user: User = Depends(get_current_active_user),
    service: EnrollmentService = Depends(get_enrollment_service),
):
    return await service.list_progress(current_user.id, course_id)


# ============================================================
# RATINGS
# ============================================================

@router.post(
    "/courses/{course_id}/rating",
    response_model=RatingResponse,
    status_code=status.HTTP_201_CREATED,
)
async def rate_course(
    course_id: UUID,
    data: RatingRequest,
    current_user: User = Depends(get_current_active_user),
    service: RatingService = Depends(get_rating_service),
):
    return await service.rate(current_user.id, course_id, data)


@router.put("/courses/{course_id}/rating", response_model=RatingResponse)
async def update_rating(
    course_id: UUID,
    data: RatingRequest,
    current_user: User = Depends(get_current_active_user),
    service: RatingService = Depends(get_rating_service),
):
    return await service.update_rating(current_user.id, course_id, data)


@router.get("/courses/{course_id}/rating", response_model=RatingSummaryResponse)
async def rating_summary(
    course_id: UUID,
    current_user: User = Depends(get_current_active_user),
    service: RatingService = Depends(get_rating_service),
):
    return await service.get_summary(course_id)
