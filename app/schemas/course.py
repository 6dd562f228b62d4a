"""
Course Schemas

Pydantic models for the catalog, enrollments and course ratings.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional, List
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from app.models.course import CourseLevel
from app.models.content_item import ContentType
from app.models.progress import ProgressStatus


# ============================================================
# Course
# ============================================================

class CourseCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=150)
    description: str = Field(..., min_length=1, max_length=255)
    content_path: str = Field(..., min_length=1, max_length=255)
    instructor: str = Field(default="", max_length=50, description="Instructor's user id")
    duration_hours: int = Field(default=1, ge=1, le=100)
    level: CourseLevel = CourseLevel.BEGINNER
    price: Decimal = Field(default=Decimal("0.00"), ge=0, max_digits=10, decimal_places=2)
    image_url: Optional[str] = Field(None, max_length=200)


class CourseUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=150)
    description: Optional[str] = Field(None, min_length=1, max_length=255)
    content_path: Optional[str] = Field(None, min_length=1, max_length=255)
    instructor: Optional[str] = Field(None, max_length=50)
    duration_hours: Optional[int] = Field(None, ge=1, le=100)
    level: Optional[CourseLevel] = None
    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    image_url: Optional[str] = Field(None, max_length=200)
    is_active: Optional[bool] = None

    @field_validator(
        "title",
        "description",
        "content_path",
        "instructor",
        "duration_hours",
        "level",
        "price",
        "is_active",
    )
    @classmethod
    def reject_null(cls, v):
        # image_url is the only field that may be cleared
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class CourseResponse(BaseModel):
    id: UUID
    title: str
    description: str
    content_path: str
    instructor: str
    duration_hours: int
    level: CourseLevel
    price: Decimal
    image_url: Optional[str] = None
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


# ============================================================
# Topic & Content Item
# ============================================================

class TopicCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=150)
    description: str = Field(default="", max_length=500)
    order: int = Field(default=1, ge=0)


class ContentItemCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=150)
    description: str = Field(default="", max_length=500)
    order: int = Field(default=1, ge=0)
    content_type: ContentType = ContentType.TEXT
    content: str = ""
    video_url: Optional[str] = Field(None, max_length=500)
    pdf_file_path: Optional[str] = Field(None, max_length=500)


class TopicUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=150)
    description: Optional[str] = Field(None, max_length=500)
    order: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None

    @field_validator("title", "description", "order", "is_active")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class ContentItemUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=150)
    description: Optional[str] = Field(None, max_length=500)
    order: Optional[int] = Field(None, ge=0)
    content_type: Optional[ContentType] = None
    content: Optional[str] = None
    video_url: Optional[str] = Field(None, max_length=500)
    pdf_file_path: Optional[str] = Field(None, max_length=500)
    is_active: Optional[bool] = None

    @field_validator("title", "description", "order", "content_type", "content", "is_active")
    @classmethod
    def reject_null(cls, v):
        # video_url and pdf_file_path may be cleared with null
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class ContentItemResponse(BaseModel):
    id: UUID
    topic_id: UUID
    title: str
    description: str
    order: int
    content_type: ContentType
    content: str
    video_url: Optional[str] = None
    pdf_file_path: Optional[str] = None
    is_active: bool

    class Config:
        from_attributes = True


class TopicResponse(BaseModel):
    id: UUID
    course_id: UUID
    title: str
    description: str
    order: int
    is_active: bool

    class Config:
        from_attributes = True


class TopicOutlineResponse(TopicResponse):
    content_items: List[ContentItemResponse] = Field(default_factory=list)


class CourseOutlineResponse(CourseResponse):
    """Course with topics and content items in display order."""
    topics: List[TopicOutlineResponse] = Field(default_factory=list)


# ============================================================
# Enrollment
# ============================================================

class EnrollmentResponse(BaseModel):
    id: UUID
    user_id: UUID
    course_id: UUID
    enrolled_at: datetime
    is_completed: bool
    completed_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProgressResponse(BaseModel):
    """Completion record for one content item."""
    id: UUID
    user_id: UUID
    course_id: UUID
    topic_id: UUID
    content_item_id: UUID
    status: ProgressStatus
    completed_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# ============================================================
# Rating
# ============================================================

class RatingRequest(BaseModel):
    rating: int = Field(..., ge=1, le=5, description="Rating must be between 1 and 5")
    feedback: Optional[str] = Field(None, max_length=1000)


class RatingResponse(BaseModel):
    id: UUID
    user_id: UUID
    course_id: UUID
    rating: int
    feedback: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class RatingSummaryResponse(BaseModel):
    course_id: UUID
    average: float
    count: int
