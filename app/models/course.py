from sqlalchemy import Column, String, Integer, Boolean, Numeric, Enum
from sqlalchemy.orm import relationship
import enum
from .base import BaseModel


class CourseLevel(enum.Enum):
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"


class Course(BaseModel):
    __tablename__ = "courses"

    title = Column(String(150), nullable=False, index=True)
    description = Column(String(255), nullable=False)
    content_path = Column(String(255), nullable=False)

    # Instructor of record: the instructor's user id as a string
    instructor = Column(String(50), nullable=False, default="", index=True)

    duration_hours = Column(Integer, default=1, nullable=False)
    level = Column(
        Enum(
            CourseLevel,
            name="course_level",
            values_callable=lambda x: [e.value for e in x]
        ),
        default=CourseLevel.BEGINNER,
        nullable=False
    )
    price = Column(Numeric(10, 2), default=0, nullable=False)
    image_url = Column(String(200), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    topics = relationship("Topic", back_populates="course", cascade="all, delete-orphan", order_by="Topic.order")
    enrollments = relationship("Enrollment", back_populates="course", cascade="all, delete-orphan")
    ratings = relationship("CourseRating", back_populates="course", cascade="all, delete-orphan")
