from app.repositories.base import BaseRepository
from app.repositories.user_repo import UserRepository
from app.repositories.course_repo import CourseRepository, TopicRepository, ContentItemRepository
from app.repositories.enrollment_repo import (
    EnrollmentRepository,
    CourseRatingRepository,
    ProgressRepository,
)
from app.repositories.quiz_repo import (
    QuizRepository,
    QuizQuestionRepository,
    QuizQuestionOptionRepository,
    QuizAttemptRepository,
    QuizAttemptAnswerRepository,
)
from app.repositories.role_request_repo import RoleRequestRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "CourseRepository",
    "TopicRepository",
    "ContentItemRepository",
    "EnrollmentRepository",
    "CourseRatingRepository",
    "ProgressRepository",
    "QuizRepository",
    "QuizQuestionRepository",
    "QuizQuestionOptionRepository",
    "QuizAttemptRepository",
    "QuizAttemptAnswerRepository",
    "RoleRequestRepository",
]
