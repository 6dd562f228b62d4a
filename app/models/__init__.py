from app.models.base import Base
from app.models.user import User
from app.models.user_role import UserRole, RoleName
from app.models.course import Course, CourseLevel
from app.models.topic import Topic
from app.models.content_item import ContentItem, ContentType
from app.models.enrollment import Enrollment
from app.models.progress import Progress, ProgressStatus
from app.models.course_rating import CourseRating
from app.models.quiz import Quiz
from app.models.quiz_question import QuizQuestion, QuizQuestionOption, QuestionType
from app.models.quiz_attempt import QuizAttempt
from app.models.quiz_attempt_answer import QuizAttemptAnswer
from app.models.role_request import RoleRequest, RoleRequestStatus

__all__ = [
    "Base",
    "User",
    "UserRole",
    "RoleName",
    "Course",
    "CourseLevel",
    "Topic",
    "ContentItem",
    "ContentType",
    "Enrollment",
    "Progress",
    "ProgressStatus",
    "CourseRating",
    "Quiz",
    "QuizQuestion",
    "QuizQuestionOption",
    "QuestionType",
    "QuizAttempt",
    "QuizAttemptAnswer",
    "RoleRequest",
    "RoleRequestStatus",
]
