"""
Quiz Endpoints

HTTP API for quiz authoring, taking, and review.

Authoring (Admin or Instructor, and instructor of record):
----------
- POST   /quiz/create                              - Create the quiz for a content item
- GET    /quiz/edit/{quiz_id}                      - Quiz with questions and options
- PUT    /quiz/edit/{quiz_id}                      - Edit quiz settings
- POST   /quiz/edit/{quiz_id}/questions            - Add a question (with options)
- PUT    /quiz/questions/{question_id}             - Edit a question
- DELETE /quiz/questions/{question_id}             - Delete a question
- POST   /quiz/questions/{question_id}/options     - Add an option
- PUT    /quiz/options/{option_id}                 - Edit an option
- DELETE /quiz/options/{option_id}                 - Delete an option

Taking (enrolled users):
----------
- GET    /quiz/take/{quiz_id}                      - Start or resume an attempt
- GET    /quiz/continue/{attempt_id}               - Keep answering an attempt
- POST   /quiz/submit                              - Submit answers for grading
- GET    /quiz/results/{quiz_id}                   - All attempts and the best one
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.database import get_db
from app.api.deps import get_current_active_user, require_roles
from app.models.user import User
from app.models.user_role import RoleName
from app.schemas.quiz import (
    QuizCreate,
    QuizUpdate,
    QuestionCreate,
    QuestionUpdate,
    OptionCreate,
    OptionUpdate,
    QuizDetailResponse,
    QuestionResponse,
    OptionResponse,
    QuizSubmitRequest,
    AttemptFlowResponse,
    QuizResultsResponse,
)
from app.services.quiz_authoring_service import QuizAuthoringService
from app.services.quiz_attempt_service import QuizAttemptService

router = APIRouter(prefix="/quiz", tags=["Quizzes"])

quiz_authors = require_roles(RoleName.ADMIN.value, RoleName.INSTRUCTOR.value)


def get_authoring_service(db: AsyncSession = Depends(get_db)) -> QuizAuthoringService:
    return QuizAuthoringService(db)


def get_attempt_service(db: AsyncSession = Depends(get_db)) -> QuizAttemptService:
    return QuizAttemptService(db)


# ============================================================
# AUTHORING
# ============================================================

@router.post(
    "/create",
    response_model=QuizDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create the quiz for a content item",
)
async def create_quiz(
    data: QuizCreate,
    current_user: User = Depends(quiz_authors),
    service: QuizAuthoringService = Depends(get_authoring_service),
):
    return await service.create_quiz(current_user, data)


@router.get("/edit/{quiz_id}", response_model=QuizDetailResponse)
async def get_quiz_for_edit(
    quiz_id: UUID,
    current_user: User = Depends(quiz_authors),
    service: QuizAuthoringService = Depends(get_authoring_service),
):
    return await service.get_quiz_for_edit(current_user, quiz_id)


@router.put(
    "/edit/{quiz_id}",
    response_model=QuizDetailResponse,
    responses={409: {"description": "Quiz was modified concurrently"}},
)
async def update_quiz(
    quiz_id: UUID,
    data: QuizUpdate,
    current_user: User = Depends(quiz_authors),
    service: QuizAuthoringService = Depends(get_authoring_service),
):
    return await service.update_quiz(current_user, quiz_id, data)


@router.post(
    "/edit/{quiz_id}/questions",
    response_model=QuestionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_question(
    quiz_id: UUID,
    data: QuestionCreate,
    current_user: User = Depends(quiz_authors),
    service: QuizAuthoringService = Depends(get_authoring_service),
):
    return await service.add_question(current_user, quiz_id, data)


@router.put("/questions/{question_id}", response_model=QuestionResponse)
async def update_question(
    question_id: UUID,
    data: QuestionUpdate,
    current_user: User = Depends(quiz_authors),
    service: QuizAuthoringService = Depends(get_authoring_service),
):
    return await service.update_question(current_user, question_id, data)


@router.delete("/questions/{question_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_question(
    question_id: UUID,
    current_user: User = Depends(quiz_authors),
    service: QuizAuthoringService = Depends(get_authoring_service),
):
    await service.delete_question(current_user, question_id)


@router.post(
    "/questions/{question_id}/options",
    response_model=OptionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_option(
    question_id: UUID,
    data: OptionCreate,
    current_user: User = Depends(quiz_authors),
    service: QuizAuthoringService = Depends(get_authoring_service),
):
    return await service.add_option(current_user, question_id, data)


@router.put("/options/{option_id}", response_model=OptionResponse)
async def update_option(
    option_id: UUID,
    data: OptionUpdate,
    current_user: User = Depends(quiz_authors),
    service: QuizAuthoringService = Depends(get_authoring_service),
):
    return await service.update_option(current_user, option_id, data)


@router.delete("/options/{option_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_option(
    option_id: UUID,
    current_user: User = Depends(quiz_authors),
    service: QuizAuthoringService = Depends(get_authoring_service),
):
    await service.delete_option(current_user, option_id)


# ============================================================
# TAKING
# ============================================================

@router.get(
    "/take/{quiz_id}",
    response_model=AttemptFlowResponse,
    summary="Start or resume a quiz",
    description="""
    Starts a new attempt, resumes the one in progress, or routes to
    results when no attempts are left or the previous attempt ran out
    of time.
    """,
)
async def take_quiz(
    quiz_id: UUID,
    current_user: User = Depends(get_current_active_user),
    service: QuizAttemptService = Depends(get_attempt_service),
):
    return await service.take_quiz(current_user.id, quiz_id)


@router.get("/continue/{attempt_id}", response_model=AttemptFlowResponse)
async def continue_attempt(
    attempt_id: UUID,
    current_user: User = Depends(get_current_active_user),
    service: QuizAttemptService = Depends(get_attempt_service),
):
    return await service.continue_attempt(current_user.id, attempt_id)


@router.post("/submit", response_model=AttemptFlowResponse)
async def submit_attempt(
    request: QuizSubmitRequest,
    current_user: User = Depends(get_current_active_user),
    service: QuizAttemptService = Depends(get_attempt_service),
):
    return await service.submit_attempt(current_user.id, request.attempt_id, request.answers)


@router.get("/results/{quiz_id}", response_model=QuizResultsResponse)
async def get_results(
    quiz_id: UUID,
    current_user: User = Depends(get_current_active_user),
    service: QuizAttemptService = Depends(get_attempt_service),
):
    return await service.get_results(current_user.id, quiz_id)
