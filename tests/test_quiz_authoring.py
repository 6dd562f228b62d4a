"""Quiz authoring: who may build quizzes, and how edits land."""

import uuid

import pytest
from sqlalchemy import delete, select, update

from app.core.exceptions import (
    ConcurrencyConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationFailedError,
)
from app.models.quiz import Quiz
from app.models.quiz_question import QuestionType, QuizQuestionOption
from app.schemas.course import ContentItemCreate
from app.schemas.quiz import (
    OptionCreate,
    OptionUpdate,
    QuestionCreate,
    QuestionUpdate,
    QuizCreate,
    QuizUpdate,
)
from app.repositories.quiz_repo import QuizAttemptAnswerRepository, QuizAttemptRepository
from app.services.catalog_service import CatalogService
from app.services.quiz_attempt_service import QuizAttemptService
from app.services.quiz_authoring_service import QuizAuthoringService

from helpers import correct_option


@pytest.fixture
def new_quiz(content_item):
    return QuizCreate(title="  Warm-up  ", content_item_id=content_item.id)


# ============================================================
# Create
# ============================================================

@pytest.mark.asyncio
async def test_instructor_of_record_creates_quiz_with_defaults(db, instructor, new_quiz):
    quiz = await QuizAuthoringService(db).create_quiz(instructor, new_quiz)

    assert quiz.title == "Warm-up"
    assert quiz.time_limit_minutes == 30
    assert quiz.passing_score == 70
    assert quiz.max_attempts == 3
    assert quiz.is_active is True
    assert quiz.questions == []


@pytest.mark.asyncio
async def test_admin_creates_quiz_on_any_course(db, admin, new_quiz):
    quiz = await QuizAuthoringService(db).create_quiz(admin, new_quiz)

    assert quiz.content_item_id == new_quiz.content_item_id


@pytest.mark.asyncio
async def test_other_instructor_cannot_create_quiz(db, other_instructor, new_quiz):
    with pytest.raises(ForbiddenError):
        await QuizAuthoringService(db).create_quiz(other_instructor, new_quiz)


@pytest.mark.asyncio
async def test_create_quiz_for_missing_content_item(db, admin):
    data = QuizCreate(title="Orphan", content_item_id=uuid.uuid4())

    with pytest.raises(NotFoundError):
        await QuizAuthoringService(db).create_quiz(admin, data)


@pytest.mark.asyncio
async def test_one_quiz_per_content_item(db, instructor, quiz, content_item):
    data = QuizCreate(title="Second try", content_item_id=content_item.id)

    with pytest.raises(ValidationFailedError, match="A quiz already exists for this content item."):
        await QuizAuthoringService(db).create_quiz(instructor, data)


@pytest.mark.asyncio
async def test_create_quiz_rejects_out_of_range_settings(content_item):
    from pydantic import ValidationError

    with pytest.raises(ValidationError):
        QuizCreate(title="Too long", content_item_id=content_item.id, time_limit_minutes=181)
    with pytest.raises(ValidationError):
        QuizCreate(title="Too strict", content_item_id=content_item.id, passing_score=0)
    with pytest.raises(ValidationError):
        QuizCreate(title="Too many", content_item_id=content_item.id, max_attempts=11)


# ============================================================
# Edit
# ============================================================

@pytest.mark.asyncio
async def test_edit_view_orders_questions_and_options(db, instructor, quiz):
    quiz = await QuizAuthoringService(db).get_quiz_for_edit(instructor, quiz.id)

    assert [q.order for q in quiz.questions] == [1, 2]
    assert [o.order for o in quiz.questions[1].options] == [1, 2]


@pytest.mark.asyncio
async def test_other_instructor_cannot_open_editor(db, other_instructor, quiz):
    with pytest.raises(ForbiddenError):
        await QuizAuthoringService(db).get_quiz_for_edit(other_instructor, quiz.id)


@pytest.mark.asyncio
async def test_update_quiz_changes_only_given_fields(db, instructor, quiz):
    updated = await QuizAuthoringService(db).update_quiz(
        instructor, quiz.id, QuizUpdate(passing_score=80, max_attempts=5)
    )

    assert updated.passing_score == 80
    assert updated.max_attempts == 5
    assert updated.title == "Linear equations checkpoint"
    assert updated.version_id == 2


def test_edits_reject_null_for_required_fields():
    from pydantic import ValidationError

    with pytest.raises(ValidationError, match="cannot be null"):
        QuizUpdate.model_validate({"title": None})
    with pytest.raises(ValidationError, match="cannot be null"):
        QuizUpdate.model_validate({"passing_score": None})
    with pytest.raises(ValidationError, match="cannot be null"):
        QuestionUpdate.model_validate({"points": None})
    with pytest.raises(ValidationError, match="cannot be null"):
        OptionUpdate.model_validate({"is_correct": None})


def test_omitted_fields_are_not_edits():
    assert QuizUpdate.model_validate({}).model_dump(exclude_unset=True) == {}
    assert QuestionUpdate.model_validate({"order": 2}).model_dump(exclude_unset=True) == {"order": 2}


@pytest.mark.asyncio
async def test_update_quiz_conflicts_with_concurrent_edit(db, instructor, quiz):
    quiz_id = quiz.id
    service = QuizAuthoringService(db)
    read = service.quiz_repo.get_with_course

    async def read_then_someone_else_edits(target_id):
        found = await read(target_id)
        await db.execute(
            update(Quiz)
            .where(Quiz.id == target_id)
            .values(title="Edited elsewhere", version_id=Quiz.version_id + 1)
            .execution_options(synchronize_session=False)
        )
        await db.commit()
        return found

    service.quiz_repo.get_with_course = read_then_someone_else_edits

    with pytest.raises(ConcurrencyConflictError):
        await service.update_quiz(instructor, quiz_id, QuizUpdate(title="Mine"))

    stored = await service.quiz_repo.get_full(quiz_id)
    assert stored.title == "Edited elsewhere"


@pytest.mark.asyncio
async def test_update_quiz_deleted_concurrently_is_not_found(db, instructor, quiz):
    quiz_id = quiz.id
    service = QuizAuthoringService(db)
    read = service.quiz_repo.get_with_course

    async def read_then_someone_else_deletes(target_id):
        found = await read(target_id)
        await db.execute(
            delete(Quiz)
            .where(Quiz.id == target_id)
            .execution_options(synchronize_session=False)
        )
        await db.commit()
        return found

    service.quiz_repo.get_with_course = read_then_someone_else_deletes

    with pytest.raises(NotFoundError):
        await service.update_quiz(instructor, quiz_id, QuizUpdate(title="Mine"))


@pytest.mark.asyncio
async def test_update_missing_quiz(db, admin):
    with pytest.raises(NotFoundError):
        await QuizAuthoringService(db).update_quiz(admin, uuid.uuid4(), QuizUpdate(title="x"))


# ============================================================
# Questions & options
# ============================================================

@pytest.mark.asyncio
async def test_add_true_false_question(db, instructor, quiz):
    question = await QuizAuthoringService(db).add_question(
        instructor,
        quiz.id,
        QuestionCreate(
            question_text="A line has constant slope",
            question_type=QuestionType.TRUE_FALSE,
            points=2,
            order=3,
            options=[
                OptionCreate(option_text="True", is_correct=True, order=1),
                OptionCreate(option_text="False", order=2),
            ],
        ),
    )

    assert question.quiz_id == quiz.id
    assert question.question_type == QuestionType.TRUE_FALSE
    assert [o.option_text for o in question.options] == ["True", "False"]


def test_question_points_are_bounded():
    from pydantic import ValidationError

    with pytest.raises(ValidationError):
        QuestionCreate(question_text="Too valuable", points=11)
    with pytest.raises(ValidationError):
        QuestionCreate(question_text="Worthless", points=0)


@pytest.mark.asyncio
async def test_other_instructor_cannot_add_question(db, other_instructor, quiz):
    with pytest.raises(ForbiddenError):
        await QuizAuthoringService(db).add_question(
            other_instructor, quiz.id, QuestionCreate(question_text="Sneaky")
        )


@pytest.mark.asyncio
async def test_update_question(db, instructor, quiz):
    question_id = quiz.questions[0].id

    question = await QuizAuthoringService(db).update_question(
        instructor, question_id, QuestionUpdate(points=5, question_text="Solve x + 3 = 7")
    )

    assert question.points == 5
    assert question.question_text == "Solve x + 3 = 7"
    assert len(question.options) == 2


@pytest.mark.asyncio
async def test_delete_question_removes_its_options(db, instructor, quiz):
    question_id = quiz.questions[0].id
    service = QuizAuthoringService(db)

    assert await service.delete_question(instructor, question_id) is True

    remaining = await service.get_quiz_for_edit(instructor, quiz.id)
    assert [q.question_text for q in remaining.questions] == ["Solve 3x = 9"]
    orphaned = await db.execute(
        select(QuizQuestionOption).where(QuizQuestionOption.quiz_question_id == question_id)
    )
    assert orphaned.scalars().all() == []


@pytest.mark.asyncio
async def test_delete_question_keeps_graded_answers(db, clock, instructor, quiz, enrolled_student):
    attempts = QuizAttemptService(db, clock=clock)
    flow = await attempts.take_quiz(enrolled_student.id, quiz.id)
    await attempts.submit_attempt(
        enrolled_student.id,
        flow.attempt_id,
        {str(q.id): str(correct_option(q).id) for q in quiz.questions},
    )
    question_id = quiz.questions[0].id

    await QuizAuthoringService(db).delete_question(instructor, question_id)

    answers = await QuizAttemptAnswerRepository(db).get_by_attempt(flow.attempt_id)
    attempt = await QuizAttemptRepository(db).get_by_id(flow.attempt_id)
    assert len(answers) == 2
    assert attempt.score == sum(a.points_earned for a in answers) == 20
    assert question_id not in {a.quiz_question_id for a in answers}

    results = await attempts.get_results(enrolled_student.id, quiz.id)
    shown = results.attempts[0].answers
    assert [a.question.question_text if a.question else None for a in shown] == ["Solve 3x = 9", None]
    assert sum(a.points_earned for a in shown) == results.attempts[0].score


@pytest.mark.asyncio
async def test_option_lifecycle(db, instructor, quiz):
    service = QuizAuthoringService(db)
    question_id = quiz.questions[0].id

    option = await service.add_option(instructor, question_id, OptionCreate(option_text="x = 2", order=3))
    assert option.is_correct is False

    option = await service.update_option(instructor, option.id, OptionUpdate(option_text="x = -2"))
    assert option.option_text == "x = -2"

    assert await service.delete_option(instructor, option.id) is True
    question = await service.question_repo.get_with_options(question_id)
    assert [o.option_text for o in question.options] == ["x = 4", "x = 8"]


@pytest.mark.asyncio
async def test_other_instructor_cannot_touch_options(db, other_instructor, quiz):
    option_id = quiz.questions[0].options[0].id

    with pytest.raises(ForbiddenError):
        await QuizAuthoringService(db).update_option(
            other_instructor, option_id, OptionUpdate(is_correct=False)
        )
    with pytest.raises(ForbiddenError):
        await QuizAuthoringService(db).delete_option(other_instructor, option_id)


@pytest.mark.asyncio
async def test_missing_question_and_option(db, admin):
    service = QuizAuthoringService(db)

    with pytest.raises(NotFoundError):
        await service.update_question(admin, uuid.uuid4(), QuestionUpdate(points=2))
    with pytest.raises(NotFoundError):
        await service.delete_option(admin, uuid.uuid4())


# ============================================================
# Catalog authorization shared with authoring
# ============================================================

@pytest.mark.asyncio
async def test_other_instructor_cannot_add_content(db, other_instructor, topic):
    with pytest.raises(ForbiddenError):
        await CatalogService(db).create_content_item(
            other_instructor, topic.id, ContentItemCreate(title="Not mine")
        )
