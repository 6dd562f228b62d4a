"""
Shared fixtures.

Every test gets a fresh in-memory SQLite database (aiosqlite, one
shared connection through StaticPool) with tables created from the
models' metadata.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("BOOTSTRAP_ADMIN_EMAIL", "admin@simplelms.org")

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.db.database import Base, get_db
from app.main import app
from app.models import RoleName
from app.schemas.course import CourseCreate, TopicCreate, ContentItemCreate
from app.schemas.quiz import QuizCreate, QuestionCreate, OptionCreate
from app.services.catalog_service import CatalogService
from app.services.enrollment_service import EnrollmentService
from app.services.quiz_authoring_service import QuizAuthoringService

from helpers import FakeClock, make_user


# ============================================================
# Database
# ============================================================

@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def clock():
    return FakeClock()


# ============================================================
# Users
# ============================================================

@pytest_asyncio.fixture
async def admin(db):
    return await make_user(db, "root@simplelms.org", RoleName.ADMIN)


@pytest_asyncio.fixture
async def instructor(db):
    return await make_user(db, "teacher@simplelms.org", RoleName.INSTRUCTOR)


@pytest_asyncio.fixture
async def other_instructor(db):
    return await make_user(db, "visiting@simplelms.org", RoleName.INSTRUCTOR)


@pytest_asyncio.fixture
async def student(db):
    return await make_user(db, "learner@simplelms.org")


# ============================================================
# Catalog
# ============================================================

@pytest_asyncio.fixture
async def course(db, admin, instructor):
    return await CatalogService(db).create_course(
        admin,
        CourseCreate(
            title="Intro to Algebra",
            description="Equations, variables and functions",
            content_path="courses/intro-algebra",
            instructor=str(instructor.id),
            duration_hours=12,
        ),
    )


@pytest_asyncio.fixture
async def topic(db, admin, course):
    return await CatalogService(db).create_topic(
        admin, course.id, TopicCreate(title="Linear equations", order=1)
    )


@pytest_asyncio.fixture
async def content_item(db, admin, topic):
    return await CatalogService(db).create_content_item(
        admin, topic.id, ContentItemCreate(title="Checkpoint quiz", order=1)
    )


@pytest_asyncio.fixture
async def enrolled_student(db, student, course):
    await EnrollmentService(db).enroll(student.id, course.id)
    return student


# ============================================================
# Quiz
# ============================================================

@pytest_asyncio.fixture
async def quiz(db, instructor, content_item):
    """Two multiple choice questions worth 10 points each, 10 minute limit."""
    service = QuizAuthoringService(db)
    created = await service.create_quiz(
        instructor,
        QuizCreate(
            title="Linear equations checkpoint",
            content_item_id=content_item.id,
            time_limit_minutes=10,
            passing_score=70,
            max_attempts=3,
        ),
    )
    await service.add_question(
        instructor,
        created.id,
        QuestionCreate(
            question_text="Solve x + 2 = 6",
            points=10,
            order=1,
            options=[
                OptionCreate(option_text="x = 4", is_correct=True, order=1),
                OptionCreate(option_text="x = 8", order=2),
            ],
        ),
    )
    await service.add_question(
        instructor,
        created.id,
        QuestionCreate(
            question_text="Solve 3x = 9",
            points=10,
            order=2,
            options=[
                OptionCreate(option_text="x = 6", order=1),
                OptionCreate(option_text="x = 3", is_correct=True, order=2),
            ],
        ),
    )
    return await service.get_quiz_for_edit(instructor, created.id)
