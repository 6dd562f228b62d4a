"""Plain helpers shared by tests (fixtures live in conftest.py)."""

from datetime import datetime, timedelta, timezone

from app.models import RoleName
from app.repositories.user_repo import UserRepository


class FakeClock:
    """Manually advanced clock for the attempt engine."""

    def __init__(self, start: datetime = None):
        self.now = start or datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, minutes: float = 0, seconds: float = 0) -> None:
        self.now += timedelta(minutes=minutes, seconds=seconds)


async def make_user(db, email: str, *roles: RoleName):
    names = [RoleName.USER.value] + [r.value for r in roles]
    return await UserRepository(db).create_user(
        email=email,
        password_hash="not-a-real-hash",
        full_name=email.split("@")[0].title(),
        roles=names,
    )


def correct_option(question):
    return next(o for o in question.options if o.is_correct)


def wrong_option(question):
    return next(o for o in question.options if not o.is_correct)
