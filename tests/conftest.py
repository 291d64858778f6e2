"""Shared pytest fixtures."""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from mentormind.models.user_profile import UserProfile
from mentormind.storage.store import JsonFileStore


class FakeClock:
    """Deterministic clock that only moves when told to."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


def completion(text: str | None):
    """Minimal stand-in for a chat.completions.create response."""
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=text))])


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 3, 1, 9, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def store(tmp_path):
    return JsonFileStore(tmp_path / "store")


@pytest.fixture
def profile():
    return UserProfile(name="Ayesha", topic="Algebra", confidence=2, consent=True)
