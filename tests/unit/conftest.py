"""Shared fixtures for unit tests."""

from collections.abc import AsyncGenerator
from typing import Any
from unittest.mock import AsyncMock

import pytest

from core import background
from domain.entities.user import User


class FakeUnitOfWork:
    """Fake Unit of Work with all 8 repository mocks for unit testing.

    Services open a fresh unit of work per transaction; the fixture factory
    hands back this same instance every time, so ``commits`` counts them.
    """

    def __init__(self) -> None:
        self.users = AsyncMock()
        self.friends = AsyncMock()
        self.projects = AsyncMock()
        self.members = AsyncMock()
        self.project_wrappers = AsyncMock()
        self.invites = AsyncMock()
        self.dm_channels = AsyncMock()
        self.dm_wrappers = AsyncMock()
        self.commits = 0
        self.rolled_back = False

    @property
    def committed(self) -> bool:
        return self.commits > 0

    async def commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        self.rolled_back = True

    async def __aenter__(self) -> "FakeUnitOfWork":
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass


def make_user(user_id: str, name: str | None = None, **kwargs: Any) -> User:
    return User(id=user_id, email=f"{user_id}@example.com", name=name or user_id.title(), **kwargs)


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Create a fresh FakeUnitOfWork."""
    return FakeUnitOfWork()


@pytest.fixture(autouse=True)
async def drain_background() -> AsyncGenerator[None, None]:
    """Let fire-and-forget work finish inside the test that spawned it."""
    yield
    await background.drain(timeout=5)


@pytest.fixture
def user_id() -> str:
    return "user-alice"


@pytest.fixture
def other_user_id() -> str:
    return "user-bob"


@pytest.fixture
def project_id() -> str:
    return "project-1"
