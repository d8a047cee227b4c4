"""Shared fixtures for unit tests."""

from datetime import datetime, timedelta
from typing import Any
from unittest.mock import AsyncMock

import pytest

from domain.registry.profile_store import ProfileStore


class FakeUnitOfWork:
    """Fake Unit of Work with repository mocks for unit testing."""

    def __init__(self) -> None:
        self.profiles = AsyncMock()
        self.events = AsyncMock()
        self.profiles.load_all.return_value = []
        self.committed = False
        self.rolled_back = False

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True

    async def __aenter__(self) -> "FakeUnitOfWork":
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass


class SteppingClock:
    """Deterministic clock that advances one second per reading."""

    def __init__(self, start: datetime = datetime(2026, 1, 1, 12, 0, 0)) -> None:
        self.current = start

    def __call__(self) -> datetime:
        now = self.current
        self.current = now + timedelta(seconds=1)
        return now


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Create a fresh FakeUnitOfWork."""
    return FakeUnitOfWork()


@pytest.fixture
def clock() -> SteppingClock:
    return SteppingClock()


@pytest.fixture
def store(clock: SteppingClock) -> ProfileStore:
    """An empty store driven by the stepping clock."""
    return ProfileStore(clock=clock)


@pytest.fixture
def alice() -> str:
    return "0xA11CE00000000000000000000000000000000001"


@pytest.fixture
def bob() -> str:
    return "0xB0B0000000000000000000000000000000000002"


@pytest.fixture
def carol() -> str:
    return "0xCA501000000000000000000000000000000000003"
