"""Pytest configuration and shared fixtures."""

import pytest

from tests.factories import FixedClock, InMemoryStore


@pytest.fixture
def clock() -> FixedClock:
    """Clock pinned to 2024-03-10 12:00 UTC."""
    return FixedClock()


@pytest.fixture
def store() -> InMemoryStore:
    """Empty in-memory record store."""
    return InMemoryStore()
