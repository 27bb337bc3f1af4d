"""Shared fixtures for xiv-emotes tests."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from tests.helpers import make_session


@pytest.fixture
def session() -> AsyncMock:
    """Mock AsyncSession with a synchronous add()."""
    return make_session()


@pytest.fixture
def user_external_id() -> str:
    """Sample user snowflake in its stored, zero-padded form."""
    return "00000000000000000001"


@pytest.fixture
def guild_external_id() -> str:
    return "00000081384788765712"
