"""Shared fixtures."""

import pytest

from helpers import FakeVenues


@pytest.fixture
def venues() -> FakeVenues:
    """Fake venue APIs, all answering 503 until configured."""
    return FakeVenues()
