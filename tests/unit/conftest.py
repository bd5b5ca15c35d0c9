"""
Unit test fixtures. Pure functions and in-memory DB only; no server.
"""
from datetime import datetime, timezone

import pytest


@pytest.fixture
def fixed_now():
    """2024-03-10 10:00 UTC == 15:30 IST."""
    return datetime(2024, 3, 10, 10, 0, tzinfo=timezone.utc)
