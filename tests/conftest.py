"""Shared test fixtures for hydrotime tests.

This module provides common fixtures used across all test modules:
- Database isolation with temporary files
- A fixed clock and a zero jitter source for deterministic predictions
- Standard prediction inputs and drink/response histories

Usage:
    def test_something(make_input, zero_jitter):
        output = predict_next_reminder(make_input(), jitter=zero_jitter)
"""

import os
import tempfile
from collections.abc import Callable, Generator
from datetime import datetime, timedelta
from pathlib import Path

import pytest

from hydrotime.config_models import HydrationConfig
from hydrotime.learning.models import DrinkLog, PredictionInput, ReminderResponse
from hydrotime.mobile.scheduler import InMemoryNotifier
from hydrotime.service import HydrationService
from hydrotime.storage import MemoryStore


# ─────────────────────────────────────────────────────────────────────────────
# Database Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def temp_db() -> Generator[Path, None, None]:
    """Create a temporary database file for testing.

    The database file is automatically deleted after the test completes.
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    yield db_path

    if db_path.exists():
        os.unlink(db_path)


# ─────────────────────────────────────────────────────────────────────────────
# Engine Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def fixed_now() -> datetime:
    """Noon on a fixed day."""
    return datetime(2026, 3, 10, 12, 0, 0)


@pytest.fixture
def zero_jitter() -> Callable[[], float]:
    return lambda: 0.0


@pytest.fixture
def make_input(fixed_now) -> Callable[..., PredictionInput]:
    """Factory for PredictionInput with the reference profile.

    70 kg, 170 cm, activity 0.5, 20 °C, humidity 0.5, empty history, hour 12.
    """

    def _make(**overrides) -> PredictionInput:
        values = {
            "current_date": fixed_now,
            "current_hour": fixed_now.hour,
            "height": 170.0,
            "weight": 70.0,
            "recent_drinks": [],
            "recent_responses": [],
            "activity_level": 0.5,
            "temperature": 20.0,
            "humidity": 0.5,
        }
        values.update(overrides)
        return PredictionInput(**values)

    return _make


@pytest.fixture
def sample_drinks(fixed_now) -> list[DrinkLog]:
    """Three drinks this morning, one yesterday."""
    return [
        DrinkLog(timestamp=fixed_now - timedelta(hours=4), volume=300, manual_log=True),
        DrinkLog(timestamp=fixed_now - timedelta(hours=2), volume=250, manual_log=False),
        DrinkLog(timestamp=fixed_now - timedelta(hours=1), volume=400, manual_log=True),
        DrinkLog(timestamp=fixed_now - timedelta(days=1), volume=500, manual_log=True),
    ]


@pytest.fixture
def sample_responses(fixed_now) -> list[ReminderResponse]:
    """Two affirmative answers, one 'not yet', one ignored."""
    return [
        ReminderResponse(timestamp=fixed_now - timedelta(hours=5), responded=True, response_done=True),
        ReminderResponse(timestamp=fixed_now - timedelta(hours=3), responded=True, response_done=False),
        ReminderResponse(timestamp=fixed_now - timedelta(hours=2), responded=False, response_done=False),
        ReminderResponse(timestamp=fixed_now - timedelta(hours=1), responded=True, response_done=True),
    ]


# ─────────────────────────────────────────────────────────────────────────────
# Service Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def hydration_service(fixed_now, zero_jitter) -> HydrationService:
    """Service over an in-memory store with network collaborators disabled."""
    return HydrationService(
        store=MemoryStore(),
        notifier=InMemoryNotifier(),
        config=HydrationConfig(),
        jitter=zero_jitter,
        clock=lambda: fixed_now,
    )
