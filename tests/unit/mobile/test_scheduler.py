"""Tests for hydrotime/mobile/scheduler.py

A forecast becomes a reminder plan:
- old reminders are cancelled first
- fire times are cumulative
- wording depends on confidence
"""

import pytest

from hydrotime.config_models import NotificationsConfig
from hydrotime.learning.models import BatchForecastEntry
from hydrotime.mobile.scheduler import InMemoryNotifier, schedule_forecast


@pytest.fixture
def notifier():
    return InMemoryNotifier()


@pytest.fixture
def entries():
    return [
        BatchForecastEntry(delay_ms=3_600_000, probability=0.9, confidence=0.8),
        BatchForecastEntry(delay_ms=1_800_400, probability=0.55, confidence=0.1),
        BatchForecastEntry(delay_ms=60_000, probability=0.85, confidence=0.7),
    ]


class TestScheduleForecast:
    def test_fire_times_are_cumulative(self, notifier, entries):
        scheduled = schedule_forecast(notifier, entries)

        assert [r.fire_in_seconds for r in scheduled] == [3600, 5400, 5460]
        assert [p["seconds"] for p in notifier.pending] == [3600, 5400, 5460]

    def test_wording_follows_confidence(self, notifier, entries):
        config = NotificationsConfig()
        scheduled = schedule_forecast(notifier, entries, config)

        assert scheduled[0].body == config.urgent_body
        assert scheduled[1].body == config.gentle_body
        # Threshold is strict
        assert scheduled[2].body == config.gentle_body

    def test_new_plan_replaces_old(self, notifier, entries):
        schedule_forecast(notifier, entries)
        schedule_forecast(notifier, entries[:1])

        assert notifier.cancel_count == 2
        assert len(notifier.pending) == 1

    def test_disabled_notifications_only_cancel(self, notifier, entries):
        schedule_forecast(notifier, entries)
        scheduled = schedule_forecast(notifier, entries, NotificationsConfig(enabled=False))

        assert scheduled == []
        assert notifier.pending == []

    def test_ids_match_notifier(self, notifier, entries):
        scheduled = schedule_forecast(notifier, entries)
        assert [r.id for r in scheduled] == [p["id"] for p in notifier.pending]
        assert scheduled[0].to_dict()["title"] == "Hydration check"
