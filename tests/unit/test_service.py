"""Tests for hydrotime/service.py

The service is the engine's caller:
- assembles inputs from stored profile and the last 20 events
- learns from a response before storing it, then persists new weights
- replaces the reminder plan after every response
"""

from datetime import timedelta
from unittest.mock import patch

import httpx
import pytest

from hydrotime.config_models import HydrationConfig
from hydrotime.learning.learner import update_weights
from hydrotime.learning.models import DEFAULT_WEIGHTS
from hydrotime.mobile.scheduler import InMemoryNotifier
from hydrotime.service import HydrationService, ProfileMissingError
from hydrotime.storage import STORAGE_KEYS, MemoryStore, load_weights


@pytest.fixture
def onboarded(hydration_service):
    hydration_service.complete_onboarding(height=170, weight=70)
    return hydration_service


# ─────────────────────────────────────────────────────────────────────────────
# Profile
# ─────────────────────────────────────────────────────────────────────────────


class TestOnboarding:
    def test_stores_profile_with_base_goal(self, hydration_service):
        profile = hydration_service.complete_onboarding(height=170, weight=70)

        assert profile["daily_goal"] == 2300
        assert profile["onboarding_complete"] is True
        assert hydration_service.get_profile() == profile

    def test_rejects_non_positive_measurements(self, hydration_service):
        with pytest.raises(ValueError):
            hydration_service.complete_onboarding(height=0, weight=70)

    def test_incomplete_profile_counts_as_missing(self, hydration_service):
        hydration_service.store.set(STORAGE_KEYS["profile"], {"height": 170, "weight": 70})
        assert hydration_service.get_profile() is None

    def test_activity_level_validated(self, onboarded):
        assert onboarded.set_activity_level(0.9)["activity_level"] == 0.9
        with pytest.raises(ValueError):
            onboarded.set_activity_level(1.5)


# ─────────────────────────────────────────────────────────────────────────────
# Input Assembly
# ─────────────────────────────────────────────────────────────────────────────


class TestBuildInput:
    def test_requires_profile(self, hydration_service):
        with pytest.raises(ProfileMissingError):
            hydration_service.build_input()

    def test_uses_profile_and_defaults(self, onboarded, fixed_now):
        inp = onboarded.build_input()

        assert inp.current_date == fixed_now
        assert inp.current_hour == 12
        assert inp.weight == 70
        assert inp.height == 170
        assert inp.activity_level == 0.5
        assert inp.temperature == 20.0
        assert inp.humidity == 0.5

    def test_trims_history_to_limit(self, onboarded):
        for _ in range(25):
            onboarded.log_drink(100)
        onboarded.store.set(
            STORAGE_KEYS["responses"],
            [
                {"timestamp": "2026-03-10T09:00:00", "responded": True, "response_done": True}
                for _ in range(30)
            ],
        )

        inp = onboarded.build_input()

        assert len(inp.recent_drinks) == 20
        assert len(inp.recent_responses) == 20

    def test_weather_overrides_defaults(self, fixed_now, zero_jitter):
        config = HydrationConfig(weather={"enabled": True, "location": "Lisbon"})
        payload = {"current_condition": [{"temp_C": "31", "humidity": "40"}]}
        client = httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(200, json=payload)))
        service = HydrationService(
            MemoryStore(),
            InMemoryNotifier(),
            config=config,
            weather_client=client,
            jitter=zero_jitter,
            clock=lambda: fixed_now,
        )
        service.complete_onboarding(height=170, weight=70)

        inp = service.build_input()

        assert inp.temperature == 31.0
        assert inp.humidity == pytest.approx(0.4)

    def test_weather_failure_falls_back(self, fixed_now):
        config = HydrationConfig(weather={"enabled": True, "location": "Nowhere"})
        client = httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(404)))
        service = HydrationService(
            MemoryStore(), InMemoryNotifier(), config=config, weather_client=client,
            clock=lambda: fixed_now,
        )
        service.complete_onboarding(height=170, weight=70)

        assert service.build_input().temperature == 20.0


# ─────────────────────────────────────────────────────────────────────────────
# Drinks
# ─────────────────────────────────────────────────────────────────────────────


class TestDrinkLogs:
    def test_log_and_delete(self, hydration_service):
        log = hydration_service.log_drink(300, manual_log=False)

        assert hydration_service.get_drink_logs()[0].volume == 300
        assert hydration_service.get_drink_logs()[0].manual_log is False
        assert hydration_service.delete_drink(log.id) is True
        assert hydration_service.get_drink_logs() == []

    def test_delete_unknown_id(self, hydration_service):
        assert hydration_service.delete_drink("missing") is False

    def test_externally_written_utc_timestamps(self, onboarded, fixed_now):
        onboarded.store.set(
            STORAGE_KEYS["logs"],
            [{"id": "ext", "timestamp": "2026-03-10T09:00:00Z", "volume": 300}],
        )

        assert onboarded.get_drink_logs()[0].timestamp.tzinfo is None
        assert 0.0 <= onboarded.predict().drink_probability <= 1.0

    def test_rejects_non_positive_volume(self, hydration_service):
        with pytest.raises(ValueError):
            hydration_service.log_drink(0)


# ─────────────────────────────────────────────────────────────────────────────
# Responses
# ─────────────────────────────────────────────────────────────────────────────


class TestRecordResponse:
    def test_learns_from_history_before_the_response(self, onboarded, zero_jitter):
        expected = update_weights(DEFAULT_WEIGHTS, onboarded.build_input(), True, jitter=zero_jitter)

        onboarded.record_response(responded=True, done=True)

        assert load_weights(onboarded.store) == expected
        assert len(onboarded.get_responses()) == 1

    def test_reschedules_after_response(self, onboarded):
        onboarded.record_response(responded=True, done=False)

        assert onboarded.notifier.cancel_count == 1
        assert len(onboarded.notifier.pending) == 16

    def test_without_profile_stores_but_does_not_learn(self, hydration_service):
        hydration_service.record_response(responded=True, done=True)

        assert len(hydration_service.get_responses()) == 1
        assert hydration_service.store.get(STORAGE_KEYS["weights"]) is None
        assert hydration_service.notifier.pending == []

    def test_weights_accumulate_across_responses(self, onboarded):
        onboarded.record_response(responded=True, done=True)
        first = load_weights(onboarded.store)
        onboarded.record_response(responded=True, done=True)
        second = load_weights(onboarded.store)

        assert second.hour_weights[12] > first.hour_weights[12] > 0.5


# ─────────────────────────────────────────────────────────────────────────────
# Scheduling and Goals
# ─────────────────────────────────────────────────────────────────────────────


class TestScheduling:
    def test_reschedule_without_profile_is_noop(self, hydration_service):
        assert hydration_service.reschedule() == []
        assert hydration_service.notifier.cancel_count == 0

    def test_reschedule_uses_configured_count(self, onboarded):
        entries = onboarded.reschedule()
        assert len(entries) == 16
        assert len(onboarded.notifier.pending) == 16

    def test_background_refresh_plans_shorter_batch(self, onboarded):
        assert len(onboarded.background_refresh()) == 12

    def test_reschedule_rejects_zero_count(self, onboarded):
        onboarded.reschedule(count=3)

        with pytest.raises(ValueError):
            onboarded.reschedule(count=0)

        # The previous plan is left in place
        assert len(onboarded.notifier.pending) == 3
        assert onboarded.notifier.cancel_count == 1

    def test_reschedule_keeps_scheduled_reminders(self, onboarded):
        entries = onboarded.reschedule(count=4)

        assert [r.id for r in onboarded.scheduled] == [p["id"] for p in onboarded.notifier.pending]
        assert onboarded.scheduled[-1].fire_in_seconds == sum(
            round(e.delay_ms / 1000) for e in entries
        )
        assert onboarded.scheduled[0].to_dict()["confidence"] == entries[0].confidence

    def test_disabled_notifications_leave_nothing_scheduled(self, onboarded):
        onboarded.reschedule(count=2)
        onboarded.config.notifications.enabled = False

        assert len(onboarded.reschedule(count=2)) == 2
        assert onboarded.scheduled == []
        assert onboarded.notifier.pending == []

    def test_reschedule_does_not_touch_history(self, onboarded):
        onboarded.log_drink(250)
        onboarded.reschedule(count=10)
        assert len(onboarded.get_drink_logs()) == 1

    def test_reports_telemetry_when_enabled(self, fixed_now, zero_jitter):
        sent = []
        client = httpx.Client(
            transport=httpx.MockTransport(lambda r: sent.append(r) or httpx.Response(200))
        )
        service = HydrationService(
            MemoryStore(),
            InMemoryNotifier(),
            config=HydrationConfig(telemetry={"enabled": True, "url": "https://t.example/"}),
            telemetry_client=client,
            jitter=zero_jitter,
            clock=lambda: fixed_now,
        )
        service.complete_onboarding(height=170, weight=70)

        service.log_drink(250)
        service.record_response(responded=True, done=True)

        # manual_log, reminder_response, reminder_sent
        assert len(sent) == 3


class TestGoals:
    def test_refresh_goal_requires_profile(self, hydration_service):
        with pytest.raises(ProfileMissingError):
            hydration_service.refresh_goal()

    def test_refresh_goal_applies_factor(self, onboarded):
        # Neutral activity and 20 °C give a factor of exactly 1.0
        assert onboarded.refresh_goal() == 2300

    def test_hot_active_day_raises_goal(self, onboarded):
        onboarded.set_activity_level(1.0)
        onboarded.config.defaults.temperature = 36.0
        # 1 + 0.5 * 0.1 + 0.4 * 0.3 = 1.17 -> 2691 -> 2700
        assert onboarded.refresh_goal() == 2700

    def test_stats(self, onboarded, fixed_now):
        onboarded.log_drink(250)
        onboarded.log_drink(400)
        with patch.object(onboarded, "clock", return_value=fixed_now + timedelta(minutes=5)):
            stats = onboarded.stats()

        assert stats["today_progress"] == 650
        assert stats["current_streak"] == 1
        assert stats["today_goal"] == 2300
        assert len(stats["today_logs"]) == 2

    def test_stats_before_onboarding(self, hydration_service):
        stats = hydration_service.stats()
        assert stats["today_goal"] == 2000
        assert stats["current_streak"] == 0
