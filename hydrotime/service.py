"""
Tool: Hydration Service
Purpose: The caller side of the engine - assemble inputs, persist weights,
         schedule reminders

The engine functions are pure. This service owns the load -> predict/learn
-> store cycle and is the only place that touches storage, notifications,
weather and telemetry.

Usage:
    from hydrotime.service import HydrationService
    from hydrotime.storage import SQLiteStore
    from hydrotime.mobile.scheduler import InMemoryNotifier

    service = HydrationService(SQLiteStore(db_path), InMemoryNotifier())
    service.complete_onboarding(height=175, weight=70)
    service.log_drink(250)
    service.record_response(responded=True, done=True)  # learns + reschedules

Concurrency:
    Two record_response calls against the same store are not merged; the
    later save wins. Serialize calls per user.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import Any

import httpx

from hydrotime.config_models import HydrationConfig, load_config
from hydrotime.goals import (
    calculate_daily_goal,
    calculate_dynamic_goal,
    get_streak_days,
    get_today_logs,
)
from hydrotime.learning.forecaster import predict_reminder_batch
from hydrotime.learning.learner import update_weights
from hydrotime.learning.models import (
    BatchForecastEntry,
    DrinkLog,
    PredictionInput,
    PredictionOutput,
    ReminderResponse,
)
from hydrotime.learning.predictor import JitterSource, predict_next_reminder
from hydrotime.logging_config import get_logger
from hydrotime.mobile.scheduler import ReminderNotifier, ScheduledReminder, schedule_forecast
from hydrotime.mobile.telemetry import send_telemetry
from hydrotime.storage import STORAGE_KEYS, KeyValueStore, load_weights, save_weights
from hydrotime.weather import fetch_conditions


logger = get_logger(__name__)


class HydrationError(Exception):
    """Base error for the service layer."""


class ProfileMissingError(HydrationError):
    """Raised when an operation needs a completed onboarding profile."""


class HydrationService:
    def __init__(
        self,
        store: KeyValueStore,
        notifier: ReminderNotifier,
        config: HydrationConfig | None = None,
        weather_client: httpx.Client | None = None,
        telemetry_client: httpx.Client | None = None,
        jitter: JitterSource | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.store = store
        self.notifier = notifier
        self.config = config or load_config()
        self.weather_client = weather_client
        self.telemetry_client = telemetry_client
        self.jitter = jitter
        self.clock = clock or datetime.now
        self.scheduled: list[ScheduledReminder] = []

    # ─────────────────────────────────────────────────────────────────────
    # Profile
    # ─────────────────────────────────────────────────────────────────────

    def get_profile(self) -> dict[str, Any] | None:
        profile = self.store.get(STORAGE_KEYS["profile"])
        if not profile or not profile.get("onboarding_complete"):
            return None
        return profile

    def complete_onboarding(self, height: float, weight: float) -> dict[str, Any]:
        if height <= 0 or weight <= 0:
            raise ValueError("height and weight must be positive")

        profile = {
            "height": height,
            "weight": weight,
            "daily_goal": calculate_daily_goal(weight, height),
            "activity_level": self.config.defaults.activity_level,
            "onboarding_complete": True,
        }
        self.store.set(STORAGE_KEYS["profile"], profile)
        logger.info(f"Onboarding complete, base goal {profile['daily_goal']} ml")
        return profile

    def set_activity_level(self, activity_level: float) -> dict[str, Any]:
        profile = self._require_profile()
        if not 0.0 <= activity_level <= 1.0:
            raise ValueError(f"activity_level must be within [0, 1], got {activity_level}")
        profile["activity_level"] = activity_level
        self.store.set(STORAGE_KEYS["profile"], profile)
        return profile

    def _require_profile(self) -> dict[str, Any]:
        profile = self.get_profile()
        if profile is None:
            raise ProfileMissingError("Complete onboarding first")
        return profile

    # ─────────────────────────────────────────────────────────────────────
    # History
    # ─────────────────────────────────────────────────────────────────────

    def get_drink_logs(self) -> list[DrinkLog]:
        return [DrinkLog.from_dict(d) for d in self.store.get(STORAGE_KEYS["logs"]) or []]

    def get_responses(self) -> list[ReminderResponse]:
        return [
            ReminderResponse.from_dict(r)
            for r in self.store.get(STORAGE_KEYS["responses"]) or []
        ]

    def log_drink(self, volume: float, manual_log: bool = True) -> DrinkLog:
        if volume <= 0:
            raise ValueError(f"volume must be positive, got {volume}")

        log = DrinkLog(timestamp=self.clock(), volume=volume, manual_log=manual_log)
        logs = self.get_drink_logs()
        logs.append(log)
        self.store.set(STORAGE_KEYS["logs"], [d.to_dict() for d in logs])

        send_telemetry(
            "manual_log", self.config.telemetry, client=self.telemetry_client, water_volume=volume
        )
        return log

    def delete_drink(self, log_id: str) -> bool:
        logs = self.get_drink_logs()
        remaining = [d for d in logs if d.id != log_id]
        if len(remaining) == len(logs):
            return False
        self.store.set(STORAGE_KEYS["logs"], [d.to_dict() for d in remaining])
        return True

    # ─────────────────────────────────────────────────────────────────────
    # Engine calls
    # ─────────────────────────────────────────────────────────────────────

    def build_input(self, now: datetime | None = None) -> PredictionInput:
        """Assemble engine input from the stored profile, history and weather."""
        profile = self._require_profile()
        now = now or self.clock()
        defaults = self.config.defaults
        limit = self.config.engine.history_limit

        temperature, humidity = defaults.temperature, defaults.humidity
        conditions = fetch_conditions(self.config.weather, client=self.weather_client)
        if conditions is not None:
            temperature, humidity = conditions.temperature, conditions.humidity

        return PredictionInput(
            current_date=now,
            current_hour=now.hour,
            height=profile["height"],
            weight=profile["weight"],
            recent_drinks=self.get_drink_logs()[-limit:],
            recent_responses=self.get_responses()[-limit:],
            activity_level=profile.get("activity_level", defaults.activity_level),
            temperature=temperature,
            humidity=humidity,
        )

    def predict(self) -> PredictionOutput:
        return predict_next_reminder(self.build_input(), load_weights(self.store), jitter=self.jitter)

    def reschedule(self, count: int | None = None) -> list[BatchForecastEntry]:
        """
        Forecast a batch and replace the scheduled reminders with it.

        Args:
            count: Reminders to plan; None means the configured forecast_count

        Returns:
            The forecast entries, or [] when onboarding is not complete.
            The reminders handed to the notifier are kept in self.scheduled.
        """
        if self.get_profile() is None:
            logger.info("No profile yet, skipping reschedule")
            return []

        if count is None:
            count = self.config.engine.forecast_count
        entries = predict_reminder_batch(
            self.build_input(), load_weights(self.store), count=count, jitter=self.jitter
        )
        self.scheduled = schedule_forecast(self.notifier, entries, self.config.notifications)
        if self.scheduled:
            logger.info(
                "reminders_scheduled",
                count=len(self.scheduled),
                first_in_seconds=self.scheduled[0].fire_in_seconds,
                last_in_seconds=self.scheduled[-1].fire_in_seconds,
            )
        send_telemetry(
            "reminder_sent", self.config.telemetry, client=self.telemetry_client, count=len(entries)
        )
        return entries

    def background_refresh(self) -> list[BatchForecastEntry]:
        """Periodic refresh: a shorter plan than the one made after a response."""
        return self.reschedule(count=self.config.engine.background_forecast_count)

    def record_response(self, responded: bool, done: bool) -> ReminderResponse:
        """
        Store a reminder response, learn from it and plan the next reminders.

        The learner sees the history as it was when the reminder fired, so
        the new response is appended only after the update.
        """
        response = ReminderResponse(timestamp=self.clock(), responded=responded, response_done=done)

        if self.get_profile() is not None:
            new_weights = update_weights(
                load_weights(self.store), self.build_input(), done, jitter=self.jitter
            )
            save_weights(self.store, new_weights)
        else:
            logger.info("No profile yet, response stored without learning")

        responses = self.get_responses()
        responses.append(response)
        self.store.set(STORAGE_KEYS["responses"], [r.to_dict() for r in responses])

        send_telemetry(
            "reminder_response",
            self.config.telemetry,
            client=self.telemetry_client,
            response="done" if done else "not_yet",
        )

        self.reschedule()
        return response

    def refresh_goal(self) -> int:
        """Today's goal: the base goal scaled by the predicted adjustment factor."""
        profile = self._require_profile()
        prediction = self.predict()
        return calculate_dynamic_goal(profile["daily_goal"], prediction.goal_adjustment_factor)

    def stats(self) -> dict[str, Any]:
        now = self.clock()
        logs = self.get_drink_logs()
        today_logs = get_today_logs(logs, now)
        profile = self.get_profile()

        today_goal = self.refresh_goal() if profile else self.config.defaults.daily_goal

        return {
            "current_streak": get_streak_days(logs, now),
            "today_progress": sum(d.volume for d in today_logs),
            "today_goal": today_goal,
            "today_logs": [d.to_dict() for d in today_logs],
        }
