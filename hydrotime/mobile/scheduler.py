"""
Tool: Reminder Scheduler
Purpose: Schedule a forecast batch as platform notifications

Usage:
    from hydrotime.mobile.scheduler import InMemoryNotifier, schedule_forecast

    notifier = InMemoryNotifier()
    scheduled = schedule_forecast(notifier, entries, config.notifications)

Forecast entries carry delays relative to the previous entry, so each
notification fires at the running sum of the delays.
"""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any

from hydrotime.config_models import NotificationsConfig
from hydrotime.learning.models import BatchForecastEntry
from hydrotime.logging_config import get_logger


logger = get_logger(__name__)


@dataclass
class ScheduledReminder:
    id: str
    fire_in_seconds: int
    title: str
    body: str
    confidence: float
    scheduled_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["scheduled_at"] = self.scheduled_at.isoformat()
        return data


class ReminderNotifier(ABC):
    """Platform notification backend."""

    @abstractmethod
    def cancel_all(self) -> None:
        """Cancel every previously scheduled reminder."""

    @abstractmethod
    def schedule(self, seconds: int, title: str, body: str) -> str:
        """Schedule one alert `seconds` from now and return its id."""


class InMemoryNotifier(ReminderNotifier):
    """Keeps the current plan in memory. Used by the CLI and in tests."""

    def __init__(self):
        self.pending: list[dict[str, Any]] = []
        self.cancel_count = 0

    def cancel_all(self) -> None:
        self.cancel_count += 1
        self.pending.clear()

    def schedule(self, seconds: int, title: str, body: str) -> str:
        notification_id = f"notif_{uuid.uuid4().hex[:12]}"
        self.pending.append(
            {"id": notification_id, "seconds": seconds, "title": title, "body": body}
        )
        logger.info(f"Scheduled reminder {notification_id} in {seconds}s")
        return notification_id


def schedule_forecast(
    notifier: ReminderNotifier,
    entries: Sequence[BatchForecastEntry],
    config: NotificationsConfig | None = None,
) -> list[ScheduledReminder]:
    """
    Replace the current reminder plan with one built from a forecast.

    Args:
        notifier: Notification backend
        entries: Forecast entries in firing order
        config: Wording and confidence threshold

    Returns:
        The reminders that were scheduled, in firing order
    """
    config = config or NotificationsConfig()
    notifier.cancel_all()

    if not config.enabled:
        logger.info("Notifications disabled, plan cleared")
        return []

    scheduled = []
    acc_seconds = 0
    for entry in entries:
        acc_seconds += round(entry.delay_ms / 1000)
        body = (
            config.urgent_body
            if entry.confidence > config.high_confidence_threshold
            else config.gentle_body
        )
        notification_id = notifier.schedule(acc_seconds, config.title, body)
        scheduled.append(
            ScheduledReminder(
                id=notification_id,
                fire_in_seconds=acc_seconds,
                title=config.title,
                body=body,
                confidence=entry.confidence,
            )
        )

    return scheduled
