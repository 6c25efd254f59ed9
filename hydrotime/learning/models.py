"""
Tool: Engine Models
Purpose: Value objects passed into and out of the reminder-timing engine

Usage:
    from hydrotime.learning.models import (
        DEFAULT_WEIGHTS,
        DrinkLog,
        NetworkWeights,
        PredictionInput,
        ReminderResponse,
    )

NetworkWeights is the only structure with identity across calls. It is
frozen: the learner builds a new value instead of editing the old one.
"""

from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass, field, fields
from datetime import datetime
from typing import Any


HOURS_PER_DAY = 24


def _parse_timestamp(value: Any) -> datetime:
    """Naive local time, whatever the stored form."""
    if isinstance(value, (int, float)):
        # Epoch milliseconds, as written by older mobile clients
        return datetime.fromtimestamp(value / 1000)
    parsed = value if isinstance(value, datetime) else datetime.fromisoformat(value)
    if parsed.tzinfo is not None:
        # The service clock is naive local time
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


@dataclass(frozen=True)
class NetworkWeights:
    """
    Learned state of the scoring function.

    hour_weights holds one circadian preference per hour of day. The scalar
    weights feed the hidden unit; hidden_weight and bias feed the output.
    """

    hour_weights: tuple[float, ...] = (0.5,) * HOURS_PER_DAY
    response_weight: float = 1.0
    volume_weight: float = 0.8
    frequency_weight: float = 0.6
    activity_weight: float = 0.5
    temperature_weight: float = 0.3
    humidity_weight: float = 0.2
    goal_adjustment_weight: float = 0.1
    hidden_weight: float = 1.4
    bias: float = -0.3
    learning_rate: float = 0.02

    def __post_init__(self):
        if len(self.hour_weights) != HOURS_PER_DAY:
            raise ValueError(
                f"hour_weights needs {HOURS_PER_DAY} entries, got {len(self.hour_weights)}"
            )
        object.__setattr__(self, "hour_weights", tuple(float(w) for w in self.hour_weights))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for storage."""
        data = asdict(self)
        data["hour_weights"] = list(self.hour_weights)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> NetworkWeights:
        """Create from stored dict. Missing keys keep their default value."""
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}
        if "hour_weights" in values:
            values["hour_weights"] = tuple(values["hour_weights"])
        return cls(**values)


DEFAULT_WEIGHTS = NetworkWeights()


@dataclass
class DrinkLog:
    """A single drink. manual_log is False when a reminder prompted it."""

    timestamp: datetime
    volume: float
    manual_log: bool = True
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp.isoformat(),
            "volume": self.volume,
            "manual_log": self.manual_log,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DrinkLog:
        return cls(
            id=str(data.get("id") or uuid.uuid4().hex[:12]),
            timestamp=_parse_timestamp(data["timestamp"]),
            volume=float(data["volume"]),
            manual_log=bool(data.get("manual_log", True)),
        )


@dataclass
class ReminderResponse:
    """How the person answered one reminder."""

    timestamp: datetime
    responded: bool
    response_done: bool
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp.isoformat(),
            "responded": self.responded,
            "response_done": self.response_done,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ReminderResponse:
        return cls(
            id=str(data.get("id") or uuid.uuid4().hex[:12]),
            timestamp=_parse_timestamp(data["timestamp"]),
            responded=bool(data.get("responded", False)),
            response_done=bool(data.get("response_done", False)),
        )


@dataclass
class PredictionInput:
    """
    Everything the engine needs for one call. Assembled per call, never stored.

    Event lists are treated as point sets; no ordering is assumed.
    """

    current_date: datetime
    current_hour: int
    height: float
    weight: float
    recent_drinks: list[DrinkLog] = field(default_factory=list)
    recent_responses: list[ReminderResponse] = field(default_factory=list)
    activity_level: float = 0.5  # 0 = sedentary, 1 = very active
    temperature: float = 20.0  # Celsius
    humidity: float = 0.5  # 0-1


@dataclass(frozen=True)
class PredictionOutput:
    drink_probability: float
    next_reminder_delay: int  # ms
    goal_adjustment_factor: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class BatchForecastEntry:
    """One forecasted reminder. delay_ms counts from the previous entry."""

    delay_ms: int
    probability: float
    confidence: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
