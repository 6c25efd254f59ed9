"""
Tool: Feature Extractor
Purpose: Turn drink and response history into scalar features

All functions are pure: same history and same "now" give the same result.
Empty history never raises; each feature has a neutral default.

Usage:
    from hydrotime.learning.features import (
        get_hourly_pattern,
        get_recency_weighted_volume,
        get_response_rate,
    )
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from datetime import datetime

from hydrotime.learning import (
    DEFAULT_DRINK_VOLUME_ML,
    NEUTRAL_RESPONSE_RATE,
    RECENCY_DECAY_HOURS,
)
from hydrotime.learning.models import HOURS_PER_DAY, DrinkLog, ReminderResponse


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def sigmoid(x: float) -> float:
    # Split on sign so large magnitudes cannot overflow math.exp
    if x >= 0:
        return 1.0 / (1.0 + math.exp(-x))
    z = math.exp(x)
    return z / (1.0 + z)


def normalize(value: float, low: float, high: float) -> float:
    """Linear map of [low, high] onto [0, 1], clamped at both ends."""
    return clamp((value - low) / (high - low))


def get_response_rate(responses: Sequence[ReminderResponse]) -> float:
    """
    Fraction of reminders the person answered affirmatively.

    Returns:
        0.5 for an empty history, otherwise done / total
    """
    if not responses:
        return NEUTRAL_RESPONSE_RATE
    done = sum(1 for r in responses if r.responded and r.response_done)
    return done / len(responses)


def get_recency_weighted_volume(drinks: Sequence[DrinkLog], now: datetime) -> float:
    """
    Average drink volume with exponential recency weighting.

    Each drink is weighted by exp(-age_hours / 4), so a drink from this
    morning counts far more than one from yesterday.

    Args:
        drinks: Drink history (any order)
        now: Reference time for computing ages

    Returns:
        Weighted mean volume in ml, or 250 when there is nothing to weigh
    """
    if not drinks:
        return DEFAULT_DRINK_VOLUME_ML

    total = 0.0
    weight_sum = 0.0
    for drink in drinks:
        age_hours = (now - drink.timestamp).total_seconds() / 3600
        weight = math.exp(-age_hours / RECENCY_DECAY_HOURS)
        total += drink.volume * weight
        weight_sum += weight

    if weight_sum == 0:
        return DEFAULT_DRINK_VOLUME_ML
    return total / weight_sum


def get_hourly_pattern(drinks: Sequence[DrinkLog]) -> list[float]:
    """
    Relative drinking frequency per hour of day.

    Counts drinks per hour bucket and divides by the busiest bucket
    (or by 1 when there are no drinks at all).

    Returns:
        24 values in [0, 1], index = hour of day
    """
    pattern = [0] * HOURS_PER_DAY
    for drink in drinks:
        pattern[drink.timestamp.hour] += 1

    peak = max(max(pattern), 1)
    return [count / peak for count in pattern]
