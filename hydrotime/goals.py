"""
Tool: Hydration Goals
Purpose: Daily goal formulas and progress helpers

The engine only produces a goal_adjustment_factor; these helpers turn a
profile into a base goal and apply the factor to it.

Usage:
    from hydrotime.goals import calculate_daily_goal, calculate_dynamic_goal

    base = calculate_daily_goal(weight=70, height=175)   # 2300
    today = calculate_dynamic_goal(base, 1.12)            # 2600
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timedelta

from hydrotime.learning.models import DrinkLog


ML_PER_KG = 33
MAX_STREAK_DAYS = 365


def _round_to_hundred(value: float) -> int:
    # Half-up, matching how goals were always displayed
    return int((value / 100) + 0.5) * 100


def calculate_daily_goal(weight: float, height: float) -> int:
    """
    Base daily water goal in ml.

    33 ml per kg, +10% above 180 cm, -10% below 160 cm, rounded to 100 ml.
    """
    base_water = weight * ML_PER_KG
    if height > 180:
        height_factor = 1.1
    elif height < 160:
        height_factor = 0.9
    else:
        height_factor = 1.0
    return _round_to_hundred(base_water * height_factor)


def calculate_dynamic_goal(base_goal: float, goal_adjustment_factor: float) -> int:
    return _round_to_hundred(base_goal * goal_adjustment_factor)


def get_today_logs(logs: Sequence[DrinkLog], now: datetime | None = None) -> list[DrinkLog]:
    today = (now or datetime.now()).date()
    return [log for log in logs if log.timestamp.date() == today]


def get_streak_days(logs: Sequence[DrinkLog], now: datetime | None = None) -> int:
    """Consecutive days, ending today, with at least one drink logged."""
    if not logs:
        return 0

    logged_days = {log.timestamp.date() for log in logs}
    check_day = (now or datetime.now()).date()

    streak = 0
    while streak < MAX_STREAK_DAYS and check_day in logged_days:
        streak += 1
        check_day -= timedelta(days=1)
    return streak
