"""
Tool: Batch Forecaster
Purpose: Plan the next N reminders by rolling the predictor forward

The rollout keeps a virtual clock and virtual copies of the histories.
When a step predicts a likely drink, a synthetic 250 ml drink is added at
the new virtual time so later steps see its effect on the hourly pattern
and recent volume. The caller's histories and weights are never touched.

Usage:
    from hydrotime.learning.forecaster import predict_reminder_batch

    entries = predict_reminder_batch(prediction_input, weights, count=16)
    for entry in entries:
        entry.delay_ms  # from the previous entry, not from now
"""

from __future__ import annotations

from dataclasses import replace
from datetime import timedelta

from hydrotime.learning import (
    MIN_FORECAST_DELAY_MS,
    SIMULATED_DRINK_THRESHOLD,
    SIMULATED_DRINK_VOLUME_ML,
)
from hydrotime.learning.models import (
    DEFAULT_WEIGHTS,
    BatchForecastEntry,
    DrinkLog,
    NetworkWeights,
    PredictionInput,
)
from hydrotime.learning.predictor import JitterSource, get_confidence, predict_next_reminder
from hydrotime.logging_config import get_logger


logger = get_logger(__name__)


def predict_reminder_batch(
    prediction_input: PredictionInput,
    weights: NetworkWeights = DEFAULT_WEIGHTS,
    count: int = 12,
    jitter: JitterSource | None = None,
    simulate_drinks: bool = True,
) -> list[BatchForecastEntry]:
    """
    Forecast a sequence of reminders.

    Args:
        prediction_input: Real context; its current_date is the rollout start
        weights: Current learned weights
        count: Number of reminders to plan (positive)
        jitter: Random source in [-1, 1] forwarded to every prediction
        simulate_drinks: Inject synthetic drinks after likely-drink steps

    Returns:
        count entries in firing order
    """
    if isinstance(count, bool) or not isinstance(count, int) or count < 1:
        raise ValueError(f"count must be a positive integer, got {count!r}")

    virtual_time = prediction_input.current_date
    virtual_drinks = list(prediction_input.recent_drinks)
    virtual_responses = list(prediction_input.recent_responses)

    results: list[BatchForecastEntry] = []
    for i in range(count):
        prediction = predict_next_reminder(
            replace(
                prediction_input,
                current_date=virtual_time,
                current_hour=virtual_time.hour,
                recent_drinks=virtual_drinks,
                recent_responses=virtual_responses,
            ),
            weights,
            jitter=jitter,
        )

        delay_ms = max(prediction.next_reminder_delay, MIN_FORECAST_DELAY_MS)
        results.append(
            BatchForecastEntry(
                delay_ms=delay_ms,
                probability=prediction.drink_probability,
                confidence=get_confidence(prediction.drink_probability),
            )
        )

        virtual_time = virtual_time + timedelta(milliseconds=delay_ms)

        if simulate_drinks and prediction.drink_probability > SIMULATED_DRINK_THRESHOLD:
            virtual_drinks.append(
                DrinkLog(
                    id=f"virtual-{i}",
                    timestamp=virtual_time,
                    volume=SIMULATED_DRINK_VOLUME_ML,
                    manual_log=False,
                )
            )

    logger.debug(
        "forecast_batch",
        count=count,
        horizon_ms=sum(e.delay_ms for e in results),
        simulated_drinks=len(virtual_drinks) - len(prediction_input.recent_drinks),
    )
    return results
