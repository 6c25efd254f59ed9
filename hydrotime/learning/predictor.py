"""
Tool: Prediction Model
Purpose: Score the current moment for drink probability, reminder delay
         and daily-goal adjustment

The model is one hidden sigmoid unit feeding one output sigmoid. The
formulas are fixed; only the weights in NetworkWeights change over time.

Usage:
    from hydrotime.learning.predictor import predict_next_reminder

    output = predict_next_reminder(prediction_input, weights)
    output.next_reminder_delay  # ms

    # Deterministic in tests
    output = predict_next_reminder(prediction_input, weights, jitter=lambda: 0.0)
"""

from __future__ import annotations

import random
from collections.abc import Callable
from dataclasses import dataclass

from hydrotime.learning import (
    BASE_REMINDER_DELAY_MS,
    MAX_JITTER_MS,
    TEMPERATURE_RANGE_C,
    VOLUME_RANGE_ML,
)
from hydrotime.learning.features import (
    clamp,
    get_hourly_pattern,
    get_recency_weighted_volume,
    get_response_rate,
    normalize,
    sigmoid,
)
from hydrotime.learning.models import (
    DEFAULT_WEIGHTS,
    NetworkWeights,
    PredictionInput,
    PredictionOutput,
)


# Returns a uniform draw in [-1, 1]
JitterSource = Callable[[], float]

PATTERN_WEIGHT = 0.5
GOAL_FACTOR_RANGE = (0.8, 1.5)


def uniform_jitter() -> float:
    return random.uniform(-1.0, 1.0)


@dataclass(frozen=True)
class Features:
    """Normalized features shared by prediction and learning."""

    response_rate: float
    volume_score: float
    pattern_score: float
    temp_score: float
    activity_level: float


def extract_features(prediction_input: PredictionInput) -> Features:
    avg_volume = get_recency_weighted_volume(
        prediction_input.recent_drinks, prediction_input.current_date
    )
    pattern = get_hourly_pattern(prediction_input.recent_drinks)
    return Features(
        response_rate=get_response_rate(prediction_input.recent_responses),
        volume_score=normalize(avg_volume, *VOLUME_RANGE_ML),
        pattern_score=pattern[prediction_input.current_hour],
        temp_score=normalize(prediction_input.temperature, *TEMPERATURE_RANGE_C),
        activity_level=clamp(prediction_input.activity_level),
    )


def get_confidence(probability: float) -> float:
    """Distance from the 0.5 indifference point, scaled to [0, 1]."""
    return abs(probability - 0.5) * 2


def predict_next_reminder(
    prediction_input: PredictionInput,
    weights: NetworkWeights = DEFAULT_WEIGHTS,
    jitter: JitterSource | None = None,
) -> PredictionOutput:
    """
    Predict whether the person will drink soon and when to remind them next.

    Args:
        prediction_input: Current context and recent history
        weights: Current learned weights
        jitter: Random source in [-1, 1]; defaults to a uniform draw

    Returns:
        PredictionOutput with probability, delay (ms) and goal factor
    """
    jitter = jitter or uniform_jitter
    features = extract_features(prediction_input)
    activity = features.activity_level
    hour_score = weights.hour_weights[prediction_input.current_hour]

    hidden = sigmoid(
        hour_score * weights.frequency_weight
        + features.response_rate * weights.response_weight
        + features.volume_score * weights.volume_weight
        + features.pattern_score * PATTERN_WEIGHT
        + activity * weights.activity_weight
        + features.temp_score * weights.temperature_weight
        + prediction_input.humidity * weights.humidity_weight
    )
    probability = sigmoid(hidden * weights.hidden_weight + weights.bias)

    # Active people and hot days get reminded sooner
    base_delay = BASE_REMINDER_DELAY_MS * (1 - activity * 0.3 - features.temp_score * 0.2)

    confidence = get_confidence(probability)
    variability = jitter() * (1 - confidence) * MAX_JITTER_MS

    if probability > 0.65:
        adaptive_delay = base_delay * 0.75
    elif probability < 0.35:
        adaptive_delay = base_delay * 1.25
    else:
        adaptive_delay = base_delay

    goal_factor = (
        1.0
        + (activity - 0.5) * weights.goal_adjustment_weight
        + (features.temp_score - 0.5) * weights.temperature_weight
    )

    return PredictionOutput(
        drink_probability=probability,
        next_reminder_delay=round(adaptive_delay + variability),
        goal_adjustment_factor=clamp(goal_factor, *GOAL_FACTOR_RANGE),
    )
