"""
Tool: Online Learner
Purpose: Nudge the weights after every observed reminder response

One sample, one step. The error is target minus predicted probability and
each weight moves by error * learning_rate * its feature value. This is a
cheap stand-in for a gradient, not backpropagation, and it is meant to run
synchronously inside the response handler.

Usage:
    from hydrotime.learning.learner import update_weights

    new_weights = update_weights(weights, prediction_input, actual_response=True)
    save_weights(store, new_weights)  # caller persists; nothing is mutated
"""

from __future__ import annotations

from dataclasses import replace

from hydrotime.learning.features import clamp
from hydrotime.learning.models import NetworkWeights, PredictionInput
from hydrotime.learning.predictor import JitterSource, extract_features, predict_next_reminder
from hydrotime.logging_config import get_logger


logger = get_logger(__name__)

# ml per kg of body weight for the "goal met today" heuristic
GOAL_ML_PER_KG = 33

SCALAR_BOUNDS = (0.0, 2.0)
HIDDEN_WEIGHT_BOUNDS = (0.5, 3.0)
BIAS_BOUNDS = (-1.0, 1.0)
GOAL_WEIGHT_BOUNDS = (0.0, 0.5)

HIDDEN_WEIGHT_STEP = 0.3
BIAS_STEP = 0.2
GOAL_WEIGHT_STEP = 0.1


def goal_met_today(prediction_input: PredictionInput) -> bool:
    """True when today's drinks exceed weight_kg * 33 ml."""
    today = prediction_input.current_date.date()
    total_today = sum(
        d.volume for d in prediction_input.recent_drinks if d.timestamp.date() == today
    )
    return total_today > prediction_input.weight * GOAL_ML_PER_KG


def update_weights(
    weights: NetworkWeights,
    prediction_input: PredictionInput,
    actual_response: bool,
    jitter: JitterSource | None = None,
) -> NetworkWeights:
    """
    Return new weights adjusted toward the observed response.

    Args:
        weights: Current weights (left untouched)
        prediction_input: The same context a prediction would use
        actual_response: Whether the person actually drank / acknowledged
        jitter: Random source forwarded to the prediction; it only affects
            the delay, never the probability used here

    Returns:
        A new NetworkWeights value with every field inside its bounds
    """
    prediction = predict_next_reminder(prediction_input, weights, jitter=jitter)
    target = 1.0 if actual_response else 0.0
    error = target - prediction.drink_probability
    lr = weights.learning_rate

    features = extract_features(prediction_input)
    hour = prediction_input.current_hour

    hour_weights = list(weights.hour_weights)
    hour_weights[hour] = clamp(hour_weights[hour] + error * lr)

    goal_error = (1.0 if goal_met_today(prediction_input) else 0.0) - prediction.goal_adjustment_factor

    logger.debug(
        "weights_update",
        hour=hour,
        error=round(error, 4),
        goal_error=round(goal_error, 4),
    )

    def step(value: float, feature: float, bounds: tuple[float, float]) -> float:
        return clamp(value + error * lr * feature, *bounds)

    return replace(
        weights,
        hour_weights=tuple(hour_weights),
        response_weight=step(weights.response_weight, features.response_rate, SCALAR_BOUNDS),
        volume_weight=step(weights.volume_weight, features.volume_score, SCALAR_BOUNDS),
        frequency_weight=step(weights.frequency_weight, features.pattern_score, SCALAR_BOUNDS),
        activity_weight=step(weights.activity_weight, features.activity_level, SCALAR_BOUNDS),
        temperature_weight=step(weights.temperature_weight, features.temp_score, SCALAR_BOUNDS),
        humidity_weight=step(weights.humidity_weight, prediction_input.humidity, SCALAR_BOUNDS),
        hidden_weight=step(weights.hidden_weight, HIDDEN_WEIGHT_STEP, HIDDEN_WEIGHT_BOUNDS),
        bias=step(weights.bias, BIAS_STEP, BIAS_BOUNDS),
        goal_adjustment_weight=clamp(
            weights.goal_adjustment_weight + goal_error * lr * GOAL_WEIGHT_STEP,
            *GOAL_WEIGHT_BOUNDS,
        ),
    )
