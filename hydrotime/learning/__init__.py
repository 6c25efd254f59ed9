"""Learning - the adaptive reminder-timing engine

Philosophy:
    Infer from behavior, never ask. The person's drink log and the way
    they answer reminders are the only training signal. No surveys.

Core Principle:
    A tiny, hand-tuned scoring function that nudges its own weights after
    every response. It is not a trainable network: the formulas are fixed
    and only the weights move.

Components:
    features.py: Turn raw history into scalar features
        - Response rate (affirmative answers / all answers)
        - Recency-weighted drink volume
        - Hour-of-day drinking histogram

    predictor.py: Score the current moment
        - Probability of drinking soon
        - Delay until the next reminder
        - Multiplier for the daily goal

    learner.py: Single-sample weight update from one observed response

    forecaster.py: Roll the predictor forward to plan a batch of reminders

State:
    Only NetworkWeights persist between calls, and they are owned by the
    caller. Every function here is pure apart from the random jitter draw.
"""

# Feature defaults used when history is empty
NEUTRAL_RESPONSE_RATE = 0.5
DEFAULT_DRINK_VOLUME_ML = 250.0
RECENCY_DECAY_HOURS = 4.0

# Normalization ranges
VOLUME_RANGE_ML = (100.0, 600.0)
TEMPERATURE_RANGE_C = (0.0, 40.0)

# Delay model
BASE_REMINDER_DELAY_MS = 2 * 60 * 60 * 1000
MAX_JITTER_MS = 30 * 60 * 1000
MIN_FORECAST_DELAY_MS = 60 * 1000

# Forecast rollout
SIMULATED_DRINK_THRESHOLD = 0.6
SIMULATED_DRINK_VOLUME_ML = 250.0
