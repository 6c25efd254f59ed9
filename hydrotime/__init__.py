"""hydrotime - adaptive hydration reminder timing

Philosophy:
    Learn when a person actually drinks instead of nagging on a fixed
    clock. Every reminder response is a data point; the schedule adapts.

Components:
    learning/: the reminder-timing engine (features, prediction,
        online learning, batch forecasting)
    mobile/: notification scheduling and telemetry side reports
    goals.py: daily goal formulas
    storage.py: key/value persistence for profile, logs and weights
    service.py: wires the engine to storage and notifications

Configuration: args/hydration.yaml
"""

from pathlib import Path


__version__ = "0.1.0"

# Path constants
PROJECT_ROOT = Path(__file__).parent.parent
ARGS_DIR = PROJECT_ROOT / "args"
CONFIG_PATH = ARGS_DIR / "hydration.yaml"
