"""
Tool: Telemetry
Purpose: Best-effort usage events (reminder sent, response, manual log)

Nothing reads these events back. Failures are logged and reported as False,
never raised, so a dead endpoint cannot break the response flow.

Usage:
    from hydrotime.mobile.telemetry import send_telemetry

    send_telemetry("manual_log", config.telemetry, water_volume=250)
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

import httpx

from hydrotime.config_models import TelemetryConfig
from hydrotime.logging_config import get_logger


logger = get_logger(__name__)

VALID_EVENT_TYPES = ["reminder_sent", "reminder_response", "manual_log"]


def send_telemetry(
    event_type: str,
    config: TelemetryConfig,
    client: httpx.Client | None = None,
    **fields: Any,
) -> bool:
    """
    POST one event to the telemetry endpoint.

    Args:
        event_type: One of VALID_EVENT_TYPES
        config: Telemetry settings; nothing is sent unless enabled with a url
        client: Optional httpx client (injected in tests)
        **fields: Extra event fields, e.g. response="done", water_volume=250

    Returns:
        True if the endpoint accepted the event
    """
    if event_type not in VALID_EVENT_TYPES:
        raise ValueError(f"Invalid event type: {event_type}. Must be one of {VALID_EVENT_TYPES}")

    if not config.enabled or not config.url:
        return False

    event = {**fields, "event_type": event_type, "timestamp": datetime.now().isoformat()}

    try:
        if client is not None:
            response = client.post(config.url, json=event, timeout=config.timeout_seconds)
        else:
            response = httpx.post(config.url, json=event, timeout=config.timeout_seconds)
    except httpx.HTTPError as e:
        logger.warning(f"Telemetry error: {e}")
        return False

    if not response.is_success:
        logger.warning(f"Telemetry send failed: {response.status_code}")
        return False
    return True
