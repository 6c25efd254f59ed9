"""
Tool: Weather
Purpose: Fetch current temperature and humidity as optional engine inputs

Uses the wttr.in JSON format. Any failure returns None and the caller
falls back to the configured defaults.

Usage:
    from hydrotime.weather import fetch_conditions

    conditions = fetch_conditions(config.weather)
    if conditions:
        conditions.temperature, conditions.humidity
"""

from __future__ import annotations

from dataclasses import dataclass

import httpx

from hydrotime.config_models import WeatherConfig
from hydrotime.logging_config import get_logger


logger = get_logger(__name__)


@dataclass(frozen=True)
class AmbientConditions:
    temperature: float  # Celsius
    humidity: float  # 0-1


def parse_conditions(payload: dict) -> AmbientConditions:
    current = payload["current_condition"][0]
    return AmbientConditions(
        temperature=float(current["temp_C"]),
        humidity=float(current["humidity"]) / 100,
    )


def fetch_conditions(
    config: WeatherConfig, client: httpx.Client | None = None
) -> AmbientConditions | None:
    if not config.enabled:
        return None

    url = config.url.format(location=config.location)
    params = {"format": "j1"}

    try:
        if client is not None:
            response = client.get(url, params=params, timeout=config.timeout_seconds)
        else:
            response = httpx.get(url, params=params, timeout=config.timeout_seconds)
        response.raise_for_status()
        return parse_conditions(response.json())
    except httpx.HTTPError as e:
        logger.warning(f"Weather fetch failed: {e}")
    except (KeyError, IndexError, TypeError, ValueError) as e:
        logger.warning(f"Weather payload malformed: {e}")
    return None
