from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field

from hydrotime import CONFIG_PATH, PROJECT_ROOT
from hydrotime.logging_config import get_logger


logger = get_logger(__name__)


# =============================================================================
# HydrationConfig (args/hydration.yaml)
# =============================================================================

class EngineConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    forecast_count: int = Field(default=16, ge=1)
    background_forecast_count: int = Field(default=12, ge=1)
    history_limit: int = Field(default=20, ge=1)


class DefaultsConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    activity_level: float = Field(default=0.5, ge=0.0, le=1.0)
    temperature: float = Field(default=20.0)
    humidity: float = Field(default=0.5, ge=0.0, le=1.0)
    daily_goal: int = Field(default=2000, ge=0)


class NotificationsConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    enabled: bool = Field(default=True)
    high_confidence_threshold: float = Field(default=0.7, ge=0.0, le=1.0)
    title: str = Field(default="Hydration check")
    urgent_body: str = Field(default="You are probably dehydrated. Drink now.")
    gentle_body: str = Field(default="Small sip won't hurt.")


class TelemetryConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    enabled: bool = Field(default=False)
    url: str | None = None
    timeout_seconds: float = Field(default=5.0, gt=0)


class WeatherConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    enabled: bool = Field(default=False)
    location: str = Field(default="")
    url: str = Field(default="https://wttr.in/{location}")
    timeout_seconds: float = Field(default=5.0, gt=0)


class StorageConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    db_path: str = Field(default="data/hydration.db")

    def resolve_db_path(self) -> Path:
        path = Path(self.db_path)
        return path if path.is_absolute() else PROJECT_ROOT / path


class HydrationConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    engine: EngineConfig = Field(default_factory=EngineConfig)
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    notifications: NotificationsConfig = Field(default_factory=NotificationsConfig)
    telemetry: TelemetryConfig = Field(default_factory=TelemetryConfig)
    weather: WeatherConfig = Field(default_factory=WeatherConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)


def load_config(path: Path | str | None = None) -> HydrationConfig:
    yaml_path = Path(path) if path else CONFIG_PATH

    try:
        if yaml_path.exists():
            with open(yaml_path) as f:
                raw = yaml.safe_load(f) or {}
        else:
            raw = {}

        return HydrationConfig.model_validate(raw.get("hydration", raw))
    except Exception as e:
        logger.warning(f"Config validation failed for {yaml_path}: {e}, using defaults")
        return HydrationConfig()
