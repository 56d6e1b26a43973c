from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from shipcontrol.exceptions import ConfigError

DEFAULT_CONFIG_FILE = "~/.config/shipcontrol/bridge.json"


class AppSettings(BaseSettings):
    """Connection settings populated from environment variables and .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="SHIPCONTROL_",
        extra="ignore",
    )

    host: str | None = None
    port: int | None = Field(default=None, ge=1, le=65535)
    heartbeat_interval: float = Field(default=5.0, gt=0)
    request_interval: float = Field(default=10.0, gt=0)
    reconnect_delay: float = Field(default=3.0, gt=0)
    config_file: str = DEFAULT_CONFIG_FILE


class TankMapping(BaseModel):
    """Routes one appliance tank (e.g. ``EP_1``) to a Signal K path prefix."""

    model_config = ConfigDict(populate_by_name=True)

    tank_name: str = Field(alias="tankName")
    path: str
    """Signal K path prefix, e.g. ``tanks.freshWater.0``."""


class BatteryMapping(BaseModel):
    """Routes one appliance battery (e.g. ``GE_TD``) to a Signal K path prefix."""

    model_config = ConfigDict(populate_by_name=True)

    battery_name: str = Field(alias="batteryName")
    path: str
    """Signal K path prefix, e.g. ``electrical.batteries.10``."""


class BridgeConfig(BaseModel):
    """Mapping configuration for the Signal K bridge.

    Loaded from ``~/.config/shipcontrol/bridge.json``. Keys written by the
    old Signal K plugin UI (``tankMappings``, ``tankName`` ...) are accepted
    as aliases.
    """

    model_config = ConfigDict(populate_by_name=True)

    tank_mappings: list[TankMapping] = Field(default_factory=list, alias="tankMappings")
    battery_mappings: list[BatteryMapping] = Field(
        default_factory=list, alias="batteryMappings"
    )
    source: str = "shipcontrol"

    @classmethod
    def load(cls, path: Path | str | None = None) -> BridgeConfig:
        """Load configuration from a JSON file.

        Falls back to defaults if the file does not exist. Raises
        :class:`ConfigError` when the file exists but cannot be used.
        """
        resolved = Path(path or DEFAULT_CONFIG_FILE).expanduser()

        if not resolved.exists():
            return cls()

        try:
            raw: Any = json.loads(resolved.read_text(encoding="utf-8"))
            return cls.model_validate(raw)
        except (OSError, json.JSONDecodeError, ValidationError) as exc:
            raise ConfigError(f"Invalid bridge config {resolved}: {exc}") from exc

    def tank_path(self, tank_name: str) -> str | None:
        """Return the Signal K path prefix for *tank_name*, or ``None``."""
        for mapping in self.tank_mappings:
            if mapping.tank_name == tank_name:
                return mapping.path
        return None

    def battery_path(self, battery_name: str) -> str | None:
        """Return the Signal K path prefix for *battery_name*, or ``None``."""
        for mapping in self.battery_mappings:
            if mapping.battery_name == battery_name:
                return mapping.path
        return None
