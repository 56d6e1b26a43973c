"""Tests for settings and bridge mapping configuration."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from shipcontrol.exceptions import ConfigError
from shipcontrol.models.config import AppSettings, BridgeConfig, TankMapping


class TestAppSettings:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.chdir(tmp_path)
        names = ("HOST", "PORT", "HEARTBEAT_INTERVAL", "REQUEST_INTERVAL", "RECONNECT_DELAY")
        for name in names:
            monkeypatch.delenv(f"SHIPCONTROL_{name}", raising=False)
        settings = AppSettings()
        assert settings.host is None
        assert settings.port is None
        assert settings.heartbeat_interval == 5.0
        assert settings.request_interval == 10.0
        assert settings.reconnect_delay == 3.0

    def test_from_env(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("SHIPCONTROL_HOST", "192.168.1.50")
        monkeypatch.setenv("SHIPCONTROL_PORT", "9474")
        monkeypatch.setenv("SHIPCONTROL_RECONNECT_DELAY", "1.5")
        settings = AppSettings()
        assert settings.host == "192.168.1.50"
        assert settings.port == 9474
        assert settings.reconnect_delay == 1.5

    def test_port_out_of_range(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("SHIPCONTROL_PORT", "70000")
        with pytest.raises(ValidationError):
            AppSettings()


class TestBridgeConfigLoad:
    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        config = BridgeConfig.load(tmp_path / "absent.json")
        assert config.tank_mappings == []
        assert config.battery_mappings == []
        assert config.source == "shipcontrol"

    def test_plugin_style_keys(self, tmp_path: Path) -> None:
        path = tmp_path / "bridge.json"
        path.write_text(
            json.dumps(
                {
                    "tankMappings": [{"tankName": "EP_1", "path": "tanks.freshWater.0"}],
                    "batteryMappings": [
                        {"batteryName": "GE_TD", "path": "electrical.batteries.10"}
                    ],
                }
            )
        )
        config = BridgeConfig.load(path)
        assert config.tank_path("EP_1") == "tanks.freshWater.0"
        assert config.battery_path("GE_TD") == "electrical.batteries.10"
        assert config.tank_path("EP_2") is None
        assert config.battery_path("EP_1") is None

    def test_snake_case_keys(self, tmp_path: Path) -> None:
        path = tmp_path / "bridge.json"
        path.write_text(
            json.dumps(
                {
                    "tank_mappings": [{"tank_name": "EP_2", "path": "tanks.fuel.0"}],
                    "source": "boat",
                }
            )
        )
        config = BridgeConfig.load(str(path))
        assert config.tank_path("EP_2") == "tanks.fuel.0"
        assert config.source == "boat"

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "bridge.json"
        path.write_text("{not json")
        with pytest.raises(ConfigError, match="Invalid bridge config"):
            BridgeConfig.load(path)

    def test_invalid_shape(self, tmp_path: Path) -> None:
        path = tmp_path / "bridge.json"
        path.write_text(json.dumps({"tankMappings": [{"path": "tanks.fuel.0"}]}))
        with pytest.raises(ConfigError):
            BridgeConfig.load(path)

    def test_first_matching_mapping_wins(self) -> None:
        config = BridgeConfig(
            tank_mappings=[
                TankMapping(tank_name="EP_1", path="tanks.a"),
                TankMapping(tank_name="EP_1", path="tanks.b"),
            ]
        )
        assert config.tank_path("EP_1") == "tanks.a"
