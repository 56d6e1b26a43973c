"""Tests for SignalKBridge: readings -> mapped Signal K deltas."""

from __future__ import annotations

import json
import logging
from typing import Any

import pytest

from shipcontrol.exceptions import TransportError
from shipcontrol.models.config import BatteryMapping, BridgeConfig, TankMapping
from shipcontrol.signalk.bridge import SignalKBridge
from shipcontrol.telemetry.client import ShipControlClient


@pytest.fixture()
def config() -> BridgeConfig:
    return BridgeConfig(
        tank_mappings=[TankMapping(tank_name="EP_1", path="tanks.freshWater.0")],
        battery_mappings=[BatteryMapping(battery_name="GE_TD", path="electrical.batteries.10")],
        source="test",
    )


@pytest.fixture()
def client() -> ShipControlClient:
    return ShipControlClient("localhost", 9474, error_output=lambda _: None)


@pytest.fixture()
def deltas() -> list[dict[str, Any]]:
    return []


@pytest.fixture()
def bridge(
    client: ShipControlClient, config: BridgeConfig, deltas: list[dict[str, Any]]
) -> SignalKBridge:
    b = SignalKBridge(client, config, on_delta=deltas.append)
    b.attach()
    return b


class TestBridgeRouting:
    def test_mapped_tank(
        self,
        client: ShipControlClient,
        bridge: SignalKBridge,
        deltas: list[dict[str, Any]],
        tank_frame: str,
    ) -> None:
        client.handle_message(tank_frame)
        assert bridge.delta_count == 1
        values = deltas[0]["updates"][0]["values"]
        assert {"path": "tanks.freshWater.0.currentLevel", "value": 0.42} in values
        assert deltas[0]["updates"][0]["source"]["label"] == "test"

    def test_mapped_battery(
        self,
        client: ShipControlClient,
        bridge: SignalKBridge,
        deltas: list[dict[str, Any]],
        battery_frame: str,
    ) -> None:
        client.handle_message(battery_frame)
        paths = {v["path"]: v["value"] for v in deltas[0]["updates"][0]["values"]}
        assert paths["electrical.batteries.10.voltage"] == 12.6
        assert paths["electrical.batteries.10.capacity.stateOfCharge"] == pytest.approx(
            191 / 255
        )

    def test_unmapped_tank_is_skipped(
        self,
        client: ShipControlClient,
        bridge: SignalKBridge,
        deltas: list[dict[str, Any]],
        tank_payload: dict[str, Any],
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        tank_payload["tank_type"] = "EP_9"
        with caplog.at_level(logging.DEBUG, logger="shipcontrol.signalk.bridge"):
            client.handle_message(json.dumps(tank_payload))
        assert deltas == []
        assert bridge.unmapped_count == 1
        assert "EP_9" in caplog.text

    def test_unmapped_battery_is_skipped(
        self,
        client: ShipControlClient,
        bridge: SignalKBridge,
        deltas: list[dict[str, Any]],
        battery_payload: dict[str, Any],
    ) -> None:
        battery_payload["battery_type"] = "OTHER"
        client.handle_message(json.dumps(battery_payload))
        assert deltas == []
        assert bridge.unmapped_count == 1

    def test_empty_reading_emits_nothing(
        self, client: ShipControlClient, bridge: SignalKBridge, deltas: list[dict[str, Any]]
    ) -> None:
        client.handle_message(json.dumps({"class": "Tank", "tank_type": "EP_1"}))
        assert deltas == []
        assert bridge.delta_count == 0
        assert bridge.unmapped_count == 0


class TestBridgeAttach:
    def test_attach_is_idempotent(
        self,
        client: ShipControlClient,
        bridge: SignalKBridge,
        deltas: list[dict[str, Any]],
        tank_frame: str,
    ) -> None:
        bridge.attach()
        client.handle_message(tank_frame)
        assert len(deltas) == 1

    def test_transport_error_is_logged(
        self, bridge: SignalKBridge, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.ERROR, logger="shipcontrol.signalk.bridge"):
            bridge.on_transport_error(TransportError("refused", url="ws://localhost:9474"))
        assert "refused" in caplog.text

    def test_status_message(self, bridge: SignalKBridge) -> None:
        assert bridge.status_message == "Not connected (disconnected)"
