"""Shared fixtures: sample appliance frames."""

from __future__ import annotations

import json
from typing import Any

import pytest

TANK_PAYLOAD: dict[str, Any] = {
    "class": "Tank",
    "tank_type": "EP_1",
    "tank_level": 42,
    "tank_capacity": 200,
    "tank_auto_switch_mode": False,
    "tank_valve_state": "CLOSED",
    "tank_module_id": 1,
}

BATTERY_PAYLOAD: dict[str, Any] = {
    "class": "Battery",
    "battery_type": "GE_TD",
    "battery_voltage_level": 12.6,
    "battery_current": -3.2,
    "battery_state_of_charge": 191,
    "battery_health_level": "GREEN",
    "battery_module_id": 2,
}


@pytest.fixture()
def tank_payload() -> dict[str, Any]:
    return dict(TANK_PAYLOAD)


@pytest.fixture()
def battery_payload() -> dict[str, Any]:
    return dict(BATTERY_PAYLOAD)


@pytest.fixture()
def tank_frame() -> str:
    return json.dumps(TANK_PAYLOAD)


@pytest.fixture()
def battery_frame() -> str:
    return json.dumps(BATTERY_PAYLOAD)
