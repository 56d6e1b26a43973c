"""Ship Control telemetry: WebSocket session, frame codec, readings and fan-out."""

from __future__ import annotations

from shipcontrol.telemetry.client import Endpoint, SessionState, ShipControlClient
from shipcontrol.telemetry.codec import KEEPALIVE_TOKEN, DataCategory, decode_frame
from shipcontrol.telemetry.listeners import EventKind, ListenerRegistry
from shipcontrol.telemetry.readings import BatteryReading, TankReading
from shipcontrol.telemetry.store import ReadingSnapshot, ReadingStore
from shipcontrol.telemetry.translator import (
    state_of_charge_ratio,
    to_battery_reading,
    to_tank_reading,
)

__all__ = [
    "KEEPALIVE_TOKEN",
    "BatteryReading",
    "DataCategory",
    "Endpoint",
    "EventKind",
    "ListenerRegistry",
    "ReadingSnapshot",
    "ReadingStore",
    "SessionState",
    "ShipControlClient",
    "TankReading",
    "decode_frame",
    "state_of_charge_ratio",
    "to_battery_reading",
    "to_tank_reading",
]
