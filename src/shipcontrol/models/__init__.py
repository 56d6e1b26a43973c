from __future__ import annotations

from shipcontrol.models.config import AppSettings, BatteryMapping, BridgeConfig, TankMapping
from shipcontrol.models.messages import BatteryMessage, ShipControlMessage, TankMessage

__all__ = [
    "AppSettings",
    "BatteryMapping",
    "BatteryMessage",
    "BridgeConfig",
    "ShipControlMessage",
    "TankMapping",
    "TankMessage",
]
