"""Canonical tank and battery readings, independent of the wire format."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class TankReading:
    """Latest known state of one tank.

    ``level`` is kept on the appliance's 0-100 scale; consumers convert it
    to a ratio themselves.
    """

    name: str
    level: int | float | None
    capacity: int | float | None
    auto_switch_mode: bool | None
    valve_state: str | None
    module_id: int | None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class BatteryReading:
    """Latest known state of one battery.

    ``state_of_charge`` is a 0-1 ratio, or ``None`` when the appliance did
    not report a usable value.
    """

    name: str
    voltage: int | float | None
    current: int | float | None
    state_of_charge: float | None
    health_level: str | None
    module_id: int | None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


Reading = TankReading | BatteryReading
