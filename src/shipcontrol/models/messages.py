"""Pydantic v2 models for the JSON messages a Ship Control appliance pushes.

Only the fields the bridge reads are declared; everything else the appliance
sends is kept as model extras so nothing is lost when debugging.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

_EXTRA_ALLOW = ConfigDict(extra="allow", populate_by_name=True)


class ShipControlMessage(BaseModel):
    model_config = _EXTRA_ALLOW

    message_class: str = Field(alias="class")
    is_alived: bool | None = None
    obj_kind: str | None = None


class TankMessage(ShipControlMessage):
    """A ``class: "Tank"`` push."""

    tank_type: str
    tank_level: int | float | None = None
    tank_capacity: int | float | None = None
    tank_auto_switch_mode: bool | None = None
    tank_valve_state: str | None = None
    tank_module_id: int | None = None


class BatteryMessage(ShipControlMessage):
    """A ``class: "Battery"`` push.

    ``battery_state_of_charge`` is left untyped: the appliance reports it on
    a 0-255 scale and the translator decides what counts as a usable value.
    Autonomy, temperature, manufacturer and the other diagnostic fields end
    up in ``model_extra``.
    """

    battery_type: str
    battery_voltage_level: int | float | None = None
    battery_current: int | float | None = None
    battery_state_of_charge: Any = None
    battery_health_level: str | None = None
    battery_module_id: int | None = None

