"""Translate appliance wire messages into canonical readings."""

from __future__ import annotations

import math
from typing import Any

from shipcontrol.models.messages import BatteryMessage, TankMessage
from shipcontrol.telemetry.readings import BatteryReading, TankReading

# battery_state_of_charge is a single unsigned byte on the appliance.
STATE_OF_CHARGE_SCALE = 255


def _to_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(result):
        return None
    return result


def state_of_charge_ratio(raw: Any) -> float | None:
    """Scale a raw 0-255 state of charge to a 0-1 ratio.

    Missing, zero, non-numeric and out-of-range values mean "unknown" and
    return ``None`` so that consumers never mistake a missing reading for an
    empty battery.
    """
    value = _to_float(raw)
    if value is None or not 0 < value <= STATE_OF_CHARGE_SCALE:
        return None
    return value / STATE_OF_CHARGE_SCALE


def to_tank_reading(message: TankMessage) -> TankReading:
    return TankReading(
        name=message.tank_type,
        level=message.tank_level,
        capacity=message.tank_capacity,
        auto_switch_mode=message.tank_auto_switch_mode,
        valve_state=message.tank_valve_state,
        module_id=message.tank_module_id,
    )


def to_battery_reading(message: BatteryMessage) -> BatteryReading:
    return BatteryReading(
        name=message.battery_type,
        voltage=message.battery_voltage_level,
        current=message.battery_current,
        state_of_charge=state_of_charge_ratio(message.battery_state_of_charge),
        health_level=message.battery_health_level,
        module_id=message.battery_module_id,
    )
