"""Transform tank and battery readings into Signal K delta messages.

- tank    -> ``<path>.currentLevel`` (ratio), ``<path>.capacity`` (m3)
- battery -> ``<path>.voltage``, ``<path>.current``,
  ``<path>.capacity.stateOfCharge`` (ratio)

Tank levels arrive on a 0-100 scale and are divided by 100 here. Capacities
arrive in litres and are converted to cubic metres. Battery state of charge
is already a ratio when it leaves the translator.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from shipcontrol.telemetry.readings import BatteryReading, TankReading


def _litres_to_m3(capacity: float | None) -> float | None:
    if capacity is None:
        return None
    return capacity / 1000


def _level_ratio(level: float | None) -> float | None:
    if level is None:
        return None
    return level / 100


class DeltaBuilder:
    """Stateless transformer: reading + path prefix -> Signal K delta.

    Returns ``None`` when the reading carries no value worth sending.
    """

    def __init__(self, source: str = "shipcontrol") -> None:
        self._source = source

    def tank_delta(
        self,
        reading: TankReading,
        path: str,
        timestamp: datetime | None = None,
    ) -> dict[str, Any] | None:
        return self._delta(
            {
                f"{path}.currentLevel": _level_ratio(reading.level),
                f"{path}.capacity": _litres_to_m3(reading.capacity),
            },
            timestamp,
        )

    def battery_delta(
        self,
        reading: BatteryReading,
        path: str,
        timestamp: datetime | None = None,
    ) -> dict[str, Any] | None:
        return self._delta(
            {
                f"{path}.voltage": reading.voltage,
                f"{path}.current": reading.current,
                f"{path}.capacity.stateOfCharge": reading.state_of_charge,
            },
            timestamp,
        )

    def _delta(
        self, values: dict[str, Any], timestamp: datetime | None
    ) -> dict[str, Any] | None:
        entries = [{"path": p, "value": v} for p, v in values.items() if v is not None]
        if not entries:
            return None
        ts = timestamp or datetime.now(UTC)
        return {
            "updates": [
                {
                    "source": {"label": self._source},
                    "timestamp": ts.isoformat(),
                    "values": entries,
                }
            ]
        }
