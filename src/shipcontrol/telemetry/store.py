"""In-memory store for the latest reading per tank or battery.

Keyed by the appliance-internal reading name (e.g. ``"EP_1"``). Entries are
overwritten on every update and never evicted.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Generic, TypeVar

from shipcontrol.telemetry.readings import BatteryReading, TankReading

R = TypeVar("R", TankReading, BatteryReading)


@dataclass(slots=True)
class ReadingSnapshot(Generic[R]):
    """A reading and the moment it was received."""

    reading: R
    received_at: datetime


class ReadingStore(Generic[R]):
    """Last-write-wins store of readings (single event loop, no locking)."""

    def __init__(self) -> None:
        self._data: dict[str, ReadingSnapshot[R]] = {}

    def put(self, reading: R, received_at: datetime | None = None) -> None:
        """Record or overwrite the latest reading under ``reading.name``."""
        self._data[reading.name] = ReadingSnapshot(
            reading=reading,
            received_at=received_at or datetime.now(UTC),
        )

    def get(self, name: str) -> R | None:
        """Return the latest reading for *name*, or ``None``."""
        snap = self._data.get(name)
        return snap.reading if snap is not None else None

    def get_snapshot(self, name: str) -> ReadingSnapshot[R] | None:
        return self._data.get(name)

    def get_all(self) -> dict[str, ReadingSnapshot[R]]:
        """Return a shallow copy of all current snapshots."""
        return dict(self._data)

    def age_seconds(self, name: str) -> float | None:
        """Return seconds since *name* was last updated, or ``None``."""
        snap = self._data.get(name)
        if snap is None:
            return None
        return time.time() - snap.received_at.timestamp()

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, name: object) -> bool:
        return name in self._data
