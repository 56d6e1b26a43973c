"""Listener registry: event kind -> ordered list of synchronous callbacks.

Each subscriber is error-isolated. One subscriber raising does not keep
the others from seeing the event.
"""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)


class EventKind(StrEnum):
    TANK_UPDATE = "tank_update"
    BATTERY_UPDATE = "battery_update"
    TRANSPORT_ERROR = "transport_error"


class ListenerRegistry:
    """Append-only subscriber lists, one per :class:`EventKind`."""

    def __init__(self, error_output: Callable[[str], Any] | None = None) -> None:
        self._listeners: dict[EventKind, list[Callable[[Any], Any]]] = {
            kind: [] for kind in EventKind
        }
        self._error = error_output

    def subscribe(self, kind: EventKind, callback: Callable[[Any], Any]) -> None:
        """Register *callback* for *kind*. There is no way to unsubscribe."""
        self._listeners[EventKind(kind)].append(callback)

    def listener_count(self, kind: EventKind) -> int:
        return len(self._listeners[EventKind(kind)])

    def notify(self, kind: EventKind, payload: Any) -> int:
        """Call every subscriber for *kind* with *payload*, in registration order.

        Iterates over a snapshot, so a callback subscribing another callback
        only affects later events. Returns the number of subscribers that
        raised.
        """
        failures = 0
        for callback in list(self._listeners[EventKind(kind)]):
            try:
                callback(payload)
            except Exception as exc:
                failures += 1
                if self._error is None:
                    logger.warning("Listener %r failed for %s", callback, kind, exc_info=True)
                else:
                    self._error(f"Listener {callback!r} failed for {kind}: {exc!r}")
        return failures
