"""Signal K bridge.

Wires the pipeline: ShipControlClient listeners → mapping lookup →
DeltaBuilder → ``on_delta`` callback. Readings without a configured mapping
are logged at debug level and skipped.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from shipcontrol.signalk.delta import DeltaBuilder

if TYPE_CHECKING:
    from collections.abc import Callable

    from shipcontrol.exceptions import TransportError
    from shipcontrol.models.config import BridgeConfig
    from shipcontrol.telemetry.client import ShipControlClient
    from shipcontrol.telemetry.readings import BatteryReading, TankReading

logger = logging.getLogger(__name__)


class SignalKBridge:
    """Turns readings from a :class:`ShipControlClient` into Signal K deltas.

    Usage::

        bridge = SignalKBridge(client, BridgeConfig.load(), on_delta=publish)
        bridge.attach()
        client.connect()
    """

    def __init__(
        self,
        client: ShipControlClient,
        config: BridgeConfig,
        on_delta: Callable[[dict[str, Any]], Any],
    ) -> None:
        self._client = client
        self._config = config
        self._on_delta = on_delta
        self._builder = DeltaBuilder(source=config.source)
        self._attached = False
        self._delta_count = 0
        self._unmapped_count = 0

    @property
    def delta_count(self) -> int:
        return self._delta_count

    @property
    def unmapped_count(self) -> int:
        return self._unmapped_count

    @property
    def status_message(self) -> str:
        if self._client.is_connected:
            return f"Connected to {self._client.url}"
        return f"Not connected ({self._client.state})"

    def attach(self) -> None:
        """Subscribe to the client. Calling it twice is a no-op."""
        if self._attached:
            return
        self._client.subscribe_tank_updates(self.on_tank)
        self._client.subscribe_battery_updates(self.on_battery)
        self._client.subscribe_transport_errors(self.on_transport_error)
        self._attached = True

    def on_tank(self, reading: TankReading) -> None:
        path = self._config.tank_path(reading.name)
        if path is None:
            self._unmapped_count += 1
            logger.debug("Could not find a tank-mapping for tank with name %s", reading.name)
            return
        self._emit(self._builder.tank_delta(reading, path))

    def on_battery(self, reading: BatteryReading) -> None:
        path = self._config.battery_path(reading.name)
        if path is None:
            self._unmapped_count += 1
            logger.debug(
                "Could not find a battery-mapping for battery with name %s", reading.name
            )
            return
        self._emit(self._builder.battery_delta(reading, path))

    def on_transport_error(self, error: TransportError) -> None:
        logger.error("Error from WS-Connection (%s): %s", self._client.url, error)

    def _emit(self, delta: dict[str, Any] | None) -> None:
        if delta is None:
            return
        self._delta_count += 1
        self._on_delta(delta)
