"""WebSocket client for the Ship Control appliance feed.

Session lifecycle::

    DISCONNECTED --connect()--> CONNECTING --open--> OPEN
         ^                                            |
         |            (close / error, not requested)  |
         +---- reconnect after a fixed delay <--------+

While OPEN the client keeps two kinds of timers running: a heartbeat that
sends the ``ALIVE`` token, and one ``fetch_map`` request per data category.
The appliance only pushes data while it is being polled, so both are needed
for a steady stream.

Everything runs on the event loop that called :meth:`ShipControlClient.connect`;
frames, timers and listener callbacks never run concurrently.
"""

from __future__ import annotations

import asyncio
import functools
import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from websockets.asyncio.client import connect as ws_connect
from websockets.exceptions import ConnectionClosed

from shipcontrol.exceptions import TransportError
from shipcontrol.telemetry.codec import (
    KEEPALIVE_TOKEN,
    BatteryFrame,
    DataCategory,
    KeepAlive,
    MalformedFrame,
    TankFrame,
    decode_frame,
    encode_fetch_map,
)
from shipcontrol.telemetry.listeners import EventKind, ListenerRegistry
from shipcontrol.telemetry.store import ReadingStore
from shipcontrol.telemetry.translator import to_battery_reading, to_tank_reading

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterable
    from types import TracebackType

    from shipcontrol.telemetry.readings import BatteryReading, TankReading

logger = logging.getLogger(__name__)

HEARTBEAT_INTERVAL = 5.0
REQUEST_INTERVAL = 10.0
RECONNECT_DELAY = 3.0

DEFAULT_CATEGORIES: tuple[DataCategory, ...] = (DataCategory.TANKS, DataCategory.BATTERY)


class SessionState(StrEnum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSING = "closing"


@dataclass(frozen=True, slots=True)
class Endpoint:
    """Address of the appliance's WebSocket server."""

    host: str
    port: int

    @property
    def url(self) -> str:
        return f"ws://{self.host}:{self.port}"


class ShipControlClient:
    """Keeps a session with one appliance alive and fans out decoded readings.

    Usage::

        client = ShipControlClient("192.168.1.50", 9474)
        client.subscribe_tank_updates(on_tank)
        client.connect()
        ...
        await client.aclose()

    *error_output* and *debug_output* receive free-form text; they default to
    this module's logger.
    """

    def __init__(
        self,
        host: str,
        port: int | str,
        *,
        error_output: Callable[[str], Any] | None = None,
        debug_output: Callable[[str], Any] | None = None,
        heartbeat_interval: float = HEARTBEAT_INTERVAL,
        request_interval: float = REQUEST_INTERVAL,
        reconnect_delay: float = RECONNECT_DELAY,
        categories: Iterable[DataCategory] = DEFAULT_CATEGORIES,
        connect_factory: Callable[[str], Awaitable[Any]] | None = None,
    ) -> None:
        self._endpoint = Endpoint(host=host, port=int(port))
        self._error: Callable[[str], Any] = error_output or logger.error
        self._debug: Callable[[str], Any] = debug_output or logger.debug
        self._heartbeat_interval = heartbeat_interval
        self._request_interval = request_interval
        self._reconnect_delay = reconnect_delay
        self._categories = tuple(categories)
        self._connect_factory = connect_factory or functools.partial(
            ws_connect, ping_interval=None
        )

        self._listeners = ListenerRegistry(self._error)
        self._tanks: ReadingStore[TankReading] = ReadingStore()
        self._batteries: ReadingStore[BatteryReading] = ReadingStore()

        self._state = SessionState.DISCONNECTED
        self._ws: Any = None
        self._session_task: asyncio.Task[None] | None = None
        self._timers: set[asyncio.Task[None]] = set()
        self._reconnect_handle: asyncio.TimerHandle | None = None
        self._teardown: set[asyncio.Task[Any]] = set()
        self._intentional_close = False
        self._frames_received = 0
        self._reconnect_attempts = 0

    # -- Properties -----------------------------------------------------------

    @property
    def endpoint(self) -> Endpoint:
        return self._endpoint

    @property
    def url(self) -> str:
        return self._endpoint.url

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_connected(self) -> bool:
        return self._state is SessionState.OPEN

    @property
    def tanks(self) -> ReadingStore[TankReading]:
        """Latest reading per tank name."""
        return self._tanks

    @property
    def batteries(self) -> ReadingStore[BatteryReading]:
        """Latest reading per battery name."""
        return self._batteries

    @property
    def frames_received(self) -> int:
        return self._frames_received

    @property
    def reconnect_attempts(self) -> int:
        """Reconnects scheduled since the last successful open."""
        return self._reconnect_attempts

    # -- Subscriptions ----------------------------------------------------------

    def subscribe_tank_updates(self, callback: Callable[[TankReading], Any]) -> None:
        self._listeners.subscribe(EventKind.TANK_UPDATE, callback)

    def subscribe_battery_updates(self, callback: Callable[[BatteryReading], Any]) -> None:
        self._listeners.subscribe(EventKind.BATTERY_UPDATE, callback)

    def subscribe_transport_errors(self, callback: Callable[[TransportError], Any]) -> None:
        self._listeners.subscribe(EventKind.TRANSPORT_ERROR, callback)

    # -- Lifecycle ---------------------------------------------------------------

    def connect(self) -> None:
        """Start a connection attempt and return immediately.

        Must be called from a running event loop. Does nothing if a session
        is already active or if :meth:`disconnect` has been called.
        """
        if self._intentional_close:
            self._debug("connect() ignored: client has been disconnected")
            return
        if self._state is not SessionState.DISCONNECTED:
            self._debug(f"connect() ignored: session is {self._state}")
            return

        loop = asyncio.get_running_loop()
        if self._reconnect_handle is not None:
            self._reconnect_handle.cancel()
            self._reconnect_handle = None

        self._state = SessionState.CONNECTING
        self._debug(f"Connecting to {self.url}")
        self._session_task = loop.create_task(
            self._run_session(), name=f"shipcontrol-session-{self.url}"
        )

    def disconnect(self) -> None:
        """Close the session for good.

        Cancels the pending reconnect and every timer before the transport
        handle is released, so nothing is sent afterwards. Idempotent, and
        safe to call before a connection attempt has finished.
        """
        self._intentional_close = True

        if self._reconnect_handle is not None:
            self._reconnect_handle.cancel()
            self._reconnect_handle = None

        for timer in self._cancel_timers():
            self._track_teardown(timer)

        task, self._session_task = self._session_task, None
        if task is not None and not task.done():
            task.cancel()
            self._track_teardown(task)

        ws, self._ws = self._ws, None
        if ws is None:
            if self._state is not SessionState.CLOSING:
                self._state = SessionState.DISCONNECTED
            return

        self._state = SessionState.CLOSING
        close_task = asyncio.get_running_loop().create_task(self._close_transport(ws))
        self._track_teardown(close_task)

    async def aclose(self) -> None:
        """Disconnect and wait until the transport and timers are torn down."""
        self.disconnect()
        pending = [t for t in self._teardown if t is not asyncio.current_task()]
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    async def __aenter__(self) -> ShipControlClient:
        self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    # -- Inbound frames ------------------------------------------------------------

    def handle_message(self, raw: str | bytes) -> None:
        """Decode one frame, update the store and notify listeners.

        Never raises on bad input. Malformed frames go to the error output
        once; frames of an unknown class are dropped. Exceptions from the
        error or debug output propagate; the receive loop logs them and
        keeps the session open.
        """
        self._frames_received += 1
        frame = decode_frame(raw)

        if isinstance(frame, KeepAlive):
            return
        if isinstance(frame, MalformedFrame):
            self._error(f"{frame.reason}: {frame.raw}")
            return

        if isinstance(frame, TankFrame):
            tank = to_tank_reading(frame.message)
            self._debug(f"Received tank information: {tank.name}")
            self._tanks.put(tank)
            self._listeners.notify(EventKind.TANK_UPDATE, tank)
        elif isinstance(frame, BatteryFrame):
            battery = to_battery_reading(frame.message)
            self._debug(f"Received battery information: {battery.name}")
            self._batteries.put(battery)
            self._listeners.notify(EventKind.BATTERY_UPDATE, battery)
        else:
            self._debug(f"Ignoring message of class {frame.message_class!r}")

    # -- Session internals --------------------------------------------------------

    async def _run_session(self) -> None:
        try:
            ws = await self._connect_factory(self.url)
        except Exception as exc:
            self._report_transport_error(exc, f"Failed to connect to {self.url}")
            self._handle_close(None, str(exc))
            return

        self._ws = ws
        self._on_open(ws)

        messages = aiter(ws)
        while True:
            try:
                message = await anext(messages)
            except StopAsyncIteration:
                break
            except Exception as exc:
                self._report_transport_error(exc, "WebSocket error")
                break
            # Faults in output sinks never end the session.
            try:
                self.handle_message(message)
            except Exception:
                logger.exception("Failed to handle frame from %s", self.url)

        self._handle_close(getattr(ws, "close_code", None), getattr(ws, "close_reason", None))

    def _on_open(self, ws: Any) -> None:
        self._state = SessionState.OPEN
        self._reconnect_attempts = 0
        self._debug("WebSocket connected")

        self._start_timer(ws, self._heartbeat_interval, KEEPALIVE_TOKEN, KEEPALIVE_TOKEN)
        for category in self._categories:
            self._start_timer(
                ws,
                self._request_interval,
                encode_fetch_map(category),
                f"{category.value} information request",
            )

    def _handle_close(self, code: int | None, reason: str | None) -> None:
        self._state = SessionState.CLOSING
        self._cancel_timers()
        self._ws = None
        self._session_task = None
        self._state = SessionState.DISCONNECTED
        self._error(f"WebSocket closed: {code} - {reason or ''}")

        if self._intentional_close:
            return

        self._reconnect_attempts += 1
        self._debug(f"Will try to reconnect in {self._reconnect_delay:g}s")
        loop = asyncio.get_running_loop()
        self._reconnect_handle = loop.call_later(self._reconnect_delay, self._reconnect)

    def _reconnect(self) -> None:
        self._reconnect_handle = None
        self.connect()

    def _report_transport_error(self, exc: Exception, context: str) -> None:
        error = TransportError(f"{context}: {exc}", url=self.url)
        error.__cause__ = exc
        self._error(f"WebSocket error: {exc}")
        self._listeners.notify(EventKind.TRANSPORT_ERROR, error)

    async def _close_transport(self, ws: Any) -> None:
        try:
            await ws.close()
        except Exception:
            logger.debug("Error while closing transport", exc_info=True)
        finally:
            if self._ws is None and self._state is SessionState.CLOSING:
                self._state = SessionState.DISCONNECTED
        self._debug("WebSocket closed by client")

    # -- Timers ---------------------------------------------------------------

    def _start_timer(self, ws: Any, interval: float, frame: str, label: str) -> None:
        task = asyncio.get_running_loop().create_task(self._repeat(ws, interval, frame, label))
        self._timers.add(task)
        task.add_done_callback(self._timers.discard)

    def _cancel_timers(self) -> list[asyncio.Task[None]]:
        timers = list(self._timers)
        for task in timers:
            task.cancel()
        self._timers.clear()
        return timers

    def _track_teardown(self, task: asyncio.Task[Any]) -> None:
        self._teardown.add(task)
        task.add_done_callback(self._teardown.discard)

    async def _repeat(self, ws: Any, interval: float, frame: str, label: str) -> None:
        while True:
            await asyncio.sleep(interval)
            if ws is not self._ws or self._state is not SessionState.OPEN:
                return
            try:
                await ws.send(frame)
            except ConnectionClosed:
                self._debug(f"Could not send {label}: connection is closing")
                return
            except Exception as exc:
                self._error(f"Failed to send {label}: {exc}")
                continue
            self._debug(f"Sent: {label}")
