"""Fixtures for telemetry tests: an in-memory stand-in for the appliance socket."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

import pytest
from websockets.exceptions import ConnectionClosedOK


class FakeConnection:
    """Mimics the parts of a websockets client connection the client uses."""

    def __init__(self) -> None:
        self.sent: list[str] = []
        self.closed = False
        self.close_code: int | None = None
        self.close_reason: str | None = None
        self._inbox: asyncio.Queue[Any] = asyncio.Queue()

    def push(self, frame: str | bytes) -> None:
        """Deliver a frame from the appliance."""
        self._inbox.put_nowait(frame)

    def drop(self, code: int = 1006, reason: str = "gone") -> None:
        """Simulate the appliance closing the connection."""
        self.close_code = code
        self.close_reason = reason
        self._inbox.put_nowait(None)

    def fail(self, exc: Exception) -> None:
        """Simulate a transport fault while receiving."""
        self.close_code = 1006
        self._inbox.put_nowait(exc)

    async def send(self, frame: str) -> None:
        if self.closed:
            raise ConnectionClosedOK(None, None)
        self.sent.append(frame)

    async def close(self) -> None:
        self.closed = True
        self.close_code = 1000
        self._inbox.put_nowait(None)

    def __aiter__(self) -> FakeConnection:
        return self

    async def __anext__(self) -> Any:
        item = await self._inbox.get()
        if item is None:
            self.closed = True
            raise StopAsyncIteration
        if isinstance(item, Exception):
            self.closed = True
            raise item
        return item


class FakeTransport:
    """Connection factory handed to ``ShipControlClient(connect_factory=...)``."""

    def __init__(self, *, fail_times: int = 0, block: bool = False) -> None:
        self.fail_times = fail_times
        self.block = block
        self.release = asyncio.Event()
        self.attempts = 0
        self.urls: list[str] = []
        self.connections: list[FakeConnection] = []

    @property
    def current(self) -> FakeConnection:
        return self.connections[-1]

    async def __call__(self, url: str) -> FakeConnection:
        self.attempts += 1
        self.urls.append(url)
        if self.block:
            await self.release.wait()
        if self.attempts <= self.fail_times:
            raise OSError("Connection refused")
        conn = FakeConnection()
        self.connections.append(conn)
        return conn


async def _wait_for(
    predicate: Callable[[], bool], timeout: float = 2.0, interval: float = 0.005
) -> None:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not met before timeout")
        await asyncio.sleep(interval)


@pytest.fixture()
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture()
def make_transport() -> Callable[..., FakeTransport]:
    return FakeTransport


@pytest.fixture()
def wait_for() -> Callable[..., Awaitable[None]]:
    return _wait_for
