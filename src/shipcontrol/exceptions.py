"""Exception hierarchy for shipcontrol."""

from __future__ import annotations


class ShipControlError(Exception):
    """Base class for all shipcontrol errors."""


class TransportError(ShipControlError):
    """The WebSocket transport failed (refused, handshake error, abnormal close).

    The underlying exception, when there is one, is chained as ``__cause__``.
    """

    def __init__(self, message: str, *, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class ConfigError(ShipControlError):
    """Invalid or unreadable bridge configuration."""
