"""Encode and decode Ship Control WebSocket frames.

Inbound frames are either the bare keep-alive token ``ALIVE`` or a JSON
object carrying a ``class`` discriminator::

    {"class": "Tank", "tank_type": "EP_1", "tank_level": 42, ...}
    {"class": "Battery", "battery_type": "GE_TD", "battery_voltage_level": 12.6, ...}

Outbound frames are the same keep-alive token, or a map request::

    {"cmd": "fetch_map", "params": "Tanks", "callback_id": 1}
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from pydantic import ValidationError

from shipcontrol.models.messages import BatteryMessage, TankMessage

KEEPALIVE_TOKEN = "ALIVE"

TANK_CLASS = "Tank"
BATTERY_CLASS = "Battery"


class DataCategory(StrEnum):
    """Map categories the appliance answers ``fetch_map`` requests for."""

    TANKS = "Tanks"
    BATTERY = "Battery"

    @property
    def callback_id(self) -> int:
        """Correlation id sent with every request for this category."""
        return _CALLBACK_IDS[self]


_CALLBACK_IDS: dict[DataCategory, int] = {
    DataCategory.TANKS: 1,
    DataCategory.BATTERY: 2,
}


# -- Decoded frame shapes ----------------------------------------------------


@dataclass(frozen=True, slots=True)
class KeepAlive:
    """The appliance's keep-alive token. Nothing to do."""


@dataclass(frozen=True, slots=True)
class TankFrame:
    message: TankMessage


@dataclass(frozen=True, slots=True)
class BatteryFrame:
    message: BatteryMessage


@dataclass(frozen=True, slots=True)
class UnrecognizedFrame:
    """Valid JSON with a ``class`` this bridge does not handle."""

    message_class: str | None
    payload: Any


@dataclass(frozen=True, slots=True)
class MalformedFrame:
    """Text that could not be decoded into any known message."""

    raw: str
    reason: str


DecodedFrame = KeepAlive | TankFrame | BatteryFrame | UnrecognizedFrame | MalformedFrame


def decode_frame(raw: str | bytes) -> DecodedFrame:
    """Classify a raw WebSocket frame.

    Never raises: anything that cannot be decoded comes back as a
    :class:`MalformedFrame`.
    """
    if isinstance(raw, (bytes, bytearray)):
        try:
            text = bytes(raw).decode("utf-8")
        except UnicodeDecodeError:
            return MalformedFrame(raw=repr(bytes(raw)[:200]), reason="Binary frame is not UTF-8")
    else:
        text = raw

    if text == KEEPALIVE_TOKEN:
        return KeepAlive()

    try:
        payload = json.loads(text)
    except (json.JSONDecodeError, ValueError):
        return MalformedFrame(raw=text, reason="Received non-JSON message")

    if not isinstance(payload, dict):
        return UnrecognizedFrame(message_class=None, payload=payload)

    message_class = payload.get("class")
    try:
        if message_class == TANK_CLASS:
            return TankFrame(TankMessage.model_validate(payload))
        if message_class == BATTERY_CLASS:
            return BatteryFrame(BatteryMessage.model_validate(payload))
    except ValidationError as exc:
        return MalformedFrame(
            raw=text,
            reason=f"Invalid {message_class} message ({exc.error_count()} error(s))",
        )

    return UnrecognizedFrame(
        message_class=message_class if isinstance(message_class, str) else None,
        payload=payload,
    )


def encode_fetch_map(category: DataCategory) -> str:
    """Build the ``fetch_map`` request frame for *category*."""
    return json.dumps(
        {
            "cmd": "fetch_map",
            "params": category.value,
            "callback_id": category.callback_id,
        }
    )
