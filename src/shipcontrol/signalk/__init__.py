"""Signal K side of the bridge, mapping readings onto Signal K paths."""

from __future__ import annotations

from shipcontrol.signalk.bridge import SignalKBridge
from shipcontrol.signalk.delta import DeltaBuilder

__all__ = ["DeltaBuilder", "SignalKBridge"]
