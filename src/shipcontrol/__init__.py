"""shipcontrol: bridge a Ship Control appliance's WebSocket feed to Signal K."""

from __future__ import annotations

__version__ = "0.3.0"
