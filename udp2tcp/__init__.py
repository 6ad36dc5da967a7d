"""UDP-to-TCP bridge: forward datagrams from a shared UDP port to one TCP backend."""

from udp2tcp.bridge import Bridge, forward, forward_once, run_bridge, send_all
from udp2tcp.errors import (
    AttachExhaustionError,
    BridgeError,
    FatalReceiveError,
    FatalWriteError,
    ResolutionError,
)

__all__ = [
    "AttachExhaustionError",
    "Bridge",
    "BridgeError",
    "FatalReceiveError",
    "FatalWriteError",
    "ResolutionError",
    "forward",
    "forward_once",
    "run_bridge",
    "send_all",
]
