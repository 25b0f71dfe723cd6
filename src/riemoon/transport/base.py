"""Transport interface.

This is the (small) contract that transport implementations should follow.
It lives outside :mod:`riemoon.protocol` so the protocol remains transport-agnostic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from ..errors import (
    TransportError,
    TransportTimeout,
    TransportConnectionError,
)
from ..protocol.schema import Msg


class Transport(ABC):
    """Minimal contract for a wire-level transport.

    Implementations are not thread-safe; one transport serves one logical
    caller at a time.
    """

    #: Whether the collector replies to every message sent on this transport,
    #: not just to queries.
    acknowledges = False

    #: Whether anything is ever received on this transport.
    receives = True

    def __init__(self, host: str, port: int, timeout: Optional[float] = None):
        self.host = host
        self.port = int(port)
        self.timeout = timeout

    def __repr__(self):
        state = "open" if self.is_open else "closed"
        return f"<{type(self).__name__} {self.host}:{self.port} {state}>"

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    @abstractmethod
    def open(self) -> None:
        """Establish the underlying connection/socket."""

    @abstractmethod
    def close(self) -> None:
        """Tear down the underlying connection/socket."""

    @abstractmethod
    def send(self, msg: Msg) -> None:
        """Send a protocol Msg."""

    @abstractmethod
    def recv(self, timeout: Optional[float] = None) -> Msg:
        """Receive the next protocol Msg."""

    @property
    def is_open(self) -> bool:
        """Whether the transport is currently connected."""
        return False


__all__ = (
    "Transport",
    "TransportError",
    "TransportTimeout",
    "TransportConnectionError",
)
