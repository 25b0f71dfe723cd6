"""Transport layer implementations."""

from __future__ import annotations

from typing import Optional

from .base import (
    Transport,
    TransportError,
    TransportTimeout,
    TransportConnectionError,
)

from ..protocol import fields
from .zmq.stream import StreamTransport
from .udp.datagram import DatagramTransport


def create(
    kind: str,
    host: str,
    port: int,
    timeout: Optional[float] = None,
    connect_timeout: Optional[float] = None,
    max_datagram: Optional[int] = None,
) -> Transport:
    """Return an opened transport of the requested *kind*.

    *kind* must already be one of :data:`fields.TCP` or :data:`fields.UDP`.
    Raises :class:`TransportConnectionError` if the connection cannot be
    established.
    """

    if kind == fields.TCP:
        transport = StreamTransport(host, port, timeout, connect_timeout)
    elif kind == fields.UDP:
        transport = DatagramTransport(host, port, timeout, max_datagram)
    else:
        raise ValueError(f"unknown transport kind: {kind!r}")

    transport.open()
    return transport
