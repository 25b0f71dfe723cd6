"""UDP datagram transport.

One serialized message per datagram, no length prefix. The collector never
answers over UDP, so only sending is supported.
"""

from __future__ import annotations

import errno
import logging
import socket
from typing import Optional

from ...errors import TransportError, TransportTimeout, TransportConnectionError
from ...protocol.schema import Msg
from ..base import Transport
from ..codec import encode_msg


logger = logging.getLogger(__name__)


class DatagramTransport(Transport):

    acknowledges = False
    receives = False
    max_size = 16384

    def __init__(
        self,
        host: str,
        port: int,
        timeout: Optional[float] = None,
        max_size: Optional[int] = None,
    ):
        Transport.__init__(self, host, port, timeout)

        if max_size is not None:
            self.max_size = int(max_size)

        self.socket: Optional[socket.socket] = None

    @property
    def is_open(self) -> bool:
        return self.socket is not None

    def open(self) -> None:
        if self.socket is not None:
            return

        try:
            candidates = socket.getaddrinfo(self.host, self.port, type=socket.SOCK_DGRAM)
        except socket.gaierror as exc:
            raise TransportConnectionError(
                errno.EADDRNOTAVAIL, f"{self.host}: {exc.strerror}"
            ) from exc

        # Connecting a datagram socket only fixes the default peer; try each
        # resolved address until one is accepted.

        failure = None
        for family, type, proto, _canonname, address in candidates:
            sock = socket.socket(family, type, proto)
            try:
                sock.connect(address)
            except OSError as exc:
                sock.close()
                failure = exc
                continue

            sock.settimeout(self.timeout)
            self.socket = sock
            logger.info("opened datagram socket to %s:%d", self.host, self.port)
            return

        raise TransportConnectionError(
            failure.errno or errno.EHOSTUNREACH, f"{self.host}:{self.port}: {failure.strerror}"
        ) from failure

    def close(self) -> None:
        sock = self.socket
        if sock is None:
            return

        self.socket = None
        sock.close()
        logger.info("closed datagram socket to %s:%d", self.host, self.port)

    def send(self, msg: Msg) -> None:
        sock = self.socket
        if sock is None:
            raise TransportConnectionError(errno.ENOTCONN)

        data = encode_msg(msg)
        if len(data) > self.max_size:
            raise TransportError(
                errno.EMSGSIZE,
                f"message of {len(data)} bytes exceeds datagram limit of {self.max_size}",
            )

        try:
            sock.send(data)
        except TimeoutError as exc:
            raise TransportTimeout(f"{self.host}:{self.port}: send timed out") from exc
        except OSError as exc:
            raise TransportError(exc.errno or errno.EIO, exc.strerror) from exc

        logger.debug("sent %d bytes to %s:%d", len(data), self.host, self.port)

    def recv(self, timeout: Optional[float] = None) -> Msg:
        raise TransportError(errno.ENOTSUP)
