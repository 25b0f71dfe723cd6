"""ZeroMQ stream transport.

The collector speaks plain TCP, so this uses a ZeroMQ STREAM socket rather
than the ROUTER/DEALER pairs ZeroMQ peers use among themselves. Reconnects
are disabled: a dropped connection is reported, never silently re-established.
"""

from __future__ import annotations

import atexit
import errno
import logging
import time
from typing import Optional

import zmq
from zmq.utils.monitor import recv_monitor_message

from ...errors import TransportError, TransportTimeout, TransportConnectionError
from ...protocol.schema import Msg
from ..base import Transport
from ..codec import FrameBuffer, decode_msg
from .framing import from_stream_frames, to_stream_frames


logger = logging.getLogger(__name__)

zmq_context = zmq.Context()

_CONNECT_EVENTS = (
    zmq.EVENT_CONNECTED
    | zmq.EVENT_CLOSED
    | zmq.EVENT_DISCONNECTED
    | zmq.EVENT_CONNECT_RETRIED
)


def _milliseconds(seconds: Optional[float]) -> Optional[int]:
    if seconds is None:
        return None
    return max(0, int(seconds * 1000))


class StreamTransport(Transport):
    """Maintain one TCP connection to the collector via a STREAM socket."""

    acknowledges = True
    connect_timeout = 5.0

    def __init__(
        self,
        host: str,
        port: int,
        timeout: Optional[float] = None,
        connect_timeout: Optional[float] = None,
        max_frame: Optional[int] = None,
    ):
        Transport.__init__(self, host, port, timeout)

        if connect_timeout is not None:
            self.connect_timeout = connect_timeout

        self.address = f"tcp://{host}:{self.port}"
        self.identity = f"riemoon.{id(self)}".encode()

        self.socket: Optional[zmq.Socket] = None
        self._buffer = FrameBuffer(max_frame)
        self._peer_closed = False

    @property
    def is_open(self) -> bool:
        return self.socket is not None and not self._peer_closed

    def open(self) -> None:
        if self.socket is not None:
            return

        socket = zmq_context.socket(zmq.STREAM)
        socket.setsockopt(zmq.LINGER, 0)
        socket.setsockopt(zmq.RECONNECT_IVL, -1)
        socket.setsockopt(zmq.STREAM_NOTIFY, 1)
        socket.setsockopt(zmq.CONNECT_ROUTING_ID, self.identity)

        sndtimeo = _milliseconds(self.timeout)
        if sndtimeo is not None:
            socket.setsockopt(zmq.SNDTIMEO, sndtimeo)

        try:
            self._connect(socket)
        except TransportError:
            socket.close()
            raise

        self.socket = socket
        self._buffer.clear()
        self._peer_closed = False
        logger.info("connected to %s", self.address)

    def _connect(self, socket: zmq.Socket) -> None:
        deadline = time.monotonic() + self.connect_timeout
        monitor = socket.get_monitor_socket(_CONNECT_EVENTS)

        try:
            try:
                socket.connect(self.address)
            except zmq.ZMQError as exc:
                raise TransportConnectionError(
                    exc.errno, f"{self.address}: {exc.strerror}"
                ) from exc

            self._await_connected(monitor, deadline)
        finally:
            socket.disable_monitor()
            monitor.close()

        self._await_notification(socket, deadline)

    def _timed_out(self) -> TransportConnectionError:
        return TransportConnectionError(
            errno.ETIMEDOUT, f"{self.address}: connection timed out"
        )

    def _await_connected(self, monitor: zmq.Socket, deadline: float) -> None:
        """Block until the monitor reports the outcome of the connect."""

        remaining = deadline - time.monotonic()
        if remaining <= 0 or not monitor.poll(_milliseconds(remaining)):
            raise self._timed_out()

        event = recv_monitor_message(monitor)
        if event["event"] == zmq.EVENT_CONNECTED:
            return

        # Every other subscribed event means the connection attempt ended
        # without success.
        raise TransportConnectionError(
            errno.ECONNREFUSED, f"{self.address}: connection refused"
        )

    def _await_notification(self, socket: zmq.Socket, deadline: float) -> None:
        """Block until the socket announces the new peer.

        The STREAM socket only routes to the peer once this empty chunk has
        been delivered, which can lag slightly behind the monitor event.
        """

        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0 or not socket.poll(_milliseconds(remaining)):
                raise self._timed_out()

            try:
                parts = socket.recv_multipart()
            except zmq.ZMQError as exc:
                raise TransportConnectionError(exc.errno, exc.strerror) from exc

            identity, chunk = from_stream_frames(parts)
            if identity == self.identity and chunk == b"":
                return

    def close(self) -> None:
        socket = self.socket
        if socket is None:
            return

        self.socket = None
        self._buffer.clear()
        socket.close()
        logger.info("closed connection to %s", self.address)

    def _require_open(self) -> zmq.Socket:
        if self.socket is None:
            raise TransportConnectionError(errno.ENOTCONN)
        if self._peer_closed:
            raise TransportConnectionError(errno.EPIPE)
        return self.socket

    def send(self, msg: Msg) -> None:
        socket = self._require_open()
        frames = to_stream_frames(self.identity, msg)

        try:
            socket.send_multipart(frames)
        except zmq.Again as exc:
            raise TransportTimeout(f"{self.address}: send timed out") from exc
        except zmq.ZMQError as exc:
            raise TransportError(exc.errno, exc.strerror) from exc

        logger.debug("sent %d bytes to %s", len(frames[1]), self.address)

    def recv(self, timeout: Optional[float] = None) -> Msg:
        socket = self._require_open()

        if timeout is None:
            timeout = self.timeout

        deadline = None
        if timeout is not None:
            deadline = time.monotonic() + timeout

        while True:
            body = self._buffer.pop()
            if body is not None:
                logger.debug("received %d bytes from %s", len(body), self.address)
                return decode_msg(body)

            wait = None
            if deadline is not None:
                wait = _milliseconds(deadline - time.monotonic())

            try:
                ready = socket.poll(wait)
                if ready:
                    parts = socket.recv_multipart()
            except zmq.ZMQError as exc:
                raise TransportError(exc.errno, exc.strerror) from exc

            if not ready:
                raise TransportTimeout(f"{self.address}: no response in {timeout:.2f} sec")

            identity, chunk = from_stream_frames(parts)
            if identity != self.identity:
                continue

            if chunk:
                self._buffer.feed(chunk)
                continue

            # An empty chunk after the connect notification means the
            # collector hung up.

            self._peer_closed = True
            raise TransportConnectionError(
                errno.ECONNRESET, f"{self.address}: connection closed by peer"
            )


def _cleanup() -> None:
    zmq_context.destroy(linger=0)


atexit.register(_cleanup)
