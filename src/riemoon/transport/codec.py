"""Transport codec for protocol messages.

Serialization itself is done by the protobuf runtime; this module adds the
stream framing (a 4-byte big-endian length ahead of each message) and maps
decoding failures onto transport errors.
"""

from __future__ import annotations

import errno
import struct
from typing import Optional

from google.protobuf.message import DecodeError, EncodeError

from ..errors import TransportError
from ..protocol.schema import Msg


_HEADER = struct.Struct("!I")
HEADER_SIZE = _HEADER.size


def encode_msg(msg: Msg) -> bytes:
    try:
        return msg.SerializeToString()
    except EncodeError as exc:
        raise TransportError(errno.EINVAL, f"cannot encode message: {exc}") from exc


def decode_msg(data: bytes) -> Msg:
    msg = Msg()
    try:
        msg.ParseFromString(data)
    except DecodeError as exc:
        raise TransportError(errno.EBADMSG, f"malformed message: {exc}") from exc
    return msg


def encode_frame(msg: Msg) -> bytes:
    """Return the serialized *msg* with its length prefix."""

    data = encode_msg(msg)
    return _HEADER.pack(len(data)) + data


class FrameBuffer:
    """Reassemble length-prefixed frames from arbitrarily sized chunks."""

    def __init__(self, limit: Optional[int] = None):
        self._buffer = bytearray()
        self.limit = limit

    def __len__(self):
        return len(self._buffer)

    def feed(self, chunk: bytes) -> None:
        self._buffer.extend(chunk)

    def pop(self) -> Optional[bytes]:
        """Return the next complete frame body, or None if one is not yet
        available.
        """

        buffer = self._buffer
        if len(buffer) < HEADER_SIZE:
            return None

        (length,) = _HEADER.unpack_from(buffer)
        if self.limit is not None and length > self.limit:
            raise TransportError(
                errno.EMSGSIZE, f"frame of {length} bytes exceeds limit of {self.limit}"
            )

        end = HEADER_SIZE + length
        if len(buffer) < end:
            return None

        body = bytes(buffer[HEADER_SIZE:end])
        del buffer[:end]
        return body

    def clear(self) -> None:
        self._buffer.clear()
