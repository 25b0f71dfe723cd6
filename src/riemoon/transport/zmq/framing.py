"""ZMQ multipart framing for protocol messages.

A STREAM socket talks raw TCP to the collector; every multipart message
carries the peer's routing id ahead of a chunk of bytes:

    routing_id, length_prefixed_msg        (outbound)
    routing_id, chunk                      (inbound, any size)

An inbound chunk of zero length is a connect or disconnect notification.
"""

from __future__ import annotations

import errno
from typing import Sequence, Tuple

from ...errors import TransportError
from ...protocol.schema import Msg
from ..codec import encode_frame


def to_stream_frames(identity: bytes, msg: Msg) -> Tuple[bytes, bytes]:
    """Encode a protocol Msg to STREAM multipart frames."""

    return (identity, encode_frame(msg))


def from_stream_frames(parts: Sequence[bytes]) -> Tuple[bytes, bytes]:
    """Split STREAM multipart frames into (routing_id, chunk)."""

    if len(parts) != 2:
        raise TransportError(
            errno.EBADMSG, f"expected 2 STREAM frames, received {len(parts)}"
        )

    return parts[0], parts[1]
