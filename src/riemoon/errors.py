"""Exceptions raised by, or reported through, the riemoon client.

Usage errors are programmer errors and are always raised. Transport failures
and collector rejections are runtime conditions; the client reports them in
its result objects instead of raising.
"""

import errno
import os


class UsageError(TypeError):
    """The caller passed arguments of the wrong type or an invalid value."""


class TypeMismatch(UsageError):
    """An event field value cannot be coerced to the type its field requires."""

    def __init__(self, field, expected, value):
        self.field = field
        self.expected = expected
        self.value = value
        UsageError.__init__(
            self, f"{field!r}: expected {expected}, got {type(value).__name__}"
        )


class ProtocolRejection(Exception):
    """The collector answered, but with ``ok`` false.

    The collector's own error text is kept verbatim as ``text``.
    """

    code = -1

    def __init__(self, text):
        self.text = text
        Exception.__init__(self, text)


# Transport agnostic exceptions. These carry an errno and its strerror text,
# which is what the client reports back to callers.

class TransportError(OSError):
    """Base class for all transport-layer errors."""

    def __init__(self, code, text=None):
        if text is None:
            text = os.strerror(code)
        OSError.__init__(self, code, text)


class TransportTimeout(TransportError):
    """A read or write did not complete in time."""

    def __init__(self, text=None):
        TransportError.__init__(self, errno.ETIMEDOUT, text)


class TransportConnectionError(TransportError):
    """The transport could not establish or maintain a connection."""


__all__ = (
    "UsageError",
    "TypeMismatch",
    "ProtocolRejection",
    "TransportError",
    "TransportTimeout",
    "TransportConnectionError",
)
