""" Default settings, drawn from the environment. Every value is read at the
    time it is requested, so changes to the environment take effect on the
    next :func:`riemoon.connect` call rather than at import time.

    ``RIEMOON_TRANSPORT``
        Transport kind used when none is given: ``tcp`` or ``udp``.
    ``RIEMOON_HOST``, ``RIEMOON_PORT``
        Collector address used when none is given.
    ``RIEMOON_TIMEOUT``
        Seconds to wait on any single read or write; unset blocks forever.
    ``RIEMOON_CONNECT_TIMEOUT``
        Seconds to wait for a stream connection to be established.
    ``RIEMOON_MAX_DATAGRAM``
        Largest payload, in bytes, sent over the datagram transport.
    ``RIEMOON_LOG_LEVEL``
        Level name applied to the ``riemoon`` logger.
"""

from __future__ import annotations

import os
from typing import Optional

from .protocol import fields


def env_str(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.environ.get(name)
    if value is None:
        return default

    value = value.strip()
    return value or default


def _env_number(name, default, convert):
    value = env_str(name)
    if value is None:
        return default

    try:
        return convert(value)
    except ValueError:
        raise ValueError(f"{name} must be a number, not {value!r}") from None


def kind() -> str:
    return env_str("RIEMOON_TRANSPORT", fields.DEFAULT_KIND)


def host() -> str:
    return env_str("RIEMOON_HOST", fields.DEFAULT_HOST)


def port() -> int:
    return _env_number("RIEMOON_PORT", fields.DEFAULT_PORT, int)


def timeout() -> Optional[float]:
    return _env_number("RIEMOON_TIMEOUT", None, float)


def connect_timeout() -> float:
    return _env_number("RIEMOON_CONNECT_TIMEOUT", 5.0, float)


def max_datagram() -> int:
    return _env_number("RIEMOON_MAX_DATAGRAM", 16384, int)


def log_level() -> Optional[str]:
    level = env_str("RIEMOON_LOG_LEVEL")
    if level is None:
        return None
    return level.upper()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
