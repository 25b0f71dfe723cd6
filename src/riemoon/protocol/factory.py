"""Convenience constructors for protocol messages."""

from __future__ import annotations

from typing import Iterable

from ..errors import UsageError
from .schema import Event, Msg


def events(items: Iterable[Event] = ()) -> Msg:
    """Wrap *items*, in order, into an events-only message.

    An empty message is legal; the collector treats it as a no-op.
    """

    msg = Msg()
    msg.events.extend(items)
    return msg


def query(string: str) -> Msg:
    """Wrap a query expression into a query-only message."""

    if not isinstance(string, str):
        raise UsageError(f"query must be a string, got {type(string).__name__}")

    msg = Msg()
    msg.query.string = string
    return msg
