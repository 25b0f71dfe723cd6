from . import fields
from . import schema
from . import event
from . import factory

from .schema import Attribute, Event, Msg, Query


"""
riemoon Protocol Layer
======================

This package defines what is said to the collector: the wire records and
the translation from caller-supplied field mappings into them. It knows
nothing about sockets.

The protocol layer MUST NOT depend on any transport implementation
(e.g. ZeroMQ, plain UDP sockets, etc).

---------------------------------------------------------------------

Layer Architecture Overview
---------------------------

User Code
    │
    ▼
Client (riemoon.client)
    High-level semantic API
    - connect()
    - send()
    - query()
    Reports transport and collector failures as results

    │
    ▼
Message Assembler (factory.py)
    Wraps records into outbound envelopes
    - events-only Msg for send
    - query-only Msg for query
    - No transport awareness

    │
    ▼
Event Builder (event.py)
    Field mapping -> Event record
    - Fixed dispatch table for well-known fields
    - Everything else becomes an attribute

    │
    ▼
Wire Schema (schema.py)
    Protocol buffer message classes
    - Msg, Event, Query, State, Attribute

    │
    ▼
Field Vocabulary (fields.py)
    Canonical names for event fields and transport kinds
    Prevents string drift across system

---------------------------------------------------------------------

Below the Protocol Layer (for context)
--------------------------------------

Codec / Framing Layer
    Maps Msg <-> bytes, length prefixes for streams

Transport Layer
    Moves bytes
    - ZeroMQ STREAM socket (TCP)
    - UDP datagram socket

---------------------------------------------------------------------
"""


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
