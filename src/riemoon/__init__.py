""" Python client for the Riemann event collector. Events are described as
    plain mappings of field names to values, translated into the collector's
    protocol buffer records, and sent over TCP or UDP; queries are answered
    with the matching events.
"""

import logging

# Submodules used by multiple other components.

from . import config
from . import errors
from . import protocol
from . import transport

# Primary public-facing interfaces.

from . import client
connect = client.connect

from .client import Client, Response, Result, SendResult, QueryResult, ConnectResult
from .errors import (
    UsageError,
    TypeMismatch,
    ProtocolRejection,
    TransportError,
    TransportTimeout,
    TransportConnectionError,
)


_logger = logging.getLogger(__name__)
_logger.addHandler(logging.NullHandler())

if config.log_level() is not None:
    _logger.setLevel(config.log_level())

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
