""" The user-facing operations: :func:`connect`, :func:`Client.send`, and
    :func:`Client.query`.

    Usage errors, including event fields that cannot be coerced to their
    wire type, are raised immediately; nothing is transmitted in that case.
    Everything that can go wrong at runtime (the connection cannot be made,
    a read or write fails, the collector rejects a query) is reported in the
    returned result object instead. Results unpack positionally::

        client, code, message = riemoon.connect('tcp', 'localhost', 5555)
        code, message = client.send({'service': 'disk', 'metric': 0.5})
        response, code, message = client.query('service = "disk"')

    Nothing is retried; every failure is reported the first time it occurs.
"""

from __future__ import annotations

import errno
import logging
import numbers
from collections.abc import Mapping
from typing import Tuple

from . import config
from . import transport as transports
from .errors import ProtocolRejection, TransportError, UsageError
from .protocol import event, factory, fields
from .protocol.schema import Event, Msg


logger = logging.getLogger(__name__)


class Result:
    """ Outcome of one operation. A successful result has *code* 0; a failed
        one carries the exception describing the failure as *error*, with
        *code* and *message* taken from it: the errno and its text for
        transport failures, or -1 and the collector's own text for a
        rejected query.
    """

    def __init__(self, code=0, message=fields.SUCCESS, error=None):
        self.code = code
        self.message = message
        self.error = error

    @classmethod
    def failure(cls, error):
        if isinstance(error, ProtocolRejection):
            return cls(error.code, error.text, error)
        return cls(error.errno, error.strerror, error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def __iter__(self):
        return iter((self.code, self.message))

    def __repr__(self):
        return '%s(code=%r, message=%r)' % (type(self).__name__, self.code, self.message)

    def raise_for_error(self):
        """ Raise the failure described by this result, if any. """

        if self.error is not None:
            raise self.error


class SendResult(Result):
    pass


class QueryResult(Result):
    """ Unpacks as ``(response, code, message)``; *response* is None unless
        the query succeeded.
    """

    def __init__(self, response=None, code=0, message=fields.SUCCESS, error=None):
        Result.__init__(self, code, message, error)
        self.response = response

    @classmethod
    def failure(cls, error):
        result = Result.failure(error)
        return cls(None, result.code, result.message, error)

    def __iter__(self):
        return iter((self.response, self.code, self.message))


class ConnectResult(Result):
    """ Unpacks as ``(client, code, message)``; *client* is None unless the
        connection was established.
    """

    def __init__(self, client=None, code=0, message=fields.SUCCESS, error=None):
        Result.__init__(self, code, message, error)
        self.client = client

    @classmethod
    def failure(cls, error):
        result = Result.failure(error)
        return cls(None, result.code, result.message, error)

    def __iter__(self):
        return iter((self.client, self.code, self.message))



class Response:
    """ The events matched by a successful query, in the order the collector
        returned them. A :class:`Response` owns the decoded message until
        :func:`close` is called, either directly or by leaving a ``with``
        block; any further access is a :class:`UsageError`.
    """

    def __init__(self, msg: Msg):
        self._msg = msg

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def __iter__(self):
        return iter(self.events)

    def __len__(self):
        return len(self._require().events)

    def __repr__(self):
        if self._msg is None:
            return '<Response released>'
        return '<Response %d events>' % (len(self._msg.events))

    def _require(self) -> Msg:
        if self._msg is None:
            raise UsageError('response has been released')
        return self._msg

    @property
    def released(self) -> bool:
        return self._msg is None

    @property
    def events(self) -> Tuple[Event, ...]:
        return tuple(self._require().events)

    def as_dicts(self):
        """ Return every event as a plain dictionary, see :func:`event.as_dict`.
        """

        return [event.as_dict(item) for item in self.events]

    def close(self):
        self._msg = None


# end of class Response



class Client:
    """ Owns exactly one transport connection to the collector. Operations
        are synchronous and complete in the order they are issued; a
        :class:`Client` must not be shared between threads without external
        locking.

        Over transports where the collector acknowledges every message, the
        acknowledgements for :func:`send` calls are left unread until the
        next :func:`query`, which discards them before reading its own
        response.
    """

    def __init__(self, transport: transports.Transport):
        self.transport = transport
        self._unacknowledged = 0

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def __repr__(self):
        return '<Client %r>' % (self.transport,)

    @property
    def closed(self) -> bool:
        return not self.transport.is_open

    def close(self):
        self.transport.close()
        self._unacknowledged = 0


    def send(self, *items) -> SendResult:
        """ Send one event per mapping in *items*, all in a single message.
            Sending no events at all is legal. Raises :class:`UsageError` if
            an item is not a mapping, and :class:`TypeMismatch` if a field
            cannot be coerced; in either case nothing is sent.
        """

        for item in items:
            if not isinstance(item, Mapping):
                raise UsageError('events must be mappings, not ' + type(item).__name__)

        events = [event.build(item) for item in items]
        msg = factory.events(events)

        try:
            self.transport.send(msg)
        except TransportError as exc:
            logger.warning('send to %r failed: %s', self.transport, exc)
            return SendResult.failure(exc)

        if self.transport.acknowledges:
            self._unacknowledged += 1

        logger.debug('sent %d events', len(events))
        return SendResult()


    def query(self, string: str) -> QueryResult:
        """ Ask the collector for the events matching the query expression
            *string*. A rejected query is reported with code -1 and the
            collector's error text, verbatim.
        """

        msg = factory.query(string)

        if not self.transport.receives:
            return QueryResult.failure(TransportError(errno.ENOTSUP))

        try:
            self.transport.send(msg)
        except TransportError as exc:
            logger.warning('query to %r failed: %s', self.transport, exc)
            return QueryResult.failure(exc)

        # The reply to this query stays owed until it has been read, so a
        # query that times out leaves it to be discarded by the next one.

        owed = 0
        if self.transport.acknowledges:
            owed = 1
            self._unacknowledged += 1

        try:
            self._discard_acknowledgements(owed)
            response = self.transport.recv()
        except TransportError as exc:
            logger.warning('query to %r failed: %s', self.transport, exc)
            return QueryResult.failure(exc)

        self._unacknowledged -= owed

        if not response.ok:
            if response.HasField('error'):
                text = response.error
            else:
                text = 'query rejected by collector'

            logger.warning('collector rejected query %r: %s', string, text)
            return QueryResult.failure(ProtocolRejection(text))

        logger.debug('query %r matched %d events', string, len(response.events))
        return QueryResult(Response(response))


    def _discard_acknowledgements(self, keep=0):
        """ Read and drop the replies owed for earlier messages, leaving
            *keep* of them unread.
        """

        while self._unacknowledged > keep:
            reply = self.transport.recv()
            self._unacknowledged -= 1

            if not reply.ok:
                logger.warning('collector rejected an earlier message: %s', reply.error)


# end of class Client



def _port(port):

    if isinstance(port, bool) or not isinstance(port, numbers.Integral):
        raise UsageError('port must be an integer, not ' + type(port).__name__)

    port = int(port)
    if port < 0 or port > 65535:
        raise UsageError('port out of range: %d' % (port))

    return port


def connect(kind=None, host=None, port=None, *, timeout=None, connect_timeout=None) -> ConnectResult:
    """ Connect to the collector at *host*:*port* using the transport *kind*,
        one of ``tcp`` (or ``stream``) and ``udp`` (or ``datagram``). Any
        argument left as None takes its default from :mod:`riemoon.config`.

        An invalid *kind*, *host*, or *port* raises :class:`UsageError`. A
        connection that cannot be established is reported in the returned
        :class:`ConnectResult`, which unpacks as ``(client, code, message)``.
    """

    if kind is None:
        kind = config.kind()

    if host is None:
        host = config.host()

    if port is None:
        port = config.port()

    if timeout is None:
        timeout = config.timeout()

    if connect_timeout is None:
        connect_timeout = config.connect_timeout()

    if not isinstance(kind, str):
        raise UsageError('transport kind must be a string, not ' + type(kind).__name__)

    try:
        canonical = fields.KINDS[kind]
    except KeyError:
        raise UsageError('invalid transport kind: ' + repr(kind)) from None

    if not isinstance(host, str):
        raise UsageError('host must be a string, not ' + type(host).__name__)

    port = _port(port)

    try:
        transport = transports.create(
            canonical, host, port, timeout, connect_timeout, config.max_datagram()
        )
    except TransportError as exc:
        logger.warning('cannot connect to %s:%d over %s: %s', host, port, canonical, exc)
        return ConnectResult.failure(exc)

    return ConnectResult(Client(transport))


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
