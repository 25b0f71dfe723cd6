import collections
import errno
import queue
import socket
import struct
import threading

import pytest

import riemoon
from riemoon.errors import TransportConnectionError
from riemoon.protocol.schema import Msg
from riemoon.transport import Transport


class FakeTransport(Transport):
    """ A transport that records every message sent and hands back queued
        replies. Either direction can be made to fail by queueing an
        exception instead of a reply, or by setting *send_error*.
    """

    def __init__(self, acknowledges=False):
        Transport.__init__(self, 'fake', 5555)
        self.acknowledges = acknowledges
        self.sent = list()
        self.replies = collections.deque()
        self.received = 0
        self.send_error = None
        self._open = True

    @property
    def is_open(self):
        return self._open

    def open(self):
        self._open = True

    def close(self):
        self._open = False

    def send(self, msg):
        if not self._open:
            raise TransportConnectionError(errno.ENOTCONN)
        if self.send_error is not None:
            raise self.send_error
        self.sent.append(msg)

    def recv(self, timeout=None):
        if not self._open:
            raise TransportConnectionError(errno.ENOTCONN)
        if not self.replies:
            raise TransportConnectionError(errno.ECONNRESET)

        self.received += 1
        reply = self.replies.popleft()
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def fake():
    return FakeTransport()


@pytest.fixture
def client(fake):
    return riemoon.Client(fake)



def _read_exactly(connection, size):
    data = b''
    while len(data) < size:
        chunk = connection.recv(size - len(data))
        if chunk == b'':
            return None
        data += chunk
    return data


def acknowledge(msg):
    return Msg(ok=True)


class LoopbackCollector:
    """ A single-connection TCP peer speaking the collector's framing. Every
        message received is put on the *received* queue; *answer* returns
        the reply for each one, or None to hang up instead.
    """

    def __init__(self, answer=acknowledge):
        self.answer = answer
        self.received = queue.Queue()

        self.listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self.listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self.listener.bind(('127.0.0.1', 0))
        self.listener.listen(1)
        self.listener.settimeout(10)
        self.port = self.listener.getsockname()[1]

        self.thread = threading.Thread(target=self.run, daemon=True)
        self.thread.start()

    def run(self):
        try:
            connection, _address = self.listener.accept()
        except OSError:
            return

        with connection:
            while True:
                header = _read_exactly(connection, 4)
                if header is None:
                    return

                (length,) = struct.unpack('!I', header)
                body = _read_exactly(connection, length)
                if body is None:
                    return

                msg = Msg()
                msg.ParseFromString(body)
                self.received.put(msg)

                reply = self.answer(msg)
                if reply is None:
                    return

                data = reply.SerializeToString()
                connection.sendall(struct.pack('!I', len(data)) + data)

    def close(self):
        self.listener.close()


@pytest.fixture
def collector():
    peer = LoopbackCollector()
    yield peer
    peer.close()


@pytest.fixture
def udp_collector():
    peer = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    peer.bind(('127.0.0.1', 0))
    peer.settimeout(5)
    yield peer
    peer.close()


@pytest.fixture
def closed_port():
    """ A local TCP port with nothing listening on it. """

    placeholder = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    placeholder.bind(('127.0.0.1', 0))
    port = placeholder.getsockname()[1]
    placeholder.close()
    return port


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
