import errno

import pytest

import riemoon
from riemoon.protocol import event, factory
from riemoon.protocol.schema import Msg
from riemoon.transport import codec


def test_events_message():

    first = event.build({'service': 'a'})
    second = event.build({'service': 'b'})

    msg = factory.events([first, second])

    assert [item.service for item in msg.events] == ['a', 'b']
    assert not msg.HasField('query')


def test_empty_events_message():

    msg = factory.events([])

    assert len(msg.events) == 0
    assert not msg.HasField('query')
    assert codec.encode_msg(msg) == b''


def test_query_message():

    msg = factory.query('service = "disk"')

    assert msg.query.string == 'service = "disk"'
    assert len(msg.events) == 0


def test_query_must_be_a_string():

    with pytest.raises(riemoon.UsageError):
        factory.query(42)


def test_wire_layout():
    """ Field numbers must match the collector's own schema. """

    assert codec.encode_msg(Msg(ok=True)) == b'\x10\x01'
    assert codec.encode_msg(factory.query('a')) == b'\x2a\x03\x0a\x01a'

    msg = factory.events([event.build({'service': 's'})])
    assert codec.encode_msg(msg) == b'\x32\x03\x1a\x01s'


def test_frame_prefix():

    msg = factory.query('a')
    frame = codec.encode_frame(msg)

    assert frame[:4] == b'\x00\x00\x00\x05'
    assert codec.decode_msg(frame[4:]).query.string == 'a'


def test_frame_buffer_reassembly():

    frame = codec.encode_frame(factory.query('service = "disk"'))
    frames = codec.FrameBuffer()

    frames.feed(frame[:2])
    assert frames.pop() is None

    frames.feed(frame[2:9])
    assert frames.pop() is None

    frames.feed(frame[9:] + frame)
    first = frames.pop()
    second = frames.pop()

    assert first == frame[4:]
    assert second == frame[4:]
    assert frames.pop() is None
    assert len(frames) == 0


def test_frame_buffer_limit():

    frames = codec.FrameBuffer(limit=8)
    frames.feed(b'\x00\x00\x01\x00')

    with pytest.raises(riemoon.TransportError) as raised:
        frames.pop()

    assert raised.value.errno == errno.EMSGSIZE


def test_malformed_message():

    with pytest.raises(riemoon.TransportError) as raised:
        codec.decode_msg(b'\xff\xff')

    assert raised.value.errno == errno.EBADMSG


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
