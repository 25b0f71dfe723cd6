import errno
import json

import pytest

import riemoon
from riemoon import cli
from riemoon.client import ConnectResult
from riemoon.errors import TransportConnectionError
from riemoon.protocol.schema import Msg

from conftest import FakeTransport


def test_event_fields():

    arguments = cli.parser().parse_args([
        'send', '-s', 'disk', '-S', 'ok', '-m', '0.5', '-t', 'a', '-t', 'b',
        '-a', 'rack=4', '--attribute', 'owner=ops=team',
    ])

    assert cli.event_fields(arguments) == {
        'service': 'disk',
        'state': 'ok',
        'metric': 0.5,
        'tags': ['a', 'b'],
        'rack': '4',
        'owner': 'ops=team',
    }


def test_event_fields_omit_missing():

    arguments = cli.parser().parse_args(['send', '-H', 'h1'])
    assert cli.event_fields(arguments) == {'host': 'h1'}


def test_bad_attribute():

    with pytest.raises(SystemExit) as raised:
        cli.parser().parse_args(['send', '-a', 'rack'])

    assert raised.value.code == 2


def _connected(fake):
    def connect(*args, **kwargs):
        return ConnectResult(riemoon.Client(fake))
    return connect


def test_main_send(monkeypatch):

    fake = FakeTransport()
    monkeypatch.setattr(cli.client, 'connect', _connected(fake))

    assert cli.main(['send', '--service', 'disk', '--metric', '2']) == 0
    assert fake.sent[0].events[0].service == 'disk'
    assert fake.sent[0].events[0].metric_d == 2.0
    assert not fake.is_open


def test_main_query(monkeypatch, capsys):

    fake = FakeTransport()
    answer = Msg(ok=True)
    answer.events.add(service='disk', host='h1')
    answer.events.add(service='cpu', host='h1', tags=['x'])
    fake.replies.append(answer)

    monkeypatch.setattr(cli.client, 'connect', _connected(fake))

    assert cli.main(['query', 'host = "h1"']) == 0

    lines = capsys.readouterr().out.splitlines()
    assert [json.loads(line) for line in lines] == [
        {'service': 'disk', 'host': 'h1'},
        {'service': 'cpu', 'host': 'h1', 'tags': ['x']},
    ]


def test_main_query_rejected(monkeypatch, capsys):

    fake = FakeTransport()
    fake.replies.append(Msg(ok=False, error='bad query'))
    monkeypatch.setattr(cli.client, 'connect', _connected(fake))

    assert cli.main(['query', 'nonsense']) == 1
    assert 'bad query' in capsys.readouterr().err


def test_main_cannot_connect(monkeypatch, capsys):

    def refuse(*args, **kwargs):
        return ConnectResult.failure(TransportConnectionError(errno.ECONNREFUSED))

    monkeypatch.setattr(cli.client, 'connect', refuse)

    assert cli.main(['send', '-s', 'disk']) == 1
    assert 'cannot connect' in capsys.readouterr().err


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
