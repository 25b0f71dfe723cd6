""" Command line access to the collector: send a single event, or run a
    query and print the matching events, one JSON object per line.

        riemoon send --service disk --state ok --metric 0.5 --tag prod
        riemoon query 'service = "disk"'
"""

import argparse
import json
import logging
import sys

from . import client
from . import config
from .protocol import fields


def _attribute(text):
    key, separator, value = text.partition('=')
    if separator == '' or key == '':
        raise argparse.ArgumentTypeError('attributes must be KEY=VALUE, not ' + repr(text))
    return key, value


def parser():

    description = 'Send events to, or query, a Riemann collector.'
    arguments = argparse.ArgumentParser(prog='riemoon', description=description)

    arguments.add_argument('--transport', default=None,
        choices=sorted(fields.KINDS),
        help='transport kind (default: $RIEMOON_TRANSPORT or tcp)')
    arguments.add_argument('--server', default=None,
        help='collector host (default: $RIEMOON_HOST or localhost)')
    arguments.add_argument('--port', type=int, default=None,
        help='collector port (default: $RIEMOON_PORT or 5555)')
    arguments.add_argument('--timeout', type=float, default=None,
        help='seconds to wait on any read or write')
    arguments.add_argument('-v', '--verbose', action='count', default=0,
        help='log more; repeat for debug output')

    commands = arguments.add_subparsers(dest='command', required=True)

    send = commands.add_parser('send', help='send one event')
    send.add_argument('-s', '--service')
    send.add_argument('-S', '--state')
    send.add_argument('-H', '--host')
    send.add_argument('-d', '--description')
    send.add_argument('-m', '--metric', type=float)
    send.add_argument('-T', '--time', type=int)
    send.add_argument('-l', '--ttl', type=float)
    send.add_argument('-t', '--tag', dest='tags', action='append', default=[])
    send.add_argument('-a', '--attribute', dest='attributes', action='append',
        type=_attribute, default=[], metavar='KEY=VALUE')

    query = commands.add_parser('query', help='print the events matching a query')
    query.add_argument('query', help='query expression, e.g. \'service = "disk"\'')

    return arguments


def event_fields(arguments):
    """ Translate parsed ``send`` arguments into an event field mapping.
        Options that were not given are left out entirely.
    """

    event = dict()

    for name in (fields.SERVICE, fields.STATE, fields.HOST, fields.DESCRIPTION,
                 fields.METRIC, fields.TIME, fields.TTL):
        value = getattr(arguments, name)
        if value is not None:
            event[name] = value

    if arguments.tags:
        event[fields.TAGS] = list(arguments.tags)

    for key, value in arguments.attributes:
        event[key] = value

    return event


def main(argv=None):

    arguments = parser().parse_args(argv)

    if arguments.verbose > 1:
        level = logging.DEBUG
    elif arguments.verbose == 1:
        level = logging.INFO
    else:
        level = config.log_level() or logging.WARNING

    logging.basicConfig(level=level, format='%(levelname)s | %(name)s | %(message)s')

    connection, code, message = client.connect(
        arguments.transport, arguments.server, arguments.port, timeout=arguments.timeout
    )

    if connection is None:
        sys.stderr.write('riemoon: cannot connect: %s (%d)\n' % (message, code))
        return 1

    with connection:
        if arguments.command == 'send':
            code, message = connection.send(event_fields(arguments))
            if code != 0:
                sys.stderr.write('riemoon: send failed: %s (%d)\n' % (message, code))
                return 1
            return 0

        response, code, message = connection.query(arguments.query)
        if response is None:
            sys.stderr.write('riemoon: query failed: %s (%d)\n' % (message, code))
            return 1

        with response:
            for item in response.as_dicts():
                sys.stdout.write(json.dumps(item, sort_keys=True) + '\n')

    return 0


if __name__ == '__main__':
    sys.exit(main())


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
