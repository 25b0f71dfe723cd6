""" Protocol buffer message classes for the collector's wire format. The
    classes are generated at import time from a descriptor equivalent to
    the collector's ``proto.proto``; the field numbers and types below must
    match it exactly, since they are all the collector sees on the wire.

    Only the message layout lives here. Serialization is left entirely to
    the protobuf runtime, see :mod:`riemoon.transport.codec`.
"""

from google.protobuf import descriptor_pb2
from google.protobuf import descriptor_pool
from google.protobuf import message_factory


_Field = descriptor_pb2.FieldDescriptorProto

OPTIONAL = _Field.LABEL_OPTIONAL
REQUIRED = _Field.LABEL_REQUIRED
REPEATED = _Field.LABEL_REPEATED

BOOL = _Field.TYPE_BOOL
DOUBLE = _Field.TYPE_DOUBLE
FLOAT = _Field.TYPE_FLOAT
INT64 = _Field.TYPE_INT64
SINT64 = _Field.TYPE_SINT64
STRING = _Field.TYPE_STRING
MESSAGE = _Field.TYPE_MESSAGE

package = 'riemann'


# Each entry: (number, name, label, type, message type name or None).

layout = {
    'State': (
        (1, 'time',             OPTIONAL, INT64,   None),
        (2, 'state',            OPTIONAL, STRING,  None),
        (3, 'service',          OPTIONAL, STRING,  None),
        (4, 'host',             OPTIONAL, STRING,  None),
        (5, 'description',      OPTIONAL, STRING,  None),
        (6, 'once',             OPTIONAL, BOOL,    None),
        (7, 'tags',             REPEATED, STRING,  None),
        (8, 'ttl',              OPTIONAL, FLOAT,   None),
    ),
    'Event': (
        (1, 'time',             OPTIONAL, INT64,   None),
        (2, 'state',            OPTIONAL, STRING,  None),
        (3, 'service',          OPTIONAL, STRING,  None),
        (4, 'host',             OPTIONAL, STRING,  None),
        (5, 'description',      OPTIONAL, STRING,  None),
        (7, 'tags',             REPEATED, STRING,  None),
        (8, 'ttl',              OPTIONAL, FLOAT,   None),
        (9, 'attributes',       REPEATED, MESSAGE, 'Attribute'),
        (10, 'time_micros',     OPTIONAL, INT64,   None),
        (13, 'metric_sint64',   OPTIONAL, SINT64,  None),
        (14, 'metric_d',        OPTIONAL, DOUBLE,  None),
        (15, 'metric_f',        OPTIONAL, FLOAT,   None),
    ),
    'Query': (
        (1, 'string',           OPTIONAL, STRING,  None),
    ),
    'Msg': (
        (2, 'ok',               OPTIONAL, BOOL,    None),
        (3, 'error',            OPTIONAL, STRING,  None),
        (4, 'states',           REPEATED, MESSAGE, 'State'),
        (5, 'query',            OPTIONAL, MESSAGE, 'Query'),
        (6, 'events',           REPEATED, MESSAGE, 'Event'),
    ),
    'Attribute': (
        (1, 'key',              REQUIRED, STRING,  None),
        (2, 'value',            OPTIONAL, STRING,  None),
    ),
}


def _file_descriptor():
    """ Assemble the FileDescriptorProto describing every message in
        :data:`layout`.
    """

    proto = descriptor_pb2.FileDescriptorProto()
    proto.name = 'riemoon/proto.proto'
    proto.package = package
    proto.syntax = 'proto2'

    for message_name, fields in layout.items():
        message = proto.message_type.add()
        message.name = message_name

        for number, name, label, type, type_name in fields:
            field = message.field.add()
            field.number = number
            field.name = name
            field.label = label
            field.type = type

            if type_name is not None:
                field.type_name = '.%s.%s' % (package, type_name)

    return proto


pool = descriptor_pool.DescriptorPool()
_descriptor = pool.AddSerializedFile(_file_descriptor().SerializeToString())


def _message_class(name):
    descriptor = pool.FindMessageTypeByName(package + '.' + name)
    return message_factory.GetMessageClass(descriptor)


Attribute = _message_class('Attribute')
Event = _message_class('Event')
Msg = _message_class('Msg')
Query = _message_class('Query')
State = _message_class('State')


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
