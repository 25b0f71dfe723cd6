""" Translation between free-form field mappings and the strictly typed
    :class:`Event` wire record.

    A caller describes an event as a mapping of field names to values. A
    fixed set of well-known names (see :data:`fields.WELL_KNOWN`) each map to
    exactly one wire field with one value type; every other name becomes a
    generic attribute, keyed by the original name, with its value converted
    to a string. Fields absent from the mapping are left unset on the wire.
"""

import numbers

from ..errors import TypeMismatch
from . import fields
from .schema import Event


def _string(field, value):
    """ Coerce *value* to a string for *field*. Strings pass through, bytes
        are decoded as UTF-8, and plain numbers are formatted with
        :func:`str`. Anything else, including booleans, None, and compound
        values, is rejected.
    """

    if isinstance(value, str):
        try:
            value.encode('utf-8')
        except UnicodeEncodeError:
            raise TypeMismatch(field, 'a UTF-8 string', value) from None
        return value

    if isinstance(value, bytes):
        try:
            return value.decode('utf-8')
        except UnicodeDecodeError:
            raise TypeMismatch(field, 'a UTF-8 string', value) from None

    if isinstance(value, bool):
        raise TypeMismatch(field, 'a string', value)

    if isinstance(value, numbers.Real):
        return str(value)

    raise TypeMismatch(field, 'a string', value)


_INT64_MIN = -2 ** 63
_INT64_MAX = 2 ** 63 - 1


def _integer(field, value):

    if isinstance(value, bool):
        raise TypeMismatch(field, 'an integer', value)

    if isinstance(value, numbers.Integral):
        result = int(value)
    elif isinstance(value, numbers.Real) and float(value).is_integer():
        result = int(float(value))
    else:
        raise TypeMismatch(field, 'an integer', value)

    if result < _INT64_MIN or result > _INT64_MAX:
        raise TypeMismatch(field, 'a 64-bit integer', value)

    return result


def _number(field, value):

    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise TypeMismatch(field, 'a number', value)

    try:
        return float(value)
    except OverflowError:
        raise TypeMismatch(field, 'a double-precision number', value) from None


# Setters for the well-known fields. Each one validates the value and
# writes it to the corresponding wire field.

def _set_time(event, value):
    event.time = _integer(fields.TIME, value)

def _set_state(event, value):
    event.state = _string(fields.STATE, value)

def _set_service(event, value):
    event.service = _string(fields.SERVICE, value)

def _set_host(event, value):
    event.host = _string(fields.HOST, value)

def _set_description(event, value):
    event.description = _string(fields.DESCRIPTION, value)

def _set_ttl(event, value):
    event.ttl = _number(fields.TTL, value)

def _set_metric(event, value):
    event.metric_d = _number(fields.METRIC, value)


def _set_tags(event, value):

    # A bare string is a sequence too; it is still not a list of tags.

    if not isinstance(value, (list, tuple)):
        raise TypeMismatch(fields.TAGS, 'a list of strings', value)

    tags = [_string(fields.TAGS, tag) for tag in value]
    event.tags.extend(tags)


setters = {
    fields.TIME:            _set_time,
    fields.STATE:           _set_state,
    fields.SERVICE:         _set_service,
    fields.HOST:            _set_host,
    fields.DESCRIPTION:     _set_description,
    fields.TAGS:            _set_tags,
    fields.TTL:             _set_ttl,
    fields.METRIC:          _set_metric,
}


def build(mapping):
    """ Return a new :class:`Event` populated from *mapping*. Raises
        :class:`TypeMismatch` on the first value that cannot be coerced;
        no partially populated event is ever returned.
    """

    event = Event()
    attributes = dict()

    for key, value in mapping.items():
        if not isinstance(key, str):
            raise TypeMismatch('field name', 'a string', key)

        try:
            setter = setters[key]
        except KeyError:
            attributes[_string('field name', key)] = _string(key, value)
        else:
            setter(event, value)

    for key, value in attributes.items():
        attribute = event.attributes.add()
        attribute.key = key
        attribute.value = value

    return event


def as_dict(event):
    """ Return the fields set on *event* as a plain dictionary, using the
        same names :func:`build` accepts. This is the inverse of
        :func:`build` for any event it produced; events received from the
        collector may carry their metric in any of the three metric fields,
        all of which are reported as ``metric``.
    """

    result = dict()

    for name in (fields.TIME, fields.STATE, fields.SERVICE, fields.HOST,
                 fields.DESCRIPTION, fields.TTL):
        if event.HasField(name):
            result[name] = getattr(event, name)

    for name in (fields.METRIC_D, fields.METRIC_SINT64, fields.METRIC_F):
        if event.HasField(name):
            result[fields.METRIC] = getattr(event, name)
            break

    if len(event.tags) > 0:
        result[fields.TAGS] = list(event.tags)

    for attribute in event.attributes:
        result[attribute.key] = attribute.value

    return result


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
