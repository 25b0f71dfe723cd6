"""Protocol constants.

Keep these in one place to avoid stringly-typed message handling.
"""

# Well-known event fields, as named by callers.

TIME = "time"
STATE = "state"
SERVICE = "service"
HOST = "host"
DESCRIPTION = "description"
TAGS = "tags"
TTL = "ttl"
METRIC = "metric"

WELL_KNOWN = frozenset((TIME, STATE, SERVICE, HOST, DESCRIPTION, TAGS, TTL, METRIC))

# Wire fields that can carry a metric. Outbound events always use METRIC_D;
# the collector may answer with any of the three.

METRIC_D = "metric_d"
METRIC_SINT64 = "metric_sint64"
METRIC_F = "metric_f"

# Transport kinds, with the aliases accepted for each.

TCP = "tcp"
UDP = "udp"

KINDS = {
    "tcp": TCP,
    "stream": TCP,
    "udp": UDP,
    "datagram": UDP,
}

DEFAULT_KIND = TCP
DEFAULT_HOST = "localhost"
DEFAULT_PORT = 5555

SUCCESS = "Success"
