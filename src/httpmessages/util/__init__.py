from .immutable import replace, same_record
from .typing import StreamInterface
from .url import (
    STANDARD_PORTS,
    Uri,
    is_standard_port,
    is_valid_host,
    is_valid_hostname,
    is_valid_ip,
    parse_uri,
    standard_port,
)

__all__ = (
    "STANDARD_PORTS",
    "StreamInterface",
    "Uri",
    "is_standard_port",
    "is_valid_host",
    "is_valid_hostname",
    "is_valid_ip",
    "parse_uri",
    "replace",
    "same_record",
    "standard_port",
)
