from typing import Any, Dict, List, NamedTuple, Optional

from ._collections import (
    _TYPE_HEADER_VALUE,
    _TYPE_HEADERS,
    HTTPHeaderDict,
    validate_header_name,
    validate_header_value,
)
from .exceptions import InvalidArgumentError
from .stream import Stream
from .util.immutable import replace, same_record
from .util.typing import StreamInterface

DEFAULT_PROTOCOL_VERSION = "1.0"


def _validate_protocol_version(version: Any) -> None:
    if not isinstance(version, str):
        raise InvalidArgumentError(
            f"Protocol version must be a string, got {version!r}"
        )


def _validate_body(body: Any) -> None:
    if not isinstance(body, StreamInterface):
        raise InvalidArgumentError(
            f"Body must implement the stream interface, got {type(body).__name__}"
        )


def _make_headers(headers: Optional[_TYPE_HEADERS]) -> HTTPHeaderDict:
    if isinstance(headers, HTTPHeaderDict):
        return headers
    return HTTPHeaderDict(headers)


def empty_body() -> Stream:
    """A fresh, empty in-memory body."""
    return Stream.from_bytes(b"")


class MessageRecord(NamedTuple):
    protocol_version: str
    headers: HTTPHeaderDict
    body: Optional[StreamInterface]


class Message:
    """
    An HTTP message: protocol version, headers and body.

    Messages are immutable. Every ``with_*`` method returns a new message
    and leaves the receiver as it was. The body is shared, not copied,
    between a message and the messages derived from it.

    :param protocol_version:
        The HTTP version, e.g. ``"1.1"``.
    :param headers:
        A mapping, an iterable of ``(name, value)`` pairs or a
        :class:`~httpmessages.HTTPHeaderDict`. Values are strings, numbers
        or non-empty lists of them.
    :param body:
        Any object implementing
        :class:`~httpmessages.util.typing.StreamInterface`, or ``None``.
    """

    __slots__ = ("_rec",)

    _rec: Any

    def __init__(
        self,
        protocol_version: str = DEFAULT_PROTOCOL_VERSION,
        headers: Optional[_TYPE_HEADERS] = None,
        body: Optional[StreamInterface] = None,
    ) -> None:
        _validate_protocol_version(protocol_version)
        if body is not None:
            _validate_body(body)
        self._rec = MessageRecord(protocol_version, _make_headers(headers), body)

    def _record(self) -> Any:
        return self._rec

    @classmethod
    def _from_record(cls, record: MessageRecord) -> "Message":
        return cls(
            protocol_version=record.protocol_version,
            headers=record.headers,
            body=record.body,
        )

    def __eq__(self, other: object) -> bool:
        return same_record(self, other)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"<{type(self).__name__} HTTP/{self.protocol_version} "
            f"headers={self._rec.headers!r}>"
        )

    @property
    def protocol_version(self) -> str:
        return self._rec.protocol_version  # type: ignore[no-any-return]

    def with_protocol_version(self, version: str) -> "Message":
        _validate_protocol_version(version)
        return replace(self, protocol_version=version)

    @property
    def headers(self) -> Dict[str, List[str]]:
        """All headers, as originally cased names mapped to their values."""
        return self._rec.headers.as_dict()  # type: ignore[no-any-return]

    def has_header(self, name: str) -> bool:
        """Whether a header exists, by case-insensitive name."""
        return name in self._rec.headers

    def get_header(self, name: str) -> List[str]:
        """The values of a header, or an empty list."""
        return self._rec.headers.getlist(name)  # type: ignore[no-any-return]

    def get_header_line(self, name: str) -> str:
        """The values of a header joined by ``", "``, or an empty string."""
        return self._rec.headers.line(name)  # type: ignore[no-any-return]

    def with_header(self, name: str, value: _TYPE_HEADER_VALUE) -> "Message":
        """A copy with the header replaced by ``value``."""
        validate_header_name(name)
        validate_header_value(value)
        return replace(self, headers=self._rec.headers.set(name, value))

    def with_added_header(self, name: str, value: _TYPE_HEADER_VALUE) -> "Message":
        """A copy with ``value`` appended to the existing values of the header."""
        validate_header_name(name)
        validate_header_value(value)
        return replace(self, headers=self._rec.headers.add(name, value))

    def without_header(self, name: str) -> "Message":
        return replace(self, headers=self._rec.headers.remove(name))

    @property
    def body(self) -> Optional[StreamInterface]:
        return self._rec.body  # type: ignore[no-any-return]

    def with_body(self, body: StreamInterface) -> "Message":
        _validate_body(body)
        return replace(self, body=body)
