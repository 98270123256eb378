from typing import Any, NamedTuple, Optional

from ._collections import _TYPE_HEADERS, HTTPHeaderDict
from .exceptions import InvalidArgumentError, InvalidMethod
from .message import DEFAULT_PROTOCOL_VERSION, Message, empty_body
from .util.immutable import replace
from .util.typing import StreamInterface
from .util.url import Uri

# Compared case-insensitively. The empty method is accepted and means "unset".
ALLOWED_METHODS = frozenset(
    {"", "get", "post", "put", "delete", "options", "patch", "head", "custom"}
)


def _validate_method(method: Any) -> None:
    if not isinstance(method, str) or method.lower() not in ALLOWED_METHODS:
        raise InvalidMethod(method)


def _validate_target(target: Any) -> None:
    if target is None:
        return
    if not isinstance(target, str):
        raise InvalidArgumentError(f"Request target must be a string, got {target!r}")
    if any(c.isspace() for c in target):
        raise InvalidArgumentError(
            f"Request target must not contain whitespace, got {target!r}"
        )


def _validate_uri(uri: Any) -> None:
    if not isinstance(uri, Uri):
        raise InvalidArgumentError(f"Expected a Uri instance, got {uri!r}")


class RequestRecord(NamedTuple):
    protocol_version: str
    headers: HTTPHeaderDict
    body: Optional[StreamInterface]
    target: Optional[str]
    method: str
    uri: Uri


class Request(Message):
    """
    An outgoing, client-side HTTP request.

    :param target:
        An explicit request target. When empty, the target is derived from
        ``uri``, see :attr:`request_target`.
    :param method:
        One of :data:`ALLOWED_METHODS`, in any case. Stored as given.
    :param uri:
        A :class:`~httpmessages.util.url.Uri`. Defaults to an empty one.

    The remaining parameters are those of :class:`~httpmessages.message.Message`;
    ``body`` defaults to an empty in-memory stream.
    """

    __slots__ = ()

    def __init__(
        self,
        protocol_version: str = DEFAULT_PROTOCOL_VERSION,
        headers: Optional[_TYPE_HEADERS] = None,
        body: Optional[StreamInterface] = None,
        target: Optional[str] = "",
        method: str = "GET",
        uri: Optional[Uri] = None,
    ) -> None:
        super().__init__(
            protocol_version=protocol_version,
            headers=headers,
            body=empty_body() if body is None else body,
        )
        _validate_target(target)
        _validate_method(method)
        if uri is None:
            uri = Uri()
        _validate_uri(uri)

        self._rec = RequestRecord(*self._rec, target, method, uri)

    @classmethod
    def _from_record(cls, record: Any) -> "Request":
        return cls(**record._asdict())

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.method} {self.request_target}>"

    @property
    def request_target(self) -> str:
        """
        The explicit target if one was given. Otherwise the path of
        :attr:`uri` with a single leading slash (``/`` when the path is
        empty), followed by ``?query`` when there is a query.

        >>> Request(uri=Uri(path="search", query="q=1")).request_target
        '/search?q=1'
        """
        target = self._rec.target
        if target:
            return target  # type: ignore[no-any-return]

        uri = self._rec.uri
        path = uri.path
        target = "/" + path.lstrip("/") if path else "/"
        query = uri.query
        if query:
            target += "?" + query
        return target  # type: ignore[no-any-return]

    def with_request_target(self, target: Optional[str]) -> "Request":
        _validate_target(target)
        return replace(self, target=target)

    @property
    def method(self) -> str:
        return self._rec.method  # type: ignore[no-any-return]

    def with_method(self, method: str) -> "Request":
        _validate_method(method)
        return replace(self, method=method)

    @property
    def uri(self) -> Uri:
        return self._rec.uri  # type: ignore[no-any-return]

    def with_uri(self, uri: Uri, preserve_host: bool = False) -> "Request":
        """
        A copy with ``uri`` and, depending on ``preserve_host``, an updated
        ``Host`` header.

        The ``Host`` header is set to the host of ``uri`` when that host is
        not empty, unless ``preserve_host`` is true and the request already
        has a ``Host`` header, in which case the header is left untouched.
        """
        _validate_uri(uri)

        headers = self._rec.headers
        update_host = bool(uri.host)
        if preserve_host and "host" in headers:
            update_host = False

        if update_host:
            headers = headers.set("Host", uri.host)

        return replace(self, uri=uri, headers=headers)
