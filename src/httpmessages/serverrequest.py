import logging
from http.cookies import SimpleCookie
from numbers import Number
from typing import Any, Dict, List, Mapping, NamedTuple, Optional, Sequence, Tuple
from urllib.parse import parse_qsl

from ._collections import _TYPE_HEADERS, HTTPHeaderDict
from .exceptions import InvalidArgumentError, InvalidBody
from .message import DEFAULT_PROTOCOL_VERSION
from .request import Request
from .stream import Stream
from .uploadedfile import UploadedFile
from .util.immutable import replace
from .util.typing import StreamInterface
from .util.url import Uri, parse_uri

log = logging.getLogger(__name__)

# Content types whose parsed body is exposed through ServerRequest.post().
# The empty string stands for a request without a Content-Type header.
FORM_CONTENT_TYPES = frozenset(
    {"", "application/x-www-form-urlencoded", "multipart/form-data"}
)

# CGI variables that carry a request header without the HTTP_ prefix.
_UNPREFIXED_HEADERS = {"CONTENT_TYPE": "Content-Type", "CONTENT_LENGTH": "Content-Length"}


def _validate_parsed_body(data: Any) -> None:
    if data is None or isinstance(data, Mapping):
        return
    if isinstance(data, (str, bytes, bytearray, Number, bool, list, tuple)):
        raise InvalidBody(
            f"Parsed body should be a mapping, an object or None, got {type(data).__name__}"
        )


def _copy_params(name: str, params: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    if params is None:
        return {}
    if not isinstance(params, Mapping):
        raise InvalidArgumentError(f"{name} must be a mapping, got {params!r}")
    return dict(params)


def _copy_uploaded_files(
    uploaded_files: Optional[Sequence[UploadedFile]],
) -> Tuple[UploadedFile, ...]:
    if uploaded_files is None:
        return ()
    if not isinstance(uploaded_files, (list, tuple)):
        raise InvalidArgumentError(
            f"Uploaded files must be a list, got {type(uploaded_files).__name__}"
        )
    for uploaded_file in uploaded_files:
        if not isinstance(uploaded_file, UploadedFile):
            raise InvalidArgumentError(
                f"Expected UploadedFile instances, got {uploaded_file!r}"
            )
    return tuple(uploaded_files)


def _mime_type(content_type: str) -> str:
    return content_type.split(";", 1)[0].strip().lower()


class ServerRequestRecord(NamedTuple):
    protocol_version: str
    headers: HTTPHeaderDict
    body: Optional[StreamInterface]
    target: Optional[str]
    method: str
    uri: Uri
    cookie_params: Dict[str, Any]
    query_params: Dict[str, Any]
    attributes: Dict[str, Any]
    parsed_body: Any
    uploaded_files: Tuple[UploadedFile, ...]
    server_params: Dict[str, Any]


class ServerRequest(Request):
    """
    An incoming, server-side HTTP request.

    On top of :class:`~httpmessages.request.Request` it carries what the
    server extracted from the request: server parameters, cookies, query
    string parameters, the parsed body, uploaded files and free-form
    attributes. Dictionaries are copied both when stored and when read, so
    an instance can't be changed through them.

    :param parsed_body:
        A mapping, any object that isn't a plain scalar or list, or ``None``.
    :param uploaded_files:
        A list of :class:`~httpmessages.uploadedfile.UploadedFile`.
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
        cookie_params: Optional[Mapping[str, Any]] = None,
        query_params: Optional[Mapping[str, Any]] = None,
        attributes: Optional[Mapping[str, Any]] = None,
        parsed_body: Any = None,
        uploaded_files: Optional[Sequence[UploadedFile]] = None,
        server_params: Optional[Mapping[str, Any]] = None,
    ) -> None:
        _validate_parsed_body(parsed_body)
        super().__init__(
            protocol_version=protocol_version,
            headers=headers,
            body=body,
            target=target,
            method=method,
            uri=uri,
        )
        self._rec = ServerRequestRecord(
            *self._rec,
            _copy_params("Cookie params", cookie_params),
            _copy_params("Query params", query_params),
            _copy_params("Attributes", attributes),
            parsed_body,
            _copy_uploaded_files(uploaded_files),
            _copy_params("Server params", server_params),
        )

    @classmethod
    def from_environ(cls, environ: Mapping[str, Any]) -> "ServerRequest":
        """
        Build a server request out of a WSGI ``environ``.

        The body is read from ``wsgi.input`` up to ``CONTENT_LENGTH`` bytes
        and kept in memory. URL-encoded form bodies are parsed into
        :attr:`parsed_body`; multipart bodies are left alone.
        """
        headers: List[Tuple[str, str]] = []
        for key, value in environ.items():
            if key.startswith("HTTP_"):
                headers.append((key[5:].replace("_", "-").title(), value))
            elif key in _UNPREFIXED_HEADERS and value:
                headers.append((_UNPREFIXED_HEADERS[key], value))

        scheme = environ.get("wsgi.url_scheme", "http")
        host = environ.get("HTTP_HOST")
        if not host:
            host = environ.get("SERVER_NAME", "")
            port = environ.get("SERVER_PORT")
            if host and port:
                host = f"{host}:{port}"
        uri = parse_uri(f"{scheme}://{host}") if host else Uri(scheme=scheme)
        uri = uri.with_path(
            environ.get("SCRIPT_NAME", "") + environ.get("PATH_INFO", "")
        ).with_query(environ.get("QUERY_STRING", ""))

        protocol = environ.get("SERVER_PROTOCOL", "")
        protocol_version = protocol.partition("/")[2] or DEFAULT_PROTOCOL_VERSION

        try:
            content_length = int(environ.get("CONTENT_LENGTH") or 0)
        except ValueError:
            content_length = 0
        data = b""
        wsgi_input = environ.get("wsgi.input")
        if wsgi_input is not None and content_length > 0:
            data = wsgi_input.read(content_length)
            log.debug("Read %d bytes of request body from wsgi.input", len(data))

        parsed_body = None
        content_type = _mime_type(environ.get("CONTENT_TYPE", ""))
        if content_type == "application/x-www-form-urlencoded":
            parsed_body = dict(
                parse_qsl(data.decode("utf-8", "replace"), keep_blank_values=True)
            )

        cookies: "SimpleCookie[str]" = SimpleCookie()
        cookies.load(environ.get("HTTP_COOKIE", ""))

        return cls(
            protocol_version=protocol_version,
            headers=headers,
            body=Stream.from_bytes(data),
            method=environ.get("REQUEST_METHOD", "GET"),
            uri=uri,
            cookie_params={name: morsel.value for name, morsel in cookies.items()},
            query_params=dict(
                parse_qsl(environ.get("QUERY_STRING", ""), keep_blank_values=True)
            ),
            parsed_body=parsed_body,
            server_params={k: v for k, v in environ.items() if isinstance(v, str)},
        )

    @property
    def server_params(self) -> Dict[str, Any]:
        return dict(self._rec.server_params)

    @property
    def cookie_params(self) -> Dict[str, Any]:
        return dict(self._rec.cookie_params)

    def with_cookie_params(self, cookies: Mapping[str, Any]) -> "ServerRequest":
        return replace(self, cookie_params=_copy_params("Cookie params", cookies))

    @property
    def query_params(self) -> Dict[str, Any]:
        return dict(self._rec.query_params)

    def with_query_params(self, query: Mapping[str, Any]) -> "ServerRequest":
        return replace(self, query_params=_copy_params("Query params", query))

    @property
    def uploaded_files(self) -> List[UploadedFile]:
        return list(self._rec.uploaded_files)

    def with_uploaded_files(
        self, uploaded_files: Sequence[UploadedFile]
    ) -> "ServerRequest":
        return replace(self, uploaded_files=_copy_uploaded_files(uploaded_files))

    @property
    def parsed_body(self) -> Any:
        return self._rec.parsed_body

    def with_parsed_body(self, data: Any) -> "ServerRequest":
        _validate_parsed_body(data)
        return replace(self, parsed_body=data)

    @property
    def attributes(self) -> Dict[str, Any]:
        return dict(self._rec.attributes)

    def get_attribute(self, name: str, default: Any = None) -> Any:
        return self._rec.attributes.get(name, default)

    def with_attribute(self, name: str, value: Any) -> "ServerRequest":
        attributes = dict(self._rec.attributes)
        attributes[name] = value
        return replace(self, attributes=attributes)

    def without_attribute(self, name: str) -> "ServerRequest":
        attributes = dict(self._rec.attributes)
        attributes.pop(name, None)
        return replace(self, attributes=attributes)

    def post(self, name: str, default: Any = None) -> Any:
        """
        A field of the parsed body, for form submissions only.

        ``default`` is returned when the ``Content-Type`` is neither absent
        nor one of :data:`FORM_CONTENT_TYPES`, or when the parsed body is
        not a mapping.
        """
        if _mime_type(self.get_header_line("Content-Type")) not in FORM_CONTENT_TYPES:
            return default

        parsed_body = self._rec.parsed_body
        if not isinstance(parsed_body, Mapping):
            return default
        return parsed_body.get(name, default)

    def get(self, name: str, default: Any = None) -> Any:
        """A query string parameter, or ``default``."""
        return self._rec.query_params.get(name, default)

    def cookie(self, name: str, default: Any = None) -> Any:
        return self._rec.cookie_params.get(name, default)

    def server(self, name: str, default: Any = None) -> Any:
        return self._rec.server_params.get(name, default)
