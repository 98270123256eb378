import datetime
from typing import Any, NamedTuple, Optional, Union

from ._collections import _TYPE_HEADERS, HTTPHeaderDict
from .cookie import Cookie
from .exceptions import InvalidArgumentError, InvalidStatusCode
from .message import DEFAULT_PROTOCOL_VERSION, Message, empty_body
from .util.immutable import replace
from .util.typing import StreamInterface


def _validate_status_code(status_code: Any) -> None:
    if (
        not isinstance(status_code, int)
        or isinstance(status_code, bool)
        or not 100 <= status_code <= 599
    ):
        raise InvalidStatusCode(status_code)


def _validate_reason_phrase(reason_phrase: Any) -> None:
    if not isinstance(reason_phrase, str):
        raise InvalidArgumentError(
            f"Reason phrase must be a string, got {reason_phrase!r}"
        )


class ResponseRecord(NamedTuple):
    protocol_version: str
    headers: HTTPHeaderDict
    body: Optional[StreamInterface]
    status_code: int
    reason_phrase: str


class Response(Message):
    """
    An HTTP response.

    :param status_code:
        An integer in the 100-599 range.
    :param reason_phrase:
        Kept exactly as given, no phrase is looked up for the status code.
    """

    __slots__ = ()

    def __init__(
        self,
        protocol_version: str = DEFAULT_PROTOCOL_VERSION,
        headers: Optional[_TYPE_HEADERS] = None,
        body: Optional[StreamInterface] = None,
        status_code: int = 200,
        reason_phrase: str = "",
    ) -> None:
        _validate_status_code(status_code)
        _validate_reason_phrase(reason_phrase)
        super().__init__(
            protocol_version=protocol_version,
            headers=headers,
            body=empty_body() if body is None else body,
        )
        self._rec = ResponseRecord(*self._rec, status_code, reason_phrase)

    @classmethod
    def _from_record(cls, record: Any) -> "Response":
        return cls(**record._asdict())

    def __repr__(self) -> str:
        return f"<{type(self).__name__} [{self.status_code}]>"

    @property
    def status_code(self) -> int:
        return self._rec.status_code  # type: ignore[no-any-return]

    @property
    def reason_phrase(self) -> str:
        return self._rec.reason_phrase  # type: ignore[no-any-return]

    def with_status(self, code: int, reason_phrase: str = "") -> "Response":
        _validate_status_code(code)
        _validate_reason_phrase(reason_phrase)
        return replace(self, status_code=code, reason_phrase=reason_phrase)

    def with_cookie(self, cookie: Cookie) -> "Response":
        """A copy with ``cookie`` appended to the ``Set-Cookie`` header."""
        if not isinstance(cookie, Cookie):
            raise InvalidArgumentError(f"Expected a Cookie instance, got {cookie!r}")
        return self.with_added_header("Set-Cookie", str(cookie))  # type: ignore[return-value]

    def with_added_cookie(
        self,
        name: str,
        value: str,
        max_age: Optional[int] = None,
        expires: Optional[Union[int, datetime.datetime]] = None,
        path: str = "",
        domain: str = "",
        secure: bool = False,
        http_only: bool = False,
        same_site: str = "",
    ) -> "Response":
        """
        Builds a :class:`~httpmessages.cookie.Cookie` out of the arguments
        and appends it to the ``Set-Cookie`` header.

        >>> Response().with_added_cookie("id", "1", secure=True).get_header("set-cookie")
        ['id=1; Secure']
        """
        cookie = Cookie(
            name,
            value,
            max_age=max_age,
            expires=expires,
            path=path,
            domain=domain,
            secure=secure,
            http_only=http_only,
            same_site=same_site,
        )
        return self.with_cookie(cookie)
