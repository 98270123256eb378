import datetime
import email.utils
import re
from typing import Any, NamedTuple, Optional, Union

from .exceptions import InvalidCookie
from .util.immutable import replace, same_record
from .util.url import is_valid_host

SAME_SITE_POLICIES = ("", "Strict", "Lax", "None")

# Separators (RFC 2616, section 2.2), whitespace and control characters.
_INVALID_NAME_RE = re.compile(r'[()<>,;:{}="/\[\]?\\\s\x00-\x1f\x7f]')

_TYPE_EXPIRES = Union[int, datetime.datetime]


def _validate_name(name: Any) -> None:
    if not isinstance(name, str) or not name or _INVALID_NAME_RE.search(name):
        raise InvalidCookie(f"Invalid cookie name: {name!r}")


def _validate_str(field: str, value: Any) -> None:
    if not isinstance(value, str):
        raise InvalidCookie(f"Cookie {field} must be a string, got {value!r}")


def _validate_max_age(max_age: Any) -> None:
    if max_age is None:
        return
    if not isinstance(max_age, int) or isinstance(max_age, bool):
        raise InvalidCookie(f"Max age must be None or an integer, got {max_age!r}")


def _validate_domain(domain: Any) -> None:
    _validate_str("domain", domain)
    if domain and not is_valid_host(domain):
        raise InvalidCookie(f"Invalid domain: {domain}")


def _validate_same_site(same_site: Any) -> None:
    if same_site not in SAME_SITE_POLICIES:
        raise InvalidCookie(f"Invalid same site policy: {same_site!r}")


def _normalize_expires(expires: Any) -> Optional[datetime.datetime]:
    if expires is None:
        return None
    try:
        if isinstance(expires, datetime.datetime):
            return expires.astimezone(datetime.timezone.utc)
        if isinstance(expires, int) and not isinstance(expires, bool):
            return datetime.datetime.fromtimestamp(expires, datetime.timezone.utc)
    except (OverflowError, OSError, ValueError) as e:
        raise InvalidCookie(f"Expires is out of range: {expires!r}") from e
    raise InvalidCookie(
        f"Expires must be a timestamp or a datetime instance, got {expires!r}"
    )


class CookieRecord(NamedTuple):
    name: str
    value: str
    max_age: Optional[int]
    expires: Optional[datetime.datetime]
    path: str
    domain: str
    secure: bool
    http_only: bool
    same_site: str


class Cookie:
    """
    An immutable ``Set-Cookie`` header value.

    :param name:
        Non-empty, without separators, whitespace or control characters.
    :param max_age:
        Lifetime in seconds, or ``None``.
    :param expires:
        A UNIX timestamp or a :class:`datetime.datetime`. Naive datetimes
        are taken as local time. Stored in UTC.
    :param domain:
        Empty, or a valid host name or IP address.
    :param same_site:
        One of :data:`SAME_SITE_POLICIES`.

    >>> str(Cookie("id", "1", max_age=3600, secure=True))
    'id=1; MaxAge=3600; Secure'
    """

    __slots__ = ("_rec",)

    def __init__(
        self,
        name: str,
        value: str = "",
        max_age: Optional[int] = None,
        expires: Optional[_TYPE_EXPIRES] = None,
        path: str = "",
        domain: str = "",
        secure: bool = False,
        http_only: bool = False,
        same_site: str = "",
    ) -> None:
        _validate_name(name)
        _validate_str("value", value)
        _validate_max_age(max_age)
        _validate_str("path", path)
        _validate_domain(domain)
        _validate_same_site(same_site)

        self._rec = CookieRecord(
            name,
            value,
            max_age,
            _normalize_expires(expires),
            path,
            domain,
            bool(secure),
            bool(http_only),
            same_site,
        )

    def _record(self) -> CookieRecord:
        return self._rec

    @classmethod
    def _from_record(cls, record: CookieRecord) -> "Cookie":
        return cls(**record._asdict())

    @property
    def name(self) -> str:
        return self._rec.name

    @property
    def value(self) -> str:
        return self._rec.value

    @property
    def max_age(self) -> Optional[int]:
        return self._rec.max_age

    @property
    def expires(self) -> Optional[datetime.datetime]:
        return self._rec.expires

    @property
    def path(self) -> str:
        return self._rec.path

    @property
    def domain(self) -> str:
        return self._rec.domain

    @property
    def secure(self) -> bool:
        return self._rec.secure

    @property
    def http_only(self) -> bool:
        return self._rec.http_only

    @property
    def same_site(self) -> str:
        return self._rec.same_site

    def with_name(self, name: str) -> "Cookie":
        _validate_name(name)
        return replace(self, name=name)

    def with_value(self, value: str) -> "Cookie":
        _validate_str("value", value)
        return replace(self, value=value)

    def with_max_age(self, max_age: Optional[int] = None) -> "Cookie":
        _validate_max_age(max_age)
        return replace(self, max_age=max_age)

    def with_expires(self, expires: Optional[_TYPE_EXPIRES]) -> "Cookie":
        return replace(self, expires=_normalize_expires(expires))

    def with_path(self, path: str = "") -> "Cookie":
        _validate_str("path", path)
        return replace(self, path=path)

    def with_domain(self, domain: str = "") -> "Cookie":
        _validate_domain(domain)
        return replace(self, domain=domain)

    def with_secure(self, secure: bool = False) -> "Cookie":
        return replace(self, secure=bool(secure))

    def with_http_only(self, http_only: bool = False) -> "Cookie":
        return replace(self, http_only=bool(http_only))

    def with_same_site(self, same_site: str = "") -> "Cookie":
        _validate_same_site(same_site)
        return replace(self, same_site=same_site)

    def __str__(self) -> str:
        rec = self._rec
        parts = [f"{rec.name}={rec.value}"]

        if rec.max_age is not None:
            parts.append(f"MaxAge={rec.max_age}")
        if rec.expires is not None:
            parts.append(
                "Expires=" + email.utils.format_datetime(rec.expires, usegmt=True)
            )
        if rec.domain:
            parts.append(f"Domain={rec.domain}")
        if rec.path:
            parts.append(f"Path={rec.path}")
        if rec.same_site:
            parts.append(f"SameSite={rec.same_site}")
        if rec.secure:
            parts.append("Secure")
        if rec.http_only:
            parts.append("HttpOnly")

        return "; ".join(parts)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self)!r})"

    def __eq__(self, other: object) -> bool:
        return same_record(self, other)

    def __hash__(self) -> int:
        return hash(self._rec)
