from typing import (
    Any,
    Dict,
    Iterable,
    Iterator,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Union,
)

from .exceptions import InvalidHeader

__all__ = ["HTTPHeaderDict", "validate_header_name", "validate_header_value"]


_TYPE_HEADER_SCALAR = Union[str, int, float]
_TYPE_HEADER_VALUE = Union[_TYPE_HEADER_SCALAR, Sequence[_TYPE_HEADER_SCALAR]]
_TYPE_HEADERS = Union[
    "HTTPHeaderDict",
    Mapping[str, _TYPE_HEADER_VALUE],
    Iterable[Tuple[str, _TYPE_HEADER_VALUE]],
]


def is_header_scalar(value: Any) -> bool:
    """Strings and numbers are the only scalars a header value may hold."""
    return isinstance(value, (str, int, float)) and not isinstance(value, bool)


def validate_header_name(name: Any) -> None:
    """
    Ensure ``name`` can be used as a header field name.

    :raises InvalidHeader: if ``name`` is not a non-empty string.
    """
    if not isinstance(name, str) or name == "":
        raise InvalidHeader(f"Header name must be a non-empty string, got {name!r}")


def validate_header_value(value: Any) -> None:
    """
    Ensure ``value`` can be used as a header field value.

    A value is either a string/number, or a non-empty list or tuple made only
    of strings and numbers.

    :raises InvalidHeader: for anything else.
    """
    if is_header_scalar(value):
        return

    if (
        isinstance(value, (list, tuple))
        and value
        and all(is_header_scalar(v) for v in value)
    ):
        return

    raise InvalidHeader(
        f"Header value must be a string, a number or a list of them, got {value!r}"
    )


def normalize_header_value(value: _TYPE_HEADER_VALUE) -> List[str]:
    """Validate ``value`` and return it as a non-empty list of strings."""
    validate_header_value(value)
    if is_header_scalar(value):
        return [str(value)]
    return [str(v) for v in value]  # type: ignore[union-attr]


class HTTPHeaderDict(Mapping[str, str]):
    """
    :param headers:
        An iterable of field-value pairs, a mapping or another
        :class:`HTTPHeaderDict`. Pairs whose names compare equal
        case-insensitively are merged.

    :param kwargs:
        Additional field-value pairs.

    A read-only ``dict`` like container for storing HTTP Headers.

    Field names are stored and compared case-insensitively in compliance with
    RFC 7230. Iteration provides the first case-sensitive key seen for each
    case-insensitive pair. Each field holds a non-empty list of string values.

    The container is never modified once built: :meth:`set`, :meth:`add` and
    :meth:`remove` return a new ``HTTPHeaderDict`` and leave the receiver as
    it was.

    >>> headers = HTTPHeaderDict()
    >>> headers = headers.add('Set-Cookie', 'foo=bar')
    >>> headers = headers.add('set-cookie', 'baz=quxx')
    >>> headers = headers.set('content-length', 7)
    >>> headers['SET-cookie']
    'foo=bar, baz=quxx'
    >>> headers['Content-Length']
    '7'
    """

    _container: Dict[str, List[str]]

    def __init__(self, headers: Optional[_TYPE_HEADERS] = None, **kwargs: Any):
        super().__init__()
        # lowercased name => [first seen name, value, value, ...]
        self._container = {}
        if headers is not None:
            if isinstance(headers, HTTPHeaderDict):
                self._container = {k: list(v) for k, v in headers._container.items()}
            else:
                self._extend(headers)
        if kwargs:
            self._extend(kwargs)

    def _extend(self, other: Any) -> None:
        if isinstance(other, Mapping):
            pairs: Iterable[Tuple[Any, Any]] = other.items()
        elif hasattr(other, "keys"):
            pairs = ((key, other[key]) for key in other.keys())
        else:
            pairs = other

        for key, value in pairs:
            validate_header_name(key)
            values = normalize_header_value(value)
            vals = self._container.setdefault(key.lower(), [key])
            vals.extend(values)

    def _evolve(self, container: Dict[str, List[str]]) -> "HTTPHeaderDict":
        clone = type(self)()
        clone._container = container
        return clone

    def __getitem__(self, key: str) -> str:
        val = self._container[key.lower()]
        return ", ".join(val[1:])

    def __contains__(self, key: object) -> bool:
        if isinstance(key, str):
            return key.lower() in self._container
        return False

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Mapping) and not hasattr(other, "keys"):
            return False
        if not isinstance(other, HTTPHeaderDict):
            try:
                other = type(self)(other)
            except InvalidHeader:
                return False
        return {k.lower(): v for k, v in self.itermerged()} == {
            k.lower(): v for k, v in other.itermerged()
        }

    def __ne__(self, other: object) -> bool:
        return not self.__eq__(other)

    __hash__ = None  # type: ignore[assignment]

    def __len__(self) -> int:
        return len(self._container)

    def __iter__(self) -> Iterator[str]:
        # Only provide the originally cased names
        for vals in self._container.values():
            yield vals[0]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({dict(self.itermerged())})"

    def set(self, key: str, val: _TYPE_HEADER_VALUE) -> "HTTPHeaderDict":
        """Returns a copy where ``key`` holds ``val`` only.

        An existing field keeps the casing and position it was first
        inserted with.

        >>> headers = HTTPHeaderDict(Accept='text/html')
        >>> headers.set('ACCEPT', ['text/plain', 'text/css']).as_dict()
        {'Accept': ['text/plain', 'text/css']}
        """
        validate_header_name(key)
        values = normalize_header_value(val)
        key_lower = key.lower()

        container = dict(self._container)
        if key_lower in container:
            container[key_lower] = [container[key_lower][0]] + values
        else:
            container[key_lower] = [key] + values
        return self._evolve(container)

    def add(self, key: str, val: _TYPE_HEADER_VALUE) -> "HTTPHeaderDict":
        """Returns a copy with ``val`` appended to the values of ``key``.

        >>> headers = HTTPHeaderDict(foo='bar')
        >>> headers.add('Foo', 'baz')['foo']
        'bar, baz'
        """
        validate_header_name(key)
        values = normalize_header_value(val)
        key_lower = key.lower()

        container = dict(self._container)
        vals = container.get(key_lower)
        if vals is None:
            container[key_lower] = [key] + values
        else:
            container[key_lower] = vals + values
        return self._evolve(container)

    def remove(self, key: str) -> "HTTPHeaderDict":
        """Returns a copy without ``key``. Removing a missing key is a no-op."""
        validate_header_name(key)
        key_lower = key.lower()
        container = {k: v for k, v in self._container.items() if k != key_lower}
        return self._evolve(container)

    def getlist(self, key: str) -> List[str]:
        """Returns a list of all the values for the named field. Returns an
        empty list if the key doesn't exist."""
        if not isinstance(key, str):
            return []
        try:
            vals = self._container[key.lower()]
        except KeyError:
            return []
        else:
            return vals[1:]

    def line(self, key: str) -> str:
        """Returns the values of the named field joined by ``", "``, or an
        empty string if the key doesn't exist."""
        return ", ".join(self.getlist(key))

    def iteritems(self) -> Iterator[Tuple[str, str]]:
        """Iterate over all header lines, including duplicate ones."""
        for vals in self._container.values():
            for val in vals[1:]:
                yield vals[0], val

    def itermerged(self) -> Iterator[Tuple[str, str]]:
        """Iterate over all headers, merging duplicate ones together."""
        for vals in self._container.values():
            yield vals[0], ", ".join(vals[1:])

    def as_dict(self) -> Dict[str, List[str]]:
        """Returns a plain ``dict`` of originally cased names to value lists."""
        return {vals[0]: vals[1:] for vals in self._container.values()}
