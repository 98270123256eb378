"""
Copy-on-write support shared by the value objects of this package.

Every value type keeps its full field set in a :class:`typing.NamedTuple`
record. It exposes that record through ``_record()`` and rebuilds itself from
one through the ``_from_record()`` classmethod, which always goes through the
type's validating constructor. :func:`replace` glues the two together, so a
``with_*`` method can never produce an instance its constructor would refuse.
"""

from typing import Any, Protocol, Type, TypeVar

_T = TypeVar("_T", bound="SupportsRecord")


class SupportsRecord(Protocol):
    def _record(self) -> Any:
        ...

    @classmethod
    def _from_record(cls: Type[_T], record: Any) -> _T:
        ...


def replace(obj: _T, **changes: Any) -> _T:
    """
    Return a sibling of ``obj`` whose fields equal those of ``obj`` except
    for ``changes``.

    :param obj:
        The instance to copy. It is left untouched.
    :param changes:
        Field name to new value. Unknown field names raise :exc:`ValueError`.
    """
    record = obj._record()._replace(**changes)
    return type(obj)._from_record(record)


def same_record(obj: SupportsRecord, other: object) -> bool:
    """Value equality: same concrete type and equal records."""
    if type(obj) is not type(other):
        return False
    return obj._record() == other._record()  # type: ignore[attr-defined]
