"""Type-derived default values.

Python has no static `Default` trait, so operations that fall back to "the
type's canonical default" take the type itself. A class may supply its own
default through a `default()` classmethod; otherwise it is called with no
arguments (`int()` -> 0, `str()` -> "", `list()` -> []).
"""

from __future__ import annotations

from inspect import getattr_static
from typing import Callable, Protocol, Self, TypeVar, runtime_checkable

T = TypeVar("T")


@runtime_checkable
class HasDefault(Protocol):
    """Types exposing a canonical default through a classmethod."""

    @classmethod
    def default(cls) -> Self: ...


def default_of(tp: type[T] | Callable[[], T]) -> T:
    """Canonical default for `tp`.

    Only a `default` bound at class level (classmethod or staticmethod) counts;
    an instance method of that name is ignored and `tp()` is used instead.

    Example:
        >>> default_of(int), default_of(str), default_of(tuple)
        (0, '', ())
    """
    if isinstance(tp, type) and isinstance(tp, HasDefault):
        if isinstance(getattr_static(tp, "default"), (classmethod, staticmethod)):
            return tp.default()  # type: ignore[no-any-return]
    return tp()
