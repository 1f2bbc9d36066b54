"""Binary success/failure outcome.

The two-state counterpart of `TriStateOutcome`, kept to what conversion in
either direction needs. A `TriStateOutcome[T, E]` is a strict refinement of
`Result[T | None, E]`:

    Err(e)    <-> Failure(e)
    Ok(t)     <-> Success(t)     (t is not None)
    Ok(None)  <-> Absent()
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Generic, TypeVar

if TYPE_CHECKING:
    from collections.abc import Iterator

    from .outcome import TriStateOutcome

T = TypeVar("T")
E = TypeVar("E")

_OK = True
_ERR = False


class Result(Generic[T, E]):
    """Ok(value) or Err(error).

    Example:
        >>> Ok(None).to_tristate(), Err("fail").to_tristate()
        (Absent(), Failure('fail'))
    """

    __slots__ = ("_value", "_is_ok")
    __match_args__ = ("_value",)

    def __init__(self, value: T | E, is_ok: bool) -> None:
        self._value = value
        self._is_ok = is_ok

    def is_ok(self) -> bool:
        return self._is_ok

    def is_err(self) -> bool:
        return not self._is_ok

    def unwrap(self) -> T:
        """Extract Ok value. Raises RuntimeError on Err."""
        if self._is_ok:
            return self._value  # type: ignore[return-value]
        raise RuntimeError(f"unwrap() on Err: {self._value!r}")

    def unwrap_err(self) -> E:
        """Extract Err value. Raises RuntimeError on Ok."""
        if not self._is_ok:
            return self._value  # type: ignore[return-value]
        raise RuntimeError(f"unwrap_err() on Ok: {self._value!r}")

    def ok(self) -> T | None:
        return self._value if self._is_ok else None  # type: ignore[return-value]

    def err(self) -> E | None:
        return self._value if not self._is_ok else None  # type: ignore[return-value]

    def to_tristate(self: Result[T | None, E]) -> TriStateOutcome[T, E]:
        """Refine into the three-state form. Ok(None) becomes Absent()."""
        from .outcome import from_outcome
        return from_outcome(self)

    __bool__ = lambda self: self._is_ok  # noqa: E731
    __hash__ = lambda self: hash((self._is_ok, self._value))  # noqa: E731
    __repr__ = lambda self: f"{'Ok' if self._is_ok else 'Err'}({self._value!r})"  # noqa: E731

    def __eq__(self, other: object) -> bool:
        return self._is_ok == other._is_ok and self._value == other._value if isinstance(other, Result) else NotImplemented

    def __iter__(self) -> Iterator[T]:
        if self._is_ok:
            yield self._value  # type: ignore[misc]


def Ok(value: T) -> Result[T, E]:  # noqa: N802
    return Result(value, _OK)


def Err(error: E) -> Result[T, E]:  # noqa: N802
    return Result(error, _ERR)
