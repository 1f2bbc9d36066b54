"""Exclusive mutable views over a `TriStateOutcome` payload.

`as_mutable_view()` hands out a context manager. Inside the block the payload
is reachable through a `Ref` cell that reads and writes the owner's slot
directly; leaving the block releases the borrow and detaches the cell.

    >>> counter = Success(1)
    >>> with counter.as_mutable_view() as view:
    ...     if view.is_success():
    ...         cell = view.unwrap()
    ...         cell.set(cell.get() + 1)
    >>> counter
    Success(2)

While borrow checks are enabled (`TristateSettings.borrow_checks`), any number
of shared views or exactly one exclusive view may exist, never both. Taking a
view that breaks this raises `BorrowError`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Generic, TypeVar

from .config import get_settings
from .errors import BorrowError, State
from .observability import get_logger

if TYPE_CHECKING:
    from types import TracebackType

    from .outcome import TriStateOutcome

T = TypeVar("T")
E = TypeVar("E")

_log = get_logger("tristate.views")


class Ref(Generic[T]):
    """Read/write handle onto a payload slot, valid only while its view is live."""

    __slots__ = ("_owner",)

    def __init__(self, owner: TriStateOutcome[Any, Any]) -> None:
        self._owner: TriStateOutcome[Any, Any] | None = owner

    def _live(self) -> TriStateOutcome[Any, Any]:
        if self._owner is None:
            raise BorrowError("Ref used after its mutable view was released")
        return self._owner

    def get(self) -> T:
        return self._live()._value  # type: ignore[no-any-return]

    def set(self, value: T) -> None:
        self._live()._value = value

    value = property(get, set)

    def _release(self) -> None:
        self._owner = None

    def __repr__(self) -> str:
        return f"Ref({self._owner._value!r})" if self._owner is not None else "Ref(<released>)"


class MutableView(Generic[T, E]):
    """Context manager granting exclusive access to an outcome's payload."""

    __slots__ = ("_owner", "_ref", "_tracked")

    def __init__(self, owner: TriStateOutcome[T, E]) -> None:
        self._owner = owner
        self._ref: Ref[Any] | None = None
        self._tracked = False

    def __enter__(self) -> TriStateOutcome[Ref[T], Ref[E]]:
        from .outcome import TriStateOutcome

        owner = self._owner
        if get_settings().borrow_checks:
            check_not_exclusive(owner, "as_mutable_view")
            check_not_shared(owner, "as_mutable_view")
            owner._exclusive = self._tracked = True
        if owner._state is State.ABSENT:
            return TriStateOutcome(State.ABSENT, None)
        self._ref = Ref(owner)
        return TriStateOutcome(owner._state, self._ref)

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._ref is not None:
            self._ref._release()
            self._ref = None
        if self._tracked:
            self._owner._exclusive = self._tracked = False


def check_not_exclusive(owner: TriStateOutcome[Any, Any], operation: str) -> None:
    """Raise BorrowError if an exclusive view over `owner` is live."""
    if owner._exclusive:
        _log.debug("borrow violated", operation=operation, state=owner._state.value)
        raise BorrowError(f"{operation}() while a mutable view is live")


def check_not_shared(owner: TriStateOutcome[Any, Any], operation: str) -> None:
    """Raise BorrowError if any shared view over `owner` is still alive."""
    if owner._shared:
        _log.debug("borrow violated", operation=operation, state=owner._state.value, shared=len(owner._shared))
        raise BorrowError(f"{operation}() while {len(owner._shared)} shared view(s) are alive")
