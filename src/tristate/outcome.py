"""Three-state outcome: success with a value, success with nothing, or failure.

`TriStateOutcome[T, E]` replaces the nested `Result[T | None, E]` a fallible
lookup would otherwise return, so callers match once instead of unwrapping
the result and then the optional:

    Success(t)  - the operation succeeded and produced t
    Absent()    - the operation succeeded and produced nothing
    Failure(e)  - the operation failed with e

Extraction that hits an unaccepted state raises `UnwrapError`; a `Failure`
itself never raises.
"""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any, Callable, Generic, Iterable, TypeVar
from weakref import WeakSet

from .config import get_settings
from .defaults import default_of
from .errors import State, UnwrapError, Violation
from .observability import get_logger
from .result import Result, _ERR, _OK
from .views import MutableView, check_not_exclusive

if TYPE_CHECKING:
    from collections.abc import Iterator

    from pydantic import GetCoreSchemaHandler
    from pydantic_core import CoreSchema

T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")
F = TypeVar("F")

_SUCCESS, _ABSENT, _FAILURE = State.SUCCESS, State.ABSENT, State.FAILURE

_log = get_logger("tristate")


class TriStateOutcome(Generic[T, E]):
    """Discriminated union of Success(T), Absent() and Failure(E).

    Exactly one state is active; the payload slot holds a T, an E, or nothing
    depending on it. Instances are value objects: every transformation returns
    a new instance, and the only way to change a payload in place is through
    an exclusive `as_mutable_view()`.

    Examples:
        >>> Success(3).map(lambda x: x + 1)
        Success(4)
        >>> Absent().map(lambda x: x + 1)
        Absent()
        >>> Failure("disk full").unwrap_or(0)
        0

        Case analysis with a match statement:
        >>> match lookup("key"):
        ...     case TriStateOutcome(State.SUCCESS, value): ...
        ...     case TriStateOutcome(State.ABSENT): ...
        ...     case TriStateOutcome(State.FAILURE, error): ...

    Notes:
        - `T | None` is the optional-presence form, so Success(None) reads as
          absent once projected through to_success_option()/to_outcome().
        - Operations needing the type's default take the type: unwrap_or_default(int).
    """

    __slots__ = ("_state", "_value", "_exclusive", "_shared", "__weakref__")
    __match_args__ = ("state", "payload")

    def __init__(self, state: State, value: T | E | None) -> None:
        """Private constructor. Use Success(), Absent() or Failure() instead."""
        self._state = state
        self._value = value
        self._exclusive = False
        self._shared: WeakSet[TriStateOutcome[T, E]] | None = None

    @property
    def state(self) -> State:
        return self._state

    @property
    def payload(self) -> T | E | None:
        """Raw payload slot: the value, the error, or None when Absent."""
        return self._value

    # ─── State Queries ───────────────────────────────────────────────

    def is_success(self) -> bool:
        return self._state is _SUCCESS

    def is_absent(self) -> bool:
        return self._state is _ABSENT

    def is_failure(self) -> bool:
        return self._state is _FAILURE

    def is_success_and(self, predicate: Callable[[T], bool]) -> bool:
        """True iff Success and the value satisfies predicate."""
        return self._state is _SUCCESS and bool(predicate(self._value))  # type: ignore[arg-type]

    def is_failure_and(self, predicate: Callable[[E], bool]) -> bool:
        """True iff Failure and the error satisfies predicate."""
        return self._state is _FAILURE and bool(predicate(self._value))  # type: ignore[arg-type]

    # ─── Views ───────────────────────────────────────────────────────

    def as_borrowed_view(self) -> TriStateOutcome[T, E]:
        """Shared view: a new instance in the same state over the same payload object.

        With borrow checks on, the view is tracked until it is garbage collected;
        as_mutable_view() is refused while any tracked view is alive.

        Raises:
            BorrowError: If a mutable view is live and borrow checks are on
        """
        view = TriStateOutcome(self._state, self._value)
        if get_settings().borrow_checks:
            check_not_exclusive(self, "as_borrowed_view")
            if self._shared is None:
                self._shared = WeakSet()
            self._shared.add(view)
        return view

    def as_mutable_view(self) -> MutableView[T, E]:
        """Exclusive view. Use as a context manager yielding TriStateOutcome[Ref[T], Ref[E]].

        Example:
            >>> with outcome.as_mutable_view() as view:
            ...     view.inspect(lambda ref: ref.set(ref.get() * 2))
        """
        return MutableView(self)

    # ─── Projection ──────────────────────────────────────────────────

    def to_outcome(self) -> Result[T | None, E]:
        """Success(t) -> Ok(t), Absent() -> Ok(None), Failure(e) -> Err(e).

        Success(None) also projects to Ok(None), so refining it back with
        from_outcome() yields Absent(), not Success(None).
        """
        return Result(self._value, _ERR) if self._state is _FAILURE else Result(self._value, _OK)

    def to_success_option(self) -> T | None:
        """The value if Success, None otherwise (any error is discarded)."""
        return self._value if self._state is _SUCCESS else None  # type: ignore[return-value]

    def to_failure_option(self) -> E | None:
        """The error if Failure, None otherwise."""
        return self._value if self._state is _FAILURE else None  # type: ignore[return-value]

    # ─── Transformation ──────────────────────────────────────────────

    def map(self, f: Callable[[T], U]) -> TriStateOutcome[U, E]:
        """Apply f to a Success value. Absent and Failure pass through unchanged."""
        if self._state is _SUCCESS:
            return TriStateOutcome(_SUCCESS, f(self._value))  # type: ignore[arg-type]
        return TriStateOutcome(self._state, self._value)

    def map_failure(self, f: Callable[[E], F]) -> TriStateOutcome[T, F]:
        """Apply f to a Failure error. Success and Absent pass through unchanged."""
        if self._state is _FAILURE:
            return TriStateOutcome(_FAILURE, f(self._value))  # type: ignore[arg-type]
        return TriStateOutcome(self._state, self._value)

    def map_or(self, default: U, f: Callable[[T], U]) -> U:
        """f(value) if Success, else default. The default is evaluated eagerly by the caller."""
        return f(self._value) if self._state is _SUCCESS else default  # type: ignore[arg-type]

    def map_or_else(self, on_failure: Callable[[E], U], on_absent: U, f: Callable[[T], U]) -> U:
        """Full case split.

        Success(t) -> f(t), Failure(e) -> on_failure(e), Absent() -> on_absent.

        Example:
            >>> Failure("disk full").map_or_else(lambda e: f"err:{e}", "absent", str)
            'err:disk full'
        """
        if self._state is _SUCCESS:
            return f(self._value)  # type: ignore[arg-type]
        if self._state is _FAILURE:
            return on_failure(self._value)  # type: ignore[arg-type]
        return on_absent

    def map_or_default(self, f: Callable[[T], U], tp: type[U] | Callable[[], U]) -> U:
        """f(value) if Success, else the canonical default of tp (see default_of)."""
        return f(self._value) if self._state is _SUCCESS else default_of(tp)  # type: ignore[arg-type]

    def and_then(self, f: Callable[[T], TriStateOutcome[U, E]]) -> TriStateOutcome[U, E]:
        """Chain a step that itself yields a three-state outcome."""
        if self._state is _SUCCESS:
            return f(self._value)  # type: ignore[arg-type]
        return TriStateOutcome(self._state, self._value)

    def inspect(self, f: Callable[[T], Any]) -> TriStateOutcome[T, E]:
        """Call f with the Success value for side effects, return self."""
        if self._state is _SUCCESS:
            f(self._value)  # type: ignore[arg-type]
        return self

    def inspect_failure(self, f: Callable[[E], Any]) -> TriStateOutcome[T, E]:
        """Call f with the Failure error for side effects, return self."""
        if self._state is _FAILURE:
            f(self._value)  # type: ignore[arg-type]
        return self

    def match(self, *, success: Callable[[T], U], absent: Callable[[], U], failure: Callable[[E], U]) -> U:
        """Exhaustive case analysis over all three states."""
        if self._state is _SUCCESS:
            return success(self._value)  # type: ignore[arg-type]
        if self._state is _FAILURE:
            return failure(self._value)  # type: ignore[arg-type]
        return absent()

    # ─── Extraction ──────────────────────────────────────────────────

    def unwrap(self) -> T:
        """Extract the Success value.

        Raises:
            UnwrapError: If Absent or Failure
        """
        return self._take("unwrap", _SUCCESS)

    def expect(self, msg: str) -> T:
        """Extract the Success value, prefixing msg to the diagnostic otherwise."""
        return self._take("expect", _SUCCESS, message=msg)

    def unwrap_or(self, default: T) -> T:
        return self._value if self._state is _SUCCESS else default  # type: ignore[return-value]

    def unwrap_or_else(self, f: Callable[[], T]) -> T:
        """Success value, or f() for Absent and Failure alike."""
        return self._value if self._state is _SUCCESS else f()  # type: ignore[return-value]

    def unwrap_or_default(self, tp: type[T] | Callable[[], T]) -> T:
        """Success value, or the canonical default of tp."""
        return self._value if self._state is _SUCCESS else default_of(tp)  # type: ignore[return-value]

    def unwrap_unchecked(self) -> T:
        """Extract the Success value without a guaranteed state check.

        The caller must already know the state is Success. While
        `TristateSettings.check_unchecked` is on this behaves like unwrap();
        with it off the payload slot is returned as-is.
        """
        if get_settings().check_unchecked:
            return self._take("unwrap_unchecked", _SUCCESS)
        return self._value  # type: ignore[return-value]

    def unwrap_failure(self) -> E:
        """Extract the Failure error.

        Raises:
            UnwrapError: If Success or Absent
        """
        return self._take("unwrap_failure", _FAILURE)

    def expect_failure(self, msg: str) -> E:
        return self._take("expect_failure", _FAILURE, message=msg)

    def unwrap_failure_unchecked(self) -> E:
        """Extract the Failure error; checked only while check_unchecked is on."""
        if get_settings().check_unchecked:
            return self._take("unwrap_failure_unchecked", _FAILURE)
        return self._value  # type: ignore[return-value]

    def unwrap_infallible(self: TriStateOutcome[T, Any]) -> T:
        """Extract the Success value from an outcome whose error type is `Never`.

        Absent can still occur and raises UnwrapError. Failure is impossible by
        construction; reaching it means the error type was mis-declared and also
        raises, with the violation flagged unreachable.
        """
        if self._state is _FAILURE:
            violation = Violation.create("unwrap_infallible", _FAILURE, _SUCCESS,
                                         detail=repr(self._value), unreachable=True)
            _log.error("unwrap violated", operation="unwrap_infallible", actual=_FAILURE.value, unreachable=True)
            raise UnwrapError(violation)
        return self._take("unwrap_infallible", _SUCCESS)

    # ─── Optional Extraction ─────────────────────────────────────────

    def unwrap_option(self) -> T | None:
        """Value if Success, None if Absent.

        Raises:
            UnwrapError: If Failure
        """
        return self._take("unwrap_option", _SUCCESS, _ABSENT)

    def unwrap_option_unchecked(self) -> T | None:
        """Like unwrap_option(); checked only while check_unchecked is on."""
        if get_settings().check_unchecked:
            return self._take("unwrap_option_unchecked", _SUCCESS, _ABSENT)
        return self._value  # type: ignore[return-value]

    def unwrap_option_or_some(self, default: T) -> T | None:
        """Value if Success, None if Absent, default if Failure."""
        if self._state is _FAILURE:
            return default
        return self._value  # type: ignore[return-value]

    def unwrap_option_or_some_default(self, tp: type[T] | Callable[[], T]) -> T | None:
        """Value if Success, None if Absent, default_of(tp) if Failure."""
        if self._state is _FAILURE:
            return default_of(tp)
        return self._value  # type: ignore[return-value]

    def unwrap_option_or_none(self) -> T | None:
        """Value if Success, None for both Absent and Failure. Never raises."""
        return self._value if self._state is _SUCCESS else None  # type: ignore[return-value]

    # ─── Internals ───────────────────────────────────────────────────

    def _take(self, operation: str, *accepted: State, message: str | None = None) -> Any:
        if self._state in accepted:
            return self._value
        detail = None if self._state is _ABSENT else repr(self._value)
        violation = Violation.create(operation, self._state, *accepted, detail=detail)
        _log.debug("unwrap violated", operation=operation, actual=self._state.value,
                   expected=[s.value for s in accepted])
        raise UnwrapError(violation, message)

    @classmethod
    def __get_pydantic_core_schema__(cls, source: Any, handler: GetCoreSchemaHandler) -> CoreSchema:
        from .schema import outcome_schema
        return outcome_schema(cls, source, handler)

    # ─── Dunder Methods ──────────────────────────────────────────────

    def __bool__(self) -> bool:
        """True only for Success."""
        return self._state is _SUCCESS

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TriStateOutcome):
            return NotImplemented
        return self._state is other._state and self._value == other._value

    def __hash__(self) -> int:
        return hash((self._state, self._value))

    def __repr__(self) -> str:
        if self._state is _ABSENT:
            return "Absent()"
        return f"{self._state.label}({self._value!r})"

    __str__ = __repr__

    def __iter__(self) -> Iterator[T]:
        """Yields the value if Success, nothing otherwise."""
        if self._state is _SUCCESS:
            yield self._value  # type: ignore[misc]


# ═══════════════════════════════════════════════════════════════════════════════
# Constructors
# ═══════════════════════════════════════════════════════════════════════════════


def Success(value: T) -> TriStateOutcome[T, Any]:  # noqa: N802
    """Construct Success variant (succeeded with a value)."""
    return TriStateOutcome(_SUCCESS, value)


def Absent() -> TriStateOutcome[Any, Any]:  # noqa: N802
    """Construct Absent variant (succeeded with no value)."""
    return TriStateOutcome(_ABSENT, None)


def Failure(error: E) -> TriStateOutcome[Any, E]:  # noqa: N802
    """Construct Failure variant (failed)."""
    return TriStateOutcome(_FAILURE, error)


# ═══════════════════════════════════════════════════════════════════════════════
# Conversions
# ═══════════════════════════════════════════════════════════════════════════════


def from_outcome(result: Result[T | None, E]) -> TriStateOutcome[T, E]:
    """Err(e) -> Failure(e), Ok(None) -> Absent(), Ok(t) -> Success(t)."""
    if not result._is_ok:
        return TriStateOutcome(_FAILURE, result._value)
    return TriStateOutcome(_ABSENT if result._value is None else _SUCCESS, result._value)


def from_optional(value: T | None) -> TriStateOutcome[T, Any]:
    """None -> Absent(), anything else -> Success(value)."""
    return TriStateOutcome(_ABSENT if value is None else _SUCCESS, value)


def from_borrowed_optional(value: T | None, *, clone: bool = False) -> TriStateOutcome[T, Any]:
    """Like from_optional for a value still owned elsewhere (a dict entry, a list slot).

    The outcome shares the object by default. clone=True stores a shallow copy
    instead, detaching the outcome from later mutation of the source.

    Example:
        >>> scores = {"alice": [95, 91]}
        >>> from_borrowed_optional(scores.get("alice"), clone=True)
        Success([95, 91])
        >>> from_borrowed_optional(scores.get("diana"))
        Absent()
    """
    if value is None:
        return TriStateOutcome(_ABSENT, None)
    return TriStateOutcome(_SUCCESS, copy.copy(value) if clone else value)


# ═══════════════════════════════════════════════════════════════════════════════
# Collection Operations
# ═══════════════════════════════════════════════════════════════════════════════


def collect_present(outcomes: Iterable[TriStateOutcome[T, E]]) -> TriStateOutcome[list[T], E]:
    """Gather Success values, skipping Absent. Fail-fast on the first Failure.

    Example:
        >>> collect_present([Success(1), Absent(), Success(3)])
        Success([1, 3])
        >>> collect_present([Success(1), Failure("boom"), Success(3)])
        Failure('boom')
    """
    values: list[T] = []
    for o in outcomes:
        if o._state is _FAILURE:
            return TriStateOutcome(_FAILURE, o._value)
        if o._state is _SUCCESS:
            values.append(o._value)  # type: ignore[arg-type]
    return TriStateOutcome(_SUCCESS, values)
