"""State discriminant and contract-violation errors.

A `Failure` is ordinary data and never raises. The types here cover the other
severity: calling an extraction whose state precondition does not hold, or
breaking the shared/exclusive view discipline. Both are programming errors and
surface as `RuntimeError` subclasses carrying a structured `Violation`.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Self

from pydantic import BaseModel, ConfigDict, Field, computed_field


class State(StrEnum):
    """The three mutually exclusive states of a `TriStateOutcome`."""
    SUCCESS = "success"
    ABSENT = "absent"
    FAILURE = "failure"

    @property
    def label(self) -> str:
        """Constructor name used in reprs and diagnostics."""
        return _LABELS[self]


_LABELS: dict[State, str] = {
    State.SUCCESS: "Success",
    State.ABSENT: "Absent",
    State.FAILURE: "Failure",
}


class Violation(BaseModel):
    """Structured record of a broken extraction precondition.

    Attributes:
        operation: Name of the operation that was called (e.g. "unwrap")
        expected: State(s) the operation accepts
        actual: State the instance was actually in
        detail: repr of the offending payload, if any
        unreachable: True when the state should have been impossible by type
    """

    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        json_schema_extra={
            "title": "Violation",
            "examples": [{"operation": "unwrap", "expected": ["success"], "actual": "absent"}],
        },
    )

    operation: Annotated[str, Field(min_length=1)]
    expected: tuple[State, ...] = Field(min_length=1)
    actual: State
    detail: str | None = None
    unreachable: bool = False

    @computed_field
    @property
    def actual_label(self) -> str:
        """Rendered actual state, including payload when there is one."""
        return f"{self.actual.label}({self.detail})" if self.detail is not None else f"{self.actual.label}()"

    @classmethod
    def create(
        cls,
        operation: str,
        actual: State,
        *expected: State,
        detail: str | None = None,
        unreachable: bool = False,
    ) -> Self:
        """Factory method for construction."""
        return cls(operation=operation, expected=expected, actual=actual, detail=detail, unreachable=unreachable)

    def render(self) -> str:
        """Format as a one-line diagnostic."""
        wanted = " or ".join(s.label for s in self.expected)
        msg = f"{self.operation}() on {self.actual_label}: expected {wanted}"
        return f"{msg} (state is unreachable for this error type)" if self.unreachable else msg

    __str__ = render


class TristateError(Exception):
    """Base for all contract violations raised by this package."""


class UnwrapError(TristateError, RuntimeError):
    """Raised when an extraction is called in a state it does not accept."""

    __slots__ = ("violation",)

    def __init__(self, violation: Violation, message: str | None = None) -> None:
        self.violation = violation
        super().__init__(f"{message}: {violation.render()}" if message else violation.render())


class BorrowError(TristateError, RuntimeError):
    """Raised when a view is taken that conflicts with a live view over the same owner."""
