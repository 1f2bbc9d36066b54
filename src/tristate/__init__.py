"""Three-state outcome type unifying Result and Optional.

A lookup that can fail has three answers: found it, found nothing, or broke.
`TriStateOutcome[T, E]` models them directly instead of nesting an optional
inside a result.

Example:
    >>> from tristate import Failure, TriStateOutcome, from_optional
    >>>
    >>> def find_user(db: dict[int, str], uid: int) -> TriStateOutcome[str, str]:
    ...     if uid < 0:
    ...         return Failure("invalid id")
    ...     return from_optional(db.get(uid))
    >>>
    >>> find_user({1: "ada"}, 1).map(str.upper).unwrap()
    'ADA'
    >>> find_user({1: "ada"}, 2).unwrap_option_or_none() is None
    True
"""

from .defaults import HasDefault, default_of
from .errors import BorrowError, State, TristateError, UnwrapError, Violation
from .outcome import (
    Absent,
    Failure,
    Success,
    TriStateOutcome,
    collect_present,
    from_borrowed_optional,
    from_optional,
    from_outcome,
)
from .result import Err, Ok, Result
from .schema import dump_outcome, load_outcome
from .views import MutableView, Ref

__all__ = [
    # Core type
    "TriStateOutcome", "State", "Success", "Absent", "Failure",
    # Conversions
    "from_outcome", "from_optional", "from_borrowed_optional", "collect_present",
    # Binary outcome
    "Result", "Ok", "Err",
    # Views
    "MutableView", "Ref",
    # Errors
    "TristateError", "UnwrapError", "BorrowError", "Violation",
    # Defaults
    "HasDefault", "default_of",
    # Serialization
    "dump_outcome", "load_outcome",
]
