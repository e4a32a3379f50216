"""Core value types for opticheck.

Two small two-variant types are shared by the optics and the validation layers:

- Maybe: ``Present(value)`` or the ``Absent`` singleton (partial access results)
- Result: ``Success(value)`` or ``Failure(error)`` (validator outcomes)

Both are immutable and compare by value, so they can be asserted on directly
in tests and shared freely between threads.
"""

from dataclasses import dataclass
from typing import Any, Callable, Union


# =============================================================================
# Maybe
# =============================================================================


class _AbsentType:
    """Marker for a focus that is not there.

    There is exactly one instance, exported as ``Absent``. It is falsy so that
    ``if maybe:`` reads naturally, but callers should prefer ``is Absent``.
    """

    _instance: "_AbsentType | None" = None

    def __new__(cls) -> "_AbsentType":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "Absent"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "Absent"

    @property
    def is_present(self) -> bool:
        return False

    def get_or(self, default: Any) -> Any:
        return default

    def map(self, fn: Callable[[Any], Any]) -> "Maybe":
        return self

    def bind(self, fn: Callable[[Any], "Maybe"]) -> "Maybe":
        return self


Absent = _AbsentType()


@dataclass(frozen=True)
class Present:
    """A focus that was found."""

    value: Any

    @property
    def is_present(self) -> bool:
        return True

    def get_or(self, default: Any) -> Any:
        return self.value

    def map(self, fn: Callable[[Any], Any]) -> "Maybe":
        return Present(fn(self.value))

    def bind(self, fn: Callable[[Any], "Maybe"]) -> "Maybe":
        return fn(self.value)


Maybe = Union[Present, _AbsentType]


def from_none(value: Any) -> Maybe:
    """Lift a possibly-None value into Maybe (None becomes Absent)."""
    if value is None:
        return Absent
    return Present(value)


def is_absent(value: Any) -> bool:
    return value is Absent


# =============================================================================
# Result
# =============================================================================


@dataclass(frozen=True)
class Success:
    """Outcome of a check that passed. Carries the checked value."""

    value: Any

    @property
    def is_success(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    """Outcome of a check that failed. Carries the error payload."""

    error: Any

    @property
    def is_success(self) -> bool:
        return False


Result = Union[Success, Failure]
