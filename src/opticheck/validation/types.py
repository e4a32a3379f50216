"""Core types for the opticheck validation system.

This module defines the types shared by the plan compiler and executor:
- Mode: how a plan evaluates its steps (sequential or parallel)
- Encoding: how a plan reports its outcome (result, tagged pair, raise)
- ValidationError: the accumulated error set of a failed run
- ValidationFailed: the exception raised by the ``raise`` encoding
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator

from opticheck.core.errors import BuildError, OpticheckError


class Mode(Enum):
    """Evaluation strategy.

    SEQUENTIAL: Steps run one at a time, in declared order
    PARALLEL: Steps may run concurrently; results are joined in declared order
    """

    SEQUENTIAL = "sequential"
    PARALLEL = "parallel"

    @classmethod
    def parse(cls, value: "Mode | str") -> "Mode":
        """Resolve a mode selector, raising BuildError for unknown values."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise BuildError(
                f"unknown mode {value!r}; expected one of: "
                + ", ".join(m.value for m in cls),
                descriptor=value,
            ) from None


class Encoding(Enum):
    """Output encoding of a compiled plan.

    RESULT: ``Success(value)`` or ``Failure(errors)``
    TAGGED: ``("ok", value)`` or ``("error", errors)``
    RAISE: the value itself, or ``ValidationFailed`` is raised
    """

    RESULT = "result"
    TAGGED = "tagged"
    RAISE = "raise"

    @classmethod
    def parse(cls, value: "Encoding | str") -> "Encoding":
        """Resolve an encoding selector, raising BuildError for unknown values."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise BuildError(
                f"unknown encoding {value!r}; expected one of: "
                + ", ".join(e.value for e in cls),
                descriptor=value,
            ) from None


@dataclass(frozen=True)
class ValidationError:
    """An ordered set of validation failures.

    This is a value, not an exception: failed runs return it inside
    ``Failure`` or an ``("error", ...)`` pair. Two error sets merge by
    concatenation, which is associative with ``ValidationError.empty()`` as
    identity.

    Attributes:
        errors: The individual failures, usually message strings
    """

    errors: tuple[Any, ...] = ()

    @classmethod
    def new(cls, errors: Any) -> "ValidationError":
        """Create an error set from one error or a list of errors."""
        if isinstance(errors, ValidationError):
            return errors
        if isinstance(errors, (list, tuple)):
            return cls(tuple(errors))
        return cls((errors,))

    @classmethod
    def empty(cls) -> "ValidationError":
        return cls(())

    def merge(self, other: "ValidationError") -> "ValidationError":
        return ValidationError(self.errors + other.errors)

    @property
    def messages(self) -> list[str]:
        return [str(error) for error in self.errors]

    def __iter__(self) -> Iterator[Any]:
        return iter(self.errors)

    def __len__(self) -> int:
        return len(self.errors)

    def __str__(self) -> str:
        return f"ValidationError({', '.join(self.messages)})"

    def to_dict(self) -> dict[str, Any]:
        return {"errors": [_error_to_dict(e) for e in self.errors]}


def _error_to_dict(error: Any) -> Any:
    if hasattr(error, "to_dict"):
        return error.to_dict()
    if isinstance(error, (str, int, float, bool)) or error is None:
        return error
    return str(error)


class ValidationFailed(OpticheckError):
    """Raised by plans using the ``raise`` encoding when validation fails.

    Attributes:
        errors: The accumulated error set (a ``ValidationError`` or any other
            appendable error value)
    """

    def __init__(self, errors: Any):
        self.errors = errors
        super().__init__(", ".join(error_messages(errors)))


def error_messages(errors: Any) -> list[str]:
    """Flatten any error set into display strings.

    ValidationError items nested inside a list error set are expanded.
    """
    if isinstance(errors, ValidationError):
        return errors.messages
    if isinstance(errors, (list, tuple)):
        return [message for error in errors for message in error_messages(error)]
    return [str(errors)]
