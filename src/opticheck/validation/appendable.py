"""Appendable: how individual failures combine into one error set.

An appendable provides two operations:
- coerce(raw): normalize one failure payload into an accumulator value
- append(accumulated, raw): combine an accumulator with another payload

``append`` must be associative so that the merged error set does not depend
on how the executor groups its work.

The accumulator's type selects the appendable through ``AppendableRegistry``.
Types without a registration fall back to list flattening, so unstructured
errors (plain strings, dicts, ...) still compose.

Example:
    AppendableRegistry.register(IssueBag, IssueBagAppendable())

    accumulate(["too short", "not an email"])
    # ["too short", "not an email"]

    accumulate([ValidationError.new("a"), ValidationError.new("b")])
    # ValidationError(errors=("a", "b"))
"""

from typing import Any, Iterable, Protocol

from opticheck.validation.types import ValidationError


class Appendable(Protocol):
    """Protocol for error accumulation strategies."""

    def coerce(self, raw: Any) -> Any:
        ...

    def append(self, accumulated: Any, raw: Any) -> Any:
        ...


class ListAppendable:
    """Default strategy: every payload becomes a list and lists concatenate."""

    def coerce(self, raw: Any) -> list[Any]:
        if isinstance(raw, list):
            return list(raw)
        return [raw]

    def append(self, accumulated: Any, raw: Any) -> list[Any]:
        return self.coerce(accumulated) + self.coerce(raw)


class ValidationErrorAppendable:
    """Strategy for ``ValidationError``: payloads merge into one error set."""

    def coerce(self, raw: Any) -> ValidationError:
        return ValidationError.new(raw)

    def append(self, accumulated: ValidationError, raw: Any) -> ValidationError:
        return accumulated.merge(self.coerce(raw))


DEFAULT_APPENDABLE = ListAppendable()


class AppendableRegistry:
    """Registry mapping error types to their appendable.

    Lookup walks the MRO of the value's type, so subclasses inherit the
    strategy of their base class.
    """

    _builtin: dict[type, Appendable] = {ValidationError: ValidationErrorAppendable()}
    _appendables: dict[type, Appendable] = dict(_builtin)

    @classmethod
    def register(cls, kind: type, appendable: Appendable) -> None:
        """Register the appendable for an error type.

        Idempotent - re-registering a type that already has an entry is a no-op.
        """
        if kind in cls._appendables:
            return
        cls._appendables[kind] = appendable

    @classmethod
    def for_value(cls, value: Any) -> Appendable:
        for kind in type(value).__mro__:
            appendable = cls._appendables.get(kind)
            if appendable is not None:
                return appendable
        return DEFAULT_APPENDABLE

    @classmethod
    def is_registered(cls, kind: type) -> bool:
        return kind in cls._appendables

    @classmethod
    def reset(cls) -> None:
        """Drop custom registrations, keeping the built-in ones. For testing."""
        cls._appendables = dict(cls._builtin)


def accumulate(payloads: Iterable[Any]) -> Any | None:
    """Fold failure payloads, left to right, into one error set.

    Returns None when there are no payloads.
    """
    accumulated: Any = None
    started = False
    for raw in payloads:
        if not started:
            accumulated = AppendableRegistry.for_value(raw).coerce(raw)
            started = True
        else:
            accumulated = AppendableRegistry.for_value(accumulated).append(accumulated, raw)
    return accumulated if started else None
