"""Exceptions raised by opticheck.

Validation failures are *values* (see ``opticheck.validation.types``); the
classes here cover programmer errors and the opt-in raising encoding.
"""

from typing import Any


class OpticheckError(Exception):
    """Base class for all opticheck exceptions."""


class StructuralError(OpticheckError, LookupError):
    """A Lens was used on a value that does not contain its target.

    This signals a bug in the caller (the Lens contract says the focus always
    exists), so it is raised immediately and never merged into an error set.
    """

    def __init__(self, location: Any, structure: Any):
        self.location = location
        self.structure = structure
        super().__init__(
            f"{location!r} not found in {type(structure).__name__}: {structure!r}"
        )


class BuildError(OpticheckError, ValueError):
    """A plan descriptor or plan option is malformed.

    Attributes:
        descriptor: The offending descriptor (or option value)
        index: Position of the descriptor in the step list, if known
        issues: Additional findings, e.g. schema issues from the plan loader
    """

    def __init__(
        self,
        message: str,
        descriptor: Any = None,
        index: int | None = None,
        issues: list[Any] | None = None,
    ):
        self.descriptor = descriptor
        self.index = index
        self.issues = list(issues or [])
        if index is not None:
            message = f"step {index}: {message}"
        super().__init__(message)
