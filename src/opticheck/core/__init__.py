"""Shared value types and exceptions."""

from opticheck.core.errors import BuildError, OpticheckError, StructuralError
from opticheck.core.types import (
    Absent,
    Failure,
    Maybe,
    Present,
    Result,
    Success,
    from_none,
    is_absent,
)

__all__ = [
    "Absent",
    "BuildError",
    "Failure",
    "Maybe",
    "OpticheckError",
    "Present",
    "Result",
    "StructuralError",
    "Success",
    "from_none",
    "is_absent",
]
