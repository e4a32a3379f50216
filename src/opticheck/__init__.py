"""opticheck: declarative data validation built on optics."""

from opticheck.core import (
    Absent,
    BuildError,
    Failure,
    Maybe,
    OpticheckError,
    Present,
    Result,
    StructuralError,
    Success,
)
from opticheck.optics import Iso, Lens, Prism, Traversal, compose
from opticheck.validation import (
    Encoding,
    Mode,
    PlanBuilder,
    ValidationError,
    ValidationFailed,
    ValidationPlan,
    ValidatorRegistry,
    at,
    compile_plan,
)

__version__ = "0.1.0"

__all__ = [
    "Absent",
    "BuildError",
    "Encoding",
    "Failure",
    "Iso",
    "Lens",
    "Maybe",
    "Mode",
    "OpticheckError",
    "PlanBuilder",
    "Present",
    "Prism",
    "Result",
    "StructuralError",
    "Success",
    "Traversal",
    "ValidationError",
    "ValidationFailed",
    "ValidationPlan",
    "ValidatorRegistry",
    "at",
    "compile_plan",
    "compose",
]
