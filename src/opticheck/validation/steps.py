"""Step model and descriptor normalizer.

A plan is declared as an ordered list of step descriptors. Each descriptor is
either:

- a validator spec            -> root step, checks the whole value
- ``at(projection, spec)``    -> projected step, checks one part of the value
- ``(projection, spec)``      -> same as ``at``; a 2-tuple whose second item
                                 is a mapping is a ``(validator, options)``
                                 pair instead, i.e. a root step

Projection specs (resolved in this order):
- ``"name"``                  -> ``Prism.key("name")``        (optional field)
- ``["a", "b"]``              -> ``Prism.path(["a", "b"])``   (optional path)
- Lens / Prism / Traversal    -> used as given (an Iso is used as a Lens)
- any other callable          -> called with the whole value

Validator specs:
- ``Required``                -> one validator, no options
- ``(MinLength, {"min": 3})`` -> one validator with options
- ``[Required, (MinLength, {"min": 3})]`` -> several, run left to right

Everything is checked here, once. Malformed descriptors raise BuildError and
never reach the executor.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from opticheck.core.errors import BuildError
from opticheck.core.types import Absent, Present, Result
from opticheck.optics import Iso, Lens, Prism, Traversal
from opticheck.validation.adapter import (
    ValidatorRef,
    freeze_options,
    to_validator_ref,
)
from opticheck.validation.registry import BaseValidator

# Values that can never be a validator or a step.
_LITERALS = (str, bytes, bytearray, int, float, complex, bool, type(None))


# =============================================================================
# Step Model
# =============================================================================


class ProjectionKind(Enum):
    LENS = "lens"
    PRISM = "prism"
    TRAVERSAL = "traversal"
    FUNCTION = "function"


@dataclass(frozen=True)
class Projection:
    """A resolved projection: how a step finds its focus."""

    kind: ProjectionKind
    optic: Any

    def apply(self, value: Any) -> Any:
        """Compute the focus of ``value``.

        Lens projections raise StructuralError when the focus is missing.
        Prism projections give the bare value or the ``Absent`` sentinel.
        Traversal projections give the list of values that were found.
        """
        if self.kind is ProjectionKind.PRISM:
            found = self.optic.preview(value)
            return Absent if found is Absent else found.value
        if self.kind is ProjectionKind.LENS:
            return self.optic.view(value)
        if self.kind is ProjectionKind.TRAVERSAL:
            return self.optic.to_list(value)
        focus = self.optic(value)
        return focus.value if isinstance(focus, Present) else focus


@dataclass(frozen=True)
class BoundValidator:
    """A validator together with the options it was declared with."""

    ref: ValidatorRef
    options: Mapping[str, Any] = field(compare=False)

    def __call__(self, value: Any, env: Any) -> Result:
        return self.ref(value, self.options, env)


@dataclass(frozen=True)
class Step:
    """One compiled validation step.

    Attributes:
        projection: How to find the focus; None for root steps
        validators: Validators run against the focus, in order
        descriptor: The raw descriptor the step was built from (for messages)
    """

    projection: Projection | None
    validators: tuple[BoundValidator, ...]
    descriptor: Any = field(default=None, compare=False, repr=False)

    @property
    def is_root(self) -> bool:
        return self.projection is None

    def focus(self, value: Any) -> Any:
        if self.projection is None:
            return value
        return self.projection.apply(value)

    def run(self, value: Any, env: Any) -> list[Any]:
        """Run every validator of this step; return the failure payloads in order."""
        focus = self.focus(value)
        failures = []
        for validator in self.validators:
            result = validator(focus, env)
            if not result.is_success:
                failures.append(result.error)
        return failures


@dataclass(frozen=True)
class At:
    """Descriptor for a projected step. Build with ``at(projection, validators)``."""

    projection: Any
    validators: Any


def at(projection: Any, validators: Any) -> At:
    return At(projection, validators)


# =============================================================================
# Normalizer
# =============================================================================


def normalize_step(descriptor: Any, index: int | None = None) -> Step:
    """Compile one raw descriptor into a Step.

    Raises:
        BuildError: If the descriptor is not one of the recognized forms
    """
    try:
        if isinstance(descriptor, At):
            return Step(
                normalize_projection(descriptor.projection),
                normalize_validators(descriptor.validators),
                descriptor,
            )
        if (
            isinstance(descriptor, tuple)
            and len(descriptor) == 2
            and not isinstance(descriptor[1], Mapping)
        ):
            return Step(
                normalize_projection(descriptor[0]),
                normalize_validators(descriptor[1]),
                descriptor,
            )
        return Step(None, normalize_validators(descriptor), descriptor)
    except BuildError as exc:
        if exc.index is not None:
            raise
        raise BuildError(
            f"{exc} (in descriptor {descriptor!r})",
            descriptor=descriptor,
            index=index,
        ) from exc


def normalize_steps(descriptors: list[Any]) -> tuple[Step, ...]:
    return tuple(normalize_step(d, i) for i, d in enumerate(descriptors))


def normalize_projection(spec: Any) -> Projection:
    """Resolve a projection spec into a Projection."""
    if isinstance(spec, str):
        return Projection(ProjectionKind.PRISM, Prism.key(spec))

    if isinstance(spec, (list, tuple)):
        if not spec:
            raise BuildError("projection path must not be empty", descriptor=spec)
        for name in spec:
            if not isinstance(name, (str, int)) or isinstance(name, bool):
                raise BuildError(
                    f"projection path items must be field names, got {name!r}",
                    descriptor=spec,
                )
        return Projection(ProjectionKind.PRISM, Prism.path(spec))

    if isinstance(spec, Lens):
        return Projection(ProjectionKind.LENS, spec)
    if isinstance(spec, Iso):
        return Projection(ProjectionKind.LENS, spec.as_lens())
    if isinstance(spec, Prism):
        return Projection(ProjectionKind.PRISM, spec)
    if isinstance(spec, Traversal):
        return Projection(ProjectionKind.TRAVERSAL, spec)

    if _is_validator(spec):
        raise BuildError(
            f"{spec!r} is a validator, not a projection; "
            "use a list to declare several validators on the whole value",
            descriptor=spec,
        )

    if callable(spec):
        return Projection(ProjectionKind.FUNCTION, spec)

    raise BuildError(f"invalid projection: {spec!r}", descriptor=spec)


def normalize_validators(spec: Any) -> tuple[BoundValidator, ...]:
    """Flatten a validator spec into an ordered tuple of BoundValidators."""
    if _is_pair(spec):
        return (_bind(spec[0], spec[1]),)

    if isinstance(spec, (list, tuple)):
        if not spec:
            raise BuildError(
                "empty validator list; declare at least one validator", descriptor=spec
            )
        bound = []
        for item in spec:
            if _is_pair(item):
                bound.append(_bind(item[0], item[1]))
            elif isinstance(item, (list, tuple)):
                raise BuildError(
                    f"invalid validator in list: {item!r} (lists cannot be nested)",
                    descriptor=item,
                )
            else:
                bound.append(_bind(item, None))
        return tuple(bound)

    return (_bind(spec, None),)


def _bind(spec: Any, options: Any) -> BoundValidator:
    if isinstance(spec, _LITERALS):
        raise BuildError(
            f"invalid validator: {spec!r}; literals are not validators",
            descriptor=spec,
        )
    ref = to_validator_ref(spec)
    frozen = freeze_options(options, spec)
    if ref.prepare is not None:
        frozen = freeze_options(ref.prepare(frozen), spec)
    return BoundValidator(ref, frozen)


def _is_pair(spec: Any) -> bool:
    return isinstance(spec, tuple) and len(spec) == 2 and isinstance(spec[1], Mapping)


def _is_validator(spec: Any) -> bool:
    if isinstance(spec, (BaseValidator, ValidatorRef)):
        return True
    if isinstance(spec, type):
        return issubclass(spec, BaseValidator)
    return callable(getattr(type(spec), "validate", None))
