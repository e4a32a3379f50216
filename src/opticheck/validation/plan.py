"""Validation plans and the plan builder.

A plan is compiled once from step descriptors and then run any number of
times. Compiled plans are immutable and safe to share between threads.

Example:
    from opticheck.validation import ValidationPlan, at
    from opticheck.validation.validators import Email, Required

    plan = (
        ValidationPlan.builder()
        .add_step("name", Required)
        .add_step(at("email", [Required, Email]))
        .build()
    )

    plan.run({"name": "", "email": "bad"})
    # Failure(ValidationError(errors=('is required', 'must be a valid email')))
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable

from opticheck.config import PlanConfig
from opticheck.core.errors import BuildError
from opticheck.core.types import Absent, Result, Success
from opticheck.validation.encoding import encode
from opticheck.validation.executor import Executor
from opticheck.validation.steps import Step, normalize_step
from opticheck.validation.types import Encoding, Mode

logger = logging.getLogger(__name__)

EMPTY_ENV: Mapping[str, Any] = MappingProxyType({})


@dataclass(frozen=True)
class ValidationPlan:
    """A compiled, reusable validation plan.

    Attributes:
        steps: Compiled steps in declared order
        mode: Evaluation strategy
        encoding: Output encoding of ``run``
        max_workers: Thread pool size for parallel runs
    """

    steps: tuple[Step, ...]
    mode: Mode = Mode.SEQUENTIAL
    encoding: Encoding = Encoding.RESULT
    max_workers: int | None = None
    _executor: Executor = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "_executor", Executor(self.steps, self.mode, self.max_workers)
        )

    @staticmethod
    def builder() -> PlanBuilder:
        return PlanBuilder()

    def run(self, value: Any, env: Mapping[str, Any] | Any = None) -> Any:
        """Validate ``value`` and return the outcome in the plan's encoding.

        Args:
            value: The input; returned untouched on success
            env: Read-only environment handed to every validator
                (defaults to an empty mapping)

        Raises:
            ValidationFailed: Under the ``raise`` encoding, when validation fails
            StructuralError: When a Lens projection cannot find its target
        """
        if env is None:
            env = EMPTY_ENV
        return encode(self._executor.execute(value, env), self.encoding)

    def __call__(self, value: Any, env: Mapping[str, Any] | Any = None) -> Any:
        return self.run(value, env)

    def validate(self, value: Any, options: Mapping[str, Any], env: Any) -> Result:
        """Validator contract, so a plan can be a step of another plan.

        The nested run shares the outer environment and always yields a
        Result, whatever this plan's encoding. An ``Absent`` focus passes.
        """
        if value is Absent:
            return Success(value)
        return self._executor.execute(value, env)

    def __len__(self) -> int:
        return len(self.steps)


class PlanBuilder:
    """Accumulates step descriptors and compiles them into a ValidationPlan.

    Descriptors are checked as they are added, so a malformed one raises
    BuildError at the ``add_step`` call that introduced it. A builder compiles
    exactly once; it rejects further steps after ``build``.
    """

    def __init__(self) -> None:
        self._steps: list[Step] = []
        self._built = False

    def add_step(self, *descriptor: Any) -> PlanBuilder:
        """Add one step.

        Accepts either a single descriptor (``Required``, ``at("name", ...)``,
        ``(validator, options)``) or a projection and a validator spec as two
        arguments.

        Returns:
            The builder, for chaining
        """
        if self._built:
            raise BuildError("plan already built; create a new builder")
        if len(descriptor) == 2:
            raw: Any = tuple(descriptor)
        elif len(descriptor) == 1:
            raw = descriptor[0]
        else:
            raise BuildError(
                f"add_step takes one descriptor or (projection, validators), "
                f"got {len(descriptor)} arguments",
                descriptor=descriptor,
                index=len(self._steps),
            )
        self._steps.append(normalize_step(raw, len(self._steps)))
        return self

    def add_steps(self, descriptors: Iterable[Any]) -> PlanBuilder:
        for descriptor in descriptors:
            self.add_step(descriptor)
        return self

    def build(
        self,
        mode: Mode | str | None = None,
        encoding: Encoding | str | None = None,
        config: PlanConfig | None = None,
    ) -> ValidationPlan:
        """Compile the plan.

        Args:
            mode: Overrides ``config.mode``
            encoding: Overrides ``config.encoding``
            config: Defaults for anything not given (``PlanConfig()`` if None)

        Raises:
            BuildError: On an unknown mode or encoding, or a second build
        """
        if self._built:
            raise BuildError("plan already built; create a new builder")
        config = config or PlanConfig()
        plan = ValidationPlan(
            steps=tuple(self._steps),
            mode=Mode.parse(mode if mode is not None else config.mode),
            encoding=Encoding.parse(encoding if encoding is not None else config.encoding),
            max_workers=config.max_workers,
        )
        self._built = True
        logger.debug(
            "Compiled validation plan: %d step(s), mode=%s, encoding=%s",
            len(plan.steps),
            plan.mode.value,
            plan.encoding.value,
        )
        return plan


def compile_plan(
    descriptors: Iterable[Any],
    mode: Mode | str | None = None,
    encoding: Encoding | str | None = None,
    config: PlanConfig | None = None,
) -> ValidationPlan:
    """Compile a list of descriptors in one call."""
    return PlanBuilder().add_steps(descriptors).build(mode, encoding, config)
