"""Plan executor.

Runs compiled steps against one input and folds every failure into a single
error set. Nothing short-circuits: each step and each validator runs, and
failures are ordered by step then by validator, whatever the mode.

Exceptions (StructuralError from a Lens projection, anything raised by
validator code) are not caught; they abort the run unchanged.
"""

import logging
from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from opticheck.core.types import Failure, Result, Success
from opticheck.validation.appendable import accumulate
from opticheck.validation.steps import Step
from opticheck.validation.types import Mode

logger = logging.getLogger(__name__)


class Executor:
    """Evaluates a tuple of steps in one of the two modes.

    Args:
        steps: The compiled steps, in declared order
        mode: Sequential or parallel evaluation
        max_workers: Thread pool size for parallel runs (None = pool default)
    """

    def __init__(
        self,
        steps: tuple[Step, ...],
        mode: Mode = Mode.SEQUENTIAL,
        max_workers: int | None = None,
    ):
        self.steps = steps
        self.mode = mode
        self.max_workers = max_workers

    def execute(self, value: Any, env: Mapping[str, Any] | Any) -> Result:
        """Run every step against ``value``.

        Returns:
            ``Success(value)`` with the untouched input, or ``Failure`` holding
            the accumulated error set
        """
        if not self.steps:
            return Success(value)

        if self.mode is Mode.PARALLEL and len(self.steps) > 1:
            per_step = self._run_parallel(value, env)
        else:
            per_step = [step.run(value, env) for step in self.steps]

        errors = accumulate(payload for failures in per_step for payload in failures)
        if errors is None:
            return Success(value)

        logger.debug(
            "Validation failed with %d error(s) across %d step(s)",
            _size(errors),
            sum(1 for failures in per_step if failures),
        )
        return Failure(errors)

    def _run_parallel(self, value: Any, env: Any) -> list[list[Any]]:
        # map() yields in submission order and re-raises the first failing
        # step's exception when its result is reached.
        with ThreadPoolExecutor(
            max_workers=self.max_workers, thread_name_prefix="opticheck"
        ) as pool:
            return list(pool.map(lambda step: step.run(value, env), self.steps))


def _size(errors: Any) -> int:
    try:
        return len(errors)
    except TypeError:
        return 1
