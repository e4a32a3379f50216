"""Plan defaults and environment configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass

from opticheck.core.errors import BuildError
from opticheck.validation.types import Encoding, Mode


@dataclass
class PlanConfig:
    """Defaults applied when a plan is built without explicit options.

    ``max_workers`` only affects parallel plans; None lets the thread pool
    pick its own size.
    """

    mode: Mode = Mode.SEQUENTIAL
    encoding: Encoding = Encoding.RESULT
    max_workers: int | None = None

    @classmethod
    def from_env(cls) -> PlanConfig:
        """Create config from environment variables.

        Reads:
        1. OPTICHECK_MODE (sequential | parallel)
        2. OPTICHECK_ENCODING (result | tagged | raise)
        3. OPTICHECK_MAX_WORKERS (positive integer)

        Unset variables keep the defaults.

        Raises:
            BuildError: If a variable holds an unknown or malformed value
        """
        config = cls()

        mode = os.environ.get("OPTICHECK_MODE")
        if mode:
            config.mode = Mode.parse(mode.strip().lower())

        encoding = os.environ.get("OPTICHECK_ENCODING")
        if encoding:
            config.encoding = Encoding.parse(encoding.strip().lower())

        workers = os.environ.get("OPTICHECK_MAX_WORKERS")
        if workers:
            config.max_workers = _parse_workers(workers)

        return config


def _parse_workers(raw: str) -> int:
    try:
        workers = int(raw)
    except ValueError:
        raise BuildError(
            f"OPTICHECK_MAX_WORKERS must be an integer, got {raw!r}", descriptor=raw
        ) from None
    if workers < 1:
        raise BuildError(
            f"OPTICHECK_MAX_WORKERS must be positive, got {workers}", descriptor=raw
        )
    return workers
