"""Output adapter: shapes a run's Result into the plan's encoding."""

from typing import Any

from opticheck.core.types import Result
from opticheck.validation.types import Encoding, ValidationFailed


def encode(result: Result, encoding: Encoding) -> Any:
    """Encode a run outcome.

    Args:
        result: ``Success(value)`` or ``Failure(errors)`` from the executor
        encoding: The plan's output encoding

    Returns:
        The Result itself, an ``("ok", value)`` / ``("error", errors)`` pair,
        or the bare value

    Raises:
        ValidationFailed: Under ``Encoding.RAISE`` when the run failed
    """
    if encoding is Encoding.RESULT:
        return result

    if encoding is Encoding.TAGGED:
        if result.is_success:
            return ("ok", result.value)
        return ("error", result.error)

    if result.is_success:
        return result.value
    raise ValidationFailed(result.error)
