"""Validator adapter: one calling convention for every validator shape.

Accepted shapes, resolved once when a plan is built:
- a BaseValidator subclass (instantiated once) or instance
- any other object with a ``validate(value, options, env)`` method, including
  a compiled ValidationPlan (nested validation)
- a plain callable taking ``(value, options, env)``, ``(value, options)``
  or ``(value)``

Accepted return values, normalized to Result on every call:
- ``Success(value)`` / ``Failure(error)``
- ``"ok"``                  -> ``Success(focus)``
- ``("ok", value)``         -> ``Success(value)``
- ``("error", payload)``    -> ``Failure(payload)``
"""

import inspect
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable

from opticheck.core.errors import BuildError
from opticheck.core.types import Failure, Result, Success
from opticheck.validation.registry import BaseValidator

EMPTY_OPTIONS: Mapping[str, Any] = MappingProxyType({})


@dataclass(frozen=True)
class ValidatorRef:
    """A validator normalized to ``(focus, options, env) -> Result``.

    Attributes:
        name: Display name used in logs and error messages
        func: The underlying three-argument callable
        prepare: Build-time options hook of class-based validators
    """

    name: str
    func: Callable[[Any, Mapping[str, Any], Any], Any] = field(compare=False)
    prepare: Callable[[Mapping[str, Any]], Mapping[str, Any]] | None = field(
        default=None, compare=False
    )

    def __repr__(self) -> str:
        return f"ValidatorRef({self.name})"

    def __call__(self, value: Any, options: Mapping[str, Any], env: Any) -> Result:
        return normalize_result(self.func(value, options, env), value, self.name)


def normalize_result(result: Any, value: Any, name: str = "validator") -> Result:
    """Convert a validator's return value into a Result.

    Raises:
        TypeError: If the validator returned something outside the contract
    """
    if isinstance(result, (Success, Failure)):
        return result
    if isinstance(result, str) and result == "ok":
        return Success(value)
    if isinstance(result, tuple) and len(result) == 2 and isinstance(result[0], str):
        tag, payload = result
        if tag == "ok":
            return Success(payload)
        if tag == "error":
            return Failure(payload)
    raise TypeError(
        f"{name} returned {result!r}; expected Success, Failure, 'ok', "
        "('ok', value) or ('error', payload)"
    )


def freeze_options(options: Any, descriptor: Any = None) -> Mapping[str, Any]:
    """Copy validator options into a read-only mapping."""
    if options is None:
        return EMPTY_OPTIONS
    if not isinstance(options, Mapping):
        raise BuildError(
            f"validator options must be a mapping, got {options!r}",
            descriptor=descriptor,
        )
    return MappingProxyType(dict(options))


def to_validator_ref(spec: Any) -> ValidatorRef:
    """Resolve one validator reference into a ValidatorRef.

    Raises:
        BuildError: If ``spec`` is not a usable validator
    """
    if isinstance(spec, ValidatorRef):
        return spec

    if isinstance(spec, type):
        if not callable(getattr(spec, "validate", None)):
            raise BuildError(
                f"class {spec.__name__} has no validate() method", descriptor=spec
            )
        try:
            instance = spec()
        except TypeError as exc:
            raise BuildError(
                f"cannot instantiate validator {spec.__name__}: {exc}", descriptor=spec
            ) from exc
        return ValidatorRef(spec.__name__, instance.validate, _prepare_hook(instance))

    if isinstance(spec, BaseValidator) or (
        not inspect.isroutine(spec) and callable(getattr(spec, "validate", None))
    ):
        return ValidatorRef(type(spec).__name__, spec.validate, _prepare_hook(spec))

    if callable(spec):
        return ValidatorRef(_callable_name(spec), _adapt_callable(spec))

    raise BuildError(f"invalid validator: {spec!r}", descriptor=spec)


def _adapt_callable(fn: Callable[..., Any]) -> Callable[[Any, Mapping[str, Any], Any], Any]:
    arity = _positional_arity(fn)
    if arity == 0:
        raise BuildError(
            f"validator {_callable_name(fn)} must accept the value to validate",
            descriptor=fn,
        )
    if arity >= 3:
        return fn
    if arity == 2:
        return lambda value, options, env: fn(value, options)
    return lambda value, options, env: fn(value)


def _positional_arity(fn: Callable[..., Any]) -> int:
    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError):
        # Some builtins expose no signature; treat them as single-argument.
        return 1

    count = 0
    for parameter in signature.parameters.values():
        if parameter.kind == inspect.Parameter.VAR_POSITIONAL:
            return 3
        if parameter.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        ):
            count += 1
    return count


def _callable_name(fn: Callable[..., Any]) -> str:
    return getattr(fn, "__qualname__", None) or getattr(fn, "__name__", None) or repr(fn)


def _prepare_hook(validator: Any) -> Callable[[Mapping[str, Any]], Mapping[str, Any]] | None:
    prepare = getattr(validator, "prepare", None)
    return prepare if callable(prepare) else None
