"""Validator base class and registry.

Provides:
- BaseValidator: the class-based form of the validator contract
- ValidatorRegistry: name -> validator class lookup, used when plans are
  declared in data (YAML) rather than in code
"""

from collections.abc import Mapping
from typing import Any, Callable, ClassVar

from opticheck.core.types import Absent, Failure, Result, Success
from opticheck.validation.types import ValidationError


class BaseValidator:
    """Base class for validators.

    Subclasses override ``check``. ``validate`` implements the absence rule:
    an ``Absent`` focus passes unless the subclass sets ``handles_absent``.
    Only presence checks should set it.

    Validators are stateless; one instance is shared by every run of a plan.
    """

    handles_absent: ClassVar[bool] = False

    def validate(self, value: Any, options: Mapping[str, Any], env: Any) -> Result:
        if value is Absent and not self.handles_absent:
            return Success(value)
        return self.check(value, options, env)

    def prepare(self, options: Mapping[str, Any]) -> Mapping[str, Any]:
        """Resolve options once, when the plan is built.

        Validators whose options hold other validators override this to
        compile them. Raise BuildError for options that can never work.
        """
        return options

    def check(self, value: Any, options: Mapping[str, Any], env: Any) -> Result:
        """Validate a present value. Override in subclasses."""
        raise NotImplementedError("Subclasses must implement check()")

    def fail(self, options: Mapping[str, Any], value: Any, default: str) -> Failure:
        """Build a Failure carrying a one-message ValidationError.

        The ``message`` option, a string or a callable receiving the value,
        overrides ``default``.
        """
        return Failure(ValidationError.new(build_message(options, value, default)))


def build_message(options: Mapping[str, Any], value: Any, default: str) -> str:
    message = options.get("message")
    if message is None:
        return default
    if callable(message):
        return message(value)
    return str(message)


class ValidatorRegistry:
    """Registry for validator types.

    Validators must be registered before a data-declared plan can refer to
    them by name. The built-in catalogue registers itself through
    ``register_builtin_validators``; applications register their own at
    startup.

    Example:
        ValidatorRegistry.register("myapp.orderTotal", OrderTotalValidator)
        validator_class = ValidatorRegistry.get("myapp.orderTotal")
    """

    _validators: dict[str, type[BaseValidator] | Callable[..., Any]] = {}

    @classmethod
    def register(cls, name: str, validator: type[BaseValidator] | Callable[..., Any]) -> None:
        """Register a validator class (or plain validator function) by name.

        Idempotent - re-registering the same name is a no-op.
        """
        if name in cls._validators:
            return
        cls._validators[name] = validator

    @classmethod
    def get(cls, name: str) -> type[BaseValidator] | Callable[..., Any]:
        """Get a registered validator by name.

        Raises:
            ValueError: If the validator is not registered
        """
        if name not in cls._validators:
            raise ValueError(
                f"Validator '{name}' is not registered. Available validators: "
                + ", ".join(cls.list_registered())
            )
        return cls._validators[name]

    @classmethod
    def is_registered(cls, name: str) -> bool:
        return name in cls._validators

    @classmethod
    def list_registered(cls) -> list[str]:
        return sorted(cls._validators)

    @classmethod
    def clear(cls) -> None:
        """Clear all registrations. Primarily for testing."""
        cls._validators.clear()
