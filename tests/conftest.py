"""Shared fixtures for opticheck tests."""

import pytest

from opticheck.validation.appendable import AppendableRegistry
from opticheck.validation.registry import ValidatorRegistry
from opticheck.validation.validators import register_builtin_validators


@pytest.fixture(autouse=True)
def setup_registries():
    """Start every test with only the built-in registrations."""
    ValidatorRegistry.clear()
    AppendableRegistry.reset()
    register_builtin_validators()
    yield
    ValidatorRegistry.clear()
    AppendableRegistry.reset()
