"""
validation/loader.py: YAML plan documents.

Plans can be declared in data instead of code. A plan document is checked
against a bundled JSON Schema, its validator names are resolved through the
ValidatorRegistry, and the result is compiled by the same PlanBuilder used
from Python.

Usage:
    from opticheck.validation.loader import check_plan_file, load_plan_file

    for issue in check_plan_file(Path("plans/contact.yaml")):
        print(issue)

    plan = load_plan_file(Path("plans/contact.yaml"))
    plan.run({"name": "Alice", "email": "alice@example.com"})

Document format:
    mode: sequential                  # optional
    encoding: result                  # optional
    steps:
      - validators: hasContactMethod  # root step
      - at: name                      # Prism.key
        validators: [required, {name: minLength, options: {min: 3}}]
      - lens: [profile, id]           # Lens.path
        validators: required
      - traversal: [{lens: startDate}, {prism: endDate}]
        validators: dateRange
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError as SchemaError

from opticheck.config import PlanConfig
from opticheck.core.errors import BuildError
from opticheck.optics import Lens, Prism, Traversal
from opticheck.validation.plan import PlanBuilder, ValidationPlan
from opticheck.validation.registry import ValidatorRegistry
from opticheck.validation.steps import at
from opticheck.validation.validators import register_builtin_validators

logger = logging.getLogger(__name__)

_SCHEMA_PATH = Path(__file__).parent / "schemas" / "plan.schema.json"

# Option keys whose values are themselves validator entries (anyOf, not).
_NESTED_OPTIONS = ("validator", "validators")

_PROJECTION_MESSAGE = "a step may declare at most one of: at, lens, prism, traversal"


# ---------------------------------------------------------------------------
# Public data types
# ---------------------------------------------------------------------------


@dataclass
class PlanIssue:
    """A single finding for a plan document."""

    source: str
    message: str
    path: str = ""          # location within the document, e.g. "steps[2]/validators"
    severity: str = "error"

    def __str__(self) -> str:
        loc = f" at {self.path}" if self.path else ""
        return f"[{self.severity.upper()}] {self.source}{loc}: {self.message}"


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load_schema() -> dict[str, Any]:
    with _SCHEMA_PATH.open() as fh:
        return json.load(fh)


def _json_path(error: SchemaError) -> str:
    """Convert a jsonschema error path to a readable string."""
    parts = []
    for p in error.absolute_path:
        if isinstance(p, int):
            parts.append(f"[{p}]")
        else:
            parts.append(str(p))
    return "/".join(parts).replace("/[", "[")


def _read_yaml(path: Path) -> tuple[Any, list[PlanIssue]]:
    source = str(path)
    try:
        with path.open() as fh:
            raw = yaml.safe_load(fh)
    except OSError as exc:
        return None, [PlanIssue(source=source, message=f"Cannot read file: {exc}")]
    except yaml.YAMLError as exc:
        return None, [PlanIssue(source=source, message=f"YAML parse error: {exc}")]

    if raw is None:
        return None, [
            PlanIssue(source=source, message="File is empty or contains only whitespace")
        ]
    return raw, []


def _entry_names(entry: Any, path: str) -> list[tuple[str, str]]:
    """List (name, path) for every validator named in a validators value."""
    if isinstance(entry, list):
        found = []
        for i, item in enumerate(entry):
            found.extend(_entry_names(item, f"{path}[{i}]"))
        return found
    if isinstance(entry, str):
        return [(entry, path)]

    found = [(entry["name"], path)]
    options = entry.get("options") or {}
    for key in _NESTED_OPTIONS:
        nested = options.get(key)
        if isinstance(nested, (str, dict, list)):
            found.extend(_entry_names(nested, f"{path}/options/{key}"))
    return found


def _resolve_validators(entry: Any) -> Any:
    if isinstance(entry, list):
        return [_resolve_validators(item) for item in entry]
    if isinstance(entry, str):
        return ValidatorRegistry.get(entry)

    validator = ValidatorRegistry.get(entry["name"])
    options = dict(entry.get("options") or {})
    if not options:
        return validator
    for key in _NESTED_OPTIONS:
        if isinstance(options.get(key), (str, dict, list)):
            options[key] = _resolve_validators(options[key])
    return (validator, options)


def _projection(step: dict[str, Any]) -> Any:
    if "at" in step:
        return step["at"]
    if "lens" in step:
        return _lens(step["lens"])
    if "prism" in step:
        return _prism(step["prism"])
    if "traversal" in step:
        return Traversal.combine(
            [_lens(f["lens"]) if "lens" in f else _prism(f["prism"]) for f in step["traversal"]]
        )
    return None


def _lens(path: str | list[Any]) -> Lens:
    return Lens.key(path) if isinstance(path, str) else Lens.path(path)


def _prism(path: str | list[Any]) -> Prism:
    return Prism.key(path) if isinstance(path, str) else Prism.path(path)


def _to_descriptor(step: dict[str, Any]) -> Any:
    validators = _resolve_validators(step["validators"])
    projection = _projection(step)
    if projection is None:
        return validators
    return at(projection, validators)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def check_plan_document(doc: Any, source: str = "<document>") -> list[PlanIssue]:
    """
    Check a parsed plan document.

    Validates the document against the plan JSON Schema, then checks that
    every validator name it uses is registered. The built-in validators are
    registered first.

    Returns:
        A list of :class:`PlanIssue` objects (empty on success).
    """
    register_builtin_validators()

    issues: list[PlanIssue] = []
    validator = Draft202012Validator(_load_schema())
    errors = sorted(
        validator.iter_errors(doc), key=lambda e: [str(p) for p in e.absolute_path]
    )
    for error in errors:
        message = _PROJECTION_MESSAGE if error.validator == "not" else error.message
        issues.append(PlanIssue(source=source, message=message, path=_json_path(error)))

    if issues:
        return issues

    for index, step in enumerate(doc["steps"]):
        for name, path in _entry_names(step["validators"], f"steps[{index}]/validators"):
            if not ValidatorRegistry.is_registered(name):
                issues.append(
                    PlanIssue(
                        source=source,
                        message=f"Validator '{name}' is not registered",
                        path=path,
                    )
                )
    return issues


def check_plan_file(path: Path) -> list[PlanIssue]:
    """
    Parse and check a YAML plan file.

    Returns:
        A list of :class:`PlanIssue` objects (empty on success).
    """
    doc, issues = _read_yaml(path)
    if issues:
        return issues
    return check_plan_document(doc, source=str(path))


def load_plan(
    doc: Any,
    source: str = "<document>",
    config: PlanConfig | None = None,
) -> ValidationPlan:
    """
    Compile a parsed plan document.

    ``mode`` and ``encoding`` in the document take precedence over ``config``.

    Raises:
        BuildError: If the document has issues (available on ``.issues``)
            or a step cannot be compiled
    """
    issues = check_plan_document(doc, source=source)
    if issues:
        for issue in issues:
            logger.warning("%s", issue)
        raise BuildError(
            f"{source}: plan document has {len(issues)} issue(s)", issues=issues
        )

    builder = PlanBuilder()
    for step in doc["steps"]:
        builder.add_step(_to_descriptor(step))
    return builder.build(
        mode=doc.get("mode"), encoding=doc.get("encoding"), config=config
    )


def load_plan_file(path: Path, config: PlanConfig | None = None) -> ValidationPlan:
    """
    Read and compile a YAML plan file.

    Raises:
        BuildError: If the file cannot be read or parsed, or has issues
    """
    doc, issues = _read_yaml(path)
    if issues:
        for issue in issues:
            logger.warning("%s", issue)
        raise BuildError(issues[0].message, issues=issues)
    return load_plan(doc, source=str(path), config=config)
