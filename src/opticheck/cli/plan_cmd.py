"""Plan CLI commands: check-plan and run."""

import dataclasses
import logging
from pathlib import Path

import click
import yaml

from opticheck.config import PlanConfig
from opticheck.core.errors import BuildError, OpticheckError
from opticheck.validation.loader import check_plan_file, load_plan_file
from opticheck.validation.types import Encoding, Mode, error_messages


def _load_config() -> PlanConfig:
    try:
        return PlanConfig.from_env()
    except BuildError as e:
        click.echo(click.style(f"Invalid configuration: {e}", fg="red"), err=True)
        raise SystemExit(1)


def _report_issues(issues) -> None:
    for issue in issues:
        colour = "red" if issue.severity == "error" else "yellow"
        click.echo(click.style(str(issue), fg=colour))


@click.command("check-plan")
@click.argument("plan_path", metavar="PLAN", type=click.Path(exists=True, path_type=Path))
def check_plan(plan_path: Path):
    """Check a YAML plan file against the plan schema and validator registry."""
    issues = check_plan_file(plan_path)
    _report_issues(issues)
    if issues:
        click.echo(click.style(f"\n{len(issues)} issue(s) found", fg="red", bold=True))
        raise SystemExit(1)

    # ── Compile ──────────────────────────────────────────────────────────────
    try:
        plan = load_plan_file(plan_path, config=_load_config())
    except BuildError as e:
        click.echo(click.style(f"Plan does not compile: {e}", fg="red"), err=True)
        raise SystemExit(1)

    click.echo(f"  ✓ {plan_path} ({len(plan)} steps, mode: {plan.mode.value})")
    click.echo(click.style("\nPlan is valid.", fg="green", bold=True))


@click.command()
@click.argument("plan_path", metavar="PLAN", type=click.Path(exists=True, path_type=Path))
@click.argument(
    "documents", metavar="DOCUMENT...", nargs=-1, required=True,
    type=click.Path(exists=True, path_type=Path),
)
@click.option(
    "--mode",
    type=click.Choice([m.value for m in Mode]),
    default=None,
    help="Override the plan's evaluation mode.",
)
@click.option("--verbose", is_flag=True, default=False, help="Enable debug logging.")
def run(plan_path: Path, documents: tuple[Path, ...], mode: str | None, verbose: bool):
    """Validate YAML or JSON documents against a plan."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG)

    try:
        plan = load_plan_file(plan_path, config=_load_config())
    except BuildError as e:
        _report_issues(e.issues)
        click.echo(click.style(f"Plan does not compile: {e}", fg="red"), err=True)
        raise SystemExit(1)

    # The CLI reports failures itself, whatever the plan's encoding.
    overrides = {"encoding": Encoding.RESULT}
    if mode is not None:
        overrides["mode"] = Mode.parse(mode)
    plan = dataclasses.replace(plan, **overrides)

    failed = 0
    for path in documents:
        try:
            with path.open() as fh:
                document = yaml.safe_load(fh)
        except yaml.YAMLError as e:
            click.echo(click.style(f"{path}: cannot parse document: {e}", fg="red"))
            failed += 1
            continue

        try:
            result = plan.run(document)
        except OpticheckError as e:
            click.echo(click.style(f"{path}: ERROR {e}", fg="red"))
            failed += 1
            continue

        if result.is_success:
            click.echo(f"{path}: " + click.style("OK", fg="green"))
            continue

        failed += 1
        click.echo(f"{path}: " + click.style("FAILED", fg="red", bold=True))
        for message in error_messages(result.error):
            click.echo(f"  - {message}")

    if failed:
        click.echo(
            click.style(f"\n{failed} of {len(documents)} document(s) failed", fg="red", bold=True)
        )
        raise SystemExit(1)
