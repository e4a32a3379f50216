"""opticheck CLI entry point."""

import click


@click.group()
def cli():
    """opticheck: declarative validation plans built on optics."""
    pass


# Register subcommands
from opticheck.cli.plan_cmd import check_plan, run  # noqa: E402

cli.add_command(check_plan)
cli.add_command(run)
