"""ScoutMerge CLI — review submissions and resolve scouting conflicts.

Entry point registered in pyproject.toml:
    scoutmerge = "scoutmerge.cli:app"

Usage:
    scoutmerge --help
    scoutmerge review --reviewer <id>
    scoutmerge aggregate q1
    scoutmerge conflicts --match-id q1
    scoutmerge resolve q1
"""

import logging

import typer

from scoutmerge.cli.commands import aggregate, conflicts, resolve, review
from scoutmerge.config import settings

app = typer.Typer(
    name="scoutmerge",
    help="ScoutMerge CLI — reconcile scouting submissions",
    no_args_is_help=True,
)


@app.callback()
def main() -> None:
    logging.basicConfig(level=settings.log_level)


app.command()(review)
app.command()(aggregate)
app.command()(conflicts)
app.command()(resolve)
