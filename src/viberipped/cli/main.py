"""
CLI entry point using Typer.

Commands:
- setup: Interactive first-run wizard
- config: Show or set equipment; config set/get for named settings
- pool list/add/remove: Edit the exercise pool
- harder / softer: Step the difficulty multiplier
- test: Preview the next exercise without advancing
- trigger: Serve one exercise (or report the cooldown)
"""

from typing import Annotated

import typer

from .. import __version__
from ..logging_config import configure_logging
from .app import app

# Command modules register themselves on the shared app
from .commands import config, difficulty, pool, preview, setup  # noqa: F401


def _version_callback(value: bool) -> None:
    if value:
        print(f"viberipped {__version__}")
        raise typer.Exit(0)


@app.callback()
def main_callback(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show diagnostic log messages"),
    ] = False,
    version: Annotated[
        bool,
        typer.Option("--version", callback=_version_callback, is_eager=True, help="Show version"),
    ] = False,
) -> None:
    """
    viberipped: terse micro-exercise prompts while your assistant works.
    """
    configure_logging(verbose)


if __name__ == "__main__":
    app()
