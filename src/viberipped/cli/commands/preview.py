"""Trigger commands: test (preview the next exercise) and trigger."""

import json
from typing import Annotated

import typer

from ...core.models import ExerciseResult
from ...engine import TriggerOptions, trigger
from ...io.serializers import trigger_result_to_dict
from .. import views
from ..app import StateDirOption, app, get_paths


@app.command("test")
def test_next(state_dir: StateDirOption = None) -> None:
    """
    Preview the next exercise without advancing the rotation.

    Ignores the cooldown and leaves state.json untouched.
    """
    options = TriggerOptions(
        state_path=get_paths(state_dir).state,
        bypass_cooldown=True,
        dry_run=True,
    )
    result = trigger(None, options)

    if not isinstance(result, ExerciseResult):
        views.print_error("No exercise available")
        raise typer.Exit(1)

    views.console.print(f"Next exercise: [bold cyan]{result.prompt}[/bold cyan]")
    views.console.print(f"Position: {result.position.current + 1} of {result.position.total}")
    views.console.print(f"Total triggered: {result.total_triggered}")
    views.console.print("[dim](dry-run: rotation state unchanged)[/dim]")


@app.command("trigger")
def trigger_once(
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output result as JSON"),
    ] = False,
    state_dir: StateDirOption = None,
) -> None:
    """
    Run one trigger: serve the next exercise or report the cooldown.
    """
    result = trigger(None, TriggerOptions(state_path=get_paths(state_dir).state))

    if json_output:
        print(json.dumps(trigger_result_to_dict(result), indent=2, ensure_ascii=False))
        return

    views.print_trigger_result(result)
