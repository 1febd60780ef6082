"""Configuration commands: equipment flags and named settings."""

from typing import Annotated, Optional

import typer

from ...core.config import DUMBBELLS, EQUIPMENT_LABELS, KETTLEBELL, PARALLETTES, PULL_UP_BAR
from ...io.serializers import ValidationError
from .. import views
from ..app import StateDirOption, app, get_config_store, regenerate_pool

config_app = typer.Typer(
    name="config",
    help="Show or change equipment and settings.",
    invoke_without_command=True,
    no_args_is_help=False,
)
app.add_typer(config_app, name="config")


@config_app.callback(invoke_without_command=True)
def config(
    ctx: typer.Context,
    kettlebell: Annotated[
        Optional[bool],
        typer.Option("--kettlebell/--no-kettlebell", help="Kettlebell available"),
    ] = None,
    dumbbells: Annotated[
        Optional[bool],
        typer.Option("--dumbbells/--no-dumbbells", help="Dumbbells available"),
    ] = None,
    pull_up_bar: Annotated[
        Optional[bool],
        typer.Option("--pull-up-bar/--no-pull-up-bar", help="Pull-up bar available"),
    ] = None,
    parallettes: Annotated[
        Optional[bool],
        typer.Option("--parallettes/--no-parallettes", help="Parallettes available"),
    ] = None,
    state_dir: StateDirOption = None,
) -> None:
    """
    Show the configuration, or set equipment flags.

    Changing equipment regenerates the exercise pool and restarts the
    rotation from the beginning:

      viberipped config --kettlebell --no-dumbbells
    """
    if ctx.invoked_subcommand is not None:
        return

    store = get_config_store(state_dir)
    requested = {
        KETTLEBELL: kettlebell,
        DUMBBELLS: dumbbells,
        PULL_UP_BAR: pull_up_bar,
        PARALLETTES: parallettes,
    }
    updates = {key: value for key, value in requested.items() if value is not None}

    if not updates:
        views.print_config(store.load())
        return

    try:
        cfg = store.set_equipment(updates)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    pool = regenerate_pool(state_dir, cfg)

    enabled = [EQUIPMENT_LABELS[key] for key in cfg.enabled_equipment]
    summary = ", ".join(enabled) if enabled else "bodyweight only"
    views.print_success(f"Configuration updated: {summary}")
    views.print_info(f"Pool generated with {len(pool)} exercises.")


@config_app.command("set")
def set_value(
    key: Annotated[str, typer.Argument(help="Setting name (environment)")],
    value: Annotated[str, typer.Argument(help="New value")],
    state_dir: StateDirOption = None,
) -> None:
    """
    Set a named setting.

      viberipped config set environment office
    """
    store = get_config_store(state_dir)
    try:
        store.set_setting(key, value)
    except ValidationError as e:
        views.print_error(str(e), "viberipped config set environment <value>")
        raise typer.Exit(1)

    views.print_success(f"{key} set to {value.strip()}")


@config_app.command("get")
def get_value(
    key: Annotated[str, typer.Argument(help="Setting name (environment)")],
    state_dir: StateDirOption = None,
) -> None:
    """Print a named setting."""
    store = get_config_store(state_dir)
    try:
        value = store.get_setting(key)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.console.print(value, markup=False, highlight=False)
