"""Pool management commands: list, add (single or batch), remove."""

from typing import Annotated, Optional

import typer

from ...core.config import ANYWHERE, EXERCISE_TYPES
from ...core.models import Exercise
from ...io.pool_store import PoolError
from ...io.serializers import (
    ValidationError,
    parse_exercise_batch,
    validate_exercise_name,
    validate_reps,
)
from .. import views
from ..app import StateDirOption, app, get_pool_store

pool_app = typer.Typer(name="pool", help="List and edit the exercise pool.", no_args_is_help=True)
app.add_typer(pool_app, name="pool")

ADD_USAGE = 'viberipped pool add "Exercise name" <reps>'
BATCH_USAGE = 'viberipped pool add "Burpees 12, Mountain climbers 20"'


def _parse_environments(raw: str | None) -> list[str] | None:
    """Comma-separated environments; None when the value has no usable entry."""
    if raw is None:
        return [ANYWHERE]
    parsed = [env.strip() for env in raw.split(",") if env.strip()]
    return parsed or None


@pool_app.command("list")
def list_pool(state_dir: StateDirOption = None) -> None:
    """List pool exercises in rotation order."""
    try:
        pool = get_pool_store(state_dir).read()
    except PoolError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_pool(pool)


@pool_app.command("add")
def add(
    name: Annotated[str, typer.Argument(help='Exercise name, or a batch: "Burpees 12, Squats 20"')],
    reps: Annotated[
        Optional[str],
        typer.Argument(help="Reps (or seconds for timed exercises)"),
    ] = None,
    exercise_type: Annotated[
        str,
        typer.Option("--type", "-t", help="Exercise type: reps or timed"),
    ] = "reps",
    duration: Annotated[
        Optional[str],
        typer.Option("--duration", help="Duration in seconds (timed exercises)"),
    ] = None,
    environments: Annotated[
        Optional[str],
        typer.Option("--environments", help="Comma-separated environments, e.g. home,office"),
    ] = None,
    state_dir: StateDirOption = None,
) -> None:
    """
    Add one or more exercises to the pool.

    Single:  viberipped pool add "Burpees" 12
    Batch:   viberipped pool add "Burpees 12, Mountain climbers 20"

    A batch is added only if every item is valid.  Adding resets the rotation
    to the beginning of the pool.
    """
    if exercise_type not in EXERCISE_TYPES:
        views.print_error('Invalid type (must be "reps" or "timed")', f"{ADD_USAGE} --type <reps|timed>")
        raise typer.Exit(1)

    validated_duration = None
    if duration is not None:
        validated_duration = validate_reps(duration)
        if validated_duration is None:
            views.print_error("Invalid duration (must be integer 1-999)", f"{ADD_USAGE} --duration <seconds>")
            raise typer.Exit(1)
        if exercise_type != "timed":
            views.print_warning("--duration only applies to timed exercises, ignoring it")
            validated_duration = None

    envs = _parse_environments(environments)
    if envs is None:
        views.print_error(
            "Invalid environments (provide comma-separated list)",
            f'{ADD_USAGE} --environments "home,office"',
        )
        raise typer.Exit(1)

    if reps is None:
        try:
            items = parse_exercise_batch(name)
        except ValidationError as e:
            views.print_error(str(e), BATCH_USAGE)
            raise typer.Exit(1)
    else:
        validated_name = validate_exercise_name(name)
        if validated_name is None:
            views.print_error("Invalid exercise name (must be 1-50 characters)", ADD_USAGE)
            raise typer.Exit(1)
        validated_reps = validate_reps(reps)
        if validated_reps is None:
            views.print_error("Invalid reps (must be integer 1-999)", ADD_USAGE)
            raise typer.Exit(1)
        items = [(validated_name, validated_reps)]

    exercises = [
        Exercise(
            name=item_name,
            reps=item_reps,
            type=exercise_type,
            duration=validated_duration,
            equipment=[],
            environments=list(envs),
        )
        for item_name, item_reps in items
    ]

    try:
        get_pool_store(state_dir).add_exercises(exercises)
    except PoolError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if len(exercises) == 1:
        ex = exercises[0]
        shown = f"{ex.amount}s" if ex.is_timed else f"x{ex.amount}"
        views.print_success(f'Added "{ex.name}" {shown} to pool')
    else:
        names = ", ".join(ex.name for ex in exercises)
        views.print_success(f"Added {len(exercises)} exercises to pool: {names}")
    views.print_info("Rotation index reset to beginning.")


@pool_app.command("remove")
def remove(
    name: Annotated[str, typer.Argument(help="Exercise name (case-insensitive)")],
    state_dir: StateDirOption = None,
) -> None:
    """Remove an exercise from the pool by name."""
    try:
        removed = get_pool_store(state_dir).remove_exercise(name)
    except PoolError as e:
        views.print_error(str(e), 'viberipped pool remove "Exercise name"')
        raise typer.Exit(1)

    views.print_success(f'Removed "{removed.name}" from pool')
    views.print_info("Rotation index reset to beginning.")
