"""Difficulty commands: harder and softer."""

from ...core.difficulty import difficulty_label
from .. import views
from ..app import StateDirOption, app, get_config_store


def _step(harder: bool, state_dir) -> None:
    previous, new = get_config_store(state_dir).step_difficulty(harder)

    if new == previous:
        bound = "maximum" if harder else "minimum"
        views.print_info(f"Already at {bound} difficulty: {difficulty_label(new)}")
        return

    verb = "increased" if harder else "decreased"
    views.print_success(
        f"Difficulty {verb}: {difficulty_label(previous)} -> {difficulty_label(new)}"
    )


@app.command()
def harder(state_dir: StateDirOption = None) -> None:
    """Increase difficulty by one step (max 2.5x)."""
    _step(True, state_dir)


@app.command()
def softer(state_dir: StateDirOption = None) -> None:
    """Decrease difficulty by one step (min 0.5x)."""
    _step(False, state_dir)
