"""Interactive first-run setup wizard."""

import sys

import typer

from ...core.config import CURRENT_SCHEMA_VERSION, EQUIPMENT_KEYS, EQUIPMENT_LABELS
from .. import views
from ..app import StateDirOption, app, get_config_store, regenerate_pool


def is_interactive() -> bool:
    return sys.stdin.isatty() and sys.stdout.isatty()


def _select_equipment(selected: dict[str, bool]) -> dict[str, bool] | None:
    """
    Numbered toggle menu.

    Returns:
        Final selection, or None if the user cancelled
    """
    while True:
        views.console.print()
        for i, key in enumerate(EQUIPMENT_KEYS, start=1):
            mark = "x" if selected[key] else " "
            views.console.print(f"  \\[{mark}] {i}. {EQUIPMENT_LABELS[key]}")
        views.console.print()

        choice = views.console.input("Toggle [1-4], Enter to confirm, q to cancel: ").strip().lower()

        if choice == "":
            return selected
        if choice == "q":
            return None
        if choice.isdigit() and 1 <= int(choice) <= len(EQUIPMENT_KEYS):
            key = EQUIPMENT_KEYS[int(choice) - 1]
            selected[key] = not selected[key]
        else:
            views.print_warning(f"Unknown choice: {choice}")


@app.command()
def setup(state_dir: StateDirOption = None) -> None:
    """
    Interactive setup: choose your equipment and generate the exercise pool.
    """
    if not is_interactive():
        views.print_error(
            "setup requires an interactive terminal",
            "viberipped config --kettlebell --pull-up-bar",
        )
        raise typer.Exit(1)

    store = get_config_store(state_dir)
    if store.exists() and not views.confirm_action("Existing configuration found. Overwrite?"):
        views.print_info("Setup cancelled. Existing configuration preserved.")
        raise typer.Exit(0)

    views.console.print()
    views.console.print("[bold cyan]Welcome to viberipped setup![/bold cyan]")
    views.console.print("Select the equipment you have at hand.")

    selected = _select_equipment({key: False for key in EQUIPMENT_KEYS})
    if selected is None:
        views.print_info("Setup cancelled.")
        raise typer.Exit(0)

    # Only equipment is chosen here; other settings survive an overwrite
    config = store.load()
    config.equipment = selected
    config.schema_version = CURRENT_SCHEMA_VERSION
    store.save(config)
    pool = regenerate_pool(state_dir, config)

    views.print_success("Setup complete!")
    enabled = [EQUIPMENT_LABELS[key] for key in config.enabled_equipment]
    if enabled:
        views.print_info(f"Equipment enabled: {', '.join(enabled)}")
    else:
        views.print_info("Equipment: bodyweight only")
    views.print_info(f"Pool generated with {len(pool)} exercises.")

    views.console.print()
    views.console.print("Next steps:")
    views.console.print("  viberipped test     Preview your first exercise")
    views.console.print("  viberipped harder   Increase difficulty")
    views.console.print("  viberipped softer   Decrease difficulty")
