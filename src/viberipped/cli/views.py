"""
Rich-based output formatting for the CLI.

Tables and messages for configuration, pool and trigger results.
"""

from rich.console import Console
from rich.table import Table

from ..core.config import EQUIPMENT_KEYS, EQUIPMENT_LABELS
from ..core.difficulty import difficulty_label
from ..core.models import CooldownResult, Exercise, ExerciseResult, TriggerResult, UserConfig

console = Console()
err_console = Console(stderr=True)


def format_amount(exercise: Exercise) -> str:
    """'Pushups x15' or 'Plank 30s' using the stored (unscaled) amount."""
    if exercise.is_timed:
        return f"{exercise.name} {exercise.amount}s"
    return f"{exercise.name} x{exercise.amount}"


def format_pool_entry(index: int, exercise: Exercise) -> str:
    """
    One numbered pool line.

    Example:
        "  3. Plank 30s [bodyweight] (anywhere)"
    """
    equipment = ", ".join(exercise.equipment) if exercise.equipment else "bodyweight"
    environments = ", ".join(exercise.environments) if exercise.environments else "anywhere"
    return f"  {index}. {format_amount(exercise)} [{equipment}] ({environments})"


def print_pool(pool: list[Exercise]) -> None:
    """
    Print the pool in rotation order.

    Args:
        pool: Exercises to list
    """
    console.print(f"[cyan]Exercise pool ({len(pool)} exercises):[/cyan]")
    console.print()
    for i, exercise in enumerate(pool, start=1):
        console.print(format_pool_entry(i, exercise), markup=False, highlight=False)


def format_config_table(config: UserConfig) -> Table:
    """
    Build a table of the current configuration.

    Args:
        config: Configuration to display

    Returns:
        Rich Table object
    """
    table = Table(title="Configuration", show_header=True)
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    for key in EQUIPMENT_KEYS:
        enabled = config.equipment.get(key, False)
        table.add_row(
            EQUIPMENT_LABELS[key],
            "[green]enabled[/green]" if enabled else "[dim]disabled[/dim]",
        )
    table.add_row("Difficulty", difficulty_label(config.multiplier))
    table.add_row("Environment", config.environment)
    return table


def print_config(config: UserConfig) -> None:
    console.print(format_config_table(config))


def print_trigger_result(result: TriggerResult) -> None:
    """
    Print a trigger result.

    Args:
        result: ExerciseResult or CooldownResult
    """
    if isinstance(result, ExerciseResult):
        console.print(f"[bold cyan]{result.prompt}[/bold cyan]")
        console.print(
            f"[dim]Position {result.position.current + 1} of {result.position.total}, "
            f"total triggered {result.total_triggered}[/dim]"
        )
    elif isinstance(result, CooldownResult):
        console.print(f"[yellow]Cooldown: {result.remaining_human} remaining[/yellow]")
        if result.last_exercise is not None:
            console.print(f"[dim]Current: {format_amount(result.last_exercise)}[/dim]")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str, hint: str | None = None) -> None:
    """Print an error message (stderr), with an optional usage hint."""
    err_console.print(f"[red]Error: {message}[/red]", highlight=False)
    if hint:
        err_console.print(f"[dim]Usage: {hint}[/dim]", highlight=False)


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")


def confirm_action(message: str) -> bool:
    """
    Ask for confirmation.

    Args:
        message: Confirmation prompt

    Returns:
        True if confirmed
    """
    response = console.input(f"[yellow]{message} [y/N]: [/yellow]")
    return response.lower() in ("y", "yes")
