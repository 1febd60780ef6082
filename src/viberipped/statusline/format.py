"""ANSI formatting of exercise text for the statusline."""

ANSI_RESET = "\x1b[0m"
ANSI_CYAN = "\x1b[36m"
ANSI_BOLD = "\x1b[1m"


def format_exercise(
    name: str,
    value: int | None = None,
    exercise_type: str = "reps",
    prefix: str = "",
) -> str:
    """
    Wrap an exercise in cyan bold.

    "Pushups x15" for reps, "Plank 30s" for timed, the bare name when no
    value is given.  An empty name yields an empty string.

    Args:
        name: Exercise name
        value: Reps or seconds
        exercise_type: "reps" or "timed"
        prefix: Text placed inside the color codes, before the exercise
    """
    if not name:
        return ""

    if value is None:
        text = name
    elif exercise_type == "timed":
        text = f"{name} {value}s"
    else:
        text = f"{name} x{value}"

    return f"{ANSI_CYAN}{ANSI_BOLD}{prefix}{text}{ANSI_RESET}"
