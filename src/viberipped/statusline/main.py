"""
Statusline provider entry point (``viberipped-statusline``).

Silent by contract: nothing is printed when the host is idle, when the
cooldown has no previous exercise to show, or on any error.  Diagnostics go
to stderr and the process always exits 0.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Any

from ..core.models import CooldownResult, Exercise, ExerciseResult, TriggerResult
from ..engine import TriggerOptions, trigger
from ..io.config_store import ConfigStore
from ..io.paths import StoragePaths, get_default_state_dir
from ..logging_config import configure_logging
from .detection import is_processing
from .format import format_exercise
from .stdin import parse_stdin

logger = logging.getLogger(__name__)

PREFIX = "💪 "
STATE_DIR_ENV = "VIBERIPPED_STATE_DIR"
BYPASS_COOLDOWN_ENV = "VIBERIPPED_BYPASS_COOLDOWN"


def resolve_paths() -> StoragePaths:
    """Storage paths from $VIBERIPPED_STATE_DIR, else the XDG default."""
    override = os.environ.get(STATE_DIR_ENV)
    return StoragePaths(Path(override) if override else get_default_state_dir())


def latency_from(data: dict) -> float:
    cost = data.get("cost")
    value = cost.get("total_api_duration_ms") if isinstance(cost, dict) else None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    return 0


def _render(exercise: Exercise) -> str:
    return format_exercise(exercise.name, exercise.amount, exercise.type, prefix=PREFIX)


def render_result(result: TriggerResult) -> str:
    """Statusline text for a trigger result ('' means print nothing)."""
    if isinstance(result, ExerciseResult):
        return _render(result.exercise)
    if isinstance(result, CooldownResult) and result.last_exercise is not None:
        return _render(result.last_exercise)
    return ""


def run(raw: Any, paths: StoragePaths, bypass_cooldown: bool = False) -> str:
    """
    Process one stdin payload.

    Args:
        raw: Raw stdin text
        paths: Storage locations
        bypass_cooldown: Skip the cooldown check

    Returns:
        Text to write to stdout (possibly empty)
    """
    data = parse_stdin(raw)
    if data is None:
        return ""

    config = ConfigStore(paths.config).load()
    if not is_processing(data, paths.detection, config):
        return ""

    options = TriggerOptions(
        state_path=paths.state,
        bypass_cooldown=bypass_cooldown,
        latency_ms=latency_from(data),
    )
    return render_result(trigger(None, options))


def main() -> None:
    """Console script entry point."""
    configure_logging()
    try:
        output = run(
            sys.stdin.read(),
            resolve_paths(),
            bypass_cooldown=os.environ.get(BYPASS_COOLDOWN_ENV) == "1",
        )
        if output:
            sys.stdout.write(output)
            sys.stdout.flush()
    except Exception as e:
        logger.error("viberipped statusline error: %s", e)
    sys.exit(0)


if __name__ == "__main__":
    main()
