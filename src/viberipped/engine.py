"""
Trigger orchestration.

One call to ``trigger`` turns a "the host is busy" signal into either the
next exercise prompt or a cooldown notice:

1. Resolve file locations from one base directory
2. (config-driven) Run schema migrations
3. (config-driven) Load configuration, resolve the pool (stored pool.json
   while the configuration is unchanged, freshly assembled otherwise) and
   apply the environment filter
4. Load rotation state, re-anchored to the active pool
5. Enforce the cooldown
6. Select, clone and scale the next exercise
7. Commit state (unless dry-run) and return the result

Passing an explicit pool skips step 2 and 3 entirely; no configuration or
pool file is touched in that mode.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from .core.config import COOLDOWN_MS, DEFAULT_MULTIPLIER
from .core.cooldown import check_cooldown, format_remaining, now_ms
from .core.difficulty import scale
from .core.models import (
    CooldownResult,
    Exercise,
    ExerciseResult,
    Position,
    TriggerResult,
)
from .core.pool import assemble_pool, compute_pool_hash, filter_by_environment
from .core.rotation import select_next
from .io.config_store import ConfigStore
from .io.migration import run_migrations
from .io.paths import StoragePaths, get_default_paths
from .io.pool_store import PoolStore
from .io.state_store import StateStore

logger = logging.getLogger(__name__)


@dataclass
class TriggerOptions:
    """
    Per-call trigger options.

    Attributes:
        state_path: state.json location; sibling files live next to it
        bypass_cooldown: Skip the cooldown check (preview/testing)
        dry_run: Return a full result without persisting state
        latency_ms: Observed host latency used for difficulty scaling
        now: Override of the current Unix ms (testing)
    """

    state_path: str | Path | None = None
    bypass_cooldown: bool = False
    dry_run: bool = False
    latency_ms: float = 0
    now: int | None = None


def format_prompt(exercise: Exercise) -> str:
    """
    Terse command string: "Pushups x15" for reps, "Plank 30s" for timed.
    """
    if exercise.is_timed:
        return f"{exercise.name} {exercise.amount}s"
    return f"{exercise.name} x{exercise.amount}"


def _scaled(exercise: Exercise, latency_ms: float, multiplier: float) -> Exercise:
    return exercise.with_amount(scale(exercise.amount, latency_ms, multiplier))


def _resolve_config_pool(
    paths: StoragePaths,
    assembled: list[Exercise],
    config_hash: str,
    state_store: StateStore,
) -> list[Exercise]:
    """
    Pick the pool governing rotation in config-driven mode.

    While the stored configPoolHash matches, a valid pool.json is used
    verbatim so user edits survive.  Otherwise the assembled pool replaces it.
    """
    pool_store = PoolStore(paths.pool)

    if state_store.read_config_pool_hash() == config_hash:
        stored = pool_store.load()
        if stored:
            return stored

    logger.debug("Writing freshly assembled pool (%d exercises)", len(assembled))
    pool_store.save(assembled)
    return assembled


def trigger(pool: list[Exercise] | None = None, options: TriggerOptions | None = None) -> TriggerResult:
    """
    Run one trigger.

    Args:
        pool: Explicit pool (legacy mode), or None for config-driven mode
        options: Trigger options

    Returns:
        ExerciseResult or CooldownResult

    Raises:
        ValueError: If the active pool is empty
    """
    if options is None:
        options = TriggerOptions()

    if options.state_path is not None:
        paths = StoragePaths.from_state_path(options.state_path)
    else:
        paths = get_default_paths()

    state_store = StateStore(paths.state)
    latency_ms = options.latency_ms or 0
    config_driven = pool is None

    if config_driven:
        run_migrations(paths)

        config = ConfigStore(paths.config).load()
        assembled = assemble_pool(config)
        config_hash = compute_pool_hash(assembled)
        full_pool = _resolve_config_pool(paths, assembled, config_hash, state_store)
        active_pool = filter_by_environment(full_pool, config.environment)
        multiplier = config.multiplier
    else:
        active_pool = list(pool)
        config_hash = None
        multiplier = DEFAULT_MULTIPLIER

    if not active_pool:
        raise ValueError("Cannot trigger: pool is empty")

    state = state_store.load(active_pool)
    if config_hash is not None:
        state.config_pool_hash = config_hash

    if not options.bypass_cooldown:
        status = check_cooldown(state.last_trigger_time, COOLDOWN_MS, now=options.now)
        if not status.allowed:
            last_exercise = None
            if config_driven:
                # current_index already points past the exercise being served
                last_index = (state.current_index - 1) % len(active_pool)
                last_exercise = _scaled(active_pool[last_index], latency_ms, multiplier)
            return CooldownResult(
                remaining_ms=status.remaining_ms,
                remaining_human=format_remaining(status.remaining_ms),
                last_exercise=last_exercise,
            )

    selection = select_next(state, active_pool)
    exercise = _scaled(selection.exercise, latency_ms, multiplier)

    state.last_trigger_time = options.now if options.now is not None else now_ms()
    state.total_triggered += 1

    if not options.dry_run:
        state_store.save(state)

    return ExerciseResult(
        prompt=format_prompt(exercise),
        exercise=exercise,
        position=Position(current=selection.previous_index, total=len(active_pool)),
        total_triggered=state.total_triggered,
    )
