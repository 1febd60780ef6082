"""Shared Typer app object, shared option types, and store utilities."""

from pathlib import Path
from typing import Annotated, Optional

import typer

from ..core.models import Exercise, UserConfig
from ..core.pool import assemble_pool, compute_pool_hash
from ..io.config_store import ConfigStore
from ..io.paths import StoragePaths, get_default_state_dir
from ..io.pool_store import PoolStore
from ..io.state_store import StateStore

# Shared --state-dir option type used across all commands
StateDirOption = Annotated[
    Optional[Path],
    typer.Option(
        "--state-dir",
        "-d",
        help="Directory holding configuration.json, pool.json and state.json",
        envvar="VIBERIPPED_STATE_DIR",
    ),
]

app = typer.Typer(
    name="viberipped",
    help="Micro-exercise prompts while your AI assistant is busy.",
    no_args_is_help=True,
)


def get_paths(state_dir: Path | None) -> StoragePaths:
    """Storage paths from an explicit directory or the default location."""
    return StoragePaths(state_dir if state_dir is not None else get_default_state_dir())


def get_config_store(state_dir: Path | None) -> ConfigStore:
    return ConfigStore(get_paths(state_dir).config)


def get_pool_store(state_dir: Path | None) -> PoolStore:
    """Pool store wired to the state store, so pool edits reset the rotation."""
    paths = get_paths(state_dir)
    return PoolStore(paths.pool, state_store=StateStore(paths.state))


def regenerate_pool(state_dir: Path | None, config: UserConfig) -> list[Exercise]:
    """
    Rebuild pool.json from the catalog for ``config`` and restart the rotation.

    Returns:
        The assembled pool
    """
    pool = assemble_pool(config)
    get_pool_store(state_dir).regenerate(pool, compute_pool_hash(pool))
    return pool
