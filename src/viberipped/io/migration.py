"""
Schema migration from v1.0 to v1.1 files.

Each migrator reads its file, returns it untouched when already current, and
otherwise backs up the original (once) and writes an additively upgraded
version.  Every failure results in None: migration is never fatal, the
normal load-with-recovery path always runs afterwards.

v1.0 -> v1.1 changes:
- configuration.json: add ``environment: "anywhere"``, set ``schemaVersion``
- pool.json: add ``type: "reps"`` and ``environments: ["anywhere"]`` where
  missing (categories are left alone)
- state.json: add ``recentCategories: []``, set ``schemaVersion``
"""

import json
import logging
import shutil
from collections.abc import Callable
from pathlib import Path
from typing import Any

from ..core.config import (
    ANYWHERE,
    BACKUP_SUFFIX,
    CURRENT_SCHEMA_VERSION,
    LEGACY_SCHEMA_VERSION,
)
from .files import read_json, write_json_atomic
from .paths import StoragePaths

logger = logging.getLogger(__name__)


def detect_schema_version(data: Any) -> str:
    """
    Infer the schema version of parsed file content.

    Config and state carry an explicit ``schemaVersion``.  A pool has none;
    its first entry having a ``type`` field marks it as current, and an
    empty pool has nothing to upgrade.
    """
    if isinstance(data, list):
        if not data or (isinstance(data[0], dict) and "type" in data[0]):
            return CURRENT_SCHEMA_VERSION
        return LEGACY_SCHEMA_VERSION

    if isinstance(data, dict):
        version = data.get("schemaVersion")
        return version if isinstance(version, str) else LEGACY_SCHEMA_VERSION

    return LEGACY_SCHEMA_VERSION


def backup_path(path: str | Path) -> Path:
    path = Path(path)
    return path.with_name(path.name + BACKUP_SUFFIX)


def create_backup(path: str | Path) -> Path:
    """Copy ``path`` to its backup sibling unless that backup already exists."""
    target = backup_path(path)
    if not target.exists():
        shutil.copy2(path, target)
    return target


def _migrate(path: str | Path, expected: type, upgrade: Callable[[Any], None]) -> Any:
    path = Path(path)
    try:
        data = read_json(path)
        if not isinstance(data, expected):
            return None

        if detect_schema_version(data) == CURRENT_SCHEMA_VERSION:
            return data

        create_backup(path)
        upgrade(data)
        write_json_atomic(path, data)
    except (OSError, json.JSONDecodeError) as e:
        if not isinstance(e, FileNotFoundError):
            logger.warning("Migration of %s skipped: %s", path.name, e)
        return None

    logger.info("Migrated %s to v%s schema", path.name, CURRENT_SCHEMA_VERSION)
    return data


def _upgrade_config(config: dict) -> None:
    config.setdefault("environment", ANYWHERE)
    config["schemaVersion"] = CURRENT_SCHEMA_VERSION


def _upgrade_pool(pool: list) -> None:
    for exercise in pool:
        if not isinstance(exercise, dict):
            continue
        exercise.setdefault("type", "reps")
        exercise.setdefault("environments", [ANYWHERE])


def _upgrade_state(state: dict) -> None:
    state.setdefault("recentCategories", [])
    state["schemaVersion"] = CURRENT_SCHEMA_VERSION


def migrate_config_if_needed(config_path: str | Path) -> dict | None:
    """
    Upgrade configuration.json to the current schema.

    Returns:
        Current config dict, or None if the file is missing or unusable
    """
    return _migrate(config_path, dict, _upgrade_config)


def migrate_pool_if_needed(pool_path: str | Path) -> list | None:
    """
    Upgrade pool.json to the current schema.

    Returns:
        Current pool list, or None if the file is missing or unusable
    """
    return _migrate(pool_path, list, _upgrade_pool)


def migrate_state_if_needed(state_path: str | Path) -> dict | None:
    """
    Upgrade state.json to the current schema.

    Returns:
        Current state dict, or None if the file is missing or unusable
    """
    return _migrate(state_path, dict, _upgrade_state)


def run_migrations(paths: StoragePaths) -> None:
    """Run all three migrators; results are ignored."""
    migrate_config_if_needed(paths.config)
    migrate_pool_if_needed(paths.pool)
    migrate_state_if_needed(paths.state)
