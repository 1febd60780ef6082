"""
Pool storage (pool.json).

The pool file is user-editable.  Management operations (add, remove) read it
strictly and report problems as PoolError; the engine uses the lenient
``load`` which never raises.  Every mutation re-anchors the rotation state
through the StateStore.
"""

import json
import logging
from pathlib import Path

from ..core.models import Exercise
from .files import read_json, write_json_atomic
from .serializers import ValidationError, list_to_pool, pool_to_list
from .state_store import StateStore

logger = logging.getLogger(__name__)


class PoolError(ValidationError):
    """Raised when a pool management operation cannot proceed."""

    pass


class PoolStore:
    """
    Manages the ordered exercise pool stored as a JSON array.
    """

    def __init__(self, pool_path: str | Path, state_store: StateStore | None = None):
        """
        Initialize the pool store.

        Args:
            pool_path: Path to pool.json
            state_store: Store whose index is reset on every pool mutation
        """
        self.pool_path = Path(pool_path)
        self.state_store = state_store

    def exists(self) -> bool:
        """Check if the pool file exists."""
        return self.pool_path.exists()

    def read(self) -> list[Exercise]:
        """
        Read the pool strictly.

        Returns:
            Non-empty list of exercises

        Raises:
            PoolError: If the file is missing, unreadable or invalid
        """
        try:
            data = read_json(self.pool_path)
        except FileNotFoundError as e:
            raise PoolError("No pool found. Run setup first: viberipped setup") from e
        except (OSError, json.JSONDecodeError) as e:
            raise PoolError(f"Failed to load pool: {e}") from e

        try:
            return list_to_pool(data)
        except ValidationError as e:
            raise PoolError(str(e)) from e

    def load(self) -> list[Exercise] | None:
        """
        Read the pool leniently.

        Returns:
            Pool, or None if the file is missing or unusable (never raises)
        """
        try:
            return self.read()
        except PoolError as e:
            if self.exists():
                logger.warning("Pool file load error: %s, regenerating", e)
            return None

    def save(self, pool: list[Exercise]) -> bool:
        """
        Save the pool atomically with owner-only permissions.

        Returns:
            True on success, False if the write failed (logged, not raised)
        """
        try:
            write_json_atomic(self.pool_path, pool_to_list(pool))
            return True
        except OSError as e:
            logger.warning("Pool file write error: %s", e)
            return False

    def add_exercises(self, exercises: list[Exercise]) -> list[Exercise]:
        """
        Append exercises to the pool, all or nothing.

        Names must be new to the pool (case-insensitive).

        Args:
            exercises: Exercises to append, in order

        Returns:
            Updated pool

        Raises:
            PoolError: On any duplicate or if the pool cannot be read or saved
        """
        pool = self.read()
        existing = {ex.name.lower() for ex in pool}

        for ex in exercises:
            key = ex.name.lower()
            if key in existing:
                raise PoolError(f'Exercise "{ex.name}" already exists in pool')
            existing.add(key)

        pool.extend(ex.clone() for ex in exercises)
        self._commit(pool)
        return pool

    def remove_exercise(self, name: str) -> Exercise:
        """
        Remove an exercise by case-insensitive name.

        Args:
            name: Exercise name

        Returns:
            The removed exercise (with its stored spelling)

        Raises:
            PoolError: If the name is empty or unknown, or it is the last exercise
        """
        wanted = name.strip().lower() if isinstance(name, str) else ""
        if not wanted:
            raise PoolError("Exercise name required")

        pool = self.read()
        for i, ex in enumerate(pool):
            if ex.name.lower() == wanted:
                break
        else:
            raise PoolError(f'Exercise "{name.strip()}" not found in pool')

        if len(pool) == 1:
            raise PoolError("Cannot remove last exercise from pool")

        removed = pool.pop(i)
        self._commit(pool)
        return removed

    def regenerate(self, pool: list[Exercise], config_pool_hash: str) -> bool:
        """
        Replace the pool with a freshly assembled one and restart the rotation.

        Args:
            pool: Assembled pool
            config_pool_hash: Hash of the assembled pool

        Returns:
            True if the pool file was written
        """
        saved = self.save(pool)
        if self.state_store is not None:
            self.state_store.reset_for_pool(pool, config_pool_hash=config_pool_hash)
        return saved

    def _commit(self, pool: list[Exercise]) -> None:
        if not self.save(pool):
            raise PoolError("Failed to save pool")
        if self.state_store is not None:
            self.state_store.reset_for_pool(pool)
