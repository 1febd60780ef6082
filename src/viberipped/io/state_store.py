"""
Rotation state storage (state.json).

Mirrors ConfigStore: loading recovers from every kind of damage by starting
over, and saving logs failures instead of raising.
"""

import json
import logging
from pathlib import Path

from ..core.models import Exercise, RecentCategories, RotationState
from ..core.pool import compute_pool_hash
from .files import read_json, write_json_atomic
from .serializers import ValidationError, dict_to_state, state_to_dict

logger = logging.getLogger(__name__)


def create_default_state(pool: list[Exercise]) -> RotationState:
    """
    Fresh state for ``pool``: zeroed counters, never-triggered sentinel,
    empty category buffer.
    """
    return RotationState(
        current_index=0,
        last_trigger_time=0,
        pool_hash=compute_pool_hash(pool),
        total_triggered=0,
        recent_categories=RecentCategories(),
    )


class StateStore:
    """
    Manages the rotation cursor stored as JSON.

    The cursor is only meaningful for the pool whose hash it records;
    ``load`` re-anchors it whenever the pool changed underneath.
    """

    def __init__(self, state_path: str | Path):
        """
        Initialize the state store.

        Args:
            state_path: Path to state.json
        """
        self.state_path = Path(state_path)

    def read(self) -> RotationState | None:
        """
        Read the stored state as-is.

        Returns:
            RotationState, or None if missing, unreadable or invalid
        """
        try:
            return dict_to_state(read_json(self.state_path))
        except (OSError, json.JSONDecodeError, ValidationError):
            return None

    def read_config_pool_hash(self) -> str | None:
        """Return the stored configPoolHash, even from an otherwise invalid state."""
        try:
            data = read_json(self.state_path)
        except (OSError, json.JSONDecodeError):
            return None
        value = data.get("configPoolHash") if isinstance(data, dict) else None
        return value if isinstance(value, str) else None

    def load(self, pool: list[Exercise]) -> RotationState:
        """
        Load state for ``pool`` with recovery.

        - Missing file: initialize with defaults
        - Corrupt JSON: reset to defaults
        - Invalid fields: reset to defaults
        - Pool changed: reset index, update hash (counters kept)
        - Index out of bounds: reset index to 0

        Args:
            pool: Active rotation pool

        Returns:
            Valid RotationState (never raises)
        """
        try:
            data = read_json(self.state_path)
        except FileNotFoundError:
            logger.info("No state file, initializing")
            return create_default_state(pool)
        except json.JSONDecodeError:
            logger.warning("State corrupted, resetting")
            return create_default_state(pool)
        except OSError as e:
            logger.warning("State load error: %s, initializing", e)
            return create_default_state(pool)

        try:
            state = dict_to_state(data)
        except ValidationError:
            logger.warning("State invalid, resetting")
            return create_default_state(pool)

        current_hash = compute_pool_hash(pool)
        if state.pool_hash != current_hash:
            logger.warning("Pool changed, resetting index")
            state.current_index = 0
            state.pool_hash = current_hash

        if state.current_index >= len(pool):
            logger.warning("Index out of bounds, resetting")
            state.current_index = 0

        return state

    def save(self, state: RotationState) -> bool:
        """
        Save state atomically with owner-only permissions.

        Returns:
            True on success, False if the write failed (logged, not raised)
        """
        try:
            write_json_atomic(self.state_path, state_to_dict(state))
            return True
        except OSError as e:
            logger.warning("State save error: %s", e)
            return False

    def reset_for_pool(
        self,
        pool: list[Exercise],
        config_pool_hash: str | None = None,
    ) -> RotationState:
        """
        Point the rotation at the start of a changed pool and persist it.

        Trigger history (counters, timestamp, category buffer) is kept when a
        valid state exists.

        Args:
            pool: New pool content
            config_pool_hash: New equipment-derived pool hash, if it changed

        Returns:
            The saved state
        """
        state = self.read() or create_default_state(pool)
        state.current_index = 0
        state.pool_hash = compute_pool_hash(pool)
        if config_pool_hash is not None:
            state.config_pool_hash = config_pool_hash
        self.save(state)
        return state
