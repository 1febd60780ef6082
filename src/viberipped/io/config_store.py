"""
Configuration storage (configuration.json).

Loading never raises: a missing, unreadable, malformed or structurally invalid
file yields an all-defaults configuration.  Saving never raises either;
failures are logged so callers can carry on with the in-memory value.
"""

import json
import logging
from pathlib import Path

from ..core import difficulty
from ..core.config import EQUIPMENT_KEYS
from ..core.models import UserConfig
from .files import read_json, write_json_atomic
from .serializers import ValidationError, config_to_dict, dict_to_config

logger = logging.getLogger(__name__)

SETTABLE_KEYS: tuple[str, ...] = ("environment",)


class ConfigStore:
    """
    Manages user configuration stored as JSON.

    The file holds equipment flags, the difficulty multiplier, the active
    environment, the schema version and statusline detection settings.
    """

    def __init__(self, config_path: str | Path):
        """
        Initialize the configuration store.

        Args:
            config_path: Path to configuration.json
        """
        self.config_path = Path(config_path)

    def exists(self) -> bool:
        """Check if the configuration file exists."""
        return self.config_path.exists()

    def load(self) -> UserConfig:
        """
        Load configuration, falling back to defaults on any problem.

        Returns:
            Normalized UserConfig (never raises)
        """
        try:
            data = read_json(self.config_path)
        except FileNotFoundError:
            logger.info("Config file not found, using defaults")
            return UserConfig()
        except json.JSONDecodeError as e:
            logger.warning("Config parse error: %s, using defaults", e)
            return UserConfig()
        except OSError as e:
            logger.warning("Config load error: %s, using defaults", e)
            return UserConfig()

        try:
            return dict_to_config(data)
        except ValidationError:
            logger.warning("Config invalid, using defaults")
            return UserConfig()

    def save(self, config: UserConfig) -> bool:
        """
        Save configuration atomically with owner-only permissions.

        Returns:
            True on success, False if the write failed (logged, not raised)
        """
        try:
            write_json_atomic(self.config_path, config_to_dict(config))
            return True
        except OSError as e:
            logger.warning("Config save error: %s", e)
            return False

    def get_setting(self, key: str) -> str:
        """
        Read a named scalar setting.

        Raises:
            ValidationError: If the key is not settable
        """
        self._check_key(key)
        return getattr(self.load(), key)

    def set_setting(self, key: str, value: str) -> UserConfig:
        """
        Update a named scalar setting and persist it.

        Raises:
            ValidationError: If the key is unknown or the value is empty
        """
        self._check_key(key)
        return self.set_environment(value)

    def set_environment(self, environment: str) -> UserConfig:
        """
        Set the active environment.

        Raises:
            ValidationError: If the value is empty
        """
        value = environment.strip() if isinstance(environment, str) else ""
        if not value:
            raise ValidationError("Environment value cannot be empty")

        config = self.load()
        config.environment = value
        self.save(config)
        return config

    def set_equipment(self, updates: dict[str, bool]) -> UserConfig:
        """
        Enable or disable equipment flags.

        Args:
            updates: Mapping of equipment key to enabled flag

        Raises:
            ValidationError: If a key is not a known equipment key
        """
        unknown = [key for key in updates if key not in EQUIPMENT_KEYS]
        if unknown:
            raise ValidationError(
                f"Unknown equipment: {', '.join(unknown)}. "
                f"Valid: {', '.join(EQUIPMENT_KEYS)}"
            )

        config = self.load()
        for key, enabled in updates.items():
            config.equipment[key] = bool(enabled)
        self.save(config)
        return config

    def step_difficulty(self, harder: bool) -> tuple[float, float]:
        """
        Move the difficulty multiplier one ladder step and persist it.

        Args:
            harder: True to increment, False to decrement

        Returns:
            (previous, new) multiplier; equal values mean the ladder end was reached
        """
        config = self.load()
        previous = config.multiplier
        new = difficulty.increment(previous) if harder else difficulty.decrement(previous)
        if new != previous:
            config.multiplier = new
            self.save(config)
        return previous, new

    @staticmethod
    def _check_key(key: str) -> None:
        if key not in SETTABLE_KEYS:
            raise ValidationError(
                f"Unknown config key: {key}. Settable keys: {', '.join(SETTABLE_KEYS)}"
            )
