"""
Storage location for configuration, pool, state and detection files.

The base directory is an explicit value handed to every store.  Only the
outer edges (CLI, statusline) call ``get_default_state_dir``.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from ..core.config import (
    APP_DIR_NAME,
    CONFIG_FILENAME,
    DETECTION_FILENAME,
    POOL_FILENAME,
    STATE_FILENAME,
)


@dataclass(frozen=True)
class StoragePaths:
    """File locations under one base directory."""

    base_dir: Path

    def __post_init__(self) -> None:
        object.__setattr__(self, "base_dir", Path(self.base_dir))

    @property
    def config(self) -> Path:
        return self.base_dir / CONFIG_FILENAME

    @property
    def pool(self) -> Path:
        return self.base_dir / POOL_FILENAME

    @property
    def state(self) -> Path:
        return self.base_dir / STATE_FILENAME

    @property
    def detection(self) -> Path:
        return self.base_dir / DETECTION_FILENAME

    @classmethod
    def from_state_path(cls, state_path: str | Path) -> "StoragePaths":
        """Derive the sibling file locations from a state.json path."""
        return cls(Path(state_path).parent)


def get_default_state_dir() -> Path:
    """
    Get the default storage directory.

    ``$XDG_CONFIG_HOME/viberipped``, falling back to ``~/.config/viberipped``.

    Returns:
        Default base directory
    """
    config_home = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(config_home) / APP_DIR_NAME


def get_default_paths() -> StoragePaths:
    """
    Get StoragePaths for the default directory.

    Returns:
        StoragePaths instance
    """
    return StoragePaths(get_default_state_dir())
