"""
Configuration constants for the rotation engine.

All adjustable parameters are centralized here for easy tuning.
"""

from typing import Final

# =============================================================================
# COOLDOWN
# =============================================================================

COOLDOWN_MS: Final[int] = 300_000  # 5 minutes between successful triggers

# =============================================================================
# DIFFICULTY SCALING
# =============================================================================

# Discrete ladder for the user-controlled multiplier (ascending)
DIFFICULTY_STEPS: Final[tuple[float, ...]] = (
    0.5, 0.75, 1.0, 1.25, 1.5, 1.75, 2.0, 2.25, 2.5,
)
DEFAULT_MULTIPLIER: Final[float] = 1.0

MIN_REPS: Final[int] = 5    # Absolute floor after scaling
MAX_REPS: Final[int] = 60   # Absolute ceiling after scaling

MIN_LATENCY_MS: Final[int] = 2_000    # At or below: no latency bonus
MAX_LATENCY_MS: Final[int] = 30_000   # At or above: full latency bonus

MIN_LATENCY_FACTOR: Final[float] = 1.0
MAX_LATENCY_FACTOR: Final[float] = 1.5

# =============================================================================
# ROTATION
# =============================================================================

MAX_RECENT_CATEGORIES: Final[int] = 2  # Ring buffer capacity

# Movement groups used for anti-repetition
CATEGORIES: Final[tuple[str, ...]] = ("push", "pull", "legs", "core")

EXERCISE_TYPES: Final[tuple[str, ...]] = ("reps", "timed")

# =============================================================================
# EQUIPMENT & ENVIRONMENT
# =============================================================================

KETTLEBELL: Final[str] = "kettlebell"
DUMBBELLS: Final[str] = "dumbbells"
PULL_UP_BAR: Final[str] = "pullUpBar"
PARALLETTES: Final[str] = "parallettes"

EQUIPMENT_KEYS: Final[tuple[str, ...]] = (KETTLEBELL, DUMBBELLS, PULL_UP_BAR, PARALLETTES)

EQUIPMENT_LABELS: Final[dict[str, str]] = {
    KETTLEBELL: "Kettlebell",
    DUMBBELLS: "Dumbbells",
    PULL_UP_BAR: "Pull-up bar",
    PARALLETTES: "Parallettes",
}

ANYWHERE: Final[str] = "anywhere"  # Universal environment tag

# =============================================================================
# SCHEMA VERSIONS
# =============================================================================

LEGACY_SCHEMA_VERSION: Final[str] = "1.0"
CURRENT_SCHEMA_VERSION: Final[str] = "1.1"
BACKUP_SUFFIX: Final[str] = f".v{LEGACY_SCHEMA_VERSION}.backup"

# =============================================================================
# STORAGE
# =============================================================================

APP_DIR_NAME: Final[str] = "viberipped"
CONFIG_FILENAME: Final[str] = "configuration.json"
POOL_FILENAME: Final[str] = "pool.json"
STATE_FILENAME: Final[str] = "state.json"
DETECTION_FILENAME: Final[str] = "detection-state.json"

DIR_MODE: Final[int] = 0o700
FILE_MODE: Final[int] = 0o600

# =============================================================================
# STATUSLINE DETECTION
# =============================================================================

# Minimum growth of cumulative API duration (ms) that counts as "processing"
SENSITIVITY_THRESHOLDS_MS: Final[dict[str, int]] = {
    "strict": 50,
    "normal": 100,
    "relaxed": 500,
}
DEFAULT_SENSITIVITY: Final[str] = "normal"
