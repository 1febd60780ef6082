"""
Data models for viberipped.

All core dataclasses representing exercises, user configuration, rotation
state and trigger results.  On-disk field names (camelCase) are handled by
the serializers; models use Python naming throughout.
"""

from collections import deque
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field, replace
from typing import ClassVar, Literal

from .config import (
    ANYWHERE,
    CURRENT_SCHEMA_VERSION,
    DEFAULT_MULTIPLIER,
    DEFAULT_SENSITIVITY,
    EQUIPMENT_KEYS,
    LEGACY_SCHEMA_VERSION,
    MAX_RECENT_CATEGORIES,
)

ExerciseType = Literal["reps", "timed"]


@dataclass
class Exercise:
    """
    A catalog entry or pool member.

    For timed exercises ``reps`` holds seconds; ``duration``, when present,
    is the authoritative seconds value.
    """

    name: str
    reps: int
    type: ExerciseType = "reps"
    duration: int | None = None
    equipment: list[str] = field(default_factory=list)
    category: str | None = None
    environments: list[str] = field(default_factory=lambda: [ANYWHERE])

    def __post_init__(self) -> None:
        """Validate exercise data."""
        if not self.name:
            raise ValueError("name must be non-empty")
        if self.reps <= 0:
            raise ValueError("reps must be positive")
        if self.duration is not None and self.duration <= 0:
            raise ValueError("duration must be positive")

    @property
    def is_timed(self) -> bool:
        return self.type == "timed"

    @property
    def amount(self) -> int:
        """Scaling source and display value: duration for timed exercises, else reps."""
        if self.is_timed and self.duration is not None:
            return self.duration
        return self.reps

    @property
    def is_bodyweight(self) -> bool:
        return not self.equipment

    def usable_in(self, environment: str) -> bool:
        envs = self.environments or [ANYWHERE]
        return ANYWHERE in envs or environment in envs

    def clone(self) -> "Exercise":
        """Copy with independent list fields, so the pool is never mutated."""
        return replace(
            self,
            equipment=list(self.equipment),
            environments=list(self.environments),
        )

    def with_amount(self, amount: int) -> "Exercise":
        """Return a clone whose displayed amount is ``amount``."""
        scaled = self.clone()
        scaled.reps = amount
        if self.is_timed and self.duration is not None:
            scaled.duration = amount
        return scaled


@dataclass
class UserConfig:
    """User-level settings stored in configuration.json."""

    equipment: dict[str, bool] = field(
        default_factory=lambda: {key: False for key in EQUIPMENT_KEYS}
    )
    multiplier: float = DEFAULT_MULTIPLIER
    environment: str = ANYWHERE
    schema_version: str = CURRENT_SCHEMA_VERSION
    detection_sensitivity: str = DEFAULT_SENSITIVITY
    detection_threshold_ms: int | None = None

    @property
    def enabled_equipment(self) -> list[str]:
        return [key for key in EQUIPMENT_KEYS if self.equipment.get(key, False)]


class RecentCategories:
    """
    Fixed-capacity FIFO of the most recently served categories.

    Pushing into a full buffer evicts the oldest entry.
    """

    capacity: ClassVar[int] = MAX_RECENT_CATEGORIES

    def __init__(self, items: Iterable[str] = ()) -> None:
        self._items: deque[str] = deque(items, maxlen=self.capacity)

    def push(self, category: str) -> None:
        self._items.append(category)

    def to_list(self) -> list[str]:
        return list(self._items)

    def __contains__(self, category: object) -> bool:
        return category in self._items

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, RecentCategories):
            return self.to_list() == other.to_list()
        if isinstance(other, list):
            return self.to_list() == other
        return NotImplemented

    def __repr__(self) -> str:
        return f"RecentCategories({self.to_list()!r})"


@dataclass
class RotationState:
    """
    Per-installation rotation cursor stored in state.json.

    last_trigger_time is Unix milliseconds; 0 means "never triggered".
    """

    current_index: int = 0
    last_trigger_time: int = 0
    pool_hash: str = ""
    total_triggered: int = 0
    config_pool_hash: str | None = None
    recent_categories: RecentCategories | None = field(default_factory=RecentCategories)
    schema_version: str = LEGACY_SCHEMA_VERSION


@dataclass(frozen=True)
class CooldownStatus:
    """Outcome of a cooldown check."""

    allowed: bool
    remaining_ms: int


@dataclass(frozen=True)
class Position:
    """Where the served exercise sits in the active pool (0-based)."""

    current: int
    total: int


@dataclass(frozen=True)
class ExerciseResult:
    """A trigger that served an exercise."""

    prompt: str
    exercise: Exercise
    position: Position
    total_triggered: int
    type: ClassVar[str] = "exercise"


@dataclass(frozen=True)
class CooldownResult:
    """A trigger blocked by the cooldown window."""

    remaining_ms: int
    remaining_human: str
    last_exercise: Exercise | None = None
    type: ClassVar[str] = "cooldown"


TriggerResult = ExerciseResult | CooldownResult
