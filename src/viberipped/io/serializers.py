"""
JSON serialization for viberipped data models.

Handles conversion between dataclasses and the camelCase JSON dicts stored
on disk, structural validation of those dicts, and parsing of CLI input.
"""

import math
import re
from typing import Any

from ..core.config import (
    ANYWHERE,
    DEFAULT_MULTIPLIER,
    DEFAULT_SENSITIVITY,
    EQUIPMENT_KEYS,
    LEGACY_SCHEMA_VERSION,
    SENSITIVITY_THRESHOLDS_MS,
)
from ..core.exercises.loader import exercise_from_dict
from ..core.models import (
    CooldownResult,
    Exercise,
    ExerciseResult,
    RecentCategories,
    RotationState,
    TriggerResult,
    UserConfig,
)

MAX_NAME_LENGTH = 50
MAX_REPS_INPUT = 999


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    """Finite int or float (rejects bools, NaN, infinities and ints beyond float range)."""
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


# =============================================================================
# EXERCISE / POOL
# =============================================================================


def exercise_to_dict(exercise: Exercise) -> dict[str, Any]:
    """
    Convert Exercise to JSON-compatible dict.

    ``duration`` is only written when set.

    Args:
        exercise: Exercise to convert

    Returns:
        Dict representation
    """
    d: dict[str, Any] = {
        "name": exercise.name,
        "reps": exercise.reps,
        "type": exercise.type,
        "equipment": list(exercise.equipment),
        "category": exercise.category,
        "environments": list(exercise.environments),
    }
    if exercise.duration is not None:
        d["duration"] = exercise.duration
    return d


def dict_to_exercise(data: Any) -> Exercise:
    """
    Convert dict to Exercise.

    Raises:
        ValidationError: If data is not a structurally valid exercise
    """
    try:
        return exercise_from_dict(data)
    except ValueError as e:
        raise ValidationError(str(e)) from e


def pool_to_list(pool: list[Exercise]) -> list[dict[str, Any]]:
    return [exercise_to_dict(ex) for ex in pool]


def list_to_pool(data: Any) -> list[Exercise]:
    """
    Convert a JSON array to a pool.

    Raises:
        ValidationError: If data is not a non-empty list of valid exercises
    """
    if not isinstance(data, list):
        raise ValidationError("Pool file is invalid (not an array)")
    if not data:
        raise ValidationError("Pool is empty")

    return [dict_to_exercise(item) for item in data]


# =============================================================================
# CONFIGURATION
# =============================================================================


def validate_config(candidate: Any) -> bool:
    """
    Structural check for a configuration dict.

    Partial equipment objects are accepted (missing keys count as False).

    Returns:
        True if valid, False otherwise
    """
    if not isinstance(candidate, dict):
        return False

    equipment = candidate.get("equipment")
    if not isinstance(equipment, dict):
        return False
    for key in EQUIPMENT_KEYS:
        if key in equipment and not isinstance(equipment[key], bool):
            return False

    if "difficulty" in candidate:
        difficulty = candidate["difficulty"]
        if not isinstance(difficulty, dict):
            return False
        if "multiplier" in difficulty and not _is_number(difficulty["multiplier"]):
            return False

    if "environment" in candidate and not isinstance(candidate["environment"], str):
        return False

    if "schemaVersion" in candidate and not isinstance(candidate["schemaVersion"], str):
        return False

    if "detection" in candidate and not isinstance(candidate["detection"], dict):
        return False

    return True


def config_to_dict(config: UserConfig) -> dict[str, Any]:
    """
    Convert UserConfig to JSON-compatible dict.

    Args:
        config: UserConfig to convert

    Returns:
        Dict representation
    """
    detection: dict[str, Any] = {"sensitivity": config.detection_sensitivity}
    if config.detection_threshold_ms is not None:
        detection["durationThreshold"] = config.detection_threshold_ms

    return {
        "equipment": {key: bool(config.equipment.get(key, False)) for key in EQUIPMENT_KEYS},
        "difficulty": {"multiplier": config.multiplier},
        "environment": config.environment,
        "schemaVersion": config.schema_version,
        "detection": detection,
    }


def dict_to_config(data: Any) -> UserConfig:
    """
    Convert dict to UserConfig, filling defaults for missing fields.

    Raises:
        ValidationError: If data fails validate_config
    """
    if not validate_config(data):
        raise ValidationError("Configuration is invalid")

    equipment = {key: bool(data["equipment"].get(key, False)) for key in EQUIPMENT_KEYS}
    multiplier = data.get("difficulty", {}).get("multiplier", DEFAULT_MULTIPLIER)

    detection = data.get("detection", {})
    sensitivity = detection.get("sensitivity", DEFAULT_SENSITIVITY)
    if sensitivity not in SENSITIVITY_THRESHOLDS_MS:
        sensitivity = DEFAULT_SENSITIVITY
    threshold = detection.get("durationThreshold")
    if not _is_int(threshold) or threshold < 0:
        threshold = None

    return UserConfig(
        equipment=equipment,
        multiplier=float(multiplier),
        environment=data.get("environment", ANYWHERE),
        schema_version=data.get("schemaVersion", LEGACY_SCHEMA_VERSION),
        detection_sensitivity=sensitivity,
        detection_threshold_ms=threshold,
    )


# =============================================================================
# ROTATION STATE
# =============================================================================


def validate_state(candidate: Any) -> bool:
    """
    Structural check for a rotation state dict.

    Required: currentIndex, lastTriggerTime, totalTriggered as non-negative
    integers and poolHash as a non-empty string.  recentCategories and
    schemaVersion are checked only when present.
    """
    if not isinstance(candidate, dict):
        return False

    for key in ("currentIndex", "lastTriggerTime", "totalTriggered"):
        value = candidate.get(key)
        if not _is_int(value) or value < 0:
            return False

    pool_hash = candidate.get("poolHash")
    if not isinstance(pool_hash, str) or not pool_hash:
        return False

    if "recentCategories" in candidate:
        recent = candidate["recentCategories"]
        if not isinstance(recent, list) or not all(isinstance(c, str) for c in recent):
            return False

    if "schemaVersion" in candidate and not isinstance(candidate["schemaVersion"], str):
        return False

    return True


def state_to_dict(state: RotationState) -> dict[str, Any]:
    """
    Convert RotationState to JSON-compatible dict.

    Args:
        state: RotationState to convert

    Returns:
        Dict representation
    """
    recent = state.recent_categories.to_list() if state.recent_categories is not None else []
    d: dict[str, Any] = {
        "currentIndex": state.current_index,
        "lastTriggerTime": state.last_trigger_time,
        "poolHash": state.pool_hash,
        "totalTriggered": state.total_triggered,
        "recentCategories": recent,
        "schemaVersion": state.schema_version,
    }
    if state.config_pool_hash is not None:
        d["configPoolHash"] = state.config_pool_hash
    return d


def dict_to_state(data: Any) -> RotationState:
    """
    Convert dict to RotationState.

    A missing recentCategories field maps to None (legacy state).

    Raises:
        ValidationError: If data fails validate_state
    """
    if not validate_state(data):
        raise ValidationError("State is invalid")

    recent = data.get("recentCategories")
    config_hash = data.get("configPoolHash")

    return RotationState(
        current_index=data["currentIndex"],
        last_trigger_time=data["lastTriggerTime"],
        pool_hash=data["poolHash"],
        total_triggered=data["totalTriggered"],
        config_pool_hash=config_hash if isinstance(config_hash, str) else None,
        recent_categories=RecentCategories(recent) if recent is not None else None,
        schema_version=data.get("schemaVersion", LEGACY_SCHEMA_VERSION),
    )


# =============================================================================
# TRIGGER RESULTS
# =============================================================================


def trigger_result_to_dict(result: TriggerResult) -> dict[str, Any]:
    """
    Convert a trigger result to its tagged JSON form.

    Args:
        result: ExerciseResult or CooldownResult

    Returns:
        Dict with a "type" discriminator
    """
    if isinstance(result, ExerciseResult):
        return {
            "type": result.type,
            "prompt": result.prompt,
            "exercise": exercise_to_dict(result.exercise),
            "position": {
                "current": result.position.current,
                "total": result.position.total,
            },
            "totalTriggered": result.total_triggered,
        }
    if isinstance(result, CooldownResult):
        last = exercise_to_dict(result.last_exercise) if result.last_exercise else None
        return {
            "type": result.type,
            "remainingMs": result.remaining_ms,
            "remainingHuman": result.remaining_human,
            "lastExercise": last,
        }
    raise TypeError(f"Unknown trigger result: {result!r}")


# =============================================================================
# CLI INPUT
# =============================================================================


def validate_exercise_name(name: Any) -> str | None:
    """
    Validate and normalize an exercise name.

    Returns:
        Trimmed name (1-50 chars), or None if invalid
    """
    if not isinstance(name, str):
        return None
    trimmed = name.strip()
    if not trimmed or len(trimmed) > MAX_NAME_LENGTH:
        return None
    return trimmed


def validate_reps(reps_str: Any) -> int | None:
    """
    Validate a reps string.

    Only canonical integers are accepted: "12" is valid, "012", "12.0"
    and " 12" are not.

    Returns:
        Integer in 1-999, or None if invalid
    """
    if not re.fullmatch(r"[1-9]\d{0,2}", str(reps_str)):
        return None
    return int(reps_str)


def parse_exercise_batch(text: str) -> list[tuple[str, int]]:
    """
    Parse a comma-separated batch of exercises.

    Format: "NAME REPS, NAME REPS, ..."  The last whitespace-separated token
    of each item is the reps count; everything before it is the name.

    Examples:
        "Burpees 12"                        → [("Burpees", 12)]
        "Burpees 12, Mountain climbers 20"  → [("Burpees", 12), ("Mountain climbers", 20)]

    Validation is all-or-nothing: the first bad item raises.

    Returns:
        List of (name, reps) tuples in input order

    Raises:
        ValidationError: If any item is malformed or names repeat
    """
    items = [item.strip() for item in text.split(",")]
    items = [item for item in items if item]
    if not items:
        raise ValidationError("No exercises given")

    result: list[tuple[str, int]] = []
    seen: set[str] = set()
    for item in items:
        parts = item.rsplit(None, 1)
        if len(parts) < 2:
            raise ValidationError(f'Invalid format: "{item}" (missing reps). Expected "Name reps"')

        raw_name, raw_reps = parts
        name = validate_exercise_name(" ".join(raw_name.split()))
        if name is None:
            raise ValidationError(
                f'Invalid exercise name: "{raw_name.strip()}" (must be 1-{MAX_NAME_LENGTH} characters)'
            )

        reps = validate_reps(raw_reps)
        if reps is None:
            raise ValidationError(
                f'Invalid reps for "{name}": {raw_reps} (must be integer 1-{MAX_REPS_INPUT})'
            )

        if name.lower() in seen:
            raise ValidationError(f"Duplicate exercise in batch: {name}")
        seen.add(name.lower())
        result.append((name, reps))

    return result
