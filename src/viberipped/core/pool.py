"""
Pool assembly and fingerprinting.

The pool is the ordered list of exercises governing rotation.  It is derived
from the catalog by filtering on enabled equipment, then on the active
environment.  Neither filter is ever allowed to produce an empty pool.
"""

import hashlib
import json
import logging

from .config import ANYWHERE
from .exercises.loader import validate_exercise
from .exercises.registry import get_catalog
from .models import Exercise, UserConfig

logger = logging.getLogger(__name__)

__all__ = [
    "DEFAULT_POOL",
    "assemble_pool",
    "compute_pool_hash",
    "filter_by_environment",
    "filter_by_equipment",
    "validate_exercise",
]


# Last-resort bodyweight pool used only if equipment filtering yields nothing
DEFAULT_POOL: tuple[Exercise, ...] = (
    Exercise("Pushups", 15, category="push"),
    Exercise("Bodyweight squats", 20, category="legs"),
    Exercise("Desk pushups", 15, category="push"),
    Exercise("Lunges", 10, category="legs"),
    Exercise("Calf raises", 25, category="legs"),
    Exercise("Tricep dips", 12, category="push"),
    Exercise("Wall sit", 30, type="timed", category="legs"),
    Exercise("High knees", 30, category="core"),
    Exercise("Glute bridges", 15, category="legs"),
    Exercise("Plank", 30, type="timed", category="core"),
)


def filter_by_equipment(catalog: list[Exercise], enabled: list[str]) -> list[Exercise]:
    """
    Keep bodyweight exercises and those whose every required tag is enabled.

    Args:
        catalog: Source exercises, in order
        enabled: Enabled equipment keys

    Returns:
        Cloned exercises in catalog order
    """
    available = set(enabled)
    return [
        ex.clone()
        for ex in catalog
        if ex.is_bodyweight or all(tag in available for tag in ex.equipment)
    ]


def filter_by_environment(pool: list[Exercise], environment: str) -> list[Exercise]:
    """
    Keep exercises usable in ``environment``.

    If nothing matches, the unfiltered pool is returned and the anomaly
    logged, so the result is never empty for a non-empty input.
    """
    if environment == ANYWHERE:
        return list(pool)

    filtered = [ex for ex in pool if ex.usable_in(environment)]
    if not filtered:
        logger.warning(
            "Environment filter for '%s' produced an empty pool, using unfiltered pool",
            environment,
        )
        return list(pool)
    return filtered


def assemble_pool(config: UserConfig, environment: str = ANYWHERE) -> list[Exercise]:
    """
    Build the rotation pool from the catalog and a configuration.

    Args:
        config: User configuration (enabled equipment)
        environment: Active environment tag

    Returns:
        Non-empty ordered list of exercises
    """
    pool = filter_by_equipment(get_catalog(), config.enabled_equipment)

    if not pool:
        logger.error("Equipment filter produced an empty pool, using built-in bodyweight pool")
        pool = [ex.clone() for ex in DEFAULT_POOL]

    return filter_by_environment(pool, environment)


def compute_pool_hash(pool: list[Exercise]) -> str:
    """
    SHA-256 hex digest of the pool's canonical JSON form.

    Order-sensitive: the same exercises in a different order hash differently.
    """
    # Local import: serializers live in the io layer, which imports core
    from ..io.serializers import exercise_to_dict

    payload = json.dumps(
        [exercise_to_dict(ex) for ex in pool],
        separators=(",", ":"),
        ensure_ascii=False,
    )
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()
