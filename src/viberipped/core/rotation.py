"""
Rotation selection.

Walks the pool in order with wraparound, skipping exercises whose category
was served recently.  The index always advances by exactly one step in
full-pool space, whatever the scan found, so rotation stays deterministic.

Does NOT handle cooldown or persistence.
"""

import logging
from dataclasses import dataclass

from .models import Exercise, RecentCategories, RotationState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Selection:
    """Selected exercise and the index it was read from (pre-advance)."""

    exercise: Exercise
    previous_index: int


def _is_candidate(exercise: Exercise, recent: RecentCategories) -> bool:
    # Uncategorized exercises are always eligible
    return exercise.category is None or exercise.category not in recent


def select_next(state: RotationState, pool: list[Exercise]) -> Selection:
    """
    Pick the next exercise and advance the rotation.

    Mutates ``state.current_index`` and ``state.recent_categories``.

    Args:
        state: Rotation state (index must be within the pool)
        pool: Full ordered pool

    Returns:
        Selection with the exercise and the pre-advance index

    Raises:
        ValueError: If the pool is empty
    """
    if not pool:
        raise ValueError("Cannot select exercise: pool is empty")

    if state.recent_categories is None:
        state.recent_categories = RecentCategories()
    recent = state.recent_categories

    start = state.current_index
    selected: Exercise | None = None
    for offset in range(len(pool)):
        candidate = pool[(start + offset) % len(pool)]
        if _is_candidate(candidate, recent):
            selected = candidate
            break

    if selected is None:
        logger.warning(
            "Category filter excluded every exercise (single-category pool), "
            "falling back to index %d",
            start,
        )
        selected = pool[start]

    state.current_index = (start + 1) % len(pool)

    if selected.category is not None:
        recent.push(selected.category)

    return Selection(exercise=selected, previous_index=start)
