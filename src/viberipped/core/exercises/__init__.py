"""
Built-in exercise catalog for viberipped.

Each catalog entry is an Exercise tagged with equipment, movement category,
type and environments.
"""

from .loader import exercise_from_dict, validate_exercise
from .registry import CATALOG, find_exercise, get_catalog

__all__ = [
    "CATALOG",
    "exercise_from_dict",
    "find_exercise",
    "get_catalog",
    "validate_exercise",
]
