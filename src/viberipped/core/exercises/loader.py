"""
YAML → Exercise loader.

Loads the built-in catalog from the bundled ``viberipped/exercises/catalog.yaml``.
The same structural validator guards externally supplied exercise objects
(hand-edited pool files, CLI input), so catalog and pool entries share one
schema.

Usage (internal, called by registry.py):
    from .loader import load_catalog_from_yaml
    catalog = load_catalog_from_yaml()   # list or None on failure
"""

from __future__ import annotations

import importlib.resources
import logging
from pathlib import Path
from typing import Any

import yaml

from ..config import ANYWHERE, CATEGORIES, EXERCISE_TYPES
from ..models import Exercise

logger = logging.getLogger(__name__)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_str_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(v, str) for v in value)


def validate_exercise(candidate: Any, max_name_length: int | None = None) -> bool:
    """
    Structural check for an exercise object (plain dict).

    Rules:
    - name: non-empty string (at most ``max_name_length`` chars when given)
    - reps: positive integer
    - equipment (optional): list of strings
    - category (optional): one of CATEGORIES, or null
    - type (optional): "reps" or "timed"
    - environments (optional): non-empty list of non-empty strings
    - duration (optional): positive integer, or null

    Args:
        candidate: Object to validate
        max_name_length: Extra name length limit applied to CLI input

    Returns:
        True if valid, False otherwise
    """
    if not isinstance(candidate, dict):
        return False

    name = candidate.get("name")
    if not isinstance(name, str) or not name.strip():
        return False
    if max_name_length is not None and len(name.strip()) > max_name_length:
        return False

    reps = candidate.get("reps")
    if not _is_int(reps) or reps <= 0:
        return False

    if "equipment" in candidate and not _is_str_list(candidate["equipment"]):
        return False

    category = candidate.get("category")
    if category is not None and category not in CATEGORIES:
        return False

    if "type" in candidate and candidate["type"] not in EXERCISE_TYPES:
        return False

    if "environments" in candidate:
        envs = candidate["environments"]
        if not _is_str_list(envs) or not envs or not all(e.strip() for e in envs):
            return False

    duration = candidate.get("duration")
    if duration is not None and (not _is_int(duration) or duration <= 0):
        return False

    return True


def exercise_from_dict(d: dict) -> Exercise:
    """Convert a raw dict (from YAML or JSON) to an Exercise.

    Missing optional fields get their legacy defaults: type "reps", no
    equipment, no category, environments ["anywhere"].

    Raises ValueError if the dict fails structural validation.
    """
    if not validate_exercise(d):
        raise ValueError(f"Invalid exercise definition: {d!r}")

    return Exercise(
        name=d["name"].strip(),
        reps=int(d["reps"]),
        type=d.get("type", "reps"),
        duration=int(d["duration"]) if d.get("duration") is not None else None,
        equipment=list(d.get("equipment", [])),
        category=d.get("category"),
        environments=list(d.get("environments", [ANYWHERE])),
    )


def _load_yaml_file(path: Path) -> dict:
    """Load a YAML file; return {} on any read or parse error."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
            return data if isinstance(data, dict) else {}
    except (OSError, yaml.YAMLError) as exc:
        logger.warning("Could not read exercise catalog %s: %s", path, exc)
        return {}


def get_bundled_catalog_path() -> Path | None:
    """Return the path to the bundled catalog.yaml, or None if not found."""
    try:
        ref = importlib.resources.files("viberipped").joinpath("exercises/catalog.yaml")
        with importlib.resources.as_file(ref) as p:
            return p if p.exists() else None
    except (ModuleNotFoundError, FileNotFoundError):
        # Fallback: look relative to this file's package root
        candidate = Path(__file__).parent.parent.parent / "exercises" / "catalog.yaml"
        return candidate if candidate.exists() else None


def load_catalog_from_yaml(path: Path | None = None) -> list[Exercise] | None:
    """Return the catalog as an ordered list of Exercise.

    Invalid entries are skipped with a warning.  Returns None (rather than
    raising) when no entry could be loaded, so the registry decides how to fail.
    """
    if path is None:
        path = get_bundled_catalog_path()
    if path is None:
        return None

    raw = _load_yaml_file(path)
    entries = raw.get("exercises")
    if not isinstance(entries, list):
        return None

    result: list[Exercise] = []
    seen: set[str] = set()
    for entry in entries:
        try:
            ex = exercise_from_dict(entry)
        except ValueError as exc:
            logger.warning("Skipping catalog entry: %s", exc)
            continue
        if ex.name.lower() in seen:
            logger.warning("Skipping duplicate catalog entry '%s'", ex.name)
            continue
        seen.add(ex.name.lower())
        result.append(ex)

    return result if result else None
