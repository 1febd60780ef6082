"""
Exercise catalog registry.

The built-in catalog is loaded from the bundled YAML file at import time.
If loading fails for any reason (missing file, parse error, no valid entry),
a RuntimeError is raised: the application cannot start without a catalog.
"""

from ..models import Exercise


def _build_catalog() -> list[Exercise]:
    from .loader import load_catalog_from_yaml

    loaded = load_catalog_from_yaml()
    if not loaded:
        raise RuntimeError(
            "viberipped: no exercises could be loaded from the catalog. "
            "Check that viberipped/exercises/catalog.yaml is present and valid."
        )
    if not any(ex.is_bodyweight for ex in loaded):
        raise RuntimeError("viberipped: the catalog must contain at least one bodyweight exercise.")
    return loaded


CATALOG: list[Exercise] = _build_catalog()


def get_catalog() -> list[Exercise]:
    """
    Return a copy of the catalog in declaration order.

    Entries are cloned so callers may modify them freely.
    """
    return [ex.clone() for ex in CATALOG]


def find_exercise(name: str) -> Exercise | None:
    """Case-insensitive catalog lookup by name."""
    wanted = name.strip().lower()
    for ex in CATALOG:
        if ex.name.lower() == wanted:
            return ex.clone()
    return None
