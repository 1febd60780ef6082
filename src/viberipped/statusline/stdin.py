"""Lenient JSON parsing of the statusline's stdin payload."""

import json
from typing import Any


def parse_stdin(raw: Any) -> dict | None:
    """
    Parse the stdin payload.

    Returns:
        The parsed JSON object, or None for non-string, empty, malformed or
        non-object input (never raises)
    """
    if not isinstance(raw, str) or not raw:
        return None
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        return None
    return data if isinstance(data, dict) else None
