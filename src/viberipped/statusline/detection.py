"""
Processing detection for the statusline.

The host reports a cumulative API duration on every refresh.  It counts as
"processing" when that value grew by at least a threshold since the last
refresh of the same session.  The last observed value is kept in
detection-state.json so restarts of the provider process do not double-count.

Payloads without a numeric duration fall back to a token heuristic: any
input or cache-read tokens in the current context window usage.
"""

import json
import logging
import math
from pathlib import Path
from typing import Any

from ..core.config import DEFAULT_SENSITIVITY, SENSITIVITY_THRESHOLDS_MS
from ..core.models import UserConfig
from ..io.files import read_json, write_json_atomic

logger = logging.getLogger(__name__)


def _is_number(value: Any) -> bool:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


def get_threshold_ms(config: UserConfig | None = None) -> int:
    """
    Minimum duration growth that counts as processing.

    An explicit threshold wins over the sensitivity preset.
    """
    if config is None:
        return SENSITIVITY_THRESHOLDS_MS[DEFAULT_SENSITIVITY]
    if config.detection_threshold_ms is not None:
        return config.detection_threshold_ms
    return SENSITIVITY_THRESHOLDS_MS.get(
        config.detection_sensitivity, SENSITIVITY_THRESHOLDS_MS[DEFAULT_SENSITIVITY]
    )


def load_detection_state(state_path: str | Path) -> dict:
    """Stored {"sessionId", "lastApiDuration"}; {} when missing or corrupt."""
    try:
        data = read_json(state_path)
    except (OSError, json.JSONDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


def save_detection_state(state_path: str | Path, session_id: str | None, duration: float) -> None:
    try:
        write_json_atomic(state_path, {"sessionId": session_id, "lastApiDuration": duration})
    except OSError as e:
        logger.warning("Detection state save error: %s", e)


def _token_heuristic(data: dict) -> bool:
    context_window = data.get("context_window")
    if not isinstance(context_window, dict):
        return False
    usage = context_window.get("current_usage")
    if not isinstance(usage, dict):
        return False

    input_tokens = usage.get("input_tokens")
    cache_tokens = usage.get("cache_read_input_tokens")
    return (_is_number(input_tokens) and input_tokens > 0) or (
        _is_number(cache_tokens) and cache_tokens > 0
    )


def is_processing(
    data: Any,
    state_path: str | Path,
    config: UserConfig | None = None,
) -> bool:
    """
    Decide whether the host is currently processing.

    Args:
        data: Parsed stdin payload
        state_path: Path to detection-state.json
        config: Configuration providing sensitivity / threshold

    Returns:
        True if processing was detected
    """
    if not isinstance(data, dict):
        return False

    cost = data.get("cost")
    duration = cost.get("total_api_duration_ms") if isinstance(cost, dict) else None
    if not _is_number(duration):
        return _token_heuristic(data)

    session_id = data.get("session_id")
    previous = load_detection_state(state_path)
    last_duration = previous.get("lastApiDuration")
    stored_session = previous.get("sessionId")

    # Missing session_id keeps the stored session
    if session_id is None:
        session_id = stored_session

    new_session = session_id is not None and session_id != stored_session
    baseline_only = new_session or not _is_number(last_duration)

    save_detection_state(state_path, session_id, duration)
    if baseline_only:
        return False
    return duration - last_duration >= get_threshold_ms(config)
