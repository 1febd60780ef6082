"""
Cooldown enforcement.

Cooldown is a lazy wall-clock check against the persisted timestamp of the
last successful trigger; nothing is scheduled.
"""

import math
import time

from .models import CooldownStatus


def now_ms() -> int:
    """Current Unix time in milliseconds."""
    return int(time.time() * 1000)


def check_cooldown(
    last_trigger_time: int,
    cooldown_ms: int,
    now: int | None = None,
) -> CooldownStatus:
    """
    Check whether a trigger is allowed.

    The sentinel ``last_trigger_time == 0`` (never triggered) always allows.

    Args:
        last_trigger_time: Unix ms of the last successful trigger, or 0
        cooldown_ms: Minimum interval between triggers
        now: Current Unix ms (defaults to the wall clock)

    Returns:
        CooldownStatus with allowed flag and non-negative remaining_ms
    """
    if last_trigger_time == 0:
        return CooldownStatus(allowed=True, remaining_ms=0)

    if now is None:
        now = now_ms()
    elapsed = now - last_trigger_time

    if elapsed >= cooldown_ms:
        return CooldownStatus(allowed=True, remaining_ms=0)
    return CooldownStatus(allowed=False, remaining_ms=max(0, cooldown_ms - elapsed))


def format_remaining(ms: int) -> str:
    """Render milliseconds as '3m 5s' or '45s' (rounded up to whole seconds)."""
    total_seconds = math.ceil(ms / 1000)
    minutes, seconds = divmod(total_seconds, 60)
    if minutes > 0:
        return f"{minutes}m {seconds}s"
    return f"{seconds}s"
