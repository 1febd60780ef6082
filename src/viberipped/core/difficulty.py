"""
Difficulty scaling.

Two multiplicative stages applied to an exercise's base amount:
1. Latency factor: observed host latency (2-30 s) mapped linearly to 1.0-1.5x
2. User multiplier: a step on the discrete difficulty ladder (0.5-2.5x)

The result is rounded half-up and clamped to [MIN_REPS, MAX_REPS].
All functions are pure.
"""

import math

from .config import (
    DEFAULT_MULTIPLIER,
    DIFFICULTY_STEPS,
    MAX_LATENCY_FACTOR,
    MAX_LATENCY_MS,
    MAX_REPS,
    MIN_LATENCY_FACTOR,
    MIN_LATENCY_MS,
    MIN_REPS,
)


def _clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


def _finite_or(value: float, fallback: float) -> float:
    # Ints beyond float range raise OverflowError in isfinite
    try:
        return value if math.isfinite(value) else fallback
    except OverflowError:
        return fallback


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def latency_factor(latency_ms: float) -> float:
    """
    Map host latency to a scale factor.

    Latency is clamped to [MIN_LATENCY_MS, MAX_LATENCY_MS] and interpolated
    linearly onto [MIN_LATENCY_FACTOR, MAX_LATENCY_FACTOR].

    Args:
        latency_ms: Observed latency in milliseconds (any number)

    Returns:
        Factor in [1.0, 1.5]
    """
    clamped = _clamp(latency_ms, MIN_LATENCY_MS, MAX_LATENCY_MS)
    t = (clamped - MIN_LATENCY_MS) / (MAX_LATENCY_MS - MIN_LATENCY_MS)
    return MIN_LATENCY_FACTOR + (MAX_LATENCY_FACTOR - MIN_LATENCY_FACTOR) * t


def scale(base_amount: int, latency_ms: float, multiplier: float) -> int:
    """
    Scale an exercise amount for latency and user difficulty.

    Inputs are coerced into range rather than rejected.  A non-finite or
    float-overflowing latency counts as no latency, such a multiplier as the
    default.

    Args:
        base_amount: Base reps (or seconds for timed exercises)
        latency_ms: Observed latency in milliseconds
        multiplier: User difficulty multiplier

    Returns:
        Scaled amount, an integer in [MIN_REPS, MAX_REPS]
    """
    latency_ms = _finite_or(latency_ms, 0)
    multiplier = _finite_or(multiplier, DEFAULT_MULTIPLIER)
    raw = base_amount * latency_factor(latency_ms) * multiplier
    return _round_half_up(_clamp(raw, MIN_REPS, MAX_REPS))


def increment(multiplier: float) -> float:
    """
    Move one step up the difficulty ladder, saturating at the top.

    A value that is not on the ladder resets to the default (1.0).
    """
    if multiplier not in DIFFICULTY_STEPS:
        return DEFAULT_MULTIPLIER
    idx = DIFFICULTY_STEPS.index(multiplier)
    return DIFFICULTY_STEPS[min(idx + 1, len(DIFFICULTY_STEPS) - 1)]


def decrement(multiplier: float) -> float:
    """
    Move one step down the difficulty ladder, saturating at the bottom.

    A value that is not on the ladder resets to the default (1.0).
    """
    if multiplier not in DIFFICULTY_STEPS:
        return DEFAULT_MULTIPLIER
    idx = DIFFICULTY_STEPS.index(multiplier)
    return DIFFICULTY_STEPS[max(idx - 1, 0)]


def difficulty_label(multiplier: float) -> str:
    """Human-readable label for a multiplier, e.g. '1.0x (default)'."""
    if multiplier == DIFFICULTY_STEPS[0]:
        return f"{DIFFICULTY_STEPS[0]}x (easiest)"
    if multiplier == DIFFICULTY_STEPS[-1]:
        return f"{DIFFICULTY_STEPS[-1]}x (hardest)"
    if multiplier == DEFAULT_MULTIPLIER:
        return f"{DEFAULT_MULTIPLIER}x (default)"
    return f"{multiplier}x"
