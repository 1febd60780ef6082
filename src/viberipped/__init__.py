"""
viberipped: deterministic micro-exercise rotation.

Rotates through a pool of short exercises, enforces a cooldown between
prompts, scales difficulty from observed latency, and persists everything
as JSON files under a per-user configuration directory.
"""

__version__ = "1.1.0"
