"""Pure rotation, cooldown, difficulty and pool logic (no file I/O)."""
