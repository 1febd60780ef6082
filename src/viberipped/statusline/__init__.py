"""
Statusline provider.

Reads host telemetry JSON from stdin, decides whether the host is busy,
and prints the current exercise as an ANSI-colored line.
"""
