"""
Logging setup shared by the CLI and the statusline provider.

Diagnostics always go to stderr: stdout belongs to command output and to the
statusline's raw text protocol.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler


def configure_logging(verbose: bool = False) -> None:
    """
    Route all log records to a rich handler on stderr.

    Args:
        verbose: Show INFO/DEBUG records (default: WARNING and above)
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=Console(stderr=True),
                show_time=False,
                show_path=verbose,
                markup=False,
            )
        ],
        force=True,
    )
