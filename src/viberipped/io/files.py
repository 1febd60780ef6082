"""
Low-level JSON file helpers.

All writes go through a temp file in the target directory followed by
``os.replace``, so readers never observe a half-written file.  Directories
are created owner-only and files are written owner read/write only.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from ..core.config import DIR_MODE, FILE_MODE


def ensure_dir(directory: str | Path) -> None:
    """Create ``directory`` (and parents) with owner-only permissions if missing."""
    Path(directory).mkdir(parents=True, exist_ok=True, mode=DIR_MODE)


def read_json(path: str | Path) -> Any:
    """
    Read and parse a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist
        json.JSONDecodeError: If the content is not valid UTF-8 JSON
        OSError: On any other read failure
    """
    with open(path, "r", encoding="utf-8") as f:
        try:
            return json.load(f)
        except UnicodeDecodeError as e:
            raise json.JSONDecodeError(f"Invalid UTF-8 ({e.reason})", "", 0) from e


def dump_json(data: Any) -> str:
    """Pretty-print with 2-space indentation, the on-disk format of every file."""
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def write_json_atomic(path: str | Path, data: Any) -> None:
    """
    Atomically replace ``path`` with ``data`` serialized as JSON.

    Creates the parent directory if needed.

    Raises:
        OSError: If the directory, temp file, or rename fails
    """
    path = Path(path)
    ensure_dir(path.parent)

    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(dump_json(data))
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp_name, FILE_MODE)
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise
