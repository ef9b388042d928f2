"""Helper utility functions for the Noir registry CLI."""

import os
import shutil
import tempfile
from pathlib import Path


def is_tool_available(tool_name):
    """Check if a command-line tool is available on PATH.

    Args:
        tool_name (str): Name of the tool to check.

    Returns:
        bool: True if the tool is available, False otherwise.
    """
    return shutil.which(tool_name) is not None


def atomic_write(path: Path, data: str) -> None:
    """Atomically write text data to path.

    The content is written to a temporary file in the same directory and then
    moved over the target, so readers only ever see the old or the new file.
    """
    path = Path(path)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}-", dir=str(path.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as fh:
            fh.write(data)
        if path.exists():
            shutil.copymode(path, tmp_name)
        os.replace(tmp_name, path)
    except Exception:
        try:
            os.unlink(tmp_name)
        except OSError:
            pass
        raise
