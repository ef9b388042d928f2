"""Run the nargo toolchain against a project."""

import subprocess
from pathlib import Path

from ..errors import ToolchainError
from ..utils.helpers import is_tool_available

NARGO = "nargo"


def run_nargo_check(project_dir: Path, executable: str = NARGO) -> bool:
    """Run ``nargo check`` in ``project_dir`` to fetch and validate dependencies.

    Returns:
        bool: True if the check passed, False if nargo is not installed.

    Raises:
        ToolchainError: If nargo ran and failed.
    """
    if not is_tool_available(executable):
        return False

    try:
        result = subprocess.run(
            [executable, "check"],
            cwd=str(project_dir),
            capture_output=True,
            text=True,
            check=False,
        )
    except FileNotFoundError:
        return False
    except OSError as e:
        raise ToolchainError(f"Failed to run {executable}: {e}")

    if result.returncode != 0:
        stderr = (result.stderr or "").strip()
        raise ToolchainError(f"{executable} check failed after adding dependency", stderr=stderr)
    return True
