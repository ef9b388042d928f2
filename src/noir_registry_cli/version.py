"""Version management for the Noir registry CLI."""

import re
import sys
from pathlib import Path

# Build-time version constant (injected by release builds)
__BUILD_VERSION__ = None


def get_version() -> str:
    """
    Get the current version.

    Uses the build-time constant when set, otherwise reads pyproject.toml
    from the source checkout.

    Returns:
        str: Version string, or "unknown" when it cannot be determined
    """
    if __BUILD_VERSION__:
        return __BUILD_VERSION__

    try:
        if getattr(sys, 'frozen', False):
            # Running in PyInstaller bundle
            pyproject_path = Path(sys._MEIPASS) / 'pyproject.toml'
        else:
            pyproject_path = Path(__file__).parent.parent.parent / "pyproject.toml"

        if pyproject_path.exists():
            content = pyproject_path.read_text(encoding='utf-8')
            match = re.search(r'^version\s*=\s*["\']([^"\']+)["\']', content, re.MULTILINE)
            if match:
                version = match.group(1)
                # x.y.z or x.y.z{a|b|rc}N
                if re.match(r'^\d+\.\d+\.\d+(a\d+|b\d+|rc\d+)?$', version):
                    return version
    except OSError:
        pass

    return "unknown"


__version__ = get_version()
