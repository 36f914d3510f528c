"""Version information for site-reorg.

The release number comes from the installed distribution metadata, so
pyproject.toml is its only source. The git hash is looked up on demand.
"""

import subprocess
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Optional

DISTRIBUTION_NAME = "site-reorg"

try:
    __version__ = version(DISTRIBUTION_NAME)
except PackageNotFoundError:
    # Running from a source tree that was never installed
    __version__ = "0.0.0+unknown"


def get_git_hash(checkout: Optional[Path] = None) -> Optional[str]:
    """Short commit hash of the checkout holding this package.

    Args:
        checkout: Directory to ask git about (the package's parent by default)

    Returns:
        7-character hash, or None outside a git checkout or without git
    """
    checkout = checkout or Path(__file__).resolve().parent.parent
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--short=7", "HEAD"],
            cwd=checkout,
            capture_output=True,
            text=True,
            check=True,
            timeout=2,
        )
    except (
        subprocess.CalledProcessError,
        subprocess.TimeoutExpired,
        FileNotFoundError,
    ):
        return None
    return result.stdout.strip() or None


def get_version_string() -> str:
    """Version for banners, e.g. "1.0.0" or "1.0.0 (git:abc1234)"."""
    git_hash = get_git_hash()
    return f"{__version__} (git:{git_hash})" if git_hash else __version__
