"""
File utilities shared by the rewriter and the link checker.
"""

import logging
from pathlib import Path
from typing import Iterator, Set

logger = logging.getLogger(__name__)

HTML_EXTENSIONS: Set[str] = {".html", ".htm"}


def is_html_file(path: Path) -> bool:
    """
    Check if a path is an HTML document based on its extension.

    Args:
        path: Path to check

    Returns:
        True if the file has an HTML extension
    """
    return path.suffix.lower() in HTML_EXTENSIONS


def iter_html_files(root: Path) -> Iterator[Path]:
    """
    Yield every HTML file under ``root`` in a stable (sorted) order.

    Args:
        root: Directory to walk

    Yields:
        Paths of HTML files
    """
    root = Path(root)
    if not root.is_dir():
        logger.debug(f"Not a directory, nothing to scan: {root}")
        return

    for path in sorted(root.rglob("*")):
        if path.is_file() and is_html_file(path):
            yield path


def read_text(path: Path, errors: str = "ignore") -> str:
    """Read a text file as UTF-8, keeping line endings untouched."""
    with open(path, "r", encoding="utf-8", errors=errors, newline="") as f:
        return f.read()


def write_text(path: Path, content: str, errors: str = "strict") -> None:
    """Write a text file as UTF-8 without newline translation."""
    with open(path, "w", encoding="utf-8", errors=errors, newline="") as f:
        f.write(content)


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """
    Configure logging for the application.

    Args:
        verbose: If True, set logging level to DEBUG
        quiet: If True, set logging level to WARNING
    """
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
