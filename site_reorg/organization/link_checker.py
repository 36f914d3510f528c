"""
Link integrity checking for a published tree.

Every local ``href``/``src`` in every HTML file must resolve to an existing
file. Directory references resolve through the index document.
"""

import logging
import os
import re
from pathlib import Path
from typing import List, Optional
from urllib.parse import unquote

from ..core.config import DEFAULT_INDEX_NAME
from ..core.types import LinkViolation
from ..shared import iter_html_files, read_text

logger = logging.getLogger(__name__)

IGNORED_PREFIXES = (
    "http:",
    "https:",
    "mailto:",
    "tel:",
    "javascript:",
    "data:",
    "//",
)

_REFERENCE_RE = re.compile(r"""(?:href|src)\s*=\s*["']([^"']+)["']""", re.IGNORECASE)


def extract_references(text: str) -> List[str]:
    """Raw ``href``/``src`` values in document order."""
    return _REFERENCE_RE.findall(text)


def is_ignorable(reference: str) -> bool:
    """
    Check whether a reference needs no local file.

    Args:
        reference: Raw attribute value

    Returns:
        True for empty, anchor-only and external/scheme references
    """
    value = reference.strip().lower()
    return not value or value.startswith("#") or value.startswith(IGNORED_PREFIXES)


def resolve_reference(
    reference: str,
    source_file: Path,
    root: Path,
    index_name: str = DEFAULT_INDEX_NAME,
) -> Optional[Path]:
    """
    Resolve a local reference to the file it should point at.

    Site-rooted values resolve against ``root``; relative values against the
    referencing file's directory. Fragment and query are dropped.

    Args:
        reference: Raw attribute value
        source_file: HTML file containing the reference
        root: Publish root
        index_name: Document served for a directory

    Returns:
        Candidate path, or None if the reference is ignorable
    """
    if is_ignorable(reference):
        return None

    value = reference.strip().split("#")[0].split("?")[0]
    if not value:
        return None
    value = unquote(value)

    if value.startswith("/"):
        candidate = Path(os.path.normpath(Path(root) / value.lstrip("/")))
    else:
        candidate = Path(os.path.normpath(Path(source_file).parent / value))

    if candidate.is_dir():
        candidate = candidate / index_name
    return candidate


def check_links(root: Path, index_name: str = DEFAULT_INDEX_NAME) -> List[LinkViolation]:
    """
    Check every local reference under ``root``.

    Args:
        root: Publish root
        index_name: Document served for a directory

    Returns:
        All violations, ordered by file then position in the file
    """
    root = Path(root)
    violations: List[LinkViolation] = []
    checked = 0

    for path in iter_html_files(root):
        for reference in extract_references(read_text(path)):
            candidate = resolve_reference(reference, path, root, index_name)
            if candidate is None:
                continue
            checked += 1
            if not candidate.exists():
                logger.debug(f"Broken reference in {path}: {reference}")
                violations.append(
                    LinkViolation(
                        source_file=path,
                        reference=reference,
                        resolved_path=candidate,
                    )
                )

    logger.info(
        f"Checked {checked} local reference(s) under {root}: "
        f"{len(violations)} broken"
    )
    return violations
