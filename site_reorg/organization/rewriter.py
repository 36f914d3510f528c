"""
Asset path normalization.

Rewrites legacy relative asset references (``css/``, ``./js/``, ``/img/``)
in ``href``/``src`` attributes to the canonical ``/assets/...`` prefix.
The match is textual: only attribute assignments whose value starts with a
legacy prefix are touched, so running the rewrite twice changes nothing.
"""

import logging
import re
from pathlib import Path
from typing import Iterable, List, Sequence, Tuple

from ..shared import is_html_file, iter_html_files, read_text, write_text

logger = logging.getLogger(__name__)

LEGACY_ASSET_DIRS: Tuple[str, ...] = ("css", "js", "img")
CANONICAL_ASSET_PREFIX = "/assets/"


def _asset_pattern(asset_dirs: Sequence[str]) -> "re.Pattern[str]":
    dirs = "|".join(re.escape(d) for d in asset_dirs)
    return re.compile(
        r"(?P<attr>\b(?:href|src))(?P<eq>\s*=\s*)(?P<quote>[\"'])"
        r"(?:\./|/)?(?P<dir>" + dirs + r")/",
        re.IGNORECASE,
    )


_ASSET_ATTR_RE = _asset_pattern(LEGACY_ASSET_DIRS)


def rewrite_asset_references(text: str) -> Tuple[str, int]:
    """
    Rewrite legacy asset references in a document.

    Args:
        text: HTML document text

    Returns:
        Tuple of (rewritten text, number of references rewritten)
    """
    return _ASSET_ATTR_RE.subn(
        lambda m: (
            f"{m.group('attr')}{m.group('eq')}{m.group('quote')}"
            f"{CANONICAL_ASSET_PREFIX}{m.group('dir')}/"
        ),
        text,
    )


def normalize_asset_paths(root: Path, dry_run: bool = False) -> List[Path]:
    """
    Normalize asset references in every HTML file under ``root``.

    Files are rewritten in place. In dry-run mode the changes are computed
    and reported but nothing is written.

    Args:
        root: Directory to process
        dry_run: If True, don't write anything

    Returns:
        Files whose content changed (or would change)
    """
    changed: List[Path] = []

    for path in iter_html_files(Path(root)):
        original = read_text(path, errors="surrogateescape")
        rewritten, count = rewrite_asset_references(original)
        if count == 0 or rewritten == original:
            continue

        changed.append(path)
        if dry_run:
            logger.info(f"[DRY RUN] Would rewrite {count} asset reference(s) in {path}")
            continue

        write_text(path, rewritten, errors="surrogateescape")
        logger.info(f"Rewrote {count} asset reference(s) in {path}")

    return changed


def preview_asset_rewrites(files: Iterable[Tuple[Path, Path]]) -> List[Path]:
    """
    Report which documents a rewrite would change, without writing.

    Used when the documents have not reached their final location yet, e.g.
    during a dry run where moves are only planned.

    Args:
        files: (reported path, path to read) pairs

    Returns:
        Reported paths of HTML documents that would change
    """
    changed: List[Path] = []

    for reported, source in files:
        if not is_html_file(Path(reported)):
            continue
        _, count = rewrite_asset_references(read_text(source, errors="surrogateescape"))
        if count:
            logger.info(f"[DRY RUN] Would rewrite {count} asset reference(s) in {reported}")
            changed.append(Path(reported))

    return changed
