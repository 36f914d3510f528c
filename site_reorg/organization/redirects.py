"""
Redirect stubs for relocated pages.

A stub is a tiny standalone HTML page that sends the browser to the new
canonical URL three ways: meta refresh, ``location.replace`` and a plain link.
"""

import html
import json
import logging
from pathlib import Path

from ..shared import write_text

logger = logging.getLogger(__name__)

STUB_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8" />
  <meta http-equiv="refresh" content="0; url={attr}" />
  <link rel="canonical" href="{attr}" />
  <title>Redirecting…</title>
  <script>window.location.replace({script});</script>
</head>
<body>
  <p>This page has moved.
     <a href="{attr}">Click here if not redirected.</a></p>
</body>
</html>
"""


def validate_target(target: str) -> str:
    """
    Ensure a redirect target is a site-rooted path.

    Args:
        target: Redirect target

    Returns:
        The target unchanged

    Raises:
        ValueError: If the target has no leading '/' or is protocol-relative
    """
    if not target.startswith("/") or target.startswith("//"):
        raise ValueError(f"Redirect target must be site-rooted: {target!r}")
    return target


def render_redirect_stub(target: str) -> str:
    """
    Render the stub document for ``target``.

    Pure function: same target, same bytes.

    Args:
        target: Site-rooted URL of the canonical page

    Returns:
        HTML document text
    """
    validate_target(target)
    # json.dumps quotes for JS; "</" must not close the script element
    script = json.dumps(target).replace("</", "<\\/")
    return STUB_TEMPLATE.format(attr=html.escape(target, quote=True), script=script)


def write_redirect_stub(path: Path, target: str, dry_run: bool = False) -> str:
    """
    Write a redirect stub at ``path`` pointing at ``target``.

    Overwrites whatever is at ``path``. The target is not checked for
    existence; the link check covers it later in the run.

    Args:
        path: File to write
        target: Site-rooted URL of the canonical page
        dry_run: If True, only log what would be written

    Returns:
        The rendered document
    """
    document = render_redirect_stub(target)
    path = Path(path)

    if dry_run:
        logger.info(f"[DRY RUN] Would write redirect stub {path} → {target}")
        return document

    path.parent.mkdir(parents=True, exist_ok=True)
    write_text(path, document)
    logger.info(f"Wrote redirect stub {path} → {target}")
    return document
