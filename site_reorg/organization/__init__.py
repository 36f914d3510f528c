"""
Organization module for site reorganization.

This module moves the site into its publish root with safety features like
a clean-tree precondition, an upfront backup archive, dry-run previews,
redirect stubs for every relocated page and a final link integrity check.
"""

from .backup import create_backup
from .layout import DEFAULT_LAYOUT, AssetMove, Relocation, SiteLayout, canonical_url
from .link_checker import check_links
from .redirects import render_redirect_stub, write_redirect_stub
from .reorganizer import Reorganizer, ReorgState
from .rewriter import normalize_asset_paths, rewrite_asset_references
from .tracked_move import TrackedMoveExecutor
from .transaction import (
    OperationType,
    TransactionLog,
    TransactionOperation,
    TransactionStatus,
)

__all__ = [
    "create_backup",
    "DEFAULT_LAYOUT",
    "AssetMove",
    "Relocation",
    "SiteLayout",
    "canonical_url",
    "check_links",
    "render_redirect_stub",
    "write_redirect_stub",
    "Reorganizer",
    "ReorgState",
    "normalize_asset_paths",
    "rewrite_asset_references",
    "TrackedMoveExecutor",
    "OperationType",
    "TransactionLog",
    "TransactionOperation",
    "TransactionStatus",
]
