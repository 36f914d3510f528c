"""
Shared utilities for site reorganization.
"""

from .file_utils import (
    # File discovery
    HTML_EXTENSIONS,
    is_html_file,
    iter_html_files,
    # Text I/O
    read_text,
    write_text,
    # Logging
    setup_logging,
)

__all__ = [
    "HTML_EXTENSIONS",
    "is_html_file",
    "iter_html_files",
    "read_text",
    "write_text",
    "setup_logging",
]
