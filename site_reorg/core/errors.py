"""
Error taxonomy for the reorganization pipeline.

Every fatal condition is a ReorgError subclass carrying the process exit code
the CLI should use. Skipped moves are not errors and never raise.
"""

from typing import List, Optional

from .types import LinkViolation

EXIT_FAILURE = 1
EXIT_LINK_CHECK_FAILED = 2


class ReorgError(Exception):
    """Base class for fatal reorganization failures."""

    exit_code: int = EXIT_FAILURE


class PreflightError(ReorgError):
    """Working tree is not a git checkout or has uncommitted changes."""

    def __init__(self, message: str, dirty_entries: Optional[List[str]] = None):
        super().__init__(message)
        self.dirty_entries = dirty_entries or []


class BackupError(ReorgError):
    """The backup archive could not be written."""


class GitError(ReorgError):
    """A git command exited with a non-zero status."""

    def __init__(self, args: List[str], returncode: int, stderr: str = ""):
        self.args_list = args
        self.returncode = returncode
        self.stderr = stderr.strip()
        message = f"git {' '.join(args)} failed with exit code {returncode}"
        if self.stderr:
            message = f"{message}: {self.stderr}"
        super().__init__(message)


class MoveError(ReorgError):
    """A tracked move could not be applied (e.g. destination collision)."""


class LinkCheckError(ReorgError):
    """One or more local references do not resolve."""

    exit_code = EXIT_LINK_CHECK_FAILED

    def __init__(self, violations: List[LinkViolation]):
        self.violations = list(violations)
        super().__init__(f"{len(self.violations)} broken local reference(s)")
