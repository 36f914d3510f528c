"""Core types, configuration, errors and git access for site reorganization."""

from .config import ReorgSettings
from .errors import (
    BackupError,
    GitError,
    LinkCheckError,
    MoveError,
    PreflightError,
    ReorgError,
)
from .git import GitRepository
from .types import LegacyMapping, LinkViolation, MoveResult, MoveStatus, ReorgPhase

__all__ = [
    "ReorgSettings",
    "ReorgError",
    "PreflightError",
    "BackupError",
    "MoveError",
    "LinkCheckError",
    "GitError",
    "GitRepository",
    "LegacyMapping",
    "LinkViolation",
    "MoveResult",
    "MoveStatus",
    "ReorgPhase",
]
