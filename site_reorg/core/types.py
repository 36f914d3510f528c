"""
Type definitions for the reorganization pipeline.
"""

from enum import Enum
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ReorgPhase(str, Enum):
    """Phase of a reorganization run."""

    IDLE = "idle"
    PREFLIGHT_CHECKED = "preflight_checked"
    BACKED_UP = "backed_up"
    FLATTENED = "flattened"
    RESTRUCTURED = "restructured"
    REWRITTEN = "rewritten"
    VALIDATED = "validated"
    DONE = "done"
    FAILED = "failed"


# Happy-path order; FAILED is reachable from any non-terminal phase.
PHASE_SEQUENCE: List[ReorgPhase] = [
    ReorgPhase.IDLE,
    ReorgPhase.PREFLIGHT_CHECKED,
    ReorgPhase.BACKED_UP,
    ReorgPhase.FLATTENED,
    ReorgPhase.RESTRUCTURED,
    ReorgPhase.REWRITTEN,
    ReorgPhase.VALIDATED,
    ReorgPhase.DONE,
]


class MoveStatus(str, Enum):
    """Outcome of a tracked move."""

    MOVED = "moved"
    PLANNED = "planned"  # dry run
    SKIPPED = "skipped"


class MoveResult(BaseModel):
    """Result of a single tracked move."""

    source: Path = Field(description="Source path, relative to the repository")
    destination: Path = Field(
        description="Destination path, relative to the repository"
    )
    status: MoveStatus = Field(description="What happened")
    reason: Optional[str] = Field(default=None, description="Why it was skipped")

    @property
    def relocated(self) -> bool:
        return self.status in (MoveStatus.MOVED, MoveStatus.PLANNED)


class LegacyMapping(BaseModel):
    """A previously published path and the canonical URL that replaces it."""

    legacy_path: Path = Field(description="Old path, relative to the publish root")
    target: str = Field(description="Site-rooted canonical URL (leading '/')")
    new_path: Optional[Path] = Field(
        default=None, description="New file location, relative to the publish root"
    )

    model_config = ConfigDict(frozen=True)


class LinkViolation(BaseModel):
    """A local reference that does not resolve to an existing file."""

    source_file: Path = Field(description="HTML file containing the reference")
    reference: str = Field(description="Raw attribute value")
    resolved_path: Path = Field(description="Filesystem path that was checked")

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.source_file}: {self.reference} → {self.resolved_path}"
