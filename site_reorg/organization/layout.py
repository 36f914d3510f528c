"""
Layout plan for the journal club site.

Describes where each legacy file lives today and where it belongs in the
publish root. The plan is data so alternate sites can supply their own.
"""

from pathlib import PurePosixPath
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..core.config import DEFAULT_INDEX_NAME


def canonical_url(destination: str, index_name: str = DEFAULT_INDEX_NAME) -> str:
    """
    Site-rooted URL for a file inside the publish root.

    Index documents map to their directory URL with a trailing slash.

    Args:
        destination: Path relative to the publish root
        index_name: Implicit directory index document

    Returns:
        URL with a leading '/'
    """
    path = PurePosixPath(destination)
    if path.name == index_name:
        parent = path.parent.as_posix()
        return "/" if parent == "." else f"/{parent}/"
    return f"/{path.as_posix()}"


class AssetMove(BaseModel):
    """Relocation inside the publish root that needs no redirect stub."""

    source: str = Field(description="Path relative to the publish root")
    destination: str = Field(description="Path relative to the publish root")

    model_config = ConfigDict(frozen=True)


class Relocation(BaseModel):
    """A published page moving to its semantic location.

    ``source`` is the page whose content becomes canonical. Each alias is an
    alternate legacy name for the same page; aliases are never moved, they
    are only replaced by redirect stubs when present.
    """

    source: str = Field(description="Legacy page, relative to the publish root")
    destination: str = Field(description="New page, relative to the publish root")
    aliases: List[str] = Field(
        default_factory=list, description="Alternate legacy names to redirect"
    )

    model_config = ConfigDict(frozen=True)

    def target(self, index_name: str = DEFAULT_INDEX_NAME) -> str:
        return canonical_url(self.destination, index_name)

    @property
    def legacy_paths(self) -> List[str]:
        return [self.source, *self.aliases]


class SiteLayout(BaseModel):
    """Complete legacy → publish-root plan."""

    flatten_directories: List[str] = Field(
        default_factory=list,
        description="Top-level directories moved into the publish root",
    )
    flatten_files: List[str] = Field(
        default_factory=list,
        description="Top-level files moved into the publish root",
    )
    asset_moves: List[AssetMove] = Field(
        default_factory=list, description="Asset fan-out inside the publish root"
    )
    relocations: List[Relocation] = Field(
        default_factory=list, description="Pages moved to semantic locations"
    )

    @model_validator(mode="after")
    def _unique_legacy_paths(self) -> "SiteLayout":
        seen: Dict[str, str] = {}
        for relocation in self.relocations:
            for legacy in relocation.legacy_paths:
                if legacy in seen:
                    raise ValueError(
                        f"Legacy path {legacy!r} is claimed by both "
                        f"{seen[legacy]!r} and {relocation.destination!r}"
                    )
                seen[legacy] = relocation.destination
        return self

    @property
    def flatten_entries(self) -> List[str]:
        """Directories first, then files, in declaration order."""
        return [*self.flatten_directories, *self.flatten_files]


DEFAULT_LAYOUT = SiteLayout(
    flatten_directories=["css", "js", "img", "downloads", "JC"],
    flatten_files=[
        "index.html",
        "jc_guide.html",
        "jc-october-2025.html",
        "JC-2025-10-14.html",
        "JC-JAN-2026.html",
        "summary-2025.html",
        "JC-Pre-session-Sept-2025.pdf",
    ],
    asset_moves=[
        AssetMove(source="css", destination="assets/css"),
        AssetMove(source="js", destination="assets/js"),
        AssetMove(source="img", destination="assets/img"),
    ],
    relocations=[
        Relocation(source="jc_guide.html", destination="guide/index.html"),
        Relocation(
            source="JC-2025-10-14.html",
            destination="sessions/2025/10/index.html",
            aliases=["jc-october-2025.html"],
        ),
        Relocation(
            source="JC-JAN-2026.html",
            destination="sessions/2026/01/index.html",
        ),
        Relocation(
            source="summary-2025.html",
            destination="summaries/2025/index.html",
        ),
    ],
)
