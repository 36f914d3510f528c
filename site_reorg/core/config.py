"""Reorganization configuration."""

from pathlib import Path, PurePosixPath
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_WEBROOT = "docs"
DEFAULT_INDEX_NAME = "index.html"


class ReorgSettings(BaseSettings):
    """Pipeline settings loaded from environment variables.

    Mirrors the environment knobs of the reorganization script:
    ``WEBROOT=public DRYRUN=1 site-reorg``.
    """

    # Publish root, relative to the repository root
    webroot: str = DEFAULT_WEBROOT

    # Replace every mutation with a logged no-op
    dryrun: bool = False

    # Where to write the backup archive (defaults to the repository root)
    backup_dir: Optional[Path] = None

    # Document served for a directory URL
    index_name: str = DEFAULT_INDEX_NAME

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("webroot")
    @classmethod
    def _webroot_inside_repo(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if not value or value == ".":
            raise ValueError("webroot must name a subdirectory of the repository")
        path = PurePosixPath(value)
        if path.is_absolute() or ".." in path.parts:
            raise ValueError(f"webroot must stay inside the repository: {value!r}")
        return value

    @field_validator("dryrun", mode="before")
    @classmethod
    def _blank_dryrun_is_live(cls, value):
        # DRYRUN= (set but empty) means a live run
        if isinstance(value, str) and not value.strip():
            return False
        return value

    @field_validator("index_name")
    @classmethod
    def _plain_file_name(cls, value: str) -> str:
        if not value or "/" in value:
            raise ValueError(f"index_name must be a bare file name: {value!r}")
        return value

    def publish_root(self, repo_root: Path) -> Path:
        """Absolute publish root for a repository."""
        return Path(repo_root) / self.webroot

    def backup_directory(self, repo_root: Path) -> Path:
        """Directory receiving the backup archive."""
        if self.backup_dir is None:
            return Path(repo_root)
        backup_dir = Path(self.backup_dir).expanduser()
        if not backup_dir.is_absolute():
            backup_dir = Path(repo_root) / backup_dir
        return backup_dir
