"""
Backup archive taken before the first mutation.

The archive is the only recovery path: nothing in the pipeline rolls back
automatically.
"""

import logging
import tarfile
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..core.errors import BackupError

logger = logging.getLogger(__name__)

BACKUP_PREFIX = "backup_before_reorg_"
BACKUP_SUFFIX = ".tar.gz"
EXCLUDED_TOP_LEVEL = {".git", "node_modules"}


def backup_archive_name(now: Optional[datetime] = None) -> str:
    """Archive file name for a timestamp, e.g. backup_before_reorg_20251014_093000.tar.gz."""
    now = now or datetime.now()
    return f"{BACKUP_PREFIX}{now.strftime('%Y%m%d_%H%M%S')}{BACKUP_SUFFIX}"


def _is_backup_archive(name: str) -> bool:
    return name.startswith(BACKUP_PREFIX) and name.endswith(BACKUP_SUFFIX)


def _exclude_filter(tarinfo: tarfile.TarInfo) -> Optional[tarfile.TarInfo]:
    parts = Path(tarinfo.name).parts
    # Archive names look like "./css/site.css"
    if parts and parts[0] == ".":
        parts = parts[1:]
    if parts and parts[0] in EXCLUDED_TOP_LEVEL:
        return None
    if parts and _is_backup_archive(parts[-1]):
        return None
    return tarinfo


def create_backup(
    repo_root: Path,
    backup_dir: Optional[Path] = None,
    dry_run: bool = False,
    now: Optional[datetime] = None,
) -> Path:
    """
    Write a gzip tarball of the working tree.

    Args:
        repo_root: Repository root to archive
        backup_dir: Directory for the archive (defaults to repo_root)
        dry_run: If True, only report the archive path
        now: Timestamp used in the archive name

    Returns:
        Path of the archive

    Raises:
        BackupError: If the archive already exists or cannot be written
    """
    repo_root = Path(repo_root)
    backup_dir = Path(backup_dir) if backup_dir is not None else repo_root
    archive_path = backup_dir / backup_archive_name(now)

    if dry_run:
        logger.info(f"[DRY RUN] Would create backup {archive_path}")
        return archive_path

    logger.info(f"Creating backup: {archive_path}")
    try:
        backup_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise BackupError(f"Could not create backup directory {backup_dir}: {e}") from e

    try:
        # "x" refuses to overwrite an existing archive
        with tarfile.open(archive_path, "x:gz") as tar:
            tar.add(repo_root, arcname=".", filter=_exclude_filter)
    except FileExistsError as e:
        raise BackupError(f"Backup already exists: {archive_path}") from e
    except (OSError, tarfile.TarError) as e:
        if archive_path.exists():
            archive_path.unlink()
        raise BackupError(f"Could not write backup {archive_path}: {e}") from e

    logger.info(f"Backup written: {archive_path}")
    return archive_path
