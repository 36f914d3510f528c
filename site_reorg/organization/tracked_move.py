"""
Version-control aware moves.

Moves go through ``git mv`` so history follows the file. Paths that are
missing or not tracked are skipped rather than treated as errors.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple

from ..core.errors import GitError, MoveError
from ..core.git import GitRepository
from ..core.types import MoveResult, MoveStatus
from .transaction import OperationType, TransactionLog, TransactionStatus

logger = logging.getLogger(__name__)


class TrackedMoveExecutor:
    """Relocate tracked files and directories inside a repository.

    All paths are relative to the repository root. In dry-run mode nothing is
    touched; planned moves are remembered so later lookups see the tree as
    it would look after the earlier moves.
    """

    def __init__(
        self,
        repo: GitRepository,
        dry_run: bool = False,
        transaction_log: Optional[TransactionLog] = None,
    ):
        self.repo = repo
        self.dry_run = dry_run
        self.transaction_log = transaction_log
        # Virtual location -> real location, dry run only
        self._planned: Dict[Path, Path] = {}
        # Virtual locations emptied by planned moves
        self._vacated: Set[Path] = set()

    @property
    def root(self) -> Path:
        return self.repo.root

    def exists(self, path: Path) -> bool:
        """Whether ``path`` exists, taking planned dry-run moves into account."""
        real = self._real_path(Path(path))
        if real is None:
            return False
        return (self.root / real).exists()

    def move(self, source: Path, destination: Path) -> MoveResult:
        """
        Move ``source`` to ``destination`` with ``git mv``.

        Args:
            source: Path to move, relative to the repository root
            destination: New path, relative to the repository root

        Returns:
            Move result; SKIPPED when the source is missing or untracked

        Raises:
            MoveError: If the destination is occupied or git refuses the move
        """
        source = Path(source)
        destination = Path(destination)

        real_source = self._real_path(source)
        if real_source is None or not (self.root / real_source).exists():
            return self._skip(source, destination, "missing")
        if not self.repo.is_tracked(real_source):
            return self._skip(source, destination, "not tracked")

        self._check_destination(destination)

        operation_id = None
        if self.transaction_log:
            operation_id = self.transaction_log.add_operation(
                OperationType.MOVE, destination, source_path=source
            ).operation_id

        if self.dry_run:
            logger.info(f"[DRY RUN] Would git mv {source} → {destination}")
            self._plan(source, destination, real_source)
            self._set_status(operation_id, TransactionStatus.COMPLETED)
            return MoveResult(
                source=source, destination=destination, status=MoveStatus.PLANNED
            )

        try:
            (self.root / destination).parent.mkdir(parents=True, exist_ok=True)
            self.repo.move(source, destination)
        except (OSError, GitError) as e:
            self._set_status(operation_id, TransactionStatus.FAILED, str(e))
            raise MoveError(f"Could not move {source} → {destination}: {e}") from e

        logger.info(f"Moved {source} → {destination}")
        self._set_status(operation_id, TransactionStatus.COMPLETED)
        return MoveResult(
            source=source, destination=destination, status=MoveStatus.MOVED
        )

    def planned_files(self, root: Path) -> List[Tuple[Path, Path]]:
        """
        Files under ``root`` as the tree would look after the planned moves.

        Args:
            root: Directory relative to the repository root

        Returns:
            Sorted (virtual path, real path) pairs, both relative to the
            repository root
        """
        root = Path(root)
        bases = [root] + [
            virtual for virtual in self._planned if root in virtual.parents
        ]

        found: Dict[Path, Path] = {}
        for virtual_base in bases:
            real_base = self._real_path(virtual_base)
            if real_base is None:
                continue
            absolute = self.root / real_base
            if absolute.is_file():
                found[virtual_base] = real_base
                continue
            if not absolute.is_dir():
                continue
            for path in absolute.rglob("*"):
                if not path.is_file():
                    continue
                rel = path.relative_to(absolute)
                # Skip files shadowed or vacated by another planned move
                if self._real_path(virtual_base / rel) == real_base / rel:
                    found[virtual_base / rel] = real_base / rel

        return sorted(found.items())

    def _check_destination(self, destination: Path) -> None:
        if not self.exists(destination):
            return

        target = self.root / destination
        if self.dry_run:
            real = self._real_path(destination)
            target = self.root / real if real is not None else target

        # An empty directory would make git nest the source inside it
        try:
            if target.is_dir() and not any(target.iterdir()):
                if self.dry_run:
                    logger.info(f"[DRY RUN] Would remove empty directory {destination}")
                else:
                    target.rmdir()
                return
        except OSError as e:
            raise MoveError(f"Could not clear destination {destination}: {e}") from e

        raise MoveError(f"Destination already exists: {destination}")

    def _plan(self, source: Path, destination: Path, real_source: Path) -> None:
        rebased: Dict[Path, Path] = {}
        for virtual in list(self._planned):
            if virtual == source or source in virtual.parents:
                real = self._planned.pop(virtual)
                if virtual != source:
                    rebased[destination / virtual.relative_to(source)] = real

        for virtual in list(self._vacated):
            if virtual == destination or destination in virtual.parents:
                self._vacated.discard(virtual)
        for virtual in list(self._vacated):
            if source in virtual.parents:
                self._vacated.discard(virtual)
                self._vacated.add(destination / virtual.relative_to(source))

        self._planned[destination] = real_source
        self._planned.update(rebased)
        self._vacated.add(source)

    def _real_path(self, path: Path) -> Optional[Path]:
        """Map a virtual (post-plan) path to where it lives on disk today."""
        if not self.dry_run:
            return path

        # Nearest planned or vacated ancestor wins
        for virtual in [path, *path.parents]:
            if virtual in self._vacated:
                return None
            if virtual in self._planned:
                return self._planned[virtual] / path.relative_to(virtual)
        return path

    def _skip(self, source: Path, destination: Path, reason: str) -> MoveResult:
        logger.info(f"Skipping ({reason}): {source}")
        if self.transaction_log:
            op = self.transaction_log.add_operation(
                OperationType.MOVE, destination, source_path=source, detail=reason
            )
            op.status = TransactionStatus.SKIPPED
        return MoveResult(
            source=source,
            destination=destination,
            status=MoveStatus.SKIPPED,
            reason=reason,
        )

    def _set_status(
        self,
        operation_id: Optional[str],
        status: TransactionStatus,
        error_message: Optional[str] = None,
    ) -> None:
        if self.transaction_log and operation_id:
            self.transaction_log.update_operation_status(
                operation_id, status, error_message
            )
