"""
Reorganization pipeline.

Runs the phases in order, each receiving and returning the run state:

    idle → preflight_checked → backed_up → flattened → restructured
         → rewritten → validated → done

Any fatal error moves the state to ``failed`` and is re-raised. Nothing is
rolled back; the backup archive is the recovery path.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from ..core.config import ReorgSettings
from ..core.errors import LinkCheckError, PreflightError, ReorgError
from ..core.git import GitRepository
from ..core.types import LegacyMapping, LinkViolation, MoveResult, ReorgPhase
from .backup import create_backup
from .layout import DEFAULT_LAYOUT, Relocation, SiteLayout
from .link_checker import check_links
from .redirects import write_redirect_stub
from .rewriter import normalize_asset_paths, preview_asset_rewrites
from .tracked_move import TrackedMoveExecutor
from .transaction import OperationType, TransactionLog, TransactionStatus

logger = logging.getLogger(__name__)

FOLLOW_UPS = [
    "Review changes",
    "git commit",
    "git push",
    "Enable GitHub Pages → /{webroot}",
]


class ReorgState(BaseModel):
    """Everything a run knows, threaded through each phase."""

    repo_root: Path
    webroot: str
    dry_run: bool = False
    index_name: str = "index.html"
    phase: ReorgPhase = ReorgPhase.IDLE
    history: List[ReorgPhase] = Field(default_factory=lambda: [ReorgPhase.IDLE])
    moves: List[MoveResult] = Field(default_factory=list)
    legacy_mappings: Dict[str, LegacyMapping] = Field(default_factory=dict)
    backup_path: Optional[Path] = None
    rewritten_files: List[Path] = Field(default_factory=list)
    violations: List[LinkViolation] = Field(default_factory=list)
    failed_phase: Optional[ReorgPhase] = None
    error: Optional[str] = None
    follow_ups: List[str] = Field(default_factory=list)
    transaction_log: TransactionLog = Field(default_factory=TransactionLog)

    model_config = ConfigDict(arbitrary_types_allowed=True)

    @property
    def publish_root(self) -> Path:
        return self.repo_root / self.webroot

    @property
    def succeeded(self) -> bool:
        return self.phase == ReorgPhase.DONE

    def advance(self, phase: ReorgPhase) -> None:
        self.phase = phase
        self.history.append(phase)

    def fail(self, error: Exception, phase: ReorgPhase) -> None:
        """Record that ``phase`` was executing when ``error`` stopped the run."""
        self.failed_phase = phase
        self.error = str(error)
        self.advance(ReorgPhase.FAILED)

    def add_mapping(self, mapping: LegacyMapping) -> None:
        """Record a legacy mapping; a legacy path maps to exactly one target."""
        key = mapping.legacy_path.as_posix()
        existing = self.legacy_mappings.get(key)
        if existing is not None and existing.target != mapping.target:
            raise ReorgError(
                f"Legacy path {key} already redirects to {existing.target}, "
                f"refusing to redirect it to {mapping.target}"
            )
        self.legacy_mappings[key] = mapping


PhaseStep = Callable[[ReorgState], ReorgState]


class Reorganizer:
    """Move a site from its legacy layout into a publish root."""

    def __init__(
        self,
        repo_root: Path,
        settings: Optional[ReorgSettings] = None,
        layout: SiteLayout = DEFAULT_LAYOUT,
        repo: Optional[GitRepository] = None,
        on_phase: Optional[Callable[[ReorgState], None]] = None,
    ):
        """
        Initialize the reorganizer.

        Args:
            repo_root: Root of the git working tree holding the site
            settings: Pipeline settings (environment when omitted)
            layout: Legacy → publish-root plan
            repo: Git access (built from repo_root when omitted)
            on_phase: Called after every phase transition
        """
        self.repo_root = Path(repo_root)
        self.settings = settings or ReorgSettings()
        self.layout = layout
        self.repo = repo or GitRepository(self.repo_root)
        self.on_phase = on_phase
        self.executor: Optional[TrackedMoveExecutor] = None

    def new_state(self) -> ReorgState:
        return ReorgState(
            repo_root=self.repo_root,
            webroot=self.settings.webroot,
            dry_run=self.settings.dryrun,
            index_name=self.settings.index_name,
            transaction_log=TransactionLog(dry_run=self.settings.dryrun),
        )

    def steps(self) -> List[Tuple[ReorgPhase, PhaseStep]]:
        return [
            (ReorgPhase.PREFLIGHT_CHECKED, self.preflight),
            (ReorgPhase.BACKED_UP, self.backup),
            (ReorgPhase.FLATTENED, self.flatten),
            (ReorgPhase.RESTRUCTURED, self.restructure),
            (ReorgPhase.REWRITTEN, self.rewrite),
            (ReorgPhase.VALIDATED, self.validate),
            (ReorgPhase.DONE, self.finish),
        ]

    def run(self, state: Optional[ReorgState] = None) -> ReorgState:
        """
        Run every phase in order.

        Args:
            state: Starting state (a fresh one when omitted)

        Returns:
            Final state, in phase DONE

        Raises:
            ReorgError: On any fatal condition; ``state.phase`` is FAILED
        """
        state = state or self.new_state()
        logger.info(
            f"Starting reorganization into {state.webroot} "
            f"({'DRY RUN' if state.dry_run else 'LIVE'})"
        )
        self.executor = TrackedMoveExecutor(
            self.repo, dry_run=state.dry_run, transaction_log=state.transaction_log
        )

        for phase, step in self.steps():
            try:
                state = step(state)
            except ReorgError as e:
                logger.error(f"Reorganization failed during {phase.value}: {e}")
                state.fail(e, phase)
                state.transaction_log.completed_at = datetime.now()
                self._notify(state)
                raise
            state.advance(phase)
            self._notify(state)

        state.transaction_log.completed_at = datetime.now()
        return state

    def preflight(self, state: ReorgState) -> ReorgState:
        """Require a clean git working tree. Read-only."""
        if not self.repo.is_work_tree():
            raise PreflightError("Not inside a git repository.")

        dirty = self.repo.status_porcelain()
        if dirty:
            raise PreflightError(
                "Working tree not clean. Commit or stash first.", dirty_entries=dirty
            )
        return state

    def backup(self, state: ReorgState) -> ReorgState:
        op = state.transaction_log.add_operation(
            OperationType.BACKUP, self.settings.backup_directory(state.repo_root)
        )
        try:
            state.backup_path = create_backup(
                state.repo_root,
                self.settings.backup_directory(state.repo_root),
                dry_run=state.dry_run,
            )
        except ReorgError as e:
            state.transaction_log.update_operation_status(
                op.operation_id, TransactionStatus.FAILED, str(e)
            )
            raise
        op.target_path = state.backup_path
        state.transaction_log.update_operation_status(
            op.operation_id, TransactionStatus.COMPLETED
        )
        return state

    def flatten(self, state: ReorgState) -> ReorgState:
        """Move known top-level content into the publish root."""
        logger.info(f"Preparing publish root: {state.webroot}")
        self._mkdir(state, state.publish_root)

        webroot = Path(state.webroot)
        for entry in self.layout.flatten_entries:
            state.moves.append(self._executor.move(Path(entry), webroot / entry))
        return state

    def restructure(self, state: ReorgState) -> ReorgState:
        """Fan assets out under assets/ and move pages to semantic locations."""
        webroot = Path(state.webroot)

        for asset in self.layout.asset_moves:
            state.moves.append(
                self._executor.move(webroot / asset.source, webroot / asset.destination)
            )

        for relocation in self.layout.relocations:
            self._relocate(state, relocation)
        return state

    def rewrite(self, state: ReorgState) -> ReorgState:
        logger.info("Normalizing asset paths to /assets/...")
        try:
            if state.dry_run:
                state.rewritten_files = self._preview_rewrites(state)
            else:
                state.rewritten_files = normalize_asset_paths(state.publish_root)
        except OSError as e:
            raise ReorgError(f"Could not rewrite asset paths: {e}") from e
        for path in state.rewritten_files:
            op = state.transaction_log.add_operation(OperationType.REWRITE, path)
            op.status = TransactionStatus.COMPLETED
        return state

    def validate(self, state: ReorgState) -> ReorgState:
        """Fail the run if any local reference is broken."""
        if state.dry_run:
            logger.info("[DRY RUN] Skipping link check")
            return state

        logger.info("Running internal link check")
        try:
            state.violations = check_links(state.publish_root, state.index_name)
        except OSError as e:
            raise ReorgError(f"Could not check links: {e}") from e
        if state.violations:
            raise LinkCheckError(state.violations)
        logger.info("Link check passed.")
        return state

    def finish(self, state: ReorgState) -> ReorgState:
        state.follow_ups = [step.format(webroot=state.webroot) for step in FOLLOW_UPS]
        logger.info("Reorganization complete")
        return state

    @property
    def _executor(self) -> TrackedMoveExecutor:
        if self.executor is None:
            raise RuntimeError("Reorganizer.run() must be used to execute phases")
        return self.executor

    def _preview_rewrites(self, state: ReorgState) -> List[Path]:
        # Read planned documents where they live today; stubs replace legacy pages
        stubs = {
            Path(state.webroot) / legacy for legacy in state.legacy_mappings
        }
        planned = [
            (state.repo_root / virtual, state.repo_root / real)
            for virtual, real in self._executor.planned_files(Path(state.webroot))
            if virtual not in stubs
        ]
        return preview_asset_rewrites(planned)

    def _relocate(self, state: ReorgState, relocation: Relocation) -> None:
        webroot = Path(state.webroot)
        source = webroot / relocation.source
        destination = webroot / relocation.destination
        target = relocation.target(state.index_name)

        if not self._executor.exists(source):
            logger.info(f"Skipping relocation (missing): {relocation.source}")
            return

        result = self._executor.move(source, destination)
        state.moves.append(result)
        if not result.relocated:
            return

        self._write_stub(state, relocation.source, target, Path(relocation.destination))
        for alias in relocation.aliases:
            if self._executor.exists(webroot / alias):
                self._write_stub(state, alias, target, Path(relocation.destination))

    def _write_stub(
        self, state: ReorgState, legacy: str, target: str, new_path: Path
    ) -> None:
        state.add_mapping(
            LegacyMapping(legacy_path=Path(legacy), target=target, new_path=new_path)
        )
        stub_path = state.publish_root / legacy
        op = state.transaction_log.add_operation(
            OperationType.STUB, stub_path, detail=target
        )
        try:
            write_redirect_stub(stub_path, target, dry_run=state.dry_run)
        except OSError as e:
            op.status = TransactionStatus.FAILED
            op.error_message = str(e)
            raise ReorgError(f"Could not write redirect stub {stub_path}: {e}") from e
        op.status = TransactionStatus.COMPLETED

    def _mkdir(self, state: ReorgState, path: Path) -> None:
        op = state.transaction_log.add_operation(OperationType.MKDIR, path)
        if state.dry_run:
            logger.info(f"[DRY RUN] Would create directory {path}")
        else:
            try:
                path.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                op.status = TransactionStatus.FAILED
                op.error_message = str(e)
                raise ReorgError(f"Could not create {path}: {e}") from e
        op.status = TransactionStatus.COMPLETED

    def _notify(self, state: ReorgState) -> None:
        if self.on_phase is not None:
            self.on_phase(state)
