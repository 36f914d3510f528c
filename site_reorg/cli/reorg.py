"""
CLI command for reorganizing the site.

Moves the legacy site into a publish root, writes redirect stubs for moved
pages, normalizes asset paths and checks every local link.
"""

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import click
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from ..core.config import ReorgSettings
from ..core.errors import LinkCheckError, PreflightError, ReorgError
from ..core.types import LinkViolation, MoveStatus, ReorgPhase
from ..organization import Reorganizer, ReorgState
from ..shared import setup_logging
from ..version import __version__, get_version_string

console = Console()


@click.command()
@click.option(
    "--repo",
    "repo_path",
    type=click.Path(exists=True, file_okay=False),
    default=".",
    show_default=True,
    help="Root of the git working tree holding the site",
)
@click.option(
    "--webroot",
    type=str,
    default=None,
    help="Publish root inside the repository (env: WEBROOT, default: docs)",
)
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Preview every step without touching files or git (env: DRYRUN=1)",
)
@click.option(
    "--backup-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory for the backup archive (env: BACKUP_DIR, default: repo root)",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write the transaction log as JSON after a live run",
)
@click.option("-v", "--verbose", is_flag=True, default=False, help="Verbose output")
@click.option("-q", "--quiet", is_flag=True, default=False, help="Only warnings")
@click.version_option(version=__version__, prog_name="site-reorg")
def reorg(
    repo_path: str,
    webroot: Optional[str],
    dry_run: bool,
    backup_dir: Optional[str],
    log_file: Optional[str],
    verbose: bool,
    quiet: bool,
) -> None:
    """
    Reorganize the site into a hostable publish root.

    \b
    Examples:
        # DRY RUN (preview the plan - always do this first!)
        DRYRUN=1 site-reorg

        # Reorganize into docs/ (the default publish root)
        site-reorg

        # Use a different publish root
        WEBROOT=public site-reorg

    \b
    Phases:
        1. Preflight: the working tree must be clean
        2. Backup: backup_before_reorg_<timestamp>.tar.gz
        3. Flatten: move tracked top-level content into the publish root
        4. Restructure: assets/, guide/, sessions/YYYY/MM/, summaries/YYYY/
           plus redirect stubs at every vacated page
        5. Rewrite: css/, js/, img/ references → /assets/...
        6. Validate: every local href/src must resolve

    \b
    Exit codes:
        0  success
        1  precondition, backup or move failure
        2  broken links after reorganization
    """
    setup_logging(verbose=verbose, quiet=quiet)

    overrides: Dict[str, Any] = {}
    if webroot is not None:
        overrides["webroot"] = webroot
    if dry_run:
        overrides["dryrun"] = True
    if backup_dir is not None:
        overrides["backup_dir"] = Path(backup_dir)

    try:
        settings = ReorgSettings(**overrides)
    except ValidationError as e:
        console.print(f"[red]✗ Invalid configuration:[/red]\n{e}")
        sys.exit(1)

    repo_root = Path(repo_path).resolve()

    console.print(
        f"\n[bold cyan]Site Reorganization[/bold cyan] [dim]v{get_version_string()}[/dim]"
    )
    console.print("\n[cyan]Reorganization Configuration:[/cyan]")
    console.print(f"  Repository: {repo_root}")
    console.print(f"  Publish root: {settings.webroot}")
    console.print(f"  Backup dir: {settings.backup_directory(repo_root)}")
    console.print(f"  Dry run: {'YES' if settings.dryrun else 'NO'}")

    if settings.dryrun:
        console.print("\n[yellow]⚠ DRY RUN MODE - No files will be modified[/yellow]")
    console.print()

    reorganizer = Reorganizer(repo_root, settings=settings, on_phase=_print_phase)
    state = reorganizer.new_state()

    try:
        state = reorganizer.run(state)
    except LinkCheckError as e:
        _display_violations(e.violations)
        sys.exit(e.exit_code)
    except PreflightError as e:
        console.print(f"\n[red]✗ {e}[/red]")
        for entry in e.dirty_entries[:20]:
            console.print(f"  [dim]{entry}[/dim]")
        if len(e.dirty_entries) > 20:
            console.print(f"  [dim]... and {len(e.dirty_entries) - 20} more[/dim]")
        sys.exit(e.exit_code)
    except ReorgError as e:
        console.print(f"\n[red]✗ Error: {e}[/red]")
        if state.backup_path and not state.dry_run:
            console.print(f"[yellow]Restore from backup: {state.backup_path}[/yellow]")
        if verbose:
            console.print_exception()
        sys.exit(e.exit_code)
    finally:
        if log_file and not state.dry_run and state.phase != ReorgPhase.IDLE:
            state.transaction_log.save(Path(log_file))

    _display_result(state)


def _print_phase(state: ReorgState) -> None:
    if state.phase == ReorgPhase.FAILED:
        console.print(f"[red]✗ failed during {state.failed_phase.value}[/red]")
    else:
        console.print(f"[green]✓[/green] {state.phase.value}")


def _display_result(state: ReorgState) -> None:
    """Display reorganization result."""
    console.print("\n[green]✓ Reorganization complete![/green]\n")

    statuses = [move.status for move in state.moves]
    table = Table(title="Results")
    table.add_column("Metric", style="cyan")
    table.add_column("Count", style="green", justify="right")

    moved_label = "Planned moves" if state.dry_run else "Moved"
    moved_status = MoveStatus.PLANNED if state.dry_run else MoveStatus.MOVED
    table.add_row(moved_label, str(statuses.count(moved_status)))
    table.add_row("Skipped", str(statuses.count(MoveStatus.SKIPPED)))
    table.add_row("Redirect stubs", str(len(state.legacy_mappings)))
    table.add_row("Rewritten files", str(len(state.rewritten_files)))
    console.print(table)

    if state.legacy_mappings:
        redirects = Table(title="Redirects")
        redirects.add_column("Legacy path", style="cyan")
        redirects.add_column("Target", style="green")
        for legacy, mapping in sorted(state.legacy_mappings.items()):
            redirects.add_row(legacy, mapping.target)
        console.print(redirects)

    if state.dry_run:
        console.print("\n[yellow]This was a DRY RUN - no files were modified[/yellow]")
        console.print("Run without --dry-run (or DRYRUN=1) to execute.")
        return

    if state.backup_path:
        console.print(f"\n[dim]Backup: {state.backup_path}[/dim]")

    console.print("\nNext:")
    for step in state.follow_ups:
        console.print(f"  • {step}")


def _display_violations(violations: List[LinkViolation]) -> None:
    console.print(f"\n[red]✗ BROKEN LINKS ({len(violations)}):[/red]")
    table = Table()
    table.add_column("File", style="cyan")
    table.add_column("Reference", style="red")
    table.add_column("Resolved to", style="dim")
    for violation in violations:
        table.add_row(
            str(violation.source_file),
            violation.reference,
            str(violation.resolved_path),
        )
    console.print(table)
    console.print("[yellow]Files were left as-is; fix the links or restore the backup.[/yellow]")


if __name__ == "__main__":
    reorg()
