"""
CLI command for checking links in an existing tree.
"""

import sys
from pathlib import Path

import click
from rich.console import Console

from ..core.config import DEFAULT_INDEX_NAME
from ..core.errors import EXIT_LINK_CHECK_FAILED
from ..organization import check_links
from ..shared import setup_logging

console = Console()


@click.command()
@click.argument("root", type=click.Path(exists=True, file_okay=False))
@click.option(
    "--index-name",
    default=DEFAULT_INDEX_NAME,
    show_default=True,
    help="Document served for a directory URL",
)
@click.option("-v", "--verbose", is_flag=True, default=False, help="Verbose output")
def linkcheck(root: str, index_name: str, verbose: bool) -> None:
    """
    Check that every local href/src under ROOT resolves to a file.

    Exits with status 2 when any reference is broken.
    """
    setup_logging(verbose=verbose, quiet=not verbose)

    violations = check_links(Path(root), index_name=index_name)
    if not violations:
        console.print("[green]✓ Link check passed.[/green]")
        return

    console.print(f"[red]BROKEN LINKS ({len(violations)}):[/red]")
    for violation in violations:
        console.print(f"- {violation.source_file}")
        console.print(f"  {violation.reference} → {violation.resolved_path}")
    sys.exit(EXIT_LINK_CHECK_FAILED)


if __name__ == "__main__":
    linkcheck()
