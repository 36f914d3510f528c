"""
Thin wrapper around the git command line.

All paths handed to git are relative to the repository root so the
commands behave the same regardless of the caller's working directory.
"""

import logging
import subprocess
from pathlib import Path
from typing import List, Union

from .errors import GitError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class GitRepository:
    """A git working tree rooted at ``root``."""

    def __init__(self, root: PathLike, timeout: int = 60):
        self.root = Path(root)
        self.timeout = timeout

    def _run(self, *args: str, check: bool = True) -> subprocess.CompletedProcess:
        cmd = ["git", *args]
        logger.debug(f"Running {' '.join(cmd)} in {self.root}")
        try:
            result = subprocess.run(
                cmd,
                cwd=self.root,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise GitError(list(args), 127, "git executable not found") from e
        except subprocess.TimeoutExpired as e:
            raise GitError(list(args), -1, f"timed out after {self.timeout}s") from e

        if check and result.returncode != 0:
            raise GitError(list(args), result.returncode, result.stderr)
        return result

    def is_work_tree(self) -> bool:
        """True if ``root`` is inside a git working tree."""
        try:
            result = self._run("rev-parse", "--is-inside-work-tree", check=False)
        except GitError:
            return False
        return result.returncode == 0 and result.stdout.strip() == "true"

    def status_porcelain(self) -> List[str]:
        """Uncommitted changes (including untracked files), one entry per line."""
        result = self._run("status", "--porcelain")
        return [line for line in result.stdout.splitlines() if line.strip()]

    def is_clean(self) -> bool:
        return not self.status_porcelain()

    def is_tracked(self, path: PathLike) -> bool:
        """True if ``path`` (file or directory) is known to the index."""
        result = self._run(
            "ls-files", "--error-unmatch", "--", self._rel(path), check=False
        )
        return result.returncode == 0

    def move(self, source: PathLike, destination: PathLike) -> None:
        """Rename ``source`` to ``destination`` in both work tree and index."""
        self._run("mv", "--", self._rel(source), self._rel(destination))

    def _rel(self, path: PathLike) -> str:
        path = Path(path)
        if path.is_absolute():
            path = path.relative_to(self.root)
        return path.as_posix()
