"""
Pytest configuration and fixtures for site_reorg tests.

Git-backed fixtures build a throwaway repository under tmp_path holding the
legacy journal club layout.
"""

import shutil
import subprocess
from pathlib import Path
from typing import Callable, Dict, Optional

import pytest

LEGACY_SITE: Dict[str, str] = {
    "index.html": (
        "<!DOCTYPE html>\n<html>\n<head>\n"
        '  <link rel="stylesheet" href="css/site.css">\n'
        '  <script src="./js/app.js"></script>\n'
        "</head>\n<body>\n"
        '  <img src="img/logo.png" alt="logo">\n'
        '  <a href="jc_guide.html">Guide</a>\n'
        '  <a href="JC-2025-10-14.html">October session</a>\n'
        '  <a href="summary-2025.html">2025 summary</a>\n'
        '  <a href="downloads/slides.pdf">Slides</a>\n'
        '  <a href="https://example.org/">External</a>\n'
        '  <a href="#top">Top</a>\n'
        '  <a href="mailto:jc@example.org">Mail</a>\n'
        "</body>\n</html>\n"
    ),
    "jc_guide.html": (
        "<!DOCTYPE html>\n<html>\n<body>\n"
        "  <h1>Presenter guide</h1>\n"
        '  <a href="/">Home</a>\n'
        "</body>\n</html>\n"
    ),
    "JC-2025-10-14.html": (
        "<!DOCTYPE html>\n<html>\n<head>\n"
        '  <link rel="stylesheet" href="css/site.css">\n'
        "</head>\n<body>\n"
        "  <h1>October 2025</h1>\n"
        '  <a href="/guide/">Guide</a>\n'
        "</body>\n</html>\n"
    ),
    "jc-october-2025.html": "<html><body>Old October page</body></html>\n",
    "summary-2025.html": (
        "<html><body>\n"
        '  <a href="/sessions/2025/10/">October</a>\n'
        "</body></html>\n"
    ),
    "css/site.css": "body { margin: 0; }\n",
    "js/app.js": "console.log('jc');\n",
    "img/logo.png": "not really a png\n",
    "downloads/slides.pdf": "%PDF-1.4\n",
    "README.md": "# Journal club\n",
}


def run_git(repo: Path, *args: str) -> str:
    """Run git in ``repo`` and return stdout."""
    result = subprocess.run(
        [
            "git",
            "-c",
            "user.name=Site Reorg Tests",
            "-c",
            "user.email=tests@example.org",
            "-c",
            "commit.gpgsign=false",
            *args,
        ],
        cwd=repo,
        check=True,
        capture_output=True,
        text=True,
    )
    return result.stdout


def write_files(root: Path, files: Dict[str, str]) -> None:
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")


def snapshot(root: Path) -> Dict[str, bytes]:
    """Contents of every file under root, skipping .git."""
    return {
        path.relative_to(root).as_posix(): path.read_bytes()
        for path in sorted(root.rglob("*"))
        if path.is_file() and ".git" not in path.relative_to(root).parts
    }


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Keep settings and git discovery independent of the host."""
    for var in ("WEBROOT", "DRYRUN", "BACKUP_DIR", "INDEX_NAME"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path))


@pytest.fixture
def make_repo(tmp_path) -> Callable[..., Path]:
    """Factory creating a committed git repository with the given files."""

    if shutil.which("git") is None:
        pytest.skip("git executable not available")

    def _make(files: Optional[Dict[str, str]] = None, name: str = "site") -> Path:
        repo = tmp_path / name
        repo.mkdir()
        run_git(repo, "init", "-q")
        write_files(repo, LEGACY_SITE if files is None else files)
        run_git(repo, "add", "-A")
        run_git(repo, "commit", "-q", "-m", "Initial site")
        return repo

    return _make


@pytest.fixture
def site_repo(make_repo) -> Path:
    """Committed repository holding the legacy site layout."""
    return make_repo()


@pytest.fixture
def git() -> Callable[..., str]:
    """Run git commands in a test repository."""
    return run_git


@pytest.fixture
def write_tree() -> Callable[[Path, Dict[str, str]], None]:
    """Write a mapping of relative path -> text under a root."""
    return write_files


@pytest.fixture
def tree_snapshot() -> Callable[[Path], Dict[str, bytes]]:
    """Capture every file's bytes under a root (ignoring .git)."""
    return snapshot


@pytest.fixture
def legacy_site() -> Dict[str, str]:
    """A fresh copy of the legacy site files."""
    return dict(LEGACY_SITE)
