"""Tests for reorg CLI command."""

import pytest
from click.testing import CliRunner

from site_reorg.cli.reorg import reorg
from site_reorg.organization import TransactionLog

pytestmark = pytest.mark.integration


@pytest.fixture
def runner():
    return CliRunner()


def _args(repo, tmp_path, *extra):
    return ["--repo", str(repo), "--backup-dir", str(tmp_path / "backups"), *extra]


class TestReorgCommand:
    """Test the reorg command end to end."""

    def test_help(self, runner):
        """Test help lists the phases and exit codes."""
        result = runner.invoke(reorg, ["--help"])

        assert result.exit_code == 0
        assert "Reorganize the site" in result.output
        assert "Exit codes" in result.output

    def test_version(self, runner):
        """Test --version prints the program name."""
        result = runner.invoke(reorg, ["--version"])

        assert result.exit_code == 0
        assert "site-reorg" in result.output

    def test_successful_run(self, runner, site_repo, tmp_path):
        """Test a clean repository is reorganized and follow-ups printed."""
        result = runner.invoke(reorg, _args(site_repo, tmp_path))

        assert result.exit_code == 0, result.output
        assert "Reorganization complete" in result.output
        assert "git commit" in result.output
        assert (site_repo / "docs" / "guide" / "index.html").exists()
        assert list((tmp_path / "backups").glob("backup_before_reorg_*.tar.gz"))

    def test_dry_run_flag(self, runner, site_repo, tmp_path, tree_snapshot):
        """Test --dry-run previews without touching the tree."""
        before = tree_snapshot(site_repo)

        result = runner.invoke(reorg, _args(site_repo, tmp_path, "--dry-run"))

        assert result.exit_code == 0, result.output
        assert "DRY RUN" in result.output
        assert tree_snapshot(site_repo) == before
        assert not (tmp_path / "backups").exists()

    def test_dry_run_from_environment(self, runner, site_repo, tmp_path, tree_snapshot):
        """Test DRYRUN=1 behaves like --dry-run."""
        before = tree_snapshot(site_repo)

        result = runner.invoke(reorg, _args(site_repo, tmp_path), env={"DRYRUN": "1"})

        assert result.exit_code == 0, result.output
        assert "DRY RUN" in result.output
        assert tree_snapshot(site_repo) == before

    def test_blank_dryrun_runs_live(self, runner, site_repo, tmp_path):
        """Test DRYRUN= (empty) performs a live run instead of failing."""
        result = runner.invoke(reorg, _args(site_repo, tmp_path), env={"DRYRUN": ""})

        assert result.exit_code == 0, result.output
        assert "Invalid configuration" not in result.output
        assert (site_repo / "docs" / "guide" / "index.html").exists()

    def test_webroot_option(self, runner, site_repo, tmp_path):
        """Test --webroot selects the publish root."""
        result = runner.invoke(reorg, _args(site_repo, tmp_path, "--webroot", "public"))

        assert result.exit_code == 0, result.output
        assert (site_repo / "public" / "index.html").exists()

    def test_webroot_from_environment(self, runner, site_repo, tmp_path):
        """Test WEBROOT is honored."""
        result = runner.invoke(
            reorg, _args(site_repo, tmp_path), env={"WEBROOT": "public"}
        )

        assert result.exit_code == 0, result.output
        assert (site_repo / "public" / "index.html").exists()

    def test_invalid_webroot(self, runner, site_repo, tmp_path):
        """Test an escaping publish root is refused before anything runs."""
        result = runner.invoke(reorg, _args(site_repo, tmp_path, "--webroot", "../out"))

        assert result.exit_code == 1
        assert "Invalid configuration" in result.output

    def test_dirty_tree_exits_one(self, runner, site_repo, tmp_path):
        """Test uncommitted changes exit with status 1."""
        (site_repo / "index.html").write_text("edited")

        result = runner.invoke(reorg, _args(site_repo, tmp_path))

        assert result.exit_code == 1
        assert "not clean" in result.output
        assert "index.html" in result.output
        assert not (site_repo / "docs").exists()

    def test_broken_links_exit_two(self, runner, make_repo, legacy_site, tmp_path):
        """Test a broken local reference exits with status 2."""
        legacy_site["summary-2025.html"] += '<a href="nowhere.html">x</a>\n'
        repo = make_repo(legacy_site)

        result = runner.invoke(reorg, _args(repo, tmp_path))

        assert result.exit_code == 2
        assert "BROKEN LINKS (1)" in result.output

    def test_log_file_written(self, runner, site_repo, tmp_path):
        """Test --log-file saves the transaction log after a live run."""
        log_file = tmp_path / "reorg-log.json"

        result = runner.invoke(
            reorg, _args(site_repo, tmp_path, "--log-file", str(log_file))
        )

        assert result.exit_code == 0, result.output
        log = TransactionLog.load(log_file)
        assert log.dry_run is False
        assert log.completed_at is not None
        assert log.get_statistics()["failed"] == 0
        assert log.get_statistics()["completed"] > 0

    def test_log_file_not_written_for_dry_run(self, runner, site_repo, tmp_path):
        """Test a dry run never writes the log."""
        log_file = tmp_path / "reorg-log.json"

        result = runner.invoke(
            reorg, _args(site_repo, tmp_path, "--dry-run", "--log-file", str(log_file))
        )

        assert result.exit_code == 0, result.output
        assert not log_file.exists()

    def test_log_file_written_on_failure(self, runner, site_repo, tmp_path, git):
        """Test the log is saved when the run fails after it started."""
        (site_repo / "docs").mkdir()
        (site_repo / "docs" / "css").write_text("in the way")
        git(site_repo, "add", "-A")
        git(site_repo, "commit", "-q", "-m", "Add obstacle")
        log_file = tmp_path / "reorg-log.json"

        result = runner.invoke(
            reorg, _args(site_repo, tmp_path, "--log-file", str(log_file))
        )

        assert result.exit_code == 1
        assert "Destination already exists" in result.output
        assert "Restore from backup" in result.output
        log = TransactionLog.load(log_file)
        assert log.operations[0].operation_type == "backup"
        assert log.operations[0].status == "completed"
