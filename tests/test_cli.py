"""Tests for CLI interface."""

from pathlib import Path
from unittest.mock import patch

from typer.testing import CliRunner

from cachemanager.cli import app
from cachemanager.models import CacheCategory, CacheEntry, SizeMode, WorkingSet

runner = CliRunner()


def _working_set(tmp_path: Path) -> WorkingSet:
    entries = []
    for name, category in [("npm", CacheCategory.USER), ("gradle", CacheCategory.DEV)]:
        path = tmp_path / name
        path.mkdir()
        (path / "blob.bin").write_bytes(b"x" * 2048)
        entries.append(CacheEntry(path=str(path), category=category))
    return WorkingSet(entries=entries)


class TestVersion:
    def test_version_flag(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "cachemanager version" in result.stdout

    def test_version_short_flag(self):
        result = runner.invoke(app, ["-v"])
        assert result.exit_code == 0
        assert "cachemanager version" in result.stdout


class TestHelp:
    def test_help_flag(self):
        result = runner.invoke(app, ["--help"], env={"COLUMNS": "200"})
        assert result.exit_code == 0
        assert "--accurate" in result.stdout
        assert "--skip-size-calculation" in result.stdout
        assert "--ignore" in result.stdout
        assert "ANDROID" in result.stdout

    def test_option_names_fit_an_80_column_terminal(self):
        result = runner.invoke(app, ["--help"], env={"COLUMNS": "80"})
        assert result.exit_code == 0
        assert "--skip-size-calculation" in result.stdout
        assert "…" not in result.stdout

    def test_short_help_flag(self):
        result = runner.invoke(app, ["-h"])
        assert result.exit_code == 0
        assert "--debug" in result.stdout

    @patch("cachemanager.cli.resolve_working_set")
    def test_help_does_not_scan(self, mock_resolve):
        runner.invoke(app, ["--help"])
        mock_resolve.assert_not_called()


class TestUsageErrors:
    @patch("cachemanager.cli.resolve_working_set")
    def test_unknown_flag(self, mock_resolve):
        result = runner.invoke(app, ["--bogus"])
        assert result.exit_code == 2
        mock_resolve.assert_not_called()

    @patch("cachemanager.cli.resolve_working_set")
    def test_ignore_requires_a_value(self, mock_resolve):
        result = runner.invoke(app, ["--ignore"])
        assert result.exit_code == 2
        mock_resolve.assert_not_called()


class TestRun:
    @patch("cachemanager.cli.resolve_working_set")
    def test_no_cache_folders(self, mock_resolve):
        mock_resolve.return_value = WorkingSet()

        result = runner.invoke(app, [])

        assert result.exit_code == 0
        assert "No existing cache folders found." in result.stdout

    @patch("cachemanager.cli.resolve_working_set")
    def test_settings_follow_flags(self, mock_resolve):
        mock_resolve.return_value = WorkingSet()

        result = runner.invoke(
            app, ["--accurate", "--ignore", "system,Temp", "-i", "android", "--no-sudo"]
        )

        assert result.exit_code == 0
        settings = mock_resolve.call_args[0][0]
        assert settings.mode == SizeMode.ACCURATE
        assert settings.exclusions == frozenset(
            {CacheCategory.SYSTEM, CacheCategory.TEMP, CacheCategory.ANDROID}
        )
        assert not settings.use_sudo
        assert "Skipping categories: ANDROID, SYSTEM, TEMP" in result.stdout

    @patch("cachemanager.cli.resolve_working_set")
    def test_unknown_ignore_name_warns(self, mock_resolve):
        mock_resolve.return_value = WorkingSet()

        result = runner.invoke(app, ["--ignore", "bogus,dev"])

        assert result.exit_code == 0
        assert "ignoring unknown category 'bogus'" in result.stdout
        assert mock_resolve.call_args[0][0].exclusions == frozenset({CacheCategory.DEV})

    @patch("cachemanager.cli.measure_working_set")
    @patch("cachemanager.cli.resolve_working_set")
    def test_skip_sizes_then_delete_all(self, mock_resolve, mock_measure, tmp_path):
        mock_resolve.return_value = _working_set(tmp_path)

        result = runner.invoke(app, ["--skip-size-calculation"], input="a\ny\n")

        assert result.exit_code == 0
        mock_measure.assert_not_called()
        assert "Size calculation skipped" in result.stdout
        assert "Delete ALL (unknown)" in result.stdout
        assert "Deleted 2 folder(s)." in result.stdout
        assert not (tmp_path / "npm").exists()
        assert not (tmp_path / "gradle").exists()

    @patch("cachemanager.cli.resolve_working_set")
    def test_accurate_mode_then_quit(self, mock_resolve, tmp_path):
        mock_resolve.return_value = _working_set(tmp_path)

        result = runner.invoke(app, ["-a"], input="q\n")

        assert result.exit_code == 0
        assert "Accurate Mode" in result.stdout
        assert "Total cache size: 4.0K" in result.stdout
        assert "Calculation time:" in result.stdout
        assert "Exiting without deleting anything." in result.stdout
        assert (tmp_path / "npm").exists()
        assert (tmp_path / "gradle").exists()

    @patch("cachemanager.cli.resolve_working_set")
    def test_end_of_input_exits_cleanly(self, mock_resolve, tmp_path):
        mock_resolve.return_value = _working_set(tmp_path)

        result = runner.invoke(app, ["-s"], input="")

        assert result.exit_code == 0
        assert "Exiting without deleting anything." in result.stdout
        assert (tmp_path / "npm").exists()
