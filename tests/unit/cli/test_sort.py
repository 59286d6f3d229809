"""Unit tests for the sort command.

The pipeline runs for real against temporary directories; only volume
inspection is patched.
"""

import os
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from fatorder.cli.main import app
from fatorder.core.errors import CleanupWarning, ErrorKind
from fatorder.core.settings import ConfigError
from fatorder.core.state import RunHistory
from fatorder.models.events import Phase
from fatorder.models.result import PhaseResult, PipelineResult
from fatorder.models.tree import scan_tree
from fatorder.models.volume import DriveClass, Volume
from fatorder.pipeline.cleanup import Cleanup
from typer.testing import CliRunner

runner = CliRunner()


@pytest.fixture
def usb_inspector(xdg_dirs: Path) -> Iterator[MagicMock]:
    """Make every target look like a removable FAT32 stick."""
    with patch("fatorder.pipeline.runner.VolumeInspector") as mock_cls:
        mock_cls.return_value.inspect.side_effect = lambda path: Volume(
            path=str(path),
            filesystem_type="FAT32",
            drive_class=DriveClass.REMOVABLE,
            mount_point="/media/usb",
            device="/dev/sdb1",
        )
        yield mock_cls


def sort_args(target: Path, staging: Path, *extra: str) -> list[str]:
    return ["sort", str(target), "--staging", str(staging), *extra]


class TestSortHelp:
    """Tests for sort --help."""

    def test_help(self) -> None:
        """Help lists the options."""
        result = runner.invoke(app, ["sort", "--help"])

        assert result.exit_code == 0
        assert "--scope" in result.stdout
        assert "--dry-run" in result.stdout
        assert "--no-verify" in result.stdout


class TestSortCommand:
    """Tests for fatorder sort."""

    @pytest.mark.usefixtures("usb_inspector")
    def test_sort_success(self, tmp_path: Path, sample_tree: Path, xdg_dirs: Path) -> None:
        """Answering Y sorts the volume and records history."""
        before = scan_tree(sample_tree).signature()

        result = runner.invoke(app, sort_args(sample_tree, tmp_path / "stage"), input="Y\n")

        assert result.exit_code == 0, result.output
        assert "Sort Plan" in result.stdout
        assert "Sorted 2 directories and 4 files" in result.stdout
        assert scan_tree(sample_tree).signature() == before
        (record,) = RunHistory().get_history()
        assert record.success is True
        assert record.files == 4

    @pytest.mark.usefixtures("usb_inspector")
    def test_sort_abort(self, tmp_path: Path, sample_tree: Path) -> None:
        """Anything but Y aborts with exit code 1."""
        before = scan_tree(sample_tree).signature()

        result = runner.invoke(app, sort_args(sample_tree, tmp_path / "stage"), input="yes\n")

        assert result.exit_code == 1
        assert "confirmation_aborted" in result.output
        assert "Nothing was changed" in result.stdout
        assert scan_tree(sample_tree).signature() == before

    @pytest.mark.usefixtures("usb_inspector")
    def test_sort_empty_answer_aborts(self, tmp_path: Path, sample_tree: Path) -> None:
        """Pressing enter aborts."""
        result = runner.invoke(app, sort_args(sample_tree, tmp_path / "stage"), input="\n")

        assert result.exit_code == 1

    @pytest.mark.usefixtures("usb_inspector")
    def test_sort_yes_skips_final_prompt(self, tmp_path: Path, sample_tree: Path) -> None:
        """--yes needs no input for a safe volume."""
        result = runner.invoke(app, sort_args(sample_tree, tmp_path / "stage", "--yes"))

        assert result.exit_code == 0, result.output

    @pytest.mark.usefixtures("usb_inspector")
    def test_sort_top_level(self, tmp_path: Path, sample_tree: Path) -> None:
        """--scope top-level is accepted and recorded."""
        result = runner.invoke(
            app,
            sort_args(sample_tree, tmp_path / "stage", "--scope", "top-level", "--yes"),
        )

        assert result.exit_code == 0, result.output
        (record,) = RunHistory().get_history()
        assert record.scope.value == "top-level"

    @pytest.mark.usefixtures("usb_inspector")
    def test_dry_run(self, tmp_path: Path, sample_tree: Path) -> None:
        """--dry-run prints the plan and changes nothing."""
        before = scan_tree(sample_tree).signature()

        result = runner.invoke(app, sort_args(sample_tree, tmp_path / "stage", "--dry-run"))

        assert result.exit_code == 0, result.output
        assert "Sort Plan (Dry Run)" in result.stdout
        assert "nothing was changed" in result.stdout
        assert scan_tree(sample_tree).signature() == before
        assert not (tmp_path / "stage").exists()
        assert RunHistory().get_history() == []

    def test_invalid_scope(self, tmp_path: Path, sample_tree: Path) -> None:
        """An unknown --scope is a usage error."""
        result = runner.invoke(
            app, sort_args(sample_tree, tmp_path / "stage", "--scope", "deep")
        )

        assert result.exit_code == 2

    def test_missing_target(self, tmp_path: Path, xdg_dirs: Path) -> None:
        """A missing target fails inspection."""
        result = runner.invoke(app, sort_args(tmp_path / "missing", tmp_path / "stage"))

        assert result.exit_code == 1
        assert "path_not_found" in result.output

    def test_config_error(self, tmp_path: Path, sample_tree: Path) -> None:
        """Broken settings stop the command."""
        with patch(
            "fatorder.cli.commands.sort.load_settings_or_default",
            side_effect=ConfigError("Invalid settings content"),
        ):
            result = runner.invoke(app, sort_args(sample_tree, tmp_path / "stage"))

        assert result.exit_code == 1
        assert "Invalid settings content" in result.output


class TestSortFailures:
    """Tests for failure reporting."""

    def test_destructive_failure_prints_recovery_path(
        self, tmp_path: Path, sample_tree: Path, xdg_dirs: Path
    ) -> None:
        """After a wipe failure the staging path is shown."""
        failed = PipelineResult(
            phases=[
                PhaseResult(
                    phase=Phase.WIPE,
                    success=False,
                    error_kind=ErrorKind.WIPE_IO,
                    message="Cannot delete a.txt",
                ),
            ],
            staging_path="/srv/stage",
            staging_preserved=True,
        )

        with patch("fatorder.cli.commands.sort.SortPipeline") as mock_pipeline:
            mock_pipeline.return_value.run.return_value = failed
            result = runner.invoke(app, sort_args(sample_tree, tmp_path / "stage"))

        assert result.exit_code == 1
        assert "wipe_io" in result.output
        assert "/srv/stage" in result.output
        (record,) = RunHistory().get_history()
        assert record.staging_preserved is True

    @pytest.mark.usefixtures("usb_inspector")
    def test_history_failure_is_not_fatal(self, tmp_path: Path, sample_tree: Path) -> None:
        """A history write error only warns."""
        with patch("fatorder.cli.commands.sort.RunHistory") as mock_history:
            mock_history.return_value.record.side_effect = OSError("read-only")
            result = runner.invoke(app, sort_args(sample_tree, tmp_path / "stage", "--yes"))

        assert result.exit_code == 0
        assert "Could not record run to history" in result.output


class TestSortOutputSafety:
    """Paths and messages that are not plain printable text."""

    @pytest.mark.usefixtures("usb_inspector")
    def test_undecodable_filename(self, tmp_path: Path, xdg_dirs: Path) -> None:
        """A non-UTF-8 file name is sorted, shown and recorded."""
        target = tmp_path / "target"
        target.mkdir()
        (target / os.fsdecode(b"b\xff.txt")).write_bytes(b"bee")
        (target / "a.txt").write_bytes(b"ay")

        result = runner.invoke(app, sort_args(target, tmp_path / "stage"), input="Y\n")

        assert result.exit_code == 0, result.output
        assert sorted(os.listdir(os.fsencode(target))) == [b"a.txt", b"b\xff.txt"]
        assert "Sorted 0 directories and 2 files" in result.stdout
        (record,) = RunHistory().get_history()
        assert record.success is True

    @pytest.mark.usefixtures("usb_inspector")
    def test_cleanup_warning_with_brackets(self, tmp_path: Path, sample_tree: Path) -> None:
        """A bracketed path in a cleanup warning is printed literally."""
        with patch.object(
            Cleanup, "run", side_effect=CleanupWarning("Could not remove /x[/y] manually")
        ):
            result = runner.invoke(app, sort_args(sample_tree, tmp_path / "stage", "--yes"))

        assert result.exit_code == 0, result.output
        assert "/x[/y]" in result.output
        (record,) = RunHistory().get_history()
        assert record.success is True

    @pytest.mark.usefixtures("usb_inspector")
    def test_history_error_with_brackets(self, tmp_path: Path, sample_tree: Path) -> None:
        """A bracketed OS error from the history write is printed literally."""
        with patch("fatorder.cli.commands.sort.RunHistory") as mock_history:
            mock_history.return_value.record.side_effect = OSError("denied [/state]")
            result = runner.invoke(app, sort_args(sample_tree, tmp_path / "stage", "--yes"))

        assert result.exit_code == 0
        assert "[/state]" in result.output

    def test_config_error_with_brackets(self, tmp_path: Path, sample_tree: Path) -> None:
        """Settings errors are not parsed as markup."""
        with patch(
            "fatorder.cli.commands.sort.load_settings_or_default",
            side_effect=ConfigError("Invalid settings content: [/scope]"),
        ):
            result = runner.invoke(app, sort_args(sample_tree, tmp_path / "stage"))

        assert result.exit_code == 1
        assert "[/scope]" in result.output
