"""Unit tests for cli/display.py.

Tests for the shared Rich display functions used by the sort and
inspect commands.
"""

import io
from unittest.mock import patch

import pytest
import typer
from fatorder.cli.display import (
    RichProgressObserver,
    create_plan_table,
    create_volume_table,
    print_run_result,
    prompt_for_token,
)
from fatorder.core.errors import ErrorKind
from fatorder.core.theme import get_theme
from fatorder.models.events import Phase, PlanSummary, ProgressEvent, PromptKind
from fatorder.models.result import PhaseResult, PipelineResult
from fatorder.models.tree import DirectoryEntry, EntryKind, TreeManifest
from fatorder.models.volume import DriveClass, RiskTier, SortScope, Volume
from rich.console import Console

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def summary() -> PlanSummary:
    """A plan for a small USB stick."""
    return PlanSummary(
        drive="/media/usb",
        filesystem="FAT32",
        drive_class=DriveClass.REMOVABLE,
        risk_tier=RiskTier.SAFE_REMOVABLE,
        staging_path="/tmp/fatorder-staging",
        estimated_bytes=2048,
        available_bytes=10 * 1024**3,
        sort_scope=SortScope.ALL,
    )


def render(renderable: object) -> str:
    """Render a Rich object to plain text."""
    buf = io.StringIO()
    Console(file=buf, theme=get_theme(), width=120, no_color=True).print(renderable)
    return buf.getvalue()


# ---------------------------------------------------------------------------
# prompt_for_token
# ---------------------------------------------------------------------------


class TestPromptForToken:
    """Tests for prompt_for_token."""

    def test_returns_raw_answer(self) -> None:
        """The answer is returned without normalisation."""
        with patch("fatorder.cli.display.typer.prompt", return_value=" erase ") as mock_prompt:
            assert prompt_for_token(PromptKind.ERASE_FIXED) == " erase "

        assert "ERASE" in mock_prompt.call_args.args[0]

    def test_abort_is_empty_answer(self) -> None:
        """End of input counts as an empty answer."""
        with patch("fatorder.cli.display.typer.prompt", side_effect=typer.Abort()):
            assert prompt_for_token(PromptKind.FINAL) == ""

    def test_every_prompt_names_its_token(self) -> None:
        """Each prompt message spells out the token to type."""
        for kind in PromptKind:
            with patch("fatorder.cli.display.typer.prompt", return_value="") as mock_prompt:
                prompt_for_token(kind)
            assert kind.token in mock_prompt.call_args.args[0]


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------


class TestCreatePlanTable:
    """Tests for create_plan_table."""

    def test_title(self, summary: PlanSummary) -> None:
        assert create_plan_table(summary).title == "Sort Plan"
        assert create_plan_table(summary, dry_run=True).title == "Sort Plan (Dry Run)"

    def test_rows(self, summary: PlanSummary) -> None:
        """All plan fields are shown."""
        output = render(create_plan_table(summary))

        assert "/media/usb" in output
        assert "FAT32" in output
        assert "safe_removable" in output
        assert "2.0 KB" in output
        assert "10.0 GB" in output
        assert "/tmp/fatorder-staging" in output


class TestCreateVolumeTable:
    """Tests for create_volume_table."""

    def test_rows(self) -> None:
        volume = Volume(
            path="/data",
            filesystem_type="ext4",
            drive_class=DriveClass.FIXED,
            mount_point="/data",
            is_system_like=True,
        )

        output = render(create_volume_table(volume, RiskTier.SYSTEM_LIKE))

        assert "ext4" in output
        assert "fixed" in output
        assert "yes" in output
        assert "system_like" in output

    def test_missing_device_shows_dash(self) -> None:
        volume = Volume(path="/x", filesystem_type="unknown", drive_class=DriveClass.UNKNOWN)

        output = render(create_volume_table(volume, RiskTier.DISALLOWED))

        assert "-" in output


# ---------------------------------------------------------------------------
# RichProgressObserver
# ---------------------------------------------------------------------------


class TestRichProgressObserver:
    """Tests for RichProgressObserver."""

    def test_progress_created_for_copy_phases(self) -> None:
        """Archive, wipe and restore get a progress task."""
        with RichProgressObserver() as observer:
            observer.phase_started(Phase.ARCHIVE)
            observer.progress(ProgressEvent(Phase.ARCHIVE, 1, 2, "a.txt"))
            assert observer._progress is not None
            assert Phase.ARCHIVE in observer._tasks

        assert observer._progress is None
        assert observer._tasks == {}

    def test_other_phases_ignored(self) -> None:
        """Phases without a label produce no progress display."""
        observer = RichProgressObserver()

        observer.phase_started(Phase.VERIFY)
        observer.progress(ProgressEvent(Phase.VERIFY, 1, 1, "a.txt"))

        assert observer._progress is None

    def test_disabled(self) -> None:
        """show_progress=False never starts a display."""
        observer = RichProgressObserver(show_progress=False)

        observer.phase_started(Phase.ARCHIVE)

        assert observer._progress is None

    def test_plan_prints_table(
        self, summary: PlanSummary, capsys: pytest.CaptureFixture[str]
    ) -> None:
        RichProgressObserver(dry_run=True).plan(summary)

        assert "Sort Plan (Dry Run)" in capsys.readouterr().out

    def test_warning(self, capsys: pytest.CaptureFixture[str]) -> None:
        RichProgressObserver().warning("staging left behind")

        assert "staging left behind" in capsys.readouterr().err


# ---------------------------------------------------------------------------
# print_run_result
# ---------------------------------------------------------------------------


class TestPrintRunResult:
    """Tests for print_run_result."""

    def test_success(self, capsys: pytest.CaptureFixture[str]) -> None:
        manifest = TreeManifest(
            root="/media/usb",
            entries=(
                DirectoryEntry("A", EntryKind.DIRECTORY, 0),
                DirectoryEntry("a.txt", EntryKind.FILE, 2),
            ),
        )

        print_run_result(PipelineResult(success=True, manifest=manifest))

        assert "Sorted 1 directories and 1 files (2 B)." in capsys.readouterr().out

    def test_gate_failure(self, capsys: pytest.CaptureFixture[str]) -> None:
        """A refusal says nothing was changed."""
        result = PipelineResult(
            phases=[
                PhaseResult(
                    phase=Phase.GATE,
                    success=False,
                    error_kind=ErrorKind.UNSUPPORTED_DRIVE_TYPE,
                    message="Refusing",
                )
            ]
        )

        print_run_result(result)

        captured = capsys.readouterr()
        assert "unsupported_drive_type" in captured.err
        assert "Nothing was changed" in captured.out

    def test_restore_failure_shows_recovery_path(self, capsys: pytest.CaptureFixture[str]) -> None:
        result = PipelineResult(
            phases=[
                PhaseResult(
                    phase=Phase.RESTORE,
                    success=False,
                    error_kind=ErrorKind.RESTORE_IO,
                    message="disk full",
                )
            ],
            staging_path="/srv/stage",
            staging_preserved=True,
        )

        print_run_result(result)

        err = capsys.readouterr().err
        assert "restore failed (restore_io)" in err
        assert "/srv/stage" in err
