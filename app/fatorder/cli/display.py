"""Shared Rich display functions for the sort pipeline.

Provides the plan and volume tables, the interactive token prompt,
a progress observer backed by ``rich.progress`` and the final result
summary used by the CLI commands.
"""

from types import TracebackType

import typer
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TaskID, TextColumn
from rich.table import Table

from fatorder.core.theme import risk_style
from fatorder.models.events import (
    Phase,
    PipelineObserver,
    PlanSummary,
    ProgressEvent,
    PromptKind,
)
from fatorder.models.result import PipelineResult
from fatorder.models.volume import RiskTier, Volume
from fatorder.utils.formatting import (
    console,
    format_size,
    print_error,
    print_info,
    print_success,
    print_warning,
    safe_markup,
)

PROMPT_MESSAGES: dict[PromptKind, str] = {
    PromptKind.ERASE_SYSTEM: (
        "This looks like a SYSTEM drive. Type ERASESYS to erase and rewrite it"
    ),
    PromptKind.ERASE_FIXED: (
        "This is a fixed (non-removable) drive. Type ERASE to erase and rewrite it"
    ),
    PromptKind.UNEXPECTED_FILESYSTEM: (
        "The filesystem is neither FAT32 nor exFAT. Type YES to continue anyway"
    ),
    PromptKind.FINAL: "Back up, wipe and restore the target in sorted order? Type Y to start",
}

PHASE_LABELS: dict[Phase, str] = {
    Phase.ARCHIVE: "Backing up",
    Phase.WIPE: "Wiping",
    Phase.RESTORE: "Restoring",
}


def prompt_for_token(kind: PromptKind) -> str:
    """Ask the user for the token of a confirmation prompt.

    The answer is returned exactly as typed. End of input counts as an
    empty answer, which the safety gate treats as abort.

    Args:
        kind: Prompt to show.

    Returns:
        The raw response.
    """
    try:
        response: str = typer.prompt(PROMPT_MESSAGES[kind], default="", show_default=False)
    except typer.Abort:
        return ""
    return response


def _risk_text(tier: RiskTier) -> str:
    style = risk_style(tier)
    return f"[{style}]{tier.value}[/{style}]"


def create_plan_table(summary: PlanSummary, dry_run: bool = False) -> Table:
    """Create a Rich table describing what a run is about to do.

    Args:
        summary: Plan produced by the pipeline.
        dry_run: Whether this is a dry-run (changes table title).

    Returns:
        Rich Table configured for plan display.
    """
    title = "Sort Plan (Dry Run)" if dry_run else "Sort Plan"
    table = Table(
        title=title,
        show_header=False,
        border_style="border",
    )
    table.add_column("Field", style="bold_header", no_wrap=True)
    table.add_column("Value")

    table.add_row("Drive", safe_markup(summary.drive))
    table.add_row("Filesystem", summary.filesystem)
    table.add_row("Drive class", summary.drive_class.value)
    table.add_row("Risk tier", _risk_text(summary.risk_tier))
    table.add_row("Sort scope", summary.sort_scope.value)
    table.add_row("Staging", safe_markup(summary.staging_path))
    table.add_row("Data to copy", format_size(summary.estimated_bytes))
    table.add_row("Free at staging", format_size(summary.available_bytes))
    return table


def create_volume_table(volume: Volume, tier: RiskTier) -> Table:
    """Create a Rich table describing an inspected volume."""
    table = Table(
        title="Volume",
        show_header=False,
        border_style="border",
    )
    table.add_column("Field", style="bold_header", no_wrap=True)
    table.add_column("Value")

    table.add_row("Path", safe_markup(volume.path))
    table.add_row("Mount point", safe_markup(volume.mount_point or "-"))
    table.add_row("Device", safe_markup(volume.device or "-"))
    table.add_row("Filesystem", volume.filesystem_type)
    table.add_row("Drive class", volume.drive_class.value)
    table.add_row("System-like", "[warning]yes[/warning]" if volume.is_system_like else "no")
    table.add_row("Risk tier", _risk_text(tier))
    return table


class RichProgressObserver(PipelineObserver):
    """Pipeline observer rendering the plan and per-phase progress bars.

    Use as a context manager so the live display is always stopped.

    Args:
        show_progress: Render progress bars (disabled in quiet mode).
        dry_run: Title the plan table as a dry run.
    """

    def __init__(self, *, show_progress: bool = True, dry_run: bool = False) -> None:
        self._show_progress = show_progress
        self._dry_run = dry_run
        self._progress: Progress | None = None
        self._tasks: dict[Phase, TaskID] = {}

    def __enter__(self) -> "RichProgressObserver":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def plan(self, summary: PlanSummary) -> None:
        console.print(create_plan_table(summary, dry_run=self._dry_run))

    def phase_started(self, phase: Phase) -> None:
        if not self._show_progress or phase not in PHASE_LABELS:
            return
        if self._progress is None:
            self._progress = Progress(
                TextColumn("[progress.description]{task.description}"),
                BarColumn(),
                MofNCompleteColumn(),
                TextColumn("[muted]{task.fields[item]}[/muted]"),
                console=console,
            )
            self._progress.start()
        self._tasks[phase] = self._progress.add_task(PHASE_LABELS[phase], total=None, item="")

    def progress(self, event: ProgressEvent) -> None:
        if self._progress is None:
            return
        task = self._tasks.get(event.phase)
        if task is None:
            return
        self._progress.update(
            task,
            completed=event.completed,
            total=event.total,
            item=safe_markup(event.current_item),
        )

    def warning(self, message: str) -> None:
        print_warning(safe_markup(message))

    def close(self) -> None:
        """Stop the live progress display, if one is running."""
        if self._progress is not None:
            self._progress.stop()
            self._progress = None
        self._tasks.clear()


def print_run_result(result: PipelineResult) -> None:
    """Print the outcome of a pipeline run.

    On a failure that happened after the target was modified, the
    staging path is printed as the recovery location.

    Args:
        result: Result returned by the pipeline.
    """
    if result.success:
        manifest = result.manifest
        if manifest is not None:
            print_success(
                f"Sorted {manifest.directory_count} directories and "
                f"{manifest.file_count} files ({format_size(manifest.total_bytes)})."
            )
        else:
            print_success("Sorted.")
        return

    failed = result.failed_phase
    if failed is None:
        print_error("Run did not complete.")
        return

    kind = failed.error_kind.value if failed.error_kind else "error"
    print_error(f"{failed.phase.value} failed ({kind}): {safe_markup(failed.message or '')}")
    if result.target_modified and result.staging_path:
        print_warning(
            f"Recover the target's data from [bold]{safe_markup(result.staging_path)}[/bold]. "
            "Do not delete it."
        )
    elif failed.phase in (Phase.GATE, Phase.CONFIRM):
        print_info("Nothing was changed.")
