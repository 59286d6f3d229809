"""Sort command implementation.

Provides the `fatorder sort` command, which backs up a volume, wipes
it and restores it in alphabetical write order.
"""

from pathlib import Path
from typing import Annotated

import typer

from fatorder.cli.display import RichProgressObserver, print_run_result, prompt_for_token
from fatorder.core.settings import ConfigError, RunConfig, load_settings_or_default
from fatorder.core.state import RunHistory
from fatorder.models.history import create_run_record
from fatorder.models.result import PipelineResult
from fatorder.models.volume import SortScope
from fatorder.pipeline.runner import SortPipeline
from fatorder.utils.formatting import print_error, print_info, print_warning, safe_markup


def sort(
    ctx: typer.Context,
    target: Annotated[
        Path,
        typer.Argument(
            help="Root of the volume to sort (e.g. /media/usb).",
        ),
    ],
    staging: Annotated[
        Path | None,
        typer.Option(
            "--staging",
            "-s",
            help="Directory under which the staging mirror is created.",
        ),
    ] = None,
    scope: Annotated[
        SortScope | None,
        typer.Option(
            "--scope",
            help="Sort only the volume root (top-level) or every level (all).",
            case_sensitive=False,
        ),
    ] = None,
    yes: Annotated[
        bool,
        typer.Option(
            "--yes",
            "-y",
            help="Skip the final confirmation. Risk confirmations are still asked.",
        ),
    ] = False,
    no_verify: Annotated[
        bool,
        typer.Option(
            "--no-verify",
            help="Do not compare the staged mirror with the target before wiping.",
        ),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            help="Inspect and plan only; change nothing.",
        ),
    ] = False,
) -> None:
    """Rewrite a FAT32/exFAT volume so its entries are in alphabetical order.

    Copies everything to a staging directory, deletes the volume's
    contents, then writes them back sorted. Devices that list entries in
    on-disk order (car stereos, MP3 players) will then show them sorted.

    Examples:
        fatorder sort /media/usb
        fatorder sort /media/usb --scope top-level
        fatorder sort /media/usb --staging /var/tmp --dry-run
    """
    quiet = bool(ctx.obj and ctx.obj.get("quiet"))

    try:
        settings = load_settings_or_default()
    except ConfigError as e:
        print_error(safe_markup(str(e)))
        raise typer.Exit(code=1) from e

    config = RunConfig.from_settings(
        settings,
        target.expanduser(),
        staging_root=staging.expanduser() if staging is not None else None,
        scope=scope,
        require_confirmation=False if yes else None,
        verify_before_wipe=False if no_verify else None,
    )

    with RichProgressObserver(show_progress=not quiet, dry_run=dry_run) as observer:
        pipeline = SortPipeline(config, prompt_for_token, observer)
        result = pipeline.plan() if dry_run else pipeline.run()

    if dry_run:
        if result.success:
            print_info("Dry run: nothing was changed.")
        else:
            print_run_result(result)
            raise typer.Exit(code=1)
        return

    _record_run(config, result)
    print_run_result(result)

    if not result.success:
        raise typer.Exit(code=1)


def _record_run(config: RunConfig, result: PipelineResult) -> None:
    """Append the run to the history file; failures only warn."""
    try:
        RunHistory().record(create_run_record(str(config.target), config.scope, result))
    except (OSError, RuntimeError) as e:
        print_warning(f"Could not record run to history: {safe_markup(str(e))}")
