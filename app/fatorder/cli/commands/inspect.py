"""Inspect command implementation.

Shows how fatorder classifies the volume holding a path, without
touching it.
"""

import json
from pathlib import Path
from typing import Annotated

import typer

from fatorder.cli.display import create_volume_table
from fatorder.core.errors import PathNotFoundError
from fatorder.safety.gate import classify_risk
from fatorder.utils.formatting import console, print_error, print_warning, safe_markup
from fatorder.volume.inspector import VolumeInspector


def inspect_volume(
    target: Annotated[
        Path,
        typer.Argument(
            help="Path on the volume to inspect.",
        ),
    ],
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output as JSON.",
        ),
    ] = False,
) -> None:
    """Show drive class, filesystem and risk tier of a volume."""
    inspector = VolumeInspector()
    if not inspector.is_available():
        print_warning("findmnt or lsblk not found; the drive class will be 'unknown'.")

    try:
        volume = inspector.inspect(target.expanduser())
    except PathNotFoundError as e:
        print_error(safe_markup(str(e)))
        raise typer.Exit(code=1) from e

    tier = classify_risk(volume.drive_class, volume.filesystem_type, volume.is_system_like)

    if json_output:
        data = {
            "path": volume.path,
            "mount_point": volume.mount_point,
            "device": volume.device,
            "filesystem": volume.filesystem_type,
            "drive_class": volume.drive_class.value,
            "is_system_like": volume.is_system_like,
            "risk_tier": tier.value,
        }
        console.print_json(json.dumps(data))
        return

    console.print(create_volume_table(volume, tier))
