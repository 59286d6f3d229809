"""Capacity and staging-location planning.

Runs before anything is written: checks that the staging directory
does not overlap the target, that it does not hold a recovery copy
from an earlier failed run, and that its volume has room for a full
mirror of the target.
"""

import logging
import shutil
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from fatorder.core.errors import (
    ArchiverIOError,
    InsufficientSpaceError,
    RecoveryPendingError,
    StagingLocationError,
)
from fatorder.core.paths import recovery_marker_for
from fatorder.models.tree import scan_tree

logger = logging.getLogger(__name__)

DiskUsageFunc = Callable[[Path], Any]


@dataclass(frozen=True, slots=True)
class CapacityPlan:
    """Space requirements of a run.

    Attributes:
        required_bytes: Total size of all files on the target.
        available_bytes: Free space on the staging volume.
        staging_path: Staging directory the mirror will be written to.
    """

    required_bytes: int
    available_bytes: int
    staging_path: str

    @property
    def sufficient(self) -> bool:
        """Check if the staging volume can hold the mirror."""
        return self.available_bytes >= self.required_bytes


def _nearest_existing(path: Path) -> Path:
    """Walk up from ``path`` to the first ancestor that exists."""
    candidate = path
    while not candidate.exists() and candidate != candidate.parent:
        candidate = candidate.parent
    return candidate


class CapacityPlanner:
    """Sizes the target and checks the staging location.

    Args:
        disk_usage: Function returning an object with a ``free`` attribute
            for a path. Defaults to shutil.disk_usage.
    """

    def __init__(self, disk_usage: DiskUsageFunc | None = None) -> None:
        self._disk_usage: DiskUsageFunc = disk_usage or shutil.disk_usage

    def plan(self, source: Path, staging_dir: Path) -> CapacityPlan:
        """Check the staging location and capacity for a run.

        Args:
            source: Target root that will be mirrored.
            staging_dir: Staging directory the mirror will be written to.

        Returns:
            CapacityPlan with required and available bytes.

        Raises:
            StagingLocationError: If staging and target overlap.
            RecoveryPendingError: If staging holds a recovery copy.
            InsufficientSpaceError: If the staging volume is too small.
            ArchiverIOError: If the target cannot be read for sizing.
        """
        self.check_staging_location(source, staging_dir)
        self.check_recovery_marker(staging_dir)

        required = self.required_bytes(source)
        available = self.available_bytes(staging_dir)
        plan = CapacityPlan(
            required_bytes=required,
            available_bytes=available,
            staging_path=str(staging_dir),
        )
        logger.info("Capacity plan: %d bytes required, %d available", required, available)

        if not plan.sufficient:
            raise InsufficientSpaceError(required, available)
        return plan

    def required_bytes(self, source: Path) -> int:
        """Sum the size of every file below ``source``.

        Raises:
            ArchiverIOError: If the tree cannot be enumerated.
        """
        try:
            return scan_tree(source).total_bytes
        except OSError as e:
            raise ArchiverIOError(f"Cannot read target for sizing: {e}") from e

    def available_bytes(self, staging_dir: Path) -> int:
        """Free bytes on the volume that will hold ``staging_dir``.

        Raises:
            StagingLocationError: If free space cannot be queried.
        """
        anchor = _nearest_existing(staging_dir)
        try:
            return int(self._disk_usage(anchor).free)
        except OSError as e:
            raise StagingLocationError(f"Cannot query free space at {anchor}: {e}") from e

    @staticmethod
    def check_staging_location(source: Path, staging_dir: Path) -> None:
        """Refuse a staging directory inside the target or containing it.

        Raises:
            StagingLocationError: If the two paths overlap.
        """
        source_resolved = source.resolve()
        staging_resolved = staging_dir.resolve()
        if staging_resolved.is_relative_to(source_resolved):
            raise StagingLocationError(
                f"Staging directory {staging_resolved} lies inside the target {source_resolved}"
            )
        if source_resolved.is_relative_to(staging_resolved):
            raise StagingLocationError(
                f"Target {source_resolved} lies inside the staging directory {staging_resolved}"
            )

    @staticmethod
    def check_recovery_marker(staging_dir: Path) -> None:
        """Refuse to reuse a staging directory kept for recovery.

        Raises:
            RecoveryPendingError: If the recovery marker is present.
        """
        if recovery_marker_for(staging_dir).exists():
            raise RecoveryPendingError(
                f"{staging_dir} holds the recovery copy of an earlier failed run. "
                "Copy its contents back to the target manually, then remove it."
            )
