"""Staging area and shared copy primitives.

The staging area is a dedicated directory owned by one run. It is
purged and recreated at the start of the backup, and either removed
after a successful restore or kept, with a recovery marker beside it,
when the target has already been modified.
"""

import logging
import os
import shutil
from datetime import UTC, datetime
from pathlib import Path

from fatorder.core.paths import recovery_marker_for

logger = logging.getLogger(__name__)


def copy_file(src: Path, dst: Path) -> None:
    """Copy file content byte for byte, then timestamps if the target allows.

    FAT volumes reject most metadata operations for non-owners; a
    failure to copy metadata is logged and ignored, content is not.

    Raises:
        OSError: If the content cannot be copied.
    """
    shutil.copyfile(src, dst)
    try:
        shutil.copystat(src, dst)
    except OSError as e:
        logger.debug("Could not copy metadata %s -> %s: %s", src, dst, e)


def copy_tree(src: Path, dst: Path) -> int:
    """Copy a directory subtree as one block, in directory-listing order.

    Args:
        src: Directory to copy.
        dst: Destination directory (created if missing).

    Returns:
        Number of files copied.

    Raises:
        OSError: If any directory cannot be listed or created, or any file copied.
    """

    def _raise(error: OSError) -> None:
        raise error

    dst.mkdir(exist_ok=True)
    copied = 0
    for dirpath, dirnames, filenames in os.walk(src, onerror=_raise):
        current = Path(dirpath)
        base = dst / current.relative_to(src)
        for name in dirnames:
            (base / name).mkdir(exist_ok=True)
        for name in filenames:
            copy_file(current / name, base / name)
            copied += 1
    return copied


class StagingArea:
    """The staging directory of a single run.

    Args:
        path: Staging directory (``<staging root>/fatorder-staging``).
    """

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    @property
    def recovery_marker(self) -> Path:
        """Path of the marker written when staging is kept for recovery."""
        return recovery_marker_for(self._path)

    def prepare(self) -> None:
        """Create a fresh, empty staging directory.

        Prior contents are purged.

        Raises:
            OSError: If the directory cannot be purged or created.
        """
        if self._path.exists():
            logger.warning("Purging leftover staging directory %s", self._path)
            shutil.rmtree(self._path)
        self._path.mkdir(parents=True)
        logger.debug("Created staging directory %s", self._path)

    def mark_for_recovery(self, reason: str) -> None:
        """Record that this staging copy is the only remaining backup.

        Args:
            reason: Why the copy must be kept (the failure message).
        """
        timestamp = datetime.now(UTC).isoformat()
        text = (
            f"{timestamp}\n"
            f"{self._path} is the only complete copy of the target's data.\n"
            f"Reason: {reason}\n"
            "Copy its contents back to the target, then delete it and this file.\n"
        )
        try:
            self.recovery_marker.write_text(text, encoding="utf-8")
        except OSError as e:
            logger.error("Could not write recovery marker %s: %s", self.recovery_marker, e)

    def discard(self) -> bool:
        """Best-effort removal of a staging directory that is not yet valid.

        Returns:
            True if the directory is gone afterwards.
        """
        if not self._path.exists():
            return True
        try:
            shutil.rmtree(self._path)
        except OSError as e:
            logger.warning("Could not discard partial staging %s: %s", self._path, e)
            return False
        return True
