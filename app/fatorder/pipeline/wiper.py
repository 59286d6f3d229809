"""Wiper: delete every top-level entry of the target.

Irreversible. The pipeline only reaches this after the safety gate has
proceeded and the archiver (and verifier, when enabled) succeeded.
"""

import logging
import shutil
from pathlib import Path

from fatorder.core.errors import WipeIOError
from fatorder.models.events import Phase, ProgressCallback, ProgressEvent

logger = logging.getLogger(__name__)


class Wiper:
    """Deletes the contents of a directory, leaving the directory itself.

    Args:
        progress: Optional callback invoked after each deleted entry.
    """

    def __init__(self, progress: ProgressCallback | None = None) -> None:
        self._progress = progress

    def wipe(self, target: Path) -> int:
        """Recursively delete all top-level entries of ``target``.

        Dispatches on entry type:
        - Directories: shutil.rmtree
        - Files and symlinks: Path.unlink

        Args:
            target: Target root to empty.

        Returns:
            Number of top-level entries deleted.

        Raises:
            WipeIOError: If listing or any deletion fails.
        """
        try:
            entries = sorted(target.iterdir())
        except OSError as e:
            raise WipeIOError(f"Cannot list {target}: {e}") from e

        total = len(entries)
        logger.info("Wiping %d top-level entries from %s", total, target)

        for completed, entry in enumerate(entries, start=1):
            try:
                if entry.is_dir() and not entry.is_symlink():
                    shutil.rmtree(entry)
                else:
                    entry.unlink()
            except OSError as e:
                raise WipeIOError(f"Cannot delete {entry}: {e}") from e
            logger.debug("Deleted %s", entry)
            if self._progress is not None:
                self._progress(ProgressEvent(Phase.WIPE, completed, total, entry.name))

        return total
