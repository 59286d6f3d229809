"""Archiver: mirror the target into staging.

Two ordered passes over the target tree. First every directory
(including empty ones) is created in staging, sorted by full relative
path; then every file is copied, again sorted by full relative path.
Any failure aborts the run before the target has been touched.
"""

import logging
from pathlib import Path

from fatorder.core.errors import ArchiverIOError
from fatorder.models.events import Phase, ProgressCallback, ProgressEvent
from fatorder.models.tree import TreeManifest, scan_tree
from fatorder.pipeline.staging import copy_file

logger = logging.getLogger(__name__)


class Archiver:
    """Copies a directory tree into a staging directory.

    Args:
        progress: Optional callback invoked after each directory and file.
    """

    def __init__(self, progress: ProgressCallback | None = None) -> None:
        self._progress = progress

    def mirror(self, source: Path, staging: Path) -> TreeManifest:
        """Mirror ``source`` into ``staging``.

        Args:
            source: Target root to back up.
            staging: Existing, empty staging directory.

        Returns:
            TreeManifest of the source as captured.

        Raises:
            ArchiverIOError: If enumeration or any copy fails.
        """
        try:
            manifest = scan_tree(source)
        except OSError as e:
            raise ArchiverIOError(f"Cannot enumerate {source}: {e}") from e

        directories = manifest.directories()
        files = manifest.files()
        total = len(directories) + len(files)
        completed = 0
        logger.info(
            "Archiving %d directories and %d files from %s to %s",
            len(directories),
            len(files),
            source,
            staging,
        )

        for entry in directories:
            try:
                (staging / entry.relative_path).mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise ArchiverIOError(
                    f"Cannot create staging directory {entry.relative_path}: {e}"
                ) from e
            completed += 1
            self._report(completed, total, entry.relative_path)

        for entry in files:
            destination = staging / entry.relative_path
            try:
                destination.parent.mkdir(parents=True, exist_ok=True)
                copy_file(source / entry.relative_path, destination)
            except OSError as e:
                raise ArchiverIOError(f"Cannot back up {entry.relative_path}: {e}") from e
            logger.debug("Archived %s", entry.relative_path)
            completed += 1
            self._report(completed, total, entry.relative_path)

        return manifest

    def _report(self, completed: int, total: int, item: str) -> None:
        if self._progress is not None:
            self._progress(ProgressEvent(Phase.ARCHIVE, completed, total, item))
