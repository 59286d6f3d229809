"""Restore strategies: replay the staged tree onto the emptied target.

FAT and exFAT append new directory entries in creation order, and the
devices this tool targets list entries in that order. Writing entries
in sorted order is therefore what makes them appear sorted.

Two strategies exist:

- :class:`TopLevelRestorer` writes the volume root in sorted order and
  copies each root directory's subtree as one block.
- :class:`FullDepthRestorer` writes every directory and file, at every
  depth, in sorted order of full relative path.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path

from fatorder.core.errors import InvalidScopeError, RestoreIOError
from fatorder.models.events import Phase, ProgressCallback, ProgressEvent
from fatorder.models.tree import scan_tree
from fatorder.models.volume import SortScope
from fatorder.pipeline.staging import copy_file, copy_tree

logger = logging.getLogger(__name__)


class Restorer(ABC):
    """Abstract base class for restore strategies.

    Args:
        progress: Optional callback invoked after each restore step.
    """

    def __init__(self, progress: ProgressCallback | None = None) -> None:
        self._progress = progress

    @property
    @abstractmethod
    def scope(self) -> SortScope:
        """Sort scope this strategy implements."""

    @abstractmethod
    def restore(self, staging: Path, target: Path) -> int:
        """Copy the staged tree onto the target.

        Args:
            staging: Staging directory holding the mirror.
            target: Empty target root.

        Returns:
            Number of restore steps performed.

        Raises:
            RestoreIOError: If any directory or file cannot be written.
        """

    def _report(self, completed: int, total: int, item: str) -> None:
        if self._progress is not None:
            self._progress(ProgressEvent(Phase.RESTORE, completed, total, item))


class TopLevelRestorer(Restorer):
    """Sorted root level, bulk copy below it."""

    @property
    def scope(self) -> SortScope:
        return SortScope.TOP_LEVEL

    def restore(self, staging: Path, target: Path) -> int:
        try:
            entries = sorted(staging.iterdir(), key=lambda p: p.name)
        except OSError as e:
            raise RestoreIOError(f"Cannot list staging {staging}: {e}") from e

        directories = [e for e in entries if e.is_dir() and not e.is_symlink()]
        files = [e for e in entries if not (e.is_dir() and not e.is_symlink())]
        total = len(directories) * 2 + len(files)
        completed = 0
        logger.info(
            "Restoring %d root directories and %d root files to %s (top level)",
            len(directories),
            len(files),
            target,
        )

        for directory in directories:
            try:
                (target / directory.name).mkdir(exist_ok=True)
            except OSError as e:
                raise RestoreIOError(f"Cannot create {directory.name}: {e}") from e
            completed += 1
            self._report(completed, total, directory.name)

        for file in files:
            try:
                copy_file(file, target / file.name)
            except OSError as e:
                raise RestoreIOError(f"Cannot restore {file.name}: {e}") from e
            completed += 1
            self._report(completed, total, file.name)

        for directory in directories:
            try:
                copied = copy_tree(directory, target / directory.name)
            except OSError as e:
                raise RestoreIOError(f"Cannot restore contents of {directory.name}: {e}") from e
            logger.debug("Restored %d files below %s", copied, directory.name)
            completed += 1
            self._report(completed, total, f"{directory.name}/")

        return completed


class FullDepthRestorer(Restorer):
    """Sorted order at every directory depth."""

    @property
    def scope(self) -> SortScope:
        return SortScope.ALL

    def restore(self, staging: Path, target: Path) -> int:
        try:
            manifest = scan_tree(staging)
        except OSError as e:
            raise RestoreIOError(f"Cannot enumerate staging {staging}: {e}") from e

        directories = manifest.directories()
        files = manifest.files()
        total = len(directories) + len(files)
        completed = 0
        logger.info(
            "Restoring %d directories and %d files to %s (all levels)",
            len(directories),
            len(files),
            target,
        )

        for entry in directories:
            try:
                (target / entry.relative_path).mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise RestoreIOError(f"Cannot create {entry.relative_path}: {e}") from e
            completed += 1
            self._report(completed, total, entry.relative_path)

        for entry in files:
            destination = target / entry.relative_path
            try:
                destination.parent.mkdir(parents=True, exist_ok=True)
                copy_file(staging / entry.relative_path, destination)
            except OSError as e:
                raise RestoreIOError(f"Cannot restore {entry.relative_path}: {e}") from e
            logger.debug("Restored %s", entry.relative_path)
            completed += 1
            self._report(completed, total, entry.relative_path)

        return completed


RESTORERS: dict[SortScope, type[Restorer]] = {
    SortScope.TOP_LEVEL: TopLevelRestorer,
    SortScope.ALL: FullDepthRestorer,
}


def select_restorer(
    scope: SortScope | str,
    progress: ProgressCallback | None = None,
) -> Restorer:
    """Return the restore strategy for a sort scope.

    Args:
        scope: SortScope or its string value ("top-level", "all").
        progress: Optional progress callback for the strategy.

    Returns:
        Restorer instance.

    Raises:
        InvalidScopeError: If scope does not name a strategy.
    """
    try:
        resolved = SortScope(scope)
    except ValueError as e:
        valid = ", ".join(s.value for s in SortScope)
        raise InvalidScopeError(f"Invalid sort scope '{scope}' (expected one of: {valid})") from e
    return RESTORERS[resolved](progress)
