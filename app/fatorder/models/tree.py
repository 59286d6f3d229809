"""Directory tree snapshot models.

A :class:`TreeManifest` is the flat list of every directory and file
below a root, keyed by relative path. The archiver captures one from
the target, the verifier compares it with the staged mirror, and the
restorers read their write order from it.
"""

import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

logger = logging.getLogger(__name__)


class EntryKind(str, Enum):
    """Kind of a tree entry."""

    FILE = "file"
    DIRECTORY = "directory"


@dataclass(frozen=True, slots=True)
class DirectoryEntry:
    """A single file or directory below a tree root.

    Attributes:
        relative_path: Path relative to the root, ``/``-separated.
        kind: File or directory.
        size_bytes: File size in bytes (0 for directories).
    """

    relative_path: str
    kind: EntryKind
    size_bytes: int = 0

    def __post_init__(self) -> None:
        """Validate entry data after initialization."""
        if not self.relative_path:
            msg = "Relative path cannot be empty"
            raise ValueError(msg)
        if self.size_bytes < 0:
            msg = f"Size cannot be negative, got {self.size_bytes}"
            raise ValueError(msg)

    @property
    def is_directory(self) -> bool:
        """Check if this entry is a directory."""
        return self.kind == EntryKind.DIRECTORY

    @property
    def is_root_level(self) -> bool:
        """Check if this entry sits directly under the tree root."""
        return "/" not in self.relative_path

    @property
    def name(self) -> str:
        """Final path component."""
        return self.relative_path.rsplit("/", 1)[-1]


@dataclass(frozen=True, slots=True)
class TreeManifest:
    """Snapshot of every entry below a root directory.

    Attributes:
        root: Absolute path of the scanned root.
        entries: All entries, in no particular order.
    """

    root: str
    entries: tuple[DirectoryEntry, ...]

    def directories(self) -> list[DirectoryEntry]:
        """All directories, sorted by full relative path (codepoint order)."""
        return sorted(
            (e for e in self.entries if e.is_directory),
            key=lambda e: e.relative_path,
        )

    def files(self) -> list[DirectoryEntry]:
        """All files, sorted by full relative path (codepoint order)."""
        return sorted(
            (e for e in self.entries if not e.is_directory),
            key=lambda e: e.relative_path,
        )

    @property
    def total_bytes(self) -> int:
        """Sum of all file sizes."""
        return sum(e.size_bytes for e in self.entries)

    @property
    def file_count(self) -> int:
        return sum(1 for e in self.entries if not e.is_directory)

    @property
    def directory_count(self) -> int:
        return sum(1 for e in self.entries if e.is_directory)

    def signature(self) -> frozenset[tuple[str, EntryKind, int]]:
        """Comparable set of (relative path, kind, size) triples."""
        return frozenset((e.relative_path, e.kind, e.size_bytes) for e in self.entries)


def scan_tree(root: Path) -> TreeManifest:
    """Enumerate every directory and file below ``root``.

    Unlike ``Path.rglob``, unreadable directories are not skipped: a
    listing error propagates, since anything left out of the manifest
    would be deleted without a backup. Symbolic links are recorded as
    files (a FAT volume cannot hold them).

    Args:
        root: Directory to enumerate.

    Returns:
        TreeManifest of all entries below root (root itself excluded).

    Raises:
        OSError: If a directory cannot be listed or a file cannot be stat'ed.
    """
    if not root.is_dir():
        raise NotADirectoryError(f"Not a directory: {root}")

    entries: list[DirectoryEntry] = []

    def _raise(error: OSError) -> None:
        raise error

    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise):
        base = Path(dirpath)
        for name in dirnames:
            child = base / name
            relative = child.relative_to(root).as_posix()
            if child.is_symlink():
                entries.append(
                    DirectoryEntry(
                        relative_path=relative,
                        kind=EntryKind.FILE,
                        size_bytes=child.lstat().st_size,
                    )
                )
            else:
                entries.append(DirectoryEntry(relative_path=relative, kind=EntryKind.DIRECTORY))
        for name in filenames:
            child = base / name
            entries.append(
                DirectoryEntry(
                    relative_path=child.relative_to(root).as_posix(),
                    kind=EntryKind.FILE,
                    size_bytes=child.stat().st_size,
                )
            )

    logger.debug("Scanned %d entries below %s", len(entries), root)
    return TreeManifest(root=str(root), entries=tuple(entries))
