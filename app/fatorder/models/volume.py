"""Volume domain models.

This module defines the data structures describing the target volume
and the classifications derived from it: drive class, risk tier and
the sort scope that selects a restore strategy.
"""

from dataclasses import dataclass
from enum import Enum

# Filesystems whose directory order is the reason this tool exists
SORTABLE_FILESYSTEMS: frozenset[str] = frozenset({"FAT32", "exFAT"})


class DriveClass(str, Enum):
    """OS-level category of a storage volume.

    Attributes:
        REMOVABLE: Removable or hot-pluggable media (USB sticks, SD cards).
        FIXED: Internal, non-removable storage.
        CDROM: Optical media.
        NETWORK: Remote filesystem mounted over the network.
        RAM: Memory-backed filesystem (tmpfs, ramfs).
        UNKNOWN: The device could not be classified.
        NO_ROOT_DIR: No mounted volume holds the path.
    """

    REMOVABLE = "removable"
    FIXED = "fixed"
    CDROM = "cdrom"
    NETWORK = "network"
    RAM = "ram"
    UNKNOWN = "unknown"
    NO_ROOT_DIR = "no_root_dir"


# Drive classes that are refused outright
DISALLOWED_DRIVE_CLASSES: frozenset[DriveClass] = frozenset(
    {
        DriveClass.CDROM,
        DriveClass.NETWORK,
        DriveClass.UNKNOWN,
        DriveClass.RAM,
        DriveClass.NO_ROOT_DIR,
    }
)


class RiskTier(str, Enum):
    """How dangerous a destructive rewrite of a volume is.

    Attributes:
        SAFE_REMOVABLE: Removable media with a FAT32/exFAT filesystem.
        UNEXPECTED_FILESYSTEM: Removable media with any other filesystem.
        FIXED_NON_SYSTEM: Fixed drive that does not look like an OS volume.
        SYSTEM_LIKE: Fixed drive that looks like an OS volume.
        DISALLOWED: Drive class that is never rewritten.
    """

    SAFE_REMOVABLE = "safe_removable"
    UNEXPECTED_FILESYSTEM = "unexpected_filesystem"
    FIXED_NON_SYSTEM = "fixed_non_system"
    SYSTEM_LIKE = "system_like"
    DISALLOWED = "disallowed"


class SortScope(str, Enum):
    """Depth at which alphabetical write order is enforced.

    Attributes:
        TOP_LEVEL: Only the volume root is written in sorted order.
        ALL: Every directory level is written in sorted order.
    """

    TOP_LEVEL = "top-level"
    ALL = "all"


@dataclass(frozen=True, slots=True)
class Volume:
    """The target volume as seen at the start of a run.

    Attributes:
        path: Target path the run operates on.
        filesystem_type: Normalised filesystem name (e.g. "FAT32", "exFAT").
        drive_class: OS-level drive category.
        mount_point: Mount point holding the path (None if not mounted).
        device: Source device of the mount (None if unknown).
        is_system_like: Heuristic flag, True when the volume looks like an OS volume.
    """

    path: str
    filesystem_type: str
    drive_class: DriveClass
    mount_point: str | None = None
    device: str | None = None
    is_system_like: bool = False

    def __post_init__(self) -> None:
        """Validate volume data after initialization."""
        if not self.path:
            msg = "Volume path cannot be empty"
            raise ValueError(msg)

    @property
    def is_sortable_filesystem(self) -> bool:
        """Check if the filesystem is one the tool is designed for."""
        return self.filesystem_type in SORTABLE_FILESYSTEMS
