"""Heuristic detection of operating-system volumes.

A volume "looks like" an OS volume when it is the volume holding the
running system's root filesystem, or when its root contains one of a
handful of canonical OS directories. This is a conservative heuristic:
it flags a data drive that happens to carry a ``bin`` folder, and it
misses an OS installed under an unusual layout. Treat the result as a
reason to demand a stronger confirmation, never as proof.
"""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

# Directory names that mark the root of an installed operating system.
CANONICAL_SYSTEM_DIRS: tuple[str, ...] = (
    # Windows
    "Windows",
    "Program Files",
    # macOS
    "System",
    "Library",
    # Linux / Unix
    "etc",
    "usr",
    "bin",
    "boot",
)


def has_system_directory(root: Path) -> bool:
    """Check whether ``root`` contains a canonical OS directory.

    Args:
        root: Directory to check (the target path).

    Returns:
        True if any name from CANONICAL_SYSTEM_DIRS is a directory under root.
    """
    for name in CANONICAL_SYSTEM_DIRS:
        try:
            if (root / name).is_dir():
                logger.debug("Found system directory %s under %s", name, root)
                return True
        except OSError:
            continue
    return False


def is_system_like(
    root: Path,
    *,
    mount_point: str | None,
    device: str | None,
    system_mount_point: str | None = "/",
    system_device: str | None = None,
) -> bool:
    """Decide whether a volume looks like an operating-system volume.

    Args:
        root: Target path.
        mount_point: Mount point of the volume holding root.
        device: Source device of that mount.
        system_mount_point: Mount point of the running system's root filesystem.
        system_device: Source device of the running system's root filesystem.

    Returns:
        True if the volume is the system volume or carries OS directories.
    """
    if mount_point is not None and mount_point == system_mount_point:
        return True
    if device is not None and system_device is not None and device == system_device:
        return True
    return has_system_directory(root)
