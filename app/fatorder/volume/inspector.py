"""Target volume inspection.

Resolves the mount holding a target path and classifies it by drive
class and filesystem type using ``findmnt`` and ``lsblk``. Inspection
has no side effects.
"""

import logging
import subprocess
from pathlib import Path
from typing import Any

from fatorder.core.errors import PathNotFoundError
from fatorder.models.volume import DriveClass, Volume
from fatorder.utils.shell import CommandResult, command_exists, run_command
from fatorder.volume.system import is_system_like

logger = logging.getLogger(__name__)

FINDMNT = "findmnt"
LSBLK = "lsblk"

NETWORK_FSTYPES: frozenset[str] = frozenset(
    {"nfs", "nfs4", "cifs", "smb3", "smbfs", "sshfs", "fuse.sshfs", "9p"}
)
RAM_FSTYPES: frozenset[str] = frozenset({"tmpfs", "ramfs"})
OPTICAL_FSTYPES: frozenset[str] = frozenset({"iso9660", "udf"})

_FAT_FSTYPES: frozenset[str] = frozenset({"vfat", "fat", "msdos"})
_FAT_VERSIONS: frozenset[str] = frozenset({"FAT12", "FAT16", "FAT32"})

_UNKNOWN_FILESYSTEM = "UNKNOWN"


def normalize_filesystem(fstype: str | None, fsver: str | None = None) -> str:
    """Map a Linux filesystem type to the name used by the safety gate.

    Args:
        fstype: Filesystem type as reported by lsblk/findmnt (e.g. "vfat").
        fsver: Filesystem version as reported by lsblk (e.g. "FAT32").

    Returns:
        "FAT12"/"FAT16"/"FAT32" for FAT, "exFAT" for exFAT, otherwise the
        upper-cased type ("UNKNOWN" when empty).
    """
    fs = (fstype or "").strip().lower()
    if fs in _FAT_FSTYPES:
        version = (fsver or "").strip().upper()
        if version in _FAT_VERSIONS:
            return version
        return "FAT32"
    if fs == "exfat":
        return "exFAT"
    if not fs:
        return _UNKNOWN_FILESYSTEM
    return fs.upper()


def _flag(value: object) -> bool:
    """Interpret an lsblk boolean column (bool in new releases, "0"/"1" in old)."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true")
    return False


class VolumeInspector:
    """Classifies the volume that holds a target path.

    Args:
        system_mount_point: Mount point of the running system's root
            filesystem, used by the system-volume heuristic.
    """

    def __init__(self, *, system_mount_point: str = "/") -> None:
        self._system_mount_point = system_mount_point

    def is_available(self) -> bool:
        """Check if findmnt and lsblk are installed."""
        return command_exists(FINDMNT) and command_exists(LSBLK)

    def inspect(self, path: Path) -> Volume:
        """Inspect the volume holding ``path``.

        Args:
            path: Target path (normally a mount point).

        Returns:
            Volume describing filesystem type and drive class.

        Raises:
            PathNotFoundError: If path does not exist or is not a directory.
        """
        if not path.is_dir():
            raise PathNotFoundError(f"Target does not exist or is not a directory: {path}")

        target = str(path)
        mount = self._find_mount(path)
        if mount is None:
            return Volume(
                path=target,
                filesystem_type=_UNKNOWN_FILESYSTEM,
                drive_class=DriveClass.UNKNOWN,
            )
        if not mount:
            return Volume(
                path=target,
                filesystem_type=_UNKNOWN_FILESYSTEM,
                drive_class=DriveClass.NO_ROOT_DIR,
            )

        source: str | None = mount.get("source")
        mount_point: str | None = mount.get("target")
        mount_fstype = str(mount.get("fstype") or "").lower()

        block = self._query_block_device(source) if source and source.startswith("/dev/") else None
        if block is not None and block.get("fstype"):
            filesystem = normalize_filesystem(block.get("fstype"), block.get("fsver"))
        else:
            filesystem = normalize_filesystem(mount_fstype)

        drive_class = self._classify(mount_fstype, source, block)

        system_like = False
        if drive_class == DriveClass.FIXED:
            system_like = is_system_like(
                path,
                mount_point=mount_point,
                device=source,
                system_mount_point=self._system_mount_point,
                system_device=self._system_device(),
            )

        volume = Volume(
            path=target,
            filesystem_type=filesystem,
            drive_class=drive_class,
            mount_point=mount_point,
            device=source,
            is_system_like=system_like,
        )
        logger.info(
            "Inspected %s: %s on %s (%s, system-like=%s)",
            target,
            filesystem,
            source,
            drive_class.value,
            system_like,
        )
        return volume

    def _run(self, args: list[str]) -> CommandResult | None:
        """Run a query tool, returning None when it cannot be run at all."""
        try:
            return run_command(args)
        except (OSError, subprocess.TimeoutExpired) as exc:
            logger.warning("Cannot run %s: %s", args[0], exc)
            return None

    def _find_mount(self, path: Path) -> dict[str, Any] | None:
        """Find the mount holding ``path``.

        Returns:
            The findmnt filesystem record, an empty dict when no mount holds
            the path, or None when findmnt itself could not be run.
        """
        result = self._run([FINDMNT, "-J", "-T", str(path), "-o", "SOURCE,TARGET,FSTYPE"])
        if result is None:
            return None
        if not result.success:
            logger.debug("findmnt found no mount for %s: %s", path, result.stderr.strip())
            return {}

        try:
            filesystems = result.json().get("filesystems") or []
        except ValueError as exc:
            logger.warning("Unparseable findmnt output for %s: %s", path, exc)
            return None
        return dict(filesystems[0]) if filesystems else {}

    def _query_block_device(self, device: str) -> dict[str, Any] | None:
        """Query lsblk for a single block device.

        Returns:
            The lsblk record for the device, or None if unavailable.
        """
        result = self._run([LSBLK, "-J", "-o", "NAME,TYPE,RM,HOTPLUG,FSTYPE,FSVER", device])
        if result is None:
            return None
        if not result.success:
            logger.warning("lsblk failed for %s: %s", device, result.stderr.strip())
            return None

        try:
            devices = result.json().get("blockdevices") or []
        except ValueError as exc:
            logger.warning("Unparseable lsblk output for %s: %s", device, exc)
            return None
        return dict(devices[0]) if devices else None

    def _system_device(self) -> str | None:
        """Source device of the running system's root filesystem."""
        result = self._run([FINDMNT, "-n", "-o", "SOURCE", self._system_mount_point])
        if result is None or not result.success:
            return None
        return result.stdout.strip() or None

    @staticmethod
    def _classify(
        mount_fstype: str,
        source: str | None,
        block: dict[str, Any] | None,
    ) -> DriveClass:
        """Derive the drive class from mount and block-device data.

        Args:
            mount_fstype: Filesystem type reported by findmnt (lower case).
            source: Mount source.
            block: lsblk record for the source, if it is a block device.

        Returns:
            DriveClass classification.
        """
        if mount_fstype in NETWORK_FSTYPES:
            return DriveClass.NETWORK
        if mount_fstype in RAM_FSTYPES:
            return DriveClass.RAM
        if mount_fstype in OPTICAL_FSTYPES:
            return DriveClass.CDROM
        if block is None:
            return DriveClass.UNKNOWN
        if block.get("type") == "rom":
            return DriveClass.CDROM
        if _flag(block.get("rm")) or _flag(block.get("hotplug")):
            return DriveClass.REMOVABLE
        return DriveClass.FIXED
