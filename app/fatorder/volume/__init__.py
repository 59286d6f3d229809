"""Volume inspection: drive class, filesystem type and system-volume heuristic."""

from fatorder.volume.inspector import VolumeInspector, normalize_filesystem
from fatorder.volume.system import CANONICAL_SYSTEM_DIRS, has_system_directory, is_system_like

__all__ = [
    "CANONICAL_SYSTEM_DIRS",
    "VolumeInspector",
    "has_system_directory",
    "is_system_like",
    "normalize_filesystem",
]
