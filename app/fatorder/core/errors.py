"""Error taxonomy for the sort pipeline.

Every error raised by a pipeline phase derives from :class:`FatorderError`
and carries an :class:`ErrorKind`. Kinds are split into those raised
before anything on the target volume has been touched and those raised
after the wipe has started.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Machine-readable classification of a pipeline failure."""

    PATH_NOT_FOUND = "path_not_found"
    UNSUPPORTED_DRIVE_TYPE = "unsupported_drive_type"
    CONFIRMATION_ABORTED = "confirmation_aborted"
    INSUFFICIENT_SPACE = "insufficient_space"
    INVALID_SCOPE = "invalid_scope"
    STAGING_LOCATION = "staging_location"
    RECOVERY_PENDING = "recovery_pending"
    ARCHIVE_IO = "archive_io"
    MANIFEST_MISMATCH = "manifest_mismatch"
    WIPE_IO = "wipe_io"
    RESTORE_IO = "restore_io"
    CLEANUP_WARNING = "cleanup_warning"

    @property
    def target_modified(self) -> bool:
        """Whether the target volume may have been altered when this kind occurs."""
        return self in (ErrorKind.WIPE_IO, ErrorKind.RESTORE_IO)


class FatorderError(Exception):
    """Base exception for all pipeline errors."""

    kind: ErrorKind


class PathNotFoundError(FatorderError):
    """Raised when the target path does not resolve to an existing volume."""

    kind = ErrorKind.PATH_NOT_FOUND


class UnsupportedDriveTypeError(FatorderError):
    """Raised when the target sits on a drive class that is never sorted."""

    kind = ErrorKind.UNSUPPORTED_DRIVE_TYPE


class ConfirmationAbortedError(FatorderError):
    """Raised when a confirmation prompt receives anything but its token."""

    kind = ErrorKind.CONFIRMATION_ABORTED


class InsufficientSpaceError(FatorderError):
    """Raised when the staging volume cannot hold a full mirror of the target."""

    kind = ErrorKind.INSUFFICIENT_SPACE

    def __init__(self, required_bytes: int, available_bytes: int) -> None:
        self.required_bytes = required_bytes
        self.available_bytes = available_bytes
        super().__init__(
            f"Staging needs {required_bytes} bytes but only {available_bytes} are free"
        )


class InvalidScopeError(FatorderError):
    """Raised when a sort scope does not name a known restore strategy."""

    kind = ErrorKind.INVALID_SCOPE


class StagingLocationError(FatorderError):
    """Raised when the staging directory overlaps the target."""

    kind = ErrorKind.STAGING_LOCATION


class RecoveryPendingError(FatorderError):
    """Raised when the staging directory still holds a recovery copy."""

    kind = ErrorKind.RECOVERY_PENDING


class ArchiverIOError(FatorderError):
    """Raised when the target cannot be mirrored into staging."""

    kind = ErrorKind.ARCHIVE_IO


class ManifestMismatchError(ArchiverIOError):
    """Raised when the staged mirror differs from the source manifest."""

    kind = ErrorKind.MANIFEST_MISMATCH


class WipeIOError(FatorderError):
    """Raised when deleting the target's entries fails part way."""

    kind = ErrorKind.WIPE_IO


class RestoreIOError(FatorderError):
    """Raised when replaying the staged tree onto the target fails."""

    kind = ErrorKind.RESTORE_IO


class CleanupWarning(FatorderError):
    """Raised when the staging directory cannot be removed.

    The pipeline treats this as non-fatal.
    """

    kind = ErrorKind.CLEANUP_WARNING
