"""Run history model.

This module defines the record written to the history file after
every ``fatorder sort`` run, successful or not.
"""

import json
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from fatorder.core.errors import ErrorKind
from fatorder.models.result import PipelineResult
from fatorder.models.volume import SortScope


@dataclass(frozen=True, slots=True)
class RunRecord:
    """Record of a single pipeline run.

    Attributes:
        id: Unique identifier (12-character hex string from UUID).
        timestamp: When the run finished (ISO 8601 format with timezone).
        target: Target path of the run.
        scope: Sort scope the run used.
        success: Whether the run completed.
        error_kind: Failure classification (None on success).
        message: Failure message (None on success).
        files: Number of files captured from the target.
        directories: Number of directories captured from the target.
        total_bytes: Bytes captured from the target.
        staging_path: Staging directory of the run.
        staging_preserved: True when staging was kept as the recovery copy.
    """

    id: str
    timestamp: str
    target: str
    scope: SortScope
    success: bool
    error_kind: ErrorKind | None = None
    message: str | None = None
    files: int = 0
    directories: int = 0
    total_bytes: int = 0
    staging_path: str | None = None
    staging_preserved: bool = False

    def __post_init__(self) -> None:
        """Validate record data after initialization."""
        if not self.id:
            msg = "Run record ID cannot be empty"
            raise ValueError(msg)
        if not self.timestamp:
            msg = "Timestamp cannot be empty"
            raise ValueError(msg)
        if not self.target:
            msg = "Target cannot be empty"
            raise ValueError(msg)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON storage.

        Returns:
            Dictionary representation of the run record.
        """
        result: dict[str, Any] = {
            "id": self.id,
            "timestamp": self.timestamp,
            "target": self.target,
            "scope": self.scope.value,
            "success": self.success,
            "files": self.files,
            "directories": self.directories,
            "total_bytes": self.total_bytes,
            "staging_preserved": self.staging_preserved,
        }
        if self.error_kind is not None:
            result["error_kind"] = self.error_kind.value
        if self.message is not None:
            result["message"] = self.message
        if self.staging_path is not None:
            result["staging_path"] = self.staging_path
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RunRecord":
        """Deserialize from dictionary.

        Args:
            data: Dictionary containing record data.

        Returns:
            RunRecord instance.

        Raises:
            KeyError: If required fields are missing.
            ValueError: If scope or error_kind is invalid.
        """
        error_kind = data.get("error_kind")
        return cls(
            id=data["id"],
            timestamp=data["timestamp"],
            target=data["target"],
            scope=SortScope(data["scope"]),
            success=data["success"],
            error_kind=ErrorKind(error_kind) if error_kind else None,
            message=data.get("message"),
            files=data.get("files", 0),
            directories=data.get("directories", 0),
            total_bytes=data.get("total_bytes", 0),
            staging_path=data.get("staging_path"),
            staging_preserved=data.get("staging_preserved", False),
        )

    def to_json_line(self) -> str:
        """Serialize to JSON line for JSONL storage.

        Returns:
            Single JSON line (no trailing newline).
        """
        return json.dumps(self.to_dict(), separators=(",", ":"))

    @classmethod
    def from_json_line(cls, line: str) -> "RunRecord":
        """Deserialize from JSON line.

        Raises:
            json.JSONDecodeError: If line is not valid JSON.
            KeyError: If required fields are missing.
            ValueError: If data is invalid.
        """
        return cls.from_dict(json.loads(line.strip()))


def create_run_record(target: str, scope: SortScope, result: PipelineResult) -> RunRecord:
    """Build a RunRecord from a finished pipeline run.

    Automatically generates a unique ID and current timestamp.

    Args:
        target: Target path of the run.
        scope: Sort scope the run used.
        result: The pipeline's result.

    Returns:
        New RunRecord describing the run.
    """
    manifest = result.manifest
    return RunRecord(
        id=uuid.uuid4().hex[:12],
        timestamp=datetime.now(UTC).isoformat(),
        target=target,
        scope=scope,
        success=result.success,
        error_kind=result.error_kind,
        message=result.message,
        files=manifest.file_count if manifest else 0,
        directories=manifest.directory_count if manifest else 0,
        total_bytes=manifest.total_bytes if manifest else 0,
        staging_path=result.staging_path,
        staging_preserved=result.staging_preserved,
    )
