"""Data models for fatorder.

This module exports the core data structures used throughout the application.
"""

from fatorder.models.events import (
    PROMPT_TOKENS,
    ConfirmCallback,
    Phase,
    PipelineObserver,
    PlanSummary,
    ProgressCallback,
    ProgressEvent,
    PromptKind,
)
from fatorder.models.history import RunRecord, create_run_record
from fatorder.models.result import PhaseResult, PipelineResult
from fatorder.models.tree import DirectoryEntry, EntryKind, TreeManifest, scan_tree
from fatorder.models.volume import (
    DISALLOWED_DRIVE_CLASSES,
    SORTABLE_FILESYSTEMS,
    DriveClass,
    RiskTier,
    SortScope,
    Volume,
)

__all__ = [
    "DISALLOWED_DRIVE_CLASSES",
    "PROMPT_TOKENS",
    "SORTABLE_FILESYSTEMS",
    "ConfirmCallback",
    "DirectoryEntry",
    "DriveClass",
    "EntryKind",
    "Phase",
    "PhaseResult",
    "PipelineObserver",
    "PipelineResult",
    "PlanSummary",
    "ProgressCallback",
    "ProgressEvent",
    "PromptKind",
    "RiskTier",
    "RunRecord",
    "SortScope",
    "TreeManifest",
    "Volume",
    "create_run_record",
    "scan_tree",
]
