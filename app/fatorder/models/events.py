"""Observable pipeline events and injectable callbacks.

The pipeline has no console dependency. It reports what it plans to
do and how far each phase has progressed through an observer, and it
asks for confirmation tokens through a plain callable.
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from fatorder.models.volume import DriveClass, RiskTier, SortScope


class Phase(str, Enum):
    """Pipeline phases, in execution order."""

    INSPECT = "inspect"
    GATE = "gate"
    PLAN = "plan"
    CONFIRM = "confirm"
    ARCHIVE = "archive"
    VERIFY = "verify"
    WIPE = "wipe"
    RESTORE = "restore"
    CLEANUP = "cleanup"


class PromptKind(str, Enum):
    """Kinds of confirmation the pipeline can request.

    Attributes:
        ERASE_SYSTEM: Fixed drive that looks like an OS volume.
        ERASE_FIXED: Fixed drive that does not look like an OS volume.
        UNEXPECTED_FILESYSTEM: Removable drive without FAT32/exFAT.
        FINAL: Go-ahead after the plan has been shown.
    """

    ERASE_SYSTEM = "erase_system"
    ERASE_FIXED = "erase_fixed"
    UNEXPECTED_FILESYSTEM = "unexpected_filesystem"
    FINAL = "final"

    @property
    def token(self) -> str:
        """The exact, case-sensitive token that confirms this prompt."""
        return PROMPT_TOKENS[self]


PROMPT_TOKENS: dict[PromptKind, str] = {
    PromptKind.ERASE_SYSTEM: "ERASESYS",
    PromptKind.ERASE_FIXED: "ERASE",
    PromptKind.UNEXPECTED_FILESYSTEM: "YES",
    PromptKind.FINAL: "Y",
}


@dataclass(frozen=True, slots=True)
class ProgressEvent:
    """One progress tick of a phase.

    Attributes:
        phase: Phase reporting progress.
        completed: Number of items finished so far.
        total: Total number of items in the phase.
        current_item: Relative path (or name) of the item just finished.
    """

    phase: Phase
    completed: int
    total: int
    current_item: str


@dataclass(frozen=True, slots=True)
class PlanSummary:
    """What a run is about to do, shown before the final confirmation.

    Attributes:
        drive: Target path.
        filesystem: Filesystem type of the target.
        drive_class: Drive class of the target.
        risk_tier: Risk tier assigned by the safety gate.
        staging_path: Directory the mirror is written to.
        estimated_bytes: Bytes that will be copied to staging.
        available_bytes: Free bytes on the staging volume.
        sort_scope: Restore strategy selector.
    """

    drive: str
    filesystem: str
    drive_class: DriveClass
    risk_tier: RiskTier
    staging_path: str
    estimated_bytes: int
    available_bytes: int
    sort_scope: SortScope


ProgressCallback = Callable[[ProgressEvent], None]
ConfirmCallback = Callable[[PromptKind], str]


class PipelineObserver:
    """Receives plan and progress notifications from a pipeline run.

    The base class ignores everything; subclasses override what they
    want to display or record.
    """

    def plan(self, summary: PlanSummary) -> None:
        """Called once the plan is known, before the final confirmation."""

    def phase_started(self, phase: Phase) -> None:
        """Called when a phase begins."""

    def progress(self, event: ProgressEvent) -> None:
        """Called after each item of a phase completes."""

    def warning(self, message: str) -> None:
        """Called for non-fatal problems."""
