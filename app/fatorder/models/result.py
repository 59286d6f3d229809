"""Per-phase and per-run result records.

Every phase of the pipeline produces a :class:`PhaseResult`; the
orchestrator stops at the first unsuccessful one and folds the list
into a :class:`PipelineResult`.
"""

from dataclasses import dataclass, field
from typing import Any

from fatorder.core.errors import ErrorKind
from fatorder.models.events import Phase, PlanSummary
from fatorder.models.tree import TreeManifest
from fatorder.models.volume import Volume


@dataclass(frozen=True, slots=True)
class PhaseResult:
    """Outcome of a single pipeline phase.

    Attributes:
        phase: The phase that ran.
        success: Whether the phase completed.
        error_kind: Failure classification (None on success).
        message: Error message if the phase failed.
        warning: Non-fatal problem reported by a successful phase.
        value: Whatever the phase produced (volume, plan, manifest...).
    """

    phase: Phase
    success: bool
    error_kind: ErrorKind | None = None
    message: str | None = None
    warning: str | None = None
    value: Any = None

    @property
    def failed(self) -> bool:
        """Check if the phase failed."""
        return not self.success


@dataclass(slots=True)
class PipelineResult:
    """Outcome of a complete pipeline run.

    Attributes:
        success: Whether the target now holds the sorted tree.
        phases: Results of every phase that ran, in order.
        volume: Inspected volume (None if inspection failed).
        plan: Plan summary (None if planning did not complete).
        manifest: Tree captured by the archiver (None if archiving did not complete).
        staging_path: Staging directory used by the run.
        staging_preserved: True when staging was kept as the recovery copy.
        warnings: Non-fatal problems reported along the way.
    """

    success: bool = False
    phases: list[PhaseResult] = field(default_factory=lambda: [])
    volume: Volume | None = None
    plan: PlanSummary | None = None
    manifest: TreeManifest | None = None
    staging_path: str | None = None
    staging_preserved: bool = False
    warnings: list[str] = field(default_factory=lambda: [])

    @property
    def failed_phase(self) -> PhaseResult | None:
        """The phase that stopped the run, if any."""
        for result in self.phases:
            if result.failed:
                return result
        return None

    @property
    def error_kind(self) -> ErrorKind | None:
        failed = self.failed_phase
        return failed.error_kind if failed else None

    @property
    def message(self) -> str | None:
        failed = self.failed_phase
        return failed.message if failed else None

    @property
    def target_modified(self) -> bool:
        """Check if the run failed after the target had been altered."""
        kind = self.error_kind
        return kind is not None and kind.target_modified
