"""Sort pipeline orchestration.

Runs the phases strictly in order:

    inspect -> gate -> plan -> confirm -> archive -> verify -> wipe -> restore -> cleanup

Each phase is executed through :meth:`SortPipeline._run_phase`, which
turns the phase's domain error into a :class:`PhaseResult`. The
orchestrator stops at the first unsuccessful result. Everything up to
and including verify leaves the target untouched; after a wipe or
restore failure the staging directory is kept as the recovery copy.
"""

import dataclasses
import logging
from collections.abc import Callable
from typing import Any, Protocol

from fatorder.core.errors import ArchiverIOError, CleanupWarning, FatorderError
from fatorder.core.paths import staging_dir_for
from fatorder.core.settings import RunConfig
from fatorder.models.events import (
    ConfirmCallback,
    Phase,
    PipelineObserver,
    PlanSummary,
)
from fatorder.models.result import PhaseResult, PipelineResult
from fatorder.models.tree import TreeManifest
from fatorder.models.volume import RiskTier, Volume
from fatorder.pipeline.archiver import Archiver
from fatorder.pipeline.cleanup import Cleanup
from fatorder.pipeline.planner import CapacityPlanner
from fatorder.pipeline.restorer import Restorer, select_restorer
from fatorder.pipeline.staging import StagingArea
from fatorder.pipeline.verifier import ManifestVerifier
from fatorder.pipeline.wiper import Wiper
from fatorder.safety.gate import SafetyGate
from fatorder.volume.inspector import VolumeInspector

logger = logging.getLogger(__name__)


class Inspector(Protocol):
    """Anything that can classify the volume holding a path."""

    def inspect(self, path: Any) -> Volume: ...


class SortPipeline:
    """Backup, wipe and sorted restore of one target.

    Args:
        config: Configuration of this run.
        confirm: Callable asked for confirmation tokens.
        observer: Receives plan and progress notifications.
        inspector: Volume inspector (defaults to the findmnt/lsblk inspector).
        planner: Capacity planner (defaults to shutil.disk_usage based).
    """

    def __init__(
        self,
        config: RunConfig,
        confirm: ConfirmCallback,
        observer: PipelineObserver | None = None,
        *,
        inspector: Inspector | None = None,
        planner: CapacityPlanner | None = None,
    ) -> None:
        self._config = config
        self._observer = observer or PipelineObserver()
        self._gate = SafetyGate(confirm, require_final=config.require_confirmation)
        self._inspector: Inspector = inspector or VolumeInspector()
        self._planner = planner or CapacityPlanner()
        self._staging = StagingArea(staging_dir_for(config.staging_root))

        progress = self._observer.progress
        self._archiver = Archiver(progress)
        self._verifier = ManifestVerifier()
        self._wiper = Wiper(progress)
        self._cleanup = Cleanup()

    @property
    def staging(self) -> StagingArea:
        return self._staging

    def plan(self) -> PipelineResult:
        """Inspect, classify and size the run without prompting or writing.

        Returns:
            PipelineResult covering the inspect, gate and plan phases.
        """
        result = PipelineResult(staging_path=str(self._staging.path))
        self._prepare(result, interactive=False)
        if result.failed_phase is None:
            result.success = True
        return result

    def run(self) -> PipelineResult:
        """Execute the full pipeline.

        Returns:
            PipelineResult; ``success`` is True when the target holds the
            sorted tree (cleanup warnings do not change that).
        """
        result = PipelineResult(staging_path=str(self._staging.path))
        restorer = self._prepare(result, interactive=True)
        if restorer is None:
            return result

        confirmed = self._run_phase(result, Phase.CONFIRM, self._gate.confirm_plan)
        if confirmed.failed:
            return result

        archived = self._run_phase(result, Phase.ARCHIVE, self._archive)
        if archived.failed:
            self._staging.discard()
            return result
        manifest: TreeManifest = archived.value
        result.manifest = manifest

        if self._config.verify_before_wipe:
            verified = self._run_phase(
                result,
                Phase.VERIFY,
                lambda: self._verifier.verify(manifest, self._staging.path),
            )
            if verified.failed:
                self._staging.discard()
                return result

        wiped = self._run_phase(result, Phase.WIPE, lambda: self._wiper.wipe(self._config.target))
        if wiped.failed:
            self._preserve_staging(result)
            return result

        restored = self._run_phase(
            result,
            Phase.RESTORE,
            lambda: restorer.restore(self._staging.path, self._config.target),
        )
        if restored.failed:
            self._preserve_staging(result)
            return result

        cleaned = self._run_phase(
            result, Phase.CLEANUP, lambda: self._cleanup.run(self._staging.path)
        )
        if cleaned.warning:
            result.warnings.append(cleaned.warning)
            self._observer.warning(cleaned.warning)

        result.success = True
        logger.info("Sorted %s (%s)", self._config.target, self._config.scope.value)
        return result

    def _prepare(self, result: PipelineResult, *, interactive: bool) -> Restorer | None:
        """Run the inspect, gate and plan phases.

        Returns:
            The selected restore strategy, or None if a phase failed.
        """
        inspected = self._run_phase(
            result, Phase.INSPECT, lambda: self._inspector.inspect(self._config.target)
        )
        if inspected.failed:
            return None
        volume: Volume = inspected.value
        result.volume = volume

        gated = self._run_phase(
            result, Phase.GATE, lambda: self._assess(volume, interactive=interactive)
        )
        if gated.failed:
            return None
        tier: RiskTier = gated.value

        planned = self._run_phase(result, Phase.PLAN, lambda: self._plan(volume, tier))
        if planned.failed:
            return None
        summary, restorer = planned.value
        result.plan = summary
        return restorer

    def _assess(self, volume: Volume, *, interactive: bool) -> RiskTier:
        tier = self._gate.assess(volume)
        if interactive:
            self._gate.confirm_tier(tier)
        return tier

    def _plan(self, volume: Volume, tier: RiskTier) -> tuple[PlanSummary, Restorer]:
        restorer = select_restorer(self._config.scope, self._observer.progress)
        capacity = self._planner.plan(self._config.target, self._staging.path)
        summary = PlanSummary(
            drive=volume.path,
            filesystem=volume.filesystem_type,
            drive_class=volume.drive_class,
            risk_tier=tier,
            staging_path=capacity.staging_path,
            estimated_bytes=capacity.required_bytes,
            available_bytes=capacity.available_bytes,
            sort_scope=restorer.scope,
        )
        self._observer.plan(summary)
        return summary, restorer

    def _archive(self) -> TreeManifest:
        try:
            self._staging.prepare()
        except OSError as e:
            raise ArchiverIOError(f"Cannot prepare staging {self._staging.path}: {e}") from e
        return self._archiver.mirror(self._config.target, self._staging.path)

    def _preserve_staging(self, result: PipelineResult) -> None:
        """Keep staging after the target was modified and say so in the result."""
        failed = result.phases[-1]
        note = (
            f"The target may be incomplete. The staging copy at {self._staging.path} "
            "is the only recovery path; do not delete it."
        )
        result.phases[-1] = dataclasses.replace(failed, message=f"{failed.message}. {note}")
        result.staging_preserved = True
        self._staging.mark_for_recovery(failed.message or "unknown error")
        logger.error("%s failed after the target was modified: %s", failed.phase.value, note)

    def _run_phase(
        self,
        result: PipelineResult,
        phase: Phase,
        action: Callable[[], Any],
    ) -> PhaseResult:
        """Run one phase and append its result.

        Domain errors become a failed PhaseResult; a CleanupWarning becomes a
        successful result carrying a warning. Any other exception propagates.
        """
        self._observer.phase_started(phase)
        logger.debug("Phase %s started", phase.value)
        try:
            value = action()
        except CleanupWarning as e:
            phase_result = PhaseResult(phase=phase, success=True, warning=str(e))
        except FatorderError as e:
            logger.info("Phase %s failed: %s", phase.value, e)
            phase_result = PhaseResult(
                phase=phase,
                success=False,
                error_kind=e.kind,
                message=str(e),
            )
        else:
            phase_result = PhaseResult(phase=phase, success=True, value=value)
        result.phases.append(phase_result)
        return phase_result
