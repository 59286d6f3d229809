"""Safety gate for destructive runs.

The gate maps a volume to a risk tier, asks for the tier's
confirmation token, and later asks for the final go-ahead once the
plan is known. Tokens are compared verbatim and case-sensitively; any
other answer, including an empty one, aborts the run. There are no
retries.
"""

import logging
from enum import Enum

from fatorder.core.errors import ConfirmationAbortedError, UnsupportedDriveTypeError
from fatorder.models.events import ConfirmCallback, PromptKind
from fatorder.models.volume import (
    DISALLOWED_DRIVE_CLASSES,
    SORTABLE_FILESYSTEMS,
    DriveClass,
    RiskTier,
    Volume,
)

logger = logging.getLogger(__name__)


class GateDecision(str, Enum):
    """Outcome of comparing a response with a required token."""

    PROCEED = "proceed"
    ABORT = "abort"


# Confirmation required per risk tier (None = no tier-specific prompt)
TIER_PROMPTS: dict[RiskTier, PromptKind | None] = {
    RiskTier.SAFE_REMOVABLE: None,
    RiskTier.UNEXPECTED_FILESYSTEM: PromptKind.UNEXPECTED_FILESYSTEM,
    RiskTier.FIXED_NON_SYSTEM: PromptKind.ERASE_FIXED,
    RiskTier.SYSTEM_LIKE: PromptKind.ERASE_SYSTEM,
    RiskTier.DISALLOWED: None,
}


def classify_risk(drive_class: DriveClass, filesystem_type: str, is_system_like: bool) -> RiskTier:
    """Compute the risk tier of a volume.

    Args:
        drive_class: Drive class of the volume.
        filesystem_type: Normalised filesystem type.
        is_system_like: Result of the system-volume heuristic.

    Returns:
        RiskTier for the volume.
    """
    if drive_class in DISALLOWED_DRIVE_CLASSES:
        return RiskTier.DISALLOWED
    if drive_class == DriveClass.FIXED:
        return RiskTier.SYSTEM_LIKE if is_system_like else RiskTier.FIXED_NON_SYSTEM
    if filesystem_type not in SORTABLE_FILESYSTEMS:
        return RiskTier.UNEXPECTED_FILESYSTEM
    return RiskTier.SAFE_REMOVABLE


def decide(prompt: PromptKind, response: str | None) -> GateDecision:
    """Compare a response with the token a prompt requires.

    Args:
        prompt: The prompt that was shown.
        response: What the user entered.

    Returns:
        PROCEED only on an exact match, ABORT otherwise.
    """
    if response is not None and response == prompt.token:
        return GateDecision.PROCEED
    return GateDecision.ABORT


class SafetyGate:
    """Interactive confirmation state machine.

    Args:
        confirm: Callable asked for a token for a given prompt kind.
        require_final: If False, the final "Y" confirmation is skipped.
            Risk-tier confirmations are always requested.
    """

    def __init__(self, confirm: ConfirmCallback, *, require_final: bool = True) -> None:
        self._confirm = confirm
        self._require_final = require_final

    def assess(self, volume: Volume) -> RiskTier:
        """Classify a volume, refusing disallowed drive classes.

        Args:
            volume: Inspected target volume.

        Returns:
            RiskTier of the volume.

        Raises:
            UnsupportedDriveTypeError: If the drive class is disallowed.
        """
        tier = classify_risk(volume.drive_class, volume.filesystem_type, volume.is_system_like)
        logger.info("Volume %s classified as %s", volume.path, tier.value)
        if tier == RiskTier.DISALLOWED:
            raise UnsupportedDriveTypeError(
                f"Refusing to sort {volume.path}: drive class '{volume.drive_class.value}' "
                "is not supported"
            )
        return tier

    def confirm_tier(self, tier: RiskTier) -> None:
        """Ask for the tier-specific token, if the tier needs one.

        Raises:
            ConfirmationAbortedError: If the response does not match.
        """
        prompt = TIER_PROMPTS[tier]
        if prompt is not None:
            self._ask(prompt)

    def confirm_plan(self) -> None:
        """Ask for the final go-ahead, unless disabled.

        Raises:
            ConfirmationAbortedError: If the response does not match.
        """
        if self._require_final:
            self._ask(PromptKind.FINAL)

    def _ask(self, prompt: PromptKind) -> None:
        response = self._confirm(prompt)
        if decide(prompt, response) != GateDecision.PROCEED:
            logger.info("Confirmation %s aborted", prompt.value)
            raise ConfirmationAbortedError(
                f"Aborted: expected '{prompt.token}' to confirm ({prompt.value})"
            )
        logger.debug("Confirmation %s accepted", prompt.value)
