"""Risk classification and confirmation gating."""

from fatorder.safety.gate import (
    TIER_PROMPTS,
    GateDecision,
    SafetyGate,
    classify_risk,
    decide,
)

__all__ = ["TIER_PROMPTS", "GateDecision", "SafetyGate", "classify_risk", "decide"]
