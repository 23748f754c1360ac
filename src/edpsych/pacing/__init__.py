"""
Pacing Module

Progress-adaptive learning pace plans.
"""

from .planner import (
    PacingContext,
    PacingPlanner,
    adaptation_type,
    pace_band,
    resolve_baseline,
    rule_based_plan,
    validate_ai_plan,
)

__all__ = [
    "PacingContext",
    "PacingPlanner",
    "adaptation_type",
    "pace_band",
    "resolve_baseline",
    "rule_based_plan",
    "validate_ai_plan",
]
