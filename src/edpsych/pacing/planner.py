"""
Progress-Adaptive Pacing Planner

Builds a learning-pace plan for a student or curriculum plan. An AI
provider is asked first; when none is configured or the response is not a
usable JSON plan, a deterministic rule-based plan is produced instead.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from edpsych.core.schemas.pacing import AIPacingPlan

if TYPE_CHECKING:
    from edpsych.ai import AIClient
    from edpsych.core.schemas.pacing import PacingSettings, ProgressMetrics

logger = logging.getLogger(__name__)

STANDARD_PACE = 50
COMPLETION_WEEKS = {"Gradual": 8, "Moderate": 6, "Accelerated": 4}
STANDARD_WEEKS = 6

PHASES = (
    ("Introduction to key concepts", "Explore new ideas through modelling and discussion"),
    ("Guided practice", "Practise core skills with structured support"),
    ("Independent application", "Apply learning to new problems independently"),
    ("Consolidation and review", "Revisit and secure key knowledge"),
    ("Extension and connections", "Connect ideas across topics and extend thinking"),
    ("Assessment and reflection", "Demonstrate understanding and reflect on progress"),
)

REINFORCEMENT_ACTIVITIES = (
    "Additional practice exercises for key concepts",
    "Alternative explanations using concrete and visual approaches",
    "Real-world application examples",
    "Guided review activities with immediate feedback",
)
ACCELERATION_OPTIONS = (
    "Advanced concept exploration opportunities",
    "Independent research project",
    "Cross-curricular application challenges",
    "Peer teaching opportunities",
)
MASTERY_CHECKPOINTS = (
    "Key knowledge verification quiz",
    "Skill demonstration task",
    "Application challenge",
    "Self-assessment prompt",
)
BREAKPOINTS = (
    "Reflection point for knowledge consolidation",
    "Synthesis activity connecting concepts",
    "Progress celebration moment",
    "Preparation point before new concepts are introduced",
)

SYSTEM_PROMPT = (
    "You are an expert educational designer specialising in personalised learning pacing "
    "for UK schools. Respond with a single JSON object using UK English."
)


def adaptation_type(pace: float) -> str:
    """Gradual below 40, Accelerated above 60, otherwise Standard."""
    if pace < STANDARD_PACE - 10:
        return "Gradual"
    if pace > STANDARD_PACE + 10:
        return "Accelerated"
    return "Standard"


def pace_band(pace: float) -> str:
    """Gradual below 30, Moderate below 60, otherwise Accelerated."""
    if pace < 30:
        return "Gradual"
    if pace < 60:
        return "Moderate"
    return "Accelerated"


def resolve_baseline(settings: PacingSettings, metrics: ProgressMetrics | None) -> float:
    """Baseline pace, replaced by the recommended pace when adapting to progress."""
    if settings.adapt_to_progress and metrics and metrics.recommended_pace is not None:
        return metrics.recommended_pace
    return settings.baseline_pace


def _timeline(weeks: int, focus: str, objectives: list[str]) -> list[dict[str, str]]:
    timeline = []
    for week in range(weeks):
        milestone, description = PHASES[week * len(PHASES) // weeks]
        if objectives:
            description = f"{description}: {objectives[week % len(objectives)]}"
        timeline.append(
            {
                "timeframe": f"Week {week + 1}",
                "milestone": milestone,
                "description": f"{description} ({focus})",
            }
        )
    return timeline


@dataclass
class PacingContext:
    """Inputs describing who and what the plan is for."""

    subject: str | None = None
    key_stage: str | None = None
    student_name: str | None = None
    curriculum_title: str | None = None
    objectives: list[str] = field(default_factory=list)

    @property
    def focus(self) -> str:
        return self.curriculum_title or self.subject or "general learning"


def rule_based_plan(
    baseline: float, settings: PacingSettings, context: PacingContext
) -> dict[str, Any]:
    """Deterministic pacing plan used when no AI plan is available."""
    band = pace_band(baseline)
    weeks = COMPLETION_WEEKS[band]

    plan: dict[str, Any] = {
        "standard_pace": STANDARD_PACE,
        "adjusted_pace": round(baseline, 1),
        "adaptation_type": adaptation_type(baseline),
        "pace_band": band,
        "estimated_completion": f"{weeks} weeks",
        "standard_description": (
            f"A {STANDARD_WEEKS}-week sequence covering {context.focus} at the expected pace."
        ),
        "adjusted_description": (
            f"A {weeks}-week {band.lower()} sequence for {context.focus}, adapted "
            f"at {settings.adaptation_strength:.0f}% strength."
        ),
        "standard_timeline": _timeline(STANDARD_WEEKS, context.focus, context.objectives),
        "adjusted_timeline": _timeline(weeks, context.focus, context.objectives),
        "reinforcement_activities": [],
        "acceleration_options": [],
        "mastery_checkpoints": [],
        "breakpoints": [],
    }

    if settings.include_reinforcement_activities:
        count = 4 if band == "Gradual" else 2
        plan["reinforcement_activities"] = list(REINFORCEMENT_ACTIVITIES[:count])
    if settings.include_acceleration_options:
        count = 4 if band == "Accelerated" else 2
        plan["acceleration_options"] = list(ACCELERATION_OPTIONS[:count])
    if settings.auto_assess_mastery:
        plan["mastery_checkpoints"] = [
            f"{checkpoint} (end of week {week})"
            for checkpoint, week in zip(MASTERY_CHECKPOINTS, range(2, weeks + 1, 2), strict=False)
        ]
    if settings.enable_breakpoints:
        count = 1 if band == "Accelerated" else (2 if band == "Moderate" else 4)
        plan["breakpoints"] = list(BREAKPOINTS[:count])

    return plan


def build_prompt(
    baseline: float,
    settings: PacingSettings,
    metrics: ProgressMetrics | None,
    context: PacingContext,
) -> str:
    """User prompt describing the learner and the required JSON shape."""
    lines = [
        "Create a personalised learning pace plan that adapts to the student's progress.",
        f"Student: {context.student_name or 'not specified'}",
        f"Curriculum: {context.curriculum_title or 'not specified'}",
        f"Subject: {context.subject or 'General'}",
        f"Key stage: {context.key_stage or 'not specified'}",
        f"Objectives: {json.dumps(context.objectives)}",
        f"Baseline pace: {baseline}% ({pace_band(baseline)})",
        f"Adaptation type: {adaptation_type(baseline)}",
        f"Adaptation strength: {settings.adaptation_strength}%",
        f"Settings: {settings.model_dump_json()}",
    ]
    if metrics:
        lines.append(f"Progress metrics: {metrics.model_dump_json(exclude_none=True)}")
    lines.append(
        "Return JSON with keys: standard_pace, adjusted_pace, adaptation_type, "
        "estimated_completion, standard_description, adjusted_description, "
        "standard_timeline and adjusted_timeline (lists of {timeframe, milestone, description}), "
        "reinforcement_activities, acceleration_options, mastery_checkpoints, breakpoints "
        "(lists of strings; empty when the matching setting is off)."
    )
    return "\n".join(lines)


def validate_ai_plan(plan: Any, baseline: float) -> dict[str, Any] | None:
    """Check an AI plan's shape and classify it by the rules.

    Returns None when the plan is missing or malformed.
    """
    if plan is None:
        return None
    try:
        validated = AIPacingPlan.model_validate(plan).model_dump()
    except ValidationError as e:
        logger.info(f"Rejected AI pacing plan with {e.error_count()} invalid field(s)")
        return None

    band = pace_band(baseline)
    validated["adaptation_type"] = adaptation_type(baseline)
    validated["pace_band"] = band
    if validated["estimated_completion"] is None:
        validated["estimated_completion"] = f"{COMPLETION_WEEKS[band]} weeks"
    return validated


class PacingPlanner:
    """Generates pacing plans, preferring the AI provider when available."""

    def __init__(self, ai_client: AIClient | None = None):
        self.ai_client = ai_client

    def generate(
        self,
        settings: PacingSettings,
        metrics: ProgressMetrics | None,
        context: PacingContext,
    ) -> tuple[dict[str, Any], str]:
        """Build a plan.

        Returns:
            (plan, source) where source is "ai" or "rules"
        """
        baseline = resolve_baseline(settings, metrics)

        if self.ai_client is not None and self.ai_client.is_configured:
            plan = validate_ai_plan(
                self.ai_client.generate_json(
                    system=SYSTEM_PROMPT, prompt=build_prompt(baseline, settings, metrics, context)
                ),
                baseline,
            )
            if plan is not None:
                return plan, "ai"
            logger.info("AI pacing plan unavailable or malformed, using rule-based plan")

        return rule_based_plan(baseline, settings, context), "rules"
