"""
Unit Tests for the Pacing Planner
"""

import pytest

from edpsych.core.schemas.pacing import PacingSettings, ProgressMetrics
from edpsych.pacing import (
    PacingContext,
    PacingPlanner,
    adaptation_type,
    pace_band,
    resolve_baseline,
    rule_based_plan,
    validate_ai_plan,
)


class FakeAIClient:
    """Stands in for AIClient, returning a canned JSON plan."""

    def __init__(self, plan=None, configured=True):
        self.plan = plan
        self.is_configured = configured
        self.prompts: list[str] = []

    def generate_json(self, *, system, prompt):
        self.prompts.append(prompt)
        return self.plan


@pytest.mark.parametrize(
    "pace,expected", [(20, "Gradual"), (39.9, "Gradual"), (40, "Standard"), (60, "Standard"), (61, "Accelerated")]
)
def test_adaptation_type(pace, expected):
    assert adaptation_type(pace) == expected


@pytest.mark.parametrize("pace,expected", [(0, "Gradual"), (29, "Gradual"), (30, "Moderate"), (60, "Accelerated")])
def test_pace_band(pace, expected):
    assert pace_band(pace) == expected


class TestResolveBaseline:
    def test_uses_settings_by_default(self):
        metrics = ProgressMetrics(recommended_pace=80)

        assert resolve_baseline(PacingSettings(baseline_pace=45), metrics) == 45

    def test_adapts_to_recommended_pace(self):
        settings = PacingSettings(baseline_pace=45, adapt_to_progress=True)

        assert resolve_baseline(settings, ProgressMetrics(recommended_pace=80)) == 80

    def test_adapt_without_recommendation(self):
        settings = PacingSettings(baseline_pace=45, adapt_to_progress=True)

        assert resolve_baseline(settings, ProgressMetrics(mastery_level=70)) == 45


class TestRuleBasedPlan:
    def test_moderate_plan(self):
        context = PacingContext(subject="mathematics", objectives=["Fractions"])

        plan = rule_based_plan(50, PacingSettings(), context)

        assert plan["adaptation_type"] == "Standard"
        assert plan["pace_band"] == "Moderate"
        assert plan["estimated_completion"] == "6 weeks"
        assert len(plan["adjusted_timeline"]) == 6
        assert plan["adjusted_timeline"][0]["timeframe"] == "Week 1"
        assert "Fractions" in plan["adjusted_timeline"][0]["description"]
        assert len(plan["reinforcement_activities"]) == 2
        assert len(plan["mastery_checkpoints"]) == 3
        assert len(plan["breakpoints"]) == 2

    def test_gradual_plan_has_more_support(self):
        plan = rule_based_plan(20, PacingSettings(), PacingContext())

        assert plan["estimated_completion"] == "8 weeks"
        assert len(plan["reinforcement_activities"]) == 4
        assert len(plan["breakpoints"]) == 4
        assert plan["mastery_checkpoints"][-1].endswith("(end of week 8)")

    def test_accelerated_plan(self):
        plan = rule_based_plan(80, PacingSettings(), PacingContext())

        assert plan["estimated_completion"] == "4 weeks"
        assert len(plan["acceleration_options"]) == 4
        assert len(plan["breakpoints"]) == 1

    def test_disabled_sections_are_empty(self):
        settings = PacingSettings(
            include_reinforcement_activities=False,
            include_acceleration_options=False,
            auto_assess_mastery=False,
            enable_breakpoints=False,
        )

        plan = rule_based_plan(50, settings, PacingContext())

        assert plan["reinforcement_activities"] == []
        assert plan["acceleration_options"] == []
        assert plan["mastery_checkpoints"] == []
        assert plan["breakpoints"] == []


class TestPacingPlanner:
    def test_without_ai_client_uses_rules(self):
        plan, source = PacingPlanner().generate(PacingSettings(), None, PacingContext())

        assert source == "rules"
        assert plan["adjusted_pace"] == 50

    def test_unconfigured_client_is_not_called(self):
        client = FakeAIClient(configured=False)

        _, source = PacingPlanner(client).generate(PacingSettings(), None, PacingContext())

        assert source == "rules"
        assert client.prompts == []

    def test_ai_plan_is_used_and_classified_by_rules(self):
        client = FakeAIClient(
            plan={"adjusted_pace": 70, "adjusted_timeline": [], "adaptation_type": "Gradual"}
        )
        context = PacingContext(student_name="Sam", subject="science")

        plan, source = PacingPlanner(client).generate(PacingSettings(baseline_pace=70), None, context)

        assert source == "ai"
        assert plan["adaptation_type"] == "Accelerated"
        assert plan["pace_band"] == "Accelerated"
        assert plan["standard_pace"] == 50
        assert plan["estimated_completion"] == "4 weeks"
        assert "Student: Sam" in client.prompts[0]

    def test_malformed_ai_plan_falls_back(self):
        client = FakeAIClient(plan={"adjusted_pace": "fast"})

        plan, source = PacingPlanner(client).generate(PacingSettings(), None, PacingContext())

        assert source == "rules"
        assert plan["pace_band"] == "Moderate"


class TestValidateAIPlan:
    def test_wrongly_typed_field_is_rejected(self):
        plan = {"adjusted_pace": 55, "adjusted_timeline": [], "standard_pace": "normal"}

        assert validate_ai_plan(plan, 50) is None

    def test_missing_timeline_is_rejected(self):
        assert validate_ai_plan({"adjusted_pace": 55}, 50) is None

    def test_bad_timeline_step_is_rejected(self):
        plan = {"adjusted_pace": 55, "adjusted_timeline": [{"timeframe": "Week 1"}]}

        assert validate_ai_plan(plan, 50) is None

    def test_unknown_keys_dropped_and_rules_fill_classification(self):
        plan = {
            "adjusted_pace": 35,
            "adjusted_timeline": [
                {"timeframe": "Week 1", "milestone": "Recap", "description": "Fractions review"}
            ],
            "pace_band": "Turbo",
            "confidence": 0.9,
        }

        validated = validate_ai_plan(plan, 35)

        assert "confidence" not in validated
        assert validated["pace_band"] == "Moderate"
        assert validated["adaptation_type"] == "Gradual"
        assert validated["standard_pace"] == 50
        assert validated["adjusted_timeline"][0]["milestone"] == "Recap"
