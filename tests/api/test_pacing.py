"""
Tests for Progress Pacing API Endpoints

The planner dependency is overridden so no AI provider is called.
"""

import pytest

from edpsych.api.v1.pacing import get_pacing_planner
from edpsych.core.models import CurriculumPlan
from edpsych.main import app
from edpsych.pacing import PacingPlanner

BASE = "/api/v1/pacing/"


class CannedAIClient:
    is_configured = True

    def __init__(self, plan):
        self.plan = plan

    def generate_json(self, *, system, prompt):
        return self.plan


@pytest.fixture
def use_planner(client):
    def install(ai_client=None):
        app.dependency_overrides[get_pacing_planner] = lambda: PacingPlanner(ai_client)

    return install


@pytest.fixture
async def curriculum_plan(db_session, teacher):
    plan = CurriculumPlan(
        user_id=teacher.id,
        title="Year 6 Ratio",
        subject="Maths",
        key_stage="KS2",
        objectives=["Use ratio language", "Solve scaling problems"],
        content={},
    )
    db_session.add(plan)
    await db_session.commit()
    return plan


class TestCreatePacingPlan:
    async def test_rule_based_plan_for_curriculum(
        self, client, teacher, teacher_headers, curriculum_plan, use_planner
    ):
        use_planner()

        response = await client.post(
            BASE, json={"curriculum_id": str(curriculum_plan.id)}, headers=teacher_headers
        )

        assert response.status_code == 201
        data = response.json()
        assert data["source"] == "rules"
        assert data["user_id"] == str(teacher.id)
        assert data["subject"] == "Maths"
        assert data["adaptation_type"] == "Standard"
        assert data["progress_metrics_used"] is False
        assert "Use ratio language" in data["pacing_data"]["adjusted_timeline"][0]["description"]

    async def test_recommended_pace_used_when_adapting(
        self, client, teacher_headers, student, use_planner
    ):
        use_planner()

        response = await client.post(
            BASE,
            json={
                "student_id": str(student.id),
                "settings": {"adapt_to_progress": True},
                "progress_metrics": {"recommended_pace": 25, "mastery_level": 40},
            },
            headers=teacher_headers,
        )

        data = response.json()
        assert data["adjusted_pace"] == 25
        assert data["adaptation_type"] == "Gradual"
        assert data["progress_metrics_used"] is True

    async def test_ai_plan_keeps_rule_classification(self, client, teacher_headers, student, use_planner):
        use_planner(
            CannedAIClient(
                {
                    "adjusted_pace": 80,
                    "adaptation_type": "Accelerated",
                    "adjusted_timeline": [{"timeframe": "Week 1", "milestone": "Start", "description": "Go"}],
                }
            )
        )

        response = await client.post(BASE, json={"student_id": str(student.id)}, headers=teacher_headers)

        data = response.json()
        assert data["source"] == "ai"
        assert data["adjusted_pace"] == 80
        assert data["adaptation_type"] == "Standard"

    async def test_malformed_ai_plan_falls_back(self, client, teacher_headers, student, use_planner):
        use_planner(CannedAIClient({"adjusted_pace": "fast"}))

        response = await client.post(BASE, json={"student_id": str(student.id)}, headers=teacher_headers)

        assert response.json()["source"] == "rules"

    async def test_ai_plan_with_invalid_field_falls_back(self, client, teacher_headers, student, use_planner):
        use_planner(CannedAIClient({"adjusted_pace": 55, "adjusted_timeline": [], "standard_pace": "normal"}))

        response = await client.post(BASE, json={"student_id": str(student.id)}, headers=teacher_headers)

        assert response.status_code == 201
        assert response.json()["source"] == "rules"

    async def test_target_required(self, client, teacher_headers, use_planner):
        use_planner()

        response = await client.post(BASE, json={"subject": "Maths"}, headers=teacher_headers)

        assert response.status_code == 400

    async def test_unknown_student(self, client, teacher_headers, use_planner):
        use_planner()

        response = await client.post(
            BASE, json={"student_id": "00000000-0000-0000-0000-000000000000"}, headers=teacher_headers
        )

        assert response.status_code == 404

    async def test_students_cannot_generate(self, client, student, student_headers, use_planner):
        use_planner()

        response = await client.post(BASE, json={"student_id": str(student.id)}, headers=student_headers)

        assert response.status_code == 403

    async def test_pace_out_of_range(self, client, teacher_headers, student, use_planner):
        use_planner()

        response = await client.post(
            BASE,
            json={"student_id": str(student.id), "settings": {"baseline_pace": 120}},
            headers=teacher_headers,
        )

        assert response.status_code == 422


class TestListPacingPlans:
    async def test_lists_own_plans_filtered(
        self, client, teacher_headers, other_headers, student, curriculum_plan, use_planner
    ):
        use_planner()
        await client.post(BASE, json={"student_id": str(student.id)}, headers=teacher_headers)
        await client.post(BASE, json={"curriculum_id": str(curriculum_plan.id)}, headers=teacher_headers)

        everything = await client.get(BASE, headers=teacher_headers)
        assert len(everything.json()) == 2

        for_student = await client.get(f"{BASE}?student_id={student.id}", headers=teacher_headers)
        assert len(for_student.json()) == 1

        someone_else = await client.get(BASE, headers=other_headers)
        assert someone_else.json() == []
