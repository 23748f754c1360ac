"""
Tests for Assessment API Endpoints

Authoring, attempts, auto-marking, analytics and student progress.
"""

import pytest

BASE = "/api/v1/assessments"

QUESTIONS = [
    {
        "id": "q1",
        "type": "multiple_choice",
        "text": "Which number is even?",
        "options": [{"id": "a", "text": "3"}, {"id": "b", "text": "4"}],
        "correct_option_id": "b",
        "cognitive_domain": "remember",
    },
    {
        "id": "q2",
        "type": "short_answer",
        "text": "Half of ten?",
        "accepted_answers": ["5", "five"],
        "cognitive_domain": "apply",
    },
    {"id": "q3", "type": "long_answer", "text": "Explain how you know", "points": 4},
]


def assessment_payload(**overrides):
    payload = {
        "title": "Number facts check",
        "key_stage": "key_stage_2",
        "subject": "mathematics",
        "assessment_type": "progress_check",
        "questions": QUESTIONS,
        "sections": [{"id": "s1", "title": "Recall", "question_ids": ["q1", "q2"]}],
        "passing_score": 60,
        "max_attempts": 2,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
async def assessment(client, teacher_headers):
    response = await client.post(f"{BASE}/", json=assessment_payload(), headers=teacher_headers)
    assert response.status_code == 201
    return response.json()


async def sit(client, headers, assessment_id, answers):
    """Start an attempt, answer questions and complete it."""
    started = await client.post(f"{BASE}/{assessment_id}/attempts", headers=headers)
    assert started.status_code == 201
    attempt_id = started.json()["id"]

    for question_id, answer in answers.items():
        saved = await client.post(
            f"/api/v1/attempts/{attempt_id}/responses",
            json={"question_id": question_id, "response": answer, "time_spent": 20},
            headers=headers,
        )
        assert saved.status_code == 200

    completed = await client.post(f"/api/v1/attempts/{attempt_id}/complete", headers=headers)
    assert completed.status_code == 200
    return completed.json()


class TestAuthoring:
    async def test_create(self, client, teacher, assessment):
        assert assessment["created_by_id"] == str(teacher.id)
        assert assessment["questions"][1]["accepted_answers"] == ["5", "five"]

    async def test_student_cannot_create(self, client, student_headers):
        response = await client.post(f"{BASE}/", json=assessment_payload(), headers=student_headers)

        assert response.status_code == 403

    async def test_unknown_correct_option(self, client, teacher_headers):
        broken = [{**QUESTIONS[0], "correct_option_id": "z"}]

        response = await client.post(
            f"{BASE}/", json=assessment_payload(questions=broken, sections=[]), headers=teacher_headers
        )

        assert response.status_code == 400
        assert "not one of its options" in response.json()["detail"]

    async def test_section_references_missing_question(self, client, teacher_headers):
        response = await client.post(
            f"{BASE}/",
            json=assessment_payload(sections=[{"id": "s1", "title": "Recall", "question_ids": ["q9"]}]),
            headers=teacher_headers,
        )

        assert response.status_code == 400

    async def test_unknown_question_type(self, client, teacher_headers):
        response = await client.post(
            f"{BASE}/",
            json=assessment_payload(questions=[{"id": "q1", "type": "essay", "text": "Why?"}], sections=[]),
            headers=teacher_headers,
        )

        assert response.status_code == 422

    async def test_student_view_hides_answer_keys(self, client, student_headers, assessment):
        response = await client.get(f"{BASE}/{assessment['id']}", headers=student_headers)

        questions = response.json()["questions"]
        assert "correct_option_id" not in questions[0]
        assert "accepted_answers" not in questions[1]

    async def test_list_filters(self, client, teacher_headers, assessment):
        match = await client.get(f"{BASE}/?subject=mathematics", headers=teacher_headers)
        assert match.json()["total"] == 1
        assert "questions" not in match.json()["items"][0]

        other = await client.get(f"{BASE}/?subject=science", headers=teacher_headers)
        assert other.json()["total"] == 0

    async def test_update_by_non_author(self, client, other_headers, assessment):
        response = await client.put(
            f"{BASE}/{assessment['id']}", json={"title": "Mine"}, headers=other_headers
        )

        assert response.status_code == 403

    async def test_update_revalidates_sections(self, client, teacher_headers, assessment):
        response = await client.put(
            f"{BASE}/{assessment['id']}",
            json={"questions": [QUESTIONS[2]]},
            headers=teacher_headers,
        )

        assert response.status_code == 400

    async def test_response_includes_age_range(self, client, assessment):
        assert assessment["target_age_range"] == {"min": 7, "max": 11}

    async def test_null_questions_rejected(self, client, teacher_headers, assessment):
        response = await client.put(
            f"{BASE}/{assessment['id']}", json={"questions": None}, headers=teacher_headers
        )

        assert response.status_code == 422
        assert "questions" in response.text

    async def test_null_description_clears_it(self, client, teacher_headers, assessment):
        response = await client.put(
            f"{BASE}/{assessment['id']}", json={"description": None}, headers=teacher_headers
        )

        assert response.status_code == 200
        assert response.json()["description"] is None

    async def test_soft_delete(self, client, teacher_headers, assessment):
        deleted = await client.delete(f"{BASE}/{assessment['id']}", headers=teacher_headers)
        assert deleted.status_code == 204

        missing = await client.get(f"{BASE}/{assessment['id']}", headers=teacher_headers)
        assert missing.status_code == 404


class TestAttempts:
    async def test_marking(self, client, student_headers, assessment):
        attempt = await sit(client, student_headers, assessment["id"], {"q1": "b", "q2": "Six", "q3": "Because"})

        assert attempt["is_complete"] is True
        assert attempt["score"] == 1
        assert attempt["max_score"] == 2
        assert attempt["percentage"] == 50.0
        assert attempt["passed"] is False
        assert attempt["result"]["requires_manual_marking"] is True
        assert len(attempt["responses"]) == 3

    async def test_answer_replaced(self, client, student_headers, assessment):
        started = await client.post(f"{BASE}/{assessment['id']}/attempts", headers=student_headers)
        attempt_id = started.json()["id"]

        for answer in ("a", "b"):
            await client.post(
                f"/api/v1/attempts/{attempt_id}/responses",
                json={"question_id": "q1", "response": answer},
                headers=student_headers,
            )

        detail = await client.get(f"/api/v1/attempts/{attempt_id}", headers=student_headers)
        assert [r["response"] for r in detail.json()["responses"]] == ["b"]

    async def test_unknown_question(self, client, student_headers, assessment):
        started = await client.post(f"{BASE}/{assessment['id']}/attempts", headers=student_headers)

        response = await client.post(
            f"/api/v1/attempts/{started.json()['id']}/responses",
            json={"question_id": "q42", "response": "x"},
            headers=student_headers,
        )

        assert response.status_code == 404

    async def test_only_owner_answers(self, client, student_headers, teacher_headers, assessment):
        started = await client.post(f"{BASE}/{assessment['id']}/attempts", headers=student_headers)

        response = await client.post(
            f"/api/v1/attempts/{started.json()['id']}/responses",
            json={"question_id": "q1", "response": "b"},
            headers=teacher_headers,
        )

        assert response.status_code == 403

    async def test_completed_attempt_is_closed(self, client, student_headers, assessment):
        attempt = await sit(client, student_headers, assessment["id"], {"q1": "b"})

        again = await client.post(f"/api/v1/attempts/{attempt['id']}/complete", headers=student_headers)
        assert again.status_code == 409

        late = await client.post(
            f"/api/v1/attempts/{attempt['id']}/responses",
            json={"question_id": "q2", "response": "5"},
            headers=student_headers,
        )
        assert late.status_code == 409

    async def test_max_attempts(self, client, student_headers, assessment):
        await sit(client, student_headers, assessment["id"], {"q1": "a"})
        await sit(client, student_headers, assessment["id"], {"q1": "b"})

        response = await client.post(f"{BASE}/{assessment['id']}/attempts", headers=student_headers)

        assert response.status_code == 409
        assert "Maximum attempts (2)" in response.json()["detail"]

    async def test_staff_can_view_attempt(self, client, student_headers, other_headers, assessment):
        attempt = await sit(client, student_headers, assessment["id"], {"q1": "b"})

        response = await client.get(f"/api/v1/attempts/{attempt['id']}", headers=other_headers)

        assert response.status_code == 200


class TestAnalyticsAndProgress:
    async def test_assessment_analytics(self, client, teacher_headers, student_headers, assessment):
        await sit(client, student_headers, assessment["id"], {"q1": "b", "q2": "five"})
        await sit(client, student_headers, assessment["id"], {"q1": "a", "q2": "5"})

        response = await client.get(f"{BASE}/{assessment['id']}/analytics", headers=teacher_headers)

        data = response.json()
        assert data["attempt_count"] == 2
        assert data["average_score"] == 75.0
        assert data["pass_rate"] == 50.0
        q1 = next(q for q in data["questions"] if q["question_id"] == "q1")
        assert (q1["correct"], q1["incorrect"]) == (1, 1)

    async def test_analytics_staff_only(self, client, student_headers, assessment):
        response = await client.get(f"{BASE}/{assessment['id']}/analytics", headers=student_headers)

        assert response.status_code == 403

    async def test_student_progress(self, client, student, student_headers, teacher_headers, assessment):
        await sit(client, student_headers, assessment["id"], {"q1": "b", "q2": "5"})
        await sit(client, student_headers, assessment["id"], {"q1": "b", "q2": "4"})

        own = await client.get(f"/api/v1/students/{student.id}/progress", headers=student_headers)
        data = own.json()
        assert data["assessments_completed"] == 2
        assert data["average_score"] == 75.0
        assert data["subject_averages"] == {"mathematics": 75.0}
        assert [p["percentage"] for p in data["progress_over_time"]] == [100.0, 50.0]
        assert data["strengths"] == ["Strong performance in remember tasks"]

        by_staff = await client.get(f"/api/v1/students/{student.id}/progress", headers=teacher_headers)
        assert by_staff.status_code == 200

    async def test_progress_of_others_forbidden(self, client, teacher, student_headers):
        response = await client.get(f"/api/v1/students/{teacher.id}/progress", headers=student_headers)

        assert response.status_code == 403
