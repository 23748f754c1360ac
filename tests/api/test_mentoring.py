"""
Tests for Mentor Matching API Endpoints
"""

from conftest import auth_headers, make_user

BASE = "/api/v1/cpd/mentoring"


def profile_payload(**overrides):
    payload = {
        "role": "mentor",
        "school": "Hillside Academy",
        "phase": "Secondary",
        "years_experience": 12,
        "expertise": [1, 2],
        "subjects": ["Mathematics"],
        "bio": "SENCo and maths lead",
        "preferences": {"frequency": "fortnightly", "formats": ["video"], "focus_areas": [1]},
    }
    payload.update(overrides)
    return payload


async def start_mentorship(client, mentee_headers, mentor, mentor_headers, **overrides):
    """Mentor publishes a profile, mentee asks, mentor accepts."""
    await client.put(f"{BASE}/profile", json=profile_payload(), headers=mentor_headers)
    request = {
        "mentor_id": str(mentor.id),
        "message": "Would you help me with behaviour planning?",
        "focus_areas": [2],
        "goals": ["Write a class behaviour plan", "Run a restorative circle"],
        "duration_months": 3,
        "frequency": "fortnightly",
    }
    request.update(overrides)
    created = await client.post(f"{BASE}/requests", json=request, headers=mentee_headers)
    assert created.status_code == 201

    response = await client.post(
        f"{BASE}/requests/{created.json()['id']}/respond", json={"accept": True}, headers=mentor_headers
    )
    assert response.status_code == 200
    return response.json()["mentorship"]


async def mentorship_activity(client, headers):
    activities = await client.get("/api/v1/cpd/activities", headers=headers)
    return next(a for a in activities.json() if a["type"] == "Mentorship")


class TestProfilesAndSearch:
    async def test_expertise_catalogue(self, client, teacher_headers):
        response = await client.get(f"{BASE}/expertise", headers=teacher_headers)

        assert response.status_code == 200
        assert len(response.json()) == 15

    async def test_profile_upsert(self, client, teacher_headers):
        missing = await client.get(f"{BASE}/profile", headers=teacher_headers)
        assert missing.status_code == 404

        first = await client.put(f"{BASE}/profile", json=profile_payload(), headers=teacher_headers)
        second = await client.put(
            f"{BASE}/profile", json=profile_payload(role="both", years_experience=13), headers=teacher_headers
        )

        assert second.json()["id"] == first.json()["id"]
        assert second.json()["role"] == "both"
        assert second.json()["preferences"]["formats"] == ["video"]

    async def test_unknown_expertise_rejected(self, client, teacher_headers):
        response = await client.put(
            f"{BASE}/profile", json=profile_payload(expertise=[99]), headers=teacher_headers
        )

        assert response.status_code == 400

    async def test_students_cannot_use_mentoring(self, client, student_headers):
        response = await client.get(f"{BASE}/mentors", headers=student_headers)

        assert response.status_code == 403

    async def test_search_filters_and_tenant(self, client, db_session, teacher_headers, other_headers):
        await client.put(f"{BASE}/profile", json=profile_payload(), headers=other_headers)
        outsider = await make_user(db_session, email="mentor@school-b.org.uk", tenant_id="school-b")
        await client.put(f"{BASE}/profile", json=profile_payload(), headers=auth_headers(outsider))

        everyone = await client.get(f"{BASE}/mentors", headers=teacher_headers)
        by_subject = await client.get(
            f"{BASE}/mentors", params={"subject": "mathematics", "expertise": 2}, headers=teacher_headers
        )
        by_phase = await client.get(f"{BASE}/mentors", params={"phase": "Primary"}, headers=teacher_headers)

        assert len(everyone.json()) == 1
        assert len(by_subject.json()) == 1
        assert by_phase.json() == []

    async def test_cannot_request_mentor_in_other_tenant(self, client, db_session, teacher_headers):
        outsider = await make_user(db_session, email="mentor@school-b.org.uk", tenant_id="school-b")
        await client.put(f"{BASE}/profile", json=profile_payload(), headers=auth_headers(outsider))

        response = await client.post(
            f"{BASE}/requests",
            json={
                "mentor_id": str(outsider.id),
                "message": "Hello",
                "duration_months": 3,
                "frequency": "monthly",
            },
            headers=teacher_headers,
        )

        assert response.status_code == 404


class TestRequests:
    async def test_cannot_request_self(self, client, teacher, teacher_headers):
        await client.put(f"{BASE}/profile", json=profile_payload(), headers=teacher_headers)

        response = await client.post(
            f"{BASE}/requests",
            json={"mentor_id": str(teacher.id), "message": "Hi", "duration_months": 1, "frequency": "weekly"},
            headers=teacher_headers,
        )

        assert response.status_code == 400

    async def test_decline(self, client, other_teacher, teacher_headers, other_headers):
        await client.put(f"{BASE}/profile", json=profile_payload(), headers=other_headers)
        created = await client.post(
            f"{BASE}/requests",
            json={"mentor_id": str(other_teacher.id), "message": "Hi", "duration_months": 2, "frequency": "weekly"},
            headers=teacher_headers,
        )
        url = f"{BASE}/requests/{created.json()['id']}/respond"

        # Only the mentor can answer
        not_mentor = await client.post(url, json={"accept": True}, headers=teacher_headers)
        declined = await client.post(url, json={"accept": False}, headers=other_headers)
        again = await client.post(url, json={"accept": True}, headers=other_headers)

        assert not_mentor.status_code == 404
        assert declined.json()["request"]["status"] == "declined"
        assert declined.json()["mentorship"] is None
        assert again.status_code == 400

    async def test_accept_starts_mentorship_and_cpd(
        self, client, teacher, other_teacher, teacher_headers, other_headers
    ):
        mentorship = await start_mentorship(client, teacher_headers, other_teacher, other_headers)

        assert mentorship["status"] == "active"
        assert mentorship["mentee_id"] == str(teacher.id)
        assert [g["status"] for g in mentorship["goals"]] == ["not_started", "not_started"]
        assert mentorship["end_date"][:7] > mentorship["start_date"][:7]

        for headers in (teacher_headers, other_headers):
            activity = await mentorship_activity(client, headers)
            assert activity["status"] == "In Progress"
            assert activity["points"] == 0

        as_mentee = await client.get(f"{BASE}/mentorships", params={"role": "mentee"}, headers=teacher_headers)
        as_mentor = await client.get(f"{BASE}/mentorships", params={"role": "mentor"}, headers=teacher_headers)
        assert len(as_mentee.json()) == 1
        assert as_mentor.json() == []


class TestMentorships:
    async def test_completed_meeting_credits_both_sides_once(
        self, client, other_teacher, teacher_headers, other_headers
    ):
        mentorship = await start_mentorship(client, teacher_headers, other_teacher, other_headers)
        meetings_url = f"{BASE}/mentorships/{mentorship['id']}/meetings"

        meeting = await client.post(
            meetings_url,
            json={"date": "2026-10-20T15:30:00Z", "duration": 90, "format": "in person"},
            headers=other_headers,
        )
        assert meeting.json()["status"] == "scheduled"
        meeting_url = f"{meetings_url}/{meeting.json()['id']}"

        await client.put(meeting_url, json={"status": "completed"}, headers=other_headers)
        await client.put(meeting_url, json={"status": "completed", "notes": "Good"}, headers=teacher_headers)

        for headers in (teacher_headers, other_headers):
            activity = await mentorship_activity(client, headers)
            assert activity["duration"] == 1.5
            assert activity["points"] == 1.5

    async def test_meeting_null_status_rejected(self, client, other_teacher, teacher_headers, other_headers):
        mentorship = await start_mentorship(client, teacher_headers, other_teacher, other_headers)
        meetings_url = f"{BASE}/mentorships/{mentorship['id']}/meetings"
        meeting = await client.post(
            meetings_url,
            json={"date": "2026-10-20T15:30:00Z", "duration": 30, "format": "video"},
            headers=other_headers,
        )

        response = await client.put(
            f"{meetings_url}/{meeting.json()['id']}", json={"status": None}, headers=other_headers
        )

        assert response.status_code == 422

    async def test_non_participant_forbidden(
        self, client, other_teacher, teacher_headers, other_headers, psychologist_headers
    ):
        mentorship = await start_mentorship(client, teacher_headers, other_teacher, other_headers)

        response = await client.get(f"{BASE}/mentorships/{mentorship['id']}", headers=psychologist_headers)

        assert response.status_code == 403

    async def test_detail_with_resources_and_feedback(
        self, client, teacher, other_teacher, teacher_headers, other_headers
    ):
        mentorship = await start_mentorship(client, teacher_headers, other_teacher, other_headers)
        url = f"{BASE}/mentorships/{mentorship['id']}"

        resource = await client.post(
            f"{url}/resources",
            json={"title": "Behaviour toolkit", "type": "link", "url": "https://example.org/toolkit"},
            headers=other_headers,
        )
        feedback = await client.post(
            f"{url}/feedback", json={"rating": 5, "comment": "Really helpful"}, headers=teacher_headers
        )
        bad_rating = await client.post(f"{url}/feedback", json={"rating": 6, "comment": "x"}, headers=teacher_headers)

        assert resource.status_code == 201
        assert feedback.json()["to_user_id"] == str(other_teacher.id)
        assert bad_rating.status_code == 422

        detail = (await client.get(url, headers=teacher_headers)).json()
        assert detail["mentorship"]["mentee_id"] == str(teacher.id)
        assert len(detail["resources"]) == 1
        assert detail["feedback"][0]["rating"] == 5

    async def test_completed_goal_adds_portfolio_achievement(
        self, client, other_teacher, teacher_headers, other_headers
    ):
        mentorship = await start_mentorship(client, teacher_headers, other_teacher, other_headers)

        response = await client.put(
            f"{BASE}/mentorships/{mentorship['id']}/goals/0", json={"status": "completed"}, headers=other_headers
        )
        missing = await client.put(
            f"{BASE}/mentorships/{mentorship['id']}/goals/5", json={"status": "completed"}, headers=other_headers
        )

        assert response.json()["goals"][0]["status"] == "completed"
        assert missing.status_code == 404
        achievements = await client.get("/api/v1/cpd/portfolio/achievements", headers=teacher_headers)
        assert [a["title"] for a in achievements.json()] == ["Mentorship Goal: Write a class behaviour plan"]

    async def test_complete_mentorship(self, client, other_teacher, teacher_headers, other_headers):
        mentorship = await start_mentorship(client, teacher_headers, other_teacher, other_headers)
        url = f"{BASE}/mentorships/{mentorship['id']}"

        response = await client.post(
            f"{url}/complete", json={"reflection": "I now plan behaviour proactively."}, headers=teacher_headers
        )

        assert response.json()["status"] == "completed"
        for headers in (teacher_headers, other_headers):
            activity = await mentorship_activity(client, headers)
            assert activity["status"] == "Completed"
            assert activity["reflection"] == "I now plan behaviour proactively."

        reflections = await client.get("/api/v1/cpd/portfolio/reflections", headers=teacher_headers)
        assert reflections.json()[0]["tags"] == ["mentorship", "professional development"]
        mentor_achievements = await client.get("/api/v1/cpd/portfolio/achievements", headers=other_headers)
        assert mentor_achievements.json()[0]["title"] == "Completed Mentorship as Mentor"

        closed = await client.post(
            f"{url}/meetings", json={"date": "2026-11-01T10:00:00Z", "duration": 30, "format": "video"},
            headers=other_headers,
        )
        assert closed.status_code == 400

    async def test_analytics(self, client, other_teacher, teacher_headers, other_headers):
        mentorship = await start_mentorship(client, teacher_headers, other_teacher, other_headers)
        await client.post(
            f"{BASE}/mentorships/{mentorship['id']}/meetings",
            json={"date": "2026-10-01T10:00:00Z", "duration": 120, "format": "video", "status": "completed"},
            headers=other_headers,
        )

        response = await client.get(f"{BASE}/analytics", headers=other_headers)

        data = response.json()
        assert data["overview"]["active_mentorships"] == 1
        assert data["overview"]["completed_meetings"] == 1
        assert data["overview"]["total_meeting_hours"] == 2.0
        assert data["overview"]["total_cpd_points"] == 2.0
        assert data["expertise_distribution"] == {"2": 1}
        assert len(data["monthly"]) == 12
