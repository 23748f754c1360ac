"""
Tests for Emotional Regulation API Endpoints
"""

from sqlalchemy import select

from edpsych.core.models import RegulationLog

BASE = "/api/v1/emotional-regulation"


async def check_in(client, headers, emotion, intensity, timestamp, triggers=None):
    response = await client.post(
        f"{BASE}/records",
        json={"emotion": emotion, "intensity": intensity, "timestamp": timestamp, "triggers": triggers},
        headers=headers,
    )
    assert response.status_code == 201
    return response.json()


class TestRecordsAndJournal:
    async def test_record_defaults_timestamp(self, client, student, student_headers):
        response = await client.post(
            f"{BASE}/records", json={"emotion": "Happy", "intensity": 6}, headers=student_headers
        )

        assert response.status_code == 201
        data = response.json()
        assert data["user_id"] == str(student.id)
        assert data["timestamp"] is not None

    async def test_intensity_out_of_range(self, client, student_headers):
        response = await client.post(
            f"{BASE}/records", json={"emotion": "Happy", "intensity": 0}, headers=student_headers
        )

        assert response.status_code == 422

    async def test_list_filters_by_emotion(self, client, student_headers, teacher_headers):
        await check_in(client, student_headers, "Happy", 5, "2026-10-01T09:00:00Z")
        await check_in(client, student_headers, "Anxious", 7, "2026-10-02T09:00:00Z")
        await check_in(client, teacher_headers, "Anxious", 3, "2026-10-02T10:00:00Z")

        response = await client.get(f"{BASE}/records?emotions=Anxious,Sad", headers=student_headers)

        data = response.json()
        assert len(data) == 1
        assert data[0]["intensity"] == 7

    async def test_journal(self, client, student_headers):
        created = await client.post(
            f"{BASE}/journal",
            json={"title": "Maths test", "content": "Felt nervous before", "emotions": ["Nervous"]},
            headers=student_headers,
        )
        assert created.status_code == 201

        response = await client.get(f"{BASE}/journal", headers=student_headers)
        assert [entry["title"] for entry in response.json()] == ["Maths test"]


class TestSettings:
    async def test_defaults_created_on_first_read(self, client, student_headers):
        response = await client.get(f"{BASE}/settings", headers=student_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["pattern_recognition_enabled"] is True
        assert data["reminder_frequency"] == "medium"
        assert data["strategy_preferences"]["complexity"] == "moderate"

    async def test_update_is_logged(self, client, student, student_headers, db_session):
        response = await client.put(
            f"{BASE}/settings", json={"reminder_frequency": "high"}, headers=student_headers
        )

        assert response.json()["reminder_frequency"] == "high"
        logs = (
            await db_session.execute(select(RegulationLog).where(RegulationLog.user_id == student.id))
        ).scalars().all()
        assert [log.action for log in logs] == ["update_settings"]

    async def test_invalid_reminder_frequency(self, client, student_headers):
        response = await client.put(
            f"{BASE}/settings", json={"reminder_frequency": "hourly"}, headers=student_headers
        )

        assert response.status_code == 422

    async def test_null_reminder_frequency_rejected(self, client, student_headers):
        response = await client.put(
            f"{BASE}/settings", json={"reminder_frequency": None}, headers=student_headers
        )

        assert response.status_code == 422

    async def test_pattern_settings_toggle(self, client, student_headers):
        response = await client.put(
            f"{BASE}/patterns/settings", json={"enabled": False}, headers=student_headers
        )

        assert response.json()["pattern_recognition_enabled"] is False


class TestPatterns:
    async def test_analysis_of_range(self, client, student_headers):
        await check_in(client, student_headers, "Anxious", 8, "2026-10-05T09:00:00Z", "Tests")
        await check_in(client, student_headers, "Anxious", 6, "2026-10-06T10:00:00Z", "Tests")
        await check_in(client, student_headers, "Calm", 3, "2026-10-06T15:00:00Z")

        response = await client.get(
            f"{BASE}/patterns",
            params={"start_date": "2026-10-01T00:00:00Z", "end_date": "2026-10-10T00:00:00Z"},
            headers=student_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["record_count"] == 3
        assert data["insights"][0]["emotion"] == "Anxious"
        assert set(data) >= {"insights", "triggers", "time", "trends", "correlations"}

    async def test_single_section_omits_others(self, client, student_headers):
        response = await client.get(f"{BASE}/patterns?analysis_type=triggers", headers=student_headers)

        data = response.json()
        assert data["triggers"] == []
        assert "insights" not in data

    async def test_inverted_range(self, client, student_headers):
        response = await client.get(
            f"{BASE}/patterns",
            params={"start_date": "2026-10-10T00:00:00Z", "end_date": "2026-10-01T00:00:00Z"},
            headers=student_headers,
        )

        assert response.status_code == 400

    async def test_unknown_analysis_type(self, client, student_headers):
        response = await client.get(f"{BASE}/patterns?analysis_type=moods", headers=student_headers)

        assert response.status_code == 422


class TestStrategies:
    async def test_requires_settings(self, client, student_headers):
        response = await client.get(f"{BASE}/strategies", headers=student_headers)

        assert response.status_code == 404

    async def test_effective_strategy_ranked_first(self, client, student_headers):
        await client.get(f"{BASE}/settings", headers=student_headers)
        for rating in (5, 4):
            feedback = await client.post(
                f"{BASE}/strategies/feedback",
                json={"strategy_id": "counting", "effectiveness": rating},
                headers=student_headers,
            )
            assert feedback.status_code == 201

        response = await client.get(f"{BASE}/strategies", headers=student_headers)

        data = response.json()
        assert data["effective_strategy_ids"] == ["counting"]
        first = data["recommendations"][0]
        assert first["strategy"]["id"] == "counting"
        assert first["reason_type"] == "effectiveness"
        assert first["score"] == 90

    async def test_filter_by_emotion_and_category(self, client, student_headers):
        await client.get(f"{BASE}/settings", headers=student_headers)

        response = await client.get(
            f"{BASE}/strategies?emotion=Lonely&categories=social", headers=student_headers
        )

        ids = [rec["strategy"]["id"] for rec in response.json()["recommendations"]]
        assert ids == ["talk-to-someone"]

    async def test_update_preferences(self, client, student_headers):
        response = await client.put(
            f"{BASE}/strategies/preferences",
            json={"preferences": {"preferred_types": ["reflective"], "complexity": "advanced"}},
            headers=student_headers,
        )

        assert response.status_code == 200
        assert response.json()["strategy_preferences"]["preferred_types"] == ["reflective"]

        strategies = await client.get(f"{BASE}/strategies", headers=student_headers)
        ids = [rec["strategy"]["id"] for rec in strategies.json()["recommendations"]]
        assert ids == ["emotion-journal"]
