"""
Tests for Professional Portfolio API Endpoints
"""

from conftest import auth_headers, make_user

BASE = "/api/v1/cpd/portfolio"


async def add(client, headers, kind, **payload):
    response = await client.post(f"{BASE}/{kind}", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


async def add_achievement(client, headers, **overrides):
    payload = {
        "title": "Led whole-school SEND review",
        "description": "Reviewed provision maps across all year groups",
        "date": "2026-06-01T00:00:00Z",
        "type": "leadership",
    }
    payload.update(overrides)
    return await add(client, headers, "achievements", **payload)


async def add_evidence(client, headers, **overrides):
    payload = {
        "title": "Provision map",
        "description": "Final provision map",
        "type": "document",
        "date": "2026-06-02T00:00:00Z",
        "file_url": "https://files.example.org/map.pdf",
        "file_type": "pdf",
    }
    payload.update(overrides)
    return await add(client, headers, "evidence", **payload)


class TestProfileAndQualifications:
    async def test_profile_upsert(self, client, teacher_headers):
        payload = {"name": "Tom Teacher", "title": "SENCo", "email": "Tom@School.org.uk"}

        first = await client.put(f"{BASE}/profile", json=payload, headers=teacher_headers)
        second = await client.put(
            f"{BASE}/profile", json={**payload, "title": "Deputy Head"}, headers=teacher_headers
        )

        assert first.status_code == 200
        assert first.json()["email"] == "tom@school.org.uk"
        assert second.json()["id"] == first.json()["id"]
        assert second.json()["title"] == "Deputy Head"

    async def test_qualifications_newest_first(self, client, teacher_headers):
        await add(client, teacher_headers, "qualifications", title="PGCE", institution="UCL", year="2012")
        await add(client, teacher_headers, "qualifications", title="NASENCO", institution="Bath", year="2019")

        response = await client.get(f"{BASE}/qualifications", headers=teacher_headers)

        assert [q["title"] for q in response.json()] == ["NASENCO", "PGCE"]

    async def test_qualification_year_format(self, client, teacher_headers):
        response = await client.post(
            f"{BASE}/qualifications",
            json={"title": "PGCE", "institution": "UCL", "year": "twenty"},
            headers=teacher_headers,
        )

        assert response.status_code == 422

    async def test_qualification_update_and_delete(self, client, teacher_headers, other_headers):
        qualification = await add(
            client, teacher_headers, "qualifications", title="PGCE", institution="UCL", year="2012"
        )
        url = f"{BASE}/qualifications/{qualification['id']}"

        hidden = await client.put(url, json={"verified": True}, headers=other_headers)
        updated = await client.put(url, json={"verified": True}, headers=teacher_headers)
        null_title = await client.put(url, json={"title": None}, headers=teacher_headers)
        deleted = await client.delete(url, headers=teacher_headers)

        assert hidden.status_code == 404
        assert updated.json()["verified"] is True
        assert null_title.status_code == 422
        assert deleted.status_code == 204


class TestLinkedItems:
    async def test_evidence_links_to_achievements(self, client, teacher_headers):
        achievement = await add_achievement(client, teacher_headers)
        evidence = await add_evidence(client, teacher_headers, achievement_ids=[achievement["id"]])

        detail = await client.get(f"{BASE}/achievements/{achievement['id']}", headers=teacher_headers)
        evidence_detail = await client.get(f"{BASE}/evidence/{evidence['id']}", headers=teacher_headers)

        assert [e["id"] for e in detail.json()["evidence"]] == [evidence["id"]]
        assert [a["id"] for a in evidence_detail.json()["achievements"]] == [achievement["id"]]

    async def test_cannot_link_someone_elses_items(self, client, teacher_headers, other_headers):
        achievement = await add_achievement(client, other_headers)

        response = await client.post(
            f"{BASE}/evidence",
            json={
                "title": "Provision map",
                "description": "Map",
                "type": "document",
                "date": "2026-06-02T00:00:00Z",
                "file_url": "https://files.example.org/map.pdf",
                "file_type": "pdf",
                "achievement_ids": [achievement["id"]],
            },
            headers=teacher_headers,
        )

        assert response.status_code == 400

    async def test_reflection_cites_evidence_and_unlinks_on_delete(self, client, teacher_headers):
        evidence = await add_evidence(client, teacher_headers)
        reflection = await add(
            client,
            teacher_headers,
            "reflections",
            title="What the review taught me",
            content="Earlier identification matters.",
            date="2026-06-10T00:00:00Z",
            evidence_ids=[evidence["id"]],
        )

        cited = await client.get(f"{BASE}/evidence/{evidence['id']}", headers=teacher_headers)
        assert [r["id"] for r in cited.json()["reflections"]] == [reflection["id"]]

        await client.delete(f"{BASE}/evidence/{evidence['id']}", headers=teacher_headers)

        detail = await client.get(f"{BASE}/reflections/{reflection['id']}", headers=teacher_headers)
        assert detail.json()["reflection"]["evidence_ids"] == []
        assert detail.json()["evidence"] == []

    async def test_update_replaces_links(self, client, teacher_headers):
        first = await add_achievement(client, teacher_headers, title="First award")
        second = await add_achievement(client, teacher_headers, title="Second award")
        evidence = await add_evidence(client, teacher_headers, achievement_ids=[first["id"]])

        response = await client.put(
            f"{BASE}/evidence/{evidence['id']}", json={"achievement_ids": [second["id"]]}, headers=teacher_headers
        )

        assert response.json()["achievement_ids"] == [second["id"]]

    async def test_visibility_filter(self, client, teacher_headers):
        await add_achievement(client, teacher_headers, title="Public award")
        await add_achievement(client, teacher_headers, title="Private note", visibility="private")

        everything = await client.get(f"{BASE}/achievements", headers=teacher_headers)
        public = await client.get(f"{BASE}/achievements", params={"visibility": "public"}, headers=teacher_headers)

        assert len(everything.json()) == 2
        assert [a["title"] for a in public.json()] == ["Public award"]


class TestWholePortfolio:
    async def test_colleague_sees_public_items_only(self, client, teacher, teacher_headers, other_headers):
        await add_achievement(client, teacher_headers, title="Public award")
        await add_achievement(client, teacher_headers, title="Private note", visibility="private")

        response = await client.get(f"{BASE}/users/{teacher.id}", headers=other_headers)

        assert response.status_code == 200
        assert [a["title"] for a in response.json()["achievements"]] == ["Public award"]

    async def test_other_tenant_cannot_view(self, client, db_session, teacher):
        outsider = await make_user(db_session, email="head@school-b.org.uk", tenant_id="school-b")

        response = await client.get(f"{BASE}/users/{teacher.id}", headers=auth_headers(outsider))

        assert response.status_code == 404

    async def test_analytics(self, client, teacher_headers):
        await client.put(f"{BASE}/profile", json={"name": "Tom Teacher", "title": "SENCo"}, headers=teacher_headers)
        await add_achievement(client, teacher_headers)
        await add_evidence(client, teacher_headers)
        await client.post(
            "/api/v1/cpd/activities",
            json={
                "title": "Autism awareness",
                "type": "course",
                "date": "2026-05-01T09:00:00Z",
                "duration": 3,
                "points": 6,
                "status": "Completed",
            },
            headers=teacher_headers,
        )

        response = await client.get(f"{BASE}/analytics", headers=teacher_headers)

        data = response.json()
        assert data["counts"] == {"achievements": 1, "evidence": 1, "reflections": 0, "qualifications": 0}
        assert data["completeness"] == 20 + 5 + 4
        assert data["total_cpd_points"] == 6
        assert data["total_cpd_hours"] == 3
        assert len(data["recent_cpd_activities"]) == 1

        portfolio = await client.get(BASE, headers=teacher_headers)
        assert portfolio.json()["profile"]["title"] == "SENCo"
        assert len(portfolio.json()["cpd_activities"]) == 1
