"""
Tests for User Management API Endpoints
"""


class TestListUsers:
    async def test_admin_lists_users(self, client, admin_headers, teacher, student):
        response = await client.get("/api/v1/users/", headers=admin_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 3
        assert data["page"] == 1

    async def test_filter_by_role_and_search(self, client, admin_headers, teacher, student):
        by_role = await client.get("/api/v1/users/?role=student", headers=admin_headers)
        assert [u["email"] for u in by_role.json()["items"]] == [student.email]

        by_search = await client.get("/api/v1/users/?search=tom", headers=admin_headers)
        assert [u["email"] for u in by_search.json()["items"]] == [teacher.email]

    async def test_pagination(self, client, admin_headers, teacher, student):
        response = await client.get("/api/v1/users/?page=2&page_size=2", headers=admin_headers)

        data = response.json()
        assert len(data["items"]) == 1
        assert data["pages"] == 2

    async def test_non_admin_forbidden(self, client, teacher_headers):
        response = await client.get("/api/v1/users/", headers=teacher_headers)

        assert response.status_code == 403


class TestGetAndUpdateUser:
    async def test_get_self(self, client, teacher, teacher_headers):
        response = await client.get(f"/api/v1/users/{teacher.id}", headers=teacher_headers)

        assert response.status_code == 200
        assert response.json()["name"] == "Tom Teacher"

    async def test_cannot_get_other_user(self, client, teacher_headers, student):
        response = await client.get(f"/api/v1/users/{student.id}", headers=teacher_headers)

        assert response.status_code == 403

    async def test_admin_gets_unknown_user(self, client, admin_headers):
        response = await client.get(
            "/api/v1/users/00000000-0000-0000-0000-000000000000", headers=admin_headers
        )

        assert response.status_code == 404

    async def test_update_own_name(self, client, teacher, teacher_headers):
        response = await client.put(
            f"/api/v1/users/{teacher.id}", json={"name": "Thomas"}, headers=teacher_headers
        )

        assert response.status_code == 200
        assert response.json()["name"] == "Thomas"

    async def test_non_admin_cannot_change_role(self, client, teacher, teacher_headers):
        response = await client.put(
            f"/api/v1/users/{teacher.id}", json={"role": "admin"}, headers=teacher_headers
        )

        assert response.status_code == 403

    async def test_non_admin_cannot_change_tenant(self, client, teacher, teacher_headers):
        response = await client.put(
            f"/api/v1/users/{teacher.id}", json={"tenant_id": "school-a"}, headers=teacher_headers
        )

        assert response.status_code == 403

    async def test_admin_assigns_tenant(self, client, admin_headers, teacher):
        response = await client.put(
            f"/api/v1/users/{teacher.id}", json={"tenant_id": "school-a"}, headers=admin_headers
        )

        assert response.json()["tenant_id"] == "school-a"

    async def test_null_name_rejected(self, client, teacher, teacher_headers):
        response = await client.put(
            f"/api/v1/users/{teacher.id}", json={"name": None}, headers=teacher_headers
        )

        assert response.status_code == 422

    async def test_admin_changes_role(self, client, admin_headers, teacher):
        response = await client.put(
            f"/api/v1/users/{teacher.id}",
            json={"role": "educational_psychologist"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["role"] == "educational_psychologist"

    async def test_email_conflict(self, client, teacher, teacher_headers, student):
        response = await client.put(
            f"/api/v1/users/{teacher.id}", json={"email": student.email}, headers=teacher_headers
        )

        assert response.status_code == 409


class TestDeleteUser:
    async def test_admin_soft_deletes(self, client, admin_headers, student, student_headers):
        response = await client.delete(f"/api/v1/users/{student.id}", headers=admin_headers)

        assert response.status_code == 204
        assert student.deleted_at is not None
        assert student.is_active is False

        me = await client.get("/api/v1/auth/me", headers=student_headers)
        assert me.status_code == 401

    async def test_teacher_cannot_delete(self, client, teacher_headers, student):
        response = await client.delete(f"/api/v1/users/{student.id}", headers=teacher_headers)

        assert response.status_code == 403
