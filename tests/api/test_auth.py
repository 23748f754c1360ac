"""
Tests for Authentication API Endpoints
"""

from conftest import TEST_PASSWORD


class TestRegister:
    async def test_register_teacher(self, client):
        response = await client.post(
            "/api/v1/auth/register",
            json={
                "email": "New.Teacher@School.org.uk",
                "name": "New Teacher",
                "password": "long-enough-password",
            },
        )

        assert response.status_code == 201
        data = response.json()
        assert data["email"] == "new.teacher@school.org.uk"
        assert data["role"] == "teacher"
        assert "password_hash" not in data

    async def test_tenant_cannot_be_chosen_at_registration(self, client):
        response = await client.post(
            "/api/v1/auth/register",
            json={
                "email": "intruder@elsewhere.org.uk",
                "name": "Intruder",
                "password": "long-enough-password",
                "tenant_id": "school-a",
            },
        )

        assert response.status_code == 201
        assert response.json()["tenant_id"] is None

    async def test_admin_cannot_self_register(self, client):
        response = await client.post(
            "/api/v1/auth/register",
            json={"email": "boss@school.org.uk", "name": "Boss", "password": "long-enough", "role": "admin"},
        )

        assert response.status_code == 403

    async def test_duplicate_email(self, client, teacher):
        response = await client.post(
            "/api/v1/auth/register",
            json={"email": teacher.email, "name": "Copy", "password": "long-enough"},
        )

        assert response.status_code == 409
        assert teacher.email in response.json()["detail"]

    async def test_invalid_email(self, client):
        response = await client.post(
            "/api/v1/auth/register",
            json={"email": "not-an-email", "name": "X", "password": "long-enough"},
        )

        assert response.status_code == 422

    async def test_short_password(self, client):
        response = await client.post(
            "/api/v1/auth/register",
            json={"email": "x@school.org.uk", "name": "X", "password": "short"},
        )

        assert response.status_code == 422


class TestLogin:
    async def test_login_and_me(self, client, teacher):
        response = await client.post(
            "/api/v1/auth/token",
            data={"username": "TEACHER@school.org.uk", "password": TEST_PASSWORD},
        )

        assert response.status_code == 200
        token = response.json()["access_token"]
        assert response.json()["token_type"] == "bearer"

        me = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert me.status_code == 200
        assert me.json()["id"] == str(teacher.id)
        assert me.json()["last_login_at"] is not None

    async def test_wrong_password(self, client, teacher):
        response = await client.post(
            "/api/v1/auth/token",
            data={"username": teacher.email, "password": "wrong-password"},
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Incorrect email or password"

    async def test_inactive_user_cannot_login(self, client, teacher, db_session):
        teacher.is_active = False
        await db_session.commit()

        response = await client.post(
            "/api/v1/auth/token",
            data={"username": teacher.email, "password": TEST_PASSWORD},
        )

        assert response.status_code == 401

    async def test_me_requires_token(self, client):
        response = await client.get("/api/v1/auth/me")

        assert response.status_code == 401
