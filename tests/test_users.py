"""
Test suite for user endpoints.

Tests cover:
- Admin-only user creation and listing
- Same-user-or-admin access to a user's record
- Applying to jobs
"""

from app.core.security import decode_token


class TestUserCreation:
    """Tests for POST /users"""

    new_user = {
        "username": "u-new",
        "firstName": "First-new",
        "lastName": "Last-new",
        "email": "new@email.com",
        "isAdmin": True,
    }

    def test_create_admin_user_with_generated_password(self, client, admin_headers):
        response = client.post("/api/v1/users/", json=self.new_user, headers=admin_headers)

        assert response.status_code == 201
        data = response.json()
        assert data["user"] == self.new_user
        assert decode_token(data["access_token"])["sub"] == "u-new"

    def test_create_with_password_can_log_in(self, client, admin_headers):
        response = client.post("/api/v1/users/", json={**self.new_user, "password": "chosen-pw"},
                               headers=admin_headers)
        assert response.status_code == 201

        login = client.post("/api/v1/auth/token", json={"username": "u-new", "password": "chosen-pw"})
        assert login.status_code == 200

    def test_non_admin_forbidden(self, client, u1_headers):
        response = client.post("/api/v1/users/", json=self.new_user, headers=u1_headers)

        assert response.status_code == 403


class TestUserRetrieval:
    """Tests for GET /users and GET /users/{username}"""

    def test_list_as_admin(self, client, admin_headers):
        response = client.get("/api/v1/users/", headers=admin_headers)

        assert response.status_code == 200
        assert [u["username"] for u in response.json()] == ["admin", "u1"]

    def test_list_non_admin(self, client, u1_headers):
        response = client.get("/api/v1/users/", headers=u1_headers)

        assert response.status_code == 403

    def test_get_self(self, client, u1_headers):
        response = client.get("/api/v1/users/u1", headers=u1_headers)

        assert response.status_code == 200
        assert response.json() == {
            "username": "u1",
            "firstName": "U1F",
            "lastName": "U1L",
            "email": "u1@example.com",
            "isAdmin": False,
            "jobs": [],
        }

    def test_get_other_user_forbidden(self, client, u1_headers):
        response = client.get("/api/v1/users/admin", headers=u1_headers)

        assert response.status_code == 403

    def test_admin_gets_other_user(self, client, admin_headers):
        response = client.get("/api/v1/users/u1", headers=admin_headers)

        assert response.status_code == 200

    def test_admin_gets_missing_user(self, client, admin_headers):
        response = client.get("/api/v1/users/nope", headers=admin_headers)

        assert response.status_code == 404


class TestUserUpdate:
    """Tests for PATCH /users/{username}"""

    def test_update_self(self, client, u1_headers):
        response = client.patch("/api/v1/users/u1", json={"firstName": "New"}, headers=u1_headers)

        assert response.status_code == 200
        assert response.json()["firstName"] == "New"

    def test_update_other_forbidden(self, client, u1_headers):
        response = client.patch("/api/v1/users/admin", json={"firstName": "New"}, headers=u1_headers)

        assert response.status_code == 403

    def test_cannot_grant_admin(self, client, u1_headers):
        response = client.patch("/api/v1/users/u1", json={"isAdmin": True}, headers=u1_headers)

        assert response.status_code == 422

    def test_update_password(self, client, u1_headers):
        response = client.patch("/api/v1/users/u1", json={"password": "new-password"}, headers=u1_headers)
        assert response.status_code == 200

        login = client.post("/api/v1/auth/token", json={"username": "u1", "password": "new-password"})
        assert login.status_code == 200


class TestUserDeletion:
    """Tests for DELETE /users/{username}"""

    def test_delete_self(self, client, u1_headers):
        response = client.delete("/api/v1/users/u1", headers=u1_headers)

        assert response.status_code == 200
        assert response.json() == {"deleted": "u1"}

    def test_admin_deletes_user(self, client, admin_headers):
        response = client.delete("/api/v1/users/u1", headers=admin_headers)

        assert response.status_code == 200

    def test_delete_other_forbidden(self, client, u1_headers):
        response = client.delete("/api/v1/users/admin", headers=u1_headers)

        assert response.status_code == 403


class TestApplications:
    """Tests for POST /users/{username}/jobs/{job_id}"""

    def test_apply(self, client, seed_data, u1_headers):
        job_id = seed_data["job_ids"]["Engineer"]
        response = client.post(f"/api/v1/users/u1/jobs/{job_id}", headers=u1_headers)

        assert response.status_code == 200
        assert response.json() == {"applied": job_id}
        assert client.get("/api/v1/users/u1", headers=u1_headers).json()["jobs"] == [job_id]

    def test_apply_twice(self, client, seed_data, u1_headers):
        job_id = seed_data["job_ids"]["Engineer"]
        client.post(f"/api/v1/users/u1/jobs/{job_id}", headers=u1_headers)

        response = client.post(f"/api/v1/users/u1/jobs/{job_id}", headers=u1_headers)

        assert response.status_code == 400

    def test_apply_missing_job(self, client, u1_headers):
        response = client.post("/api/v1/users/u1/jobs/999999", headers=u1_headers)

        assert response.status_code == 404

    def test_apply_for_other_user_forbidden(self, client, seed_data, u1_headers):
        job_id = seed_data["job_ids"]["Engineer"]
        response = client.post(f"/api/v1/users/admin/jobs/{job_id}", headers=u1_headers)

        assert response.status_code == 403
