"""
Test suite for job-related endpoints.

Tests cover:
- Job creation
- Job retrieval and filtering
- Job updates
- Job deletion
"""


class TestJobCreation:
    """Tests for job creation endpoint"""

    new_job = {
        "title": "Data Scientist",
        "salary": 120000,
        "equity": "0.002",
        "companyHandle": "c2",
    }

    def test_create_job_success(self, client, admin_headers):
        """Admin creates a job and gets its generated id back"""
        response = client.post("/api/v1/jobs/", json=self.new_job, headers=admin_headers)

        assert response.status_code == 201
        data = response.json()
        assert isinstance(data["id"], int)
        assert data["title"] == "Data Scientist"
        assert data["equity"] == "0.002"
        assert data["companyHandle"] == "c2"

    def test_create_job_non_admin(self, client, u1_headers):
        response = client.post("/api/v1/jobs/", json=self.new_job, headers=u1_headers)

        assert response.status_code == 403

    def test_create_job_missing_fields(self, client, admin_headers):
        """Test job creation with missing required fields"""
        response = client.post("/api/v1/jobs/", json={"title": "Test Job"}, headers=admin_headers)

        assert response.status_code == 422

    def test_create_job_equity_out_of_range(self, client, admin_headers):
        response = client.post("/api/v1/jobs/", json={**self.new_job, "equity": "1.5"}, headers=admin_headers)

        assert response.status_code == 422

    def test_create_job_negative_salary(self, client, admin_headers):
        response = client.post("/api/v1/jobs/", json={**self.new_job, "salary": -1}, headers=admin_headers)

        assert response.status_code == 422

    def test_create_job_unknown_company(self, client, admin_headers):
        response = client.post("/api/v1/jobs/", json={**self.new_job, "companyHandle": "nope"},
                               headers=admin_headers)

        assert response.status_code == 404

    def test_create_job_duplicate(self, client, admin_headers):
        response = client.post("/api/v1/jobs/", json={**self.new_job, "title": "Engineer", "companyHandle": "c1"},
                               headers=admin_headers)

        assert response.status_code == 400


class TestJobRetrieval:
    """Tests for job retrieval endpoints"""

    def test_get_job_by_id(self, client, seed_data):
        job_id = seed_data["job_ids"]["Engineer"]
        response = client.get(f"/api/v1/jobs/{job_id}")

        assert response.status_code == 200
        assert response.json() == {
            "id": job_id,
            "title": "Engineer",
            "salary": 100000,
            "equity": "0.01",
            "companyHandle": "c1",
        }

    def test_get_nonexistent_job(self, client, seed_data):
        """Test retrieving a job that doesn't exist"""
        response = client.get("/api/v1/jobs/99999")

        assert response.status_code == 404
        assert "no job" in response.json()["detail"].lower()

    def test_list_jobs(self, client, seed_data):
        """Jobs are listed by title"""
        response = client.get("/api/v1/jobs/")

        assert response.status_code == 200
        assert [j["title"] for j in response.json()] == ["Designer", "Engineer", "Senior Engineer"]

    def test_filter_by_title(self, client, seed_data):
        response = client.get("/api/v1/jobs/?title=eng")

        assert response.status_code == 200
        assert [j["title"] for j in response.json()] == ["Engineer", "Senior Engineer"]

    def test_min_salary_is_exclusive(self, client, seed_data):
        response = client.get("/api/v1/jobs/?minSalary=100000")

        assert [j["title"] for j in response.json()] == ["Senior Engineer"]

    def test_filter_by_salary_and_equity(self, client, seed_data):
        response = client.get("/api/v1/jobs/?minSalary=90000&hasEquity=true")

        assert response.status_code == 200
        assert [j["title"] for j in response.json()] == ["Engineer"]

    def test_filter_unknown_key(self, client, seed_data):
        response = client.get("/api/v1/jobs/?companyHandle=c1")

        assert response.status_code == 400
        assert "companyHandle" in response.json()["detail"]


class TestJobUpdate:
    """Tests for job updates"""

    def test_update_job(self, client, seed_data, admin_headers):
        job_id = seed_data["job_ids"]["Designer"]
        response = client.patch(f"/api/v1/jobs/{job_id}", json={"salary": 90000, "equity": "0.1"},
                                headers=admin_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["salary"] == 90000
        assert data["equity"] == "0.1"
        assert data["title"] == "Designer"

    def test_update_company_handle_rejected(self, client, seed_data, admin_headers):
        job_id = seed_data["job_ids"]["Designer"]
        response = client.patch(f"/api/v1/jobs/{job_id}", json={"companyHandle": "c2"}, headers=admin_headers)

        assert response.status_code == 422

    def test_update_nonexistent_job(self, client, admin_headers):
        response = client.patch("/api/v1/jobs/999999", json={"salary": 100}, headers=admin_headers)

        assert response.status_code == 404

    def test_retitle_onto_existing_job(self, client, seed_data, admin_headers):
        job_id = seed_data["job_ids"]["Designer"]
        response = client.patch(f"/api/v1/jobs/{job_id}", json={"title": "Engineer"}, headers=admin_headers)

        assert response.status_code == 400
        assert "duplicate" in response.json()["detail"].lower()

    def test_update_non_admin(self, client, seed_data, u1_headers):
        job_id = seed_data["job_ids"]["Designer"]
        response = client.patch(f"/api/v1/jobs/{job_id}", json={"salary": 1}, headers=u1_headers)

        assert response.status_code == 403


class TestJobDeletion:
    """Tests for job deletion"""

    def test_delete_job(self, client, seed_data, admin_headers):
        """Test deleting a job"""
        job_id = seed_data["job_ids"]["Designer"]
        response = client.delete(f"/api/v1/jobs/{job_id}", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {"deleted": job_id}

        get_response = client.get(f"/api/v1/jobs/{job_id}")
        assert get_response.status_code == 404

    def test_delete_nonexistent_job(self, client, admin_headers):
        """Test deleting a job that doesn't exist"""
        response = client.delete("/api/v1/jobs/99999", headers=admin_headers)

        assert response.status_code == 404
