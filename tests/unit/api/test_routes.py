"""
Tests for the HTTP surface of the mock API.

Each test gets its own app on a fresh in-memory database, seeded at startup.
"""

import pytest
from fastapi.testclient import TestClient

from api.client import ApiClient
from api.main import create_app
from core.simulation import SimulatedNetwork
from database.engine import build_engine, build_sessionmaker
from database.store import RecordStore
from tests.factories import make_assessment, make_candidate, make_job

SEED = {
    "jobs": [
        make_job("job-1", order=0),
        make_job("job-2", title="Backend Engineer", slug="backend-engineer", status="draft", order=1),
    ],
    "candidates": [
        make_candidate("candidate-1"),
        make_candidate("candidate-2", name="Bob Smith", email="bob@example.com", stage="tech"),
    ],
    "assessments": [make_assessment()],
}


def _client(failure_rate: float = 0.0) -> TestClient:
    engine = build_engine("sqlite+aiosqlite://")
    api_client = ApiClient(
        RecordStore(build_sessionmaker(engine)), SimulatedNetwork(0, 0, failure_rate)
    )
    return TestClient(create_app(api_client, engine=engine, seed_data=SEED))


@pytest.fixture
def client():
    with _client() as test_client:
        yield test_client


@pytest.fixture
def failing_client():
    with _client(failure_rate=1.0) as test_client:
        yield test_client


class TestHealth:

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "version": "0.1.0"}

    def test_ready_reports_seeded_counts(self, client):
        response = client.get("/ready")

        assert response.json() == {
            "status": "ready",
            "records": {"jobs": 2, "candidates": 2, "assessments": 1},
        }


class TestJobRoutes:

    def test_list_with_filters(self, client):
        response = client.get("/api/jobs", params={"status": "draft", "pageSize": 5})

        assert response.status_code == 200
        body = response.json()
        assert [job["id"] for job in body["jobs"]] == ["job-2"]
        assert body["pagination"] == {
            "currentPage": 1,
            "pageSize": 5,
            "totalItems": 1,
            "totalPages": 1,
        }

    def test_invalid_page_size_is_400(self, client):
        response = client.get("/api/jobs", params={"pageSize": 0})

        assert response.status_code == 400
        assert set(response.json()) == {"error", "timestamp"}

    def test_unknown_status_is_422(self, client):
        response = client.get("/api/jobs", params={"status": "closed"})

        assert response.status_code == 422
        assert response.json()["error"] == "Request validation failed"

    def test_unknown_sort_falls_back_to_order(self, client):
        response = client.get("/api/jobs", params={"sort": "salary"})

        assert response.status_code == 200
        assert [job["id"] for job in response.json()["jobs"]] == ["job-1", "job-2"]

    def test_missing_job_is_404(self, client):
        response = client.get("/api/jobs/nope")

        assert response.status_code == 404
        body = response.json()
        assert body["error"] == "Job not found"
        assert body["timestamp"].endswith("Z")

    def test_create_update_delete(self, client):
        created = client.post("/api/jobs", json={"title": "Data  Engineer", "tags": ["SQL"]})
        assert created.status_code == 201
        job = created.json()
        assert job["slug"] == "data-engineer"
        assert job["order"] == 2

        updated = client.patch(f"/api/jobs/{job['id']}", json={"status": "archived"})
        assert updated.json()["status"] == "archived"
        assert updated.json()["title"] == "Data  Engineer"

        deleted = client.delete(f"/api/jobs/{job['id']}")
        assert deleted.json() == {"success": True}
        assert client.get(f"/api/jobs/{job['id']}").status_code == 404

    def test_reorder_is_not_shadowed_by_job_id(self, client):
        response = client.patch("/api/jobs/reorder", json={"jobIds": ["job-2", "job-1"]})

        assert response.status_code == 200
        assert response.json() == {"success": True}
        listed = client.get("/api/jobs", params={"sort": "order"}).json()["jobs"]
        assert [(job["id"], job["order"]) for job in listed] == [("job-2", 0), ("job-1", 1)]

    def test_injected_failure_is_500(self, failing_client):
        response = failing_client.get("/api/jobs")

        assert response.status_code == 500
        assert response.json()["error"] == "Failed to fetch jobs"


class TestCandidateRoutes:

    def test_search_and_stage(self, client):
        response = client.get("/api/candidates", params={"search": "BOB", "stage": "tech"})

        assert [c["id"] for c in response.json()["candidates"]] == ["candidate-2"]

    def test_by_job(self, client):
        response = client.get("/api/candidates/job/job-1")

        assert [c["id"] for c in response.json()] == ["candidate-1", "candidate-2"]
        assert client.get("/api/candidates/job/unknown").json() == []

    def test_stage_change_by_patch(self, client):
        response = client.patch("/api/candidates/candidate-1", json={"stage": "screen"})

        assert response.status_code == 200
        assert response.json()["stage"] == "screen"
        assert client.get("/api/candidates/candidate-1").json()["stage"] == "screen"

    def test_invalid_stage_is_422(self, client):
        response = client.patch("/api/candidates/candidate-1", json={"stage": "interview"})

        assert response.status_code == 422

    def test_add_note(self, client):
        response = client.post(
            "/api/candidates/candidate-1/notes",
            json={"content": "  Great culture fit  ", "createdBy": "Dana"},
        )

        assert response.status_code == 201
        note = response.json()
        assert note["content"] == "Great culture fit"
        assert note["createdBy"] == "Dana"
        notes = client.get("/api/candidates/candidate-1").json()["notes"]
        assert [n["id"] for n in notes] == [note["id"]]

    def test_note_for_missing_candidate(self, client):
        response = client.post("/api/candidates/ghost/notes", json={"content": "hi"})

        assert response.status_code == 404
        assert response.json()["error"] == "Candidate not found"


class TestAssessmentRoutes:

    def test_list_and_get(self, client):
        assert [a["id"] for a in client.get("/api/assessments").json()] == ["assessment-1"]

        response = client.get("/api/assessments/job-1")
        question = response.json()["sections"][0]["questions"][0]
        assert question["correctAnswer"] == "A"

    def test_put_uses_path_job_id(self, client):
        body = make_assessment("assessment-2", job_id="job-1", title="Backend Quiz")

        response = client.put("/api/assessments/job-2", json=body)

        assert response.status_code == 200
        assert response.json()["jobId"] == "job-2"
        assert client.get("/api/assessments/job-2").json()["title"] == "Backend Quiz"
        assert client.get("/api/assessments/job-1").json()["id"] == "assessment-1"

    def test_put_invalid_body_is_422(self, client):
        response = client.put("/api/assessments/job-1", json={"id": "x"})

        assert response.status_code == 422
        fields = [detail["field"] for detail in response.json()["details"]]
        assert "createdAt" in fields

    def test_delete(self, client):
        assert client.delete("/api/assessments/job-1").json() == {"success": True}
        assert client.get("/api/assessments/job-1").status_code == 404
        assert client.delete("/api/assessments/job-1").status_code == 404


class TestOpenApi:

    def test_error_responses_documented(self, client):
        schema = client.get("/openapi.json").json()

        error_ref = {"$ref": "#/components/schemas/ErrorResponse"}
        get_job = schema["paths"]["/api/jobs/{job_id}"]["get"]["responses"]
        for code in ("404", "422", "500"):
            assert get_job[code]["content"]["application/json"]["schema"] == error_ref
        assert set(schema["components"]["schemas"]["ErrorResponse"]["required"]) == {"error"}

    def test_job_sort_is_free_text(self, client):
        schema = client.get("/openapi.json").json()

        params = schema["paths"]["/api/jobs"]["get"]["parameters"]
        sort = next(param for param in params if param["name"] == "sort")
        assert sort["schema"]["type"] == "string"
        assert "enum" not in sort["schema"]
