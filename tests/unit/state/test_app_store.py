"""
Tests for the root application store.
"""

import logging

import pytest

from state import candidates as candidates_slice
from state import jobs as jobs_slice
from state.base import Action, Status
from state.store import AppStore


@pytest.fixture
def app_store(api):
    return AppStore(api)


class TestDispatch:

    def test_routes_by_type_prefix(self, app_store):
        app_store.dispatch(jobs_slice.set_filters(search="design"))
        app_store.dispatch(candidates_slice.set_filters(stage="offer"))

        assert app_store.jobs.state.filters.search == "design"
        assert app_store.candidates.state.filters.stage == "offer"
        assert app_store.candidates.state.filters.search == ""

    def test_unknown_prefix_is_logged_and_ignored(self, app_store, caplog):
        before = app_store.snapshot()

        with caplog.at_level(logging.WARNING):
            app_store.dispatch(Action("offers/setFilters"))

        assert app_store.snapshot() == before
        assert "offers/setFilters" in caplog.text

    def test_snapshot_has_every_slice(self, app_store):
        snapshot = app_store.snapshot()

        assert set(snapshot) == {"jobs", "candidates", "assessments"}
        assert all(state.status == Status.IDLE for state in snapshot.values())


class TestWorkflow:

    @pytest.mark.asyncio
    async def test_job_pipeline(self, seeded_store, app_store):
        await app_store.fetch_jobs({"status": "all"})
        await app_store.fetch_candidates_by_job("job-1")
        await app_store.update_candidate_stage("candidate-2", "offer")
        await app_store.add_candidate_note("candidate-2", "Strong system design")
        await app_store.fetch_assessment_by_job_id("job-1")

        snapshot = app_store.snapshot()
        assert [j.id for j in snapshot["jobs"].jobs] == ["job-1", "job-2", "job-3"]
        board = candidates_slice.select_candidates_by_stage(snapshot["candidates"], "job-1")
        assert [c.id for c in board["offer"]] == ["candidate-2"]
        assert board["offer"][0].notes[0].content == "Strong system design"
        assert snapshot["assessments"].assessments["job-1"].id == "assessment-1"

    @pytest.mark.asyncio
    async def test_job_crud(self, seeded_store, app_store):
        await app_store.fetch_jobs({"status": "all"})

        created = await app_store.create_job({"title": "Data Engineer", "tags": ["SQL"]})
        job_id = created.payload.id
        await app_store.update_job(job_id, {"status": "active"})
        await app_store.fetch_job_by_id(job_id)
        await app_store.reorder_jobs(["job-3", job_id])
        await app_store.delete_job("job-2")

        state = app_store.jobs.state
        assert state.current_job.status == "active"
        assert "job-2" not in [j.id for j in state.jobs]
        assert await seeded_store.get("jobs", "job-2") is None

    @pytest.mark.asyncio
    async def test_candidate_and_assessment_wrappers(self, seeded_store, app_store):
        await app_store.fetch_candidates({"search": "carol"})
        await app_store.fetch_candidate_by_id("candidate-3")
        await app_store.update_candidate("candidate-3", {"location": "Lisbon"})
        await app_store.fetch_all_assessments()
        await app_store.save_assessment("job-2", {
            "id": "assessment-2",
            "jobId": "job-2",
            "title": "Backend",
            "sections": [],
            "createdAt": "2024-03-01T00:00:00.000Z",
            "updatedAt": "2024-03-01T00:00:00.000Z",
        })
        await app_store.delete_assessment("job-1")

        assert [c.id for c in app_store.candidates.state.candidates] == ["candidate-3"]
        assert app_store.candidates.state.current_candidate.location == "Lisbon"
        assert [a.id for a in app_store.assessments.state.all_assessments] == ["assessment-2"]
