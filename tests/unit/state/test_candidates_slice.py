"""
Tests for the candidates slice.
"""

import pytest

from api.schemas.candidates import CANDIDATE_STAGES
from state import candidates as candidates_slice
from state.base import Status


async def _load_all_views(candidates, api, candidate_id="candidate-1", job_id="job-1"):
    await candidates_slice.fetch_candidates(candidates, api.candidates)
    await candidates_slice.fetch_candidates_by_job(candidates, api.candidates, job_id)
    await candidates_slice.fetch_candidate_by_id(candidates, api.candidates, candidate_id)


class TestStageChanges:

    @pytest.mark.asyncio
    async def test_every_view_reflects_new_stage(self, seeded_store, api):
        candidates = candidates_slice.create_candidates_slice()
        await _load_all_views(candidates, api)

        await candidates_slice.update_candidate_stage(
            candidates, api.candidates, "candidate-1", "hired", moved_by="lead@company.com"
        )

        state = candidates.state
        assert candidates_slice.select_candidate_by_id(state, "candidate-1").stage == "hired"
        assert next(c for c in state.job_candidates if c.id == "candidate-1").stage == "hired"
        assert state.current_candidate.stage == "hired"

    @pytest.mark.asyncio
    async def test_failed_stage_change_leaves_views(self, seeded_store, api, failing_api):
        candidates = candidates_slice.create_candidates_slice()
        await _load_all_views(candidates, api)

        action = await candidates_slice.update_candidate_stage(
            candidates, failing_api.candidates, "candidate-1", "offer"
        )

        assert action.type == candidates_slice.UPDATE_STAGE.rejected
        assert candidates.state.current_candidate.stage == "applied"
        assert candidates.consume_error() == "Failed to update candidate stage"

    @pytest.mark.asyncio
    async def test_kanban_columns_follow_pipeline_order(self, seeded_store, api):
        candidates = candidates_slice.create_candidates_slice()
        await candidates_slice.fetch_candidates_by_job(candidates, api.candidates, "job-1")

        board = candidates_slice.select_candidates_by_stage(candidates.state, "job-1")

        assert tuple(board) == CANDIDATE_STAGES
        assert [c.id for c in board["applied"]] == ["candidate-1"]
        assert [c.id for c in board["tech"]] == ["candidate-2"]
        assert board["hired"] == []


class TestNotes:

    @pytest.mark.asyncio
    async def test_note_appended_in_every_view(self, seeded_store, api):
        candidates = candidates_slice.create_candidates_slice()
        await _load_all_views(candidates, api)

        await candidates_slice.add_candidate_note(candidates, api.candidates, "candidate-1", "First")
        await candidates_slice.add_candidate_note(candidates, api.candidates, "candidate-1", "  Second  ")

        state = candidates.state
        for view in (
            candidates_slice.select_candidate_by_id(state, "candidate-1"),
            next(c for c in state.job_candidates if c.id == "candidate-1"),
            state.current_candidate,
        ):
            assert [n.content for n in view.notes] == ["First", "  Second  "]

    @pytest.mark.asyncio
    async def test_existing_notes_never_reordered(self, seeded_store, api):
        candidates = candidates_slice.create_candidates_slice()
        await candidates_slice.fetch_candidate_by_id(candidates, api.candidates, "candidate-2")
        for content in ("a", "b", "c"):
            await candidates_slice.add_candidate_note(candidates, api.candidates, "candidate-2", content)
        before = [n.id for n in candidates.state.current_candidate.notes]

        await candidates_slice.add_candidate_note(candidates, api.candidates, "candidate-2", "d")

        after = [n.id for n in candidates.state.current_candidate.notes]
        assert after[:-1] == before
        assert candidates.state.current_candidate.notes[-1].content == "d"


class TestListing:

    @pytest.mark.asyncio
    async def test_filters_then_fetch(self, seeded_store, api):
        candidates = candidates_slice.create_candidates_slice()
        candidates.dispatch(candidates_slice.set_filters(stage="tech"))

        await candidates_slice.fetch_candidates(candidates, api.candidates)

        assert [c.id for c in candidates.state.candidates] == ["candidate-2"]
        assert candidates.state.status == Status.IDLE

    @pytest.mark.asyncio
    async def test_update_candidate_replaces_in_list(self, seeded_store, api):
        candidates = candidates_slice.create_candidates_slice()
        await candidates_slice.fetch_candidates(candidates, api.candidates)

        await candidates_slice.update_candidate(
            candidates, api.candidates, "candidate-3", {"experience": "10 years"}
        )

        updated = candidates_slice.select_candidate_by_id(candidates.state, "candidate-3")
        assert updated.experience == "10 years"

    def test_clear_current_candidate(self):
        state = candidates_slice.reduce(
            candidates_slice.CandidatesState(), candidates_slice.clear_current_candidate()
        )

        assert state.current_candidate is None
