"""
Tests for candidate record operations.
"""

import logging

import pytest

from api.schemas.candidates import CandidateFilters
from api.services import candidates as candidate_service
from core.config import settings
from core.exceptions import InvalidQueryError, NotFoundError


class TestListCandidates:

    @pytest.mark.asyncio
    async def test_storage_order_kept(self, seeded_store):
        result = await candidate_service.list_candidates(seeded_store, CandidateFilters())

        assert [c.id for c in result.candidates] == ["candidate-1", "candidate-2", "candidate-3"]
        assert result.pagination.total_items == 3
        assert result.pagination.total_pages == 1

    @pytest.mark.asyncio
    async def test_search_matches_name_or_email(self, seeded_store):
        by_name = await candidate_service.list_candidates(seeded_store, CandidateFilters(search="bob"))
        by_email = await candidate_service.list_candidates(seeded_store, CandidateFilters(search="TEST.ORG"))

        assert [c.id for c in by_name.candidates] == ["candidate-2"]
        assert [c.id for c in by_email.candidates] == ["candidate-3"]

    @pytest.mark.asyncio
    async def test_stage_filter(self, seeded_store):
        result = await candidate_service.list_candidates(seeded_store, CandidateFilters(stage="tech"))

        assert [c.id for c in result.candidates] == ["candidate-2"]

    @pytest.mark.asyncio
    async def test_page_past_end_is_empty(self, seeded_store):
        result = await candidate_service.list_candidates(
            seeded_store, CandidateFilters(page=5, page_size=2)
        )

        assert result.candidates == []
        assert result.pagination.total_pages == 2

    @pytest.mark.asyncio
    async def test_zero_page_size_rejected(self, seeded_store):
        with pytest.raises(InvalidQueryError):
            await candidate_service.list_candidates(seeded_store, CandidateFilters(page_size=0))

    @pytest.mark.asyncio
    async def test_by_job(self, seeded_store):
        result = await candidate_service.list_candidates_by_job(seeded_store, "job-1")
        unknown = await candidate_service.list_candidates_by_job(seeded_store, "job-x")

        assert [c.id for c in result] == ["candidate-1", "candidate-2"]
        assert unknown == []


class TestUpdateCandidate:

    @pytest.mark.asyncio
    async def test_shallow_merge(self, seeded_store):
        candidate = await candidate_service.update_candidate(
            seeded_store, "candidate-1", {"location": "Lisbon"}
        )

        assert candidate.location == "Lisbon"
        assert candidate.name == "Alice Johnson"
        assert (await seeded_store.get("candidates", "candidate-1"))["location"] == "Lisbon"

    @pytest.mark.asyncio
    async def test_missing_candidate(self, store):
        with pytest.raises(NotFoundError, match="Candidate not found"):
            await candidate_service.update_candidate(store, "nope", {"name": "x"})

    @pytest.mark.asyncio
    async def test_stage_change_adds_no_timeline_entry(self, seeded_store, caplog):
        with caplog.at_level(logging.INFO, logger="api.services.candidates"):
            candidate = await candidate_service.update_candidate_stage(
                seeded_store, "candidate-1", "hired", moved_by="recruiter@company.com"
            )

        assert candidate.stage == "hired"
        assert candidate.timeline == []
        assert "r***@company.com" in caplog.text
        assert "recruiter@company.com" not in caplog.text

    @pytest.mark.asyncio
    async def test_any_stage_can_follow_any_other(self, seeded_store):
        for stage in ("rejected", "applied", "offer", "screen"):
            candidate = await candidate_service.update_candidate_stage(
                seeded_store, "candidate-2", stage
            )
            assert candidate.stage == stage

        stored = await seeded_store.query_by_equals("candidates", "stage", "screen")
        assert [r["id"] for r in stored] == ["candidate-2"]


class TestNotes:

    @pytest.mark.asyncio
    async def test_notes_appended_in_order(self, seeded_store):
        first = await candidate_service.add_candidate_note(seeded_store, "candidate-1", "Strong")
        second = await candidate_service.add_candidate_note(
            seeded_store, "candidate-1", "Follow up", created_by="lead@company.com"
        )

        candidate = await candidate_service.get_candidate(seeded_store, "candidate-1")
        assert [n.id for n in candidate.notes] == [first.id, second.id]
        assert first.created_by == settings.default_note_author
        assert second.created_by == "lead@company.com"

    @pytest.mark.asyncio
    async def test_note_on_missing_candidate(self, store):
        with pytest.raises(NotFoundError):
            await candidate_service.add_candidate_note(store, "nope", "hi")
