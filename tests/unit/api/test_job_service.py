"""
Tests for job record operations.
"""

import pytest

from api.schemas.jobs import JobFilters
from api.services import jobs as job_service
from core.exceptions import InvalidQueryError, NotFoundError
from tests.factories import make_candidate, make_job


class TestCreateJob:
    """Creating jobs."""

    @pytest.mark.asyncio
    async def test_first_job_gets_order_zero_and_slug(self, store):
        job = await job_service.create_job(store, {"title": "Backend Engineer", "status": "active"})

        assert job.order == 0
        assert job.slug == "backend-engineer"
        assert job.id.startswith("job-")
        assert job.created_at == job.updated_at
        assert await store.get("jobs", job.id) == job.to_record()

    @pytest.mark.asyncio
    async def test_order_follows_existing_count(self, seeded_store):
        job = await job_service.create_job(seeded_store, {"title": "QA Lead"})

        assert job.order == 3
        assert job.status == "draft"

    @pytest.mark.asyncio
    async def test_order_after_delete_repeats_until_reorder(self, seeded_store):
        await job_service.delete_job(seeded_store, "job-1")

        job = await job_service.create_job(seeded_store, {"title": "QA Lead"})

        assert job.order == 2
        assert (await job_service.get_job(seeded_store, "job-3")).order == 2

        await job_service.reorder_jobs(seeded_store, ["job-2", "job-3", job.id])
        listed = await job_service.list_all_jobs(seeded_store)
        assert [(j.id, j.order) for j in listed] == [("job-2", 0), ("job-3", 1), (job.id, 2)]

    @pytest.mark.asyncio
    async def test_empty_title_gives_empty_slug(self, store):
        job = await job_service.create_job(store, {})

        assert job.title == ""
        assert job.slug == ""

    @pytest.mark.asyncio
    async def test_slug_collapses_whitespace_runs(self, store):
        job = await job_service.create_job(store, {"title": "  Data   Engineer\tII "})

        assert job.slug == "-data-engineer-ii-"

    @pytest.mark.asyncio
    async def test_ids_are_unique(self, store):
        first = await job_service.create_job(store, {"title": "A"})
        second = await job_service.create_job(store, {"title": "A"})

        assert first.id != second.id
        assert first.slug == second.slug


class TestUpdateAndDelete:
    """Partial updates and deletes."""

    @pytest.mark.asyncio
    async def test_update_merges_and_bumps_updated_at(self, seeded_store):
        before = await job_service.get_job(seeded_store, "job-1")

        job = await job_service.update_job(seeded_store, "job-1", {"status": "archived"})

        assert job.status == "archived"
        assert job.title == before.title
        assert job.updated_at > before.updated_at
        assert (await seeded_store.get("jobs", "job-1"))["status"] == "archived"

    @pytest.mark.asyncio
    async def test_update_title_keeps_slug(self, seeded_store):
        job = await job_service.update_job(seeded_store, "job-1", {"title": "Staff Engineer"})

        assert job.slug == "senior-frontend-developer"

    @pytest.mark.asyncio
    async def test_update_missing_job(self, store):
        with pytest.raises(NotFoundError, match="Job not found"):
            await job_service.update_job(store, "nope", {"title": "x"})

    @pytest.mark.asyncio
    async def test_delete_keeps_candidates(self, seeded_store):
        await job_service.delete_job(seeded_store, "job-1")

        assert await seeded_store.get("jobs", "job-1") is None
        assert await seeded_store.get("candidates", "candidate-1") is not None

    @pytest.mark.asyncio
    async def test_delete_missing_job(self, store):
        with pytest.raises(NotFoundError):
            await job_service.delete_job(store, "nope")

    @pytest.mark.asyncio
    async def test_find_job_resolves_dangling_reference_to_none(self, seeded_store):
        await seeded_store.put("candidates", make_candidate("c-x", jobId="job-gone"))

        assert await job_service.find_job(seeded_store, "job-gone") is None
        assert (await job_service.find_job(seeded_store, "job-2")).title == "backend engineer"


class TestReorder:
    """Drag-and-drop reorder."""

    @pytest.mark.asyncio
    async def test_reorder_then_list_by_order(self, seeded_store):
        await job_service.reorder_jobs(seeded_store, ["job-3", "job-1", "job-2"])

        listing = await job_service.list_jobs(seeded_store, JobFilters(sort="order"))

        assert [job.id for job in listing.jobs] == ["job-3", "job-1", "job-2"]
        assert [job.order for job in listing.jobs] == [0, 1, 2]

    @pytest.mark.asyncio
    async def test_unknown_ids_skipped(self, seeded_store):
        updated = await job_service.reorder_jobs(seeded_store, ["job-2", "ghost", "job-1"])

        assert updated == ["job-2", "job-1"]
        assert (await seeded_store.get("jobs", "job-2"))["order"] == 0
        assert (await seeded_store.get("jobs", "job-1"))["order"] == 2
        assert await seeded_store.get("jobs", "ghost") is None


class TestListJobs:
    """Filtered, sorted, paginated listing."""

    @pytest.mark.asyncio
    async def test_second_page_of_active_jobs(self, store):
        await store.bulk_put("jobs", [
            make_job(f"job-a{i:02d}", status="active", order=i) for i in range(15)
        ] + [
            make_job(f"job-d{i:02d}", status="draft", order=15 + i) for i in range(5)
        ])

        result = await job_service.list_jobs(
            store, JobFilters(status="active", page=2, page_size=10)
        )

        assert len(result.jobs) == 5
        assert all(job.status == "active" for job in result.jobs)
        assert result.pagination.model_dump(by_alias=True) == {
            "currentPage": 2,
            "pageSize": 10,
            "totalItems": 15,
            "totalPages": 2,
        }

    @pytest.mark.asyncio
    async def test_search_matches_title_and_tags(self, seeded_store):
        by_title = await job_service.list_jobs(seeded_store, JobFilters(search="DESIGNER"))
        by_tag = await job_service.list_jobs(seeded_store, JobFilters(search="go"))

        assert [job.id for job in by_title.jobs] == ["job-3"]
        assert [job.id for job in by_tag.jobs] == ["job-2"]

    @pytest.mark.asyncio
    async def test_sort_by_title_ignores_case(self, seeded_store):
        result = await job_service.list_jobs(seeded_store, JobFilters(sort="title"))

        assert [job.title for job in result.jobs] == [
            "backend engineer",
            "Product Designer",
            "Senior Frontend Developer",
        ]

    @pytest.mark.asyncio
    async def test_sort_by_created_at_newest_first(self, seeded_store):
        result = await job_service.list_jobs(seeded_store, JobFilters(sort="createdAt"))

        assert [job.id for job in result.jobs] == ["job-2", "job-1", "job-3"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("page,page_size", [(0, 10), (1, 0), (-1, 5)])
    async def test_invalid_pagination_rejected(self, seeded_store, page, page_size):
        with pytest.raises(InvalidQueryError):
            await job_service.list_jobs(
                seeded_store, JobFilters(page=page, page_size=page_size)
            )
