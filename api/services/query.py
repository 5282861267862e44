"""
Listing queries: search, exact-match filter, sort and pagination.

Shared by the jobs and candidates listings. Everything here is pure and
works on already-loaded records, so results are deterministic for a given
collection and filter set.
"""

from typing import Callable, Iterable, Sequence, TypeVar

from pydantic import ValidationError

from api.schemas.candidates import Candidate, CandidateFilters
from api.schemas.common import Pagination, PaginationParams
from api.schemas.jobs import Job, JobFilters
from core.exceptions import InvalidQueryError

T = TypeVar("T")

ALL = "all"


def pagination_params(page: int, page_size: int) -> PaginationParams:
    """Validate page and page size, rejecting anything below 1."""
    try:
        return PaginationParams(page=page, page_size=page_size)
    except ValidationError as exc:
        message = "; ".join(err["msg"] for err in exc.errors())
        raise InvalidQueryError(message) from exc


def matches_search(fields: Iterable[str], search: str) -> bool:
    """Case-insensitive substring match against any of `fields`."""
    needle = search.lower()
    return any(needle in (value or "").lower() for value in fields)


def apply_filters(
    items: Sequence[T],
    search: str,
    search_fields: Callable[[T], Iterable[str]],
    exact: str,
    exact_field: Callable[[T], str],
) -> list[T]:
    """Search then exact-match filter; `"all"` or empty disables the latter."""
    result = list(items)
    if search:
        result = [item for item in result if matches_search(search_fields(item), search)]
    if exact and exact != ALL:
        result = [item for item in result if exact_field(item) == exact]
    return result


def paginate(items: Sequence[T], params: PaginationParams) -> tuple[list[T], Pagination]:
    """Slice one page; pages past the end are empty rather than an error."""
    start = params.offset
    page_items = list(items[start:start + params.page_size])
    return page_items, Pagination.create(len(items), params)


def _job_search_fields(job: Job) -> list[str]:
    return [job.title, *job.tags]


def _candidate_search_fields(candidate: Candidate) -> list[str]:
    return [candidate.name, candidate.email]


def sort_jobs(jobs: Sequence[Job], sort: str) -> list[Job]:
    """
    Sort jobs for display.

    Args:
        jobs: Jobs to sort
        sort: `title` (A to Z), `createdAt` (newest first); anything else
            sorts by `order` ascending

    Returns:
        New sorted list
    """
    if sort == "title":
        return sorted(jobs, key=lambda job: (job.title.casefold(), job.title))
    if sort == "createdAt":
        return sorted(jobs, key=lambda job: job.created_at, reverse=True)
    return sorted(jobs, key=lambda job: job.order)


def query_jobs(jobs: Sequence[Job], filters: JobFilters) -> tuple[list[Job], Pagination]:
    """Filter, sort and paginate jobs."""
    params = pagination_params(filters.page, filters.page_size)
    filtered = apply_filters(
        jobs,
        filters.search,
        _job_search_fields,
        filters.status,
        lambda job: job.status,
    )
    return paginate(sort_jobs(filtered, filters.sort), params)


def query_candidates(
    candidates: Sequence[Candidate], filters: CandidateFilters
) -> tuple[list[Candidate], Pagination]:
    """Filter and paginate candidates; storage order is kept."""
    params = pagination_params(filters.page, filters.page_size)
    filtered = apply_filters(
        candidates,
        filters.search,
        _candidate_search_fields,
        filters.stage,
        lambda candidate: candidate.stage,
    )
    return paginate(filtered, params)
