"""Jobs state: the listing, the job being viewed, filters and pagination."""

from typing import Any, Dict, List, Optional, Union

from api.client import JobsApi
from api.schemas.common import Pagination
from api.schemas.jobs import Job, JobCreate, JobFilters, JobUpdate
from state.base import (
    Action,
    AsyncThunk,
    SliceState,
    SliceStore,
    clear_error_state,
    create_reducer,
    filters_case,
    pagination_case,
    settle,
    thunk_handlers,
)


class JobsState(SliceState):
    jobs: List[Job] = []
    current_job: Optional[Job] = None
    filters: JobFilters = JobFilters()
    pagination: Pagination = Pagination()
    latest_request_id: Optional[int] = None


FETCH_JOBS = AsyncThunk("jobs/fetchJobs", "Failed to fetch jobs", fenced=True)
FETCH_JOB_BY_ID = AsyncThunk("jobs/fetchJobById", "Failed to fetch job")
CREATE_JOB = AsyncThunk("jobs/createJob", "Failed to create job")
UPDATE_JOB = AsyncThunk("jobs/updateJob", "Failed to update job")
DELETE_JOB = AsyncThunk("jobs/deleteJob", "Failed to delete job")
REORDER_JOBS = AsyncThunk("jobs/reorderJobs", "Failed to reorder jobs")

SET_FILTERS = "jobs/setFilters"
SET_PAGINATION = "jobs/setPagination"
CLEAR_ERROR = "jobs/clearError"
CLEAR_CURRENT_JOB = "jobs/clearCurrentJob"


# ==================== Action creators ==================== #

def set_filters(**changes: Any) -> Action:
    """Merge filter changes; the page cursor goes back to 1."""
    return Action(SET_FILTERS, payload=changes)


def set_pagination(**changes: Any) -> Action:
    return Action(SET_PAGINATION, payload=changes)


def clear_error() -> Action:
    return Action(CLEAR_ERROR)


def clear_current_job() -> Action:
    return Action(CLEAR_CURRENT_JOB)


# ==================== Reducer cases ==================== #

def _jobs_fetched(state: JobsState, action: Action) -> JobsState:
    return settle(state, jobs=list(action.payload.jobs), pagination=action.payload.pagination)


def _job_fetched(state: JobsState, action: Action) -> JobsState:
    return settle(state, current_job=action.payload)


def _job_created(state: JobsState, action: Action) -> JobsState:
    pagination = state.pagination.model_copy(
        update={"total_items": state.pagination.total_items + 1}
    )
    return settle(state, jobs=[action.payload, *state.jobs], pagination=pagination)


def _job_updated(state: JobsState, action: Action) -> JobsState:
    job: Job = action.payload
    jobs = [job if existing.id == job.id else existing for existing in state.jobs]
    current = job if state.current_job and state.current_job.id == job.id else state.current_job
    return settle(state, jobs=jobs, current_job=current)


def _job_deleted(state: JobsState, action: Action) -> JobsState:
    job_id: str = action.payload
    remaining = [job for job in state.jobs if job.id != job_id]
    pagination = state.pagination
    if len(remaining) != len(state.jobs):
        pagination = pagination.model_copy(
            update={"total_items": max(0, pagination.total_items - 1)}
        )
    current = None if state.current_job and state.current_job.id == job_id else state.current_job
    return settle(state, jobs=remaining, pagination=pagination, current_job=current)


def _jobs_reordered(state: JobsState, action: Action) -> JobsState:
    by_id = {job.id: job for job in state.jobs}
    reordered = [
        by_id[job_id].model_copy(update={"order": index})
        for index, job_id in enumerate(action.payload)
        if job_id in by_id
    ]
    return settle(state, jobs=reordered)


reduce = create_reducer(
    JobsState(),
    {
        SET_FILTERS: filters_case(JobFilters),
        SET_PAGINATION: pagination_case,
        CLEAR_ERROR: clear_error_state,
        CLEAR_CURRENT_JOB: lambda state, action: state.model_copy(update={"current_job": None}),
        **thunk_handlers(FETCH_JOBS, _jobs_fetched),
        **thunk_handlers(FETCH_JOB_BY_ID, _job_fetched),
        **thunk_handlers(CREATE_JOB, _job_created),
        **thunk_handlers(UPDATE_JOB, _job_updated),
        **thunk_handlers(DELETE_JOB, _job_deleted),
        **thunk_handlers(REORDER_JOBS, _jobs_reordered),
    },
)


def create_jobs_slice() -> SliceStore[JobsState]:
    return SliceStore("jobs", reduce, JobsState())


# ==================== Thunks ==================== #

async def fetch_jobs(
    jobs: SliceStore[JobsState],
    api: JobsApi,
    filters: Optional[Union[JobFilters, Dict[str, Any]]] = None,
) -> Action:
    """Load one page using `filters`, or the slice's current filters."""
    if filters is None:
        filters = jobs.state.filters
    return await jobs.run_thunk(FETCH_JOBS, lambda: api.list(filters), arg=filters)


async def fetch_job_by_id(jobs: SliceStore[JobsState], api: JobsApi, job_id: str) -> Action:
    return await jobs.run_thunk(FETCH_JOB_BY_ID, lambda: api.get(job_id), arg=job_id)


async def create_job(
    jobs: SliceStore[JobsState], api: JobsApi, data: Union[JobCreate, Dict[str, Any]]
) -> Action:
    return await jobs.run_thunk(CREATE_JOB, lambda: api.create(data), arg=data)


async def update_job(
    jobs: SliceStore[JobsState],
    api: JobsApi,
    job_id: str,
    updates: Union[JobUpdate, Dict[str, Any]],
) -> Action:
    return await jobs.run_thunk(UPDATE_JOB, lambda: api.update(job_id, updates), arg=job_id)


async def delete_job(jobs: SliceStore[JobsState], api: JobsApi, job_id: str) -> Action:
    return await jobs.run_thunk(
        DELETE_JOB, lambda: api.remove(job_id), arg=job_id, to_payload=lambda _: job_id
    )


async def reorder_jobs(jobs: SliceStore[JobsState], api: JobsApi, job_ids: List[str]) -> Action:
    """Persist a new order; the listing follows only once the store confirms."""
    job_ids = list(job_ids)
    return await jobs.run_thunk(
        REORDER_JOBS, lambda: api.reorder(job_ids), arg=job_ids, to_payload=lambda _: job_ids
    )


# ==================== Selectors ==================== #

def select_jobs(state: JobsState) -> List[Job]:
    return state.jobs


def select_current_job(state: JobsState) -> Optional[Job]:
    return state.current_job


def select_jobs_loading(state: JobsState) -> bool:
    return state.loading


def select_jobs_error(state: JobsState) -> Optional[str]:
    return state.error


def select_jobs_filters(state: JobsState) -> JobFilters:
    return state.filters


def select_jobs_pagination(state: JobsState) -> Pagination:
    return state.pagination


def select_job_by_id(state: JobsState, job_id: str) -> Optional[Job]:
    return next((job for job in state.jobs if job.id == job_id), None)
