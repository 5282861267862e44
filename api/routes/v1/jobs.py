"""
Job management endpoints.

Listing, detail, create, partial update, delete and drag-and-drop reorder.
"""

from typing import Literal

from fastapi import APIRouter, Depends, Path, Query, status

from api.client import JobsApi
from api.dependencies import get_jobs_api
from api.schemas.common import ERROR_RESPONSES, SuccessResponse
from core.config import settings
from api.schemas.jobs import (
    Job,
    JobCreate,
    JobFilters,
    JobListResponse,
    JobUpdate,
    ReorderRequest,
)

router = APIRouter(prefix="/jobs", tags=["jobs"], responses=ERROR_RESPONSES)


@router.get(
    "",
    response_model=JobListResponse,
    response_model_exclude_none=True,
    summary="List Jobs",
)
async def list_jobs(
    search: str = Query("", description="Case-insensitive match on title and tags"),
    status_filter: Literal["all", "active", "archived", "draft"] = Query("all", alias="status"),
    page: int = Query(1, description="Page number (1-indexed)"),
    page_size: int = Query(settings.default_page_size, alias="pageSize", description="Items per page"),
    sort: str = Query("order", description="`title`, `createdAt` or `order`; any other value sorts by `order`"),
    api: JobsApi = Depends(get_jobs_api),
):
    """One page of jobs plus pagination metadata."""
    filters = JobFilters(
        search=search, status=status_filter, page=page, page_size=page_size, sort=sort
    )
    return await api.list(filters)


@router.patch("/reorder", response_model=SuccessResponse, summary="Reorder Jobs")
async def reorder_jobs(body: ReorderRequest, api: JobsApi = Depends(get_jobs_api)):
    """Persist a new display order; `jobIds[i]` gets order `i`."""
    return await api.reorder(body.job_ids)


@router.get("/{job_id}", response_model=Job, response_model_exclude_none=True, summary="Get Job")
async def get_job(job_id: str = Path(...), api: JobsApi = Depends(get_jobs_api)):
    return await api.get(job_id)


@router.post(
    "",
    response_model=Job,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    summary="Create Job",
)
async def create_job(body: JobCreate, api: JobsApi = Depends(get_jobs_api)):
    """Create a job at the end of the ordering; the slug is derived from the title."""
    return await api.create(body)


@router.patch("/{job_id}", response_model=Job, response_model_exclude_none=True, summary="Update Job")
async def update_job(body: JobUpdate, job_id: str = Path(...), api: JobsApi = Depends(get_jobs_api)):
    return await api.update(job_id, body)


@router.delete("/{job_id}", response_model=SuccessResponse, summary="Delete Job")
async def delete_job(job_id: str = Path(...), api: JobsApi = Depends(get_jobs_api)):
    return await api.remove(job_id)
