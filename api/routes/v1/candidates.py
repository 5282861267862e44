"""Candidate endpoints: listing, detail, partial update, per-job board and notes."""

from typing import List

from fastapi import APIRouter, Depends, Path, Query, status

from api.client import CandidatesApi
from api.dependencies import get_candidates_api
from api.schemas.candidates import (
    Candidate,
    CandidateFilters,
    CandidateListResponse,
    CandidateUpdate,
    Note,
    NoteCreate,
)
from api.schemas.common import ERROR_RESPONSES
from core.config import settings

router = APIRouter(prefix="/candidates", tags=["candidates"], responses=ERROR_RESPONSES)


@router.get(
    "",
    response_model=CandidateListResponse,
    response_model_exclude_none=True,
    summary="List Candidates",
)
async def list_candidates(
    search: str = Query("", description="Case-insensitive match on name and email"),
    stage: str = Query("all", description="Pipeline stage, or `all`"),
    page: int = Query(1),
    page_size: int = Query(settings.default_page_size, alias="pageSize"),
    api: CandidatesApi = Depends(get_candidates_api),
):
    filters = CandidateFilters(search=search, stage=stage, page=page, page_size=page_size)
    return await api.list(filters)


@router.get(
    "/job/{job_id}",
    response_model=List[Candidate],
    response_model_exclude_none=True,
    summary="List Candidates For Job",
)
async def list_candidates_by_job(
    job_id: str = Path(...), api: CandidatesApi = Depends(get_candidates_api)
):
    """Every candidate attached to a job, unpaginated, for the Kanban board."""
    return await api.list_by_job(job_id)


@router.get(
    "/{candidate_id}",
    response_model=Candidate,
    response_model_exclude_none=True,
    summary="Get Candidate",
)
async def get_candidate(
    candidate_id: str = Path(...), api: CandidatesApi = Depends(get_candidates_api)
):
    return await api.get(candidate_id)


@router.patch(
    "/{candidate_id}",
    response_model=Candidate,
    response_model_exclude_none=True,
    summary="Update Candidate",
)
async def update_candidate(
    body: CandidateUpdate,
    candidate_id: str = Path(...),
    api: CandidatesApi = Depends(get_candidates_api),
):
    """Shallow merge; `notes` and `timeline` replace the stored lists when given."""
    return await api.update(candidate_id, body)


@router.post(
    "/{candidate_id}/notes",
    response_model=Note,
    status_code=status.HTTP_201_CREATED,
    summary="Add Note",
)
async def add_note(
    body: NoteCreate,
    candidate_id: str = Path(...),
    api: CandidatesApi = Depends(get_candidates_api),
):
    return await api.add_note(candidate_id, body.content, body.created_by)
