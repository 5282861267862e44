"""Assessment endpoints, keyed by the job the assessment belongs to."""

from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, Path
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from api.client import AssessmentsApi
from api.dependencies import get_assessments_api
from api.schemas.assessments import Assessment
from api.schemas.common import ERROR_RESPONSES, SuccessResponse

router = APIRouter(prefix="/assessments", tags=["assessments"], responses=ERROR_RESPONSES)


@router.get(
    "",
    response_model=List[Assessment],
    response_model_exclude_none=True,
    summary="List Assessments",
)
async def list_assessments(api: AssessmentsApi = Depends(get_assessments_api)):
    return await api.list_all()


@router.get(
    "/{job_id}",
    response_model=Assessment,
    response_model_exclude_none=True,
    summary="Get Assessment",
)
async def get_assessment(job_id: str = Path(...), api: AssessmentsApi = Depends(get_assessments_api)):
    return await api.get_by_job_id(job_id)


@router.put(
    "/{job_id}",
    response_model=Assessment,
    response_model_exclude_none=True,
    summary="Save Assessment",
)
async def save_assessment(
    job_id: str = Path(...),
    body: Dict[str, Any] = Body(...),
    api: AssessmentsApi = Depends(get_assessments_api),
):
    """
    Upsert the assessment for a job.

    The job id in the path wins over any `jobId` in the body.
    """
    try:
        assessment = Assessment.model_validate({**body, "jobId": job_id})
    except ValidationError as exc:
        raise RequestValidationError(exc.errors(include_url=False)) from exc
    return await api.save(job_id, assessment)


@router.delete("/{job_id}", response_model=SuccessResponse, summary="Delete Assessment")
async def delete_assessment(
    job_id: str = Path(...), api: AssessmentsApi = Depends(get_assessments_api)
):
    return await api.delete_by_job_id(job_id)
