"""FastAPI dependencies for dependency injection."""

from fastapi import Depends, Request

from api.client import ApiClient, AssessmentsApi, CandidatesApi, JobsApi


async def get_api_client(request: Request) -> ApiClient:
    """The client built at startup and kept on `app.state`."""
    return request.app.state.api_client


async def get_jobs_api(client: ApiClient = Depends(get_api_client)) -> JobsApi:
    return client.jobs


async def get_candidates_api(client: ApiClient = Depends(get_api_client)) -> CandidatesApi:
    return client.candidates


async def get_assessments_api(client: ApiClient = Depends(get_api_client)) -> AssessmentsApi:
    return client.assessments
