"""Health check endpoints."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from api.client import ApiClient
from api.dependencies import get_api_client

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Liveness only; never touches the store or the simulated network."""
    return HealthResponse(status="healthy", version="0.1.0")


@router.get("/ready")
async def readiness_check(client: ApiClient = Depends(get_api_client)):
    """Ready once the store answers; reports how many records each table holds."""
    counts = {table: await client.store.count(table) for table in ("jobs", "candidates", "assessments")}
    return {"status": "ready", "records": counts}
