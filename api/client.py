"""
In-process API client.

The request/response contract the state slices depend on. Every method
goes through the simulated network, then the record operations, and either
returns the payload or raises one of the `core.exceptions` errors.
"""

from typing import Any, Dict, List, Optional, Union

from api.schemas.assessments import Assessment
from api.schemas.candidates import (
    Candidate,
    CandidateFilters,
    CandidateListResponse,
    CandidateStageType,
    CandidateUpdate,
    Note,
)
from api.schemas.common import SuccessResponse
from api.schemas.jobs import Job, JobCreate, JobFilters, JobListResponse, JobUpdate
from api.services import assessments as assessment_service
from api.services import candidates as candidate_service
from api.services import jobs as job_service
from core.simulation import SimulatedNetwork
from database.store import RecordStore


class _ResourceApi:
    def __init__(self, store: RecordStore, network: SimulatedNetwork):
        self.store = store
        self.network = network


class JobsApi(_ResourceApi):
    """Jobs endpoints."""

    async def list(self, filters: Optional[Union[JobFilters, Dict[str, Any]]] = None) -> JobListResponse:
        filters = JobFilters.model_validate(filters or {})
        return await self.network.call(
            job_service.list_jobs, self.store, filters, failure_message="Failed to fetch jobs"
        )

    async def get(self, job_id: str) -> Job:
        return await self.network.call(
            job_service.get_job, self.store, job_id, failure_message="Failed to fetch job"
        )

    async def create(self, data: Union[JobCreate, Dict[str, Any]]) -> Job:
        return await self.network.call(
            job_service.create_job, self.store, data, failure_message="Failed to create job"
        )

    async def update(self, job_id: str, updates: Union[JobUpdate, Dict[str, Any]]) -> Job:
        return await self.network.call(
            job_service.update_job,
            self.store,
            job_id,
            updates,
            failure_message="Failed to update job",
        )

    async def remove(self, job_id: str) -> SuccessResponse:
        await self.network.call(
            job_service.delete_job, self.store, job_id, failure_message="Failed to delete job"
        )
        return SuccessResponse()

    async def reorder(self, job_ids: List[str]) -> SuccessResponse:
        await self.network.call(
            job_service.reorder_jobs,
            self.store,
            list(job_ids),
            failure_message="Failed to reorder jobs",
        )
        return SuccessResponse()


class CandidatesApi(_ResourceApi):
    """Candidates endpoints."""

    async def list(
        self, filters: Optional[Union[CandidateFilters, Dict[str, Any]]] = None
    ) -> CandidateListResponse:
        filters = CandidateFilters.model_validate(filters or {})
        return await self.network.call(
            candidate_service.list_candidates,
            self.store,
            filters,
            failure_message="Failed to fetch candidates",
        )

    async def get(self, candidate_id: str) -> Candidate:
        return await self.network.call(
            candidate_service.get_candidate,
            self.store,
            candidate_id,
            failure_message="Failed to fetch candidate",
        )

    async def update(
        self, candidate_id: str, updates: Union[CandidateUpdate, Dict[str, Any]]
    ) -> Candidate:
        return await self.network.call(
            candidate_service.update_candidate,
            self.store,
            candidate_id,
            updates,
            failure_message="Failed to update candidate",
        )

    async def update_stage(
        self, candidate_id: str, new_stage: CandidateStageType, moved_by: Optional[str] = None
    ) -> Candidate:
        return await self.network.call(
            candidate_service.update_candidate_stage,
            self.store,
            candidate_id,
            new_stage,
            moved_by,
            failure_message="Failed to update candidate stage",
        )

    async def list_by_job(self, job_id: str) -> List[Candidate]:
        return await self.network.call(
            candidate_service.list_candidates_by_job,
            self.store,
            job_id,
            failure_message="Failed to fetch candidates for job",
        )

    async def add_note(
        self, candidate_id: str, content: str, created_by: Optional[str] = None
    ) -> Note:
        return await self.network.call(
            candidate_service.add_candidate_note,
            self.store,
            candidate_id,
            content,
            created_by,
            failure_message="Failed to add note",
        )


class AssessmentsApi(_ResourceApi):
    """Assessments endpoints."""

    async def list_all(self) -> List[Assessment]:
        # The listing page only gets latency, never an injected failure
        return await self.network.call(
            assessment_service.list_assessments, self.store, inject_failure=False
        )

    async def get_by_job_id(self, job_id: str) -> Assessment:
        return await self.network.call(
            assessment_service.get_assessment_by_job_id,
            self.store,
            job_id,
            failure_message="Failed to fetch assessment",
        )

    async def save(self, job_id: str, assessment: Union[Assessment, Dict[str, Any]]) -> Assessment:
        """Save under `job_id`; the path job id wins over the body's."""
        if not isinstance(assessment, Assessment):
            assessment = Assessment.model_validate(assessment)
        if assessment.job_id != job_id:
            assessment = assessment.model_copy(update={"job_id": job_id})
        return await self.network.call(
            assessment_service.save_assessment,
            self.store,
            assessment,
            failure_message="Failed to save assessment",
        )

    async def delete_by_job_id(self, job_id: str) -> SuccessResponse:
        await self.network.call(
            assessment_service.delete_assessment,
            self.store,
            job_id,
            failure_message="Failed to delete assessment",
        )
        return SuccessResponse()


class ApiClient:
    """The three resource clients sharing one store and one network."""

    def __init__(self, store: Optional[RecordStore] = None, network: Optional[SimulatedNetwork] = None):
        self.store = store or RecordStore()
        self.network = network or SimulatedNetwork.from_settings()
        self.jobs = JobsApi(self.store, self.network)
        self.candidates = CandidatesApi(self.store, self.network)
        self.assessments = AssessmentsApi(self.store, self.network)
