"""
Application store.

Bundles the jobs, candidates and assessments slices around one `ApiClient`.
Thunks are exposed as methods so callers do not have to thread the slice and
the resource client through every call.
"""

import logging
from typing import Any, Dict, List, Optional, Union

from api.client import ApiClient
from api.schemas.assessments import Assessment
from api.schemas.candidates import CandidateFilters, CandidateStageType, CandidateUpdate
from api.schemas.jobs import JobCreate, JobFilters, JobUpdate
from state import assessments as assessments_slice
from state import candidates as candidates_slice
from state import jobs as jobs_slice
from state.base import Action, SliceStore

logger = logging.getLogger(__name__)


class AppStore:
    """Root store: one `SliceStore` per resource."""

    def __init__(self, api: Optional[ApiClient] = None):
        self.api = api or ApiClient()
        self.jobs = jobs_slice.create_jobs_slice()
        self.candidates = candidates_slice.create_candidates_slice()
        self.assessments = assessments_slice.create_assessments_slice()
        self._slices: Dict[str, SliceStore] = {
            "jobs": self.jobs,
            "candidates": self.candidates,
            "assessments": self.assessments,
        }

    def dispatch(self, action: Action) -> Action:
        """Route a plain action to the slice named by its type prefix."""
        name = action.type.split("/", 1)[0]
        target = self._slices.get(name)
        if target is None:
            logger.warning(f"No slice handles action {action.type}")
            return action
        return target.dispatch(action)

    def snapshot(self) -> Dict[str, Any]:
        """Current state of every slice, keyed by slice name."""
        return {name: store.state for name, store in self._slices.items()}

    # ==================== Jobs ==================== #

    async def fetch_jobs(self, filters: Optional[Union[JobFilters, Dict[str, Any]]] = None) -> Action:
        return await jobs_slice.fetch_jobs(self.jobs, self.api.jobs, filters)

    async def fetch_job_by_id(self, job_id: str) -> Action:
        return await jobs_slice.fetch_job_by_id(self.jobs, self.api.jobs, job_id)

    async def create_job(self, data: Union[JobCreate, Dict[str, Any]]) -> Action:
        return await jobs_slice.create_job(self.jobs, self.api.jobs, data)

    async def update_job(self, job_id: str, updates: Union[JobUpdate, Dict[str, Any]]) -> Action:
        return await jobs_slice.update_job(self.jobs, self.api.jobs, job_id, updates)

    async def delete_job(self, job_id: str) -> Action:
        return await jobs_slice.delete_job(self.jobs, self.api.jobs, job_id)

    async def reorder_jobs(self, job_ids: List[str]) -> Action:
        return await jobs_slice.reorder_jobs(self.jobs, self.api.jobs, job_ids)

    # ==================== Candidates ==================== #

    async def fetch_candidates(
        self, filters: Optional[Union[CandidateFilters, Dict[str, Any]]] = None
    ) -> Action:
        return await candidates_slice.fetch_candidates(self.candidates, self.api.candidates, filters)

    async def fetch_candidate_by_id(self, candidate_id: str) -> Action:
        return await candidates_slice.fetch_candidate_by_id(
            self.candidates, self.api.candidates, candidate_id
        )

    async def fetch_candidates_by_job(self, job_id: str) -> Action:
        return await candidates_slice.fetch_candidates_by_job(
            self.candidates, self.api.candidates, job_id
        )

    async def update_candidate(
        self, candidate_id: str, updates: Union[CandidateUpdate, Dict[str, Any]]
    ) -> Action:
        return await candidates_slice.update_candidate(
            self.candidates, self.api.candidates, candidate_id, updates
        )

    async def update_candidate_stage(
        self, candidate_id: str, new_stage: CandidateStageType, moved_by: Optional[str] = None
    ) -> Action:
        return await candidates_slice.update_candidate_stage(
            self.candidates, self.api.candidates, candidate_id, new_stage, moved_by
        )

    async def add_candidate_note(
        self, candidate_id: str, content: str, created_by: Optional[str] = None
    ) -> Action:
        return await candidates_slice.add_candidate_note(
            self.candidates, self.api.candidates, candidate_id, content, created_by
        )

    # ==================== Assessments ==================== #

    async def fetch_all_assessments(self) -> Action:
        return await assessments_slice.fetch_all_assessments(self.assessments, self.api.assessments)

    async def fetch_assessment_by_job_id(self, job_id: str) -> Action:
        return await assessments_slice.fetch_assessment_by_job_id(
            self.assessments, self.api.assessments, job_id
        )

    async def save_assessment(
        self, job_id: str, assessment: Union[Assessment, Dict[str, Any]]
    ) -> Action:
        return await assessments_slice.save_assessment(
            self.assessments, self.api.assessments, job_id, assessment
        )

    async def delete_assessment(self, job_id: str) -> Action:
        return await assessments_slice.delete_assessment(
            self.assessments, self.api.assessments, job_id
        )
