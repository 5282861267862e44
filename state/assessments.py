"""
Assessments state.

`assessments` maps a job id to the assessment loaded for it; `all_assessments`
backs the overview page. A job with nothing stored yet is edited through an
unsaved draft from `assessment_or_draft`.
"""

from typing import Any, Dict, List, Optional, Union

from api.client import AssessmentsApi
from api.schemas.assessments import Assessment
from core.utils.datetime import now
from state.base import (
    Action,
    AsyncThunk,
    SliceState,
    SliceStore,
    clear_error_state,
    create_reducer,
    settle,
    thunk_handlers,
)


class AssessmentsState(SliceState):
    assessments: Dict[str, Assessment] = {}
    all_assessments: List[Assessment] = []


FETCH_ALL_ASSESSMENTS = AsyncThunk(
    "assessments/fetchAllAssessments", "Failed to fetch assessments"
)
FETCH_ASSESSMENT = AsyncThunk("assessments/fetchAssessmentByJobId", "Failed to fetch assessment")
SAVE_ASSESSMENT = AsyncThunk("assessments/saveAssessment", "Failed to save assessment")
DELETE_ASSESSMENT = AsyncThunk("assessments/deleteAssessment", "Failed to delete assessment")

CLEAR_ERROR = "assessments/clearError"
CLEAR_ASSESSMENT = "assessments/clearAssessment"


def clear_error() -> Action:
    return Action(CLEAR_ERROR)


def clear_assessment(job_id: str) -> Action:
    """Forget the loaded assessment for `job_id` without touching the store."""
    return Action(CLEAR_ASSESSMENT, payload=job_id)


def _without(assessments: Dict[str, Assessment], job_id: str) -> Dict[str, Assessment]:
    return {key: value for key, value in assessments.items() if key != job_id}


def _all_fetched(state: AssessmentsState, action: Action) -> AssessmentsState:
    return settle(state, all_assessments=list(action.payload))


def _assessment_loaded(state: AssessmentsState, action: Action) -> AssessmentsState:
    assessment: Assessment = action.payload
    return settle(state, assessments={**state.assessments, assessment.job_id: assessment})


def _assessment_saved(state: AssessmentsState, action: Action) -> AssessmentsState:
    """Replace the job's entry in place (dropping duplicates) or append it."""
    assessment: Assessment = action.payload
    all_assessments: List[Assessment] = []
    placed = False
    for item in state.all_assessments:
        if item.job_id != assessment.job_id:
            all_assessments.append(item)
        elif not placed:
            all_assessments.append(assessment)
            placed = True
    if not placed:
        all_assessments.append(assessment)
    return settle(
        state,
        assessments={**state.assessments, assessment.job_id: assessment},
        all_assessments=all_assessments,
    )


def _assessment_deleted(state: AssessmentsState, action: Action) -> AssessmentsState:
    job_id: str = action.payload
    return settle(
        state,
        assessments=_without(state.assessments, job_id),
        all_assessments=[item for item in state.all_assessments if item.job_id != job_id],
    )


reduce = create_reducer(
    AssessmentsState(),
    {
        CLEAR_ERROR: clear_error_state,
        CLEAR_ASSESSMENT: lambda state, action: state.model_copy(
            update={"assessments": _without(state.assessments, action.payload)}
        ),
        **thunk_handlers(FETCH_ALL_ASSESSMENTS, _all_fetched),
        **thunk_handlers(FETCH_ASSESSMENT, _assessment_loaded),
        **thunk_handlers(SAVE_ASSESSMENT, _assessment_saved),
        **thunk_handlers(DELETE_ASSESSMENT, _assessment_deleted),
    },
)


def create_assessments_slice() -> SliceStore[AssessmentsState]:
    return SliceStore("assessments", reduce, AssessmentsState())


# ==================== Thunks ==================== #

async def fetch_all_assessments(
    assessments: SliceStore[AssessmentsState], api: AssessmentsApi
) -> Action:
    return await assessments.run_thunk(FETCH_ALL_ASSESSMENTS, api.list_all)


async def fetch_assessment_by_job_id(
    assessments: SliceStore[AssessmentsState], api: AssessmentsApi, job_id: str
) -> Action:
    return await assessments.run_thunk(
        FETCH_ASSESSMENT, lambda: api.get_by_job_id(job_id), arg=job_id
    )


async def save_assessment(
    assessments: SliceStore[AssessmentsState],
    api: AssessmentsApi,
    job_id: str,
    assessment: Union[Assessment, Dict[str, Any]],
) -> Action:
    return await assessments.run_thunk(
        SAVE_ASSESSMENT, lambda: api.save(job_id, assessment), arg=job_id
    )


async def delete_assessment(
    assessments: SliceStore[AssessmentsState], api: AssessmentsApi, job_id: str
) -> Action:
    return await assessments.run_thunk(
        DELETE_ASSESSMENT,
        lambda: api.delete_by_job_id(job_id),
        arg=job_id,
        to_payload=lambda _: job_id,
    )


# ==================== Selectors ==================== #

def select_assessment(state: AssessmentsState, job_id: str) -> Optional[Assessment]:
    return state.assessments.get(job_id)


def select_all_assessments(state: AssessmentsState) -> List[Assessment]:
    return state.all_assessments


def select_assessments_loading(state: AssessmentsState) -> bool:
    return state.loading


def select_assessments_error(state: AssessmentsState) -> Optional[str]:
    return state.error


def assessment_or_draft(state: AssessmentsState, job_id: str) -> Assessment:
    """
    The loaded assessment for `job_id`, or a blank draft for the builder.

    The draft is not stored anywhere until it is passed to `save_assessment`.
    """
    loaded = state.assessments.get(job_id)
    if loaded is not None:
        return loaded
    timestamp = now()
    return Assessment(
        id=f"assessment-{job_id}",
        job_id=job_id,
        title="New Assessment",
        description="",
        sections=[],
        created_at=timestamp,
        updated_at=timestamp,
    )
