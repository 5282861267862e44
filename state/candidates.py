"""
Candidates state.

A candidate can be on screen in three places at once: the paginated
listing (`candidates`), the per-job board (`job_candidates`) and the detail
view (`current_candidate`). Every confirmed write goes through
`_reconcile` so the three views never disagree.
"""

from typing import Any, Callable, Dict, List, Optional, Union

from api.client import CandidatesApi
from api.schemas.candidates import (
    CANDIDATE_STAGES,
    Candidate,
    CandidateFilters,
    CandidateStageType,
    CandidateUpdate,
    Note,
)
from api.schemas.common import Pagination
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


class CandidatesState(SliceState):
    candidates: List[Candidate] = []
    job_candidates: List[Candidate] = []
    current_candidate: Optional[Candidate] = None
    filters: CandidateFilters = CandidateFilters()
    pagination: Pagination = Pagination()
    latest_request_id: Optional[int] = None


FETCH_CANDIDATES = AsyncThunk(
    "candidates/fetchCandidates", "Failed to fetch candidates", fenced=True
)
FETCH_CANDIDATE_BY_ID = AsyncThunk("candidates/fetchCandidateById", "Failed to fetch candidate")
UPDATE_CANDIDATE = AsyncThunk("candidates/updateCandidate", "Failed to update candidate")
ADD_NOTE = AsyncThunk("candidates/addNote", "Failed to add note")
UPDATE_STAGE = AsyncThunk("candidates/updateStage", "Failed to update candidate stage")
FETCH_BY_JOB = AsyncThunk(
    "candidates/fetchCandidatesByJob", "Failed to fetch candidates for job"
)

SET_FILTERS = "candidates/setFilters"
SET_PAGINATION = "candidates/setPagination"
CLEAR_ERROR = "candidates/clearError"
CLEAR_CURRENT_CANDIDATE = "candidates/clearCurrentCandidate"


def set_filters(**changes: Any) -> Action:
    """Merge filter changes; the page cursor goes back to 1."""
    return Action(SET_FILTERS, payload=changes)


def set_pagination(**changes: Any) -> Action:
    return Action(SET_PAGINATION, payload=changes)


def clear_error() -> Action:
    return Action(CLEAR_ERROR)


def clear_current_candidate() -> Action:
    return Action(CLEAR_CURRENT_CANDIDATE)


def _reconcile(
    state: CandidatesState,
    candidate_id: str,
    change: Callable[[Candidate], Candidate],
) -> Dict[str, Any]:
    """Apply `change` to `candidate_id` in every view that holds it."""

    def apply(items: List[Candidate]) -> List[Candidate]:
        return [change(item) if item.id == candidate_id else item for item in items]

    current = state.current_candidate
    if current is not None and current.id == candidate_id:
        current = change(current)

    return {
        "candidates": apply(state.candidates),
        "job_candidates": apply(state.job_candidates),
        "current_candidate": current,
    }


def _candidates_fetched(state: CandidatesState, action: Action) -> CandidatesState:
    return settle(
        state,
        candidates=list(action.payload.candidates),
        pagination=action.payload.pagination,
    )


def _candidate_fetched(state: CandidatesState, action: Action) -> CandidatesState:
    return settle(state, current_candidate=action.payload)


def _candidate_replaced(state: CandidatesState, action: Action) -> CandidatesState:
    candidate: Candidate = action.payload
    return settle(state, **_reconcile(state, candidate.id, lambda _: candidate))


def _note_added(state: CandidatesState, action: Action) -> CandidatesState:
    candidate_id: str = action.payload["candidate_id"]
    note: Note = action.payload["note"]
    return settle(
        state,
        **_reconcile(
            state,
            candidate_id,
            lambda candidate: candidate.model_copy(update={"notes": [*candidate.notes, note]}),
        ),
    )


def _job_candidates_fetched(state: CandidatesState, action: Action) -> CandidatesState:
    return settle(state, job_candidates=list(action.payload))


reduce = create_reducer(
    CandidatesState(),
    {
        SET_FILTERS: filters_case(CandidateFilters),
        SET_PAGINATION: pagination_case,
        CLEAR_ERROR: clear_error_state,
        CLEAR_CURRENT_CANDIDATE: lambda state, action: state.model_copy(
            update={"current_candidate": None}
        ),
        **thunk_handlers(FETCH_CANDIDATES, _candidates_fetched),
        **thunk_handlers(FETCH_CANDIDATE_BY_ID, _candidate_fetched),
        **thunk_handlers(UPDATE_CANDIDATE, _candidate_replaced),
        **thunk_handlers(UPDATE_STAGE, _candidate_replaced),
        **thunk_handlers(ADD_NOTE, _note_added),
        **thunk_handlers(FETCH_BY_JOB, _job_candidates_fetched),
    },
)


def create_candidates_slice() -> SliceStore[CandidatesState]:
    return SliceStore("candidates", reduce, CandidatesState())


# ==================== Thunks ==================== #

async def fetch_candidates(
    candidates: SliceStore[CandidatesState],
    api: CandidatesApi,
    filters: Optional[Union[CandidateFilters, Dict[str, Any]]] = None,
) -> Action:
    if filters is None:
        filters = candidates.state.filters
    return await candidates.run_thunk(FETCH_CANDIDATES, lambda: api.list(filters), arg=filters)


async def fetch_candidate_by_id(
    candidates: SliceStore[CandidatesState], api: CandidatesApi, candidate_id: str
) -> Action:
    return await candidates.run_thunk(
        FETCH_CANDIDATE_BY_ID, lambda: api.get(candidate_id), arg=candidate_id
    )


async def fetch_candidates_by_job(
    candidates: SliceStore[CandidatesState], api: CandidatesApi, job_id: str
) -> Action:
    return await candidates.run_thunk(FETCH_BY_JOB, lambda: api.list_by_job(job_id), arg=job_id)


async def update_candidate(
    candidates: SliceStore[CandidatesState],
    api: CandidatesApi,
    candidate_id: str,
    updates: Union[CandidateUpdate, Dict[str, Any]],
) -> Action:
    return await candidates.run_thunk(
        UPDATE_CANDIDATE, lambda: api.update(candidate_id, updates), arg=candidate_id
    )


async def update_candidate_stage(
    candidates: SliceStore[CandidatesState],
    api: CandidatesApi,
    candidate_id: str,
    new_stage: CandidateStageType,
    moved_by: Optional[str] = None,
) -> Action:
    """Move a candidate between Kanban columns once the store has confirmed it."""
    return await candidates.run_thunk(
        UPDATE_STAGE,
        lambda: api.update_stage(candidate_id, new_stage, moved_by),
        arg={"candidate_id": candidate_id, "new_stage": new_stage, "moved_by": moved_by},
    )


async def add_candidate_note(
    candidates: SliceStore[CandidatesState],
    api: CandidatesApi,
    candidate_id: str,
    content: str,
    created_by: Optional[str] = None,
) -> Action:
    return await candidates.run_thunk(
        ADD_NOTE,
        lambda: api.add_note(candidate_id, content, created_by),
        arg=candidate_id,
        to_payload=lambda note: {"candidate_id": candidate_id, "note": note},
    )


# ==================== Selectors ==================== #

def select_candidates(state: CandidatesState) -> List[Candidate]:
    return state.candidates


def select_job_candidates(state: CandidatesState) -> List[Candidate]:
    return state.job_candidates


def select_current_candidate(state: CandidatesState) -> Optional[Candidate]:
    return state.current_candidate


def select_candidates_loading(state: CandidatesState) -> bool:
    return state.loading


def select_candidates_error(state: CandidatesState) -> Optional[str]:
    return state.error


def select_candidates_filters(state: CandidatesState) -> CandidateFilters:
    return state.filters


def select_candidates_pagination(state: CandidatesState) -> Pagination:
    return state.pagination


def select_candidate_by_id(state: CandidatesState, candidate_id: str) -> Optional[Candidate]:
    return next((c for c in state.candidates if c.id == candidate_id), None)


def select_candidates_by_job(state: CandidatesState, job_id: str) -> List[Candidate]:
    return [c for c in state.candidates if c.job_id == job_id]


def select_candidates_by_stage(state: CandidatesState, job_id: str) -> Dict[str, List[Candidate]]:
    """Kanban columns for a job, one per stage in pipeline order."""
    board: Dict[str, List[Candidate]] = {stage: [] for stage in CANDIDATE_STAGES}
    for candidate in state.job_candidates:
        if candidate.job_id == job_id:
            board[candidate.stage].append(candidate)
    return board
