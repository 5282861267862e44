"""Candidate service functions."""

from typing import Any, Dict, List, Optional, Union
import logging

from api.schemas.candidates import (
    Candidate,
    CandidateFilters,
    CandidateListResponse,
    CandidateStageType,
    CandidateUpdate,
    Note,
)
from api.services.query import pagination_params, query_candidates
from core.config import settings
from core.exceptions import NotFoundError
from core.utils.datetime import now
from core.utils.formatting import generate_id, mask_email
from database.store import RecordStore

logger = logging.getLogger(__name__)

TABLE = "candidates"


async def list_all_candidates(store: RecordStore) -> List[Candidate]:
    """Every candidate in storage order."""
    records = await store.query_all(TABLE)
    return [Candidate.model_validate(record) for record in records]


async def list_candidates(store: RecordStore, filters: CandidateFilters) -> CandidateListResponse:
    """One filtered page of candidates."""
    pagination_params(filters.page, filters.page_size)
    candidates, pagination = query_candidates(await list_all_candidates(store), filters)
    return CandidateListResponse(candidates=candidates, pagination=pagination)


async def list_candidates_by_job(store: RecordStore, job_id: str) -> List[Candidate]:
    """All candidates for a job, unpaginated. Unknown jobs give an empty list."""
    records = await store.query_by_equals(TABLE, "jobId", job_id)
    return [Candidate.model_validate(record) for record in records]


async def get_candidate(store: RecordStore, candidate_id: str) -> Candidate:
    """Get candidate details."""
    record = await store.get(TABLE, candidate_id)
    if not record:
        raise NotFoundError("Candidate not found")
    return Candidate.model_validate(record)


async def update_candidate(
    store: RecordStore,
    candidate_id: str,
    updates: Union[CandidateUpdate, Dict[str, Any]],
) -> Candidate:
    """
    Shallow-merge the fields that are set into a candidate.

    Passing `notes` or `timeline` replaces the whole list; use
    `add_candidate_note` to append.
    """
    if not isinstance(updates, CandidateUpdate):
        updates = CandidateUpdate.model_validate(updates)

    record = await store.get(TABLE, candidate_id)
    if not record:
        raise NotFoundError("Candidate not found")

    merged = {
        **record,
        **updates.model_dump(
            mode="json", by_alias=True, exclude_unset=True, exclude_none=True
        ),
        "id": candidate_id,
    }
    candidate = Candidate.model_validate(merged)
    await store.put(TABLE, candidate.to_record())
    logger.info(f"Updated candidate {candidate_id}: {sorted(updates.model_fields_set)}")
    return candidate


async def update_candidate_stage(
    store: RecordStore,
    candidate_id: str,
    new_stage: CandidateStageType,
    moved_by: Optional[str] = None,
) -> Candidate:
    """
    Move a candidate to another stage.

    Any stage can follow any other. No timeline event is recorded; `moved_by`
    only shows up in the log.
    """
    candidate = await update_candidate(store, candidate_id, CandidateUpdate(stage=new_stage))
    logger.info(
        f"Candidate {candidate_id} moved to {new_stage}"
        + (f" by {mask_email(moved_by)}" if moved_by else "")
    )
    return candidate


async def add_candidate_note(
    store: RecordStore,
    candidate_id: str,
    content: str,
    created_by: Optional[str] = None,
) -> Note:
    """Append a note to a candidate and return it."""
    record = await store.get(TABLE, candidate_id)
    if not record:
        raise NotFoundError("Candidate not found")

    candidate = Candidate.model_validate(record)
    note = Note(
        id=generate_id("note"),
        content=content,
        created_at=now(),
        created_by=created_by or settings.default_note_author,
    )
    candidate.notes.append(note)
    await store.put(TABLE, candidate.to_record())
    logger.info(f"Added note {note.id} to candidate {candidate_id}")
    return note
