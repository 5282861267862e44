"""Assessment service functions."""

from typing import Any, Dict, List, Union
import logging

from api.schemas.assessments import Assessment
from core.exceptions import NotFoundError
from database.store import RecordStore

logger = logging.getLogger(__name__)

TABLE = "assessments"


async def list_assessments(store: RecordStore) -> List[Assessment]:
    """Every stored assessment."""
    records = await store.query_all(TABLE)
    return [Assessment.model_validate(record) for record in records]


async def get_assessment_by_job_id(store: RecordStore, job_id: str) -> Assessment:
    """The assessment for a job; the first by id if several exist."""
    records = await store.query_by_equals(TABLE, "jobId", job_id)
    if not records:
        raise NotFoundError("Assessment not found")
    if len(records) > 1:
        logger.warning(f"Found {len(records)} assessments for job {job_id}, using {records[0]['id']}")
    return Assessment.model_validate(records[0])


async def save_assessment(
    store: RecordStore, assessment: Union[Assessment, Dict[str, Any]]
) -> Assessment:
    """
    Upsert an assessment by id.

    Any other assessment stored for the same job is removed so that each job
    keeps a single assessment.
    """
    if not isinstance(assessment, Assessment):
        assessment = Assessment.model_validate(assessment)

    await store.put(TABLE, assessment.to_record())

    for record in await store.query_by_equals(TABLE, "jobId", assessment.job_id):
        if record["id"] != assessment.id:
            await store.delete(TABLE, record["id"])
            logger.warning(
                f"Removed duplicate assessment {record['id']} for job {assessment.job_id}"
            )

    logger.info(f"Saved assessment {assessment.id} for job {assessment.job_id}")
    return assessment


async def delete_assessment(store: RecordStore, job_id: str) -> int:
    """Delete every assessment attached to a job."""
    deleted = await store.delete_where(TABLE, "jobId", job_id)
    if not deleted:
        raise NotFoundError("Assessment not found")
    logger.info(f"Deleted {deleted} assessment(s) for job {job_id}")
    return deleted
