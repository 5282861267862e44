"""Job service functions."""

from typing import Any, Dict, List, Optional, Union
import logging

from api.schemas.jobs import Job, JobCreate, JobFilters, JobListResponse, JobUpdate
from api.services.query import pagination_params, query_jobs
from core.exceptions import NotFoundError
from core.utils.datetime import now
from core.utils.formatting import generate_id, slugify
from database.store import RecordStore

logger = logging.getLogger(__name__)

TABLE = "jobs"


async def list_all_jobs(store: RecordStore) -> List[Job]:
    """Every job, sorted by display order."""
    records = await store.query_all(TABLE, order_by="order")
    return [Job.model_validate(record) for record in records]


async def list_jobs(store: RecordStore, filters: JobFilters) -> JobListResponse:
    """One filtered, sorted page of jobs."""
    pagination_params(filters.page, filters.page_size)
    jobs, pagination = query_jobs(await list_all_jobs(store), filters)
    return JobListResponse(jobs=jobs, pagination=pagination)


async def get_job(store: RecordStore, job_id: str) -> Job:
    """Get job details."""
    record = await store.get(TABLE, job_id)
    if not record:
        raise NotFoundError("Job not found")
    return Job.model_validate(record)


async def find_job(store: RecordStore, job_id: str) -> Optional[Job]:
    """
    The job a candidate or assessment points at, or None.

    `jobId` references are not enforced, so callers resolving one must
    handle a job that has since been deleted.
    """
    record = await store.get(TABLE, job_id)
    return Job.model_validate(record) if record else None


async def create_job(store: RecordStore, data: Union[JobCreate, Dict[str, Any]]) -> Job:
    """
    Create a job at the end of the display order.

    The new order is the current job count, so after a delete it can repeat
    an existing order until the next reorder.
    An empty or missing title is stored as is, giving an empty slug.
    """
    if not isinstance(data, JobCreate):
        data = JobCreate.model_validate(data)

    timestamp = now()
    job = Job(
        **data.model_dump(),
        id=generate_id("job"),
        slug=slugify(data.title),
        created_at=timestamp,
        updated_at=timestamp,
        order=await store.count(TABLE),
    )
    await store.put(TABLE, job.to_record())
    logger.info(f"Created job {job.id} ({job.slug!r}) at order {job.order}")
    return job


async def update_job(
    store: RecordStore, job_id: str, updates: Union[JobUpdate, Dict[str, Any]]
) -> Job:
    """Merge the fields that are set into an existing job."""
    if not isinstance(updates, JobUpdate):
        updates = JobUpdate.model_validate(updates)

    record = await store.get(TABLE, job_id)
    if not record:
        raise NotFoundError("Job not found")

    merged = {
        **record,
        **updates.model_dump(
            mode="json", by_alias=True, exclude_unset=True, exclude_none=True
        ),
        "id": job_id,
    }
    job = Job.model_validate(merged).model_copy(update={"updated_at": now()})
    await store.put(TABLE, job.to_record())
    logger.info(f"Updated job {job_id}: {sorted(updates.model_fields_set)}")
    return job


async def delete_job(store: RecordStore, job_id: str) -> None:
    """Delete a job. Candidates and assessments pointing at it are kept."""
    deleted = await store.delete(TABLE, job_id)
    if not deleted:
        raise NotFoundError("Job not found")
    logger.info(f"Deleted job {job_id}")


async def reorder_jobs(store: RecordStore, job_ids: List[str]) -> List[str]:
    """
    Overwrite `order` with each id's position in `job_ids`.

    Ids that are not stored are skipped; their positions are not reused.

    Returns:
        The ids that were updated, in their new order
    """
    timestamp = now()
    updated: List[Job] = []
    for index, job_id in enumerate(job_ids):
        record = await store.get(TABLE, job_id)
        if not record:
            logger.debug(f"Reorder skipped unknown job {job_id}")
            continue
        job = Job.model_validate(record).model_copy(
            update={"order": index, "updated_at": timestamp}
        )
        updated.append(job)

    await store.bulk_put(TABLE, [job.to_record() for job in updated])
    logger.info(f"Reordered {len(updated)} of {len(job_ids)} jobs")
    return [job.id for job in updated]
