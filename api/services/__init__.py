"""
API Services Layer.

Record operations over the record store, plus the listing query helpers.
Callers outside tests normally reach these through `api.client`, which adds
the simulated network in front.
"""

from api.services.jobs import (
    list_all_jobs,
    list_jobs,
    get_job,
    find_job,
    create_job,
    update_job,
    delete_job,
    reorder_jobs,
)

from api.services.candidates import (
    list_all_candidates,
    list_candidates,
    list_candidates_by_job,
    get_candidate,
    update_candidate,
    update_candidate_stage,
    add_candidate_note,
)

from api.services.assessments import (
    list_assessments,
    get_assessment_by_job_id,
    save_assessment,
    delete_assessment,
)

from api.services.query import (
    query_jobs,
    query_candidates,
    paginate,
    sort_jobs,
)

__all__ = [
    # Jobs
    "list_all_jobs",
    "list_jobs",
    "get_job",
    "find_job",
    "create_job",
    "update_job",
    "delete_job",
    "reorder_jobs",
    # Candidates
    "list_all_candidates",
    "list_candidates",
    "list_candidates_by_job",
    "get_candidate",
    "update_candidate",
    "update_candidate_stage",
    "add_candidate_note",
    # Assessments
    "list_assessments",
    "get_assessment_by_job_id",
    "save_assessment",
    "delete_assessment",
    # Queries
    "query_jobs",
    "query_candidates",
    "paginate",
    "sort_jobs",
]
