"""Job-related Pydantic schemas."""

from datetime import datetime
from typing import Literal, Optional
from pydantic import Field, field_validator

from api.schemas.common import CamelModel, Pagination

JobStatusType = Literal["active", "draft", "archived"]

VALID_JOB_STATUSES: tuple[str, ...] = ("active", "draft", "archived")

JobSortType = Literal["order", "title", "createdAt"]


class JobBase(CamelModel):
    """Fields supplied when a job is created."""

    title: str = Field(default="", description="Job title")
    description: str = Field(default="", description="Job description")
    status: JobStatusType = Field(default="draft", description="Publication status")
    tags: list[str] = Field(default_factory=list, description="Ordered tags")
    location: str = Field(default="", description="Work location")
    type: str = Field(default="", description="Employment type")
    department: str = Field(default="", description="Owning department")

    @field_validator("title", mode="before")
    @classmethod
    def coerce_title(cls, v: Optional[str]) -> str:
        """Treat a missing title as empty."""
        return v if v is not None else ""


class JobCreate(JobBase):
    """Schema for creating a job; id, slug, order and timestamps are assigned."""


class JobUpdate(CamelModel):
    """Schema for a partial job update. Only fields that are set are merged."""

    title: Optional[str] = None
    slug: Optional[str] = None
    description: Optional[str] = None
    status: Optional[JobStatusType] = None
    tags: Optional[list[str]] = None
    location: Optional[str] = None
    type: Optional[str] = None
    department: Optional[str] = None
    order: Optional[int] = None


class Job(JobBase):
    """A stored job posting."""

    id: str = Field(description="Unique job identifier")
    slug: str = Field(default="", description="Slug derived from the title")
    created_at: datetime
    updated_at: datetime
    order: int = Field(default=0, description="Position across all jobs")


class JobFilters(CamelModel):
    """Listing parameters for jobs."""

    search: str = ""
    status: str = "all"
    page: int = 1
    page_size: int = 10
    sort: str = "order"


class JobListResponse(CamelModel):
    """One page of jobs."""

    jobs: list[Job]
    pagination: Pagination


class ReorderRequest(CamelModel):
    """Body of a reorder request."""

    job_ids: list[str] = Field(description="Job ids in their new order")
