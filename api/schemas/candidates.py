"""Candidate-related Pydantic schemas."""

from datetime import datetime
from typing import Literal, Optional
from pydantic import Field, field_validator

from api.schemas.common import CamelModel, Pagination

CandidateStageType = Literal["applied", "screen", "tech", "offer", "hired", "rejected"]

# Pipeline order, also the column order of the Kanban board
CANDIDATE_STAGES: tuple[str, ...] = (
    "applied",
    "screen",
    "tech",
    "offer",
    "hired",
    "rejected",
)


class Note(CamelModel):
    """A note left on a candidate. Never edited after creation."""

    id: str
    content: str
    created_at: datetime
    created_by: str


class NoteCreate(CamelModel):
    """Schema for adding a note."""

    content: str = Field(description="Note body")
    created_by: Optional[str] = Field(None, description="Author; defaults to the configured author")

    @field_validator("content", mode="before")
    @classmethod
    def strip_content(cls, v: str) -> str:
        """Strip whitespace from the note body."""
        if isinstance(v, str):
            return v.strip()
        return v


class TimelineEvent(CamelModel):
    """An informational entry in a candidate's history."""

    id: str
    type: str
    message: str
    created_at: datetime
    created_by: str


class Candidate(CamelModel):
    """A stored candidate."""

    id: str = Field(description="Unique candidate identifier")
    name: str = ""
    email: str = ""
    phone: str = ""
    job_id: str = Field(description="Job applied to; may reference a deleted job")
    stage: CandidateStageType = "applied"
    avatar: str = ""
    location: str = ""
    experience: str = ""
    skills: list[str] = Field(default_factory=list)
    applied_at: datetime
    notes: list[Note] = Field(default_factory=list)
    timeline: list[TimelineEvent] = Field(default_factory=list)


class CandidateUpdate(CamelModel):
    """Schema for a shallow candidate update.

    A `notes` or `timeline` value replaces the whole list.
    """

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    job_id: Optional[str] = None
    stage: Optional[CandidateStageType] = None
    avatar: Optional[str] = None
    location: Optional[str] = None
    experience: Optional[str] = None
    skills: Optional[list[str]] = None
    notes: Optional[list[Note]] = None
    timeline: Optional[list[TimelineEvent]] = None


class CandidateFilters(CamelModel):
    """Listing parameters for candidates."""

    search: str = ""
    stage: str = "all"
    page: int = 1
    page_size: int = 10


class CandidateListResponse(CamelModel):
    """One page of candidates."""

    candidates: list[Candidate]
    pagination: Pagination
