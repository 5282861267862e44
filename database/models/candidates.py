"""
Candidate Models

Candidates applying to a job. `jobId` is a soft reference: no foreign key,
so a candidate may outlive the job it applied to. Notes and timeline stay
embedded in the record document.
"""

from typing import Any

from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, JSON, Index

from database.engine import Base


class CandidateRow(Base):
    """Stored candidate profile."""

    __tablename__ = "candidates"

    INDEXED_FIELDS = {"jobId": "job_id", "stage": "stage"}

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    job_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    stage: Mapped[str | None] = mapped_column(String(20), nullable=True)
    data: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)

    __table_args__ = (
        Index("idx_candidates_job_id", "job_id"),
        Index("idx_candidates_stage", "stage"),
    )

    def __repr__(self) -> str:
        return f"<CandidateRow(id={self.id!r}, job_id={self.job_id!r}, stage={self.stage!r})>"
