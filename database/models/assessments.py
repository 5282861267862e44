"""
Assessment Models

Per-job questionnaires. `job_id` is indexed but deliberately not unique:
one assessment per job is enforced when saving, not by the schema.
"""

from typing import Any

from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, JSON, Index

from database.engine import Base


class AssessmentRow(Base):
    """Stored assessment with its sections and questions."""

    __tablename__ = "assessments"

    INDEXED_FIELDS = {"jobId": "job_id"}

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    job_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    data: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)

    __table_args__ = (Index("idx_assessments_job_id", "job_id"),)

    def __repr__(self) -> str:
        return f"<AssessmentRow(id={self.id!r}, job_id={self.job_id!r})>"
