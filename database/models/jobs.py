"""
Jobs Module

Job postings. The whole record lives in `data`; `status` and `order` are
copied out so listings can filter and sort on indexed columns.
"""

from typing import Any

from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Integer, JSON, Index

from database.engine import Base


class JobRow(Base):
    """Stored job posting."""

    __tablename__ = "jobs"

    # record field -> column attribute
    INDEXED_FIELDS = {"status": "status", "order": "order"}

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    status: Mapped[str | None] = mapped_column(String(20), nullable=True)
    order: Mapped[int | None] = mapped_column("order", Integer, nullable=True)
    data: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)

    __table_args__ = (
        Index("idx_jobs_status", "status"),
        Index("idx_jobs_order", "order"),
    )

    def __repr__(self) -> str:
        return f"<JobRow(id={self.id!r}, status={self.status!r}, order={self.order})>"
