"""
Record store over the jobs, candidates and assessments tables.

Records go in and come out as plain dicts in wire format (camelCase keys).
Each table keeps the full document plus a few indexed columns copied out of
it, which is what `query_by_equals` and `query_all(order_by=...)` use.

Reads without an explicit order return rows sorted by primary key.
`bulk_put` runs in one transaction, but callers that read, modify and then
`bulk_put` (such as reorders) are not isolated from other coroutines that
write in between.

On an in-memory database every call is serialized by the store's lock, so
share one `RecordStore` per in-memory engine.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Iterable, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from core.exceptions import StorageFailure
from database.engine import AsyncSessionLocal
from database.models.assessments import AssessmentRow
from database.models.candidates import CandidateRow
from database.models.jobs import JobRow

logger = logging.getLogger(__name__)

TABLES: dict[str, type] = {
    "jobs": JobRow,
    "candidates": CandidateRow,
    "assessments": AssessmentRow,
}


def shares_one_connection(session_factory: async_sessionmaker[AsyncSession]) -> bool:
    """True when the factory's engine pools a single connection (in-memory SQLite)."""
    bind = session_factory.kw.get("bind")
    if bind is None:
        return False
    return isinstance(bind.sync_engine.pool, StaticPool)


class RecordStore:
    """Key-value collections with equality and ordered queries on indexed fields."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession] = AsyncSessionLocal):
        self._session_factory = session_factory
        # In-memory SQLite hands every session the same connection, so an
        # uncommitted session closing would roll back another one's writes
        self._lock: Optional[asyncio.Lock] = (
            asyncio.Lock() if shares_one_connection(session_factory) else None
        )

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        """One session per call; serialized when all sessions share a connection."""
        if self._lock is None:
            async with self._session_factory() as session:
                yield session
            return
        async with self._lock:
            async with self._session_factory() as session:
                yield session

    @staticmethod
    def _model(table: str) -> type:
        try:
            return TABLES[table]
        except KeyError:
            raise ValueError(f"Unknown table: {table}") from None

    @staticmethod
    def _column(model: type, field: str):
        attr = model.INDEXED_FIELDS.get(field)
        if attr is None:
            raise ValueError(f"Field '{field}' is not indexed on {model.__tablename__}")
        return getattr(model, attr)

    @staticmethod
    def _to_row(model: type, record: dict[str, Any]):
        if not record.get("id"):
            raise ValueError("Record must have an id")
        columns = {
            attr: record.get(field) for field, attr in model.INDEXED_FIELDS.items()
        }
        return model(id=record["id"], data=dict(record), **columns)

    def _storage_failure(self, action: str, table: str, exc: SQLAlchemyError) -> StorageFailure:
        logger.error(f"Storage error during {action} on {table}: {exc}", exc_info=True)
        return StorageFailure(f"Storage unavailable while trying to {action} {table}")

    async def get(self, table: str, record_id: str) -> Optional[dict[str, Any]]:
        """Fetch one record by id, or None."""
        model = self._model(table)
        try:
            async with self._session() as session:
                row = await session.get(model, record_id)
                return dict(row.data) if row else None
        except SQLAlchemyError as exc:
            raise self._storage_failure("read", table, exc) from exc

    async def put(self, table: str, record: dict[str, Any]) -> dict[str, Any]:
        """Insert or replace a record by id."""
        model = self._model(table)
        row = self._to_row(model, record)
        try:
            async with self._session() as session:
                await session.merge(row)
                await session.commit()
        except SQLAlchemyError as exc:
            raise self._storage_failure("write", table, exc) from exc
        return record

    async def bulk_put(self, table: str, records: Iterable[dict[str, Any]]) -> int:
        """Upsert many records in a single transaction."""
        model = self._model(table)
        rows = [self._to_row(model, record) for record in records]
        try:
            async with self._session() as session:
                for row in rows:
                    await session.merge(row)
                await session.commit()
        except SQLAlchemyError as exc:
            raise self._storage_failure("write", table, exc) from exc
        return len(rows)

    async def delete(self, table: str, record_id: str) -> bool:
        """Delete by id. Returns False when nothing was there."""
        model = self._model(table)
        try:
            async with self._session() as session:
                result = await session.execute(delete(model).where(model.id == record_id))
                await session.commit()
                return (result.rowcount or 0) > 0
        except SQLAlchemyError as exc:
            raise self._storage_failure("delete from", table, exc) from exc

    async def delete_where(self, table: str, field: str, value: Any) -> int:
        """Delete every record whose indexed `field` equals `value`."""
        model = self._model(table)
        column = self._column(model, field)
        try:
            async with self._session() as session:
                result = await session.execute(delete(model).where(column == value))
                await session.commit()
                return result.rowcount or 0
        except SQLAlchemyError as exc:
            raise self._storage_failure("delete from", table, exc) from exc

    async def query_by_equals(self, table: str, field: str, value: Any) -> list[dict[str, Any]]:
        """Records whose indexed `field` equals `value`, in primary key order."""
        model = self._model(table)
        column = self._column(model, field)
        try:
            async with self._session() as session:
                result = await session.execute(
                    select(model).where(column == value).order_by(model.id)
                )
                return [dict(row.data) for row in result.scalars().all()]
        except SQLAlchemyError as exc:
            raise self._storage_failure("read", table, exc) from exc

    async def query_all(self, table: str, order_by: Optional[str] = None) -> list[dict[str, Any]]:
        """Every record, sorted by an indexed field or else by primary key."""
        model = self._model(table)
        query = select(model)
        if order_by:
            query = query.order_by(self._column(model, order_by), model.id)
        else:
            query = query.order_by(model.id)
        try:
            async with self._session() as session:
                result = await session.execute(query)
                return [dict(row.data) for row in result.scalars().all()]
        except SQLAlchemyError as exc:
            raise self._storage_failure("read", table, exc) from exc

    async def count(self, table: str) -> int:
        """Number of records in a table."""
        model = self._model(table)
        try:
            async with self._session() as session:
                result = await session.execute(select(func.count()).select_from(model))
                return result.scalar() or 0
        except SQLAlchemyError as exc:
            raise self._storage_failure("count", table, exc) from exc

    async def clear(self, table: str) -> int:
        """Remove every record from a table."""
        model = self._model(table)
        try:
            async with self._session() as session:
                result = await session.execute(delete(model))
                await session.commit()
                return result.rowcount or 0
        except SQLAlchemyError as exc:
            raise self._storage_failure("clear", table, exc) from exc
