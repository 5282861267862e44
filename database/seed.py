"""
Populate the record store from a JSON seed document.

The document has the shape `{"jobs": [...], "candidates": [...],
"assessments": [...]}`, each entry a record in wire format. Jobs and
candidates are only seeded into an empty table. Assessments are reseeded
whenever any of the seed ids is missing, replacing whatever is stored.
"""

import json
import logging
from pathlib import Path
from typing import Any, Iterable

from api.schemas.assessments import Assessment
from api.schemas.candidates import Candidate
from api.schemas.common import CamelModel
from api.schemas.jobs import Job
from database.store import RecordStore

logger = logging.getLogger(__name__)

SCHEMAS: dict[str, type[CamelModel]] = {
    "jobs": Job,
    "candidates": Candidate,
    "assessments": Assessment,
}


def load_seed_file(path: str | Path) -> dict[str, list[dict[str, Any]]]:
    """Read a seed document; missing sections come back as empty lists."""
    with open(path, encoding="utf-8") as f:
        document = json.load(f)
    if not isinstance(document, dict):
        raise ValueError(f"Seed file {path} must contain a JSON object")
    return {table: list(document.get(table) or []) for table in SCHEMAS}


def _validated(table: str, records: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
    schema = SCHEMAS[table]
    return [schema.model_validate(record).to_record() for record in records]


async def seed_if_empty(store: RecordStore, table: str, records: list[dict[str, Any]]) -> int:
    """Insert `records` only when `table` holds nothing yet."""
    existing = await store.count(table)
    if existing:
        logger.info(f"Table {table} already contains {existing} records")
        return 0
    seeded = await store.bulk_put(table, _validated(table, records))
    logger.info(f"Seeded {seeded} {table}")
    return seeded


async def seed_assessments(store: RecordStore, records: list[dict[str, Any]]) -> int:
    """Replace stored assessments unless every seed id is already present."""
    wanted = {record["id"] for record in records}
    stored = {record["id"] for record in await store.query_all("assessments")}
    if wanted <= stored:
        logger.info(f"All {len(wanted)} seed assessments already present")
        return 0
    return await force_reseed(store, "assessments", records)


async def force_reseed(store: RecordStore, table: str, records: list[dict[str, Any]]) -> int:
    """Clear `table` and insert `records`."""
    validated = _validated(table, records)
    cleared = await store.clear(table)
    seeded = await store.bulk_put(table, validated)
    logger.info(f"Reseeded {table}: removed {cleared}, inserted {seeded}")
    return seeded


async def initialize_database(store: RecordStore, data: dict[str, list[dict[str, Any]]]) -> dict[str, int]:
    """
    Seed the three tables one after another.

    Returns:
        Number of records inserted per table
    """
    logger.info("Initializing database from seed data")
    jobs = await seed_if_empty(store, "jobs", data.get("jobs", []))
    candidates = await seed_if_empty(store, "candidates", data.get("candidates", []))
    assessments = await seed_assessments(store, data.get("assessments", []))
    return {"jobs": jobs, "candidates": candidates, "assessments": assessments}
