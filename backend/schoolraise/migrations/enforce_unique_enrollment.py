"""
enforce-unique-enrollment: guarantees one row per (student_id, fundraiser_id)
in student_fundraisers. Duplicates are removed (the oldest row is kept), then
the unique index is created when no equivalent constraint exists.
"""

import logging

from sqlalchemy import inspect, text
from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

TABLE = "student_fundraisers"
INDEX_NAME = "uq_student_fundraiser"
COLUMNS = {"student_id", "fundraiser_id"}


def _has_unique_pair(inspector) -> bool:
    for constraint in inspector.get_unique_constraints(TABLE):
        if constraint.get("name") == INDEX_NAME or set(constraint["column_names"]) == COLUMNS:
            return True
    for index in inspector.get_indexes(TABLE):
        if index.get("unique") and set(index["column_names"]) == COLUMNS:
            return True
    return False


def run(engine: Engine) -> int:
    """Returns the number of duplicate rows deleted."""
    with engine.begin() as conn:
        inspector = inspect(conn)
        if not inspector.has_table(TABLE):
            raise RuntimeError(f"Table {TABLE} does not exist, run setup-schema first.")

        result = conn.execute(text(
            f"DELETE FROM {TABLE} WHERE id NOT IN ("
            f"SELECT MIN(id) FROM {TABLE} GROUP BY student_id, fundraiser_id)"
        ))
        removed = result.rowcount or 0
        logger.info("%d duplicate enrollments removed", removed)

        if _has_unique_pair(inspector):
            logger.info("Unique constraint on %s(student_id, fundraiser_id) already exists", TABLE)
        else:
            conn.execute(text(f"CREATE UNIQUE INDEX {INDEX_NAME} ON {TABLE} (student_id, fundraiser_id)"))
            logger.info("Unique index %s created", INDEX_NAME)
    return removed
