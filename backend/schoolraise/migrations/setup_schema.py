"""
setup-schema: creates every table that does not exist yet.
"""

import logging

from sqlalchemy import inspect
from sqlalchemy.engine import Engine

import schoolraise.models  # noqa: F401 (fills Base.metadata)
from schoolraise.database import Base

logger = logging.getLogger(__name__)


def run(engine: Engine) -> list[str]:
    """Creates the missing tables in dependency order and returns their names."""
    created = []
    with engine.begin() as conn:
        existing = set(inspect(conn).get_table_names())
        for table in Base.metadata.sorted_tables:
            if table.name in existing:
                logger.info("Table %s already exists", table.name)
                continue
            table.create(conn)
            created.append(table.name)
            logger.info("Table %s created", table.name)

    logger.info("Schema ready: %d tables created, %d already present", len(created), len(existing & set(Base.metadata.tables)))
    return created
