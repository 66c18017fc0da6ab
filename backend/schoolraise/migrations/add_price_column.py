"""
add-price-column: adds fundraisers.price (integer cents) to databases created
before ticket prices existed; on later runs, backfills missing or invalid prices.
"""

import logging

from sqlalchemy import inspect, text
from sqlalchemy.engine import Engine

from schoolraise.config import settings

logger = logging.getLogger(__name__)


def run(engine: Engine) -> int:
    """
    Returns the number of fundraisers whose price was backfilled
    (0 when the column has just been added with its default).
    """
    default_price = int(settings.DEFAULT_TICKET_PRICE_CENTS)
    with engine.begin() as conn:
        inspector = inspect(conn)
        if not inspector.has_table("fundraisers"):
            raise RuntimeError("Table fundraisers does not exist, run setup-schema first.")

        columns = {column["name"] for column in inspector.get_columns("fundraisers")}
        if "price" not in columns:
            logger.info("Adding price column to fundraisers...")
            conn.execute(text(
                f"ALTER TABLE fundraisers ADD COLUMN price INTEGER NOT NULL DEFAULT {default_price}"
            ))
            logger.info("Price column added (default %d cents)", default_price)
            updated = 0
        else:
            logger.info("Price column already exists")
            result = conn.execute(
                text("UPDATE fundraisers SET price = :price WHERE price IS NULL OR price <= 0"),
                {"price": default_price},
            )
            updated = result.rowcount or 0
            logger.info("%d fundraisers updated to the default price (%d cents)", updated, default_price)

        total = conn.execute(text("SELECT COUNT(*) FROM fundraisers")).scalar()
        logger.info("fundraisers: %d rows", total)
    return updated
