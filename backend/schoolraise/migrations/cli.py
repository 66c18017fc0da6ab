"""
Command line entry point for the migration scripts.

Exit codes: 0 success, 1 script failure, 2 missing configuration.
"""

import argparse
import logging
import sys
from typing import Callable, Optional

from schoolraise.config import ConfigurationError, settings

logger = logging.getLogger("schoolraise.migrations")

# setup-schema first: the other scripts expect the tables to exist.
ALL = ("setup-schema", "add-price-column", "enforce-unique-enrollment")


def _scripts() -> dict[str, Callable]:
    # Imported late: schoolraise.database builds its engine at import time.
    from schoolraise.migrations import add_price_column, enforce_unique_enrollment, seed_accounts, setup_schema

    return {
        "setup-schema": setup_schema.run,
        "add-price-column": add_price_column.run,
        "enforce-unique-enrollment": enforce_unique_enrollment.run,
        "seed-accounts": seed_accounts.run,
    }


SCRIPT_NAMES = ALL + ("seed-accounts",)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="schoolraise-migrate", description="SchoolRaise database scripts")
    parser.add_argument("script", choices=SCRIPT_NAMES + ("all",))
    parser.add_argument("--echo", action="store_true", help="log every SQL statement")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.INFO,
        stream=sys.stdout,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        database_url = settings.database_url
    except ConfigurationError as exc:
        logger.error("%s", exc)
        return 2

    from schoolraise.database import get_engine

    scripts = _scripts()
    names = ALL if args.script == "all" else (args.script,)
    engine = get_engine(database_url, echo=args.echo)
    current = None
    try:
        for current in names:
            logger.info("Running %s...", current)
            scripts[current](engine)
            logger.info("%s done", current)
    except Exception as exc:
        logger.error("%s failed: %s", current, exc, exc_info=True)
        return 1
    finally:
        engine.dispose()
        logger.info("Connection closed")
    return 0


if __name__ == "__main__":
    sys.exit(main())
