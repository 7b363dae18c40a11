#!/usr/bin/env python3
"""Load the city/salary workbooks (optional) and run a calculation against the configured DB."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Sequence

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from payroll_contrib.core.log import get_logger, log_context, set_level, shutdown_logging
from payroll_contrib.db import create_sync_engine, get_sessionmaker, session_scope
from payroll_contrib.domain.errors import ContributionError
from payroll_contrib.models import Base
from payroll_contrib.repositories import SqlAlchemyContributionStore
from payroll_contrib.services import CalculationService, IngestService

logger = get_logger(__name__)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--cities", type=Path, help="cities.xlsx to ingest before calculating")
    parser.add_argument("--salaries", type=Path, help="salaries.xlsx to ingest before calculating")
    parser.add_argument("--database-url", help="SQLAlchemy URL overriding the configured database")
    parser.add_argument("--create-tables", action="store_true", help="create missing tables first")
    parser.add_argument("--log-level", default=None, help="override LOG_LEVEL")
    args = parser.parse_args(argv)
    if (args.cities is None) != (args.salaries is None):
        parser.error("--cities and --salaries must be given together")
    return args


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    if args.log_level:
        set_level(args.log_level)

    engine = create_sync_engine(args.database_url)
    if args.create_tables:
        Base.metadata.create_all(engine)
        logger.info("Ensured tables exist")

    try:
        with session_scope(get_sessionmaker(engine=engine)) as session:
            store = SqlAlchemyContributionStore(session)
            if args.cities is not None:
                with log_context.scoped(cities=args.cities.name, salaries=args.salaries.name):
                    summary = IngestService().load_workbooks(
                        store, cities=args.cities, salaries=args.salaries
                    )
                print(summary.message)
            result = CalculationService().run(store)
            print(result.message)
    except ContributionError as exc:
        logger.error("%s", exc)
        return 1
    finally:
        engine.dispose()
        shutdown_logging()
    return 0


if __name__ == "__main__":
    sys.exit(main())
