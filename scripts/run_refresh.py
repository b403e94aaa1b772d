"""
Script to run one data refresh synchronously
"""

import argparse
import asyncio
import sys
import os
import logging

# Add current directory to path to allow imports from core, models, etc.
sys.path.append(os.getcwd())

from core.config import settings
from core.database import create_engine, create_session_maker
from core.exceptions import ETLException
from core.logging import setup_logging
from ingestion.refresh import build_refresh_orchestrator

logger = logging.getLogger(__name__)


async def run_refresh(csv_path: str) -> int:
    """Truncate and reload the sales tables from csv_path"""
    engine = create_engine()
    session_maker = create_session_maker(engine)

    try:
        orchestrator = build_refresh_orchestrator(
            session_maker,
            csv_path,
            row_timeout=settings.ROW_TIMEOUT_SECONDS
        )
        result = await orchestrator.refresh(
            trigger="cli",
            timeout=settings.REFRESH_TIMEOUT_SECONDS
        )
        logger.info(
            f"Refresh completed: "
            f"Total={result.summary.total}, "
            f"Loaded={result.summary.loaded}, "
            f"Skipped={result.summary.skipped}"
        )
        return 0

    except ETLException as e:
        logger.error(f"Refresh failed: {e}")
        return 1
    finally:
        await engine.dispose()


def main():
    parser = argparse.ArgumentParser(description="Reload the sales dataset from a CSV file")
    parser.add_argument(
        "csv_path",
        nargs="?",
        default=settings.SALES_CSV_PATH,
        help=f"CSV file to load (default: {settings.SALES_CSV_PATH})"
    )
    args = parser.parse_args()

    setup_logging()
    sys.exit(asyncio.run(run_refresh(args.csv_path)))


if __name__ == "__main__":
    main()
