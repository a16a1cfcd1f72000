"""
Create the catalog tables on the database pointed to by DATABASE_SYNC_URL.

Usage:
    python scripts/create_tables.py [--drop]

Only creates what is missing; there is no migration support.
"""
import argparse
import logging

import models  # noqa: F401  registers the tables on Base.metadata
from database import Base, sync_engine

logger = logging.getLogger("create_tables")


def main():
    parser = argparse.ArgumentParser(description="Create Book Catalog tables")
    parser.add_argument("--drop", action="store_true", help="Drop existing tables first")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)
    if args.drop:
        Base.metadata.drop_all(bind=sync_engine)
        logger.info("Dropped tables")
    Base.metadata.create_all(bind=sync_engine)
    logger.info("Created tables: %s", ", ".join(sorted(Base.metadata.tables)))


if __name__ == "__main__":
    main()
