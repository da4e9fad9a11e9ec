"""
Create the database schema and check that it is in place.

Applies schema.sql (idempotent) and then confirms that every table the
API depends on exists.

Usage:
    python -m backend.database.init_db
"""

import logging
import sys
from pathlib import Path
from typing import List

from backend.database.db_connection import Database, get_db

SCHEMA_PATH = Path(__file__).resolve().parent / "schema.sql"
REQUIRED_TABLES = ["users", "events", "registrations"]


def init_db(db: Database) -> List[str]:
    """
    Apply the schema and report missing tables.

    Args:
        db (Database): Target database.

    Returns:
        list: Names of required tables that are still missing (empty on success).
    """
    schema = SCHEMA_PATH.read_text(encoding="utf-8")

    with db.connection() as conn:
        with conn.cursor() as cur:
            cur.execute(schema)

            missing = []
            for table in REQUIRED_TABLES:
                cur.execute("SELECT to_regclass(%s);", (table,))
                if not cur.fetchone()[0]:
                    missing.append(table)

    return missing


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(asctime)s - %(message)s")

    db = get_db()
    try:
        missing = init_db(db)
    finally:
        db.close()

    if missing:
        logging.error(f"Schema applied but tables are missing: {', '.join(missing)}")
        return 1

    logging.info("Database schema is ready.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
