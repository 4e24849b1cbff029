"""
Add the derived schedule columns (end_date, duration_days, include_weekends)
to the jobs table.

Usage:
    python migrations/add_schedule_columns_to_jobs.py [--database-url URL]

The script is idempotent and safe to run multiple times. It inspects the current
schema before attempting to alter the table, and backfills include_weekends
to false on existing rows.
"""

import argparse
import os
import sys

from dotenv import load_dotenv

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.exc import OperationalError, ProgrammingError

ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DEFAULT_SQLITE_PATH = os.path.join(ROOT_DIR, "instance", "jobs.sqlite")

# Column name -> DDL type
SCHEDULE_COLUMNS = [
    ("end_date", "DATE"),
    ("duration_days", "INTEGER"),
    ("include_weekends", "BOOLEAN NOT NULL DEFAULT FALSE"),
]

# Load environment variables from a .env file if present
load_dotenv()


def normalize_sqlite_path(path: str) -> str:
    """Return a SQLAlchemy-friendly SQLite URL for the given path."""
    if not os.path.isabs(path):
        path = os.path.join(ROOT_DIR, path)
    return f"sqlite:///{path}"


def infer_database_url(cli_url: str = None) -> str:
    """Figure out which database to hit, honoring CLI and environment defaults."""
    candidates = [
        cli_url,
        os.environ.get("DATABASE_URL"),
        os.environ.get("PRODUCTION_DATABASE_URL"),
        os.environ.get("SANDBOX_DATABASE_URL"),
        os.environ.get("LOCAL_DATABASE_URL"),
    ]

    for value in candidates:
        if not value:
            continue

        value = value.strip()
        if value.startswith("postgres://"):
            return value.replace("postgres://", "postgresql://", 1)

        if value.startswith(("postgresql://", "mysql://", "mariadb://", "sqlite://")):
            return value

        # Treat anything else as a filesystem path to a SQLite DB
        return normalize_sqlite_path(value)

    return normalize_sqlite_path(DEFAULT_SQLITE_PATH)


def column_exists(engine, table_name: str, column_name: str) -> bool:
    """Check if a given column exists on the specified table."""
    inspector = inspect(engine)
    columns = inspector.get_columns(table_name)
    return any(col["name"] == column_name for col in columns)


def migrate(database_url: str = None) -> bool:
    """Add any missing schedule columns to jobs."""
    db_url = infer_database_url(database_url)
    print(f"Connecting to database: {db_url}")

    engine = create_engine(db_url)

    try:
        missing = [(name, ddl) for name, ddl in SCHEDULE_COLUMNS if not column_exists(engine, "jobs", name)]
        if not missing:
            print("✓ All schedule columns already exist on 'jobs'. Nothing to do.")
            return True

        with engine.begin() as conn:
            for name, ddl in missing:
                print(f"Adding column '{name}' to 'jobs' table...")
                conn.execute(text(f"ALTER TABLE jobs ADD COLUMN {name} {ddl}"))

        still_missing = [name for name, _ in SCHEDULE_COLUMNS if not column_exists(engine, "jobs", name)]
        if still_missing:
            print(f"✗ Columns not added: {', '.join(still_missing)}. Please verify manually.")
            return False

        print("✓ Successfully added schedule columns to 'jobs'.")
        return True

    except (OperationalError, ProgrammingError) as exc:
        print(f"✗ Database error while adding columns: {exc}")
        return False
    finally:
        engine.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Add schedule columns to jobs table.")
    parser.add_argument(
        "--database-url",
        help="Override database URL (otherwise inferred from env or defaults).",
    )
    args = parser.parse_args()

    success = migrate(args.database_url)
    sys.exit(0 if success else 1)
