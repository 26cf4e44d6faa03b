#!/usr/bin/env python3
"""Migration script to add deep-clean pricing and per-cleaner job costs.

This migration adds:
- clients.deep_clean_price_per_hour (NUMERIC, nullable)
- professionals.deep_clean_rate_per_hour (NUMERIC, nullable)
- jobs.service_kind (VARCHAR, default 'regular')
- job_professionals.cost (NUMERIC, nullable)

Existing jobs become regular cleans. Their per-cleaner cost is left NULL, so
payment runs split each old job's total cost evenly between its cleaners.

Usage:
    python migrations/migrate_add_deep_clean_support.py [--db-path PATH]
"""

import sys
from pathlib import Path

# Add src to path so we can import cleanops modules
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from sqlalchemy import text, inspect
from cleanops.database.factories import create_sqlite_database

COLUMNS = [
    ("clients", "deep_clean_price_per_hour", "NUMERIC(10, 2)"),
    ("professionals", "deep_clean_rate_per_hour", "NUMERIC(10, 2)"),
    ("jobs", "service_kind", "VARCHAR NOT NULL DEFAULT 'regular'"),
    ("job_professionals", "cost", "NUMERIC(10, 2)"),
]


def column_exists(engine, table_name: str, column_name: str) -> bool:
    """Check if a column exists in a table.

    Args:
        engine: SQLAlchemy engine
        table_name: Name of the table
        column_name: Name of the column

    Returns:
        True if column exists, False otherwise
    """
    inspector = inspect(engine)
    columns = [col["name"] for col in inspector.get_columns(table_name)]
    return column_name in columns


def migrate_database(database_path: str | None = None) -> list[str]:
    """Add any missing deep-clean columns.

    Args:
        database_path: Path to database file. If None, uses default location.

    Returns:
        The "table.column" names that were added (empty if already migrated)

    Raises:
        Exception: If migration fails
    """
    db = create_sqlite_database(database_path=database_path)
    db.connect()

    try:
        # Get engine from sessionmaker by creating a session and accessing its bind
        session = db.session_factory()
        try:
            engine = session.bind
            if engine is None:
                raise Exception("Could not get database engine from session")
        finally:
            session.close()

        inspector = inspect(engine)
        tables = set(inspector.get_table_names())
        missing_tables = sorted({table for table, _, _ in COLUMNS} - tables)
        if missing_tables:
            raise Exception(
                f"Table(s) {', '.join(missing_tables)} do not exist. Please initialize the database schema first."
            )

        pending = [
            (table, column, ddl) for table, column, ddl in COLUMNS if not column_exists(engine, table, column)
        ]
        if not pending:
            print("Migration already applied: deep-clean columns exist")
            return []

        print("Starting migration: adding deep-clean columns...")
        added = []
        with engine.begin() as conn:
            for table, column, ddl in pending:
                conn.execute(text(f"ALTER TABLE {table} ADD COLUMN {column} {ddl}"))
                added.append(f"{table}.{column}")
                print(f"  Added column: {table}.{column}")

            legacy = conn.execute(text("SELECT COUNT(*) FROM job_professionals WHERE cost IS NULL")).scalar()
            if legacy:
                print(f"  {legacy} job assignment(s) have no per-cleaner cost; payment runs will split evenly")

        print("Migration completed successfully!")
        return added

    except Exception as e:
        print(f"Migration failed: {e}")
        raise
    finally:
        db.disconnect()


def main():
    """Main entry point for migration script."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Migrate database to add deep-clean pricing and per-cleaner job costs"
    )
    parser.add_argument(
        "--db-path",
        type=str,
        help="Path to database file (overrides CLEANOPS_DB_PATH environment variable)",
    )
    args = parser.parse_args()

    try:
        migrate_database(database_path=args.db_path)
        return 0
    except Exception as e:
        print(f"\nMigration failed: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
