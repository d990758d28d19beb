#!/usr/bin/env python3
"""Database inspection script — PortfolAI.

Lists every table in the database, then prints each table's row count and
up to ten sample rows.

Usage:
    # From the repo root:
    python scripts/check_db.py
    python scripts/check_db.py --limit 3
    python scripts/check_db.py --table meetings
"""

from __future__ import annotations

import argparse
import json
import os
import sys

# Allow running from the repo root or from scripts/
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from portfolai.core.config import settings

from sqlalchemy import MetaData, Table, create_engine, func, inspect, select
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError

# Never printed; the column is listed as redacted instead
CREDENTIAL_COLUMNS = frozenset({"password_hash"})


def _sample_rows(conn: Connection, table: Table, limit: int) -> list[dict]:
    rows = []
    for row in conn.execute(select(table).limit(limit)):
        sample = dict(row._mapping)
        for column in CREDENTIAL_COLUMNS.intersection(sample):
            sample[column] = "[REDACTED]"
        rows.append(sample)
    return rows


def describe_table(conn: Connection, metadata: MetaData, name: str, limit: int) -> None:
    table = Table(name, metadata, autoload_with=conn)
    count = conn.execute(select(func.count()).select_from(table)).scalar_one()

    print(f"\n=== {name.upper()} ({count} rows) ===")
    rows = _sample_rows(conn, table, limit)
    if rows:
        print(json.dumps(rows, indent=2, default=str))
    else:
        print("(empty)")


def main() -> None:
    parser = argparse.ArgumentParser(description="Show PortfolAI tables, row counts and sample rows")
    parser.add_argument(
        "--limit",
        type=int,
        default=10,
        help="Sample rows to print per table (default: 10)",
    )
    parser.add_argument(
        "--table",
        action="append",
        default=None,
        help="Only show this table (repeatable)",
    )
    args = parser.parse_args()

    engine = create_engine(settings.DATABASE_URL_SYNC, echo=False)

    try:
        with engine.connect() as conn:
            tables = sorted(inspect(conn).get_table_names())
            print("=== DATABASE TABLES ===")
            print(", ".join(tables))

            metadata = MetaData()
            for name in args.table or tables:
                if name not in tables:
                    print(f"\n=== {name.upper()} === (no such table)")
                    continue
                describe_table(conn, metadata, name, args.limit)
    except SQLAlchemyError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    finally:
        engine.dispose()


if __name__ == "__main__":
    main()
