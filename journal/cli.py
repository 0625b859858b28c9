"""CLI tool for journal maintenance.

Usage:
    python -m journal.cli init-db
    python -m journal.cli summary <user> [day|month|year|total]
"""

import sys

from sqlmodel import Session

from journal.database import engine, create_db_and_tables
from journal.engine.summary import GroupBy, aggregate
from journal.services.repository import TradeRepository
from journal.utils.logging import setup_logging
from journal.utils.timezones import journal_timezone


def init_db():
    """Create tables and apply pending column migrations."""
    create_db_and_tables()
    print("Database ready.")


def print_summary(user_id: str, group_by: str = "month"):
    """Print realized P/L per bucket for one user."""
    try:
        group = GroupBy(group_by)
    except ValueError:
        print(f"Unknown grouping: {group_by}")
        sys.exit(1)

    create_db_and_tables()
    with Session(engine) as session:
        trades = TradeRepository(session, user_id).load()

    buckets = aggregate(trades, group, tz=journal_timezone())
    if not buckets:
        print(f"No realized results for user '{user_id}'.")
        return
    width = max(len(key) for key in buckets)
    for key, value in buckets.items():
        print(f"{key:<{width}}  {value:>12.2f}")


def main():
    setup_logging()
    if len(sys.argv) < 2:
        print("Usage: python -m journal.cli <command>")
        print("Commands: init-db, summary <user> [day|month|year|total]")
        sys.exit(1)

    command = sys.argv[1]
    if command == "init-db":
        init_db()
    elif command == "summary":
        if len(sys.argv) < 3:
            print("Usage: python -m journal.cli summary <user> [day|month|year|total]")
            sys.exit(1)
        print_summary(sys.argv[2], *sys.argv[3:4])
    else:
        print(f"Unknown command: {command}")
        sys.exit(1)


if __name__ == "__main__":
    main()
