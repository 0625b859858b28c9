"""SQLModel database engine and session management."""

import logging

from sqlalchemy import inspect
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine, Session

from journal.config import settings

logger = logging.getLogger(__name__)

# SQLite needs check_same_thread=False; PostgreSQL does not
connect_args = {}
engine_kwargs = {}
if settings.database_url.startswith("sqlite"):
    connect_args["check_same_thread"] = False
    # In-memory databases only live as long as their single connection
    if settings.database_url in ("sqlite://", "sqlite:///:memory:"):
        engine_kwargs["poolclass"] = StaticPool

engine = create_engine(
    settings.database_url,
    echo=False,
    connect_args=connect_args,
    **engine_kwargs,
)

# Columns added after the first release: table -> {column: DDL type}
_ADDED_COLUMNS = {
    "trade": {
        "close_events": "JSON",
        "open_other_details": "JSON",
        "close_other_details": "JSON",
    },
    "journal_user": {
        "open_custom_field_names": "JSON",
        "close_custom_field_names": "JSON",
    },
}


def _run_migrations(bind=None):
    """Add JSON columns missing from databases created by older releases."""
    from sqlalchemy import text

    bind = bind or engine
    inspector = inspect(bind)
    tables = set(inspector.get_table_names())

    for table, added in _ADDED_COLUMNS.items():
        if table not in tables:
            continue
        columns = {col["name"] for col in inspector.get_columns(table)}
        for column, ddl_type in added.items():
            if column in columns:
                continue
            logger.info(f"Migrating: adding {table}.{column}")
            with bind.connect() as conn:
                conn.execute(text(f"ALTER TABLE {table} ADD COLUMN {column} {ddl_type}"))
                conn.commit()


def create_db_and_tables(bind=None):
    """Create all tables. Called on startup."""
    # Import models so their tables are registered on the metadata
    import journal.models  # noqa: F401

    bind = bind or engine
    SQLModel.metadata.create_all(bind)
    _run_migrations(bind)


def get_session() -> Session:
    """Dependency that yields a database session."""
    with Session(engine) as session:
        yield session
