"""Logging setup shared by the API and the CLI."""

import logging

from journal.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def setup_logging(level: str | None = None):
    """Configure the root logger once, using settings.log_level by default."""
    level_name = (level or settings.log_level).upper()
    logging.basicConfig(level=level_name, format=LOG_FORMAT)
    logging.getLogger().setLevel(level_name)
    # SQL echo is controlled by the engine, keep the library quiet otherwise
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
