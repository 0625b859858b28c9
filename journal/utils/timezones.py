"""Resolve the zone used for calendar bucket keys."""

from datetime import tzinfo
from zoneinfo import ZoneInfo

from journal.config import settings


def journal_timezone() -> tzinfo | None:
    """Configured zone, or None for the host's local zone."""
    if not settings.timezone:
        return None
    return ZoneInfo(settings.timezone)
