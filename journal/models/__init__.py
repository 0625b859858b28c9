"""Database models."""

from journal.models.user import User
from journal.models.trade import Trade
from journal.models.strategy import Strategy

__all__ = [
    "User",
    "Trade",
    "Strategy",
]
