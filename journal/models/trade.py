"""Trade model: one journal entry, from open to (optional) final close."""

from datetime import datetime, timezone
from typing import Any
import uuid

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import JSON


class Trade(SQLModel, table=True):
    __tablename__ = "trade"

    id: str = Field(default_factory=lambda: uuid.uuid4().hex, primary_key=True)
    user_id: str = Field(foreign_key="journal_user.id", index=True)
    symbol_name: str = Field(index=True)
    position_type: str = "buy"  # "buy" or "sell"

    # Open details
    open_date: str  # ISO date or datetime
    open_time: str | None = None  # "HH:MM"
    entry_price: str
    quantity: str
    open_other_details: dict[str, str] | None = Field(default=None, sa_column=Column(JSON))

    # Final close; an empty close_date means the trade is still open
    close_date: str | None = None
    close_time: str | None = None
    sell_price: str | None = None
    quantity_sold: str | None = None
    result: str | None = None
    close_other_details: dict[str, str] | None = Field(default=None, sa_column=Column(JSON))

    # Partial closes in insertion order: [{id, date, time, quantity_sold, sell_price, result}]
    close_events: list[dict[str, Any]] | None = Field(default=None, sa_column=Column(JSON))

    # Review
    rating: int = 0
    notes: str = ""
    strategy_id: str | None = Field(default=None, index=True)
    applied_open_rules: list[dict[str, Any]] | None = Field(default=None, sa_column=Column(JSON))
    applied_close_rules: list[dict[str, Any]] | None = Field(default=None, sa_column=Column(JSON))

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
