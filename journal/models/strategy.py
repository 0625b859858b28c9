"""Strategy model: a named checklist of open and close rules."""

from datetime import datetime, timezone
from typing import Any
import uuid

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import JSON


class Strategy(SQLModel, table=True):
    __tablename__ = "strategy"

    id: str = Field(default_factory=lambda: uuid.uuid4().hex, primary_key=True)
    user_id: str = Field(foreign_key="journal_user.id", index=True)
    strategy_name: str
    # Ordered rule lists: [{id, rule, priority}]
    open_position_rules: list[dict[str, Any]] | None = Field(default=None, sa_column=Column(JSON))
    close_position_rules: list[dict[str, Any]] | None = Field(default=None, sa_column=Column(JSON))
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
