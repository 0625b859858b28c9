"""User profile: starting capital and the custom field-name registry."""

from datetime import datetime, timezone

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import JSON


class User(SQLModel, table=True):
    __tablename__ = "journal_user"

    id: str = Field(primary_key=True)
    capital: str | None = None  # plain text, converted on use
    open_custom_field_names: list[str] | None = Field(default=None, sa_column=Column(JSON))
    close_custom_field_names: list[str] | None = Field(default=None, sa_column=Column(JSON))
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
