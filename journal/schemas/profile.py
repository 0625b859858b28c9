"""Pydantic schemas for the user profile API."""

from pydantic import BaseModel, Field, field_validator

from journal.utils.numbers import to_number


class CapitalUpdate(BaseModel):
    capital: str = Field(min_length=1, max_length=32)

    @field_validator("capital")
    @classmethod
    def _validate_capital(cls, value: str) -> str:
        text = value.strip()
        number = to_number(text)
        if number is None:
            raise ValueError("must be a number")
        if number <= 0:
            raise ValueError("must be greater than 0")
        return text


class CapitalRead(BaseModel):
    capital: str | None = None


class CustomFieldNames(BaseModel):
    open_fields: list[str] = []
    close_fields: list[str] = []
