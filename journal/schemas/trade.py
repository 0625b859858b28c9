"""Pydantic schemas for Trade API and engine snapshots."""

from datetime import date, datetime
import math
import re
import uuid

from pydantic import BaseModel, Field, field_validator, model_validator

from journal.utils.constants import MAX_RATING, POSITION_TYPES, RULE_PRIORITIES

_TIME_RE = re.compile(r"^\d{1,2}:\d{2}(:\d{2})?$")


def _new_id() -> str:
    return uuid.uuid4().hex


def _clean_numeric_text(value: str | float | int | None, *, required: bool) -> str | None:
    if value is None:
        if required:
            raise ValueError("must not be empty")
        return None
    text = str(value).strip()
    if not text:
        if required:
            raise ValueError("must not be empty")
        return None
    try:
        number = float(text)
    except ValueError:
        raise ValueError("must be a number")
    if not math.isfinite(number):
        raise ValueError("must be a finite number")
    return text


def _clean_iso_date(value: str | None, *, required: bool) -> str | None:
    if value is None or not str(value).strip():
        if required:
            raise ValueError("must not be empty")
        return None
    text = str(value).strip()
    try:
        datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        try:
            date.fromisoformat(text)
        except ValueError:
            raise ValueError("must be an ISO date (YYYY-MM-DD) or datetime")
    return text


def _clean_time(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    text = value.strip()
    if not _TIME_RE.fullmatch(text):
        raise ValueError("must be HH:MM")
    return text


class AppliedRule(BaseModel):
    id: str
    rule: str
    priority: str = "medium"

    @field_validator("priority")
    @classmethod
    def _validate_priority(cls, value: str) -> str:
        if value not in RULE_PRIORITIES:
            allowed = ", ".join(RULE_PRIORITIES)
            raise ValueError(f"must be one of: {allowed}")
        return value


class CloseEvent(BaseModel):
    """One partial close. Result is signed, positive means profit."""

    id: str = Field(default_factory=_new_id)
    date: str
    time: str = ""
    quantity_sold: float = 0.0
    sell_price: float = 0.0
    result: float = 0.0


class CloseEventCreate(BaseModel):
    date: str
    time: str = "12:00"
    quantity_sold: float = Field(gt=0)
    sell_price: float = Field(ge=0)
    result: float | None = None  # computed from entry/sell price when omitted

    @field_validator("date")
    @classmethod
    def _validate_date(cls, value: str) -> str:
        return _clean_iso_date(value, required=True)

    @field_validator("time")
    @classmethod
    def _validate_time(cls, value: str) -> str:
        return _clean_time(value) or ""

    @field_validator("result")
    @classmethod
    def _validate_result(cls, value: float | None) -> float | None:
        if value is not None and not math.isfinite(value):
            raise ValueError("must be a finite number")
        return value


class TradeCreate(BaseModel):
    symbol_name: str = Field(min_length=1, max_length=64)
    position_type: str = "buy"
    open_date: str
    open_time: str | None = None
    close_date: str | None = None
    close_time: str | None = None
    entry_price: str
    sell_price: str | None = None
    quantity: str
    quantity_sold: str | None = None
    result: str | None = None
    rating: int = Field(default=0, ge=0, le=MAX_RATING)
    notes: str = ""
    strategy_id: str | None = None
    applied_open_rules: list[AppliedRule] = []
    applied_close_rules: list[AppliedRule] = []
    open_other_details: dict[str, str] = {}
    close_other_details: dict[str, str] = {}

    @field_validator("symbol_name")
    @classmethod
    def _trim_symbol(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError("must not be empty")
        return text

    @field_validator("position_type")
    @classmethod
    def _validate_position_type(cls, value: str) -> str:
        if value not in POSITION_TYPES:
            allowed = ", ".join(POSITION_TYPES)
            raise ValueError(f"must be one of: {allowed}")
        return value

    @field_validator("open_date", mode="before")
    @classmethod
    def _validate_open_date(cls, value):
        return _clean_iso_date(value, required=True)

    @field_validator("close_date", mode="before")
    @classmethod
    def _validate_close_date(cls, value):
        return _clean_iso_date(value, required=False)

    @field_validator("open_time", "close_time", mode="before")
    @classmethod
    def _validate_times(cls, value):
        return _clean_time(value)

    @field_validator("entry_price", "quantity", mode="before")
    @classmethod
    def _validate_required_numbers(cls, value):
        return _clean_numeric_text(value, required=True)

    @field_validator("sell_price", "quantity_sold", "result", mode="before")
    @classmethod
    def _validate_optional_numbers(cls, value):
        return _clean_numeric_text(value, required=False)

    @model_validator(mode="after")
    def _validate_quantities(self):
        if float(self.quantity) <= 0:
            raise ValueError("quantity must be greater than 0")
        if float(self.entry_price) < 0:
            raise ValueError("entry_price must not be negative")
        if self.quantity_sold is not None and float(self.quantity_sold) > float(self.quantity):
            raise ValueError("quantity_sold must not exceed quantity")
        return self


class TradeUpdate(BaseModel):
    symbol_name: str | None = Field(default=None, min_length=1, max_length=64)
    position_type: str | None = None
    open_date: str | None = None
    open_time: str | None = None
    close_date: str | None = None
    close_time: str | None = None
    entry_price: str | None = None
    sell_price: str | None = None
    quantity: str | None = None
    quantity_sold: str | None = None
    result: str | None = None
    rating: int | None = Field(default=None, ge=0, le=MAX_RATING)
    notes: str | None = None
    strategy_id: str | None = None
    applied_open_rules: list[AppliedRule] | None = None
    applied_close_rules: list[AppliedRule] | None = None
    open_other_details: dict[str, str] | None = None
    close_other_details: dict[str, str] | None = None

    @field_validator("close_date", mode="before")
    @classmethod
    def _validate_optional_close_date(cls, value):
        return _clean_iso_date(value, required=False)

    @field_validator("open_time", "close_time", mode="before")
    @classmethod
    def _validate_optional_times(cls, value):
        return _clean_time(value)

    @field_validator("sell_price", "quantity_sold", "result", mode="before")
    @classmethod
    def _validate_optional_numbers(cls, value):
        return _clean_numeric_text(value, required=False)


class TradeRead(BaseModel):
    """Snapshot of a trade, as consumed by the engine and returned by the API."""

    id: str = Field(default_factory=_new_id)
    user_id: str = ""
    symbol_name: str = ""
    position_type: str = "buy"
    open_date: str = ""
    open_time: str | None = None
    close_date: str | None = None
    close_time: str | None = None
    entry_price: str = ""
    sell_price: str | None = None
    quantity: str = ""
    quantity_sold: str | None = None
    result: str | None = None
    rating: int = 0
    notes: str = ""
    strategy_id: str | None = None
    applied_open_rules: list[AppliedRule] = []
    applied_close_rules: list[AppliedRule] = []
    open_other_details: dict[str, str] = {}
    close_other_details: dict[str, str] = {}
    close_events: list[CloseEvent] = []
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}

    @field_validator(
        "applied_open_rules", "applied_close_rules", "close_events",
        "open_other_details", "close_other_details",
        mode="before",
    )
    @classmethod
    def _null_collections(cls, value, info):
        # Rows written before the JSON columns existed hold NULL
        if value is None:
            return {} if info.field_name.endswith("details") else []
        return value
