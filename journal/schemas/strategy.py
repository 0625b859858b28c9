"""Pydantic schemas for Strategy API."""

from datetime import datetime
import uuid

from pydantic import BaseModel, Field, field_validator, model_validator

from journal.utils.constants import RULE_PRIORITIES


class StrategyRule(BaseModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    rule: str = Field(min_length=1, max_length=500)
    priority: str = "medium"

    @field_validator("rule")
    @classmethod
    def _trim_rule(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError("must not be empty")
        return text

    @field_validator("priority")
    @classmethod
    def _validate_priority(cls, value: str) -> str:
        if value not in RULE_PRIORITIES:
            allowed = ", ".join(RULE_PRIORITIES)
            raise ValueError(f"must be one of: {allowed}")
        return value


def _check_unique_ids(rules: list[StrategyRule]):
    ids = [r.id for r in rules]
    if len(ids) != len(set(ids)):
        raise ValueError("rule ids must be unique within a strategy")


class StrategyCreate(BaseModel):
    strategy_name: str = Field(min_length=1, max_length=120)
    open_position_rules: list[StrategyRule] = []
    close_position_rules: list[StrategyRule] = []

    @field_validator("strategy_name")
    @classmethod
    def _trim_name(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError("must not be empty")
        return text

    @model_validator(mode="after")
    def _validate_rule_ids(self):
        _check_unique_ids(self.open_position_rules + self.close_position_rules)
        return self


class StrategyUpdate(BaseModel):
    strategy_name: str | None = Field(default=None, min_length=1, max_length=120)
    open_position_rules: list[StrategyRule] | None = None
    close_position_rules: list[StrategyRule] | None = None


class StrategyRead(BaseModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    user_id: str = ""
    strategy_name: str = ""
    open_position_rules: list[StrategyRule] = []
    close_position_rules: list[StrategyRule] = []
    created_at: datetime | None = None

    model_config = {"from_attributes": True}

    @field_validator("open_position_rules", "close_position_rules", mode="before")
    @classmethod
    def _null_rules(cls, value):
        return [] if value is None else value
