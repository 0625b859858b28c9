"""Summary API: calendar rollups of realized P/L."""

import re

from fastapi import APIRouter, Depends, HTTPException

from journal.api.deps import get_current_user, get_repository
from journal.engine.summary import GroupBy, aggregate, close_items_for_day, per_day_win_loss
from journal.schemas.position import DayCloseItemRead
from journal.services.repository import TradeRepository
from journal.utils.timezones import journal_timezone

router = APIRouter(prefix="/api/summary", tags=["summary"], dependencies=[Depends(get_current_user)])

_DAY_KEY_RE = re.compile(r"^\d{2}-\d{2}-\d{4}$")


@router.get("/days/win-loss")
def day_win_loss(repo: TradeRepository = Depends(get_repository)):
    """Per-day count of closes, split into wins (>= 0) and losses."""
    return per_day_win_loss(repo.trades, tz=journal_timezone())


@router.get("/days/{day_key}", response_model=list[DayCloseItemRead])
def day_close_items(day_key: str, repo: TradeRepository = Depends(get_repository)):
    """Partial and final closes booked on one calendar day (DD-MM-YYYY)."""
    if not _DAY_KEY_RE.fullmatch(day_key):
        raise HTTPException(status_code=422, detail="day_key must be DD-MM-YYYY")
    items = close_items_for_day(repo.trades, day_key, tz=journal_timezone())
    return [DayCloseItemRead.model_validate(item) for item in items]


@router.get("/{group_by}")
def summary(group_by: GroupBy, repo: TradeRepository = Depends(get_repository)):
    buckets = aggregate(repo.trades, group_by, tz=journal_timezone())
    return {
        "group_by": group_by.value,
        "buckets": {key: round(value, 2) for key, value in buckets.items()},
    }
