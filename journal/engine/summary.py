"""Summary aggregator: realized P/L rolled up by calendar bucket.

Each partial close contributes on its own date and each fully closed trade
contributes its final result on its close date. The two are separate
contributions and are never merged, so a trade closed in several steps can
show up in several buckets.
"""

from dataclasses import dataclass
from datetime import date, tzinfo
from enum import Enum
import math
from typing import Iterable, Iterator

from journal.engine.classification import is_closed, parse_moment
from journal.engine.position import final_close_quantity, has_partial_closes, total_realized
from journal.schemas.trade import CloseEvent, TradeRead
from journal.utils.constants import DAY_KEY_FORMAT, MONTH_KEY_FORMAT, TOTAL_KEY, YEAR_KEY_FORMAT
from journal.utils.numbers import to_number


class GroupBy(str, Enum):
    DAY = "day"
    MONTH = "month"
    YEAR = "year"
    TOTAL = "total"


def bucket_key(day: date, group_by: GroupBy | str) -> str:
    group_by = GroupBy(group_by)
    if group_by is GroupBy.DAY:
        return DAY_KEY_FORMAT.format(day=day.day, month=day.month, year=day.year)
    if group_by is GroupBy.MONTH:
        return MONTH_KEY_FORMAT.format(month=day.month, year=day.year)
    if group_by is GroupBy.YEAR:
        return YEAR_KEY_FORMAT.format(year=day.year)
    return TOTAL_KEY


@dataclass
class Contribution:
    """A single realized amount booked on a calendar day."""

    trade: TradeRead
    day: date
    amount: float
    event: CloseEvent | None = None  # None for the trade's final close

    @property
    def is_final(self) -> bool:
        return self.event is None


def iter_contributions(
    trades: Iterable[TradeRead], tz: tzinfo | None = None
) -> Iterator[Contribution]:
    """Yield every realized contribution across the collection."""
    for trade in trades:
        for event in trade.close_events:
            moment = parse_moment(event.date, tz)
            if moment is None or event.result is None or not math.isfinite(event.result):
                continue
            yield Contribution(trade=trade, day=moment.date(), amount=event.result, event=event)

        if not is_closed(trade):
            continue
        amount = to_number(trade.result)
        moment = parse_moment(trade.close_date, tz)
        if amount is None or amount == 0 or moment is None:
            continue
        yield Contribution(trade=trade, day=moment.date(), amount=amount)


def aggregate(
    trades: Iterable[TradeRead],
    group_by: GroupBy | str = GroupBy.DAY,
    tz: tzinfo | None = None,
) -> dict[str, float]:
    """Total realized result per bucket key."""
    group_by = GroupBy(group_by)
    totals: dict[str, float] = {}
    for item in iter_contributions(trades, tz):
        key = bucket_key(item.day, group_by)
        totals[key] = totals.get(key, 0.0) + item.amount
    return totals


def per_day_win_loss(
    trades: Iterable[TradeRead], tz: tzinfo | None = None
) -> dict[str, dict[str, int]]:
    """Count contributions per day; a result >= 0 counts as a win."""
    days: dict[str, dict[str, int]] = {}
    for item in iter_contributions(trades, tz):
        key = bucket_key(item.day, GroupBy.DAY)
        tally = days.setdefault(key, {"result": 0, "win": 0, "lost": 0})
        tally["result"] += 1
        if item.amount >= 0:
            tally["win"] += 1
        else:
            tally["lost"] += 1
    return days


def merge_summaries(*summaries: dict[str, float]) -> dict[str, float]:
    """Add aggregate() outputs bucket by bucket."""
    merged: dict[str, float] = {}
    for summary in summaries:
        for key, value in summary.items():
            merged[key] = merged.get(key, 0.0) + value
    return merged


def history_total(trades: Iterable[TradeRead]) -> float:
    """Realized P/L of a collection: partial closes plus final closes."""
    return sum(total_realized(t) for t in trades)


@dataclass
class DayCloseItem:
    """One close (partial or final) shown in a calendar day's drill-down."""

    id: str
    trade_id: str
    symbol_name: str
    position_type: str
    quantity: float
    entry_price: str
    result: float
    is_partial_close: bool


def close_items_for_day(
    trades: Iterable[TradeRead], day_key: str, tz: tzinfo | None = None
) -> list[DayCloseItem]:
    """Partial and final closes booked on the day ``day_key`` (DD-MM-YYYY)."""
    items = []
    for item in iter_contributions(trades, tz):
        if bucket_key(item.day, GroupBy.DAY) != day_key:
            continue
        trade = item.trade
        if item.is_final:
            items.append(DayCloseItem(
                id=trade.id,
                trade_id=trade.id,
                symbol_name=trade.symbol_name,
                position_type=trade.position_type,
                quantity=final_close_quantity(trade),
                entry_price=trade.entry_price,
                result=item.amount,
                is_partial_close=has_partial_closes(trade),
            ))
        else:
            event = item.event
            items.append(DayCloseItem(
                id=f"{trade.id}-{event.id}",
                trade_id=trade.id,
                symbol_name=trade.symbol_name,
                position_type=trade.position_type,
                quantity=event.quantity_sold,
                entry_price=trade.entry_price,
                result=item.amount,
                is_partial_close=True,
            ))
    return items
