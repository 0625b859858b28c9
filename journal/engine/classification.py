"""Open/closed classification and recency ordering of trades.

A trade is open while its close date is empty, regardless of partial-close
history. It is closed only once close date, close time and result are all
filled in. A trade with a close date but no result is neither.
"""

from datetime import datetime, tzinfo
from typing import Iterable

from journal.schemas.trade import TradeRead


def _filled(value: str | None) -> bool:
    return bool(value and value.strip())


def is_open(trade: TradeRead) -> bool:
    return not _filled(trade.close_date)


def is_closed(trade: TradeRead) -> bool:
    return (
        _filled(trade.close_date)
        and _filled(trade.close_time)
        and _filled(trade.result)
    )


def classify_open(trades: Iterable[TradeRead]) -> list[TradeRead]:
    """Trades still open, in input order."""
    return [t for t in trades if is_open(t)]


def classify_closed(trades: Iterable[TradeRead]) -> list[TradeRead]:
    """Fully closed trades, in input order.

    Consumers may rely on close_date, close_time and result being set.
    """
    return [t for t in trades if is_closed(t)]


def parse_moment(value: str | None, tz: tzinfo | None = None) -> datetime | None:
    """Parse an ISO date/datetime into a naive wall-clock datetime.

    Aware values are converted to ``tz`` (the host's local zone when None)
    before the zone is dropped, so the result reflects the local calendar.
    Returns None for empty or unparseable input.
    """
    if not _filled(value):
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        moment = datetime.fromisoformat(text)
    except ValueError:
        return None
    if moment.tzinfo is not None:
        moment = moment.astimezone(tz).replace(tzinfo=None)
    return moment


def parse_time_minutes(value: str | None) -> int:
    """Minutes since midnight for "H:M"; missing or bad tokens count as 0."""
    if not value:
        return 0
    parts = value.split(":")

    def _token(index: int) -> int:
        if index >= len(parts):
            return 0
        try:
            return int(parts[index].strip())
        except ValueError:
            return 0

    return _token(0) * 60 + _token(1)


def sort_closed_by_recency(
    trades: Iterable[TradeRead], tz: tzinfo | None = None
) -> list[TradeRead]:
    """Most recent close first; same close date breaks ties on close time.

    Stable: trades with equal keys keep their input order. Trades whose
    close date cannot be parsed go last.
    """

    def _key(trade: TradeRead):
        moment = parse_moment(trade.close_date, tz)
        return (
            moment is not None,
            moment or datetime.min,
            parse_time_minutes(trade.close_time),
        )

    return sorted(trades, key=_key, reverse=True)
