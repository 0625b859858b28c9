"""History view: open and closed trades enriched with their derived figures."""

import logging
from typing import Iterable

from journal.engine.classification import classify_closed, classify_open, sort_closed_by_recency
from journal.engine.metrics import capital_pct, rules_followed_pct
from journal.engine.position import position_snapshot
from journal.engine.summary import history_total
from journal.schemas.position import HistoryRead, PositionRead, TradeDetail
from journal.schemas.strategy import StrategyRead
from journal.schemas.trade import TradeRead
from journal.utils.timezones import journal_timezone

logger = logging.getLogger(__name__)


def trade_detail(trade: TradeRead, strategy: StrategyRead | None = None) -> TradeDetail:
    snapshot = position_snapshot(trade)
    if snapshot.oversold:
        logger.warning(
            f"Trade {trade.id} ({trade.symbol_name}) is over-sold: "
            f"remaining quantity {snapshot.remaining_quantity:g}"
        )
    return TradeDetail(
        **trade.model_dump(),
        position=PositionRead.model_validate(snapshot),
        rules_followed_pct=rules_followed_pct(trade, strategy),
    )


def build_history(
    trades: Iterable[TradeRead],
    strategies: dict[str, StrategyRead] | None = None,
    capital: str | None = None,
) -> HistoryRead:
    """Open trades in input order, closed trades most recent first.

    The total covers every realized amount in the collection: partial
    closes of open trades as well as closed trades.
    """
    trades = list(trades)
    strategies = strategies or {}

    def _detail(trade: TradeRead) -> TradeDetail:
        return trade_detail(trade, strategies.get(trade.strategy_id or ""))

    closed = sort_closed_by_recency(classify_closed(trades), tz=journal_timezone())
    total = history_total(trades)
    return HistoryRead(
        open_trades=[_detail(t) for t in classify_open(trades)],
        closed_trades=[_detail(t) for t in closed],
        total=round(total, 2),
        capital=capital,
        total_pct_of_capital=capital_pct(total, capital),
    )
