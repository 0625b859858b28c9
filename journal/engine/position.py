"""Position calculator: derived quantities and realized P/L for one trade.

Every function here is a pure function of a TradeRead snapshot. Degenerate
input yields degenerate values (0, None, negative remaining quantity) rather
than exceptions; callers decide how to surface them.
"""

from dataclasses import dataclass

from journal.engine.classification import is_closed
from journal.schemas.trade import TradeRead
from journal.utils.numbers import to_number


def has_partial_closes(trade: TradeRead) -> bool:
    return len(trade.close_events) > 0


def partial_quantity_sold(trade: TradeRead) -> float:
    return sum(event.quantity_sold or 0.0 for event in trade.close_events)


def partial_close_total(trade: TradeRead) -> float:
    """Sum of results booked by partial closes; 0 without close events."""
    return sum(event.result or 0.0 for event in trade.close_events)


def remaining_quantity(trade: TradeRead) -> float:
    """Original quantity minus everything sold so far.

    Partial closes are always subtracted. Once a trade has partial closes,
    an explicitly recorded final quantity_sold is the last tranche and is
    subtracted too. The value is not clamped: a negative result means the
    trade was over-sold.
    """
    remaining = (to_number(trade.quantity) or 0.0) - partial_quantity_sold(trade)
    if has_partial_closes(trade):
        remaining -= to_number(trade.quantity_sold) or 0.0
    return remaining


def final_close_quantity(trade: TradeRead) -> float:
    """Quantity covered by the trade's own final close.

    The recorded quantity_sold wins. A closed trade without one closes
    whatever the partials left over; an open trade has no final close yet.
    """
    explicit = to_number(trade.quantity_sold)
    if explicit is not None:
        return explicit
    if not is_closed(trade):
        return 0.0
    leftover = (to_number(trade.quantity) or 0.0) - partial_quantity_sold(trade)
    return max(leftover, 0.0)


def closed_quantity(trade: TradeRead) -> float:
    return partial_quantity_sold(trade) + final_close_quantity(trade)


def total_realized(trade: TradeRead) -> float:
    """Realized P/L: partials, plus the final result once the trade is closed."""
    total = partial_close_total(trade)
    if is_closed(trade):
        total += to_number(trade.result) or 0.0
    return total


def weighted_average_exit_price(trade: TradeRead) -> float | None:
    """Quantity-weighted exit price across partial closes and the final close.

    Without close events, or when nothing has been closed yet, this is just
    the final sell price (None if that is missing too).
    """
    final_price = to_number(trade.sell_price)
    if not has_partial_closes(trade):
        return final_price

    final_qty = final_close_quantity(trade) if final_price is not None else 0.0
    weighted = sum(
        (event.sell_price or 0.0) * (event.quantity_sold or 0.0)
        for event in trade.close_events
    )
    weighted += (final_price or 0.0) * final_qty
    total_qty = partial_quantity_sold(trade) + final_qty
    if total_qty == 0:
        return final_price
    return weighted / total_qty


@dataclass
class PositionSnapshot:
    """Derived figures for one trade, as shown in history rows."""

    trade_id: str
    has_partial_closes: bool
    remaining_quantity: float
    closed_quantity: float
    partial_close_total: float
    total_realized: float
    average_exit_price: float | None
    oversold: bool


def position_snapshot(trade: TradeRead) -> PositionSnapshot:
    remaining = remaining_quantity(trade)
    return PositionSnapshot(
        trade_id=trade.id,
        has_partial_closes=has_partial_closes(trade),
        remaining_quantity=remaining,
        closed_quantity=closed_quantity(trade),
        partial_close_total=partial_close_total(trade),
        total_realized=total_realized(trade),
        average_exit_price=weighted_average_exit_price(trade),
        oversold=remaining < 0,
    )
