"""Response schemas combining trades with their derived figures."""

from pydantic import BaseModel, Field

from journal.schemas.trade import TradeRead


class PositionRead(BaseModel):
    has_partial_closes: bool
    remaining_quantity: float = Field(
        description=(
            "Quantity minus partial closes, and minus the final quantity_sold once "
            "the trade has partial closes. A closed trade without partial closes "
            "keeps its original quantity here; check closed_quantity for what was sold. "
            "Negative means over-sold."
        ),
    )
    closed_quantity: float
    partial_close_total: float
    total_realized: float
    average_exit_price: float | None
    oversold: bool

    model_config = {"from_attributes": True}


class TradeDetail(TradeRead):
    position: PositionRead
    rules_followed_pct: float | None = None


class HistoryRead(BaseModel):
    open_trades: list[TradeDetail]
    closed_trades: list[TradeDetail]
    total: float
    capital: str | None
    total_pct_of_capital: float | None


class DayCloseItemRead(BaseModel):
    id: str
    trade_id: str
    symbol_name: str
    position_type: str
    quantity: float
    entry_price: str
    result: float
    is_partial_close: bool

    model_config = {"from_attributes": True}
