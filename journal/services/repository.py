"""Trade repository: one user's trade collection, in memory and in the database.

The repository owns the in-memory list of TradeRead snapshots that the
engine reads. Every write goes to the database first; the in-memory
collection is only touched after the commit succeeded, so a failed write
leaves local state exactly as it was.
"""

from datetime import datetime, timezone
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from journal.engine.auto_calc import calculate_result
from journal.engine.classification import is_closed
from journal.engine.position import partial_quantity_sold, remaining_quantity
from journal.models.trade import Trade
from journal.schemas.trade import CloseEvent, CloseEventCreate, TradeCreate, TradeRead, TradeUpdate
from journal.utils.numbers import to_number

logger = logging.getLogger(__name__)


class RepositoryError(Exception):
    """The database rejected a read or write."""


class TradeNotFound(LookupError):
    pass


class CloseQuantityError(ValueError):
    """A partial close sells more than the trade still holds."""


class TradeClosedError(ValueError):
    """The trade is already fully closed."""


class TradeRepository:
    def __init__(self, session: Session, user_id: str):
        self.session = session
        self.user_id = user_id
        self._trades: dict[str, TradeRead] = {}

    @property
    def trades(self) -> list[TradeRead]:
        return list(self._trades.values())

    def load(self) -> list[TradeRead]:
        """Replace the in-memory collection with the user's stored trades."""
        stmt = (
            select(Trade)
            .where(Trade.user_id == self.user_id)
            .order_by(Trade.created_at)
        )
        try:
            rows = self.session.exec(stmt).all()
        except SQLAlchemyError as e:
            logger.error(f"Could not load trades for user {self.user_id}: {e}")
            raise RepositoryError("Failed to load trades") from e
        self.replace(TradeRead.model_validate(row) for row in rows)
        return self.trades

    def replace(self, trades) -> None:
        self._trades = {t.id: t for t in trades}

    def get(self, trade_id: str) -> TradeRead:
        if trade_id in self._trades:
            return self._trades[trade_id]
        return TradeRead.model_validate(self._row(trade_id))

    def create(self, data: TradeCreate) -> TradeRead:
        payload = data.model_dump(mode="json")
        row = Trade(user_id=self.user_id, close_events=[], **payload)
        trade = self._commit(row)
        logger.info(f"Created trade {trade.id} ({trade.symbol_name}) for user {self.user_id}")
        return trade

    def update(self, trade_id: str, patch: TradeUpdate) -> TradeRead:
        """Apply a partial update, validated against the merged record.

        Raises pydantic.ValidationError when the merged trade is invalid.
        """
        row = self._row(trade_id)
        update_data = patch.model_dump(exclude_unset=True)

        current = TradeRead.model_validate(row).model_dump(include=set(TradeCreate.model_fields))
        validated = TradeCreate.model_validate({**current, **update_data})
        validated_data = validated.model_dump(mode="json")

        for key in update_data:
            setattr(row, key, validated_data[key])
        row.updated_at = datetime.now(timezone.utc)

        trade = self._commit(row)
        if remaining_quantity(trade) < 0:
            logger.warning(
                f"Trade {trade.id} is over-sold: remaining quantity {remaining_quantity(trade)}"
            )
        return trade

    def delete(self, trade_id: str) -> None:
        row = self._row(trade_id)
        try:
            self.session.delete(row)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Could not delete trade {trade_id}: {e}")
            raise RepositoryError("Failed to delete trade") from e
        self._trades.pop(trade_id, None)
        logger.info(f"Deleted trade {trade_id}")

    def add_close_event(self, trade_id: str, data: CloseEventCreate) -> TradeRead:
        """Record a partial close without filling in the final close."""
        row = self._row(trade_id)
        trade = TradeRead.model_validate(row)
        if is_closed(trade):
            raise TradeClosedError("Trade is already closed")

        # Once this event exists a recorded final quantity_sold counts as sold too
        available = (
            (to_number(trade.quantity) or 0.0)
            - partial_quantity_sold(trade)
            - (to_number(trade.quantity_sold) or 0.0)
        )
        if data.quantity_sold > available:
            raise CloseQuantityError(
                f"quantity_sold {data.quantity_sold:g} exceeds remaining quantity {available:g}"
            )

        result = data.result
        if result is None:
            result = to_number(calculate_result(
                trade.entry_price, data.sell_price, data.quantity_sold,
                position_type=trade.position_type,
            )) or 0.0

        event = CloseEvent(
            date=data.date,
            time=data.time,
            quantity_sold=data.quantity_sold,
            sell_price=data.sell_price,
            result=result,
        )
        # Assign a new list so the JSON column is marked dirty
        row.close_events = [*(row.close_events or []), event.model_dump(mode="json")]
        row.updated_at = datetime.now(timezone.utc)
        trade = self._commit(row)
        logger.info(
            f"Partial close on trade {trade_id}: {event.quantity_sold:g} @ {event.sell_price:g}, "
            f"result {event.result:g}"
        )
        return trade

    def remove_close_event(self, trade_id: str, event_id: str) -> TradeRead:
        row = self._row(trade_id)
        events = row.close_events or []
        kept = [e for e in events if e.get("id") != event_id]
        if len(kept) == len(events):
            raise TradeNotFound(f"Close event {event_id} not found")
        row.close_events = kept
        row.updated_at = datetime.now(timezone.utc)
        return self._commit(row)

    def _row(self, trade_id: str) -> Trade:
        try:
            row = self.session.get(Trade, trade_id)
        except SQLAlchemyError as e:
            raise RepositoryError("Failed to read trade") from e
        if row is None or row.user_id != self.user_id:
            raise TradeNotFound(f"Trade {trade_id} not found")
        return row

    def _commit(self, row: Trade) -> TradeRead:
        try:
            self.session.add(row)
            self.session.commit()
            self.session.refresh(row)
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Could not save trade {row.id}: {e}")
            raise RepositoryError("Failed to save trade") from e
        trade = TradeRead.model_validate(row)
        self._trades[trade.id] = trade
        return trade
