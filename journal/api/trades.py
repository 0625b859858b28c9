"""Trade journal API: entries, partial closes and the final close."""

import logging
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError

from journal.api.deps import get_current_user, get_repository, get_strategies
from journal.engine.classification import classify_closed, classify_open, sort_closed_by_recency
from journal.schemas.position import TradeDetail
from journal.schemas.strategy import StrategyRead
from journal.schemas.trade import CloseEventCreate, TradeCreate, TradeRead, TradeUpdate
from journal.services.history import trade_detail
from journal.services.repository import (
    CloseQuantityError,
    RepositoryError,
    TradeClosedError,
    TradeNotFound,
    TradeRepository,
)
from journal.utils.timezones import journal_timezone

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/trades", tags=["trades"], dependencies=[Depends(get_current_user)])


def _detail(trade: TradeRead, strategies: dict[str, StrategyRead]) -> TradeDetail:
    return trade_detail(trade, strategies.get(trade.strategy_id or ""))


@router.get("", response_model=list[TradeDetail])
def list_trades(
    status: Literal["open", "closed"] | None = None,
    symbol: str | None = None,
    strategy_id: str | None = None,
    repo: TradeRepository = Depends(get_repository),
    strategies: dict[str, StrategyRead] = Depends(get_strategies),
):
    trades = repo.trades
    if symbol is not None:
        trades = [t for t in trades if t.symbol_name == symbol]
    if strategy_id is not None:
        trades = [t for t in trades if t.strategy_id == strategy_id]
    if status == "open":
        trades = classify_open(trades)
    elif status == "closed":
        trades = sort_closed_by_recency(classify_closed(trades), tz=journal_timezone())
    return [_detail(t, strategies) for t in trades]


@router.post("", response_model=TradeDetail, status_code=201)
def create_trade(
    data: TradeCreate,
    repo: TradeRepository = Depends(get_repository),
    strategies: dict[str, StrategyRead] = Depends(get_strategies),
):
    try:
        trade = repo.create(data)
    except RepositoryError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return _detail(trade, strategies)


@router.get("/{trade_id}", response_model=TradeDetail)
def get_trade(
    trade_id: str,
    repo: TradeRepository = Depends(get_repository),
    strategies: dict[str, StrategyRead] = Depends(get_strategies),
):
    try:
        trade = repo.get(trade_id)
    except TradeNotFound:
        raise HTTPException(status_code=404, detail="Trade not found")
    return _detail(trade, strategies)


@router.put("/{trade_id}", response_model=TradeDetail)
def update_trade(
    trade_id: str,
    data: TradeUpdate,
    repo: TradeRepository = Depends(get_repository),
    strategies: dict[str, StrategyRead] = Depends(get_strategies),
):
    try:
        trade = repo.update(trade_id, data)
    except TradeNotFound:
        raise HTTPException(status_code=404, detail="Trade not found")
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False, include_context=False))
    except RepositoryError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return _detail(trade, strategies)


@router.delete("/{trade_id}", status_code=204)
def delete_trade(trade_id: str, repo: TradeRepository = Depends(get_repository)):
    try:
        repo.delete(trade_id)
    except TradeNotFound:
        raise HTTPException(status_code=404, detail="Trade not found")
    except RepositoryError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/{trade_id}/close-events", response_model=TradeDetail, status_code=201)
def add_close_event(
    trade_id: str,
    data: CloseEventCreate,
    repo: TradeRepository = Depends(get_repository),
    strategies: dict[str, StrategyRead] = Depends(get_strategies),
):
    """Record a partial close. The trade stays open until its final close."""
    try:
        trade = repo.add_close_event(trade_id, data)
    except TradeNotFound:
        raise HTTPException(status_code=404, detail="Trade not found")
    except (CloseQuantityError, TradeClosedError) as e:
        raise HTTPException(status_code=409, detail=str(e))
    except RepositoryError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return _detail(trade, strategies)


@router.delete("/{trade_id}/close-events/{event_id}", response_model=TradeDetail)
def remove_close_event(
    trade_id: str,
    event_id: str,
    repo: TradeRepository = Depends(get_repository),
    strategies: dict[str, StrategyRead] = Depends(get_strategies),
):
    try:
        trade = repo.remove_close_event(trade_id, event_id)
    except TradeNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except RepositoryError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return _detail(trade, strategies)
