"""CRUD API for strategies and their trade history."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError
from sqlmodel import Session, select

from journal.api.deps import get_current_user, get_repository
from journal.database import get_session
from journal.models.strategy import Strategy
from journal.models.user import User
from journal.schemas.position import HistoryRead
from journal.schemas.strategy import StrategyCreate, StrategyRead, StrategyUpdate
from journal.services.history import build_history
from journal.services.profile import get_capital
from journal.services.repository import TradeRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/strategies", tags=["strategies"])


def _get_owned(session: Session, strategy_id: str, user: User) -> Strategy:
    strategy = session.get(Strategy, strategy_id)
    if not strategy or strategy.user_id != user.id:
        raise HTTPException(status_code=404, detail="Strategy not found")
    return strategy


@router.get("", response_model=list[StrategyRead])
def list_strategies(
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    stmt = select(Strategy).where(Strategy.user_id == user.id).order_by(Strategy.created_at)
    return session.exec(stmt).all()


@router.post("", response_model=StrategyRead, status_code=201)
def create_strategy(
    data: StrategyCreate,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    strategy = Strategy(user_id=user.id, **data.model_dump(mode="json"))
    session.add(strategy)
    session.commit()
    session.refresh(strategy)
    logger.info(f"Created strategy {strategy.id} ({strategy.strategy_name}) for user {user.id}")
    return strategy


@router.get("/{strategy_id}", response_model=StrategyRead)
def get_strategy(
    strategy_id: str,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    return _get_owned(session, strategy_id, user)


@router.put("/{strategy_id}", response_model=StrategyRead)
def update_strategy(
    strategy_id: str,
    data: StrategyUpdate,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    strategy = _get_owned(session, strategy_id, user)
    update_data = data.model_dump(mode="json", exclude_unset=True)

    # Validate full merged strategy so rule ids stay unique across both lists.
    merged = {**StrategyRead.model_validate(strategy).model_dump(mode="json"), **update_data}
    try:
        StrategyCreate.model_validate(merged)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False, include_context=False))

    for key, value in update_data.items():
        setattr(strategy, key, value)

    session.add(strategy)
    session.commit()
    session.refresh(strategy)
    return strategy


@router.delete("/{strategy_id}", status_code=204)
def delete_strategy(
    strategy_id: str,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    strategy = _get_owned(session, strategy_id, user)
    session.delete(strategy)
    session.commit()


@router.get("/{strategy_id}/history", response_model=HistoryRead)
def strategy_history(
    strategy_id: str,
    user: User = Depends(get_current_user),
    repo: TradeRepository = Depends(get_repository),
    session: Session = Depends(get_session),
):
    """Trades that used this strategy, with the share of its rules they followed."""
    strategy = StrategyRead.model_validate(_get_owned(session, strategy_id, user))
    trades = [t for t in repo.trades if t.strategy_id == strategy.id]
    return build_history(trades, strategies={strategy.id: strategy}, capital=get_capital(user))
