"""History API: open positions, closed trades and the realized total."""

from fastapi import APIRouter, Depends

from journal.api.deps import get_current_user, get_repository, get_strategies
from journal.models.user import User
from journal.schemas.position import HistoryRead
from journal.schemas.strategy import StrategyRead
from journal.services.history import build_history
from journal.services.profile import get_capital
from journal.services.repository import TradeRepository

router = APIRouter(prefix="/api/history", tags=["history"])


@router.get("", response_model=HistoryRead)
def history(
    symbol: str | None = None,
    user: User = Depends(get_current_user),
    repo: TradeRepository = Depends(get_repository),
    strategies: dict[str, StrategyRead] = Depends(get_strategies),
):
    trades = repo.trades
    if symbol is not None:
        trades = [t for t in trades if t.symbol_name == symbol]
    return build_history(trades, strategies=strategies, capital=get_capital(user))
