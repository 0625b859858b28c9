"""Shared API dependencies."""

from fastapi import Depends, Header, HTTPException, status
from sqlmodel import Session, select

from journal.config import settings
from journal.database import get_session
from journal.models.user import User
from journal.models.strategy import Strategy
from journal.schemas.strategy import StrategyRead
from journal.services.profile import get_or_create_user
from journal.services.repository import RepositoryError, TradeRepository
from journal.utils.constants import USER_HEADER


def get_current_user(
    x_journal_user: str | None = Header(default=None, alias=USER_HEADER),
    session: Session = Depends(get_session),
) -> User:
    """Resolve the journal owner from the X-Journal-User header.

    Identity only; there is no authentication. Unknown users get an empty
    profile on first use.
    """
    user_id = (x_journal_user or settings.default_user).strip()
    if not user_id or len(user_id) > 128:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid X-Journal-User header",
        )
    try:
        return get_or_create_user(session, user_id)
    except RepositoryError as e:
        raise HTTPException(status_code=500, detail=str(e))


def get_repository(
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
) -> TradeRepository:
    """The current user's trades, loaded into a repository."""
    repo = TradeRepository(session, user.id)
    try:
        repo.load()
    except RepositoryError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return repo


def get_strategies(
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
) -> dict[str, StrategyRead]:
    """The current user's strategies keyed by id."""
    rows = session.exec(select(Strategy).where(Strategy.user_id == user.id)).all()
    return {s.id: StrategyRead.model_validate(s) for s in rows}
