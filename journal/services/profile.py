"""User profile collaborators: starting capital and custom field names."""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from journal.models.user import User
from journal.services.repository import RepositoryError
from journal.utils.constants import CUSTOM_FIELD_KINDS

logger = logging.getLogger(__name__)


def get_or_create_user(session: Session, user_id: str) -> User:
    user = session.get(User, user_id)
    if user is not None:
        return user
    user = User(id=user_id, open_custom_field_names=[], close_custom_field_names=[])
    _save(session, user)
    logger.info(f"Created journal profile for user {user_id}")
    return user


def get_capital(user: User) -> str | None:
    return user.capital or None


def set_capital(session: Session, user: User, capital: str) -> str:
    user.capital = capital
    _save(session, user)
    return capital


def get_custom_field_names(user: User) -> dict[str, list[str]]:
    return {
        "open_fields": list(user.open_custom_field_names or []),
        "close_fields": list(user.close_custom_field_names or []),
    }


def add_custom_field_name(session: Session, user: User, kind: str, name: str) -> dict[str, list[str]]:
    """Register a field name; registering an existing name is a no-op."""
    attr = _attr(kind)
    name = name.strip()
    if not name:
        raise ValueError("Field name must not be empty")
    current = list(getattr(user, attr) or [])
    if name not in current:
        setattr(user, attr, [*current, name])
        _save(session, user)
    return get_custom_field_names(user)


def remove_custom_field_name(session: Session, user: User, kind: str, name: str) -> dict[str, list[str]]:
    attr = _attr(kind)
    current = list(getattr(user, attr) or [])
    if name in current:
        setattr(user, attr, [f for f in current if f != name])
        _save(session, user)
    return get_custom_field_names(user)


def _attr(kind: str) -> str:
    if kind not in CUSTOM_FIELD_KINDS:
        allowed = ", ".join(CUSTOM_FIELD_KINDS)
        raise ValueError(f"kind must be one of: {allowed}")
    return f"{kind}_custom_field_names"


def _save(session: Session, user: User):
    try:
        session.add(user)
        session.commit()
        session.refresh(user)
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Could not save profile for user {user.id}: {e}")
        raise RepositoryError("Failed to save profile") from e
