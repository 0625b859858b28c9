"""Profile API: starting capital and custom field names."""

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from journal.api.deps import get_current_user
from journal.database import get_session
from journal.models.user import User
from journal.schemas.profile import CapitalRead, CapitalUpdate, CustomFieldNames
from journal.services import profile
from journal.services.repository import RepositoryError

router = APIRouter(prefix="/api/profile", tags=["profile"])


@router.get("/capital", response_model=CapitalRead)
def get_capital(user: User = Depends(get_current_user)):
    return CapitalRead(capital=profile.get_capital(user))


@router.put("/capital", response_model=CapitalRead)
def set_capital(
    data: CapitalUpdate,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    try:
        capital = profile.set_capital(session, user, data.capital)
    except RepositoryError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return CapitalRead(capital=capital)


@router.get("/custom-fields", response_model=CustomFieldNames)
def get_custom_fields(user: User = Depends(get_current_user)):
    return profile.get_custom_field_names(user)


@router.post("/custom-fields/{kind}/{name}", response_model=CustomFieldNames)
def add_custom_field(
    kind: str,
    name: str,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    try:
        return profile.add_custom_field_name(session, user, kind, name)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except RepositoryError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/custom-fields/{kind}/{name}", response_model=CustomFieldNames)
def remove_custom_field(
    kind: str,
    name: str,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    try:
        return profile.remove_custom_field_name(session, user, kind, name)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except RepositoryError as e:
        raise HTTPException(status_code=500, detail=str(e))
