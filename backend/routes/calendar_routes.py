from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from backend.auth.dependencies import get_current_identity
from backend.auth.jwt_handler import TokenIdentity
from backend.database import get_db
from backend.services import calendar

router = APIRouter(tags=['calendar'])


class DayStatusResponse(BaseModel):
    status: str


class CalendarResponse(BaseModel):
    statuses: dict[str, DayStatusResponse]


@router.get('', response_model=CalendarResponse)
def get_calendar(
    identity: TokenIdentity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    return {'statuses': calendar.calendar_for(db, identity)}
