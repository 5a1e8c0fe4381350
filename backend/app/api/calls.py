from datetime import datetime
from fastapi import APIRouter, Depends, Query
from sqlalchemy import and_
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.models import CallEvent
from app.schemas import PaginatedCallEvents

router = APIRouter(prefix="/calls", tags=["calls"])


@router.get("", response_model=PaginatedCallEvents)
def list_calls(
    agency_id: str,
    from_date: datetime | None = Query(default=None, alias="from"),
    to_date: datetime | None = Query(default=None, alias="to"),
    direction: str | None = None,
    team_member_id: str | None = None,
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=200),
    db: Session = Depends(get_db),
):
    query = db.query(CallEvent)
    filters = [CallEvent.agency_id == agency_id]
    if from_date:
        filters.append(CallEvent.call_started_at >= from_date)
    if to_date:
        filters.append(CallEvent.call_started_at <= to_date)
    if direction:
        filters.append(CallEvent.direction == direction)
    if team_member_id:
        filters.append(CallEvent.matched_team_member_id == team_member_id)
    query = query.filter(and_(*filters))
    total = query.count()
    items = (
        query.order_by(CallEvent.call_started_at.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )
    return PaginatedCallEvents(items=items, total=total, page=page, page_size=page_size)
