from datetime import date, datetime
from typing import List
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from app.core.config import settings
from app.core.database import get_db
from app.models import CallMetricDaily
from app.schemas import CallMetricDailyOut

router = APIRouter(prefix="/metrics", tags=["metrics"])


@router.get("/daily", response_model=List[CallMetricDailyOut])
def daily_metrics(
    agency_id: str,
    day: date | None = Query(default=None, alias="date"),
    team_member_id: str | None = None,
    db: Session = Depends(get_db),
):
    if day is None:
        day = datetime.now(ZoneInfo(settings.metrics_timezone)).date()
    query = db.query(CallMetricDaily).filter(
        CallMetricDaily.agency_id == agency_id, CallMetricDaily.date == day
    )
    if team_member_id:
        query = query.filter(CallMetricDaily.team_member_id == team_member_id)
    return query.order_by(CallMetricDaily.team_member_id).all()
