from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.models import VoipIntegration
from app.schemas import IntegrationStatusOut

router = APIRouter(prefix="/integrations", tags=["integrations"])


@router.get("", response_model=List[IntegrationStatusOut])
def list_integrations(
    agency_id: str | None = None,
    active: bool | None = None,
    db: Session = Depends(get_db),
):
    query = db.query(VoipIntegration)
    if agency_id:
        query = query.filter(VoipIntegration.agency_id == agency_id)
    if active is not None:
        query = query.filter(VoipIntegration.is_active.is_(active))
    return query.order_by(VoipIntegration.id).all()
