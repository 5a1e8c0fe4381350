from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.core.config import settings
from app.core.database import get_db
from app.models import VoipIntegration
import redis

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    return {"status": "ok"}


@router.get("/ready")
def ready(db: Session = Depends(get_db)):
    active = (
        db.query(VoipIntegration)
        .filter(VoipIntegration.provider == settings.provider_name, VoipIntegration.is_active.is_(True))
        .count()
    )
    redis_client = redis.Redis.from_url(settings.redis_url)
    redis_client.ping()
    return {"status": "ready", "active_integrations": active}
