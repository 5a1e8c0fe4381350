from celery import shared_task
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session
from app.core.config import settings
from app.core.database import SessionLocal
from app.services.lease import RedisIntegrationLease
from app.services.sync import run_sync


@shared_task(name="app.tasks.sync_call_logs", bind=True, autoretry_for=(OperationalError,), retry_backoff=True, retry_kwargs={"max_retries": 5})
def sync_call_logs(self):
    db: Session = SessionLocal()
    try:
        lease = RedisIntegrationLease(ttl_seconds=settings.lease_ttl_seconds)
        return run_sync(db, lease=lease).as_response()
    finally:
        db.close()
