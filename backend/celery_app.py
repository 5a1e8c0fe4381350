from celery import Celery
from celery.signals import after_setup_logger
from app.core.config import settings
from app.core.log_config import configure_logging

celery_app = Celery(
    "callsync",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=["app.tasks"],
)

celery_app.conf.beat_schedule = {
    "sync-call-logs": {
        "task": "app.tasks.sync_call_logs",
        "schedule": float(settings.sync_interval_seconds),
    }
}


@after_setup_logger.connect
def setup_app_logging(logger, **kwargs):
    configure_logging(settings.log_level)
