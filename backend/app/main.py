from fastapi import FastAPI

from app.api import calls, health, integrations, metrics, sync
from app.core.config import settings
from app.core.log_config import configure_logging

configure_logging(settings.log_level)

app = FastAPI(title=settings.app_name)

app.include_router(health.router)
app.include_router(sync.router)
app.include_router(integrations.router)
app.include_router(calls.router)
app.include_router(metrics.router)
