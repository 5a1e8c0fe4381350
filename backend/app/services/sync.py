import logging
import time
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, tzinfo
from typing import Callable, List, Optional, Protocol
from zoneinfo import ZoneInfo

from sqlalchemy.orm import Session

from app.core.clock import utcnow
from app.core.config import settings
from app.core.exceptions import AuthRefreshError, ConfigurationError
from app.models import VoipIntegration
from app.services.credentials import ensure_valid_token
from app.services.fetcher import sync_integration_calls
from app.services.ringcentral_client import RingCentralClient
from app.services.rollup import aggregate_daily_metrics

logger = logging.getLogger(__name__)


class IntegrationLease(Protocol):
    def acquire(self, integration_id: int) -> bool: ...

    def release(self, integration_id: int) -> None: ...


@dataclass
class IntegrationOutcome:
    integration_id: int
    agency_id: str
    status: str
    calls_synced: int = 0
    error: Optional[str] = None


@dataclass
class SyncSummary:
    processed: int = 0
    calls_synced: int = 0
    outcomes: List[IntegrationOutcome] = field(default_factory=list)

    def as_response(self) -> dict:
        return {"success": True, "processed": self.processed, "calls_synced": self.calls_synced}


def get_active_integrations(db: Session, provider: str) -> List[VoipIntegration]:
    return (
        db.query(VoipIntegration)
        .filter(VoipIntegration.provider == provider, VoipIntegration.is_active.is_(True))
        .order_by(VoipIntegration.id)
        .all()
    )


def metrics_day(now: datetime, tz: tzinfo) -> date:
    return now.astimezone(tz).date()


def run_sync(
    db: Session,
    now: Optional[datetime] = None,
    client: Optional[RingCentralClient] = None,
    lease: Optional[IntegrationLease] = None,
    *,
    deadline_seconds: Optional[float] = None,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
) -> SyncSummary:
    """Sync call logs and recompute today's metrics for every active integration.

    Integrations run one after another. A failure in one is logged and
    rolled back without stopping the others.
    """
    now = now or utcnow()
    client = client or RingCentralClient.from_settings()
    tz = ZoneInfo(settings.metrics_timezone)
    day = metrics_day(now, tz)
    if deadline_seconds is None:
        deadline_seconds = settings.sync_deadline_seconds
    deadline = clock() + deadline_seconds

    integrations = get_active_integrations(db, settings.provider_name)
    logger.info("Processing %s active integrations", len(integrations))

    summary = SyncSummary()
    for integration in integrations:
        integration_id = integration.id
        agency_id = integration.agency_id
        outcome = IntegrationOutcome(integration_id=integration_id, agency_id=agency_id, status="synced")
        summary.outcomes.append(outcome)

        if clock() > deadline:
            logger.warning("Sync deadline reached, leaving agency %s for the next run", agency_id)
            outcome.status = "deferred"
            continue
        if lease is not None and not lease.acquire(integration_id):
            logger.info("Integration %s is being synced elsewhere, skipping", integration_id)
            outcome.status = "locked"
            continue

        failed = False
        try:
            try:
                access_token: Optional[str] = ensure_valid_token(
                    db,
                    integration,
                    client,
                    now,
                    margin=timedelta(seconds=settings.token_refresh_margin_seconds),
                )
            except AuthRefreshError as exc:
                access_token = None
                outcome.status = "auth_failed"
                outcome.error = str(exc)
            except ConfigurationError as exc:
                logger.error("Cannot refresh token for agency %s: %s", agency_id, exc)
                access_token = None
                outcome.status = "not_configured"
                outcome.error = str(exc)

            if access_token:
                fetched = sync_integration_calls(
                    db,
                    integration,
                    client,
                    access_token,
                    now,
                    provider=settings.provider_name,
                    page_size=settings.call_log_page_size,
                    page_delay=settings.page_delay_seconds,
                    bootstrap_window=timedelta(hours=settings.bootstrap_window_hours),
                    deadline=deadline,
                    clock=clock,
                    sleep=sleep,
                )
                outcome.calls_synced = fetched.synced
                summary.calls_synced += fetched.synced
                if not fetched.completed:
                    outcome.status = "partial"
                    outcome.error = fetched.error
        except Exception as exc:
            db.rollback()
            failed = True
            outcome.status = "error"
            outcome.error = f"{type(exc).__name__}: {exc}"
            logger.exception("Error syncing calls for agency %s", agency_id)

        try:
            aggregate_daily_metrics(db, agency_id, day, tz=tz, now=now)
        except Exception as exc:
            db.rollback()
            failed = True
            outcome.status = "error"
            outcome.error = outcome.error or f"{type(exc).__name__}: {exc}"
            logger.exception("Error aggregating metrics for agency %s", agency_id)
        finally:
            if lease is not None:
                lease.release(integration_id)

        if not failed:
            summary.processed += 1

    logger.info(
        "Complete: %s agencies, %s calls synced", summary.processed, summary.calls_synced
    )
    return summary
