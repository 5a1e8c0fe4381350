import logging
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from app.core.clock import ensure_utc
from app.core.exceptions import AuthRefreshError
from app.models import VoipIntegration
from app.services.ringcentral_client import RingCentralClient

logger = logging.getLogger(__name__)

REFRESH_MARGIN = timedelta(minutes=5)
REFRESH_FAILED_MESSAGE = "Token refresh failed - reconnection required"


def token_needs_refresh(
    integration: VoipIntegration, now: datetime, margin: timedelta = REFRESH_MARGIN
) -> bool:
    expires_at = ensure_utc(integration.token_expires_at)
    if expires_at is None:
        return True
    return expires_at - now <= margin


def disable_integration(db: Session, integration: VoipIntegration, message: str, now: datetime) -> None:
    integration.is_active = False
    integration.last_sync_error = message
    integration.updated_at = now
    db.commit()


def ensure_valid_token(
    db: Session,
    integration: VoipIntegration,
    client: RingCentralClient,
    now: datetime,
    margin: timedelta = REFRESH_MARGIN,
) -> str:
    """Return a bearer token good for at least ``margin``, refreshing it if needed.

    A rejected refresh disables the integration and raises AuthRefreshError;
    the integration stays disabled until it is re-authorized out of band.
    """
    if not token_needs_refresh(integration, now, margin):
        return integration.access_token

    logger.info("Refreshing token for agency: %s", integration.agency_id)
    try:
        grant = client.refresh_access_token(integration.refresh_token)
    except AuthRefreshError as exc:
        logger.error("Token refresh failed for agency %s: %s", integration.agency_id, exc)
        disable_integration(db, integration, REFRESH_FAILED_MESSAGE, now)
        raise

    integration.access_token = grant.access_token
    if grant.refresh_token:
        integration.refresh_token = grant.refresh_token
    integration.token_expires_at = now + timedelta(seconds=grant.expires_in)
    integration.updated_at = now
    db.commit()
    logger.info("Token refreshed for agency: %s", integration.agency_id)
    return grant.access_token
