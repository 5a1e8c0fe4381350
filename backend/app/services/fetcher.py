import logging
import time
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Optional

from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.core.clock import ensure_utc
from app.core.exceptions import ProviderAPIError, RecordPersistenceError, SyncDeadlineExceeded
from app.models import CallDirection, VoipIntegration
from app.schemas import ProviderCallRecord
from app.services.event_store import persist_call_event
from app.services.phone import normalize_phone
from app.services.ringcentral_client import RingCentralClient

logger = logging.getLogger(__name__)

BOOTSTRAP_WINDOW = timedelta(hours=24)
PAGE_SIZE = 250
PAGE_DELAY_SECONDS = 0.1


@dataclass
class FetchResult:
    synced: int = 0
    inserted: int = 0
    pages: int = 0
    completed: bool = False
    error: Optional[str] = None


def get_sync_since(
    integration: VoipIntegration, now: datetime, bootstrap_window: timedelta = BOOTSTRAP_WINDOW
) -> datetime:
    return ensure_utc(integration.last_sync_at) or now - bootstrap_window


def map_record_to_event(
    integration: VoipIntegration, record: ProviderCallRecord, raw: Dict[str, Any], provider: str
) -> Dict[str, Any]:
    return {
        "agency_id": integration.agency_id,
        "voip_integration_id": integration.id,
        "external_call_id": record.id,
        "provider": provider,
        "direction": CallDirection.from_provider(record.direction).value,
        "call_type": record.type,
        "from_number": normalize_phone(record.from_party.phone_number if record.from_party else None),
        "to_number": normalize_phone(record.to_party.phone_number if record.to_party else None),
        "call_started_at": ensure_utc(record.start_time),
        "call_ended_at": ensure_utc(record.end_time),
        "duration_seconds": record.duration,
        "result": record.result,
        "extension_id": record.extension.id if record.extension else None,
        "extension_name": record.extension.name if record.extension else None,
        "raw_payload": raw,
    }


def record_sync_error(db: Session, integration: VoipIntegration, message: str, now: datetime) -> None:
    integration.last_sync_error = message[:1024]
    integration.updated_at = now
    db.commit()


def sync_integration_calls(
    db: Session,
    integration: VoipIntegration,
    client: RingCentralClient,
    access_token: str,
    now: datetime,
    *,
    provider: str = "ringcentral",
    page_size: int = PAGE_SIZE,
    page_delay: float = PAGE_DELAY_SECONDS,
    bootstrap_window: timedelta = BOOTSTRAP_WINDOW,
    deadline: Optional[float] = None,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
) -> FetchResult:
    """Pull every call-log record since the integration's watermark.

    The watermark only moves to ``now`` once every page has been fetched; a
    failed page leaves it untouched so the next run re-requests the window.
    """
    agency_id = integration.agency_id
    since = get_sync_since(integration, now, bootstrap_window)
    logger.info("Fetching calls for agency %s since %s", agency_id, since.isoformat())

    result = FetchResult()
    page = 1
    while True:
        try:
            if deadline is not None and clock() > deadline:
                raise SyncDeadlineExceeded("Sync deadline exceeded")
            call_log = client.get_call_log_page(access_token, since, page, per_page=page_size)
        except (ProviderAPIError, SyncDeadlineExceeded) as exc:
            logger.error("Call log fetch stopped for agency %s on page %s: %s", agency_id, page, exc)
            result.error = str(exc)
            record_sync_error(db, integration, result.error, now)
            return result

        result.pages += 1
        for raw in call_log.records:
            if not isinstance(raw, dict):
                logger.warning(
                    "Skipping call record that is not an object for agency %s: %r", agency_id, raw
                )
                continue
            try:
                record = ProviderCallRecord.model_validate(raw)
            except ValidationError as exc:
                logger.warning(
                    "Skipping malformed call record %s for agency %s: %s",
                    raw.get("id"),
                    agency_id,
                    exc.errors(include_url=False),
                )
                continue
            try:
                inserted = persist_call_event(
                    db, map_record_to_event(integration, record, raw, provider)
                )
            except RecordPersistenceError:
                logger.exception("Failed to store call %s for agency %s", record.id, agency_id)
                continue
            result.synced += 1
            if inserted:
                result.inserted += 1

        if not call_log.has_more:
            break
        page += 1
        sleep(page_delay)

    integration.last_sync_at = now
    integration.last_sync_error = None
    integration.updated_at = now
    db.commit()
    result.completed = True
    logger.info(
        "Synced %s calls (%s new) over %s page(s) for agency: %s",
        result.synced,
        result.inserted,
        result.pages,
        agency_id,
    )
    return result
