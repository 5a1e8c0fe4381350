import logging
from typing import Any, Dict

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.database import insert_for
from app.core.exceptions import RecordPersistenceError
from app.models import CallEvent

logger = logging.getLogger(__name__)

IDEMPOTENCY_KEY = ("provider", "external_call_id")


def persist_call_event(db: Session, values: Dict[str, Any]) -> bool:
    """Insert a call event once per (provider, external_call_id).

    Returns True when a row was written and False when the key already
    existed; the stored row is never overwritten.
    """
    statement = (
        insert_for(db, CallEvent.__table__)
        .values(**values)
        .on_conflict_do_nothing(index_elements=list(IDEMPOTENCY_KEY))
    )
    try:
        result = db.execute(statement)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise RecordPersistenceError(
            f"Failed to persist call {values.get('external_call_id')}: {type(exc).__name__}: {exc}",
            external_call_id=values.get("external_call_id"),
        ) from exc
    if result.rowcount == 0:
        logger.debug("Call %s already stored, skipping", values.get("external_call_id"))
        return False
    return True
