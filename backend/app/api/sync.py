import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.schemas import QueuedSyncResponse, SyncResponse
from app.services.sync import run_sync

router = APIRouter(prefix="/sync", tags=["sync"])

logger = logging.getLogger(__name__)


@router.post("", response_model=SyncResponse)
def trigger_sync(db: Session = Depends(get_db)):
    try:
        summary = run_sync(db)
    except Exception as exc:
        logger.exception("Call log sync failed")
        return JSONResponse(status_code=500, content={"success": False, "error": str(exc)})
    return summary.as_response()


@router.post("/queue", response_model=QueuedSyncResponse)
def queue_sync():
    from app.tasks import sync_call_logs

    result = sync_call_logs.delay()
    return QueuedSyncResponse(status="queued", task_id=result.id)
