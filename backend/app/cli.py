import json
from datetime import date, datetime
from typing import Optional
from zoneinfo import ZoneInfo

import typer
import uvicorn
from sqlalchemy.orm import Session
from app.core.config import settings
from app.core.database import Base, SessionLocal, engine
from app.core.log_config import configure_logging
from app.services.rollup import aggregate_daily_metrics
from app.services.sync import run_sync

app = typer.Typer()


@app.callback()
def main():
    configure_logging(settings.log_level)


@app.command()
def sync():
    """Run the call-log sync job once for every active integration."""
    db: Session = SessionLocal()
    try:
        summary = run_sync(db)
        typer.echo(json.dumps(summary.as_response()))
    finally:
        db.close()


@app.command()
def aggregate(agency_id: str, day: Optional[str] = typer.Option(None, "--date", help="YYYY-MM-DD, defaults to today")):
    """Recompute one agency's daily call metrics."""
    tz = ZoneInfo(settings.metrics_timezone)
    target = date.fromisoformat(day) if day else datetime.now(tz).date()
    db: Session = SessionLocal()
    try:
        result = aggregate_daily_metrics(db, agency_id, target, tz=tz)
        typer.echo(f"{len(result.groups)} groups, {result.persisted} rows written for {target.isoformat()}")
    finally:
        db.close()


@app.command()
def init_db():
    Base.metadata.create_all(bind=engine)
    typer.echo("Tables created")


@app.command()
def serve(
    host: str = typer.Option(settings.api_host, help="Interface to bind"),
    port: int = typer.Option(settings.api_port, help="Port to listen on"),
):
    """Serve the HTTP API with uvicorn."""
    uvicorn.run("app.main:app", host=host, port=port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    app()
