import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from app.core import database
from app.core.database import Base
from app.main import app
from app.models import VoipIntegration
from app.schemas import CallLogPage
from app.services.ringcentral_client import RingCentralClient

NOW = datetime(2026, 3, 10, 15, 0, tzinfo=timezone.utc)


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def db(engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[database.get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def now():
    return NOW


@pytest.fixture()
def make_integration(db):
    def factory(agency_id="agency-1", **overrides):
        values = {
            "agency_id": agency_id,
            "provider": "ringcentral",
            "access_token": f"token-{agency_id}",
            "refresh_token": f"refresh-{agency_id}",
            "token_expires_at": NOW + timedelta(hours=1),
            "is_active": True,
        }
        values.update(overrides)
        integration = VoipIntegration(**values)
        db.add(integration)
        db.commit()
        db.refresh(integration)
        return integration

    return factory


@pytest.fixture()
def provider_client():
    return MagicMock(spec=RingCentralClient)


def make_record(
    call_id,
    start=NOW - timedelta(hours=1),
    direction="Inbound",
    result="Accepted",
    duration=60,
    from_number="+1 (614) 555-0101",
    to_number="+16145550199",
    extension=None,
):
    record = {
        "id": call_id,
        "sessionId": f"session-{call_id}",
        "startTime": start.isoformat().replace("+00:00", "Z"),
        "duration": duration,
        "type": "Voice",
        "direction": direction,
        "result": result,
        "from": {"phoneNumber": from_number},
        "to": {"phoneNumber": to_number},
    }
    if extension is not None:
        record["extension"] = extension
    return record


def make_page(records, page=1, total_pages=1):
    return CallLogPage.model_validate(
        {
            "records": records,
            "paging": {"page": page, "totalPages": total_pages, "perPage": 250},
        }
    )
