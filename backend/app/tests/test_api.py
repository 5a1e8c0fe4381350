from datetime import timedelta
from unittest.mock import patch

from app.models import CallEvent, CallMetricDaily
from app.services.sync import SyncSummary
from conftest import NOW


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_sync_endpoint_returns_job_summary(client):
    with patch("app.api.sync.run_sync", return_value=SyncSummary(processed=3, calls_synced=42)):
        response = client.post("/sync")

    assert response.status_code == 200
    assert response.json() == {"success": True, "processed": 3, "calls_synced": 42}


def test_sync_endpoint_reports_job_failure(client):
    with patch("app.api.sync.run_sync", side_effect=RuntimeError("database unavailable")):
        response = client.post("/sync")

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "database unavailable"}


def test_integrations_endpoint_hides_token_material(client, make_integration):
    make_integration("agency-1", last_sync_error="API error: 500")
    make_integration("agency-2", is_active=False)

    response = client.get("/integrations", params={"active": True})

    assert response.status_code == 200
    payload = response.json()
    assert [item["agency_id"] for item in payload] == ["agency-1"]
    assert payload[0]["last_sync_error"] == "API error: 500"
    assert "access_token" not in payload[0]
    assert "refresh_token" not in payload[0]


def test_calls_endpoint_is_scoped_to_agency(client, db, make_integration):
    integration = make_integration("agency-1")
    other = make_integration("agency-2")
    for index, owner in enumerate([integration, integration, other]):
        db.add(
            CallEvent(
                agency_id=owner.agency_id,
                voip_integration_id=owner.id,
                external_call_id=f"call-{index}",
                provider="ringcentral",
                direction="Inbound",
                call_started_at=NOW - timedelta(minutes=index),
                duration_seconds=30,
                raw_payload={"id": f"call-{index}"},
            )
        )
    db.commit()

    response = client.get("/calls", params={"agency_id": "agency-1", "page_size": 1})

    assert response.status_code == 200
    payload = response.json()
    assert payload["total"] == 2
    assert [item["external_call_id"] for item in payload["items"]] == ["call-0"]


def test_daily_metrics_endpoint(client, db):
    db.add(
        CallMetricDaily(
            agency_id="agency-1",
            team_member_id="member-1",
            date=NOW.date(),
            total_calls=3,
            inbound_calls=2,
            outbound_calls=1,
            answered_calls=2,
            missed_calls=1,
            total_talk_seconds=165,
            last_calculated_at=NOW,
        )
    )
    db.commit()

    response = client.get(
        "/metrics/daily", params={"agency_id": "agency-1", "date": NOW.date().isoformat()}
    )

    assert response.status_code == 200
    [row] = response.json()
    assert row["team_member_id"] == "member-1"
    assert row["total_calls"] == 3
    assert row["answered_calls"] == 2


def test_ready_reports_active_integrations(client, make_integration):
    make_integration("agency-1")
    make_integration("agency-2", is_active=False)

    with patch("app.api.health.redis.Redis.from_url") as from_url:
        response = client.get("/ready")

    assert response.status_code == 200
    assert response.json() == {"status": "ready", "active_integrations": 1}
    from_url.return_value.ping.assert_called_once()
