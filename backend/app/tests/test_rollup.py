from datetime import timedelta, timezone
from zoneinfo import ZoneInfo

from app.models import CallEvent, CallMetricDaily
from app.services.rollup import aggregate_daily_metrics, day_bounds
from conftest import NOW

TODAY = NOW.date()


def _event(integration, external_id, started_at=NOW, direction="Inbound", result="Accepted",
           duration=60, member="member-1", extension_name="Front Desk", agency_id=None):
    return CallEvent(
        agency_id=agency_id or integration.agency_id,
        voip_integration_id=integration.id,
        external_call_id=external_id,
        provider="ringcentral",
        direction=direction,
        call_started_at=started_at,
        duration_seconds=duration,
        result=result,
        extension_name=extension_name,
        matched_team_member_id=member,
        raw_payload={"id": external_id},
    )


def _metric_values(row):
    return (
        row.total_calls,
        row.inbound_calls,
        row.outbound_calls,
        row.answered_calls,
        row.missed_calls,
        row.total_talk_seconds,
    )


def test_counts_for_one_person(db, make_integration):
    integration = make_integration()
    db.add_all(
        [
            _event(integration, "c1", direction="Inbound", result="Accepted", duration=120),
            _event(integration, "c2", direction="Inbound", result="Missed", duration=0),
            _event(integration, "c3", direction="Outbound", result="Call connected", duration=45),
        ]
    )
    db.commit()

    result = aggregate_daily_metrics(db, "agency-1", TODAY, now=NOW)

    assert result.persisted == 1
    row = db.query(CallMetricDaily).one()
    assert row.team_member_id == "member-1"
    assert row.date == TODAY
    assert row.total_calls == 3
    assert row.inbound_calls == 2
    assert row.outbound_calls == 1
    assert row.answered_calls == 2
    assert row.missed_calls == 1
    assert row.total_talk_seconds == 165


def test_rerun_without_new_events_is_identical(db, make_integration):
    integration = make_integration()
    db.add_all(
        [
            _event(integration, "c1"),
            _event(integration, "c2", member="member-2", direction="Outbound"),
        ]
    )
    db.commit()

    aggregate_daily_metrics(db, "agency-1", TODAY, now=NOW)
    first = {row.team_member_id: _metric_values(row) for row in db.query(CallMetricDaily)}
    aggregate_daily_metrics(db, "agency-1", TODAY, now=NOW + timedelta(minutes=15))
    second = {row.team_member_id: _metric_values(row) for row in db.query(CallMetricDaily)}

    assert first == second
    assert db.query(CallMetricDaily).count() == 2


def test_rerun_overwrites_with_new_events(db, make_integration):
    integration = make_integration()
    db.add(_event(integration, "c1"))
    db.commit()
    aggregate_daily_metrics(db, "agency-1", TODAY, now=NOW)

    db.add(_event(integration, "c2", direction="Outbound", duration=30))
    db.commit()
    aggregate_daily_metrics(db, "agency-1", TODAY, now=NOW)

    row = db.query(CallMetricDaily).one()
    assert (row.total_calls, row.outbound_calls, row.total_talk_seconds) == (2, 1, 90)


def test_unmatched_calls_are_counted_but_not_stored(db, make_integration):
    integration = make_integration()
    db.add_all(
        [
            _event(integration, "c1"),
            _event(integration, "c2", member=None, extension_name="Lobby"),
            _event(integration, "c3", member=None, extension_name="Lobby"),
        ]
    )
    db.commit()

    result = aggregate_daily_metrics(db, "agency-1", TODAY, now=NOW)

    groups = {group.key: group for group in result.groups}
    assert groups["ext_Lobby"].total_calls == 2
    assert groups["member-1"].total_calls == 1
    assert result.persisted == 1
    assert [row.team_member_id for row in db.query(CallMetricDaily)] == ["member-1"]


def test_only_selected_day_and_agency_are_counted(db, make_integration):
    integration = make_integration()
    other = make_integration(agency_id="agency-2")
    db.add_all(
        [
            _event(integration, "today"),
            _event(integration, "yesterday", started_at=NOW - timedelta(days=1)),
            _event(integration, "tomorrow", started_at=NOW + timedelta(days=1)),
            _event(other, "other-agency"),
        ]
    )
    db.commit()

    aggregate_daily_metrics(db, "agency-1", TODAY, now=NOW)

    rows = db.query(CallMetricDaily).all()
    assert len(rows) == 1
    assert rows[0].agency_id == "agency-1"
    assert rows[0].total_calls == 1


def test_no_events_writes_nothing(db, make_integration):
    make_integration()

    result = aggregate_daily_metrics(db, "agency-1", TODAY, now=NOW)

    assert result.groups == []
    assert db.query(CallMetricDaily).count() == 0


def test_day_bounds_follow_the_given_timezone():
    start, end = day_bounds(TODAY, ZoneInfo("America/New_York"))

    assert start.tzinfo == timezone.utc
    assert start.hour == 4
    assert end - start == timedelta(hours=24)
