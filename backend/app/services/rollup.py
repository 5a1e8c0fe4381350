import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from app.core.clock import utcnow
from app.core.database import insert_for
from app.models import CallDirection, CallEvent, CallMetricDaily

logger = logging.getLogger(__name__)

ANSWERED_RESULTS = frozenset({"Accepted", "Call connected"})
MISSED_RESULTS = frozenset({"Missed"})
METRIC_FIELDS = (
    "total_calls",
    "inbound_calls",
    "outbound_calls",
    "answered_calls",
    "missed_calls",
    "total_talk_seconds",
)


@dataclass
class RollupGroup:
    key: str
    team_member_id: Optional[str] = None
    total_calls: int = 0
    inbound_calls: int = 0
    outbound_calls: int = 0
    answered_calls: int = 0
    missed_calls: int = 0
    total_talk_seconds: int = 0

    def add(self, direction: Optional[str], result: Optional[str], duration: Optional[int]) -> None:
        self.total_calls += 1
        if direction == CallDirection.INBOUND.value:
            self.inbound_calls += 1
        elif direction == CallDirection.OUTBOUND.value:
            self.outbound_calls += 1
        if result in ANSWERED_RESULTS:
            self.answered_calls += 1
        if result in MISSED_RESULTS:
            self.missed_calls += 1
        self.total_talk_seconds += duration or 0

    def metrics(self) -> Dict[str, int]:
        return {name: getattr(self, name) for name in METRIC_FIELDS}


@dataclass
class RollupResult:
    agency_id: str
    day: date
    groups: List[RollupGroup] = field(default_factory=list)
    persisted: int = 0


def day_bounds(day: date, tz: tzinfo = timezone.utc) -> tuple[datetime, datetime]:
    start = datetime.combine(day, time.min, tzinfo=tz)
    end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=tz)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


def group_key(team_member_id: Optional[str], extension_id: Optional[str], extension_name: Optional[str]) -> str:
    if team_member_id:
        return team_member_id
    return f"ext_{extension_name or extension_id or 'unknown'}"


def aggregate_daily_metrics(
    db: Session,
    agency_id: str,
    day: date,
    tz: tzinfo = timezone.utc,
    now: Optional[datetime] = None,
) -> RollupResult:
    """Recompute one tenant's per-person call metrics for ``day``.

    Calls without a matched team member are counted per extension but are
    not written to call_metrics_daily.
    """
    now = now or utcnow()
    start, end = day_bounds(day, tz)
    rows = (
        db.query(
            CallEvent.direction,
            CallEvent.result,
            CallEvent.duration_seconds,
            CallEvent.extension_id,
            CallEvent.extension_name,
            CallEvent.matched_team_member_id,
        )
        .filter(
            CallEvent.agency_id == agency_id,
            CallEvent.call_started_at >= start,
            CallEvent.call_started_at < end,
        )
        .all()
    )
    result = RollupResult(agency_id=agency_id, day=day)
    if not rows:
        return result

    groups: Dict[str, RollupGroup] = {}
    for row in rows:
        key = group_key(row.matched_team_member_id, row.extension_id, row.extension_name)
        group = groups.get(key)
        if group is None:
            group = groups[key] = RollupGroup(key=key, team_member_id=row.matched_team_member_id)
        group.add(row.direction, row.result, row.duration_seconds)
    result.groups = list(groups.values())

    for group in result.groups:
        if not group.team_member_id:
            continue
        metrics = group.metrics()
        statement = (
            insert_for(db, CallMetricDaily.__table__)
            .values(
                agency_id=agency_id,
                team_member_id=group.team_member_id,
                date=day,
                last_calculated_at=now,
                updated_at=now,
                **metrics,
            )
            .on_conflict_do_update(
                index_elements=["agency_id", "team_member_id", "date"],
                set_={**metrics, "last_calculated_at": now, "updated_at": now},
            )
        )
        db.execute(statement)
        result.persisted += 1
    db.commit()

    logger.info(
        "Aggregated metrics for agency %s on %s: %s groups, %s persisted",
        agency_id,
        day.isoformat(),
        len(result.groups),
        result.persisted,
    )
    return result
