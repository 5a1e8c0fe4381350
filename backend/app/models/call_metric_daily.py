from sqlalchemy import Column, Date, DateTime, Integer, String, UniqueConstraint
from sqlalchemy.sql import func
from app.core.database import Base


class CallMetricDaily(Base):
    __tablename__ = "call_metrics_daily"
    __table_args__ = (
        UniqueConstraint("agency_id", "team_member_id", "date", name="uq_call_metrics_daily_member_date"),
    )

    id = Column(Integer, primary_key=True)
    agency_id = Column(String(64), nullable=False, index=True)
    team_member_id = Column(String(64), nullable=False)
    date = Column(Date, nullable=False)
    total_calls = Column(Integer, nullable=False, default=0)
    inbound_calls = Column(Integer, nullable=False, default=0)
    outbound_calls = Column(Integer, nullable=False, default=0)
    answered_calls = Column(Integer, nullable=False, default=0)
    missed_calls = Column(Integer, nullable=False, default=0)
    total_talk_seconds = Column(Integer, nullable=False, default=0)
    last_calculated_at = Column(DateTime(timezone=True))
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
