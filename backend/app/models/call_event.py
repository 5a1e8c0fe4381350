import enum

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, JSON, String, UniqueConstraint
from sqlalchemy.sql import func
from app.core.database import Base


class CallDirection(str, enum.Enum):
    INBOUND = "Inbound"
    OUTBOUND = "Outbound"
    OTHER = "Other"

    @classmethod
    def from_provider(cls, value: str | None) -> "CallDirection":
        normalized = (value or "").strip().lower()
        if normalized.startswith("in"):
            return cls.INBOUND
        if normalized.startswith("out"):
            return cls.OUTBOUND
        return cls.OTHER


class CallEvent(Base):
    __tablename__ = "call_events"
    __table_args__ = (
        UniqueConstraint("provider", "external_call_id", name="uq_call_events_provider_external_id"),
        Index("ix_call_events_agency_started", "agency_id", "call_started_at"),
    )

    id = Column(Integer, primary_key=True)
    agency_id = Column(String(64), nullable=False)
    voip_integration_id = Column(Integer, ForeignKey("voip_integrations.id"), nullable=False)
    external_call_id = Column(String(128), nullable=False)
    provider = Column(String(32), nullable=False)
    direction = Column(String(16), nullable=False, default=CallDirection.OTHER.value)
    call_type = Column(String(32))
    from_number = Column(String(64), index=True)
    to_number = Column(String(64), index=True)
    call_started_at = Column(DateTime(timezone=True), nullable=False)
    call_ended_at = Column(DateTime(timezone=True))
    duration_seconds = Column(Integer, nullable=False, default=0)
    result = Column(String(64))
    extension_id = Column(String(64))
    extension_name = Column(String(255))
    matched_team_member_id = Column(String(64), index=True)
    raw_payload = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
