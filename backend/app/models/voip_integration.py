from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text
from sqlalchemy.sql import func
from app.core.database import Base


class VoipIntegration(Base):
    __tablename__ = "voip_integrations"

    id = Column(Integer, primary_key=True)
    agency_id = Column(String(64), nullable=False, index=True)
    provider = Column(String(32), nullable=False, default="ringcentral")
    access_token = Column(Text, nullable=False)
    refresh_token = Column(Text, nullable=False)
    token_expires_at = Column(DateTime(timezone=True))
    last_sync_at = Column(DateTime(timezone=True))
    last_sync_error = Column(String(1024))
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
