from datetime import date, datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProviderParty(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    phone_number: Optional[str] = Field(default=None, alias="phoneNumber")
    name: Optional[str] = None


class ProviderExtension(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    name: Optional[str] = None

    @field_validator("id", mode="before")
    def coerce_id(cls, value: Any) -> Any:
        if value is None:
            return None
        return str(value)


class ProviderCallRecord(BaseModel):
    """One call-log record as returned by the provider's detailed view."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str
    start_time: datetime = Field(alias="startTime")
    end_time: Optional[datetime] = Field(default=None, alias="endTime")
    duration: int = 0
    type: Optional[str] = None
    direction: Optional[str] = None
    result: Optional[str] = None
    from_party: Optional[ProviderParty] = Field(default=None, alias="from")
    to_party: Optional[ProviderParty] = Field(default=None, alias="to")
    extension: Optional[ProviderExtension] = None

    @field_validator("id", mode="before")
    def coerce_id(cls, value: Any) -> Any:
        if isinstance(value, int):
            return str(value)
        return value

    @field_validator("duration", mode="before")
    def default_duration(cls, value: Any) -> Any:
        return value or 0


class ProviderPaging(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    page: int = 1
    total_pages: Optional[int] = Field(default=None, alias="totalPages")
    per_page: Optional[int] = Field(default=None, alias="perPage")


class CallLogPage(BaseModel):
    model_config = ConfigDict(extra="allow")

    records: List[Any] = Field(default_factory=list)
    paging: Optional[ProviderPaging] = None
    navigation: Optional[Dict[str, Any]] = None

    @property
    def has_more(self) -> bool:
        if self.paging and self.paging.total_pages is not None:
            return self.paging.page < self.paging.total_pages
        return bool(self.navigation and self.navigation.get("nextPage"))


class TokenGrant(BaseModel):
    model_config = ConfigDict(extra="allow")

    access_token: str
    refresh_token: Optional[str] = None
    expires_in: int


class SyncResponse(BaseModel):
    success: bool
    processed: int
    calls_synced: int


class QueuedSyncResponse(BaseModel):
    status: str
    task_id: str


class IntegrationStatusOut(BaseModel):
    id: int
    agency_id: str
    provider: str
    is_active: bool
    token_expires_at: Optional[datetime]
    last_sync_at: Optional[datetime]
    last_sync_error: Optional[str]

    model_config = ConfigDict(from_attributes=True)


class CallEventOut(BaseModel):
    id: int
    agency_id: str
    external_call_id: str
    provider: str
    direction: str
    call_type: Optional[str]
    from_number: Optional[str]
    to_number: Optional[str]
    call_started_at: datetime
    call_ended_at: Optional[datetime]
    duration_seconds: int
    result: Optional[str]
    extension_id: Optional[str]
    extension_name: Optional[str]
    matched_team_member_id: Optional[str]

    model_config = ConfigDict(from_attributes=True)


class PaginatedCallEvents(BaseModel):
    items: List[CallEventOut]
    total: int
    page: int
    page_size: int


class CallMetricDailyOut(BaseModel):
    agency_id: str
    team_member_id: str
    date: date
    total_calls: int
    inbound_calls: int
    outbound_calls: int
    answered_calls: int
    missed_calls: int
    total_talk_seconds: int
    last_calculated_at: Optional[datetime]

    model_config = ConfigDict(from_attributes=True)
