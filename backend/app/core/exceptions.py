from typing import Optional


class CallSyncError(Exception):
    """Base class for errors raised by the sync engine."""


class ConfigurationError(CallSyncError):
    pass


class AuthRefreshError(CallSyncError):
    """The provider rejected the refresh grant; the integration needs re-authorization."""


class ProviderAPIError(CallSyncError):
    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class TransientNetworkError(ProviderAPIError):
    pass


class RecordPersistenceError(CallSyncError):
    def __init__(self, message: str, external_call_id: Optional[str] = None) -> None:
        super().__init__(message)
        self.external_call_id = external_call_id


class SyncDeadlineExceeded(CallSyncError):
    pass
