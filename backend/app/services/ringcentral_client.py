import logging
from datetime import datetime, timezone
from typing import Optional

import requests
from pydantic import ValidationError

from app.core.config import settings as app_settings
from app.core.exceptions import (
    AuthRefreshError,
    ConfigurationError,
    ProviderAPIError,
    TransientNetworkError,
)
from app.schemas import CallLogPage, TokenGrant

logger = logging.getLogger(__name__)

TOKEN_PATH = "/restapi/oauth/token"
CALL_LOG_PATH = "/restapi/v1.0/account/~/call-log"


def format_date_from(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class RingCentralClient:
    def __init__(
        self,
        server_url: str,
        client_id: Optional[str],
        client_secret: Optional[str],
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.server_url = server_url.rstrip("/")
        self.client_id = client_id
        self.client_secret = client_secret
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_settings(cls, session: Optional[requests.Session] = None) -> "RingCentralClient":
        return cls(
            app_settings.ringcentral_server_url,
            app_settings.ringcentral_client_id,
            app_settings.ringcentral_client_secret,
            timeout=app_settings.request_timeout_seconds,
            session=session,
        )

    def refresh_access_token(self, refresh_token: str) -> TokenGrant:
        if not self.client_id or not self.client_secret:
            raise ConfigurationError("Missing RingCentral client credentials for token refresh")
        try:
            response = self.session.post(
                f"{self.server_url}{TOKEN_PATH}",
                data={"grant_type": "refresh_token", "refresh_token": refresh_token},
                auth=(self.client_id, self.client_secret),
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise AuthRefreshError(f"Token refresh request failed: {exc}") from exc
        if not response.ok:
            logger.error("Token refresh failed (%s): %s", response.status_code, response.text)
            raise AuthRefreshError(f"Token refresh rejected with status {response.status_code}")
        try:
            return TokenGrant.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise AuthRefreshError(f"Malformed token response: {exc}") from exc

    def get_call_log_page(
        self,
        access_token: str,
        date_from: datetime,
        page: int,
        per_page: int = 250,
    ) -> CallLogPage:
        params = {
            "dateFrom": format_date_from(date_from),
            "perPage": str(per_page),
            "page": str(page),
            "view": "Detailed",
        }
        try:
            response = self.session.get(
                f"{self.server_url}{CALL_LOG_PATH}",
                params=params,
                headers={"Authorization": f"Bearer {access_token}", "Accept": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise TransientNetworkError(f"Network error: {type(exc).__name__}: {exc}") from exc
        if not response.ok:
            logger.error("Call log request failed (%s): %s", response.status_code, response.text)
            raise ProviderAPIError(f"API error: {response.status_code}", status_code=response.status_code)
        try:
            return CallLogPage.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise ProviderAPIError(f"API error: malformed call log response ({exc})") from exc
