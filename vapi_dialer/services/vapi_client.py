# vapi_dialer/services/vapi_client.py
import logging
from typing import Any, Optional

import requests

from vapi_dialer.config import get_settings
from vapi_dialer.schemas.calls import CallRequest

logger = logging.getLogger(__name__)


class GatewayConfigError(RuntimeError):
    """Required Vapi settings are missing; nothing was sent."""


class VapiAPIError(Exception):
    """Vapi answered with a non-2xx status or a body we could not read."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class VapiClient:
    """
    Thin wrapper around the Vapi REST API.

    This makes it easy to:
    - centralize config (private key, base URL, outbound phone number id)
    - mock in tests by handing in a fake session.
    """

    def __init__(
        self,
        api_key: Optional[str],
        phone_number_id: Optional[str] = None,
        base_url: str = "https://api.vapi.ai",
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self._api_key = api_key
        self.phone_number_id = phone_number_id
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()

    def missing_config(self, require_phone_number: bool = True) -> list[str]:
        missing: list[str] = []
        if not self._api_key:
            missing.append("VAPI_PRIVATE_KEY")
        if require_phone_number and not self.phone_number_id:
            missing.append("VAPI_PHONE_NUMBER_ID")
        return missing

    def ensure_configured(self, require_phone_number: bool = True) -> None:
        missing = self.missing_config(require_phone_number=require_phone_number)
        if missing:
            raise GatewayConfigError(
                f"Server configuration error: {', '.join(missing)} not set"
            )

    def _request(self, method: str, path: str, json: Optional[dict] = None) -> Any:
        url = f"{self._base_url}{path}"
        logger.debug("Vapi request %s %s", method, url)
        response = self._session.request(
            method,
            url,
            json=json,
            headers={
                "Authorization": f"Bearer {self._api_key}",
                "Content-Type": "application/json",
            },
            timeout=self._timeout,
        )
        if not 200 <= response.status_code < 300:
            raise VapiAPIError(
                f"API error: {response.status_code} - {response.text}",
                status_code=response.status_code,
                body=response.text,
            )
        try:
            return response.json()
        except ValueError:
            raise VapiAPIError(
                f"Vapi returned non-JSON: {response.text}",
                status_code=response.status_code,
                body=response.text,
            )

    def list_assistants(self) -> list[dict]:
        """
        Return the assistants configured on the Vapi account, as Vapi sends them.
        """
        data = self._request("GET", "/assistant")
        if not isinstance(data, list):
            raise VapiAPIError("Failed to fetch assistants: expected a JSON list")
        return data

    def create_phone_call(self, call: CallRequest, phone_number_id: str) -> dict:
        """
        Ask Vapi to place (or schedule) one outbound phone call.
        Returns the call object Vapi created.
        """
        data = self._request(
            "POST", "/call/phone", json=call.to_vapi_payload(phone_number_id)
        )
        if not isinstance(data, dict):
            raise VapiAPIError("Vapi returned an unexpected call payload")
        return data


def get_vapi_client() -> VapiClient:
    """
    FastAPI dependency to get a VapiClient built from settings.

    Missing settings are not checked here: callers run ensure_configured()
    after validating their own input.
    """
    settings = get_settings()
    return VapiClient(
        api_key=settings.VAPI_PRIVATE_KEY,
        phone_number_id=settings.VAPI_PHONE_NUMBER_ID,
        base_url=settings.VAPI_BASE_URL,
        timeout=settings.VAPI_TIMEOUT_SECONDS,
    )
