import logging
from typing import Optional, Dict, Any
from uuid import UUID

import httpx

from ...core.config import DingConfig
from ...application.ports.otp_provider import OTPProvider
from ...application.errors import (
    InvalidInputError,
    UnauthorizedError,
    RateLimitedError,
    UpstreamError,
)

logger = logging.getLogger(__name__)

AUTH_PATH = "authentication"
CHECK_PATH = "check"
API_KEY_HEADER = "x-api-key"

STATUS_VALID = "valid"
STATUS_RATE_LIMITED = "rate_limited"


class DingOTPProvider(OTPProvider):
    """Ding API client: starts an authentication and checks the submitted code.

    Holds no per-request state; one instance is shared across requests.
    """

    def __init__(self, config: DingConfig, client: Optional[httpx.AsyncClient] = None):
        self.config = config
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=config.timeout_seconds)

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def send(self, phone_number: str) -> str:
        body = await self._post(AUTH_PATH, {
            "phone_number": phone_number,
            "customer_uuid": self.config.customer_uuid,
        })
        if body.get("status") == STATUS_RATE_LIMITED:
            raise RateLimitedError()
        session_id = body.get("authentication_uuid")
        if not isinstance(session_id, str) or not session_id:
            raise UpstreamError("decode response: missing authentication_uuid")
        return session_id

    async def check(self, session_id: UUID, phone_number: str, code: str) -> bool:
        # The session is bound to the phone number on Ding's side; only the uuid travels
        body = await self._post(CHECK_PATH, {
            "customer_uuid": self.config.customer_uuid,
            "authentication_uuid": str(session_id),
            "check_code": code,
        })
        status = body.get("status")
        if status == STATUS_RATE_LIMITED:
            raise RateLimitedError()
        return status == STATUS_VALID

    async def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self.config.api_url}/{path}"
        headers = {
            API_KEY_HEADER: self.config.api_key,
            "content-type": "application/json",
        }
        try:
            resp = await self.client.post(url, headers=headers, json=payload)
        except httpx.HTTPError as e:
            logger.error(f"Ding request to /{path} failed: {e}")
            raise UpstreamError(f"post request: {e}") from e

        if resp.status_code == 400:
            raise InvalidInputError()
        if resp.status_code == 401:
            raise UnauthorizedError()
        if resp.status_code != 200:
            logger.error(f"Ding /{path} returned unexpected status {resp.status_code}")
            raise UpstreamError(f"unexpected status code: {resp.status_code}", status_code=resp.status_code)

        try:
            body = resp.json()
        except ValueError as e:
            raise UpstreamError(f"decode response: {e}", status_code=resp.status_code) from e
        if not isinstance(body, dict):
            raise UpstreamError("decode response: expected a JSON object", status_code=resp.status_code)
        return body
