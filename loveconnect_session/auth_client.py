from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from .errors import MalformedIdentityError
from .identity_adapter import identity_from_payload
from .models import AuthResult

logger = logging.getLogger(__name__)


class AuthClient:
    """Calls to the LoveConnect identity service.

    One ``httpx.AsyncClient`` is kept for the lifetime of the object so its
    cookie jar carries the session cookie between calls.
    """

    def __init__(self, base_url: str, timeout_sec: float = 8.0, client: Optional[httpx.AsyncClient] = None):
        self.base_url = (base_url or "").rstrip("/")
        self.timeout = timeout_sec
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=timeout_sec)

    @property
    def cookies(self) -> httpx.Cookies:
        return self.client.cookies

    def _headers(self, token: Optional[str]) -> dict[str, str]:
        if not token:
            return {}
        return {"Authorization": f"Bearer {token}"}

    async def _send(
        self,
        method: str,
        path: str,
        token: Optional[str] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> tuple[Optional[httpx.Response], Optional[AuthResult]]:
        if not self.base_url:
            return None, AuthResult.failure("not_configured")
        try:
            r = await self.client.request(method, f"{self.base_url}/{path}", headers=self._headers(token), json=json)
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, path, e.__class__.__name__)
            return None, AuthResult.failure("network_error")
        except ValueError as e:
            # заголовки только ASCII: токен или cookie с другими символами не отправить
            logger.warning("%s %s could not be sent: %s", method, path, e.__class__.__name__)
            return None, AuthResult.failure("invalid_request")
        if not r.is_success:
            return r, AuthResult.failure(f"http_{r.status_code}", r.status_code)
        return r, None

    async def fetch_identity(self, token: Optional[str]) -> AuthResult:
        r, failed = await self._send("GET", "get-user/", token=token)
        if failed:
            return failed
        try:
            identity = identity_from_payload(r.json())
        except (ValueError, MalformedIdentityError) as e:
            logger.warning("get-user returned an unusable body: %s", e)
            return AuthResult.failure("malformed_response", r.status_code)
        return AuthResult.success(r.status_code, identity)

    async def login(self, email: str, pin: str) -> AuthResult:
        r, failed = await self._send("POST", "login/", json={"email": email, "pin": pin})
        return failed or AuthResult.success(r.status_code)

    async def signup(self, name: str, email: str, pin: str) -> AuthResult:
        r, failed = await self._send("POST", "signup/", json={"name": name, "email": email, "pin": pin})
        return failed or AuthResult.success(r.status_code)

    async def logout(self, token: Optional[str]) -> AuthResult:
        r, failed = await self._send("POST", "logout/", token=token)
        return failed or AuthResult.success(r.status_code)

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()
