"""Reddit application-only OAuth (client credentials)."""
from __future__ import annotations

import base64
import logging
import time
from typing import Any, Callable, Optional

import httpx

TOKEN_URL = "https://www.reddit.com/api/v1/access_token"
# Refresh a cached token this many seconds before Reddit says it expires.
EXPIRY_MARGIN_SEC = 60.0

log = logging.getLogger(__name__)


class AuthError(Exception):
    """Raised when Reddit does not hand out an access token."""

    def __init__(self, message: str, *, status_code: int | None = None, payload: Any | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


def basic_auth_header(client_id: str, client_secret: str) -> str:
    raw = f"{client_id}:{client_secret}".encode()
    return f"Basic {base64.b64encode(raw).decode()}"


class TokenManager:
    """Exchange app credentials for a short-lived bearer token."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        client_id: str,
        client_secret: str,
        user_agent: str,
        *,
        cache_tokens: bool = False,
        token_url: str = TOKEN_URL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.client = client
        self.client_id = client_id
        self.client_secret = client_secret
        self.user_agent = user_agent
        self.cache_tokens = cache_tokens
        self.token_url = token_url
        self._clock = clock
        self._token: Optional[str] = None
        self._expires_at = 0.0

    async def get_access_token(self) -> str:
        if self.cache_tokens and self._token and self._clock() < self._expires_at:
            return self._token

        try:
            response = await self.client.post(
                self.token_url,
                headers={
                    "Authorization": basic_auth_header(self.client_id, self.client_secret),
                    "Content-Type": "application/x-www-form-urlencoded",
                    "User-Agent": self.user_agent,
                },
                content="grant_type=client_credentials",
            )
        except httpx.HTTPError as exc:
            raise AuthError(f"Reddit auth request failed: {exc!r}") from exc

        try:
            body = response.json()
        except ValueError:
            body = None
        token = body.get("access_token") if isinstance(body, dict) else None
        if not token:
            log.error(
                "reddit.auth_failed",
                extra={"status": response.status_code},
            )
            raise AuthError("Reddit auth failed", status_code=response.status_code, payload=body)

        if self.cache_tokens:
            try:
                ttl = float(body.get("expires_in", 0))
            except (TypeError, ValueError):
                ttl = 0.0
            self._token = str(token)
            self._expires_at = self._clock() + max(0.0, ttl - EXPIRY_MARGIN_SEC)
        return str(token)
