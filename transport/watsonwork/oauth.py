"""
Watson Work OAuth Token

Exchanges the app id/secret for a bearer token (client-credentials grant).
Token is acquired once at startup; failure there is fatal.
"""

import asyncio
import logging
from time import monotonic
from typing import Optional

import httpx

from .errors import ServiceError, StartupError

logger = logging.getLogger(__name__)

# Re-acquire this many seconds before the token expires
EXPIRY_MARGIN_S = 60


async def acquire_token(
    client: httpx.AsyncClient,
    api_url: str,
    app_id: str,
    app_secret: str,
) -> dict:
    """
    Run the client-credentials grant against the platform token endpoint.

    Args:
        client: Shared HTTP client
        api_url: Platform API base URL
        app_id: App id (basic auth user)
        app_secret: App secret (basic auth password)

    Returns:
        Token response body (contains access_token, maybe expires_in)

    Raises:
        StartupError: Token endpoint unreachable, non-200 or no access_token
    """

    try:
        response = await client.post(
            f"{api_url}/oauth/token",
            auth=(app_id, app_secret),
            data={"grant_type": "client_credentials"},
        )
    except httpx.RequestError as e:
        logger.error(f"OAuth request failed: {e}", exc_info=True)
        raise StartupError(f"OAuth request failed: {e}") from e

    if response.status_code != 200:
        logger.error(
            f"OAuth token error: {response.status_code}",
            extra={"status_code": response.status_code},
        )
        raise StartupError(f"OAuth token endpoint returned {response.status_code}")

    try:
        body = response.json()
    except ValueError as e:
        raise StartupError("OAuth token response is not JSON") from e

    if not isinstance(body, dict) or not body.get("access_token"):
        raise StartupError("OAuth token response has no access_token")

    logger.info("Acquired OAuth token", extra={"app_id": app_id})
    return body


class TokenProvider:
    """
    Holds the app bearer token.

    Tokens without expires_in are kept for the process lifetime.
    Tokens with expires_in are re-acquired lazily shortly before expiry.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_url: str,
        app_id: str,
        app_secret: str,
    ):
        self.client = client
        self.api_url = api_url
        self.app_id = app_id
        self.app_secret = app_secret
        self._token: Optional[str] = None
        self._expires_at: Optional[float] = None
        self._refresh_lock = asyncio.Lock()

    @property
    def acquired(self) -> bool:
        return self._token is not None

    async def start(self) -> None:
        """Acquire the initial token. Raises StartupError on failure."""
        await self._acquire()

    async def get_token(self) -> str:
        """
        Current bearer token, refreshed if it is about to expire.

        Raises:
            ServiceError: No token yet, or refresh failed
        """
        if self._token is None:
            raise ServiceError("OAuth token not acquired")

        if self._expiring():
            # Concurrent senders share one refresh
            async with self._refresh_lock:
                if self._expiring():
                    logger.info("OAuth token expiring, re-acquiring")
                    try:
                        await self._acquire()
                    except StartupError as e:
                        raise ServiceError(f"OAuth token refresh failed: {e}") from e

        return self._token

    def _expiring(self) -> bool:
        return self._expires_at is not None and monotonic() >= self._expires_at

    async def _acquire(self) -> None:
        body = await acquire_token(self.client, self.api_url, self.app_id, self.app_secret)
        self._token = body["access_token"]

        expires_in = body.get("expires_in")
        if isinstance(expires_in, (int, float)) and expires_in > 0:
            self._expires_at = monotonic() + max(expires_in - EXPIRY_MARGIN_S, 0)
        else:
            self._expires_at = None
