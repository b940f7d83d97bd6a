"""Bearer credential resolution.

Resolution order: explicit token from settings, then the cached exchanged
token, then an OAuth2 client-credentials exchange against
``{base}/oauth2/token``. Exchange failures are logged and yield None, so the
caller proceeds unauthenticated and gets a clear 401/403 from the API.
"""

import asyncio
import json
import logging
import time
from dataclasses import dataclass
from typing import Optional

import aiohttp

from ..config import Settings

TOKEN_PATH = "/oauth2/token"


@dataclass(frozen=True)
class CachedCredential:
    token: str
    acquired_at: float


class CredentialCache:
    """Holds the exchanged bearer token for the lifetime of the process

    There is no expiry check; a stale token is used until restart. Population
    is a single attribute swap, so concurrent writers resolve last-writer-wins.
    """

    def __init__(self):
        self._credential: Optional[CachedCredential] = None

    @property
    def credential(self) -> Optional[CachedCredential]:
        return self._credential

    def get(self) -> Optional[str]:
        credential = self._credential
        return credential.token if credential else None

    def store(self, token: str) -> CachedCredential:
        credential = CachedCredential(token=token, acquired_at=time.time())
        self._credential = credential
        return credential

    def clear(self) -> None:
        self._credential = None


class CredentialResolver:
    """Determines the bearer credential to attach to a request

    Args:
        settings: Runtime configuration carrying the token or client credentials
        base_url: Base URL the token endpoint is relative to
        cache: Cache for exchanged tokens; a fresh one is created if omitted
    """

    def __init__(self, settings: Settings, base_url: str, cache: Optional[CredentialCache] = None):
        self.settings = settings
        self.base_url = base_url.rstrip("/")
        self.cache = cache if cache is not None else CredentialCache()

    async def resolve(self) -> Optional[str]:
        if self.settings.token:
            return self.settings.token

        cached = self.cache.get()
        if cached:
            return cached

        if not self.settings.has_client_credentials:
            return None

        token = await self._exchange()
        if token:
            self.cache.store(token)
        return token

    async def _exchange(self) -> Optional[str]:
        url = f"{self.base_url}{TOKEN_PATH}"
        form = {
            "grant_type": "client_credentials",
            "client_id": self.settings.client_id,
            "client_secret": self.settings.client_secret,
        }
        timeout = aiohttp.ClientTimeout(total=self.settings.http_timeout)
        logging.info("[Credentials] Exchanging client credentials", extra={"meta": {"url": url}})

        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(url, data=form, headers={"Accept": "application/json"}) as response:
                    text = await response.text()
                    if response.status < 200 or response.status >= 300:
                        logging.warning(
                            "[Credentials] Token exchange failed",
                            extra={"meta": {"status": response.status, "url": url, "body": text[:500]}},
                        )
                        return None
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logging.warning(f"[Credentials] Token exchange request error: {e}", extra={"meta": {"url": url}})
            return None

        try:
            payload = json.loads(text)
        except ValueError:
            logging.warning("[Credentials] Token exchange returned unparsable body", extra={"meta": {"url": url}})
            return None

        token = payload.get("access_token") if isinstance(payload, dict) else None
        if not token:
            logging.warning("[Credentials] Token exchange response has no access_token", extra={"meta": {"url": url}})
            return None

        logging.info("[Credentials] Obtained access token via client credentials")
        return token


__all__ = [
    "TOKEN_PATH",
    "CachedCredential",
    "CredentialCache",
    "CredentialResolver",
]
