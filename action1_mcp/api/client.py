"""HTTP client for the wrapped API.

ApiClient performs single requests with credential injection and structured
errors, and retries GETs on transient statuses with exponential backoff.
"""

import asyncio
import base64
import json
import logging
import random
import re
from typing import Any, Dict, Optional

import aiohttp

from ..config import Settings
from ..errors import HttpError, ResponseParseError, TransportError
from .credentials import CredentialCache, CredentialResolver
from .endpoints import ENDPOINTS
from .models import AuthScheme, EndpointsSpec

RETRY_STATUS = frozenset({429, 502, 503, 504})
SNIPPET_LENGTH = 500

_ABSOLUTE_URL = re.compile(r"^https?://", re.IGNORECASE)


class ApiClient:
    """Issues requests against the API described by an EndpointsSpec

    Args:
        settings: Runtime configuration
        spec: API description, defaults to the Action1 registry
        cache: Credential cache shared by every request of this client
    """

    def __init__(
        self,
        settings: Settings,
        spec: EndpointsSpec = ENDPOINTS,
        cache: Optional[CredentialCache] = None,
    ):
        self.settings = settings
        self.spec = spec
        self.credentials = CredentialResolver(settings, self.base_url, cache)
        logging.info(f"[ApiClient] Initialized for {self.base_url} (auth={spec.auth.scheme.value})")

    @property
    def base_url(self) -> str:
        return self.settings.resolve_base_url(self.spec.base_url)

    def url_for(self, path: str) -> str:
        if _ABSOLUTE_URL.match(path):
            return path
        return f"{self.base_url}{path}"

    async def _auth_headers(self) -> Dict[str, str]:
        auth = self.spec.auth
        if auth.scheme in (AuthScheme.BEARER, AuthScheme.OAUTH2):
            token = await self.credentials.resolve()
            if token:
                return {"Authorization": f"Bearer {token}"}
        elif auth.scheme == AuthScheme.API_KEY:
            if auth.header and self.settings.api_key:
                return {auth.header: self.settings.api_key}
        elif auth.scheme == AuthScheme.BASIC:
            user, password = self.settings.basic_user, self.settings.basic_pass
            if user and password:
                creds = base64.b64encode(f"{user}:{password}".encode()).decode()
                return {"Authorization": f"Basic {creds}"}
        return {}

    async def request(
        self,
        path: str,
        method: str = "GET",
        body: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """Perform one request and return the parsed response

        Args:
            path: Path relative to the base URL, or an absolute http(s) URL
            method: HTTP method
            body: JSON-serializable payload, sent only when not None
            headers: Extra request headers

        Returns:
            Parsed JSON (an empty dict for an empty JSON body) or the raw text

        Raises:
            HttpError: On a non-2xx status
            ResponseParseError: If a JSON response body cannot be parsed
            TransportError: If no response was received
        """
        url = self.url_for(path)
        request_headers = dict(headers or {})
        data = None
        if body is not None:
            data = json.dumps(body)
            if not any(k.lower() == "content-type" for k in request_headers):
                request_headers["Content-Type"] = "application/json"
        request_headers.update(await self._auth_headers())

        logging.debug("[ApiClient] http:request", extra={"meta": {"url": url, "method": method}})
        timeout = aiohttp.ClientTimeout(total=self.settings.http_timeout)

        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.request(method, url, data=data, headers=request_headers) as response:
                    text = await response.text()
                    return self._process_response(response, text, url)
        except asyncio.TimeoutError as e:
            error_msg = f"Request to {url} timed out after {self.settings.http_timeout} seconds"
            logging.error(f"[ApiClient] {error_msg}")
            raise TransportError(error_msg) from e
        except aiohttp.ClientError as e:
            logging.error(f"[ApiClient] Request to {url} failed: {e}")
            raise TransportError(f"Request to {url} failed: {e}") from e

    def _process_response(self, response: aiohttp.ClientResponse, text: str, url: str) -> Any:
        snippet = text[:SNIPPET_LENGTH]

        if response.status < 200 or response.status >= 300:
            logging.warning("[ApiClient] http:error", extra={"meta": {"status": response.status, "url": url}})
            raise HttpError(response.status, snippet, url, response.reason or "")

        content_type = response.headers.get("Content-Type", "")
        if "application/json" in content_type:
            if not text:
                return {}
            try:
                return json.loads(text)
            except ValueError as e:
                raise ResponseParseError(response.status, snippet) from e
        return text

    async def get_with_retry(self, path: str, max_attempts: Optional[int] = None) -> Any:
        """GET with bounded exponential backoff on 429/502/503/504

        Any other error propagates immediately. When attempts run out the last
        error is re-raised unchanged.

        Raises:
            ValueError: If max_attempts is below 1
        """
        policy = self.settings.retry
        if max_attempts is None:
            max_attempts = policy.max_attempts
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")
        delay = policy.initial_delay
        last_error: Optional[HttpError] = None

        for attempt in range(1, max_attempts + 1):
            try:
                return await self.request(path, method="GET")
            except HttpError as e:
                if e.status not in RETRY_STATUS:
                    raise
                last_error = e
                logging.warning("[ApiClient] http:retry", extra={"meta": {"attempt": attempt, "status": e.status}})
                if attempt < max_attempts:
                    await asyncio.sleep(delay + random.uniform(0, policy.max_jitter))
                    delay *= 2

        raise last_error

    async def post_action(self, path: str, body: Optional[Any] = None) -> Any:
        return await self.request(path, method="POST", body=body)


def extract_items(data: Any) -> list:
    """Normalize a list response into a batch of items

    Priority: the response itself when it is a list, then its ``items``
    field, then its ``data`` field, else an empty batch.
    """
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        for key in ("items", "data"):
            value = data.get(key)
            if value is not None:
                return value if isinstance(value, list) else []
    return []


__all__ = [
    "RETRY_STATUS",
    "ApiClient",
    "extract_items",
]
