"""Environment-sourced configuration.

All settings are read once into an immutable Settings instance. Tests build
Settings directly instead of touching os.environ.
"""

import logging
import os
import re
from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple

TOKEN_ENV_VARS: Tuple[str, ...] = ("BEARER_TOKEN", "API_TOKEN", "ACTION1_TOKEN")

_HTTP_URL = re.compile(r"^https?://", re.IGNORECASE)

DEFAULT_HTTP_TIMEOUT = 30.0


def _float_env(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        logging.warning(f"[Config] Ignoring invalid {name}={raw!r}, using {default}")
        return default


@dataclass(frozen=True)
class RetryPolicy:
    """Backoff parameters for the retrying GET client

    Args:
        max_attempts: Total attempts including the first one
        initial_delay: Seconds to wait after the first failure
        max_jitter: Upper bound of the random seconds added to each delay
    """
    max_attempts: int = 4
    initial_delay: float = 0.25
    max_jitter: float = 0.1


@dataclass(frozen=True)
class Settings:
    """Runtime configuration for the Action1 adapter

    Args:
        api_base: Base URL override; ignored unless it is an http(s) URL
        token: Explicit bearer token
        token_source: Name of the environment variable the token came from
        client_id: OAuth2 client identifier for the token exchange
        client_secret: OAuth2 client secret for the token exchange
        api_key: Value sent under the configured header for apiKey auth
        basic_user: Username for basic auth
        basic_pass: Password for basic auth
        org_id: Default organization id
        allow_destructive: Process-wide enable flag for mutating tools
        http_timeout: Total request timeout in seconds
        retry: Backoff policy for GET requests
    """
    api_base: Optional[str] = None
    token: Optional[str] = None
    token_source: Optional[str] = None
    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    api_key: Optional[str] = None
    basic_user: Optional[str] = None
    basic_pass: Optional[str] = None
    org_id: Optional[str] = None
    allow_destructive: bool = False
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    retry: RetryPolicy = field(default_factory=RetryPolicy)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ

        token, token_source = None, None
        for name in TOKEN_ENV_VARS:
            if env.get(name):
                token, token_source = env[name], name
                break

        return cls(
            api_base=env.get("API_BASE") or None,
            token=token,
            token_source=token_source,
            client_id=env.get("ACTION1_CLIENT_ID") or None,
            client_secret=env.get("ACTION1_CLIENT_SECRET") or None,
            api_key=env.get("API_KEY") or None,
            basic_user=env.get("BASIC_USER") or None,
            basic_pass=env.get("BASIC_PASS") or None,
            org_id=env.get("ORG_ID") or None,
            allow_destructive=env.get("ALLOW_DESTRUCTIVE") == "true",
            http_timeout=_float_env(env, "HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT),
        )

    @property
    def has_client_credentials(self) -> bool:
        return bool(self.client_id and self.client_secret)

    def resolve_base_url(self, default: str) -> str:
        """Return the effective base URL without trailing slashes"""
        if self.api_base and _HTTP_URL.match(self.api_base):
            return self.api_base.rstrip("/")
        return default.rstrip("/")


__all__ = [
    "RetryPolicy",
    "Settings",
    "TOKEN_ENV_VARS",
]
