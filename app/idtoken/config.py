"""Provider configuration from environment variables. No hardcoded secrets."""

from __future__ import annotations

import os
from dataclasses import dataclass

GOOGLE_JWKS_URI = "https://www.googleapis.com/oauth2/v3/certs"
GOOGLE_ISSUERS = frozenset({"accounts.google.com", "https://accounts.google.com"})

MICROSOFT_AUTHORITY = "https://login.microsoftonline.com"

# Tenant values that mean "any tenant of this class"; the real tenant is
# only known from the token's tid claim.
TENANT_ALIASES = frozenset({"consumers", "common", "organizations"})


def _getenv(key: str, default: str | None = None) -> str | None:
    return os.environ.get(key, default)


def _getenv_int(key: str, default: int) -> int:
    raw = os.environ.get(key)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class GoogleConfig:
    client_id: str

    @property
    def jwks_uri(self) -> str:
        return GOOGLE_JWKS_URI

    @property
    def issuers(self) -> frozenset[str]:
        return GOOGLE_ISSUERS


@dataclass(frozen=True)
class MicrosoftConfig:
    client_id: str
    tenant_id: str
    """Directory id, or one of ``consumers`` / ``common`` / ``organizations``."""

    @property
    def is_tenant_alias(self) -> bool:
        return self.tenant_id.lower() in TENANT_ALIASES

    @property
    def jwks_uri(self) -> str:
        return f"{MICROSOFT_AUTHORITY}/{self.tenant_id}/discovery/v2.0/keys"

    def issuer_for(self, tid: str | None) -> str:
        """v2.0 issuer for a token whose tenant claim is ``tid``."""
        return f"{MICROSOFT_AUTHORITY}/{tid or self.tenant_id}/v2.0"


@dataclass(frozen=True)
class ProviderConfig:
    """
    Per-provider settings, loaded once at startup and read-only afterwards.

    Environment:
        GOOGLE_CLIENT_ID: OAuth client id of the web app; the expected ``aud``.
        MICROSOFT_CLIENT_ID: Application (client) id; the expected ``aud``.
        MICROSOFT_TENANT_ID: Directory id, or ``consumers``/``common``/``organizations``.

    Optional:
        KEY_CACHE_TTL_SECONDS: Upper bound on how long a fetched key set is used (default 3600).
        KEY_FETCH_TIMEOUT_SECONDS: Network timeout for key set fetches (default 10).
        KEY_REFRESH_COOLDOWN_SECONDS: Minimum gap between forced refreshes on unknown kid (default 30).

    A provider with missing settings is ``None``; its endpoint answers 400.
    """

    google: GoogleConfig | None
    microsoft: MicrosoftConfig | None
    key_cache_ttl_seconds: int = 3600
    key_fetch_timeout_seconds: int = 10
    key_refresh_cooldown_seconds: int = 30

    @classmethod
    def from_environ(cls) -> ProviderConfig:
        google_client = _strip_or_none(_getenv("GOOGLE_CLIENT_ID"))
        ms_client = _strip_or_none(_getenv("MICROSOFT_CLIENT_ID"))
        ms_tenant = _strip_or_none(_getenv("MICROSOFT_TENANT_ID"))
        return cls(
            google=GoogleConfig(client_id=google_client) if google_client else None,
            microsoft=(
                MicrosoftConfig(client_id=ms_client, tenant_id=ms_tenant)
                if ms_client and ms_tenant
                else None
            ),
            key_cache_ttl_seconds=_getenv_int("KEY_CACHE_TTL_SECONDS", 3600),
            key_fetch_timeout_seconds=_getenv_int("KEY_FETCH_TIMEOUT_SECONDS", 10),
            key_refresh_cooldown_seconds=_getenv_int("KEY_REFRESH_COOLDOWN_SECONDS", 30),
        )


def _strip_or_none(s: str | None) -> str | None:
    if s is None:
        return None
    t = s.strip()
    return t if t else None
