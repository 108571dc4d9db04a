"""
Verify Google and Microsoft ID tokens and return a normalized identity.

Background for newcomers:
    The browser signs the user in with Google or Microsoft and receives an
    ID token (a JWT). It posts that token to this API. Nothing the browser
    says is trusted until we have:

    1. Decoded the token structure (``claims.extract_claims``).
    2. Verified the **signature** against the provider's published keys and
       checked the **issuer** (``signature``).
    3. Checked the **audience**, the **tenant** (Microsoft only) and that the
       token has not **expired** (``policy``).

    Only then are claims mapped to a ``VerifiedIdentity`` (``normalizer``).
    Each step raises a ``VerificationFailure`` subclass; nothing is retried
    here.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from collections.abc import Callable, Collection, Mapping
from typing import Any, ClassVar

from .claims import extract_claims
from .config import GoogleConfig, MicrosoftConfig, ProviderConfig
from .errors import ConfigurationMissing, UnexpectedFault, VerificationFailure
from .identity import VerifiedIdentity
from .jwks_cache import JWKSCache
from .normalizer import normalize_google, normalize_microsoft
from .policy import check_google_policy, check_microsoft_policy
from .signature import check_issuer, verify_signature
from .tokens import GoogleToken, MicrosoftToken, Provider, RawToken

logger = logging.getLogger(__name__)


class Verifier(ABC):
    """One provider's verification pipeline. Stateless apart from the key cache."""

    provider: ClassVar[Provider]

    def __init__(self, keys: JWKSCache, clock: Callable[[], float] = time.time) -> None:
        self._keys = keys
        self._clock = clock

    @property
    def keys(self) -> JWKSCache:
        return self._keys

    @abstractmethod
    def _expected_issuers(self, claims: Mapping[str, Any]) -> Collection[str]: ...

    @abstractmethod
    def _check_policy(self, claims: Mapping[str, Any], now: float) -> None: ...

    @abstractmethod
    def _normalize(self, claims: Mapping[str, Any]) -> VerifiedIdentity: ...

    def verify(self, token: str) -> VerifiedIdentity:
        """
        Run the full pipeline on a compact token.

        Raises a VerificationFailure subclass. Anything else that goes wrong
        is wrapped in UnexpectedFault so callers only see the taxonomy.
        """
        try:
            extracted = extract_claims(token)
            claims = verify_signature(token, extracted.header, self._keys)
            check_issuer(claims, self._expected_issuers(claims))
            self._check_policy(claims, self._clock())
            return self._normalize(claims)
        except VerificationFailure:
            raise
        except Exception as e:
            raise UnexpectedFault(f"{self.provider.value} verification crashed: {type(e).__name__}") from e


class GoogleVerifier(Verifier):
    provider = Provider.GOOGLE

    def __init__(self, config: GoogleConfig, keys: JWKSCache, clock: Callable[[], float] = time.time) -> None:
        super().__init__(keys, clock)
        self._config = config

    def _expected_issuers(self, claims: Mapping[str, Any]) -> Collection[str]:
        return self._config.issuers

    def _check_policy(self, claims: Mapping[str, Any], now: float) -> None:
        check_google_policy(claims, self._config, now)

    def _normalize(self, claims: Mapping[str, Any]) -> VerifiedIdentity:
        return normalize_google(claims)


class MicrosoftVerifier(Verifier):
    provider = Provider.MICROSOFT

    def __init__(self, config: MicrosoftConfig, keys: JWKSCache, clock: Callable[[], float] = time.time) -> None:
        super().__init__(keys, clock)
        self._config = config

    def _expected_issuers(self, claims: Mapping[str, Any]) -> Collection[str]:
        # The issuer embeds the token's own tenant; whether that tenant is
        # acceptable is the policy stage's call.
        tid = claims.get("tid")
        return {self._config.issuer_for(tid if isinstance(tid, str) else None)}

    def _check_policy(self, claims: Mapping[str, Any], now: float) -> None:
        check_microsoft_policy(claims, self._config, now)

    def _normalize(self, claims: Mapping[str, Any]) -> VerifiedIdentity:
        return normalize_microsoft(claims)


class TokenVerifier:
    """
    Dispatches a provider-tagged token to that provider's ``Verifier``.

    Holds one ``JWKSCache`` per configured provider; reuse a single instance
    for the life of the process so the caches are shared.
    """

    def __init__(self, config: ProviderConfig | None = None, clock: Callable[[], float] = time.time) -> None:
        self._config = config or ProviderConfig.from_environ()
        self._verifiers: dict[type, Verifier] = {}

        if self._config.google is not None:
            self._verifiers[GoogleToken] = GoogleVerifier(
                self._config.google, self._new_cache(self._config.google.jwks_uri), clock
            )
        if self._config.microsoft is not None:
            self._verifiers[MicrosoftToken] = MicrosoftVerifier(
                self._config.microsoft, self._new_cache(self._config.microsoft.jwks_uri), clock
            )

    def _new_cache(self, uri: str) -> JWKSCache:
        return JWKSCache(
            uri,
            self._config.key_cache_ttl_seconds,
            timeout_seconds=self._config.key_fetch_timeout_seconds,
            refresh_cooldown_seconds=self._config.key_refresh_cooldown_seconds,
        )

    @property
    def config(self) -> ProviderConfig:
        return self._config

    def key_caches(self) -> list[JWKSCache]:
        return [v.keys for v in self._verifiers.values()]

    def verify(self, token: RawToken) -> VerifiedIdentity:
        verifier = self._verifiers.get(type(token))
        if verifier is None:
            raise ConfigurationMissing(f"{token.provider.value} provider is not configured")
        identity = verifier.verify(token.value)
        logger.debug("Token verified provider=%s subject=%s", identity.provider.value, identity.subject_id)
        return identity


def verify_token(token: RawToken, config: ProviderConfig | None = None) -> VerifiedIdentity:
    """
    Convenience function: verify one token and return its identity.

    Builds a ``TokenVerifier`` (config from the environment if ``config`` is
    None), so every call starts with empty key caches. Keep a
    ``TokenVerifier`` around when verifying more than one token.
    """
    return TokenVerifier(config=config).verify(token)
