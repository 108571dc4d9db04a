"""
JWKS fetch and cache with TTL. No per-request fetches.

Background for newcomers:
    Google and Microsoft sign every ID token with a private RSA key and
    publish the matching **public** keys at a well-known URL (the JWKS
    endpoint). This module fetches those keys and caches them so we don't
    call the provider on every request.

    Providers **rotate** signing keys. If a token arrives signed with a key
    we haven't seen yet (the ``kid`` in the token header doesn't match
    anything cached) we force-refresh once and try again before rejecting.

    The cache is a snapshot that is replaced wholesale on refresh. Readers
    grab the current snapshot without locking and never wait on the network
    unless the snapshot has expired. An expired snapshot is never served:
    if the refresh fails the caller gets ``KeyFetchError``.
"""

from __future__ import annotations

import logging
import re
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

import requests
from jwt import PyJWK
from jwt.exceptions import InvalidKeyError, PyJWKError

from .errors import KeyFetchError

logger = logging.getLogger(__name__)

_MAX_AGE = re.compile(r"max-age=(\d+)")


@dataclass(frozen=True)
class _KeySnapshot:
    keys: Mapping[str, PyJWK]
    fetched_at: float
    expires_at: float


class JWKSCache:
    """
    In-memory cache of one provider's JWKS (JSON Web Key Set).

    A fetched key set lives for ``ttl_seconds`` or the provider's
    ``Cache-Control: max-age``, whichever is shorter. On an unknown ``kid``
    the cache is refreshed once, at most every ``refresh_cooldown_seconds``,
    so a flood of made-up key ids cannot turn into a flood of fetches.
    """

    def __init__(
        self,
        jwks_uri: str,
        ttl_seconds: int,
        *,
        timeout_seconds: float = 10,
        refresh_cooldown_seconds: float = 30,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._uri = jwks_uri
        self._ttl = ttl_seconds
        self._timeout = timeout_seconds
        self._cooldown = refresh_cooldown_seconds
        self._clock = clock
        self._snapshot: _KeySnapshot | None = None

    @property
    def uri(self) -> str:
        return self._uri

    def _fetch(self) -> tuple[dict[str, Any], int | None]:
        try:
            resp = requests.get(self._uri, timeout=self._timeout)
            resp.raise_for_status()
            body = resp.json()
        except requests.Timeout as e:
            raise KeyFetchError(f"timed out fetching JWKS uri={self._uri}") from e
        except requests.RequestException as e:
            raise KeyFetchError(f"JWKS fetch failed uri={self._uri}: {type(e).__name__}") from e
        except ValueError as e:
            raise KeyFetchError(f"JWKS response is not JSON uri={self._uri}") from e
        if not isinstance(body, dict) or not isinstance(body.get("keys"), list):
            raise KeyFetchError(f"JWKS response has no key list uri={self._uri}")
        return body, _max_age(resp.headers.get("Cache-Control"))

    def refresh(self) -> None:
        """Force-refresh the cache regardless of TTL."""
        self._refresh()

    def _refresh(self) -> _KeySnapshot:
        body, max_age = self._fetch()
        keys = _parse_keys(body)
        ttl = self._ttl if max_age is None else min(self._ttl, max_age)
        now = self._clock()
        # Single attribute swap; concurrent readers see the old or the new set.
        snapshot = _KeySnapshot(keys=MappingProxyType(keys), fetched_at=now, expires_at=now + ttl)
        self._snapshot = snapshot
        logger.debug("JWKS cache refreshed uri=%s keys=%d ttl=%s", self._uri, len(keys), ttl)
        return snapshot

    def _current(self) -> _KeySnapshot:
        """Return the cached snapshot, refreshing only when it has expired."""
        snapshot = self._snapshot
        if snapshot is None or self._clock() >= snapshot.expires_at:
            snapshot = self._refresh()
        return snapshot

    def get_signing_key(self, kid: str) -> PyJWK | None:
        """
        Return the JWK for the given key id.

        If ``kid`` is not in the cached key set, the cache is refreshed once
        (to handle key rotation) before returning None. Raises KeyFetchError
        when the provider cannot be reached and no fresh key set is held.
        """
        snapshot = self._current()
        key = snapshot.keys.get(kid)
        if key is not None:
            return key

        if self._clock() - snapshot.fetched_at < self._cooldown:
            logger.info("kid not in JWKS and refresh cooldown active uri=%s", self._uri)
            return None

        # Key not found; the provider may have rotated keys. Refresh once.
        logger.info("kid not in cached JWKS; refreshing for possible key rotation uri=%s", self._uri)
        return self._refresh().keys.get(kid)


def _parse_keys(body: dict[str, Any]) -> dict[str, PyJWK]:
    """Keep signature keys that carry a kid and that PyJWT can load."""
    keys: dict[str, PyJWK] = {}
    for key_dict in body.get("keys") or []:
        if not isinstance(key_dict, dict):
            continue
        kid = key_dict.get("kid")
        if not kid or key_dict.get("use", "sig") != "sig":
            continue
        try:
            keys[str(kid)] = PyJWK.from_dict(key_dict)
        except (PyJWKError, InvalidKeyError) as e:
            logger.debug("Skipping unusable JWK kid=%s: %s", kid, e)
    return keys


def _max_age(cache_control: str | None) -> int | None:
    if not cache_control:
        return None
    match = _MAX_AGE.search(cache_control)
    return int(match.group(1)) if match else None
