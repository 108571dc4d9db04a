"""
Provider policy checks on already signature-verified claims.

Order matters and is fixed: audience, then tenant (Microsoft only), then
expiry. The first failing check wins.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .config import GoogleConfig, MicrosoftConfig
from .errors import AudienceMismatch, MalformedToken, TenantMismatch, TokenExpired


def check_audience(claims: Mapping[str, Any], client_id: str) -> None:
    aud = claims.get("aud")
    if isinstance(aud, str):
        ok = aud == client_id
    elif isinstance(aud, list):
        ok = client_id in aud
    else:
        ok = False
    if not ok:
        raise AudienceMismatch(f"audience {aud!r} does not match configured client id")


def check_tenant(claims: Mapping[str, Any], config: MicrosoftConfig) -> None:
    """
    ``consumers``, ``common`` and ``organizations`` admit any tenant: the
    user's real directory only shows up inside the token.
    """
    if config.is_tenant_alias:
        return
    tid = claims.get("tid")
    if tid != config.tenant_id:
        raise TenantMismatch(f"tenant {tid!r} does not match configured tenant")


def check_expiry(claims: Mapping[str, Any], now: float) -> None:
    exp = claims.get("exp")
    if isinstance(exp, bool) or not isinstance(exp, (int, float)):
        raise MalformedToken("exp claim is not a number")
    if exp <= now:
        raise TokenExpired(f"token expired at {exp} (now {int(now)})")


def check_google_policy(claims: Mapping[str, Any], config: GoogleConfig, now: float) -> None:
    check_audience(claims, config.client_id)
    check_expiry(claims, now)


def check_microsoft_policy(claims: Mapping[str, Any], config: MicrosoftConfig, now: float) -> None:
    check_audience(claims, config.client_id)
    check_tenant(claims, config)
    check_expiry(claims, now)
