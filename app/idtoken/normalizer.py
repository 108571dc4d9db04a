"""
Map provider claim vocabularies onto ``VerifiedIdentity``.

Claim mapping notes:

* Google ``email_verified`` is a boolean in current tokens but older tokens
  carry the string ``"true"``/``"false"``.
* Microsoft ID tokens have no email-verified signal. We report ``True``;
  this is a known precision gap, not a verification.
* Microsoft ``email`` is an optional claim; ``preferred_username`` (usually
  the UPN) is the fallback.
* Microsoft ``oid`` is the stable, tenant-wide user id; ``sub`` is pairwise
  per app registration and only used when ``oid`` is absent.
* Microsoft has no picture claim; the profile photo needs Microsoft Graph.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .identity import VerifiedIdentity
from .tokens import Provider


def _text(claims: Mapping[str, Any], *names: str) -> str:
    for name in names:
        value = claims.get(name)
        if value is not None and value != "":
            return str(value)
    return ""


def _flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return value is True


def normalize_google(claims: Mapping[str, Any]) -> VerifiedIdentity:
    return VerifiedIdentity(
        email=_text(claims, "email"),
        email_verified=_flag(claims.get("email_verified")),
        first_name=_text(claims, "given_name"),
        last_name=_text(claims, "family_name"),
        avatar=_text(claims, "picture"),
        subject_id=_text(claims, "sub"),
        provider=Provider.GOOGLE,
    )


def normalize_microsoft(claims: Mapping[str, Any]) -> VerifiedIdentity:
    return VerifiedIdentity(
        email=_text(claims, "email", "preferred_username"),
        email_verified=True,
        first_name=_text(claims, "given_name"),
        last_name=_text(claims, "family_name"),
        avatar="",
        subject_id=_text(claims, "oid", "sub"),
        provider=Provider.MICROSOFT,
    )
