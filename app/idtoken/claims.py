"""
Structural decoding of a compact JWT into header and claims.

Nothing here decides trust: a forged token with a valid shape decodes just
fine. The signature stage must run before any claim is used.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import jwt

from .errors import MalformedToken


@dataclass(frozen=True)
class ExtractedToken:
    header: dict[str, Any]
    claims: dict[str, Any]


def extract_claims(token: str) -> ExtractedToken:
    """
    Decode header and payload without verifying anything.

    Raises MalformedToken for a wrong segment count, bad base64url, or a
    header/payload that is not a JSON object.
    """
    if not token or not token.strip():
        raise MalformedToken("empty token")
    try:
        header = jwt.get_unverified_header(token)
        claims = jwt.decode(token, options={"verify_signature": False})
    except jwt.InvalidTokenError as e:
        raise MalformedToken(f"undecodable token: {e}") from e
    if not isinstance(header, dict) or not isinstance(claims, dict):
        raise MalformedToken("header and payload must be JSON objects")
    return ExtractedToken(header=header, claims=claims)
