"""
Signature and issuer validation.

Before we trust **anything** in an ID token we verify that it was signed by
a key the provider currently publishes, and that ``iss`` names that
provider. Audience, tenant and lifetime are deliberately left to the policy
stage so that each failure keeps its own type.
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Mapping
from typing import Any

import jwt
from jwt.exceptions import InvalidJTIError, InvalidSubjectError

from .errors import IssuerMismatch, MalformedToken, SignatureInvalid
from .jwks_cache import JWKSCache

logger = logging.getLogger(__name__)

ALGORITHMS = ["RS256"]
REQUIRED_CLAIMS = ["iss", "aud", "exp", "sub"]


def verify_signature(token: str, header: Mapping[str, Any], keys: JWKSCache) -> dict[str, Any]:
    """
    Verify the token signature against the provider key set and return the
    verified claims. Raises KeyFetchError (from the cache) when keys are
    unreachable.
    """
    kid = header.get("kid")
    if not kid or not isinstance(kid, str):
        raise SignatureInvalid("missing key id")

    signing_key = keys.get_signing_key(kid)
    if signing_key is None:
        raise SignatureInvalid(f"unknown signing key kid={kid}")

    try:
        return jwt.decode(
            token,
            signing_key.key,
            algorithms=ALGORITHMS,
            options={
                "verify_signature": True,
                "verify_exp": False,
                "verify_nbf": False,
                "verify_iat": False,
                "verify_aud": False,
                "verify_iss": False,
                "require": REQUIRED_CLAIMS,
            },
        )
    except jwt.MissingRequiredClaimError as e:
        raise MalformedToken(f"missing claim: {e.claim}") from e
    except jwt.InvalidAlgorithmError as e:
        raise SignatureInvalid(f"algorithm not allowed: {header.get('alg')}") from e
    except jwt.InvalidSignatureError as e:
        raise SignatureInvalid("signature verification failed") from e
    except (InvalidSubjectError, InvalidJTIError) as e:
        raise MalformedToken(f"claim has the wrong type: {type(e).__name__}") from e
    except jwt.DecodeError as e:
        raise MalformedToken(f"undecodable token: {e}") from e
    except jwt.InvalidTokenError as e:
        raise SignatureInvalid(f"token rejected: {type(e).__name__}") from e


def check_issuer(claims: Mapping[str, Any], expected: Collection[str]) -> None:
    iss = claims.get("iss")
    if not isinstance(iss, str) or iss not in expected:
        raise IssuerMismatch(f"unexpected issuer {iss!r}")
