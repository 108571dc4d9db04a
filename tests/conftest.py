"""
Pytest fixtures for the test suite.

Tokens are signed with a real RSA key generated once per session. The
provider key endpoints are never contacted: ``jwks_get`` patches
``requests.get`` inside the JWKS cache and answers with the test key set.
"""
from __future__ import annotations

import time
from unittest.mock import MagicMock, patch

import jwt
import pytest
from cryptography.hazmat.primitives.asymmetric import rsa
from jwt.algorithms import RSAAlgorithm

from app.idtoken.config import GoogleConfig, MicrosoftConfig, ProviderConfig

GOOGLE_CLIENT_ID = "client-A"
MICROSOFT_CLIENT_ID = "ms-client-1"
MICROSOFT_TENANT_ID = "tenant-Z"
KID = "test-key-1"


def jwks_response(body, headers=None) -> MagicMock:
    """Stand-in for a requests.Response carrying a JWKS document."""
    resp = MagicMock()
    resp.json.return_value = body
    resp.headers = headers or {}
    return resp


@pytest.fixture(scope="session")
def rsa_private_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def public_jwk(rsa_private_key) -> dict:
    jwk = RSAAlgorithm.to_jwk(rsa_private_key.public_key(), as_dict=True)
    jwk.update({"kid": KID, "use": "sig", "alg": "RS256"})
    return jwk


@pytest.fixture
def make_token(rsa_private_key):
    """Sign a claim dict. ``kid=None`` leaves the key id out of the header."""

    def _make(claims: dict, *, kid: str | None = KID, key=None, algorithm: str = "RS256") -> str:
        headers = {"kid": kid} if kid else None
        return jwt.encode(claims, key or rsa_private_key, algorithm=algorithm, headers=headers)

    return _make


@pytest.fixture
def jwks_get(public_jwk):
    with patch("app.idtoken.jwks_cache.requests.get") as mock_get:
        mock_get.return_value = jwks_response({"keys": [public_jwk]})
        yield mock_get


@pytest.fixture
def google_claims():
    def _claims(**overrides) -> dict:
        now = int(time.time())
        claims = {
            "iss": "https://accounts.google.com",
            "aud": GOOGLE_CLIENT_ID,
            "sub": "109876543210",
            "email": "a@x.com",
            "email_verified": True,
            "given_name": "Ada",
            "family_name": "Lovelace",
            "picture": "https://lh3.googleusercontent.com/a/ada",
            "iat": now,
            "exp": now + 3600,
        }
        claims.update(overrides)
        return claims

    return _claims


@pytest.fixture
def microsoft_claims():
    def _claims(**overrides) -> dict:
        now = int(time.time())
        tid = overrides.get("tid", MICROSOFT_TENANT_ID)
        claims = {
            "iss": f"https://login.microsoftonline.com/{tid}/v2.0",
            "aud": MICROSOFT_CLIENT_ID,
            "tid": tid,
            "oid": "00000000-0000-0000-66f3-3332eca7ea81",
            "sub": "AAAAAAAAAAAAAAAAAAAAAIkzqFVrSaSaFHy782bbtaQ",
            "preferred_username": "ada@outlook.com",
            "given_name": "Ada",
            "family_name": "Lovelace",
            "iat": now,
            "nbf": now,
            "exp": now + 3600,
        }
        claims.update(overrides)
        return claims

    return _claims


@pytest.fixture
def provider_config() -> ProviderConfig:
    return ProviderConfig(
        google=GoogleConfig(client_id=GOOGLE_CLIENT_ID),
        microsoft=MicrosoftConfig(client_id=MICROSOFT_CLIENT_ID, tenant_id=MICROSOFT_TENANT_ID),
        key_refresh_cooldown_seconds=0,
    )
