"""Tests for ProviderConfig from environment."""

import os

import pytest

from app.idtoken.config import MicrosoftConfig, ProviderConfig


def test_config_from_environ():
    env = {
        "GOOGLE_CLIENT_ID": "google-1.apps.googleusercontent.com",
        "MICROSOFT_CLIENT_ID": "ms-1",
        "MICROSOFT_TENANT_ID": "tenant-1",
    }
    with _env(env):
        cfg = ProviderConfig.from_environ()
    assert cfg.google is not None
    assert cfg.google.client_id == "google-1.apps.googleusercontent.com"
    assert cfg.google.jwks_uri == "https://www.googleapis.com/oauth2/v3/certs"
    assert cfg.microsoft == MicrosoftConfig(client_id="ms-1", tenant_id="tenant-1")
    assert cfg.microsoft.jwks_uri == "https://login.microsoftonline.com/tenant-1/discovery/v2.0/keys"
    assert cfg.key_cache_ttl_seconds == 3600
    assert cfg.key_fetch_timeout_seconds == 10
    assert cfg.key_refresh_cooldown_seconds == 30


def test_config_nothing_set():
    with _env({}):
        cfg = ProviderConfig.from_environ()
    assert cfg.google is None
    assert cfg.microsoft is None


def test_config_microsoft_requires_tenant():
    with _env({"MICROSOFT_CLIENT_ID": "ms-1", "MICROSOFT_TENANT_ID": "   "}):
        cfg = ProviderConfig.from_environ()
    assert cfg.microsoft is None


def test_config_strips_values():
    with _env({"GOOGLE_CLIENT_ID": "  g-1  "}):
        cfg = ProviderConfig.from_environ()
    assert cfg.google is not None
    assert cfg.google.client_id == "g-1"


def test_config_key_settings_override_and_bad_values():
    env = {
        "KEY_CACHE_TTL_SECONDS": "600",
        "KEY_FETCH_TIMEOUT_SECONDS": "five",
        "KEY_REFRESH_COOLDOWN_SECONDS": "0",
    }
    with _env(env):
        cfg = ProviderConfig.from_environ()
    assert cfg.key_cache_ttl_seconds == 600
    assert cfg.key_fetch_timeout_seconds == 10
    assert cfg.key_refresh_cooldown_seconds == 0


@pytest.mark.parametrize("tenant, alias", [
    ("consumers", True),
    ("common", True),
    ("organizations", True),
    ("Common", True),
    ("72f988bf-86f1-41af-91ab-2d7cd011db47", False),
])
def test_tenant_alias_detection(tenant, alias):
    assert MicrosoftConfig(client_id="c", tenant_id=tenant).is_tenant_alias is alias


def test_issuer_for_uses_token_tenant():
    cfg = MicrosoftConfig(client_id="c", tenant_id="consumers")
    assert cfg.issuer_for("9188040d-6c67-4c5b-b112-36a304b66dad") == (
        "https://login.microsoftonline.com/9188040d-6c67-4c5b-b112-36a304b66dad/v2.0"
    )
    assert cfg.issuer_for(None) == "https://login.microsoftonline.com/consumers/v2.0"


def _env(env: dict):
    class _Env:
        def __enter__(self):
            self._saved = os.environ.copy()
            os.environ.clear()
            os.environ.update(env)
            return self

        def __exit__(self, *args):
            os.environ.clear()
            os.environ.update(self._saved)
            return False

    return _Env()
