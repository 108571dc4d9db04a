"""Tests for loading provider config from YAML and choosing the config source."""

import pytest
from pydantic import ValidationError

from app.idtoken.config import GoogleConfig, MicrosoftConfig
from app.main import load_config
from app.security.config import load_provider_config
from app.settings import Settings

FULL = """
providers:
  google:
    client_id: google-1.apps.googleusercontent.com
  microsoft:
    client_id: ms-1
    tenant_id: organizations
  keys:
    cache_ttl_seconds: 900
    fetch_timeout_seconds: 5
    refresh_cooldown_seconds: 15
"""


def _write(tmp_path, text: str):
    path = tmp_path / "providers.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_load_full_config(tmp_path):
    cfg = load_provider_config(_write(tmp_path, FULL))
    assert cfg.google == GoogleConfig(client_id="google-1.apps.googleusercontent.com")
    assert cfg.microsoft == MicrosoftConfig(client_id="ms-1", tenant_id="organizations")
    assert cfg.microsoft.is_tenant_alias
    assert cfg.key_cache_ttl_seconds == 900
    assert cfg.key_fetch_timeout_seconds == 5
    assert cfg.key_refresh_cooldown_seconds == 15


def test_blank_and_partial_providers_are_unconfigured(tmp_path):
    text = """
providers:
  google:
    client_id: ""
  microsoft:
    client_id: ms-1
"""
    cfg = load_provider_config(_write(tmp_path, text))
    assert cfg.google is None
    assert cfg.microsoft is None
    assert cfg.key_cache_ttl_seconds == 3600


def test_missing_top_level_key(tmp_path):
    with pytest.raises(ValueError, match="Missing top-level 'providers' key"):
        load_provider_config(_write(tmp_path, "google:\n  client_id: x\n"))


def test_invalid_key_settings(tmp_path):
    text = "providers:\n  keys:\n    cache_ttl_seconds: 0\n"
    with pytest.raises(ValidationError):
        load_provider_config(_write(tmp_path, text))


def test_load_config_prefers_file(tmp_path):
    path = _write(tmp_path, FULL)
    cfg = load_config(Settings(providers_config_path=str(path)))
    assert cfg.microsoft is not None
    assert cfg.microsoft.tenant_id == "organizations"


def test_load_config_falls_back_to_environment(monkeypatch):
    monkeypatch.setenv("GOOGLE_CLIENT_ID", "env-client")
    monkeypatch.delenv("MICROSOFT_CLIENT_ID", raising=False)
    cfg = load_config(Settings(providers_config_path=None))
    assert cfg.google == GoogleConfig(client_id="env-client")
    assert cfg.microsoft is None
