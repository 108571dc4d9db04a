from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

from app.idtoken.config import GoogleConfig, MicrosoftConfig, ProviderConfig


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value.strip() if isinstance(value, str) else value


class GoogleProviderModel(BaseModel):
    client_id: str | None = None

    strip_client_id = field_validator("client_id", mode="before")(_blank_to_none)


class MicrosoftProviderModel(BaseModel):
    client_id: str | None = None
    tenant_id: str | None = None

    strip_ids = field_validator("client_id", "tenant_id", mode="before")(_blank_to_none)


class KeySettingsModel(BaseModel):
    cache_ttl_seconds: int = Field(default=3600, gt=0)
    fetch_timeout_seconds: int = Field(default=10, gt=0)
    refresh_cooldown_seconds: int = Field(default=30, ge=0)


class ProvidersConfigModel(BaseModel):
    google: GoogleProviderModel = Field(default_factory=GoogleProviderModel)
    microsoft: MicrosoftProviderModel = Field(default_factory=MicrosoftProviderModel)
    keys: KeySettingsModel = Field(default_factory=KeySettingsModel)

    def to_provider_config(self) -> ProviderConfig:
        """
        Build the runtime config. A provider missing any required value is
        left unconfigured rather than rejected, so the other provider still works.
        """

        google = GoogleConfig(client_id=self.google.client_id) if self.google.client_id else None
        microsoft = (
            MicrosoftConfig(client_id=self.microsoft.client_id, tenant_id=self.microsoft.tenant_id)
            if self.microsoft.client_id and self.microsoft.tenant_id
            else None
        )
        return ProviderConfig(
            google=google,
            microsoft=microsoft,
            key_cache_ttl_seconds=self.keys.cache_ttl_seconds,
            key_fetch_timeout_seconds=self.keys.fetch_timeout_seconds,
            key_refresh_cooldown_seconds=self.keys.refresh_cooldown_seconds,
        )


def load_provider_config(path: Path) -> ProviderConfig:
    raw_text = path.read_text(encoding="utf-8")
    raw: dict[str, Any] = yaml.safe_load(raw_text) or {}

    if "providers" not in raw:
        raise ValueError(f"Missing top-level 'providers' key in config: {path}")

    model = ProvidersConfigModel.model_validate(raw["providers"] or {})
    return model.to_provider_config()
