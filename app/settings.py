from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    App settings.

    Notes:
    - Provider client ids come from the YAML file when
      `APP_PROVIDERS_CONFIG_PATH` is set, otherwise from GOOGLE_* / MICROSOFT_* env vars.
    - `APP_KEY_REFRESH_INTERVAL_SECONDS=0` turns off background key refresh;
      keys are then fetched on first use and on cache expiry only.
    - `APP_CORS_ORIGINS` is a JSON list, e.g. `["http://localhost:4200"]`.
    """

    model_config = SettingsConfigDict(env_prefix="APP_", extra="ignore")

    providers_config_path: str | None = None
    key_refresh_interval_seconds: int = 1800
    cors_origins: list[str] = Field(default_factory=list)
    log_level: str = "INFO"

    def resolved_providers_config_path(self) -> Path | None:
        if not self.providers_config_path:
            return None
        path = Path(self.providers_config_path)
        if path.is_absolute():
            return path

        repo_root = Path(__file__).resolve().parents[1]
        return repo_root / path


@lru_cache
def get_settings() -> Settings:
    return Settings()
