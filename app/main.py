from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from app.idtoken import ProviderConfig, TokenVerifier
from app.idtoken.refresh import KeyRefresher
from app.logging_config import configure_app_logging
from app.routers import auth
from app.security.config import load_provider_config
from app.settings import Settings, get_settings

logger = logging.getLogger(__name__)


def load_config(settings: Settings) -> ProviderConfig:
    path = settings.resolved_providers_config_path()
    if path is not None:
        logger.info("Loading provider config: %s", path)
        return load_provider_config(path)
    logger.info("Loading provider config from environment")
    return ProviderConfig.from_environ()


def create_app() -> FastAPI:
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        configure_app_logging(settings.log_level)
        logger.info("App startup beginning")

        config = load_config(settings)
        verifier = TokenVerifier(config)
        app.state.verifier = verifier
        logger.info(
            "Providers configured google=%s microsoft=%s",
            config.google is not None,
            config.microsoft is not None,
        )

        refresher = KeyRefresher(verifier.key_caches(), settings.key_refresh_interval_seconds)
        refresher.start()

        yield
        # Shutdown
        await refresher.stop()

    app = FastAPI(title="SSO token verifier", lifespan=lifespan)

    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_methods=["GET", "POST"],
            allow_headers=["*"],
        )

    app.include_router(auth.router)
    app.add_exception_handler(RequestValidationError, auth.verify_body_validation_handler)

    return app


app = create_app()
