"""Application lifespan: startup and shutdown.

Single place for all startup/shutdown logic (SRP). Used by main.py;
no business logic here, only wiring of infrastructure (shared HTTP
client, chat adapter, credential hasher, telemetry, DB engine dispose).
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import FastAPI

from app.application.services.credential_hasher import CredentialHasher
from app.core.config import get_settings
from app.infrastructure.external.chat import ChatAdapterFactory
from app.shared.telemetry.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: logging, credential hasher, shared HTTP client and chat
    adapter, telemetry (if enabled). Shutdown order: shared HTTP client
    close, telemetry shutdown, SQL engine dispose.
    """
    settings = get_settings()
    setup_logging()

    # ---- Startup ----
    # Fails fast (ConfigurationError) on missing salts.
    app.state.credential_hasher = CredentialHasher.from_settings(settings)

    # One client for every outbound chat platform call (connection reuse).
    app.state.chat_http_client = httpx.AsyncClient(
        timeout=settings.chat_platform_timeout_seconds
    )
    app.state.chat_adapter = ChatAdapterFactory.create_adapter(
        settings, http_client=app.state.chat_http_client
    )
    logger.info(
        "Chat adapter ready: platform=%s url=%s",
        app.state.chat_adapter.platform_name,
        settings.chat_platform_url,
    )

    if settings.telemetry_enabled:
        from app.shared.telemetry.telemetry import TelemetryConfig, set_telemetry

        telemetry = TelemetryConfig.from_settings(settings)
        telemetry.setup_telemetry(
            exporter_type=settings.telemetry_exporter,
            otlp_endpoint=settings.telemetry_otlp_endpoint,
            sample_rate=settings.telemetry_sample_rate,
        )
        set_telemetry(telemetry)
        from app.infrastructure.persistence import database

        telemetry.instrument(app, database.get_engine_if_configured())
        logger.info("Telemetry initialized")

    yield

    # ---- Shutdown ----
    if getattr(app.state, "chat_http_client", None) is not None:
        await app.state.chat_http_client.aclose()
        app.state.chat_http_client = None
        logger.info("Chat HTTP client closed")

    from app.shared.telemetry.telemetry import get_telemetry, set_telemetry

    telemetry_instance = get_telemetry()
    if telemetry_instance is not None:
        telemetry_instance.shutdown()
        set_telemetry(None)

    from app.infrastructure.persistence import database

    if getattr(database, "engine", None) is not None:
        await database.engine.dispose()
        logger.info("Database engine disposed")
