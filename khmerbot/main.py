"""FastAPI entrypoint for the Khmer Telegram bot."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI

from khmerbot.api.v1.router import api_router
from khmerbot.api.v1.routes.webhook import build_webhook_router
from khmerbot.core.settings import Settings, settings
from khmerbot.interfaces.messaging_provider import MessagingProvider
from khmerbot.providers.catalog.static_catalog import StaticCatalog
from khmerbot.providers.messaging.mock_messaging import MockMessagingProvider
from khmerbot.providers.messaging.telegram_messaging import TelegramMessagingProvider
from khmerbot.services.bot_service import BotService
from khmerbot.services.data_store import DataStore

logger = logging.getLogger(__name__)


def build_store(config: Settings) -> DataStore:
    return DataStore(
        config.data_dir,
        flush_interval_ms=config.flush_interval_ms,
        write_through=config.write_through,
        conversation_timeout=timedelta(minutes=config.conversation_timeout_minutes),
    )


def build_messaging_provider(config: Settings) -> MessagingProvider:
    if config.bot_token:
        return TelegramMessagingProvider(config.bot_token, api_url=config.telegram_api_url)
    logger.warning("BOT_TOKEN is not set; replies are only logged")
    return MockMessagingProvider()


def create_app(
    *,
    config: Settings = settings,
    store: DataStore | None = None,
    messaging_provider: MessagingProvider | None = None,
) -> FastAPI:
    """Build the FastAPI app; store lifecycle (load, auto-flush, final flush) follows the app lifespan."""
    resolved_store = store or build_store(config)
    resolved_provider = messaging_provider or build_messaging_provider(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        resolved_store.load()
        resolved_store.start_auto_flush()
        if isinstance(resolved_provider, TelegramMessagingProvider):
            await resolved_provider.initialize()
        if config.use_webhook and isinstance(resolved_provider, TelegramMessagingProvider):
            logger.info("Starting bot in webhook mode on port %s", config.webhook_port)
            await resolved_provider.set_webhook(
                f"{config.webhook_url.rstrip('/')}{config.webhook_path}",
                max_connections=config.webhook_max_connections,
            )
        try:
            yield
        finally:
            logger.info("Shutting down bot")
            if config.use_webhook and isinstance(resolved_provider, TelegramMessagingProvider):
                try:
                    await resolved_provider.delete_webhook()
                except Exception:
                    logger.exception("Error removing webhook")
            await resolved_store.close()
            if isinstance(resolved_provider, TelegramMessagingProvider):
                await resolved_provider.shutdown()

    app = FastAPI(title=config.app_name, version=config.app_version, lifespan=lifespan)
    app.state.store = resolved_store
    app.state.bot_service = BotService(
        store=resolved_store,
        catalog=StaticCatalog(),
        messaging_provider=resolved_provider,
        default_language=config.default_language,
    )

    @app.get("/")
    async def health_check() -> dict[str, str]:
        """Simple health endpoint to validate service status."""
        return {"status": "ok", "message": "Khmer Telegram bot is running"}

    # Telegram posts updates to the configured webhook path at the root.
    app.include_router(build_webhook_router(config.webhook_path), tags=["webhook"])
    # Mount API v1 routes under /api/v1.
    app.include_router(api_router, prefix="/api/v1")
    return app
