"""Process bootstrap: logging, instance lock, store lifecycle and transport."""

from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys

import uvicorn

from khmerbot.core.logging import configure_logging
from khmerbot.core.process_lock import AlreadyRunningError, ProcessLock
from khmerbot.core.settings import Settings, settings
from khmerbot.main import build_store, create_app
from khmerbot.providers.catalog.static_catalog import StaticCatalog
from khmerbot.providers.messaging.telegram_messaging import TelegramMessagingProvider
from khmerbot.services.bot_service import BotService
from khmerbot.transport.polling import PollingRunner, TransportError

logger = logging.getLogger(__name__)


async def run_polling(config: Settings) -> None:
    """Serve updates by long polling until a signal arrives or retries run out."""
    store = build_store(config)
    store.load()
    store.start_auto_flush()
    client = TelegramMessagingProvider(config.bot_token or "", api_url=config.telegram_api_url)
    bot_service = BotService(
        store=store,
        catalog=StaticCatalog(),
        messaging_provider=client,
        default_language=config.default_language,
    )
    runner = PollingRunner(
        client,
        bot_service,
        timeout=config.polling_timeout,
        limit=config.polling_limit,
        max_retries=config.polling_retry_count,
        interval=config.polling_interval,
    )

    main_task = asyncio.current_task()
    loop = asyncio.get_running_loop()

    def _request_stop(signame: str) -> None:
        logger.info("Shutting down bot (%s)", signame)
        runner.stop()
        if main_task is not None:
            main_task.cancel()

    for signum in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(signum, _request_stop, signum.name)
        except NotImplementedError:
            pass

    try:
        await client.initialize()
        await runner.run()
    except asyncio.CancelledError:
        logger.info("Polling cancelled")
    finally:
        # Stop timer, then final flush; the lock is released by the caller.
        await store.close()
        await client.shutdown()


def run_webhook(config: Settings) -> None:
    app = create_app(config=config, store=build_store(config))
    uvicorn.run(app, host=config.webhook_host, port=config.webhook_port, log_config=None)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="khmerbot", description="Khmer Telegram bot")
    parser.add_argument("--check-lock", action="store_true", help="report whether another instance is running")
    args = parser.parse_args(argv)

    configure_logging(settings.log_level, settings.log_dir)
    lock = ProcessLock(settings.lock_dir)

    if args.check_lock:
        locked = lock.is_locked()
        print(f"Bot lock status: {'Locked' if locked else 'Unlocked'}")
        return 1 if locked else 0

    if not settings.bot_token:
        logger.error("BOT_TOKEN is not set in environment variables")
        return 1

    try:
        lock.acquire()
    except AlreadyRunningError:
        logger.error("Another instance of the bot is already running. Exiting...")
        return 1

    try:
        if settings.use_webhook:
            run_webhook(settings)
        else:
            if settings.connection_mode == "webhook":
                logger.warning("WEBHOOK_URL is not set; falling back to polling mode")
            asyncio.run(run_polling(settings))
    except TransportError:
        logger.exception("Fatal transport error")
        return 1
    except Exception:
        logger.exception("Fatal error running bot")
        return 1
    finally:
        lock.release()
    return 0


if __name__ == "__main__":
    sys.exit(main())
