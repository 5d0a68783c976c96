"""Webhook endpoint for inbound Telegram Bot API updates."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from khmerbot.api.deps import get_bot_service
from khmerbot.services.bot_service import BotService


async def receive_update(payload: dict[str, Any], bot_service: BotService = Depends(get_bot_service)) -> dict[str, bool]:
    """Route one Telegram update; always acknowledge so Telegram does not redeliver it."""
    await bot_service.handle_update(payload)
    return {"ok": True}


def build_webhook_router(path: str) -> APIRouter:
    """Router serving ``receive_update`` at the path registered with Telegram."""
    router = APIRouter()
    router.add_api_route(path, receive_update, methods=["POST"])
    return router
