"""Test endpoints for validating bot flow."""

from fastapi import APIRouter, Depends

from khmerbot.api.deps import get_bot_service
from khmerbot.schemas.test_message import TestMessageRequest, TestMessageResponse
from khmerbot.services.bot_service import BotService

router = APIRouter()


@router.post("/test-message", response_model=TestMessageResponse)
async def test_message(
    payload: TestMessageRequest,
    bot_service: BotService = Depends(get_bot_service),
) -> TestMessageResponse:
    """Executes the bot flow for one message, returning the reply text and resulting state."""
    result = await bot_service.handle_message(
        user_id=payload.user_id,
        message=payload.message,
        first_name=payload.first_name,
    )
    return TestMessageResponse(**result)


@router.get("/debug/conversations")
async def debug_conversations(bot_service: BotService = Depends(get_bot_service)) -> dict:
    """Dump in-memory conversations with their expiry flag."""
    return bot_service.store.snapshot()
