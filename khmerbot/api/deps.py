"""FastAPI dependencies for application-scoped services."""

from fastapi import HTTPException, Request

from khmerbot.services.bot_service import BotService


def get_bot_service(request: Request) -> BotService:
    """Return the bot service created by the application lifespan."""
    bot_service = getattr(request.app.state, "bot_service", None)
    if bot_service is None:
        raise HTTPException(status_code=503, detail="Bot service is not initialized")
    return bot_service
