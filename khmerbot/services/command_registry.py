"""Slash-command handlers and the name-to-handler registry."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from datetime import date

from khmerbot.models.conversation import (
    CATEGORIES_KEY,
    NEWS_CATEGORIES_KEY,
    WORD_ID_KEY,
    ConversationState,
)
from khmerbot.schemas.reply import Reply
from khmerbot.services import messages
from khmerbot.services.context import HandlerContext
from khmerbot.utils.text import bold, escape_markdown, khmer_greeting

logger = logging.getLogger(__name__)

CommandHandler = Callable[[HandlerContext], Awaitable[Reply]]


class CommandRegistry:
    """Maps command names (without the leading slash) to async handlers."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}

    def register(self, name: str) -> Callable[[CommandHandler], CommandHandler]:
        def decorator(handler: CommandHandler) -> CommandHandler:
            self._handlers[name.lower()] = handler
            return handler

        return decorator

    def get(self, name: str) -> CommandHandler | None:
        return self._handlers.get(name.split("@", 1)[0].lower())


def format_word(word: dict, title: str) -> str:
    return (
        f"{bold(title)}\n\n"
        f"ពាក្យខ្មែរ: {escape_markdown(word['khmer'])}\n"
        f"ការបញ្ចេញសំឡេង: {escape_markdown(word['latin'])}\n"
        f"អត្ថន័យជាអង់គ្លេស: {escape_markdown(word['english'])}"
    )


def format_news(items: list[dict], title: str) -> str:
    lines = [bold(title), ""]
    for item in items:
        lines.append(bold(item["title"]))
        lines.append(f"📝 {escape_markdown(item['summary'])}")
        lines.append("")
    return "\n".join(lines).rstrip()


def format_holidays(holidays: list[dict]) -> str:
    lines = [bold("📅 បុណ្យជាតិខ្មែរឆាប់ៗខាងមុខ:"), ""]
    for holiday in holidays:
        lines.append(f"{bold(holiday['name'])} {escape_markdown('(' + holiday['name_en'] + ')')}")
        lines.append(f"📆 កាលបរិច្ឆេទ៖ {escape_markdown(holiday['approximate_date'])}")
        lines.append(f"ℹ️ {escape_markdown(holiday['description'])}")
        lines.append("")
    return "\n".join(lines).rstrip()


def build_default_registry() -> CommandRegistry:
    """Registry with every command the bot understands."""
    registry = CommandRegistry()

    @registry.register("start")
    async def start(ctx: HandlerContext) -> Reply:
        text = (
            f"{khmer_greeting()}\n\n"
            f"សួស្តី {ctx.user.full_name()}! អរគុណសម្រាប់ការប្រើប្រាស់ Bot របស់យើង។\n\n"
            "សូមប្រើប្រាស់ពាក្យបញ្ជា /help ដើម្បីមើលជំនួយ។"
        )
        return Reply.with_keyboard(text, messages.START_KEYBOARD)

    @registry.register("help")
    async def help_(ctx: HandlerContext) -> Reply:
        return Reply(text=messages.HELP)

    @registry.register("info")
    async def info(ctx: HandlerContext) -> Reply:
        return Reply(text=messages.INFO)

    @registry.register("register")
    async def register(ctx: HandlerContext) -> Reply:
        ctx.conversation.set_state(ConversationState.AWAITING_NAME)
        return Reply(text=messages.ASK_NAME)

    @registry.register("feedback")
    async def feedback(ctx: HandlerContext) -> Reply:
        ctx.conversation.set_state(ConversationState.AWAITING_FEEDBACK)
        return Reply(text=messages.ASK_FEEDBACK)

    @registry.register("keyboard")
    async def keyboard(ctx: HandlerContext) -> Reply:
        return Reply.with_keyboard(messages.CHOOSE_OPTION, messages.OPTIONS_KEYBOARD)

    @registry.register("hide")
    async def hide(ctx: HandlerContext) -> Reply:
        return Reply.hide_keyboard(messages.KEYBOARD_HIDDEN)

    @registry.register("learn")
    async def learn(ctx: HandlerContext) -> Reply:
        word = ctx.catalog.random_word()
        ctx.user.record_learning({"wordId": word["id"], "source": "learn"})
        return Reply(text=format_word(word, "📝 រៀនពាក្យថ្មី"), formatted=True)

    @registry.register("dailyword")
    async def dailyword(ctx: HandlerContext) -> Reply:
        word = ctx.catalog.daily_word(date.today())
        ctx.user.record_learning({"wordId": word["id"], "source": "dailyword"})
        return Reply(text=format_word(word, "🌟 ពាក្យប្រចាំថ្ងៃ"), formatted=True)

    @registry.register("quiz")
    async def quiz(ctx: HandlerContext) -> Reply:
        word = ctx.catalog.random_word()
        ctx.conversation.set_data(WORD_ID_KEY, word["id"])
        ctx.conversation.set_state(ConversationState.QUIZ)
        ctx.user.quiz_stats()["started"] += 1
        text = (
            f"{bold('🧠 តេស្តភាសា')}\n\n"
            f"តើពាក្យ {bold(word['khmer'])} មានន័យថាអ្វីជាភាសាអង់គ្លេស?"
        )
        return Reply(text=text, formatted=True)

    @registry.register("categories")
    async def categories(ctx: HandlerContext) -> Reply:
        names = ctx.catalog.word_categories()
        ctx.conversation.set_data(CATEGORIES_KEY, names)
        ctx.conversation.set_state(ConversationState.AWAITING_CATEGORY)
        return Reply.with_keyboard("📚 សូមជ្រើសរើសប្រភេទពាក្យ:", names)

    @registry.register("news")
    async def news(ctx: HandlerContext) -> Reply:
        return Reply(text=format_news(ctx.catalog.latest_news(), "📰 ព័ត៌មានថ្មីៗ:"), formatted=True)

    @registry.register("news_categories")
    async def news_categories(ctx: HandlerContext) -> Reply:
        names = ctx.catalog.news_categories()
        ctx.conversation.set_data(NEWS_CATEGORIES_KEY, names)
        ctx.conversation.set_state(ConversationState.NEWS_CATEGORY)
        return Reply.with_keyboard("📰 សូមជ្រើសរើសប្រភេទព័ត៌មាន:", names)

    @registry.register("holiday")
    async def holiday(ctx: HandlerContext) -> Reply:
        return Reply(text=format_holidays(ctx.catalog.upcoming_holidays()), formatted=True)

    @registry.register("stats")
    async def stats(ctx: HandlerContext) -> Reply:
        quizzes = ctx.user.quiz_stats()
        text = (
            "📊 ស្ថិតិតេស្តរបស់អ្នក:\n\n"
            f"ចាប់ផ្តើម: {quizzes['started']}\n"
            f"បញ្ចប់: {quizzes['completed']}\n"
            f"ត្រូវ: {quizzes['correct']}\n"
            f"ខុស: {quizzes['incorrect']}"
        )
        return Reply(text=text)

    return registry
