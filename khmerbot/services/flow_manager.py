"""Free-text handling driven by the conversation's current state."""

from __future__ import annotations

from datetime import datetime, timezone

from khmerbot.models.conversation import (
    FEEDBACK_KEY,
    NAME_KEY,
    QUIZ_ATTEMPTS_KEY,
    WORD_ID_KEY,
    ConversationState,
)
from khmerbot.schemas.reply import Reply
from khmerbot.services import messages
from khmerbot.services.command_registry import format_holidays, format_news, format_word
from khmerbot.services.context import HandlerContext
from khmerbot.services.intent_engine import MenuMatcher
from khmerbot.utils.text import bold, contains_khmer, escape_markdown


class FlowManager:
    """Controls conversational state transitions for non-command messages."""

    def __init__(self, menu_matcher: MenuMatcher | None = None) -> None:
        self.menu_matcher = menu_matcher or MenuMatcher()

    async def handle(self, ctx: HandlerContext) -> Reply:
        """Dispatch one free-text message on the conversation state."""
        state = ctx.conversation.state

        if state is ConversationState.AWAITING_NAME:
            return self._handle_name(ctx)
        if state is ConversationState.AWAITING_FEEDBACK:
            return self._handle_feedback(ctx)
        if state is ConversationState.QUIZ:
            return self._handle_quiz_answer(ctx)
        if state is ConversationState.NEWS_CATEGORY:
            return self._handle_news_category(ctx)
        if state is ConversationState.AWAITING_CATEGORY:
            return self._handle_word_category(ctx)
        return self._handle_idle(ctx)

    def _handle_name(self, ctx: HandlerContext) -> Reply:
        name = ctx.text
        ctx.conversation.set_data(NAME_KEY, name)
        ctx.conversation.set_state(ConversationState.IDLE)
        if not ctx.user.first_name:
            ctx.user.first_name = name
        return Reply(
            text=f"សូមអរគុណ {escape_markdown(name)}\\! អ្នកបានចុះឈ្មោះជាមួយ Bot របស់យើងដោយជោគជ័យ។",
            formatted=True,
        )

    def _handle_feedback(self, ctx: HandlerContext) -> Reply:
        ctx.conversation.set_data(
            FEEDBACK_KEY,
            {"text": ctx.text, "timestamp": datetime.now(timezone.utc).isoformat()},
        )
        ctx.conversation.set_state(ConversationState.IDLE)
        ctx.user.record_interaction("feedback", {"length": len(ctx.text)})
        return Reply(text="សូមអរគុណសម្រាប់មតិរបស់អ្នក! យើងនឹងពិចារណាលើវា។")

    def _handle_quiz_answer(self, ctx: HandlerContext) -> Reply:
        word_id = ctx.conversation.get_data(WORD_ID_KEY)
        word = ctx.catalog.word_by_id(word_id) if isinstance(word_id, int) else None
        if word is None:
            ctx.conversation.set_state(ConversationState.IDLE)
            return Reply(text=messages.NO_ACTIVE_QUIZ)

        correct = ctx.catalog.check_answer(ctx.text, word_id)
        quizzes = ctx.user.quiz_stats()
        quizzes["correct" if correct else "incorrect"] += 1
        quizzes["total"] += 1
        quizzes["completed"] += 1

        attempts = list(ctx.conversation.get_data(QUIZ_ATTEMPTS_KEY, []))
        attempts.append(
            {
                "wordId": word_id,
                "userAnswer": ctx.text,
                "correct": correct,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }
        )
        ctx.conversation.set_data(QUIZ_ATTEMPTS_KEY, attempts)
        ctx.conversation.set_state(ConversationState.IDLE)

        meaning = f'"{escape_markdown(word["khmer"])}" មានន័យថា "{escape_markdown(word["english"])}"'
        if correct:
            return Reply(text=f"🎉 ត្រូវហើយ\\! {meaning}", formatted=True)
        return Reply(text=f"❌ មិនត្រូវទេ។ {meaning}", formatted=True)

    def _handle_news_category(self, ctx: HandlerContext) -> Reply:
        category = ctx.text.lower()
        ctx.conversation.set_state(ConversationState.IDLE)
        news = ctx.catalog.latest_news(3, category)
        if not news:
            return Reply(text=f'រកមិនឃើញព័ត៌មានក្នុងប្រភេទ "{category}" ទេ។', remove_keyboard=True)
        return Reply(
            text=format_news(news, f'📰 ព័ត៌មានក្នុងប្រភេទ "{category}":'),
            formatted=True,
            remove_keyboard=True,
        )

    def _handle_word_category(self, ctx: HandlerContext) -> Reply:
        category = ctx.text.lower().strip()
        ctx.conversation.set_state(ConversationState.IDLE)
        words = ctx.catalog.words_by_category(category)
        if not words:
            return Reply(
                text=f'រកមិនឃើញប្រភេទ "{category}" ទេ។ សូមជ្រើសរើសប្រភេទមួយផ្សេងទៀត។',
                remove_keyboard=True,
            )
        lines = [bold(f'📚 ពាក្យក្នុងប្រភេទ "{category}":'), ""]
        for word in words:
            lines.append(
                f"• {bold(word['khmer'])} {escape_markdown('(' + word['latin'] + ')')} \\- {escape_markdown(word['english'])}"
            )
        return Reply(text="\n".join(lines), formatted=True, remove_keyboard=True)

    def _handle_idle(self, ctx: HandlerContext) -> Reply:
        action = self.menu_matcher.detect_action(ctx.text)
        if action == "learn":
            word = ctx.catalog.random_word()
            ctx.user.record_learning({"wordId": word["id"], "source": "menu"})
            return Reply(text=format_word(word, "📝 រៀនពាក្យថ្មី"), formatted=True)
        if action == "news":
            return Reply(text=format_news(ctx.catalog.latest_news(), "📰 ព័ត៌មានថ្មីៗ:"), formatted=True)
        if action == "holiday":
            return Reply(text=format_holidays(ctx.catalog.upcoming_holidays()), formatted=True)
        if action == "help":
            return Reply(text=messages.HELP)

        if contains_khmer(ctx.text):
            return Reply(text=f"បានទទួលសារ: {ctx.text}")
        return Reply.with_keyboard(messages.CHOOSE_OPTION, messages.MAIN_MENU)
