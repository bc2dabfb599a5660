"""
Tests for command, message and callback query handlers.

Run with: pytest service/tests/test_handlers.py -v
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from tgdispatch.telegram_bot import (
    CallbackQueryHandler,
    CommandHandler,
    Filters,
    HandlerKind,
    InvalidFilterError,
    MessageHandler,
)
from tgdispatch.telegram_bot.handlers import HandlerCall
from tgdispatch.telegram_bot.types import Update


def parse(raw: dict) -> Update:
    return Update.model_validate(raw)


class TestCommandHandler:
    """Command matching is anchored, case-sensitive and word-bounded."""

    @pytest.fixture()
    def handler(self):
        return CommandHandler("start", MagicMock())

    @pytest.mark.parametrize("text", ["/start", "/start foo", "/start@my_bot"])
    def test_matches_command(self, handler, make_message_update, text):
        """Command alone, with arguments or addressed to the bot."""
        assert handler.matches(parse(make_message_update(text))) is True

    @pytest.mark.parametrize("text", ["/starting", "foo /start", "/Start", "start", ""])
    def test_rejects_other_text(self, handler, make_message_update, text):
        """Longer words, mid-text commands and other case do not match."""
        assert handler.matches(parse(make_message_update(text))) is False

    def test_message_without_text(self, handler, make_message_update, media_fields):
        """A photo without caption text never matches a command."""
        update = parse(make_message_update(photo=media_fields["photo"]))
        assert handler.matches(update) is False

    def test_callback_query_update(self, handler, make_callback_update):
        """Updates without a message are ignored."""
        assert handler.matches(parse(make_callback_update())) is False

    @pytest.mark.parametrize("command", ["", "start now", "/start", None])
    def test_invalid_command(self, command):
        """Command must be a single word without the slash."""
        with pytest.raises(ValueError):
            CommandHandler(command, MagicMock())

    def test_kind_and_requirement(self, handler):
        """Command handlers are routed on the message field."""
        assert handler.kind is HandlerKind.COMMAND
        assert handler.requires == "message"

    @pytest.mark.asyncio
    async def test_invoke_passes_update_and_bot(self, make_message_update, bot):
        """bind() captures update and bot; invoke() returns the callback result."""
        callback = AsyncMock(return_value="done")
        handler = CommandHandler("start", callback)
        update = parse(make_message_update("/start"))

        call = handler.bind(update, bot)
        assert isinstance(call, HandlerCall)
        assert await call.invoke() == "done"
        callback.assert_awaited_once_with(update, bot)

    @pytest.mark.asyncio
    async def test_sync_callback(self, make_message_update, bot):
        """Plain functions work as callbacks too."""
        handler = CommandHandler("help", lambda update, bot: update.message.text.upper())
        update = parse(make_message_update("/help"))
        assert await handler.bind(update, bot).invoke() == "/HELP"


class TestMessageHandler:
    """Filter tags come from a closed set and are case-normalized."""

    def test_unknown_filter_rejected(self):
        """Tags outside the known set fail at construction."""
        with pytest.raises(InvalidFilterError):
            MessageHandler("sticker", MagicMock())

    def test_unknown_filter_is_value_error(self):
        """InvalidFilterError can be caught as ValueError."""
        with pytest.raises(ValueError):
            MessageHandler(["text", "voice"], MagicMock())

    def test_empty_filters_rejected(self):
        """At least one tag is required."""
        with pytest.raises(InvalidFilterError):
            MessageHandler([], MagicMock())

    def test_filters_are_normalized(self):
        """Mixed case and repeats collapse to unique Filters members."""
        handler = MessageHandler(["TEXT", "Photo", Filters.VIDEO, "text"], MagicMock())
        assert handler.filters == (Filters.TEXT, Filters.PHOTO, Filters.VIDEO)

    def test_single_filter_string(self):
        """A bare string is one tag, not a sequence of characters."""
        handler = MessageHandler("Document", MagicMock())
        assert handler.filters == (Filters.DOCUMENT,)

    def test_text_filter(self, make_message_update):
        """Text filter needs non-empty text."""
        handler = MessageHandler("text", MagicMock())
        assert handler.matches(parse(make_message_update("hello"))) is True
        assert handler.matches(parse(make_message_update(""))) is False
        assert handler.matches(parse(make_message_update())) is False

    @pytest.mark.parametrize("tag", ["photo", "video", "document"])
    def test_media_filters(self, make_message_update, media_fields, tag):
        """Media filters need the matching attachment."""
        handler = MessageHandler(tag, MagicMock())
        assert handler.matches(parse(make_message_update(**{tag: media_fields[tag]}))) is True
        assert handler.matches(parse(make_message_update("just text"))) is False

    def test_any_filter_matches(self, make_message_update, media_fields):
        """One satisfied tag out of several is enough."""
        handler = MessageHandler(["video", "photo"], MagicMock())
        assert handler.matches(parse(make_message_update(photo=media_fields["photo"]))) is True

    def test_all_filter(self, make_message_update):
        """The all tag matches any message, even an empty one."""
        handler = MessageHandler("all", MagicMock())
        assert handler.matches(parse(make_message_update())) is True

    def test_no_message(self, make_callback_update):
        """The all tag still needs a message."""
        handler = MessageHandler("all", MagicMock())
        assert handler.matches(parse(make_callback_update())) is False


class TestCallbackQueryHandler:
    """Callback queries are acknowledged before the user action runs."""

    def test_matches_callback_query(self, make_callback_update, make_message_update):
        """Only updates carrying a callback query match."""
        handler = CallbackQueryHandler(MagicMock())
        assert handler.requires == "callback_query"
        assert handler.matches(parse(make_callback_update())) is True
        assert handler.matches(parse(make_message_update("hi"))) is False

    @pytest.mark.asyncio
    async def test_acknowledges_before_action(self, make_callback_update, bot):
        """The empty answer completes before the callback starts."""
        events = []

        async def acknowledge(callback_query_id):
            events.append(("ack", callback_query_id))
            return True

        async def action(update, session):
            assert events == [("ack", update.callback_query.id)]
            events.append(("action", update.callback_query.data))

        bot.answer_callback_query.side_effect = acknowledge
        handler = CallbackQueryHandler(action)
        update = parse(make_callback_update(data="yes", update_id=5))

        await handler.bind(update, bot).invoke()

        assert events == [("ack", "cq-5"), ("action", "yes")]
        bot.answer_callback_query.assert_awaited_once_with("cq-5")

    @pytest.mark.asyncio
    async def test_failed_acknowledgement_skips_action(self, make_callback_update, bot):
        """If answering fails the callback does not run."""
        bot.answer_callback_query.side_effect = RuntimeError("network down")
        action = AsyncMock()
        handler = CallbackQueryHandler(action)

        with pytest.raises(RuntimeError):
            await handler.bind(parse(make_callback_update()), bot).invoke()
        action.assert_not_awaited()
