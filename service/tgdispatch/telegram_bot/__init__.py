"""
Telegram bot module: update dispatch plus the Bot API layer it relies on.

ARCHITECTURE: the dispatch core owns no wire format.
- Dispatcher receives raw updates, drops redeliveries and routes them
- Handlers (command, message, conversation, callback query) match and act
- ConversationHandler keeps one state per chat
- Bot / TelegramClient send requests to the Bot API on the handlers' behalf
"""

from .api_client import TelegramClient
from .bot import Application, ApplicationBuilder, handle_telegram_update
from .constants import ChatAction, Filters, MessageEffect, ParseMode
from .context import END, ENTRY, ConversationStateStore
from .conversation import ConversationEngine, ConversationHandler
from .dispatcher import Dispatcher, HandlerRegistration
from .errors import ConversationStateError, InvalidFilterError, TelegramAPIError, TgDispatchError
from .handlers import BaseHandler, CallbackQueryHandler, CommandHandler, HandlerKind, MessageHandler
from .telegram_api import Bot

__all__ = [
    "Application",
    "ApplicationBuilder",
    "BaseHandler",
    "Bot",
    "CallbackQueryHandler",
    "ChatAction",
    "CommandHandler",
    "ConversationEngine",
    "ConversationHandler",
    "ConversationStateError",
    "ConversationStateStore",
    "Dispatcher",
    "END",
    "ENTRY",
    "Filters",
    "HandlerKind",
    "HandlerRegistration",
    "InvalidFilterError",
    "MessageEffect",
    "MessageHandler",
    "ParseMode",
    "TelegramAPIError",
    "TelegramClient",
    "TgDispatchError",
    "handle_telegram_update",
]
