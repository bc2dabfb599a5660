"""
Update handlers.

A handler pairs a predicate (``matches``) with an action. Handlers are
stateless with respect to updates: ``bind(update, bot)`` produces a
``HandlerCall`` and ``invoke()`` on it runs the action, so the same handler
can serve concurrent updates.

Callbacks receive ``(update, bot)`` and may be plain functions or
coroutine functions.
"""

import inspect
import re
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, ClassVar, Optional, Union

from .constants import Filters
from .errors import InvalidFilterError
from .types import Message, Update

if TYPE_CHECKING:
    from .telegram_api import Bot

HandlerCallback = Callable[[Update, "Bot"], Any]


class HandlerKind(str, Enum):
    """Closed set of handler variants; also the dispatcher's routing categories."""

    COMMAND = "command"
    MESSAGE = "message"
    CONVERSATION = "conversation"
    CALLBACK_QUERY = "callback_query"


@dataclass(frozen=True)
class HandlerCall:
    """A handler bound to one update and one bot session."""

    handler: "BaseHandler"
    update: Update
    bot: "Bot"

    async def invoke(self) -> Any:
        return await self.handler._run(self.update, self.bot)


class BaseHandler(ABC):
    """Base class for all handlers."""

    kind: ClassVar[HandlerKind]
    # Raw update field that must be present for the handler to be considered
    requires: ClassVar[str] = "message"

    def __init__(self, callback: Optional[HandlerCallback] = None):
        self.callback = callback

    @abstractmethod
    def matches(self, update: Update) -> bool:
        """Return True if this handler should act on ``update``."""

    def bind(self, update: Update, bot: "Bot") -> HandlerCall:
        return HandlerCall(self, update, bot)

    async def _run(self, update: Update, bot: "Bot") -> Any:
        return await run_callback(self.callback, update, bot)


async def run_callback(callback: HandlerCallback, update: Update, bot: "Bot") -> Any:
    """Call a sync or async callback and return its result."""
    result = callback(update, bot)
    if inspect.isawaitable(result):
        result = await result
    return result


class CommandHandler(BaseHandler):
    """
    Handles ``/command`` messages.

    Matches when the message text starts with ``/<command>`` followed by a
    word boundary, so "/start" and "/start foo" match "start" while
    "/starting" and "foo /start" do not. Matching is case-sensitive.
    """

    kind = HandlerKind.COMMAND

    def __init__(self, command: str, callback: HandlerCallback):
        if not isinstance(command, str) or not re.fullmatch(r"\w+", command):
            raise ValueError(f"Invalid command: {command!r}")
        super().__init__(callback)
        self.command = command
        self._pattern = re.compile(rf"^/{re.escape(command)}\b")

    def matches(self, update: Update) -> bool:
        message = update.message
        if message is None or message.text is None:
            return False
        return self._pattern.match(message.text) is not None

    def __repr__(self) -> str:
        return f"<CommandHandler /{self.command}>"


_FILTER_CHECKS: dict[Filters, Callable[[Message], bool]] = {
    Filters.TEXT: lambda message: bool(message.text),
    Filters.PHOTO: lambda message: message.photo is not None,
    Filters.VIDEO: lambda message: message.video is not None,
    Filters.DOCUMENT: lambda message: message.document is not None,
    Filters.ALL: lambda message: True,
}


def normalize_filter(tag: Union[str, Filters]) -> Filters:
    """Case-normalize a filter tag; unknown tags raise InvalidFilterError."""
    if isinstance(tag, Filters):
        return tag
    if not isinstance(tag, str):
        raise InvalidFilterError(tag)
    try:
        return Filters(tag.lower())
    except ValueError:
        raise InvalidFilterError(tag) from None


class MessageHandler(BaseHandler):
    """
    Handles messages by content type.

    ``filters`` is one tag or a list of tags from ``Filters``; the handler
    matches when any of them holds for the update's message.
    """

    kind = HandlerKind.MESSAGE

    def __init__(
        self,
        filters: Union[str, Filters, Iterable[Union[str, Filters]]],
        callback: HandlerCallback,
    ):
        tags = [filters] if isinstance(filters, str) else list(filters)
        if not tags:
            raise InvalidFilterError(filters)
        super().__init__(callback)
        # dict.fromkeys keeps first-seen order while dropping repeats
        self.filters: tuple[Filters, ...] = tuple(dict.fromkeys(normalize_filter(tag) for tag in tags))

    def matches(self, update: Update) -> bool:
        message = update.message
        if message is None:
            return False
        return any(_FILTER_CHECKS[tag](message) for tag in self.filters)

    def __repr__(self) -> str:
        return f"<MessageHandler {', '.join(tag.value for tag in self.filters)}>"


class CallbackQueryHandler(BaseHandler):
    """
    Handles presses on inline keyboard buttons.

    The query is acknowledged with an empty answer before the callback runs,
    which clears the progress indicator on the user's client.
    """

    kind = HandlerKind.CALLBACK_QUERY
    requires = "callback_query"

    def __init__(self, callback: HandlerCallback):
        super().__init__(callback)

    def matches(self, update: Update) -> bool:
        return update.callback_query is not None

    async def _run(self, update: Update, bot: "Bot") -> Any:
        await bot.answer_callback_query(update.callback_query.id)
        return await run_callback(self.callback, update, bot)

    def __repr__(self) -> str:
        return "<CallbackQueryHandler>"
