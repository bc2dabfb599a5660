"""
Conversation state machine.

Each chat moves through states independently:

- A chat with no recorded state is at ``ENTRY`` and is matched against the
  entry points.
- Otherwise the handlers registered for its current state are tried.
- The first matching handler runs; its return value becomes the chat's new
  state. ``END``, ``ENTRY`` and ``None`` (a callback that returns
  nothing) drop the chat back to ``ENTRY``.
- If nothing matched, the first matching fallback runs without touching
  the state.

Only command and message handlers take part in a conversation.
"""

import asyncio
import weakref
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any, Optional

from .context import END, ENTRY, ConversationStateStore
from .errors import ConversationStateError
from .handlers import BaseHandler, HandlerKind
from .logging_config import bot_logger as logger
from .types import Update

if TYPE_CHECKING:
    from .telegram_api import Bot


def conversation_matches(handler: BaseHandler, update: Update) -> bool:
    match handler.kind:
        case HandlerKind.COMMAND | HandlerKind.MESSAGE:
            return handler.matches(update)
        case _:
            return False


def first_match(handlers: Iterable[BaseHandler], update: Update) -> Optional[BaseHandler]:
    for handler in handlers:
        if conversation_matches(handler, update):
            return handler
    return None


class ConversationEngine:
    """Per-chat state machine driving a ConversationHandler."""

    def __init__(
        self,
        entry_points: Iterable[BaseHandler],
        states: Mapping[Any, Iterable[BaseHandler]],
        fallbacks: Optional[Iterable[BaseHandler]] = None,
        store: Optional[ConversationStateStore] = None,
    ):
        self.entry_points = list(entry_points)
        self.states = {state: list(handlers) for state, handlers in states.items()}
        self.fallbacks = list(fallbacks or [])
        self.store = store if store is not None else ConversationStateStore()
        # Locks live as long as someone holds or waits on them
        self._locks: "weakref.WeakValueDictionary[int, asyncio.Lock]" = weakref.WeakValueDictionary()

    def _lock_for(self, chat_id: int) -> asyncio.Lock:
        lock = self._locks.get(chat_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[chat_id] = lock
        return lock

    def _active_handlers(self, state: Any) -> Optional[list[BaseHandler]]:
        if state is ENTRY:
            return self.entry_points
        return self.states.get(state)

    async def process(self, update: Update, bot: "Bot") -> bool:
        """
        Advance the conversation of the update's chat.

        Returns:
            True if a state handler or a fallback ran, False if the update
            was ignored

        Raises:
            ConversationStateError: If the chat's recorded state has no
                handler list. The chat is reset to ENTRY first.
        """
        message = update.message
        if message is None:
            return False
        chat_id = message.chat.id

        async with self._lock_for(chat_id):
            state = await self.store.load_state(chat_id)
            handlers = self._active_handlers(state)
            if handlers is None:
                await self.store.clear_state(chat_id)
                logger.error(f"Chat {chat_id} is in unknown conversation state {state!r}, reset to entry")
                raise ConversationStateError(chat_id, state)

            handler = first_match(handlers, update)
            if handler is not None:
                new_state = await handler.bind(update, bot).invoke()
                if new_state is None or new_state is END or new_state is ENTRY:
                    await self.store.clear_state(chat_id)
                    logger.debug(f"Conversation ended for chat {chat_id}")
                else:
                    await self.store.save_state(chat_id, new_state)
                    logger.debug(f"Chat {chat_id}: {state!r} -> {new_state!r}")
                return True

            fallback = first_match(self.fallbacks, update)
            if fallback is not None:
                await fallback.bind(update, bot).invoke()
                logger.debug(f"Fallback handled chat {chat_id} in state {state!r}")
                return True

        return False


class ConversationHandler(BaseHandler):
    """
    Handler that runs a multi-step conversation per chat.

    Args:
        entry_points: Handlers tried while a chat has no state
        states: Mapping of state -> handlers tried while a chat is in it
        fallbacks: Handlers tried when nothing in the active list matched
        store: State storage; defaults to an in-memory store
    """

    kind = HandlerKind.CONVERSATION
    END = END
    ENTRY = ENTRY

    def __init__(
        self,
        entry_points: Iterable[BaseHandler],
        states: Mapping[Any, Iterable[BaseHandler]],
        fallbacks: Optional[Iterable[BaseHandler]] = None,
        store: Optional[ConversationStateStore] = None,
    ):
        super().__init__()
        self.engine = ConversationEngine(entry_points, states, fallbacks, store)

    def matches(self, update: Update) -> bool:
        return update.message is not None

    async def _run(self, update: Update, bot: "Bot") -> bool:
        return await self.engine.process(update, bot)

    def __repr__(self) -> str:
        return f"<ConversationHandler states={list(self.engine.states)}>"
