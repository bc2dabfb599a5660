"""
Update dispatcher - routes incoming updates to registered handlers.

Routing order is fixed: command handlers, message handlers, the
conversation handler, the callback query handler. Inside each category
handlers are tried in registration order and the first match wins.
"""

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional

from .handlers import BaseHandler, HandlerKind
from .logging_config import bot_logger as logger
from .types import Update

if TYPE_CHECKING:
    from .telegram_api import Bot


@dataclass(frozen=True)
class HandlerRegistration:
    handler: BaseHandler
    # Raw update field that must be present for the handler to be tried
    requires: str


class Dispatcher:
    """
    Owns the handler table and processes one update at a time per call.

    ``dispatch`` may be called concurrently (e.g. from a webhook server);
    the duplicate check and the per-chat conversation state are guarded by
    locks.
    """

    ROUTING_ORDER = (
        HandlerKind.COMMAND,
        HandlerKind.MESSAGE,
        HandlerKind.CONVERSATION,
        HandlerKind.CALLBACK_QUERY,
    )

    def __init__(self, bot: "Bot"):
        self.bot = bot
        self.handlers: dict[HandlerKind, list[HandlerRegistration]] = {
            kind: [] for kind in self.ROUTING_ORDER
        }
        self.last_update_id: Optional[int] = None
        self._update_lock = asyncio.Lock()

    def add_handler(self, handler: BaseHandler) -> bool:
        """
        Register a handler.

        Conflicting registrations are rejected: a command that is already
        handled, a filter tag that overlaps an existing message handler, or
        a second conversation / callback query handler. The first
        registration stays authoritative.

        Returns:
            True if the handler was added, False if it was rejected
        """
        if not isinstance(handler, BaseHandler):
            raise TypeError(f"Expected a handler, got {type(handler).__name__}")

        conflict = self._find_conflict(handler)
        if conflict:
            logger.warning(f"Ignoring {handler!r}: {conflict}")
            return False

        self.handlers[handler.kind].append(HandlerRegistration(handler, handler.requires))
        logger.debug(f"Registered {handler!r}")
        return True

    register = add_handler

    def _find_conflict(self, handler: BaseHandler) -> Optional[str]:
        registered = [registration.handler for registration in self.handlers[handler.kind]]

        match handler.kind:
            case HandlerKind.COMMAND:
                if any(other.command == handler.command for other in registered):
                    return f"/{handler.command} is already handled"
            case HandlerKind.MESSAGE:
                taken = {tag for other in registered for tag in other.filters}
                overlap = taken.intersection(handler.filters)
                if overlap:
                    return f"filters {sorted(tag.value for tag in overlap)} are already handled"
            case HandlerKind.CONVERSATION | HandlerKind.CALLBACK_QUERY:
                if registered:
                    return f"only one {handler.kind.value} handler can be registered"

        return None

    async def dispatch(self, raw_update: Mapping[str, Any]) -> None:
        """
        Process one raw update.

        Redelivery of the update processed last is a no-op. Otherwise the
        update id is recorded before any handler runs, so a failing handler
        does not cause the update to be processed again. The same holds for
        an update that fails to parse. Handler and parsing exceptions
        propagate to the caller.
        """
        update_id = raw_update.get("update_id")

        async with self._update_lock:
            if update_id is not None and update_id == self.last_update_id:
                logger.debug(f"Skipping duplicate update {update_id}")
                return
            if update_id is not None:
                self.last_update_id = update_id

        # Views remember the session so shortcuts like query.answer() work
        update = Update.model_validate(raw_update, context={"bot": self.bot})

        logger.debug(f"Dispatching update {update.update_id} ({update.payload_kind})")

        for kind in self.ROUTING_ORDER:
            for registration in self.handlers[kind]:
                if registration.requires not in raw_update:
                    continue
                if not registration.handler.matches(update):
                    continue
                await registration.handler.bind(update, self.bot).invoke()
                break
