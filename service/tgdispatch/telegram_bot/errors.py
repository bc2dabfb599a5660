"""
Exceptions raised by the dispatch engine and the Bot API client.
"""

from typing import Any, Optional


class TgDispatchError(Exception):
    """Base class for all errors raised by this package."""

    pass


class TelegramAPIError(TgDispatchError):
    """
    The Bot API answered with ``{"ok": false}``.

    Carries the method that was called together with ``error_code`` and
    ``description`` from the response. ``parameters`` holds the optional
    ``ResponseParameters`` object (``retry_after``, ``migrate_to_chat_id``).
    """

    def __init__(
        self,
        method: str,
        description: str,
        error_code: Optional[int] = None,
        parameters: Optional[dict[str, Any]] = None,
    ):
        self.method = method
        self.description = description
        self.error_code = error_code
        self.parameters = parameters or {}
        super().__init__(f"{method} failed ({error_code}): {description}")


class InvalidFilterError(TgDispatchError, ValueError):
    """A message handler was built with a filter tag outside the known set."""

    def __init__(self, tag: Any):
        self.tag = tag
        super().__init__(f"Invalid filter: {tag!r}")


class ConversationStateError(TgDispatchError):
    """A chat's recorded conversation state has no handler list."""

    def __init__(self, chat_id: int, state: Any):
        self.chat_id = chat_id
        self.state = state
        super().__init__(f"Unknown conversation state {state!r} for chat {chat_id}")
