"""
Conversation state storage.

For now: simple in-memory dict keyed by chat id.
A persistent backend only needs the same three async methods.
"""

from enum import Enum
from typing import Any, Dict


class ConversationSentinel(Enum):
    """Reserved conversation states."""

    ENTRY = "entry"
    END = "end"


ENTRY = ConversationSentinel.ENTRY
END = ConversationSentinel.END


class ConversationStateStore:
    """In-memory storage: chat_id -> conversation state."""

    def __init__(self) -> None:
        self._states: Dict[int, Any] = {}

    async def load_state(self, chat_id: int) -> Any:
        """Load conversation state for chat; ENTRY if none is recorded."""
        return self._states.get(chat_id, ENTRY)

    async def save_state(self, chat_id: int, state: Any) -> None:
        """Record a new state for chat."""
        self._states[chat_id] = state

    async def clear_state(self, chat_id: int) -> None:
        """Forget the chat's state so its next update starts at the entry points."""
        self._states.pop(chat_id, None)

    def snapshot(self) -> Dict[int, Any]:
        """Copy of all recorded states."""
        return dict(self._states)

    def __len__(self) -> int:
        return len(self._states)
