"""Shared pytest fixtures: raw update payloads and a mocked Bot session."""

from __future__ import annotations

import itertools
from unittest.mock import AsyncMock

import pytest

from tgdispatch.telegram_bot import Bot

DATE = 1700000000


@pytest.fixture()
def bot() -> AsyncMock:
    mock = AsyncMock(spec=Bot)
    mock.answer_callback_query.return_value = True
    return mock


@pytest.fixture()
def make_message_update():
    """Factory for raw ``message`` updates with increasing update ids."""
    counter = itertools.count(1)

    def _make(text: str | None = None, chat_id: int = 42, update_id: int | None = None, **fields):
        uid = update_id if update_id is not None else next(counter)
        message = {
            "message_id": uid,
            "date": DATE,
            "chat": {"id": chat_id, "type": "private", "first_name": "Ann"},
            "from": {"id": chat_id, "is_bot": False, "first_name": "Ann"},
        }
        if text is not None:
            message["text"] = text
        message.update(fields)
        return {"update_id": uid, "message": message}

    return _make


@pytest.fixture()
def make_callback_update():
    """Factory for raw ``callback_query`` updates."""
    counter = itertools.count(1000)

    def _make(data: str = "pressed", chat_id: int = 42, update_id: int | None = None):
        uid = update_id if update_id is not None else next(counter)
        return {
            "update_id": uid,
            "callback_query": {
                "id": f"cq-{uid}",
                "from": {"id": chat_id, "is_bot": False, "first_name": "Ann"},
                "chat_instance": "instance-1",
                "data": data,
                "message": {
                    "message_id": 7,
                    "date": DATE,
                    "chat": {"id": chat_id, "type": "private"},
                    "text": "Pick one",
                },
            },
        }

    return _make


PHOTO = [{"file_id": "p1", "file_unique_id": "u1", "width": 90, "height": 90}]
VIDEO = {"file_id": "v1", "file_unique_id": "uv1", "width": 640, "height": 480, "duration": 3}
DOCUMENT = {"file_id": "d1", "file_unique_id": "ud1", "file_name": "report.pdf"}


@pytest.fixture()
def media_fields() -> dict:
    return {"photo": PHOTO, "video": VIDEO, "document": DOCUMENT}
