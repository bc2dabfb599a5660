"""
Read-only views over Bot API objects.

Every model is a frozen pydantic model built from the already-parsed JSON
that Telegram delivers. Fields the API marks as optional default to ``None``;
fields this package does not model are ignored. ``to_dict()`` turns a view
back into the wire shape (aliases applied, ``None`` fields dropped).

Views parsed with ``context={"bot": bot}`` remember that session, which the
shortcut methods (``Chat.send_message``, ``CallbackQuery.answer``,
``File.download``) call through.
"""

import html
from typing import TYPE_CHECKING, Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, PrivateAttr, Tag, ValidationInfo, model_validator

if TYPE_CHECKING:
    from .inputs import InputFile
    from .telegram_api import Bot


class TelegramObject(BaseModel):
    """Base for all Bot API views."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    _bot: Any = PrivateAttr(default=None)

    @model_validator(mode="after")
    def _bind_bot(self, info: ValidationInfo) -> "TelegramObject":
        if info.context:
            self._bot = info.context.get("bot")
        return self

    def get_bot(self) -> "Bot":
        """The Bot session this view was parsed for."""
        if self._bot is None:
            raise RuntimeError(
                f"{type(self).__name__} is not bound to a Bot; parse it with context={{'bot': bot}}"
            )
        return self._bot

    def set_bot(self, bot: Optional["Bot"]) -> None:
        self._bot = bot

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class User(TelegramObject):
    id: int
    is_bot: bool
    first_name: str
    last_name: Optional[str] = None
    username: Optional[str] = None
    language_code: Optional[str] = None

    @property
    def full_name(self) -> str:
        if self.last_name:
            return f"{self.first_name} {self.last_name}"
        return self.first_name

    def mention_html(self, name: Optional[str] = None) -> str:
        """Inline HTML mention of the user, labelled with ``name`` or the full name."""
        label = html.escape(name if name is not None else self.full_name)
        return f'<a href="tg://user?id={self.id}">{label}</a>'


class Chat(TelegramObject):
    id: int
    type: str
    title: Optional[str] = None
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    bio: Optional[str] = None
    description: Optional[str] = None
    invite_link: Optional[str] = None

    async def send_message(self, text: str, **kwargs: Any) -> "Message":
        """Send a text message to this chat; see ``Bot.send_message``."""
        return await self.get_bot().send_message(self.id, text, **kwargs)

    async def send_photo(self, photo: Union["InputFile", str], **kwargs: Any) -> "Message":
        return await self.get_bot().send_photo(self.id, photo, **kwargs)


class MessageEntity(TelegramObject):
    type: str
    offset: int
    length: int
    url: Optional[str] = None
    user: Optional[User] = None
    language: Optional[str] = None
    custom_emoji_id: Optional[str] = None


class PhotoSize(TelegramObject):
    file_id: str
    file_unique_id: str
    width: int
    height: int
    file_size: Optional[int] = None


class Video(TelegramObject):
    file_id: str
    file_unique_id: str
    width: int
    height: int
    duration: int
    thumbnail: Optional[PhotoSize] = None
    file_name: Optional[str] = None
    mime_type: Optional[str] = None
    file_size: Optional[int] = None


class Document(TelegramObject):
    file_id: str
    file_unique_id: str
    thumbnail: Optional[PhotoSize] = None
    file_name: Optional[str] = None
    mime_type: Optional[str] = None
    file_size: Optional[int] = None


class File(TelegramObject):
    """
    A file ready to be downloaded.

    The download link is valid for at least one hour; use
    ``Bot.download_file`` to fetch the content.
    """

    file_id: str
    file_unique_id: str
    file_size: Optional[int] = None
    file_path: Optional[str] = None

    async def download(self) -> bytes:
        return await self.get_bot().download_file(self)


class LinkPreviewOptions(TelegramObject):
    is_disabled: Optional[bool] = None
    url: Optional[str] = None
    prefer_small_media: Optional[bool] = None
    prefer_large_media: Optional[bool] = None
    show_above_text: Optional[bool] = None


class InlineKeyboardButton(TelegramObject):
    text: str
    url: Optional[str] = None
    callback_data: Optional[str] = None


class InlineKeyboardMarkup(TelegramObject):
    inline_keyboard: list[list[InlineKeyboardButton]] = Field(default_factory=list)


class ReplyParameters(TelegramObject):
    message_id: int
    chat_id: Optional[Union[int, str]] = None
    allow_sending_without_reply: Optional[bool] = None
    quote: Optional[str] = None
    quote_parse_mode: Optional[str] = None
    quote_entities: Optional[list[MessageEntity]] = None
    quote_position: Optional[int] = None


# Message origins: a tagged union selected by the ``type`` field.

class MessageOriginUser(TelegramObject):
    type: Literal["user"] = "user"
    date: int
    sender_user: User


class MessageOriginHiddenUser(TelegramObject):
    type: Literal["hidden_user"] = "hidden_user"
    date: int
    sender_user_name: str


class MessageOriginChat(TelegramObject):
    type: Literal["chat"] = "chat"
    date: int
    sender_chat: Chat
    author_signature: Optional[str] = None


class MessageOriginChannel(TelegramObject):
    type: Literal["channel"] = "channel"
    date: int
    chat: Chat
    message_id: int
    author_signature: Optional[str] = None


MessageOrigin = Annotated[
    Union[MessageOriginUser, MessageOriginHiddenUser, MessageOriginChat, MessageOriginChannel],
    Field(discriminator="type"),
]


class Message(TelegramObject):
    message_id: int
    from_user: Optional[User] = Field(default=None, alias="from")
    date: int
    chat: Chat
    text: Optional[str] = None
    entities: Optional[list[MessageEntity]] = None
    caption: Optional[str] = None
    caption_entities: Optional[list[MessageEntity]] = None
    forward_origin: Optional[MessageOrigin] = None
    forward_from_chat: Optional[Chat] = None
    document: Optional[Document] = None
    photo: Optional[list[PhotoSize]] = None
    video: Optional[Video] = None
    media_group_id: Optional[str] = None
    reply_markup: Optional[InlineKeyboardMarkup] = None
    effect_id: Optional[str] = None
    link_preview_options: Optional[LinkPreviewOptions] = None


class InaccessibleMessage(TelegramObject):
    """A message that was deleted or is otherwise no longer available to the bot."""

    chat: Chat
    message_id: int
    date: Literal[0] = 0


def _message_kind(value: Any) -> str:
    date = value.get("date") if isinstance(value, dict) else getattr(value, "date", None)
    return "inaccessible" if date == 0 else "message"


MaybeInaccessibleMessage = Annotated[
    Union[
        Annotated[Message, Tag("message")],
        Annotated[InaccessibleMessage, Tag("inaccessible")],
    ],
    Discriminator(_message_kind),
]


class CallbackQuery(TelegramObject):
    id: str
    from_user: User = Field(alias="from")
    message: Optional[MaybeInaccessibleMessage] = None
    inline_message_id: Optional[str] = None
    chat_instance: str
    data: Optional[str] = None
    game_short_name: Optional[str] = None

    async def answer(self, **kwargs: Any) -> bool:
        """
        Answer this query (``text``, ``show_alert``, ``url``, ``cache_time``).

        Clients show a progress bar until the query is answered.
        """
        return await self.get_bot().answer_callback_query(self.id, **kwargs)


UPDATE_PAYLOAD_FIELDS = (
    "message",
    "edited_message",
    "channel_post",
    "edited_channel_post",
    "callback_query",
)


class Update(TelegramObject):
    """
    One incoming update.

    ``update_id`` increases sequentially; at most one of the payload fields
    is populated.
    """

    update_id: int
    message: Optional[Message] = None
    edited_message: Optional[Message] = None
    channel_post: Optional[Message] = None
    edited_channel_post: Optional[Message] = None
    callback_query: Optional[CallbackQuery] = None

    @property
    def payload_kind(self) -> Optional[str]:
        """Name of the populated payload field, or None for unsupported updates."""
        for name in UPDATE_PAYLOAD_FIELDS:
            if getattr(self, name) is not None:
                return name
        return None

    @property
    def effective_message(self) -> Optional[Message]:
        for candidate in (self.message, self.edited_message, self.channel_post, self.edited_channel_post):
            if candidate is not None:
                return candidate
        if self.callback_query is not None and isinstance(self.callback_query.message, Message):
            return self.callback_query.message
        return None

    @property
    def effective_chat(self) -> Optional[Chat]:
        message = self.effective_message
        if message is not None:
            return message.chat
        if self.callback_query is not None and self.callback_query.message is not None:
            return self.callback_query.message.chat
        return None

    @property
    def effective_user(self) -> Optional[User]:
        if self.callback_query is not None:
            return self.callback_query.from_user
        message = self.effective_message
        return message.from_user if message is not None else None


class WebhookInfo(TelegramObject):
    url: str
    has_custom_certificate: bool
    pending_update_count: int
    ip_address: Optional[str] = None
    last_error_date: Optional[int] = None
    last_error_message: Optional[str] = None
    last_synchronization_error_date: Optional[int] = None
    max_connections: Optional[int] = None
    allowed_updates: Optional[list[str]] = None
