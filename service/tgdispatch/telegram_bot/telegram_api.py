"""
Telegram Bot API methods.

``Bot`` is the session value handed to every handler callback. It owns the
``TelegramClient`` (token + endpoint) so nothing in the package depends on
global credentials.
"""

from typing import Any, Optional, TypeVar, Union

from .api_client import TelegramClient
from .constants import ChatAction
from .inputs import InputFile, InputMedia
from .types import File, Message, TelegramObject, WebhookInfo

ChatId = Union[int, str]
T = TypeVar("T", bound=TelegramObject)


class Bot:
    """
    A bot session.

    Every method maps to the Bot API method of the same name. Optional API
    parameters that are not listed explicitly can be passed as keyword
    arguments and are forwarded unchanged.
    """

    def __init__(self, client: TelegramClient):
        self.client = client
        # Free-form key/value storage shared by all handlers of this bot
        self.user_data: dict[Any, Any] = {}

    @classmethod
    def from_token(cls, token: str, **client_options: Any) -> "Bot":
        return cls(TelegramClient(token, **client_options))

    @property
    def token(self) -> str:
        return self.client.token

    async def send_message(
        self,
        chat_id: ChatId,
        text: str,
        parse_mode: Optional[str] = None,
        reply_markup: Any = None,
        **kwargs: Any,
    ) -> Message:
        """
        Send text message to a chat.

        Args:
            chat_id: Telegram chat ID or @channel username
            text: Message text
            parse_mode: Optional parse mode (HTML, Markdown, MarkdownV2)
            reply_markup: Optional inline keyboard

        Returns:
            The sent Message
        """
        result = await self.client.request("sendMessage", {
            "chat_id": chat_id,
            "text": text,
            "parse_mode": parse_mode,
            "reply_markup": reply_markup,
            **kwargs,
        })
        return self._parse(Message, result)

    async def delete_message(self, chat_id: ChatId, message_id: int) -> bool:
        """Delete a message. Returns True on success."""
        return await self.client.request("deleteMessage", {
            "chat_id": chat_id,
            "message_id": message_id,
        })

    async def send_document(
        self,
        chat_id: ChatId,
        document: Union[InputFile, str],
        caption: Optional[str] = None,
        **kwargs: Any,
    ) -> Message:
        """Send a general file (InputFile upload, file_id or HTTP URL)."""
        result = await self.client.request("sendDocument", {
            "chat_id": chat_id,
            "document": document,
            "caption": caption,
            **kwargs,
        })
        return self._parse(Message, result)

    async def send_photo(
        self,
        chat_id: ChatId,
        photo: Union[InputFile, str],
        caption: Optional[str] = None,
        **kwargs: Any,
    ) -> Message:
        result = await self.client.request("sendPhoto", {
            "chat_id": chat_id,
            "photo": photo,
            "caption": caption,
            **kwargs,
        })
        return self._parse(Message, result)

    async def send_video(
        self,
        chat_id: ChatId,
        video: Union[InputFile, str],
        caption: Optional[str] = None,
        **kwargs: Any,
    ) -> Message:
        result = await self.client.request("sendVideo", {
            "chat_id": chat_id,
            "video": video,
            "caption": caption,
            **kwargs,
        })
        return self._parse(Message, result)

    async def send_media_group(
        self,
        chat_id: ChatId,
        media: list[InputMedia],
        **kwargs: Any,
    ) -> list[Message]:
        """Send 2-10 photos, videos, documents or audios as an album."""
        result = await self.client.request("sendMediaGroup", {
            "chat_id": chat_id,
            "media": media,
            **kwargs,
        })
        return [self._parse(Message, item) for item in result]

    async def get_file(self, file_id: str) -> File:
        """Prepare a file for downloading (up to 20MB)."""
        result = await self.client.request("getFile", {"file_id": file_id})
        return self._parse(File, result)

    async def download_file(self, file: Union[File, str]) -> bytes:
        """
        Download file content.

        Args:
            file: A File returned by get_file, or a file_id
        """
        if isinstance(file, str):
            file = await self.get_file(file)
        if not file.file_path:
            raise ValueError(f"File {file.file_id} has no file_path; call get_file first")
        return await self.client.download(file.file_path)

    async def edit_message_text(
        self,
        text: str,
        chat_id: Optional[ChatId] = None,
        message_id: Optional[int] = None,
        inline_message_id: Optional[str] = None,
        parse_mode: Optional[str] = None,
        reply_markup: Any = None,
        **kwargs: Any,
    ) -> Union[Message, bool]:
        """
        Edit text of an existing message.

        Returns:
            The edited Message, or True for inline messages
        """
        result = await self.client.request("editMessageText", {
            "chat_id": chat_id,
            "message_id": message_id,
            "inline_message_id": inline_message_id,
            "text": text,
            "parse_mode": parse_mode,
            "reply_markup": reply_markup,
            **kwargs,
        })
        return self._message_or_bool(result)

    async def edit_message_media(
        self,
        media: InputMedia,
        chat_id: Optional[ChatId] = None,
        message_id: Optional[int] = None,
        inline_message_id: Optional[str] = None,
        reply_markup: Any = None,
    ) -> Union[Message, bool]:
        result = await self.client.request("editMessageMedia", {
            "chat_id": chat_id,
            "message_id": message_id,
            "inline_message_id": inline_message_id,
            "media": media,
            "reply_markup": reply_markup,
        })
        return self._message_or_bool(result)

    async def send_chat_action(
        self,
        chat_id: ChatId,
        action: Union[ChatAction, str] = ChatAction.TYPING,
        message_thread_id: Optional[int] = None,
    ) -> bool:
        """Send chat action (typing indicator); lasts 5 seconds or less."""
        return await self.client.request("sendChatAction", {
            "chat_id": chat_id,
            "action": action,
            "message_thread_id": message_thread_id,
        })

    async def answer_callback_query(
        self,
        callback_query_id: str,
        text: Optional[str] = None,
        show_alert: Optional[bool] = None,
        url: Optional[str] = None,
        cache_time: Optional[int] = None,
    ) -> bool:
        """Answer a callback query from an inline keyboard button."""
        return await self.client.request("answerCallbackQuery", {
            "callback_query_id": callback_query_id,
            "text": text,
            "show_alert": show_alert,
            "url": url,
            "cache_time": cache_time,
        })

    async def set_webhook(
        self,
        url: str,
        drop_pending_updates: bool = True,
        secret_token: Optional[str] = None,
        **kwargs: Any,
    ) -> bool:
        """Register the URL Telegram should deliver updates to."""
        return await self.client.request("setWebhook", {
            "url": url,
            "drop_pending_updates": drop_pending_updates,
            "secret_token": secret_token,
            **kwargs,
        })

    async def delete_webhook(self, drop_pending_updates: Optional[bool] = None) -> bool:
        """Remove webhook integration (e.g. to switch back to getUpdates)."""
        return await self.client.request("deleteWebhook", {
            "drop_pending_updates": drop_pending_updates,
        })

    async def get_webhook_info(self) -> WebhookInfo:
        result = await self.client.request("getWebhookInfo")
        return self._parse(WebhookInfo, result)

    async def close(self) -> None:
        await self.client.close()

    def _parse(self, model: type[T], result: Any) -> T:
        # Parsed views keep a reference to this session for their shortcut methods
        return model.model_validate(result, context={"bot": self})

    def _message_or_bool(self, result: Any) -> Union[Message, bool]:
        if isinstance(result, bool):
            return result
        return self._parse(Message, result)

