"""
Bot application: a Bot session plus its Dispatcher.

Build one explicitly and pass it around; there is no global instance:

    application = Application.builder().token(token).build()
    application.add_handler(CommandHandler("start", start))
    await application.process_update(update_data)
"""

from collections.abc import Mapping
from typing import Any, Optional

import httpx

from ..config import Settings, get_settings
from .api_client import DEFAULT_API_URL, TelegramClient
from .dispatcher import Dispatcher
from .handlers import BaseHandler
from .logging_config import bot_logger as logger, set_log_level
from .telegram_api import Bot
from .types import WebhookInfo


class ApplicationBuilder:
    """Fluent builder for Application."""

    def __init__(self) -> None:
        self._token: Optional[str] = None
        self._base_url: str = DEFAULT_API_URL
        self._timeout: float = 60.0
        self._transport: Optional[httpx.AsyncBaseTransport] = None

    def token(self, token: str) -> "ApplicationBuilder":
        self._token = token
        return self

    def base_url(self, base_url: str) -> "ApplicationBuilder":
        self._base_url = base_url
        return self

    def timeout(self, timeout: float) -> "ApplicationBuilder":
        self._timeout = timeout
        return self

    def transport(self, transport: httpx.AsyncBaseTransport) -> "ApplicationBuilder":
        """Use a custom httpx transport (mock transports in tests, proxies)."""
        self._transport = transport
        return self

    def build(self) -> "Application":
        if not self._token:
            raise ValueError("Bot token is not set; call .token() before .build()")
        client = TelegramClient(
            self._token,
            base_url=self._base_url,
            timeout=self._timeout,
            transport=self._transport,
        )
        return Application(Bot(client))


class Application:
    """Telegram bot application."""

    def __init__(self, bot: Bot):
        self.bot = bot
        self.dispatcher = Dispatcher(bot)

    @staticmethod
    def builder() -> ApplicationBuilder:
        return ApplicationBuilder()

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "Application":
        """Create application from environment settings."""
        settings = settings or get_settings()
        set_log_level(settings.log_level)

        application = (
            cls.builder()
            .token(settings.telegram_bot_token)
            .base_url(settings.telegram_api_url)
            .timeout(settings.request_timeout)
            .build()
        )
        logger.info(f"Telegram bot application initialized ({settings.environment})")
        return application

    def add_handler(self, handler: BaseHandler) -> bool:
        return self.dispatcher.add_handler(handler)

    async def process_update(self, update_data: Mapping[str, Any]) -> None:
        """Process incoming update through handlers; handler errors propagate."""
        await self.dispatcher.dispatch(update_data)

    async def set_webhook(self, url: str, **kwargs: Any) -> bool:
        result = await self.bot.set_webhook(url, **kwargs)
        logger.info(f"Webhook set to {url}")
        return result

    async def delete_webhook(self) -> bool:
        result = await self.bot.delete_webhook()
        logger.info("Webhook deleted")
        return result

    async def get_webhook_info(self) -> WebhookInfo:
        return await self.bot.get_webhook_info()

    async def shutdown(self) -> None:
        """Shutdown bot application (call on shutdown)."""
        await self.bot.close()
        logger.info("Bot shut down")


async def handle_telegram_update(application: Application, update_data: Mapping[str, Any]) -> None:
    """
    Process incoming webhook update from Telegram.

    Meant for fire-and-forget use (``asyncio.create_task``) in a webhook
    endpoint: failures are logged instead of raised.
    """
    try:
        await application.process_update(update_data)
    except Exception as e:
        logger.error(f"Failed to process update {update_data.get('update_id')}: {e}", exc_info=True)
