"""
Low-level Bot API client.

Holds the bot token and endpoint and exposes a single request primitive:
a method name plus parameters in, the parsed ``result`` out. Everything
typed lives one level up in ``telegram_api.Bot``.
"""

import json
from enum import Enum
from typing import Any, Optional

import httpx

from .errors import TelegramAPIError
from .inputs import InputFile, InputMedia
from .logging_config import bot_logger as logger
from .types import TelegramObject

DEFAULT_API_URL = "https://api.telegram.org"


class TelegramClient:
    """
    Client for the Telegram Bot API.

    Parameters are sent as JSON unless one of them is an ``InputFile``,
    in which case the request becomes ``multipart/form-data``.
    """

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_API_URL,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not token:
            raise ValueError("A bot token is required")
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.client = httpx.AsyncClient(timeout=timeout, transport=transport)

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/bot{self.token}"

    @property
    def file_endpoint(self) -> str:
        return f"{self.base_url}/file/bot{self.token}"

    async def request(self, method: str, params: Optional[dict[str, Any]] = None) -> Any:
        """
        Call a Bot API method.

        Args:
            method: Bot API method name, e.g. "sendMessage"
            params: Method parameters; ``None`` values are dropped

        Returns:
            The ``result`` field of the response

        Raises:
            TelegramAPIError: If Telegram answers with ``"ok": false``
            httpx.HTTPStatusError: If the response is an HTTP error without a JSON body
        """
        payload, files = _prepare_params(params or {})
        url = f"{self.endpoint}/{method}"

        if files:
            logger.debug(f"Calling {method} with {len(files)} file(s)")
            response = await self.client.post(
                url,
                data={key: _form_value(value) for key, value in payload.items()},
                files={name: (item.filename, item.read()) for name, item in files.items()},
            )
        else:
            logger.debug(f"Calling {method}")
            response = await self.client.post(url, json=payload)

        try:
            data = response.json()
        except ValueError:
            response.raise_for_status()
            raise

        if not data.get("ok"):
            logger.warning(f"{method} failed: {data.get('error_code')} {data.get('description')}")
            raise TelegramAPIError(
                method,
                data.get("description", "Unknown error"),
                error_code=data.get("error_code"),
                parameters=data.get("parameters"),
            )

        return data.get("result")

    async def download(self, file_path: str) -> bytes:
        """Download a file previously prepared with ``getFile``."""
        response = await self.client.get(f"{self.file_endpoint}/{file_path}")
        response.raise_for_status()
        return response.content

    async def close(self) -> None:
        """Close HTTP client."""
        await self.client.aclose()


def _prepare_params(params: dict[str, Any]) -> tuple[dict[str, Any], dict[str, InputFile]]:
    """Split parameters into a serializable payload and the files to upload."""
    payload: dict[str, Any] = {}
    files: dict[str, InputFile] = {}

    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, InputFile):
            files[key] = value
        else:
            payload[key] = _serialize(value, files)

    return payload, files


def _serialize(value: Any, files: dict[str, InputFile]) -> Any:
    if isinstance(value, InputMedia):
        return value.to_dict(files)
    if isinstance(value, TelegramObject):
        return value.to_dict()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return [_serialize(item, files) for item in value]
    if isinstance(value, dict):
        return {k: _serialize(v, files) for k, v in value.items() if v is not None}
    return value


def _form_value(value: Any) -> str:
    # Multipart fields are strings; nested objects travel JSON-encoded
    if isinstance(value, str):
        return value
    return json.dumps(value)
