"""
Outbound upload values: files and media group items.

An ``InputFile`` is sent as ``multipart/form-data``. Inside ``InputMedia``
items a file is referenced as ``attach://<name>`` and uploaded under that
name in the same request.
"""

from pathlib import Path
from typing import IO, Any, Literal, Optional, Union

from pydantic import ConfigDict

from .types import MessageEntity, TelegramObject


class InputFile:
    """The contents of a file to be uploaded (path, raw bytes or binary file object)."""

    def __init__(self, obj: Union[str, Path, bytes, IO[bytes]], filename: Optional[str] = None):
        self._path: Optional[Path] = None
        self._content: Optional[bytes] = None

        if isinstance(obj, (str, Path)):
            self._path = Path(obj)
            self.filename = filename or self._path.name
        elif isinstance(obj, bytes):
            self._content = obj
            self.filename = filename or "file"
        else:
            self._content = obj.read()
            self.filename = filename or Path(getattr(obj, "name", "file")).name

    def read(self) -> bytes:
        """Return the file content; paths are read at upload time."""
        if self._content is not None:
            return self._content
        return self._path.read_bytes()

    def __repr__(self) -> str:
        return f"<InputFile {self.filename}>"


class InputMedia(TelegramObject):
    """Base for the items of ``send_media_group`` and ``edit_message_media``."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    type: str
    media: Union[str, InputFile]
    caption: Optional[str] = None
    parse_mode: Optional[str] = None
    caption_entities: Optional[list[MessageEntity]] = None

    def to_dict(self, files: Optional[dict[str, InputFile]] = None) -> dict[str, Any]:
        """
        Serialize for the wire.

        Args:
            files: Collector for uploads. Every ``InputFile`` found in ``media``
                or ``thumbnail`` is added to it and replaced by its
                ``attach://`` reference.

        Raises:
            ValueError: If an ``InputFile`` is present but no collector was given.
        """
        payload = self.model_dump(
            mode="json", by_alias=True, exclude_none=True, exclude={"media", "thumbnail"}
        )
        for name in ("media", "thumbnail"):
            value = getattr(self, name, None)
            if value is None:
                continue
            if isinstance(value, InputFile):
                if files is None:
                    raise ValueError(f"{type(self).__name__}.{name} holds a file and needs a multipart upload")
                attach_name = f"file{len(files)}"
                files[attach_name] = value
                payload[name] = f"attach://{attach_name}"
            else:
                payload[name] = value
        return payload


class InputMediaPhoto(InputMedia):
    type: Literal["photo"] = "photo"
    show_caption_above_media: Optional[bool] = None
    has_spoiler: Optional[bool] = None


class InputMediaVideo(InputMedia):
    type: Literal["video"] = "video"
    thumbnail: Optional[Union[str, InputFile]] = None
    show_caption_above_media: Optional[bool] = None
    width: Optional[int] = None
    height: Optional[int] = None
    duration: Optional[int] = None
    supports_streaming: Optional[bool] = None
    has_spoiler: Optional[bool] = None


class InputMediaAnimation(InputMedia):
    type: Literal["animation"] = "animation"
    thumbnail: Optional[Union[str, InputFile]] = None
    show_caption_above_media: Optional[bool] = None
    width: Optional[int] = None
    height: Optional[int] = None
    duration: Optional[int] = None
    has_spoiler: Optional[bool] = None


class InputMediaAudio(InputMedia):
    type: Literal["audio"] = "audio"
    thumbnail: Optional[Union[str, InputFile]] = None
    duration: Optional[int] = None
    performer: Optional[str] = None
    title: Optional[str] = None


class InputMediaDocument(InputMedia):
    type: Literal["document"] = "document"
    thumbnail: Optional[Union[str, InputFile]] = None
    disable_content_type_detection: Optional[bool] = None
