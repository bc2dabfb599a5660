"""
Bot API constants: chat actions, parse modes, message effects and the
filter tags understood by ``MessageHandler``.
"""

from enum import Enum


class ChatAction(str, Enum):
    """Tell the user that something is happening on the bot's side."""

    TYPING = "typing"
    UPLOAD_PHOTO = "upload_photo"
    RECORD_VIDEO = "record_video"
    UPLOAD_VIDEO = "upload_video"
    RECORD_VOICE = "record_voice"
    UPLOAD_VOICE = "upload_voice"
    UPLOAD_DOCUMENT = "upload_document"
    CHOOSE_STICKER = "choose_sticker"
    FIND_LOCATION = "find_location"
    RECORD_VIDEO_NOTE = "record_video_note"
    UPLOAD_VIDEO_NOTE = "upload_video_note"


class ParseMode(str, Enum):
    """Formatting options for message text and captions."""

    HTML = "HTML"
    MARKDOWN = "Markdown"
    MARKDOWN_V2 = "MarkdownV2"


class MessageEffect(str, Enum):
    """Effect ids usable as ``message_effect_id`` in private chats."""

    FIRE = "5104841245755180586"
    THUMBS_UP = "5107584321108051014"
    HEART = "5044134455711629726"
    PARTY = "5046509860389126442"
    THUMBS_DOWN = "5104858069142078462"
    POOP = "5046589136895476101"


class Filters(str, Enum):
    """Message content categories a ``MessageHandler`` can filter on."""

    TEXT = "text"
    ALL = "all"
    PHOTO = "photo"
    VIDEO = "video"
    DOCUMENT = "document"
