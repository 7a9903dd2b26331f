"""Pydantic data models for the Telegram Bot API.

Field names match the wire names, so ``model_dump(by_alias=True,
exclude_none=True)`` produces the exact JSON the API expects.  Two model
families are polymorphic and decode through :mod:`botapi.unions`:

* chat members, keyed by ``status`` -- see :data:`CHAT_MEMBER`;
* input media, keyed by ``type`` -- see :data:`INPUT_MEDIA`.

Use the :data:`ChatMember` and :data:`InputMedia` aliases as field or result
types; they accept raw JSON objects or already-built variants.
"""

from __future__ import annotations

import io
import mimetypes
import os
from typing import IO, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from botapi.keyboards import InlineKeyboardMarkup
from botapi.unions import UnionFamily


class ResponseParameters(BaseModel):
    """Describes why a request was unsuccessful."""

    migrate_to_chat_id: Optional[int] = None
    retry_after: Optional[int] = None

    model_config = {"populate_by_name": True}


class User(BaseModel):
    """This object represents a Telegram user or bot."""

    id: int
    is_bot: bool
    first_name: str
    last_name: Optional[str] = None
    username: Optional[str] = None
    language_code: Optional[str] = None
    is_premium: Optional[bool] = None
    can_join_groups: Optional[bool] = None
    can_read_all_group_messages: Optional[bool] = None
    supports_inline_queries: Optional[bool] = None

    model_config = {"populate_by_name": True}


class Chat(BaseModel):
    """This object represents a chat."""

    id: int
    type: str
    title: Optional[str] = None
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    is_forum: Optional[bool] = None

    model_config = {"populate_by_name": True}


class MessageEntity(BaseModel):
    """One special entity in a text message. For example, hashtags, usernames, URLs, etc."""

    type: str
    offset: int
    length: int
    url: Optional[str] = None
    user: Optional[User] = None
    language: Optional[str] = None
    custom_emoji_id: Optional[str] = None

    model_config = {"populate_by_name": True}


class PhotoSize(BaseModel):
    file_id: str
    file_unique_id: str
    width: int
    height: int
    file_size: Optional[int] = None

    model_config = {"populate_by_name": True}


class Document(BaseModel):
    """A general file (as opposed to photos, voice messages and audio files)."""

    file_id: str
    file_unique_id: str
    thumbnail: Optional[PhotoSize] = None
    file_name: Optional[str] = None
    mime_type: Optional[str] = None
    file_size: Optional[int] = None

    model_config = {"populate_by_name": True}


class Animation(BaseModel):
    """An animation file (GIF or H.264/MPEG-4 AVC video without sound)."""

    file_id: str
    file_unique_id: str
    width: int
    height: int
    duration: int
    thumbnail: Optional[PhotoSize] = None
    file_name: Optional[str] = None
    mime_type: Optional[str] = None
    file_size: Optional[int] = None

    model_config = {"populate_by_name": True}


class Message(BaseModel):
    """This object represents a message."""

    message_id: int
    date: int
    chat: Chat
    message_thread_id: Optional[int] = None
    from_field: Optional[User] = Field(None, alias="from")
    sender_chat: Optional[Chat] = None
    text: Optional[str] = None
    entities: Optional[List[MessageEntity]] = None
    caption: Optional[str] = None
    caption_entities: Optional[List[MessageEntity]] = None
    document: Optional[Document] = None
    animation: Optional[Animation] = None
    photo: Optional[List[PhotoSize]] = None
    media_group_id: Optional[str] = None
    reply_markup: Optional[InlineKeyboardMarkup] = None

    model_config = {"populate_by_name": True}


class ChatPermissions(BaseModel):
    """Describes actions that a non-administrator user is allowed to take in a chat."""

    can_send_messages: Optional[bool] = None
    can_send_audios: Optional[bool] = None
    can_send_documents: Optional[bool] = None
    can_send_photos: Optional[bool] = None
    can_send_videos: Optional[bool] = None
    can_send_video_notes: Optional[bool] = None
    can_send_voice_notes: Optional[bool] = None
    can_send_polls: Optional[bool] = None
    can_send_other_messages: Optional[bool] = None
    can_add_web_page_previews: Optional[bool] = None
    can_change_info: Optional[bool] = None
    can_invite_users: Optional[bool] = None
    can_pin_messages: Optional[bool] = None
    can_manage_topics: Optional[bool] = None

    model_config = {"populate_by_name": True}


# ── Chat members (discriminated by ``status``) ──────────────────────────────


class ChatMemberBase(BaseModel):
    """Information about one member of a chat. Decode through :data:`CHAT_MEMBER`."""

    status: str
    user: User

    model_config = {"populate_by_name": True, "frozen": True}


class ChatMemberOwner(ChatMemberBase):
    """A chat member that owns the chat and has all administrator privileges."""

    status: Literal["creator"] = "creator"
    is_anonymous: bool
    custom_title: Optional[str] = None


class ChatMemberAdministrator(ChatMemberBase):
    """A chat member that has some additional privileges."""

    status: Literal["administrator"] = "administrator"
    can_be_edited: bool
    is_anonymous: bool
    can_manage_chat: bool
    can_delete_messages: bool
    can_manage_video_chats: bool
    can_restrict_members: bool
    can_promote_members: bool
    can_change_info: bool
    can_invite_users: bool
    can_post_messages: Optional[bool] = None
    can_edit_messages: Optional[bool] = None
    can_pin_messages: Optional[bool] = None
    can_manage_topics: Optional[bool] = None
    custom_title: Optional[str] = None


class ChatMemberMember(ChatMemberBase):
    """A chat member that has no additional privileges or restrictions."""

    status: Literal["member"] = "member"
    until_date: Optional[int] = None


class ChatMemberRestricted(ChatMemberBase):
    """A chat member that is under certain restrictions in the chat. Supergroups only."""

    status: Literal["restricted"] = "restricted"
    is_member: bool
    can_send_messages: bool
    can_send_audios: bool
    can_send_documents: bool
    can_send_photos: bool
    can_send_videos: bool
    can_send_video_notes: bool
    can_send_voice_notes: bool
    can_send_polls: bool
    can_send_other_messages: bool
    can_add_web_page_previews: bool
    can_change_info: bool
    can_invite_users: bool
    can_pin_messages: bool
    can_manage_topics: bool
    until_date: int


class ChatMemberLeft(ChatMemberBase):
    """A chat member that isn't currently a member of the chat, but may join it themselves."""

    status: Literal["left"] = "left"


class ChatMemberBanned(ChatMemberBase):
    """A chat member that was banned in the chat and can't return to the chat or view chat messages."""

    status: Literal["kicked"] = "kicked"
    until_date: int


CHAT_MEMBER: UnionFamily[ChatMemberBase] = UnionFamily(
    "ChatMember",
    ChatMemberBase,
    "status",
    {
        "creator": ChatMemberOwner,
        "administrator": ChatMemberAdministrator,
        "member": ChatMemberMember,
        "restricted": ChatMemberRestricted,
        "left": ChatMemberLeft,
        "kicked": ChatMemberBanned,
    },
)

ChatMember = CHAT_MEMBER.annotated()


# ── Input media (discriminated by ``type``) ──────────────────────────────────


class InputMediaBase(BaseModel):
    """Content of a media message to be sent. Decode through :data:`INPUT_MEDIA`.

    ``media`` is a file_id, an HTTP URL, or ``attach://<name>`` referring to an
    :class:`AttachedFile` uploaded in the same multipart request.
    """

    type: str
    media: str
    caption: Optional[str] = None
    parse_mode: Optional[str] = None
    caption_entities: Optional[List[MessageEntity]] = None

    model_config = {"populate_by_name": True, "frozen": True}


class InputMediaAnimation(InputMediaBase):
    type: Literal["animation"] = "animation"
    thumbnail: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    duration: Optional[int] = None
    has_spoiler: Optional[bool] = None


class InputMediaAudio(InputMediaBase):
    type: Literal["audio"] = "audio"
    thumbnail: Optional[str] = None
    duration: Optional[int] = None
    performer: Optional[str] = None
    title: Optional[str] = None


class InputMediaDocument(InputMediaBase):
    type: Literal["document"] = "document"
    thumbnail: Optional[str] = None
    disable_content_type_detection: Optional[bool] = None


class InputMediaPhoto(InputMediaBase):
    type: Literal["photo"] = "photo"
    has_spoiler: Optional[bool] = None


class InputMediaVideo(InputMediaBase):
    type: Literal["video"] = "video"
    thumbnail: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    duration: Optional[int] = None
    supports_streaming: Optional[bool] = None
    has_spoiler: Optional[bool] = None


INPUT_MEDIA: UnionFamily[InputMediaBase] = UnionFamily(
    "InputMedia",
    InputMediaBase,
    "type",
    {
        "animation": InputMediaAnimation,
        "audio": InputMediaAudio,
        "document": InputMediaDocument,
        "photo": InputMediaPhoto,
        "video": InputMediaVideo,
    },
)

InputMedia = INPUT_MEDIA.annotated()


# ── Files ────────────────────────────────────────────────────────────────────


class InputFile(BaseModel):
    """Raw file content to be uploaded with multipart/form-data.

    Never serialised into a JSON body: a bag holding an ``InputFile`` is always
    sent as a multipart form (see :mod:`botapi.transport`).
    """

    content: bytes
    filename: str
    content_type: Optional[str] = None

    model_config = {"frozen": True}

    @classmethod
    def from_path(cls, path: Union[str, "os.PathLike[str]"], filename: Optional[str] = None) -> "InputFile":
        """Read a file from disk."""
        with open(path, "rb") as fp:
            content = fp.read()
        name = filename or os.path.basename(os.fspath(path))
        return cls(content=content, filename=name, content_type=mimetypes.guess_type(name)[0])

    @classmethod
    def from_stream(cls, stream: IO[bytes], filename: str) -> "InputFile":
        """Read the rest of a binary stream."""
        if isinstance(stream, io.TextIOBase):
            raise TypeError("InputFile.from_stream needs a binary stream")
        return cls(content=stream.read(), filename=filename, content_type=mimetypes.guess_type(filename)[0])


class AttachedFile(BaseModel):
    """An extra multipart part, referenced from JSON fields as ``attach://<name>``."""

    name: str
    file: InputFile

    model_config = {"frozen": True}

    @property
    def attach_uri(self) -> str:
        return f"attach://{self.name}"


# ── Inline mode ──────────────────────────────────────────────────────────────


class InputTextMessageContent(BaseModel):
    """Content of a text message to be sent as the result of an inline query."""

    message_text: str
    parse_mode: Optional[str] = None
    entities: Optional[List[MessageEntity]] = None
    disable_web_page_preview: Optional[bool] = None

    model_config = {"populate_by_name": True}


class InputLocationMessageContent(BaseModel):
    """Content of a location message to be sent as the result of an inline query."""

    latitude: float
    longitude: float
    horizontal_accuracy: Optional[float] = None
    live_period: Optional[int] = None
    heading: Optional[int] = None
    proximity_alert_radius: Optional[int] = None

    model_config = {"populate_by_name": True}


InputMessageContent = Union[InputTextMessageContent, InputLocationMessageContent]


class InlineQueryResult(BaseModel):
    """One result of an inline query."""

    type: str
    id: str
    reply_markup: Optional[InlineKeyboardMarkup] = None

    model_config = {"populate_by_name": True}


class InlineQueryResultArticle(InlineQueryResult):
    """A link to an article or web page."""

    type: Literal["article"] = "article"
    title: str
    input_message_content: InputMessageContent
    url: Optional[str] = None
    hide_url: Optional[bool] = None
    description: Optional[str] = None


class InlineQueryResultCachedPhoto(InlineQueryResult):
    """A link to a photo stored on the Telegram servers."""

    type: Literal["photo"] = "photo"
    photo_file_id: str
    title: Optional[str] = None
    description: Optional[str] = None
    caption: Optional[str] = None
    parse_mode: Optional[str] = None
    caption_entities: Optional[List[MessageEntity]] = None
    input_message_content: Optional[InputMessageContent] = None


__all__ = [
    "ResponseParameters",
    "User",
    "Chat",
    "MessageEntity",
    "PhotoSize",
    "Document",
    "Animation",
    "Message",
    "ChatPermissions",
    "ChatMemberBase",
    "ChatMemberOwner",
    "ChatMemberAdministrator",
    "ChatMemberMember",
    "ChatMemberRestricted",
    "ChatMemberLeft",
    "ChatMemberBanned",
    "CHAT_MEMBER",
    "ChatMember",
    "InputMediaBase",
    "InputMediaAnimation",
    "InputMediaAudio",
    "InputMediaDocument",
    "InputMediaPhoto",
    "InputMediaVideo",
    "INPUT_MEDIA",
    "InputMedia",
    "InputFile",
    "AttachedFile",
    "InputTextMessageContent",
    "InputLocationMessageContent",
    "InputMessageContent",
    "InlineQueryResult",
    "InlineQueryResultArticle",
    "InlineQueryResultCachedPhoto",
]
