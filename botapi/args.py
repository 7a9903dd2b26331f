"""Parameter bags for Bot API calls.

A parameter bag is a pydantic model whose field names are the wire names of
one remote method's arguments.  Each bag class gets a static field descriptor
table (:attr:`BotArgs.field_table`) when the class is defined: one
:class:`FieldDescriptor` per wire field, in declaration order, recording the
wire name, the field kind and how to pull the value out of an instance.  The
transport layer walks that table instead of introspecting instances.

Bags that may upload raw bytes subclass :class:`MultipartArgs`; they also
carry an ``attach_files`` list of :class:`~botapi.models.AttachedFile`
entries that are sent as extra multipart parts.
"""

from __future__ import annotations

import operator
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, ClassVar, Iterator, List, Optional, Tuple, Union, get_args, get_origin

from pydantic import BaseModel, Field, SerializeAsAny

from botapi.keyboards import InlineKeyboardMarkup
from botapi.models import (
    AttachedFile,
    ChatPermissions,
    InlineQueryResult,
    InputFile,
    InputMedia,
    MessageEntity,
)

ChatId = Union[int, str]


class FieldKind(str, Enum):
    """How a field is treated when a bag is encoded."""

    SCALAR = "scalar"
    FILE = "file"
    COMPOSITE = "composite"


@dataclass(frozen=True)
class FieldDescriptor:
    """Static description of one wire field of a parameter bag."""

    attribute: str
    wire_name: Optional[str]
    kind: FieldKind
    extract: Callable[[Any], Any]


_SCALARS = (str, int, float, bool)


def _mentions(annotation: Any, target: type) -> bool:
    if annotation is target:
        return True
    return any(_mentions(arg, target) for arg in get_args(annotation))


def _is_scalar(annotation: Any) -> bool:
    if annotation in _SCALARS:
        return True
    if get_origin(annotation) is not Union:
        return False
    args = [a for a in get_args(annotation) if a is not type(None)]
    return all(a in _SCALARS for a in args)


def field_kind(annotation: Any) -> FieldKind:
    """Classify a field annotation as file-capable, scalar or composite."""
    if _mentions(annotation, InputFile):
        return FieldKind.FILE
    if _is_scalar(annotation):
        return FieldKind.SCALAR
    return FieldKind.COMPOSITE


def build_field_table(model: type) -> Tuple[FieldDescriptor, ...]:
    """Build the descriptor table for a pydantic model class.

    Fields declared with ``exclude=True`` are not wire fields and are skipped.
    """
    table = []
    for name, info in model.model_fields.items():
        if info.exclude:
            continue
        table.append(
            FieldDescriptor(
                attribute=name,
                wire_name=info.serialization_alias or info.alias or name,
                kind=field_kind(info.annotation),
                extract=operator.attrgetter(name),
            )
        )
    return tuple(table)


class BotArgs(BaseModel):
    """Base class for parameter bags sent as a JSON body."""

    supports_multipart: ClassVar[bool] = False
    field_table: ClassVar[Tuple[FieldDescriptor, ...]] = ()

    model_config = {"populate_by_name": True, "arbitrary_types_allowed": True}

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs: Any) -> None:
        super().__pydantic_init_subclass__(**kwargs)
        # A subclass may declare its own table explicitly.
        if "field_table" not in cls.__dict__:
            cls.field_table = build_field_table(cls)

    def iter_wire_fields(self) -> Iterator[Tuple[FieldDescriptor, Any]]:
        """Yield ``(descriptor, value)`` for every non-absent wire field, in order."""
        for descriptor in self.field_table:
            value = descriptor.extract(self)
            if value is not None:
                yield descriptor, value

    def attached_files(self) -> List[AttachedFile]:
        return []

    def has_binary_payload(self) -> bool:
        """True when any wire field holds raw file content."""
        return any(isinstance(value, InputFile) for _, value in self.iter_wire_fields())


class MultipartArgs(BotArgs):
    """Parameter bag that may be sent as multipart/form-data."""

    supports_multipart: ClassVar[bool] = True

    attach_files: List[AttachedFile] = Field(default_factory=list, exclude=True)

    def attached_files(self) -> List[AttachedFile]:
        return list(self.attach_files)

    def use_multipart(self) -> bool:
        return self.has_binary_payload() or bool(self.attach_files)


# ── Chat administration ──────────────────────────────────────────────────────


class RestrictChatMemberArgs(BotArgs):
    chat_id: ChatId
    user_id: int
    permissions: ChatPermissions
    use_independent_chat_permissions: Optional[bool] = None
    until_date: Optional[int] = None


class PromoteChatMemberArgs(BotArgs):
    chat_id: ChatId
    user_id: int
    is_anonymous: Optional[bool] = None
    can_manage_chat: Optional[bool] = None
    can_post_messages: Optional[bool] = None
    can_edit_messages: Optional[bool] = None
    can_delete_messages: Optional[bool] = None
    can_manage_video_chats: Optional[bool] = None
    can_restrict_members: Optional[bool] = None
    can_promote_members: Optional[bool] = None
    can_change_info: Optional[bool] = None
    can_invite_users: Optional[bool] = None
    can_pin_messages: Optional[bool] = None
    can_manage_topics: Optional[bool] = None


class GetChatMemberArgs(BotArgs):
    chat_id: ChatId
    user_id: int


class GetChatAdministratorsArgs(BotArgs):
    chat_id: ChatId


# ── Messages ─────────────────────────────────────────────────────────────────


class SendMessageArgs(BotArgs):
    chat_id: ChatId
    text: str
    message_thread_id: Optional[int] = None
    parse_mode: Optional[str] = None
    entities: Optional[List[MessageEntity]] = None
    disable_web_page_preview: Optional[bool] = None
    disable_notification: Optional[bool] = None
    protect_content: Optional[bool] = None
    reply_to_message_id: Optional[int] = None
    allow_sending_without_reply: Optional[bool] = None
    reply_markup: Optional[InlineKeyboardMarkup] = None


class SendDocumentArgs(MultipartArgs):
    chat_id: ChatId
    document: Union[InputFile, str]
    message_thread_id: Optional[int] = None
    thumbnail: Optional[Union[InputFile, str]] = None
    caption: Optional[str] = None
    parse_mode: Optional[str] = None
    caption_entities: Optional[List[MessageEntity]] = None
    disable_content_type_detection: Optional[bool] = None
    disable_notification: Optional[bool] = None
    protect_content: Optional[bool] = None
    reply_to_message_id: Optional[int] = None
    allow_sending_without_reply: Optional[bool] = None
    reply_markup: Optional[InlineKeyboardMarkup] = None


class SendAnimationArgs(MultipartArgs):
    chat_id: ChatId
    animation: Union[InputFile, str]
    message_thread_id: Optional[int] = None
    duration: Optional[int] = None
    width: Optional[int] = None
    height: Optional[int] = None
    thumbnail: Optional[Union[InputFile, str]] = None
    caption: Optional[str] = None
    parse_mode: Optional[str] = None
    caption_entities: Optional[List[MessageEntity]] = None
    has_spoiler: Optional[bool] = None
    disable_notification: Optional[bool] = None
    protect_content: Optional[bool] = None
    reply_to_message_id: Optional[int] = None
    allow_sending_without_reply: Optional[bool] = None
    reply_markup: Optional[InlineKeyboardMarkup] = None


class SendMediaGroupArgs(MultipartArgs):
    """Media entries reference uploads in ``attach_files`` as ``attach://<name>``."""

    chat_id: ChatId
    media: List[InputMedia]
    message_thread_id: Optional[int] = None
    disable_notification: Optional[bool] = None
    protect_content: Optional[bool] = None
    reply_to_message_id: Optional[int] = None
    allow_sending_without_reply: Optional[bool] = None


# ── Inline mode ──────────────────────────────────────────────────────────────


class AnswerInlineQueryArgs(BotArgs):
    inline_query_id: str
    results: List[SerializeAsAny[InlineQueryResult]]
    cache_time: Optional[int] = None
    is_personal: Optional[bool] = None
    next_offset: Optional[str] = None
