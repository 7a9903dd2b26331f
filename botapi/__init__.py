"""Typed Telegram Bot API client -- pydantic models, JSON/multipart transport, RPC envelope handling.

Usage::

    from botapi import BotClient, BotRequestError
    from botapi.models import ChatPermissions

    client = BotClient("123456:ABC-DEF")
    client.restrict_chat_member(-100123, 42, ChatPermissions(can_send_messages=False))
"""

from botapi.client import BotClient, get_default_session, set_default_session
from botapi.config import ClientConfig
from botapi.envelope import BotResponse, parse_envelope
from botapi.exceptions import (
    ArgumentError,
    BotAPIError,
    BotRequestError,
    DecodeError,
    EncodingError,
    TransportError,
)
from botapi.keyboards import InlineKeyboardButton, InlineKeyboardButtonType, InlineKeyboardMarkup, classify
from botapi.logger import BotAPILogger
from botapi.transport import JsonBody, MultipartForm, choose_transport
from botapi.unions import UnionFamily, decode_union, encode_union

__version__ = "0.1.0"

__all__ = [
    "BotClient",
    "ClientConfig",
    "get_default_session",
    "set_default_session",
    "BotResponse",
    "parse_envelope",
    "BotAPIError",
    "ArgumentError",
    "BotRequestError",
    "DecodeError",
    "EncodingError",
    "TransportError",
    "InlineKeyboardButton",
    "InlineKeyboardButtonType",
    "InlineKeyboardMarkup",
    "classify",
    "BotAPILogger",
    "JsonBody",
    "MultipartForm",
    "choose_transport",
    "UnionFamily",
    "decode_union",
    "encode_union",
]
