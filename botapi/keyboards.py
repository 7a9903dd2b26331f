"""Inline keyboard models and button variant resolution.

An :class:`InlineKeyboardButton` carries its kind implicitly: whichever of its
mutually exclusive optional fields is set decides what the button does.  The
kind is derived on read (:func:`classify`) and never serialised; the wire
payload simply holds the fields that are set.

Construction helpers (``InlineKeyboardButton.with_url(...)`` and friends) build
single-variant buttons.  Nothing stops a caller from setting two exclusive
fields directly; :func:`classify` then returns the first one in priority order,
and :meth:`InlineKeyboardButton.validate_exclusive` /
:meth:`InlineKeyboardButton.strict` are available to reject that state eagerly.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, List, Optional, Tuple

from pydantic import BaseModel

from botapi.exceptions import ArgumentError


class InlineKeyboardButtonType(str, Enum):
    """Derived kind of an inline keyboard button."""

    URL = "url"
    LOGIN_URL = "login_url"
    CALLBACK_DATA = "callback_data"
    SWITCH_INLINE_QUERY = "switch_inline_query"
    SWITCH_INLINE_QUERY_CURRENT_CHAT = "switch_inline_query_current_chat"
    CALLBACK_GAME = "callback_game"
    PAY = "pay"
    WEB_APP = "web_app"
    UNKNOWN = "unknown"


# Priority order used by classify(); the first non-absent field wins.
BUTTON_VARIANT_FIELDS: Tuple[Tuple[str, InlineKeyboardButtonType], ...] = (
    ("url", InlineKeyboardButtonType.URL),
    ("login_url", InlineKeyboardButtonType.LOGIN_URL),
    ("callback_data", InlineKeyboardButtonType.CALLBACK_DATA),
    ("switch_inline_query", InlineKeyboardButtonType.SWITCH_INLINE_QUERY),
    ("switch_inline_query_current_chat", InlineKeyboardButtonType.SWITCH_INLINE_QUERY_CURRENT_CHAT),
    ("callback_game", InlineKeyboardButtonType.CALLBACK_GAME),
    ("pay", InlineKeyboardButtonType.PAY),
    ("web_app", InlineKeyboardButtonType.WEB_APP),
)


class LoginUrl(BaseModel):
    """Parameters of a button that authorises the user through a login URL."""

    url: str
    forward_text: Optional[str] = None
    bot_username: Optional[str] = None
    request_write_access: Optional[bool] = None

    model_config = {"populate_by_name": True, "frozen": True}


class CallbackGame(BaseModel):
    """Placeholder; holds no information."""

    model_config = {"populate_by_name": True, "frozen": True}


class WebAppInfo(BaseModel):
    """Describes a Web App."""

    url: str

    model_config = {"populate_by_name": True, "frozen": True}


class InlineKeyboardButton(BaseModel):
    """One button of an inline keyboard. Exactly one optional field should be set."""

    text: str
    url: Optional[str] = None
    login_url: Optional[LoginUrl] = None
    callback_data: Optional[str] = None
    switch_inline_query: Optional[str] = None
    switch_inline_query_current_chat: Optional[str] = None
    callback_game: Optional[CallbackGame] = None
    pay: Optional[bool] = None
    web_app: Optional[WebAppInfo] = None

    model_config = {"populate_by_name": True, "frozen": True}

    @property
    def type(self) -> InlineKeyboardButtonType:
        """Derived button kind; see :func:`classify`."""
        return classify(self)

    def variant_fields(self) -> List[str]:
        """Names of every exclusive field that is currently set."""
        return [name for name, _ in BUTTON_VARIANT_FIELDS if getattr(self, name) is not None]

    def validate_exclusive(self) -> "InlineKeyboardButton":
        """Return ``self`` if at most one exclusive field is set.

        Raises:
            ArgumentError: If two or more mutually exclusive fields are set.
        """
        present = self.variant_fields()
        if len(present) > 1:
            raise ArgumentError(
                f"Inline keyboard button '{self.text}' sets mutually exclusive fields: {', '.join(present)}"
            )
        return self

    @classmethod
    def strict(cls, text: str, **fields: Any) -> "InlineKeyboardButton":
        """Build a button and reject it unless exactly one exclusive field is set."""
        button = cls(text=text, **fields).validate_exclusive()
        if not button.variant_fields():
            raise ArgumentError(f"Inline keyboard button '{text}' needs one of: {', '.join(n for n, _ in BUTTON_VARIANT_FIELDS)}")
        return button

    # -- Single-variant constructors ------------------------------------

    @classmethod
    def with_url(cls, text: str, url: str) -> "InlineKeyboardButton":
        return cls(text=text, url=url)

    @classmethod
    def with_login_url(cls, text: str, login_url: LoginUrl) -> "InlineKeyboardButton":
        return cls(text=text, login_url=login_url)

    @classmethod
    def with_callback_data(cls, text: str, callback_data: str) -> "InlineKeyboardButton":
        return cls(text=text, callback_data=callback_data)

    @classmethod
    def with_switch_inline_query(cls, text: str, query: str) -> "InlineKeyboardButton":
        return cls(text=text, switch_inline_query=query)

    @classmethod
    def with_switch_inline_query_current_chat(cls, text: str, query: str) -> "InlineKeyboardButton":
        return cls(text=text, switch_inline_query_current_chat=query)

    @classmethod
    def with_callback_game(cls, text: str, callback_game: Optional[CallbackGame] = None) -> "InlineKeyboardButton":
        return cls(text=text, callback_game=callback_game or CallbackGame())

    @classmethod
    def with_pay(cls, text: str) -> "InlineKeyboardButton":
        return cls(text=text, pay=True)

    @classmethod
    def with_web_app(cls, text: str, web_app: WebAppInfo) -> "InlineKeyboardButton":
        return cls(text=text, web_app=web_app)


def classify(button: InlineKeyboardButton) -> InlineKeyboardButtonType:
    """Return the kind of *button*.

    Fields are checked in :data:`BUTTON_VARIANT_FIELDS` order and the first
    non-absent one wins; :attr:`InlineKeyboardButtonType.UNKNOWN` when none is set.
    """
    for name, tag in BUTTON_VARIANT_FIELDS:
        if getattr(button, name) is not None:
            return tag
    return InlineKeyboardButtonType.UNKNOWN


class InlineKeyboardMarkup(BaseModel):
    """An inline keyboard that appears right next to the message it belongs to."""

    inline_keyboard: List[List[InlineKeyboardButton]]

    model_config = {"populate_by_name": True}

    @classmethod
    def from_rows(cls, *rows: List[InlineKeyboardButton]) -> "InlineKeyboardMarkup":
        return cls(inline_keyboard=[list(row) for row in rows])

    def validate_exclusive(self) -> "InlineKeyboardMarkup":
        """Run :meth:`InlineKeyboardButton.validate_exclusive` on every button."""
        for row in self.inline_keyboard:
            for button in row:
                button.validate_exclusive()
        return self
