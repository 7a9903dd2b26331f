"""Tests for inline keyboard buttons and variant classification."""

import sys
import os

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from botapi.exceptions import ArgumentError
from botapi.keyboards import (
    BUTTON_VARIANT_FIELDS,
    CallbackGame,
    InlineKeyboardButton,
    InlineKeyboardButtonType as T,
    InlineKeyboardMarkup,
    LoginUrl,
    WebAppInfo,
    classify,
)

SINGLE_FIELD_CASES = [
    ({"url": "https://example.com"}, T.URL),
    ({"login_url": LoginUrl(url="https://example.com/login")}, T.LOGIN_URL),
    ({"callback_data": "vote:1"}, T.CALLBACK_DATA),
    ({"switch_inline_query": "cats"}, T.SWITCH_INLINE_QUERY),
    ({"switch_inline_query_current_chat": "dogs"}, T.SWITCH_INLINE_QUERY_CURRENT_CHAT),
    ({"callback_game": CallbackGame()}, T.CALLBACK_GAME),
    ({"pay": True}, T.PAY),
    ({"web_app": WebAppInfo(url="https://example.com/app")}, T.WEB_APP),
]


# ── classify ─────────────────────────────────────────────────────────────────


class TestClassify:
    """First non-absent field in priority order decides the kind."""

    @pytest.mark.parametrize("fields, expected", SINGLE_FIELD_CASES)
    def test_single_field(self, fields: dict, expected: T) -> None:
        button = InlineKeyboardButton(text="b", **fields)
        assert classify(button) is expected
        assert button.type is expected

    def test_none_set_is_unknown(self) -> None:
        assert classify(InlineKeyboardButton(text="plain")) is T.UNKNOWN

    def test_first_in_priority_order_wins(self) -> None:
        button = InlineKeyboardButton(text="both", url="https://example.com", callback_data="x")
        assert classify(button) is T.URL

    def test_falsy_but_present_values_count(self) -> None:
        assert classify(InlineKeyboardButton(text="b", pay=False)) is T.PAY
        assert classify(InlineKeyboardButton(text="b", callback_data="")) is T.CALLBACK_DATA

    def test_type_is_not_serialised(self) -> None:
        button = InlineKeyboardButton.with_callback_data("Yes", "yes")
        assert button.model_dump(exclude_none=True) == {"text": "Yes", "callback_data": "yes"}

    def test_priority_table_order(self) -> None:
        assert [name for name, _ in BUTTON_VARIANT_FIELDS][:7] == [
            "url", "login_url", "callback_data", "switch_inline_query",
            "switch_inline_query_current_chat", "callback_game", "pay",
        ]


# ── Constructors ─────────────────────────────────────────────────────────────


class TestConstructors:
    """Single-variant helpers."""

    def test_helpers(self) -> None:
        assert InlineKeyboardButton.with_url("a", "https://x").type is T.URL
        assert InlineKeyboardButton.with_login_url("a", LoginUrl(url="https://x")).type is T.LOGIN_URL
        assert InlineKeyboardButton.with_callback_data("a", "d").type is T.CALLBACK_DATA
        assert InlineKeyboardButton.with_switch_inline_query("a", "q").type is T.SWITCH_INLINE_QUERY
        assert InlineKeyboardButton.with_switch_inline_query_current_chat("a", "q").type is T.SWITCH_INLINE_QUERY_CURRENT_CHAT
        assert InlineKeyboardButton.with_callback_game("a").type is T.CALLBACK_GAME
        assert InlineKeyboardButton.with_pay("a").type is T.PAY
        assert InlineKeyboardButton.with_web_app("a", WebAppInfo(url="https://x")).type is T.WEB_APP

    def test_markup_from_rows(self) -> None:
        markup = InlineKeyboardMarkup.from_rows(
            [InlineKeyboardButton.with_callback_data("1", "one"), InlineKeyboardButton.with_callback_data("2", "two")],
            [InlineKeyboardButton.with_url("Docs", "https://example.com")],
        )
        assert len(markup.inline_keyboard) == 2
        assert markup.inline_keyboard[1][0].type is T.URL


# ── Strict validation ────────────────────────────────────────────────────────


class TestStrict:
    """Opt-in rejection of ambiguous buttons."""

    def test_permissive_construction_accepts_two_fields(self) -> None:
        button = InlineKeyboardButton(text="x", url="https://x", callback_data="d")
        assert button.variant_fields() == ["url", "callback_data"]

    def test_validate_exclusive_rejects_two_fields(self) -> None:
        button = InlineKeyboardButton(text="x", url="https://x", callback_data="d")
        with pytest.raises(ArgumentError) as exc_info:
            button.validate_exclusive()
        assert "url" in str(exc_info.value)
        assert "callback_data" in str(exc_info.value)

    def test_validate_exclusive_accepts_single_or_none(self) -> None:
        single = InlineKeyboardButton.with_pay("Pay")
        assert single.validate_exclusive() is single
        InlineKeyboardButton(text="none").validate_exclusive()

    def test_strict_constructor(self) -> None:
        assert InlineKeyboardButton.strict("ok", callback_data="d").type is T.CALLBACK_DATA
        with pytest.raises(ArgumentError):
            InlineKeyboardButton.strict("bad", url="https://x", pay=True)
        with pytest.raises(ArgumentError):
            InlineKeyboardButton.strict("empty")

    def test_markup_validation(self) -> None:
        markup = InlineKeyboardMarkup(inline_keyboard=[[InlineKeyboardButton(text="x", url="u", pay=True)]])
        with pytest.raises(ArgumentError):
            markup.validate_exclusive()
