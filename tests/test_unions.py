"""Tests for discriminated-union decoding (chat members, input media)."""

import json
import sys
import os

import pytest
from pydantic import BaseModel, ValidationError

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from botapi.exceptions import DecodeError, EncodingError
from botapi.models import (
    CHAT_MEMBER,
    ChatMemberBase,
    INPUT_MEDIA,
    ChatMemberAdministrator,
    ChatMemberBanned,
    ChatMemberLeft,
    ChatMemberMember,
    ChatMemberOwner,
    ChatMemberRestricted,
    InputMediaAnimation,
    InputMediaAudio,
    InputMediaDocument,
    InputMediaPhoto,
    InputMediaVideo,
    MessageEntity,
    User,
)
from botapi.unions import UnionFamily, decode_union, encode_union

USER = User(id=42, is_bot=False, first_name="Ada", username="ada")

_RESTRICTED_FLAGS = {
    name: False
    for name in (
        "can_send_messages", "can_send_audios", "can_send_documents", "can_send_photos",
        "can_send_videos", "can_send_video_notes", "can_send_voice_notes", "can_send_polls",
        "can_send_other_messages", "can_add_web_page_previews", "can_change_info",
        "can_invite_users", "can_pin_messages", "can_manage_topics",
    )
}

CHAT_MEMBERS = {
    "creator": ChatMemberOwner(user=USER, is_anonymous=False, custom_title="Founder"),
    "administrator": ChatMemberAdministrator(
        user=USER,
        can_be_edited=True,
        is_anonymous=False,
        can_manage_chat=True,
        can_delete_messages=True,
        can_manage_video_chats=False,
        can_restrict_members=True,
        can_promote_members=False,
        can_change_info=True,
        can_invite_users=True,
        can_pin_messages=True,
    ),
    "member": ChatMemberMember(user=USER),
    "restricted": ChatMemberRestricted(user=USER, is_member=True, until_date=1700000000, **_RESTRICTED_FLAGS),
    "left": ChatMemberLeft(user=USER),
    "kicked": ChatMemberBanned(user=USER, until_date=0),
}

INPUT_MEDIA_ITEMS = {
    "animation": InputMediaAnimation(media="attach://clip", width=320, height=240, duration=3),
    "audio": InputMediaAudio(media="AUDIO_FILE_ID", performer="Band", title="Song"),
    "document": InputMediaDocument(media="https://example.com/a.pdf", disable_content_type_detection=True),
    "photo": InputMediaPhoto(
        media="PHOTO_FILE_ID",
        caption="*hi*",
        parse_mode="MarkdownV2",
        caption_entities=[MessageEntity(type="bold", offset=0, length=2)],
    ),
    "video": InputMediaVideo(media="attach://video", supports_streaming=True),
}


# ── Round trips ──────────────────────────────────────────────────────────────


class TestRoundTrip:
    """decode(encode(x)) == x for every variant of both families."""

    @pytest.mark.parametrize("status", sorted(CHAT_MEMBERS))
    def test_chat_member(self, status: str) -> None:
        member = CHAT_MEMBERS[status]
        encoded = CHAT_MEMBER.encode(member)
        assert encoded["status"] == status
        decoded = CHAT_MEMBER.decode(json.dumps(encoded))
        assert type(decoded) is type(member)
        assert decoded == member

    @pytest.mark.parametrize("kind", sorted(INPUT_MEDIA_ITEMS))
    def test_input_media(self, kind: str) -> None:
        media = INPUT_MEDIA_ITEMS[kind]
        encoded = INPUT_MEDIA.encode(media)
        assert encoded["type"] == kind
        decoded = INPUT_MEDIA.decode(encoded)
        assert type(decoded) is type(media)
        assert decoded == media

    def test_tables_cover_every_variant(self) -> None:
        assert set(CHAT_MEMBER.variants) == set(CHAT_MEMBERS)
        assert set(INPUT_MEDIA.variants) == set(INPUT_MEDIA_ITEMS)


# ── Decoding ─────────────────────────────────────────────────────────────────


class TestDecode:
    """Discriminator handling and failure kinds."""

    def test_variant_specific_fields_populate(self) -> None:
        raw = b'{"status":"kicked","user":{"id":7,"is_bot":false,"first_name":"Mal"},"until_date":123}'
        member = CHAT_MEMBER.decode(raw)
        assert isinstance(member, ChatMemberBanned)
        assert member.until_date == 123
        assert member.user.id == 7

    def test_missing_discriminator(self) -> None:
        with pytest.raises(DecodeError) as exc_info:
            CHAT_MEMBER.decode({"user": {"id": 1, "is_bot": False, "first_name": "A"}})
        assert "missing discriminator" in exc_info.value.reason

    @pytest.mark.parametrize("tag", [1, None, True, ["member"], {"v": "member"}])
    def test_wrong_discriminator_type(self, tag) -> None:
        with pytest.raises(DecodeError) as exc_info:
            CHAT_MEMBER.decode({"status": tag, "user": {"id": 1, "is_bot": False, "first_name": "A"}})
        assert "wrong discriminator type" in exc_info.value.reason

    def test_unknown_variant(self) -> None:
        with pytest.raises(DecodeError) as exc_info:
            INPUT_MEDIA.decode({"type": "sticker", "media": "x"})
        assert "unknown variant" in exc_info.value.reason

    def test_variant_schema_mismatch(self) -> None:
        # "kicked" requires until_date
        with pytest.raises(DecodeError):
            CHAT_MEMBER.decode({"status": "kicked", "user": {"id": 1, "is_bot": False, "first_name": "A"}})

    def test_invalid_json(self) -> None:
        with pytest.raises(DecodeError):
            CHAT_MEMBER.decode(b"{not json")

    def test_non_object(self) -> None:
        with pytest.raises(DecodeError):
            INPUT_MEDIA.decode("[]")

    def test_decode_union_with_adhoc_table(self) -> None:
        media = decode_union({"type": "photo", "media": "ID"}, "type", {"photo": InputMediaPhoto})
        assert media == InputMediaPhoto(media="ID")


# ── Encoding ─────────────────────────────────────────────────────────────────


class TestEncode:
    """Runtime type decides the schema; absent fields are omitted."""

    def test_absent_fields_omitted(self) -> None:
        assert INPUT_MEDIA.encode(InputMediaPhoto(media="ID")) == {"type": "photo", "media": "ID"}

    def test_encode_union_helper(self) -> None:
        assert encode_union(ChatMemberLeft(user=USER))["status"] == "left"

    def test_foreign_instance_rejected(self) -> None:
        with pytest.raises(EncodingError):
            CHAT_MEMBER.encode(USER)

    def test_tag_of(self) -> None:
        assert CHAT_MEMBER.tag_of(CHAT_MEMBERS["kicked"]) == "kicked"
        assert INPUT_MEDIA.tag_of(INPUT_MEDIA_ITEMS["video"]) == "video"

    def test_discriminator_is_constant(self) -> None:
        with pytest.raises(ValidationError):
            ChatMemberLeft(user=USER, status="member")

    def test_variants_are_immutable(self) -> None:
        member = ChatMemberMember(user=USER)
        with pytest.raises(ValidationError):
            member.until_date = 5


# ── Union fields inside models ───────────────────────────────────────────────


class _Holder(BaseModel):
    members: list[CHAT_MEMBER.annotated()]


class TestAnnotatedField:
    """Families used as pydantic field types."""

    def test_raw_objects_are_decoded(self) -> None:
        holder = _Holder.model_validate({"members": [CHAT_MEMBER.encode(m) for m in CHAT_MEMBERS.values()]})
        assert [type(m) for m in holder.members] == [type(m) for m in CHAT_MEMBERS.values()]

    def test_instances_pass_through(self) -> None:
        member = CHAT_MEMBERS["creator"]
        holder = _Holder(members=[member])
        assert holder.members[0] is member

    def test_dump_uses_runtime_type(self) -> None:
        holder = _Holder(members=[CHAT_MEMBERS["kicked"]])
        dumped = holder.model_dump(mode="json", exclude_none=True)
        assert dumped["members"][0]["until_date"] == 0

    def test_bad_member_is_validation_error(self) -> None:
        with pytest.raises(ValidationError):
            _Holder.model_validate({"members": [{"status": "ghost"}]})

    def test_bare_base_instance_rejected(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            _Holder(members=[ChatMemberBase(status="bogus", user=USER)])
        assert "not a variant of ChatMember" in str(exc_info.value)

    def test_repr(self) -> None:
        assert "status" in repr(CHAT_MEMBER)
        assert isinstance(CHAT_MEMBER, UnionFamily)
