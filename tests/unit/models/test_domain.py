"""
Tests for Domain Models - Message, Session, SessionPatch and normalization rules
"""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from chat_sessions.core.exceptions import InvalidArgumentError
from chat_sessions.models.domain import (
    DEFAULT_TITLE,
    MAX_MESSAGE_TEXT_LENGTH,
    MAX_TITLE_LENGTH,
    Message,
    Session,
    SessionPatch,
    normalize_title,
    parse_messages,
    require_owner_id,
)


# =============================================================================
# Message
# =============================================================================


class TestMessage:
    def test_accepts_wire_name_ts(self):
        message = Message.model_validate(
            {"role": "user", "text": "hi", "ts": "2024-05-01T10:00:00Z"}
        )

        assert message.timestamp == datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)

    def test_accepts_field_name(self):
        ts = datetime(2024, 5, 1, tzinfo=timezone.utc)

        assert Message(role="assistant", text="hi", timestamp=ts).timestamp == ts

    def test_timestamp_defaults_to_now(self):
        before = datetime.now(timezone.utc)

        message = Message(role="user", text="hi")

        assert before <= message.timestamp <= datetime.now(timezone.utc)

    def test_naive_timestamp_treated_as_utc(self):
        message = Message(role="user", text="hi", ts=datetime(2024, 5, 1, 12, 0))

        assert message.timestamp.tzinfo is not None
        assert message.timestamp.hour == 12

    def test_offset_timestamp_converted_to_utc(self):
        ts = datetime(2024, 5, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))

        assert Message(role="user", text="hi", ts=ts).timestamp.hour == 10

    @pytest.mark.parametrize("role", ["system", "tool", ""])
    def test_rejects_unknown_role(self, role):
        with pytest.raises(ValidationError):
            Message(role=role, text="hi")

    def test_rejects_empty_text(self):
        with pytest.raises(ValidationError):
            Message(role="user", text="")

    def test_text_length_limit(self):
        Message(role="user", text="x" * MAX_MESSAGE_TEXT_LENGTH)
        with pytest.raises(ValidationError):
            Message(role="user", text="x" * (MAX_MESSAGE_TEXT_LENGTH + 1))

    def test_is_frozen(self):
        message = Message(role="user", text="hi")

        with pytest.raises(ValidationError):
            message.text = "changed"

    def test_serializes_with_ts(self):
        dumped = Message(role="user", text="hi").model_dump(mode="json", by_alias=True)

        assert set(dumped) == {"role", "text", "ts"}


# =============================================================================
# Session
# =============================================================================


class TestSession:
    def _session(self, **overrides):
        data = {
            "id": "s1",
            "userId": "user-a",
            "title": "Trip",
            "messages": [{"role": "user", "text": "hi", "ts": "2024-05-01T10:00:00Z"}],
            "createdAt": "2024-05-01T09:00:00+00:00",
        }
        data.update(overrides)
        return Session.model_validate(data)

    def test_wire_aliases(self):
        session = self._session()

        assert session.owner_id == "user-a"
        assert session.created_at == datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)

    def test_to_wire_shape(self):
        wire = self._session().to_wire()

        assert set(wire) == {"id", "userId", "title", "messages", "createdAt"}
        assert set(wire["messages"][0]) == {"role", "text", "ts"}

    def test_to_wire_round_trips(self):
        session = self._session()

        assert Session.model_validate(session.to_wire()) == session

    def test_rejects_title_over_limit(self):
        with pytest.raises(ValidationError):
            self._session(title="x" * (MAX_TITLE_LENGTH + 1))


# =============================================================================
# SessionPatch
# =============================================================================


class TestSessionPatch:
    def test_empty_patch(self):
        patch = SessionPatch()

        assert patch.is_empty
        assert not patch.has_title
        assert not patch.has_messages

    def test_empty_messages_is_present(self):
        patch = SessionPatch(messages=[])

        assert patch.has_messages
        assert not patch.has_title
        assert not patch.is_empty

    def test_explicit_none_is_present(self):
        assert SessionPatch(title=None).has_title


# =============================================================================
# Normalization Rules
# =============================================================================


class TestNormalizeTitle:
    def test_trims(self):
        assert normalize_title("  Lisbon  ") == "Lisbon"

    @pytest.mark.parametrize("title", ["", "   ", "\t\n"])
    def test_blank_becomes_default(self, title):
        assert normalize_title(title) == DEFAULT_TITLE

    def test_length_checked_after_trim(self):
        assert len(normalize_title("  " + "x" * MAX_TITLE_LENGTH + "  ")) == MAX_TITLE_LENGTH

    def test_rejects_too_long(self):
        with pytest.raises(InvalidArgumentError):
            normalize_title("x" * (MAX_TITLE_LENGTH + 1))

    @pytest.mark.parametrize("title", [None, 5, ["a"]])
    def test_rejects_non_string(self, title):
        with pytest.raises(InvalidArgumentError):
            normalize_title(title)


class TestParseMessages:
    def test_keeps_order(self):
        parsed = parse_messages(
            [{"role": "user", "text": "one"}, {"role": "assistant", "text": "two"}]
        )

        assert [m.text for m in parsed] == ["one", "two"]

    def test_accepts_tuple_and_models(self):
        parsed = parse_messages((Message(role="user", text="hi"),))

        assert parsed[0].text == "hi"

    def test_empty_list(self):
        assert parse_messages([]) == []

    @pytest.mark.parametrize("messages", [None, "text", {"role": "user"}, 3])
    def test_rejects_non_sequence(self, messages):
        with pytest.raises(InvalidArgumentError) as exc_info:
            parse_messages(messages)

        assert exc_info.value.message == "messages must be an array"

    def test_reports_index_of_bad_item(self):
        with pytest.raises(InvalidArgumentError) as exc_info:
            parse_messages([{"role": "user", "text": "ok"}, {"role": "user"}])

        assert exc_info.value.message.startswith("messages[1] is invalid")


class TestRequireOwnerId:
    def test_returns_owner(self):
        assert require_owner_id("user-a") == "user-a"

    @pytest.mark.parametrize("owner", [None, "", "  ", 42])
    def test_rejects_missing(self, owner):
        with pytest.raises(InvalidArgumentError) as exc_info:
            require_owner_id(owner)

        assert exc_info.value.message == "userId is required"
