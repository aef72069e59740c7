"""Tests for data models."""

import dataclasses
import json

import pytest

from welcome_bot.models import (
    STATE_FORMAT_VERSION,
    AwaitingUserName,
    InboundMessage,
    ReceivedUserName,
    Start,
    decode_state,
    default_state,
    encode_state,
    state_from_dict,
    state_tag,
    state_to_dict,
)


class TestDialogueState:
    """Tests for DialogueState variants."""

    def test_default_state_is_start(self):
        """Test that a fresh conversation starts in Start."""
        assert default_state() == Start()

    def test_states_are_immutable(self):
        """Test that states cannot be mutated in place."""
        state = ReceivedUserName(user_name="Alex")
        with pytest.raises(dataclasses.FrozenInstanceError):
            state.user_name = "Sam"  # type: ignore

    def test_equality_by_value(self):
        """Test that states compare by variant and payload."""
        assert Start() == Start()
        assert AwaitingUserName() != Start()
        assert ReceivedUserName("Alex") == ReceivedUserName("Alex")
        assert ReceivedUserName("Alex") != ReceivedUserName("Sam")

    def test_state_tags(self):
        """Test stable variant tags."""
        assert state_tag(Start()) == "start"
        assert state_tag(AwaitingUserName()) == "awaiting_user_name"
        assert state_tag(ReceivedUserName("Alex")) == "received_user_name"

    def test_state_tag_unknown(self):
        """Test that non-state values are rejected."""
        with pytest.raises(TypeError):
            state_tag("Start")  # type: ignore


class TestStateEncoding:
    """Tests for persisted state encoding."""

    def test_encoded_form_is_tagged_and_versioned(self):
        """Test the stored document layout."""
        payload = json.loads(encode_state(ReceivedUserName(user_name="Alex")))
        assert payload == {
            "version": STATE_FORMAT_VERSION,
            "type": "received_user_name",
            "data": {"user_name": "Alex"},
        }

    @pytest.mark.parametrize(
        "state",
        [Start(), AwaitingUserName(), ReceivedUserName(user_name="Алиса 🙂")],
    )
    def test_decode_restores_state(self, state):
        """Test that every variant decodes to an equal value."""
        assert decode_state(encode_state(state)) == state

    def test_decode_unknown_version(self):
        """Test that a future format version is rejected."""
        with pytest.raises(ValueError, match="version"):
            state_from_dict({"version": 99, "type": "start", "data": {}})

    def test_decode_unknown_type(self):
        """Test that an unknown tag is rejected."""
        with pytest.raises(ValueError, match="Unknown state type"):
            state_from_dict({"version": 1, "type": "finished", "data": {}})

    def test_decode_missing_user_name(self):
        """Test that ReceivedUserName requires its payload."""
        with pytest.raises(ValueError):
            state_from_dict({"version": 1, "type": "received_user_name", "data": {}})

    def test_decode_invalid_json(self):
        """Test that garbage is rejected rather than defaulted."""
        with pytest.raises(ValueError):
            decode_state("{not json")

    def test_decode_non_object(self):
        """Test that a JSON scalar is rejected."""
        with pytest.raises(ValueError):
            decode_state('"Start"')

    @pytest.mark.parametrize("data", [["Alex"], "Alex", 1, 0, ""])
    def test_decode_rejects_non_object_data(self, data):
        """Test that a malformed data value is a ValueError, not AttributeError."""
        with pytest.raises(ValueError, match="data"):
            state_from_dict({"version": 1, "type": "received_user_name", "data": data})

    @pytest.mark.parametrize("version", [True, "1", 1.0, None])
    def test_decode_rejects_non_integer_version(self, version):
        """Test that only the integer 1 is accepted as the format version."""
        with pytest.raises(ValueError, match="version"):
            state_from_dict({"version": version, "type": "awaiting_user_name", "data": {}})

    @pytest.mark.parametrize("user_name", [None, 42, ["Alex"], {"first": "Alex"}])
    def test_decode_rejects_non_string_user_name(self, user_name):
        with pytest.raises(ValueError, match="user_name"):
            state_from_dict(
                {"version": 1, "type": "received_user_name", "data": {"user_name": user_name}}
            )

    @pytest.mark.parametrize("tag", [["start"], {"t": 1}, None, 1])
    def test_decode_rejects_non_string_type(self, tag):
        with pytest.raises(ValueError, match="Unknown state type"):
            state_from_dict({"version": 1, "type": tag, "data": {}})

    def test_decode_without_data_for_payloadless_state(self):
        """Test that data may be omitted when the variant carries none."""
        assert state_from_dict({"version": 1, "type": "start"}) == Start()

    def test_state_to_dict_without_payload(self):
        """Test that payload-less variants have empty data."""
        assert state_to_dict(Start())["data"] == {}


class TestInboundMessage:
    """Tests for InboundMessage."""

    def test_text_defaults_to_none(self):
        """Test that a message without text has no payload."""
        msg = InboundMessage(conversation_id="chat1")
        assert msg.text is None
        assert msg.received_at.tzinfo is not None
