"""Tests for Update and Message wrappers."""

import pytest

from dialogs.models import Message, Update


class TestMessage:
    """Tests for Message dotted access."""

    def test_get_nested(self):
        """Test reading a nested field."""
        msg = Message({"from": {"id": 42}, "chat": {"id": 7}})
        assert msg.get("from.id") == 42
        assert msg.get("chat.id") == 7

    def test_get_missing_returns_default(self):
        """Test that a missing path yields the default."""
        msg = Message({"chat": {"id": 7}})
        assert msg.get("from.id") is None
        assert msg.get("from.id", "x") == "x"
        assert msg.get("chat.id.deeper", 1) == 1

    def test_get_none_value_returns_default(self):
        """Test that an explicit None is treated as missing."""
        msg = Message({"from": {"id": None}})
        assert msg.get("from.id", 5) == 5
        assert not msg.has("from.id")

    def test_properties_use_fallbacks(self):
        """Test text, chat_id and from_id convenience properties."""
        msg = Message({"user": {"id": 3}, "user_chat_id": 9, "text": "hey"})
        assert msg.from_id == 3
        assert msg.chat_id == 9
        assert msg.text == "hey"

    def test_text_defaults_to_empty(self):
        """Test that a message without text has empty text."""
        assert Message({}).text == ""


class TestUpdate:
    """Tests for Update."""

    def test_get_message(self):
        """Test extracting the message."""
        update = Update({"update_id": 1, "message": {"text": "a"}})
        assert update.get_message().text == "a"
        assert update.update_id == 1

    def test_get_edited_message(self):
        """Test that edited messages count as messages."""
        update = Update({"update_id": 2, "edited_message": {"text": "b"}})
        assert update.has_message()
        assert update.get_message().text == "b"

    def test_message_preferred_over_callback_query(self):
        """Test lookup order of message-bearing fields."""
        update = Update(
            {"message": {"text": "m"}, "callback_query": {"data": "c"}}
        )
        assert update.get_message().text == "m"

    def test_no_message_raises(self):
        """Test that an update without a message raises ValueError."""
        update = Update({"update_id": 3, "poll": {"id": "p"}})
        assert not update.has_message()
        with pytest.raises(ValueError):
            update.get_message()

    def test_from_dict_rejects_non_object(self):
        """Test that non-dict payloads are rejected."""
        with pytest.raises(TypeError):
            Update.from_dict([1, 2])  # type: ignore[arg-type]


class TestCallbackQuery:
    """Tests for callback_query updates."""

    def make_callback(self, **extra) -> Update:
        callback = {
            "id": "cb1",
            "from": {"id": 42},
            "message": {"message_id": 3, "chat": {"id": 7}, "text": "Pick one"},
            "data": "yes",
            **extra,
        }
        return Update({"update_id": 4, "callback_query": callback})

    def test_chat_taken_from_attached_message(self):
        """Test that the chat comes from the message the button belongs to."""
        msg = self.make_callback().get_message()
        assert msg.from_id == 42
        assert msg.chat_id == 7

    def test_text_is_button_data(self):
        """Test that the button data is exposed as text."""
        assert self.make_callback().get_message().text == "yes"

    def test_without_attached_message(self):
        """Test an inline-mode callback with no message has no chat."""
        update = Update({"callback_query": {"id": "cb", "from": {"id": 42}, "data": "x"}})
        msg = update.get_message()
        assert msg.chat_id is None
        assert msg.text == "x"
