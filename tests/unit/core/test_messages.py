"""
Tests for message classification.
"""

from types import SimpleNamespace

from fanout_logger.core.messages import FailureMessage, PlainMessage, resolve_message


class TestResolveMessage:
    """Tests for resolve_message."""

    def test_string_is_plain(self):
        assert resolve_message("hello") == PlainMessage("hello")

    def test_dict_without_message_is_plain(self):
        message = resolve_message({"orderId": 1})

        assert isinstance(message, PlainMessage)
        assert message.text == "{'orderId': 1}"

    def test_raised_exception_is_failure_with_traceback(self):
        try:
            raise ValueError("boom")
        except ValueError as e:
            message = resolve_message(e)

        assert isinstance(message, FailureMessage)
        assert message.text == "boom"
        assert "Traceback" in message.stack
        assert "ValueError: boom" in message.stack

    def test_unraised_exception_has_stack_text(self):
        message = resolve_message(RuntimeError("not raised"))

        assert message.stack == "RuntimeError: not raised"

    def test_exception_without_text_uses_class_name(self):
        assert resolve_message(KeyboardInterrupt()).text == "KeyboardInterrupt"

    def test_object_with_message_attribute(self):
        message = resolve_message(SimpleNamespace(message="upstream failed", stack="at handler"))

        assert message == FailureMessage(text="upstream failed", stack="at handler")

    def test_mapping_with_message_key(self):
        message = resolve_message({"message": "boom"})

        assert message == FailureMessage(text="boom", stack=None)

    def test_empty_message_field_is_plain(self):
        assert isinstance(resolve_message({"message": ""}), PlainMessage)

    def test_already_resolved_passthrough(self):
        failure = FailureMessage("x")

        assert resolve_message(failure) is failure
