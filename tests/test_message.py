"""Tests for the message boundary."""

from unittest.mock import patch

from dino_http import LoggingMessage, Message


def test_logging_message_satisfies_protocol():
    assert isinstance(LoggingMessage(), Message)


def test_logging_message_warns_once():
    message = LoggingMessage()

    with patch("dino_http.message.logger") as logger:
        message.error("first")
        message.info("second")

    assert logger.warning.call_count == 1
    logger.log.assert_any_call("ERROR", "first")
    logger.log.assert_any_call("INFO", "second")


def test_logging_message_levels():
    message = LoggingMessage()

    with patch("dino_http.message.logger") as logger:
        message.success("s")
        message.warning("w")

    assert [call.args for call in logger.log.call_args_list] == [
        ("SUCCESS", "s"),
        ("WARNING", "w"),
    ]
