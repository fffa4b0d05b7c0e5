"""
Unit tests for the message log.
"""

from settings import RED, WHITE
from engine.message_log import MessageLog


class TestMessageLog:
    """Tests for MessageLog."""

    def test_default_color_is_white(self):
        log = MessageLog()
        log.add("hello")
        assert list(log) == [("hello", WHITE)]

    def test_multi_line_text_is_split(self):
        log = MessageLog()
        log.add("first\n\nsecond\r\nthird", RED)
        assert list(log) == [("first", RED), ("second", RED), ("third", RED)]

    def test_blank_text_adds_nothing(self):
        log = MessageLog()
        log.add("   ")
        assert len(log) == 0
        assert log.last_message == ""

    def test_never_truncated(self):
        log = MessageLog()
        for i in range(500):
            log.add(f"message {i}")
        assert len(log) == 500
        assert log.last_message == "message 499"

    def test_recent_window(self):
        log = MessageLog()
        for i in range(10):
            log.add(str(i))
        assert [text for text, _ in log.recent(3)] == ["7", "8", "9"]
        assert log.recent(0) == []
        assert len(log.recent(50)) == 10

    def test_equality(self):
        first, second = MessageLog(), MessageLog()
        first.add("a", RED)
        second.add("a", RED)
        assert first == second
        second.add("b")
        assert first != second
