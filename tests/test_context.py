"""Tests for per-session conversation context."""

import dataclasses

import pytest

from companion.core.context import ConversationContext, Turn


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def context(clock):
    return ConversationContext(clock=clock)


class TestEmptyContext:
    def test_defaults(self, context):
        """A fresh context answers every accessor without raising."""
        assert context.get_turn_count() == 0
        assert context.get_last_user_input() == ""
        assert context.get_last_system_reply() == ""
        assert context.get_last_turn_topic() == ""
        assert context.get_conversation_duration_minutes() == 0.0
        assert context.get_recent_history(3) == []
        assert context.search_history("anything") == []

    def test_summary_on_empty(self, context):
        summary = context.summary()
        assert summary["turn_count"] == 0
        assert summary["last_user_input"] == ""
        assert summary["recent_topics"] == []

    def test_transcript_on_empty(self, context):
        assert "(no messages yet)" in context.to_transcript()


class TestTurns:
    def test_add_turn_preserves_order(self, context):
        context.add_turn("first", "reply 1", "school")
        context.add_turn("second", "reply 2", "gaming")
        context.add_turn("third", "reply 3", "school")
        assert [t.user_text for t in context.turns] == ["first", "second", "third"]
        assert context.get_turn_count() == 3
        assert context.get_last_user_input() == "third"
        assert context.get_last_system_reply() == "reply 3"

    def test_add_turn_updates_current_topic(self, context):
        context.add_turn("hi", "hello", "gaming")
        assert context.current_topic == "gaming"
        assert context.get_last_turn_topic() == "gaming"

    def test_add_turn_tolerates_none(self, context):
        """None texts become empty strings; a missing topic becomes 'general'."""
        turn = context.add_turn(None, None, None)
        assert turn.user_text == ""
        assert turn.system_reply == ""
        assert turn.topic_tag == "general"

    def test_turn_timestamp_from_clock(self, context, clock):
        clock.advance(5)
        turn = context.add_turn("hi", "hello")
        assert turn.timestamp == 1005.0

    def test_turn_is_immutable(self, context):
        turn = context.add_turn("hi", "hello")
        with pytest.raises(dataclasses.FrozenInstanceError):
            turn.user_text = "changed"

    def test_recent_history(self, context):
        for i in range(5):
            context.add_turn(f"msg {i}", f"reply {i}")
        recent = context.get_recent_history(2)
        assert [t.user_text for t in recent] == ["msg 3", "msg 4"]
        assert context.get_recent_history(0) == []
        assert context.get_recent_user_inputs(3) == ["msg 2", "msg 3", "msg 4"]

    def test_search_history_case_insensitive(self, context):
        context.add_turn("My Math test went badly", "Oh no")
        context.add_turn("I played football", "Nice")
        hits = context.search_history("math")
        assert len(hits) == 1
        assert hits[0].user_text == "My Math test went badly"
        assert context.search_history("") == []


class TestTiming:
    def test_duration_minutes(self, context, clock):
        context.add_turn("hi", "hello")
        clock.advance(120)
        assert context.get_conversation_duration_minutes() == pytest.approx(2.0)

    def test_is_idle(self, context, clock):
        context.add_turn("hi", "hello")
        clock.advance(10 * 60)
        assert not context.is_idle(30)
        clock.advance(25 * 60)
        assert context.is_idle(30)


class TestReset:
    def test_reset_clears_everything(self, context):
        context.add_turn("hi", "hello", "gaming")
        context.reset()
        assert context.get_turn_count() == 0
        assert context.current_topic == ""
        assert context.topic_stack == []
        assert context.get_last_user_input() == ""

    def test_reset_is_idempotent(self, context):
        context.add_turn("hi", "hello")
        context.reset()
        context.reset()
        assert context.get_turn_count() == 0
        assert context.get_conversation_duration_minutes() == 0.0


class TestExport:
    def test_summary_recent_topics_most_recent_first(self, context):
        context.add_turn("a", "b", "school")
        context.add_turn("c", "d", "gaming")
        context.add_turn("e", "f", "school")
        assert context.summary()["recent_topics"] == ["school", "gaming"]

    def test_transcript_contains_turns(self, context):
        context.add_turn("hello", "hi there", "general")
        text = context.to_transcript()
        assert "You: hello" in text
        assert "Companion: hi there" in text
        assert "[1]" in text

    def test_turn_to_dict(self):
        turn = Turn("hi", "hello", "general", 1.0)
        assert turn.to_dict() == {
            "user_text": "hi",
            "system_reply": "hello",
            "topic_tag": "general",
            "timestamp": 1.0,
        }
