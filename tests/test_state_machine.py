"""Tests for the conversation state machine."""

import pytest

from companion.core.emotion import Emotion, EmotionResult
from companion.core.intent import Intent
from companion.core.state_machine import (
    INITIAL_STATE,
    ConversationState,
    ConversationStateMachine,
    next_state,
)

STRONG_SAD = EmotionResult(Emotion.SAD, 0.9)
WEAK_SAD = EmotionResult(Emotion.SAD, 0.4)
STRONG_HAPPY = EmotionResult(Emotion.HAPPY, 0.95)


@pytest.fixture
def machine():
    return ConversationStateMachine()


class TestNextState:
    @pytest.mark.parametrize("state", list(ConversationState))
    def test_distress_always_escalates(self, state):
        assert next_state(state, Intent.DISTRESS, WEAK_SAD) == ConversationState.ESCALATION

    @pytest.mark.parametrize("state", list(ConversationState))
    def test_farewell_always_closes(self, state):
        assert next_state(state, Intent.FAREWELL) == ConversationState.CLOSING

    @pytest.mark.parametrize("state", [
        ConversationState.GREETING,
        ConversationState.SMALL_TALK,
        ConversationState.HOMEWORK_HELP,
        ConversationState.ADVICE,
        ConversationState.CLOSING,
    ])
    def test_strong_negative_emotion_forces_support(self, state):
        """Emotion overrides topic-driven transitions."""
        assert next_state(state, Intent.HOMEWORK_HELP, STRONG_SAD) == ConversationState.SUPPORT

    def test_strong_negative_keeps_escalation(self):
        state = next_state(ConversationState.ESCALATION, Intent.SMALL_TALK, STRONG_SAD)
        assert state == ConversationState.ESCALATION

    def test_strong_positive_does_not_force_support(self):
        state = next_state(ConversationState.GREETING, Intent.SMALL_TALK, STRONG_HAPPY)
        assert state == ConversationState.SMALL_TALK

    def test_weak_negative_follows_table(self):
        state = next_state(ConversationState.GREETING, Intent.HOMEWORK_HELP, WEAK_SAD)
        assert state == ConversationState.HOMEWORK_HELP

    def test_closing_greeting_returns_to_greeting(self):
        assert next_state(ConversationState.CLOSING, Intent.GREETING) == ConversationState.GREETING

    def test_unlisted_pair_stays(self):
        state = next_state(ConversationState.HOMEWORK_HELP, Intent.SMALL_TALK)
        assert state == ConversationState.HOMEWORK_HELP

    @pytest.mark.parametrize("state", [ConversationState.SUPPORT, ConversationState.ESCALATION])
    @pytest.mark.parametrize("intent", [Intent.SMALL_TALK, Intent.GRATITUDE])
    def test_supportive_states_hold_through_chit_chat(self, state, intent):
        assert next_state(state, intent) == state

    @pytest.mark.parametrize("intent,expected", [
        (Intent.HOMEWORK_HELP, ConversationState.HOMEWORK_HELP),
        (Intent.ADVICE, ConversationState.ADVICE),
        (Intent.FAREWELL, ConversationState.CLOSING),
    ])
    def test_supportive_states_exit_on_task_or_farewell(self, intent, expected):
        assert next_state(ConversationState.ESCALATION, intent, WEAK_SAD) == expected
        assert next_state(ConversationState.SUPPORT, intent, WEAK_SAD) == expected

    def test_total(self):
        """Every (state, intent, emotion) triple maps to exactly one state."""
        for state in ConversationState:
            for intent in Intent:
                for emotion in (None, WEAK_SAD, STRONG_SAD, STRONG_HAPPY):
                    assert isinstance(next_state(state, intent, emotion), ConversationState)


class TestMachine:
    def test_initial_state(self, machine):
        assert machine.state == INITIAL_STATE == ConversationState.GREETING

    def test_transition_records_history(self, machine):
        machine.transition(Intent.SMALL_TALK)
        machine.transition(Intent.HOMEWORK_HELP)
        assert machine.state == ConversationState.HOMEWORK_HELP
        assert machine.history == [
            (ConversationState.GREETING, ConversationState.SMALL_TALK, Intent.SMALL_TALK),
            (ConversationState.SMALL_TALK, ConversationState.HOMEWORK_HELP, Intent.HOMEWORK_HELP),
        ]

    def test_listener_only_on_change(self, machine):
        calls = []
        machine.add_listener(lambda old, new, intent: calls.append((old, new)))
        machine.transition(Intent.GREETING)
        assert calls == []
        machine.transition(Intent.SUPPORT_REQUEST)
        assert calls == [(ConversationState.GREETING, ConversationState.SUPPORT)]

    def test_is_supportive(self, machine):
        assert not machine.is_supportive
        machine.transition(Intent.DISTRESS)
        assert machine.is_supportive

    def test_farewell_then_reset(self, machine):
        machine.transition(Intent.FAREWELL)
        assert machine.is_closing
        machine.reset()
        assert machine.state == ConversationState.GREETING

    @pytest.mark.parametrize("intent", [Intent.DISTRESS, Intent.ADVICE, Intent.FAREWELL])
    def test_reset_idempotent(self, machine, intent):
        machine.transition(intent)
        machine.reset()
        machine.reset()
        assert machine.state == ConversationState.GREETING
        assert machine.history == []
