"""
Conversation state machine.

Tracks the macro phase of a session. ``next_state`` is a pure, total
function of (state, intent, emotion):

    1. DISTRESS intent            -> ESCALATION
    2. FAREWELL intent            -> CLOSING
    3. strong negative emotion    -> SUPPORT (ESCALATION is kept)
    4. explicit (state, intent) table entry
    5. otherwise stay in the current state
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

from .config import DEFAULT_CONFIG, CompanionConfig
from .emotion import EmotionResult
from .intent import Intent

logger = logging.getLogger(__name__)


class ConversationState(Enum):
    GREETING = "greeting"
    SMALL_TALK = "small_talk"
    HOMEWORK_HELP = "homework_help"
    SUPPORT = "support"
    ADVICE = "advice"
    ESCALATION = "escalation"
    CLOSING = "closing"


INITIAL_STATE = ConversationState.GREETING

# Intents that move to the same target from any state.
_INTENT_TARGETS: Dict[Intent, ConversationState] = {
    Intent.HOMEWORK_HELP: ConversationState.HOMEWORK_HELP,
    Intent.SUPPORT_REQUEST: ConversationState.SUPPORT,
    Intent.ADVICE: ConversationState.ADVICE,
}

TRANSITIONS: Dict[Tuple[ConversationState, Intent], ConversationState] = {
    (state, intent): target
    for state in ConversationState
    for intent, target in _INTENT_TARGETS.items()
}
TRANSITIONS.update({
    (ConversationState.GREETING, Intent.SMALL_TALK): ConversationState.SMALL_TALK,
    (ConversationState.GREETING, Intent.GRATITUDE): ConversationState.SMALL_TALK,
    (ConversationState.CLOSING, Intent.GREETING): ConversationState.GREETING,
    (ConversationState.CLOSING, Intent.SMALL_TALK): ConversationState.SMALL_TALK,
    (ConversationState.CLOSING, Intent.GRATITUDE): ConversationState.CLOSING,
})


def _is_strong_negative(emotion: Optional[EmotionResult], threshold: float) -> bool:
    return (
        emotion is not None
        and emotion.is_negative
        and emotion.intensity >= threshold
    )


def next_state(
    state: ConversationState,
    intent: Intent,
    emotion: Optional[EmotionResult] = None,
    config: Optional[CompanionConfig] = None,
) -> ConversationState:
    """Pure transition function; always returns exactly one state."""
    config = config or DEFAULT_CONFIG
    if intent == Intent.DISTRESS:
        return ConversationState.ESCALATION
    if intent == Intent.FAREWELL:
        return ConversationState.CLOSING
    if _is_strong_negative(emotion, config.high_intensity_threshold):
        if state == ConversationState.ESCALATION:
            return state
        return ConversationState.SUPPORT
    return TRANSITIONS.get((state, intent), state)


StateListener = Callable[[ConversationState, ConversationState, Intent], None]


class ConversationStateMachine:
    """Holds the current state for one session and records its transitions."""

    def __init__(self, config: Optional[CompanionConfig] = None):
        self.config = config or DEFAULT_CONFIG
        self.state = INITIAL_STATE
        self.history: List[Tuple[ConversationState, ConversationState, Intent]] = []
        self._listeners: List[StateListener] = []

    def add_listener(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    def transition(
        self, intent: Intent, emotion: Optional[EmotionResult] = None
    ) -> ConversationState:
        previous = self.state
        self.state = next_state(previous, intent, emotion, self.config)
        if self.state != previous:
            self.history.append((previous, self.state, intent))
            logger.info(f"State {previous.value} -> {self.state.value} ({intent.value})")
            for listener in self._listeners:
                listener(previous, self.state, intent)
        return self.state

    def reset(self) -> None:
        """Return to GREETING. Safe to call repeatedly."""
        self.history.clear()
        self.state = INITIAL_STATE

    @property
    def is_supportive(self) -> bool:
        return self.state in (ConversationState.SUPPORT, ConversationState.ESCALATION)

    @property
    def is_closing(self) -> bool:
        return self.state == ConversationState.CLOSING
