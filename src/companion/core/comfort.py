"""
Comfort Engine: the top-level reply synthesiser for emotional support.

A reply is assembled by an ordered pipeline of independent steps. Each
step has a predicate (``applies``) and a renderer (``render``); a
terminal step ends the pipeline as soon as it fires.

    escalation      severe-distress terms in the recent user input;
                    overrides everything else (terminal)
    presence        no emotion result available
    strategy        per-emotion strategy, high-empathy variant above the
                    threshold, phrased in the requested tone
    reinforcement   the conversation has run for a while
    support         one supportive element, chosen by turn count

The engine never mutates the context and never raises; identical inputs
always produce identical text.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple, Union

from ..content.templates import (
    COMFORT_STRATEGIES,
    ESCALATION_MESSAGE,
    GENTLE_PRESENCE_MESSAGE,
    REINFORCEMENT_CLAUSE,
    SUPPORT_ELEMENTS,
    TONE_PHRASES,
)
from .config import DEFAULT_CONFIG, CompanionConfig
from .context import ConversationContext
from .emotion import Emotion, EmotionResult
from .safety import needs_escalation
from .utils import pick

logger = logging.getLogger(__name__)


class ToneStyle(Enum):
    SOFT = "soft"
    BALANCED = "balanced"
    ENCOURAGING = "encouraging"
    EMPATHETIC = "empathetic"
    REASSURING = "reassuring"
    DIRECT = "direct"
    UPLIFTING = "uplifting"
    CALMING = "calming"
    VALIDATING = "validating"
    HOPEFUL = "hopeful"

    @classmethod
    def coerce(cls, value: Union["ToneStyle", str, None]) -> "ToneStyle":
        """Accept an enum, a case-insensitive name or value, or None."""
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.BALANCED
        key = str(value).strip().lower()
        for tone in cls:
            if tone.value == key:
                return tone
        logger.debug(f"Unknown tone {value!r}; using balanced")
        return cls.BALANCED


DEFAULT_TONE = ToneStyle.BALANCED

# Emotions with a dedicated strategy; everything else uses "neutral".
STRATEGY_EMOTIONS = frozenset({
    Emotion.SAD, Emotion.ANXIOUS, Emotion.STRESSED,
    Emotion.FRUSTRATED, Emotion.OVERWHELMED,
})


@dataclass(frozen=True)
class ComfortRequest:
    """Inputs to one comfort reply, with every fallback already applied."""
    emotion: Optional[EmotionResult]
    context: ConversationContext
    tone: ToneStyle
    user_text: Optional[str] = None
    config: CompanionConfig = DEFAULT_CONFIG

    def screened_inputs(self) -> List[str]:
        """Current utterance plus the configured number of earlier ones."""
        extra = self.config.recent_turns_for_escalation
        if self.user_text is not None:
            return [self.user_text] + self.context.get_recent_user_inputs(extra)
        return self.context.get_recent_user_inputs(extra + 1)


@dataclass(frozen=True)
class ComfortStep:
    name: str
    applies: Callable[[ComfortRequest], bool]
    render: Callable[[ComfortRequest], str]
    terminal: bool = False


# -----------------------------------------------------------------------------
# Steps
# -----------------------------------------------------------------------------

def escalation_applies(req: ComfortRequest) -> bool:
    return needs_escalation(req.screened_inputs())


def render_escalation(req: ComfortRequest) -> str:
    return ESCALATION_MESSAGE


def presence_applies(req: ComfortRequest) -> bool:
    return req.emotion is None


def render_presence(req: ComfortRequest) -> str:
    return GENTLE_PRESENCE_MESSAGE


def strategy_applies(req: ComfortRequest) -> bool:
    return req.emotion is not None


def render_strategy(req: ComfortRequest) -> str:
    emotion = req.emotion.primary_emotion
    key = emotion.value if emotion in STRATEGY_EMOTIONS else Emotion.NEUTRAL.value
    variants = COMFORT_STRATEGIES[key]
    high = req.emotion.intensity > req.config.high_empathy_threshold
    text = variants["high" if high else "low"]
    return f"{text} {TONE_PHRASES[req.tone.value]}"


def reinforcement_applies(req: ComfortRequest) -> bool:
    return req.context.get_turn_count() > req.config.reinforcement_turn_threshold


def render_reinforcement(req: ComfortRequest) -> str:
    return REINFORCEMENT_CLAUSE


def support_applies(req: ComfortRequest) -> bool:
    return True


def render_support(req: ComfortRequest) -> str:
    return pick(SUPPORT_ELEMENTS, req.context.get_turn_count())


ESCALATION_STEP = ComfortStep("escalation", escalation_applies, render_escalation, terminal=True)
PRESENCE_STEP = ComfortStep("presence", presence_applies, render_presence)
STRATEGY_STEP = ComfortStep("strategy", strategy_applies, render_strategy)
REINFORCEMENT_STEP = ComfortStep("reinforcement", reinforcement_applies, render_reinforcement)
SUPPORT_STEP = ComfortStep("support", support_applies, render_support)

COMFORT_STEPS: Tuple[ComfortStep, ...] = (
    ESCALATION_STEP,
    PRESENCE_STEP,
    STRATEGY_STEP,
    REINFORCEMENT_STEP,
    SUPPORT_STEP,
)


# -----------------------------------------------------------------------------
# Engine
# -----------------------------------------------------------------------------

class ComfortEngine:
    """Runs the comfort steps in order and joins their output."""

    def __init__(
        self,
        config: Optional[CompanionConfig] = None,
        steps: Sequence[ComfortStep] = COMFORT_STEPS,
    ):
        self.config = config or DEFAULT_CONFIG
        self.steps = tuple(steps)

    def build_request(
        self,
        emotion_result: Optional[EmotionResult],
        context: Optional[ConversationContext],
        tone: Union[ToneStyle, str, None],
        user_text: Optional[str] = None,
    ) -> ComfortRequest:
        if context is None:
            logger.debug("No context supplied; using a fresh one")
            context = ConversationContext()
        if emotion_result is None:
            logger.debug("No emotion result supplied; using gentle presence")
        return ComfortRequest(
            emotion=emotion_result,
            context=context,
            tone=ToneStyle.coerce(tone),
            user_text=user_text,
            config=self.config,
        )

    def run_steps(self, req: ComfortRequest) -> List[Tuple[str, str]]:
        """(step name, text) for every step that fired, in order."""
        fired: List[Tuple[str, str]] = []
        for step in self.steps:
            if not step.applies(req):
                continue
            fired.append((step.name, step.render(req)))
            if step.terminal:
                logger.info(f"Comfort step {step.name!r} overrides the rest")
                break
        return fired

    def generate_comfort(
        self,
        emotion_result: Optional[EmotionResult],
        context: Optional[ConversationContext] = None,
        tone: Union[ToneStyle, str, None] = DEFAULT_TONE,
        user_text: Optional[str] = None,
    ) -> str:
        """Compose a supportive reply. Always returns a non-empty string."""
        req = self.build_request(emotion_result, context, tone, user_text)
        parts = [text for _, text in self.run_steps(req) if text]
        return " ".join(parts) if parts else GENTLE_PRESENCE_MESSAGE

    def is_escalation(
        self,
        context: Optional[ConversationContext],
        user_text: Optional[str] = None,
    ) -> bool:
        req = self.build_request(None, context, DEFAULT_TONE, user_text)
        return escalation_applies(req)


_default_engine: Optional[ComfortEngine] = None


def generate_comfort(
    emotion_result: Optional[EmotionResult],
    context: Optional[ConversationContext] = None,
    tone: Union[ToneStyle, str, None] = DEFAULT_TONE,
    user_text: Optional[str] = None,
) -> str:
    """Module-level shortcut using a shared default engine."""
    global _default_engine
    if _default_engine is None:
        _default_engine = ComfortEngine()
    return _default_engine.generate_comfort(emotion_result, context, tone, user_text)
