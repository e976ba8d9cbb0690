"""
Mood analysis and enhancement.

MoodEngine turns an utterance into a MoodAnalysis: the surface emotion,
the need that most likely sits underneath it, how confident we are, any
conversational subtext ("I'm fine", "never mind") and the tone a reply
should take. MoodEnhancer turns that analysis into a short uplifting
message plus one concrete suggested action.

Both lookups are fixed tables with explicit fallbacks, so every Emotion
value yields a non-empty enhancement.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from ..content.lexicon import SUBTEXT_PATTERNS
from ..content.templates import (
    ENHANCEMENT_MESSAGES,
    FOLLOW_UP_SUGGESTIONS,
    SUGGESTED_ACTIONS,
)
from .comfort import ToneStyle
from .config import DEFAULT_CONFIG, CompanionConfig
from .context import ConversationContext
from .emotion import Emotion, EmotionDetector, EmotionResult, get_detector
from .utils import clamp, normalize_text, pick

logger = logging.getLogger(__name__)


class UnderlyingNeed(Enum):
    REST = "rest"
    REASSURANCE = "reassurance"
    PERSPECTIVE = "perspective"
    CONFIDENCE = "confidence"
    STIMULATION = "stimulation"


class EnhancementType(Enum):
    ENERGY_BOOST = "energy_boost"
    PERSPECTIVE_LIFT = "perspective_lift"
    CONFIDENCE_BUILD = "confidence_build"
    GROUNDING = "grounding"


NEED_TABLE: Dict[Emotion, UnderlyingNeed] = {
    Emotion.SAD: UnderlyingNeed.REST,
    Emotion.TIRED: UnderlyingNeed.REST,
    Emotion.OVERWHELMED: UnderlyingNeed.REST,
    Emotion.LONELY: UnderlyingNeed.REASSURANCE,
    Emotion.HURT: UnderlyingNeed.REASSURANCE,
    Emotion.STRESSED: UnderlyingNeed.PERSPECTIVE,
    Emotion.FRUSTRATED: UnderlyingNeed.PERSPECTIVE,
    Emotion.ANGRY: UnderlyingNeed.PERSPECTIVE,
    Emotion.ANXIOUS: UnderlyingNeed.CONFIDENCE,
    Emotion.CONFUSED: UnderlyingNeed.CONFIDENCE,
    Emotion.DISAPPOINTED: UnderlyingNeed.CONFIDENCE,
    Emotion.BORED: UnderlyingNeed.STIMULATION,
    Emotion.NEUTRAL: UnderlyingNeed.STIMULATION,
    Emotion.HAPPY: UnderlyingNeed.STIMULATION,
    Emotion.EXCITED: UnderlyingNeed.STIMULATION,
    Emotion.GRATEFUL: UnderlyingNeed.STIMULATION,
    Emotion.CALM: UnderlyingNeed.STIMULATION,
    Emotion.HOPEFUL: UnderlyingNeed.STIMULATION,
    Emotion.PROUD: UnderlyingNeed.STIMULATION,
    Emotion.CURIOUS: UnderlyingNeed.STIMULATION,
}

FALLBACK_NEED = UnderlyingNeed.REASSURANCE

# REASSURANCE deliberately has no entry: it resolves to GROUNDING.
ENHANCEMENT_TABLE: Dict[UnderlyingNeed, EnhancementType] = {
    UnderlyingNeed.REST: EnhancementType.ENERGY_BOOST,
    UnderlyingNeed.STIMULATION: EnhancementType.ENERGY_BOOST,
    UnderlyingNeed.PERSPECTIVE: EnhancementType.PERSPECTIVE_LIFT,
    UnderlyingNeed.CONFIDENCE: EnhancementType.CONFIDENCE_BUILD,
}

FALLBACK_ENHANCEMENT = EnhancementType.GROUNDING

SUBTEXT_CONFIDENCE_FACTOR = 0.85

_SUBTEXT = tuple((name, re.compile(pattern)) for name, pattern in SUBTEXT_PATTERNS)


@dataclass(frozen=True)
class MoodAnalysis:
    surface_emotion: Emotion
    underlying_need: UnderlyingNeed
    confidence: float
    intensity: float = 0.0
    subtext: Tuple[str, ...] = ()
    recommended_tone: ToneStyle = ToneStyle.BALANCED

    def to_dict(self) -> Dict:
        return {
            "surface_emotion": self.surface_emotion.value,
            "underlying_need": self.underlying_need.value,
            "confidence": round(self.confidence, 3),
            "intensity": round(self.intensity, 3),
            "subtext": list(self.subtext),
            "recommended_tone": self.recommended_tone.value,
        }


@dataclass(frozen=True)
class EnhancementResult:
    enhancement_type: EnhancementType
    enhancement_message: str
    suggested_action: str
    follow_up_suggestions: Tuple[str, ...] = ()

    def to_dict(self) -> Dict:
        return {
            "enhancement_type": self.enhancement_type.value,
            "enhancement_message": self.enhancement_message,
            "suggested_action": self.suggested_action,
            "follow_up_suggestions": list(self.follow_up_suggestions),
        }


def detect_subtext(text: Optional[str]) -> Tuple[str, ...]:
    normalized = normalize_text(text).replace("’", "'")
    return tuple(name for name, pattern in _SUBTEXT if pattern.search(normalized))


class MoodEngine:
    """Derives a MoodAnalysis from an utterance and its session context."""

    def __init__(
        self,
        detector: Optional[EmotionDetector] = None,
        config: Optional[CompanionConfig] = None,
    ):
        self.detector = detector or get_detector()
        self.config = config or DEFAULT_CONFIG

    def analyze_mood(
        self, text: Optional[str], context: Optional[ConversationContext] = None
    ) -> MoodAnalysis:
        return self.analyze_result(self.detector.detect_emotion(text), text, context)

    def analyze_result(
        self,
        result: Optional[EmotionResult],
        text: Optional[str] = None,
        context: Optional[ConversationContext] = None,
    ) -> MoodAnalysis:
        """Build the analysis from an already detected emotion."""
        if result is None:
            logger.debug("No emotion result; analysing as neutral")
            result = self.detector.detect_emotion(text)

        emotion, intensity = result.primary_emotion, result.intensity
        need = self._underlying_need(emotion, intensity)

        if emotion == Emotion.NEUTRAL and not result.scores:
            confidence = 0.3
        else:
            confidence = 0.5 + 0.5 * intensity

        # Same negative emotion as the previous turn: the mood is persisting.
        if context is not None and emotion.is_negative and context.get_turn_count():
            previous = self.detector.detect_emotion(context.get_last_user_input())
            if previous.primary_emotion == emotion:
                confidence += 0.1

        subtext = detect_subtext(text)
        if subtext:
            confidence *= SUBTEXT_CONFIDENCE_FACTOR

        return MoodAnalysis(
            surface_emotion=emotion,
            underlying_need=need,
            confidence=clamp(confidence),
            intensity=intensity,
            subtext=subtext,
            recommended_tone=self._recommended_tone(emotion, intensity, subtext),
        )

    def _underlying_need(self, emotion: Emotion, intensity: float) -> UnderlyingNeed:
        need = NEED_TABLE.get(emotion)
        if need is None:
            logger.info(f"No need mapped for {emotion}; using {FALLBACK_NEED.value}")
            return FALLBACK_NEED
        if need == UnderlyingNeed.REST and intensity >= self.config.high_intensity_threshold:
            return UnderlyingNeed.REASSURANCE
        return need

    def _recommended_tone(
        self, emotion: Emotion, intensity: float, subtext: Tuple[str, ...]
    ) -> ToneStyle:
        if subtext:
            return ToneStyle.EMPATHETIC
        if intensity > self.config.high_empathy_threshold:
            if emotion in (Emotion.ANXIOUS, Emotion.STRESSED, Emotion.OVERWHELMED):
                return ToneStyle.CALMING
            if emotion in (Emotion.SAD, Emotion.HURT, Emotion.LONELY):
                return ToneStyle.EMPATHETIC
            if emotion.is_positive:
                return ToneStyle.UPLIFTING
        if emotion.is_negative and intensity < self.config.low_energy_threshold:
            return ToneStyle.SOFT
        if emotion.is_positive:
            return ToneStyle.ENCOURAGING
        return ToneStyle.BALANCED


class MoodEnhancer:
    """Renders an EnhancementResult from a MoodAnalysis using fixed templates."""

    def enhance_mood(self, analysis: Optional[MoodAnalysis]) -> EnhancementResult:
        if analysis is None:
            logger.debug("No mood analysis; using grounding enhancement")
            return self._render(FALLBACK_ENHANCEMENT, Emotion.NEUTRAL, 0.0)
        enhancement = ENHANCEMENT_TABLE.get(analysis.underlying_need, FALLBACK_ENHANCEMENT)
        return self._render(enhancement, analysis.surface_emotion, analysis.intensity)

    def _render(
        self, enhancement: EnhancementType, emotion: Emotion, intensity: float
    ) -> EnhancementResult:
        pools = ENHANCEMENT_MESSAGES[enhancement.value]
        messages = pools.get(emotion.value, pools["default"])
        index = int(round(intensity * 10))
        return EnhancementResult(
            enhancement_type=enhancement,
            enhancement_message=pick(messages, index),
            suggested_action=pick(SUGGESTED_ACTIONS[enhancement.value], index),
            follow_up_suggestions=tuple(FOLLOW_UP_SUGGESTIONS[enhancement.value]),
        )

    @staticmethod
    def detect_enhancement_need(analysis: Optional[MoodAnalysis]) -> bool:
        """True when the mood calls for an active lift rather than plain chat."""
        if analysis is None:
            return False
        return analysis.surface_emotion.is_negative or bool(analysis.subtext)
