"""
Lexicon-based emotion detection.

Maps one utterance to a primary emotion and an intensity in [0, 1]:

    1. Single-token keywords score 1.0 each, multi-word phrases 1.5 each.
    2. The highest raw score wins; ties go to the earlier emotion in
       EMOTION_PRIORITY, so negative affect beats positive affect and
       NEUTRAL always comes last.
    3. Intensity starts from match density and is pushed up by
       intensifiers ("really", "extremely"), repeated "!" and ALL-CAPS
       words, and pulled down by diminishers ("kind of", "a bit").

Detection is a pure function of the text and the shared lexicon.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

import numpy as np

from ..content.lexicon import (
    DIMINISHERS,
    EMOTION_KEYWORDS,
    EMOTION_PHRASES,
    EMOTION_PRIORITY,
    EMPHASIS_BONUS,
    INTENSIFIERS,
    KEYWORD_WEIGHT,
    MAX_EMPHASIS_BONUS,
    PHRASE_WEIGHT,
)
from .utils import clamp, normalize_text, tokenize

logger = logging.getLogger(__name__)


class Emotion(Enum):
    SAD = "sad"
    ANXIOUS = "anxious"
    STRESSED = "stressed"
    FRUSTRATED = "frustrated"
    OVERWHELMED = "overwhelmed"
    LONELY = "lonely"
    ANGRY = "angry"
    HURT = "hurt"
    TIRED = "tired"
    BORED = "bored"
    CONFUSED = "confused"
    DISAPPOINTED = "disappointed"
    HAPPY = "happy"
    EXCITED = "excited"
    GRATEFUL = "grateful"
    CALM = "calm"
    HOPEFUL = "hopeful"
    PROUD = "proud"
    CURIOUS = "curious"
    NEUTRAL = "neutral"

    @property
    def is_negative(self) -> bool:
        return self in NEGATIVE_EMOTIONS

    @property
    def is_positive(self) -> bool:
        return self in POSITIVE_EMOTIONS


NEGATIVE_EMOTIONS = frozenset({
    Emotion.SAD, Emotion.ANXIOUS, Emotion.STRESSED, Emotion.FRUSTRATED,
    Emotion.OVERWHELMED, Emotion.LONELY, Emotion.ANGRY, Emotion.HURT,
    Emotion.TIRED, Emotion.BORED, Emotion.CONFUSED, Emotion.DISAPPOINTED,
})

POSITIVE_EMOTIONS = frozenset({
    Emotion.HAPPY, Emotion.EXCITED, Emotion.GRATEFUL, Emotion.CALM,
    Emotion.HOPEFUL, Emotion.PROUD, Emotion.CURIOUS,
})

PRIORITY_ORDER: Tuple[Emotion, ...] = tuple(Emotion(name) for name in EMOTION_PRIORITY)

# Intensity before any modifiers, and the increment per unit of raw score.
BASE_INTENSITY = 0.25
SCORE_STEP = 0.2

_EMPHASIS_RE = re.compile(r"!{2,}|\?!|!\?")
# shouted words; two-letter acronyms such as "OK" or "TV" do not count
_CAPS_RE = re.compile(r"\b[A-Z]{3,}\b")


@dataclass(frozen=True)
class EmotionResult:
    """Outcome of one detection: the winning emotion, its strength and raw scores."""
    primary_emotion: Emotion = Emotion.NEUTRAL
    intensity: float = 0.0
    scores: Mapping[Emotion, float] = field(default_factory=lambda: MappingProxyType({}))
    matched_terms: Tuple[str, ...] = ()

    @property
    def is_negative(self) -> bool:
        return self.primary_emotion.is_negative

    def to_dict(self) -> Dict:
        return {
            "primary_emotion": self.primary_emotion.value,
            "intensity": round(self.intensity, 3),
            "scores": {e.value: s for e, s in self.scores.items()},
            "matched_terms": list(self.matched_terms),
        }


NEUTRAL_RESULT = EmotionResult()


def _compile_phrases(phrases: Mapping[str, Tuple[str, ...]]) -> Dict[str, List[re.Pattern]]:
    return {
        emotion: [re.compile(r"\b" + re.escape(p) + r"\b") for p in items]
        for emotion, items in phrases.items()
    }


class EmotionDetector:
    """
    Keyword/phrase emotion classifier over a fixed lexicon.

    Holds only compiled lookup tables, so one instance can be shared by
    every session.
    """

    def __init__(
        self,
        keywords: Mapping[str, Tuple[str, ...]] = EMOTION_KEYWORDS,
        phrases: Mapping[str, Tuple[str, ...]] = EMOTION_PHRASES,
    ):
        self._keywords = {emotion: frozenset(words) for emotion, words in keywords.items()}
        self._phrases = _compile_phrases(phrases)
        self._diminishers = [
            (weight, re.compile(r"\b" + re.escape(term) + r"\b"))
            for term, weight in DIMINISHERS.items()
        ]

    # -------------------------------------------------------------------------
    # Scoring
    # -------------------------------------------------------------------------

    def _score(self, normalized: str, tokens: List[str]) -> Tuple[np.ndarray, List[str]]:
        scores = np.zeros(len(PRIORITY_ORDER))
        matched: List[str] = []
        for i, emotion in enumerate(PRIORITY_ORDER):
            words = self._keywords.get(emotion.value, frozenset())
            for token in tokens:
                if token in words:
                    scores[i] += KEYWORD_WEIGHT
                    matched.append(token)
            for pattern in self._phrases.get(emotion.value, []):
                hits = pattern.findall(normalized)
                if hits:
                    scores[i] += PHRASE_WEIGHT * len(hits)
                    matched.extend(hits)
        return scores, matched

    def _modifier(self, raw: str, normalized: str, tokens: List[str]) -> float:
        boost = 0.0
        for i, token in enumerate(tokens):
            # "not really" is a diminisher, not an intensifier
            if token in INTENSIFIERS and (i == 0 or tokens[i - 1] != "not"):
                boost += INTENSIFIERS[token]

        dampen = 0.0
        for weight, pattern in self._diminishers:
            if pattern.search(normalized):
                dampen += weight

        emphasis = EMPHASIS_BONUS * (
            len(_EMPHASIS_RE.findall(raw)) + len(_CAPS_RE.findall(raw))
        )
        return boost + dampen + min(emphasis, MAX_EMPHASIS_BONUS)

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def detect_emotion(self, text: Optional[str]) -> EmotionResult:
        """
        Classify ``text``. Never raises and never returns None.

        Empty, whitespace-only or unmatched input yields NEUTRAL with
        intensity 0.0.
        """
        raw = "" if text is None else str(text)
        normalized = normalize_text(raw).replace("’", "'")
        if not normalized:
            return NEUTRAL_RESULT

        tokens = tokenize(normalized)
        scores, matched = self._score(normalized, tokens)
        if not scores.any():
            return NEUTRAL_RESULT

        # argmax returns the first maximum, which is the priority tie-break
        best = int(np.argmax(scores))
        primary = PRIORITY_ORDER[best]
        intensity = clamp(
            BASE_INTENSITY + SCORE_STEP * scores[best] + self._modifier(raw, normalized, tokens)
        )

        nonzero = MappingProxyType({
            PRIORITY_ORDER[i]: float(scores[i]) for i in np.flatnonzero(scores)
        })
        logger.debug(f"Detected {primary.value} ({intensity:.2f}) from {matched}")
        return EmotionResult(
            primary_emotion=primary,
            intensity=intensity,
            scores=nonzero,
            matched_terms=tuple(matched),
        )

    def ranked(self, text: Optional[str]) -> List[Tuple[Emotion, float]]:
        """All emotions with a non-zero score, strongest first."""
        result = self.detect_emotion(text)
        order = {emotion: i for i, emotion in enumerate(PRIORITY_ORDER)}
        return sorted(result.scores.items(), key=lambda kv: (-kv[1], order[kv[0]]))

    @staticmethod
    def is_mixed(result: Optional[EmotionResult], ratio: float = 0.5) -> bool:
        """True when a runner-up emotion scores at least ``ratio`` of the winner."""
        if result is None or len(result.scores) < 2:
            return False
        values = sorted(result.scores.values(), reverse=True)
        return values[1] >= ratio * values[0]

    @staticmethod
    def describe_intensity(value: float) -> str:
        if value >= 0.85:
            return "very strongly"
        if value >= 0.7:
            return "strongly"
        if value >= 0.4:
            return "moderately"
        return "slightly"


_default_detector: Optional[EmotionDetector] = None


def get_detector() -> EmotionDetector:
    """Shared detector, built on first use."""
    global _default_detector
    if _default_detector is None:
        _default_detector = EmotionDetector()
    return _default_detector


def detect_emotion(text: Optional[str]) -> EmotionResult:
    return get_detector().detect_emotion(text)
