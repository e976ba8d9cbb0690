"""
Rule-based intent recognition feeding the conversation state machine.
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import Optional

from ..content.lexicon import INTENT_PATTERNS
from .safety import detect_escalation
from .utils import normalize_text

logger = logging.getLogger(__name__)


class Intent(Enum):
    DISTRESS = "distress"
    FAREWELL = "farewell"
    HOMEWORK_HELP = "homework_help"
    SUPPORT_REQUEST = "support_request"
    ADVICE = "advice"
    GRATITUDE = "gratitude"
    GREETING = "greeting"
    SMALL_TALK = "small_talk"
    UNKNOWN = "unknown"


_COMPILED = tuple(
    (Intent(name), tuple(re.compile(p) for p in patterns))
    for name, patterns in INTENT_PATTERNS
)


class IntentRecognizer:
    """
    Ordered regex tables; the first matching intent wins.

    DISTRESS is checked before everything else so that a farewell or a
    greeting can never hide an escalation term.
    """

    def recognize(self, text: Optional[str]) -> Intent:
        normalized = normalize_text(text).replace("’", "'")
        if not normalized:
            return Intent.UNKNOWN
        if detect_escalation(normalized):
            return Intent.DISTRESS
        for intent, patterns in _COMPILED:
            if any(p.search(normalized) for p in patterns):
                logger.debug(f"Intent {intent.value} for {normalized[:40]!r}")
                return intent
        return Intent.SMALL_TALK
