"""
Severe-distress screening.

Shared by the comfort engine (escalation override) and the intent
recognizer (DISTRESS intent), so both agree on what counts as acute
distress.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, List, Optional

from ..content.lexicon import ESCALATION_KEYWORDS
from .utils import normalize_text

logger = logging.getLogger(__name__)

_ESCALATION_PATTERNS = tuple(
    (term, re.compile(r"\b" + re.escape(term)))
    for term in ESCALATION_KEYWORDS
)


def _unify_apostrophes(text: str) -> str:
    return text.replace("’", "'").replace("‘", "'")


def detect_escalation(text: Optional[str]) -> List[str]:
    """
    Return the escalation terms found in ``text``.

    Terms are anchored at their start only, so inflected forms such as
    "hopelessness" still match.

    Empty or ``None`` input yields an empty list.
    """
    normalized = _unify_apostrophes(normalize_text(text))
    if not normalized:
        return []
    return [term for term, pattern in _ESCALATION_PATTERNS if pattern.search(normalized)]


def needs_escalation(texts: Iterable[Optional[str]]) -> bool:
    """True if any of ``texts`` contains an escalation term."""
    for text in texts:
        matched = detect_escalation(text)
        if matched:
            logger.info(f"Escalation terms detected: {matched}")
            return True
    return False
