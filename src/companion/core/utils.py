"""
Small text and numeric helpers shared by the pipeline engines.
"""

from __future__ import annotations

import re
from typing import List, Optional, Sequence, TypeVar

import numpy as np

T = TypeVar("T")

_TOKEN_RE = re.compile(r"[a-z]+(?:'[a-z]+)?")


def normalize_text(text: Optional[str]) -> str:
    """Lower-case and collapse whitespace. ``None`` becomes ``""``."""
    if not text:
        return ""
    return " ".join(str(text).lower().split())


def tokenize(text: Optional[str]) -> List[str]:
    """Split text into lower-case word tokens, keeping inner apostrophes."""
    return _TOKEN_RE.findall(normalize_text(text))


def clamp(x: float, low: float = 0.0, high: float = 1.0) -> float:
    """Clamp a scalar into [low, high]."""
    return float(np.clip(x, low, high))


def overlap_coefficient(a: set, b: set) -> float:
    """|a & b| / min(|a|, |b|); 0.0 when either set is empty."""
    if not a or not b:
        return 0.0
    return len(a & b) / min(len(a), len(b))


def pick(options: Sequence[T], index: int) -> T:
    """Deterministically pick an option by index, wrapping around."""
    return options[index % len(options)]
