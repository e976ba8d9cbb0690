"""
Pipeline thresholds for the companion dialogue core.

Every intensity / turn-count cut-off used by the engines lives here so that
call sites never hard-code their own copy. Values can be overridden per
process through ``COMPANION_*`` environment variables.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields

logger = logging.getLogger(__name__)

# Comfort strategies switch to their high-empathy variant above this.
HIGH_EMPATHY_THRESHOLD = 0.7

# Negative emotion at or above this forces the SUPPORT state.
HIGH_INTENSITY_THRESHOLD = 0.85

# Below this the user is treated as low-energy.
LOW_ENERGY_THRESHOLD = 0.3

# Reinforcement clause is added once the context holds more turns than this.
REINFORCEMENT_TURN_THRESHOLD = 4

# Minimum keyword overlap coefficient for a turn to join an existing cluster.
TOPIC_OVERLAP_THRESHOLD = 0.5

SESSION_IDLE_TIMEOUT_MINUTES = 30

# Prior user turns re-read by the escalation screen, besides the current one.
RECENT_TURNS_FOR_ESCALATION = 1

ENV_PREFIX = "COMPANION_"


@dataclass(frozen=True)
class CompanionConfig:
    """
    Immutable bundle of pipeline thresholds.

    Engines take an optional config; when omitted they use DEFAULT_CONFIG.
    """
    high_empathy_threshold: float = HIGH_EMPATHY_THRESHOLD
    high_intensity_threshold: float = HIGH_INTENSITY_THRESHOLD
    low_energy_threshold: float = LOW_ENERGY_THRESHOLD
    reinforcement_turn_threshold: int = REINFORCEMENT_TURN_THRESHOLD
    topic_overlap_threshold: float = TOPIC_OVERLAP_THRESHOLD
    session_idle_timeout_minutes: float = SESSION_IDLE_TIMEOUT_MINUTES
    recent_turns_for_escalation: int = RECENT_TURNS_FOR_ESCALATION

    @classmethod
    def from_env(cls, environ=None) -> "CompanionConfig":
        """
        Build a config, overriding defaults from the environment.

        ``COMPANION_HIGH_EMPATHY_THRESHOLD=0.6`` overrides
        ``high_empathy_threshold`` and so on. Unparseable values are
        logged and ignored.
        """
        env = os.environ if environ is None else environ
        overrides = {}
        for f in fields(cls):
            key = ENV_PREFIX + f.name.upper()
            raw = env.get(key)
            if raw is None or not raw.strip():
                continue
            cast = int if f.type in (int, "int") else float
            try:
                overrides[f.name] = cast(raw.strip())
            except ValueError:
                logger.warning(f"Ignoring invalid {key}={raw!r}; keeping default")
        return cls(**overrides)


DEFAULT_CONFIG = CompanionConfig()


def log_level_from_env(environ=None, default: int = logging.INFO) -> int:
    """Level named by ``COMPANION_LOG_LEVEL``; unknown names keep ``default``."""
    env = os.environ if environ is None else environ
    raw = env.get(ENV_PREFIX + "LOG_LEVEL", "").strip()
    if not raw:
        return default
    level = logging.getLevelName(raw.upper())
    if not isinstance(level, int):
        logger.warning(f"Ignoring invalid {ENV_PREFIX}LOG_LEVEL={raw!r}; keeping default")
        return default
    return level
