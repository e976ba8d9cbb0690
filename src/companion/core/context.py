"""
Per-session conversation memory.

Holds the ordered turn history, the current topic and the session clock.
Every accessor tolerates an empty context and returns a neutral default
instead of raising.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from ..content.lexicon import GENERAL_TOPIC
from .utils import normalize_text

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Turn:
    """One user utterance and the reply it received."""
    user_text: str
    system_reply: str
    topic_tag: str = GENERAL_TOPIC
    timestamp: float = 0.0

    def to_dict(self) -> Dict:
        return {
            "user_text": self.user_text,
            "system_reply": self.system_reply,
            "topic_tag": self.topic_tag,
            "timestamp": self.timestamp,
        }


@dataclass
class ConversationContext:
    """
    Append-only turn history for a single session.

    Turns are kept in insertion order. Only ``add_turn`` and ``reset``
    mutate the context.
    """
    clock: Callable[[], float] = field(default=time.time, repr=False)
    turns: List[Turn] = field(default_factory=list)
    current_topic: str = ""
    topic_stack: List[str] = field(default_factory=list)
    session_start: float = 0.0

    def __post_init__(self):
        if not self.session_start:
            self.session_start = self.clock()

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def add_turn(
        self,
        user_text: Optional[str],
        system_reply: Optional[str],
        topic_tag: Optional[str] = None,
    ) -> Turn:
        """Append a turn and make its topic the current one."""
        topic = topic_tag or GENERAL_TOPIC
        turn = Turn(
            user_text=user_text or "",
            system_reply=system_reply or "",
            topic_tag=topic,
            timestamp=self.clock(),
        )
        self.turns.append(turn)
        if topic != self.current_topic:
            self.topic_stack.append(topic)
        self.current_topic = topic
        return turn

    def reset(self) -> None:
        """Clear turns and topic state and restart the session clock."""
        self.turns.clear()
        self.topic_stack.clear()
        self.current_topic = ""
        self.session_start = self.clock()
        logger.debug("Conversation context reset")

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    def get_turn_count(self) -> int:
        return len(self.turns)

    def get_last_user_input(self) -> str:
        return self.turns[-1].user_text if self.turns else ""

    def get_last_system_reply(self) -> str:
        return self.turns[-1].system_reply if self.turns else ""

    def get_last_turn_topic(self) -> str:
        return self.turns[-1].topic_tag if self.turns else ""

    def get_conversation_duration_minutes(self) -> float:
        """Minutes since the session started; 0.0 for an empty context."""
        if not self.turns:
            return 0.0
        return max(0.0, (self.clock() - self.session_start) / 60.0)

    def get_recent_history(self, n: int = 5) -> List[Turn]:
        """The last ``n`` turns, oldest first."""
        if n <= 0:
            return []
        return list(self.turns[-n:])

    def get_recent_user_inputs(self, n: int) -> List[str]:
        return [t.user_text for t in self.get_recent_history(n)]

    def search_history(self, query: Optional[str]) -> List[Turn]:
        """Turns whose user text contains ``query`` (case-insensitive)."""
        needle = normalize_text(query)
        if not needle:
            return []
        return [t for t in self.turns if needle in normalize_text(t.user_text)]

    def is_idle(self, timeout_minutes: float) -> bool:
        """True if nothing has happened for ``timeout_minutes``."""
        last = self.turns[-1].timestamp if self.turns else self.session_start
        return (self.clock() - last) / 60.0 >= timeout_minutes

    # -------------------------------------------------------------------------
    # Export
    # -------------------------------------------------------------------------

    def summary(self) -> Dict:
        """Compact view for status displays."""
        topics: List[str] = []
        for topic in reversed(self.topic_stack):
            if topic not in topics:
                topics.append(topic)
        return {
            "turn_count": self.get_turn_count(),
            "current_topic": self.current_topic,
            "recent_topics": topics[:5],
            "duration_minutes": round(self.get_conversation_duration_minutes(), 2),
            "last_user_input": self.get_last_user_input(),
        }

    def to_transcript(self) -> str:
        """Human-readable transcript of the whole session."""
        started = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(self.session_start))
        lines = [f"Conversation transcript (started {started})", ""]
        if not self.turns:
            lines.append("(no messages yet)")
        for i, turn in enumerate(self.turns, 1):
            stamp = time.strftime("%H:%M:%S", time.localtime(turn.timestamp))
            lines.append(f"[{i}] {stamp} ({turn.topic_tag})")
            lines.append(f"You: {turn.user_text}")
            lines.append(f"Companion: {turn.system_reply}")
            lines.append("")
        return "\n".join(lines).rstrip() + "\n"
