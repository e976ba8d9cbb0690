"""
CompanionAgent: per-session orchestrator for the dialogue pipeline.

One turn runs, synchronously and in order:
    emotion detection -> intent -> state transition -> topic clustering
    -> reply routing (comfort | farewell | welcome | state prompt | mood)
    -> context update

Each session owns its own context, state machine and topic clusters;
the detector, lexicons and templates are shared read-only.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Union

from ..content.templates import FAREWELL_MESSAGE, STATE_PROMPTS, WELCOME_MESSAGE
from .comfort import ComfortEngine, ToneStyle
from .config import DEFAULT_CONFIG, CompanionConfig
from .context import ConversationContext
from .emotion import EmotionDetector, EmotionResult, get_detector
from .intent import Intent, IntentRecognizer
from .mood import MoodAnalysis, MoodEngine, MoodEnhancer
from .state_machine import ConversationState, ConversationStateMachine
from .topics import TopicClusteringSystem

logger = logging.getLogger(__name__)

ROUTE_COMFORT = "comfort"
ROUTE_FAREWELL = "farewell"
ROUTE_WELCOME = "welcome"
ROUTE_PROMPT = "state_prompt"
ROUTE_MOOD = "mood"


@dataclass
class TurnResult:
    """Everything a transport needs to display one turn."""
    reply: str
    emotion: EmotionResult
    intent: Intent
    state: ConversationState
    topic: str
    route: str
    turn_count: int
    escalated: bool = False
    active_topics: List[str] = field(default_factory=list)
    mood: Optional[MoodAnalysis] = None

    @property
    def intensity(self) -> float:
        return self.emotion.intensity

    def to_dict(self) -> Dict[str, Any]:
        return {
            "reply": self.reply,
            "emotion": self.emotion.primary_emotion.value,
            "intensity": round(self.emotion.intensity, 3),
            "intent": self.intent.value,
            "state": self.state.value,
            "topic": self.topic,
            "active_topics": list(self.active_topics),
            "turn_count": self.turn_count,
            "escalated": self.escalated,
            "route": self.route,
            "mood": self.mood.to_dict() if self.mood else None,
        }


class CompanionAgent:
    """
    Main orchestrator for one companion session.

    Usage:
        agent = CompanionAgent()
        agent.start_session()          # welcome message
        result = agent.step("I'm feeling really sad and down")
        result.reply
    """

    def __init__(
        self,
        config: Optional[CompanionConfig] = None,
        tone: Union[ToneStyle, str, None] = None,
        detector: Optional[EmotionDetector] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.config = config or DEFAULT_CONFIG
        self.detector = detector or get_detector()

        clock_kw = {"clock": clock} if clock is not None else {}
        self.context = ConversationContext(**clock_kw)
        self.topics = TopicClusteringSystem(config=self.config, **clock_kw)
        self.state_machine = ConversationStateMachine(config=self.config)

        self.intents = IntentRecognizer()
        self.mood_engine = MoodEngine(detector=self.detector, config=self.config)
        self.enhancer = MoodEnhancer()
        self.comfort = ComfortEngine(config=self.config)

        # None means "follow the mood engine's recommendation"
        self.tone: Optional[ToneStyle] = ToneStyle.coerce(tone) if tone is not None else None
        self.last_result: Optional[TurnResult] = None

    # -------------------------------------------------------------------------
    # Session lifecycle
    # -------------------------------------------------------------------------

    def start_session(self) -> Dict[str, Any]:
        """Reset all per-session state and return the welcome message."""
        self.reset()
        return {
            "message": WELCOME_MESSAGE,
            "state": self.state_machine.state.value,
            "turn_count": 0,
        }

    def reset(self) -> None:
        self.context.reset()
        self.topics.reset_clusters()
        self.state_machine.reset()
        self.last_result = None

    def set_tone(self, tone: Union[ToneStyle, str, None]) -> Optional[ToneStyle]:
        """Pin a tone style; ``None`` returns to the recommended tone."""
        self.tone = ToneStyle.coerce(tone) if tone is not None else None
        logger.info(f"Tone set to {self.tone.value if self.tone else 'auto'}")
        return self.tone

    def transcript(self) -> str:
        return self.context.to_transcript()

    # -------------------------------------------------------------------------
    # Turn processing
    # -------------------------------------------------------------------------

    def step(self, text: Optional[str]) -> TurnResult:
        """Process one user utterance and return the reply with its signals."""
        text = text or ""

        emotion = self.detector.detect_emotion(text)
        intent = self.intents.recognize(text)
        state = self.state_machine.transition(intent, emotion)
        topic = self.topics.observe(text)
        mood = self.mood_engine.analyze_result(emotion, text, self.context)

        escalated = intent == Intent.DISTRESS or self.comfort.is_escalation(self.context, text)
        tone = self.tone or mood.recommended_tone

        if escalated or self.state_machine.is_supportive or emotion.is_negative:
            route = ROUTE_COMFORT
            reply = self.comfort.generate_comfort(emotion, self.context, tone, user_text=text)
        elif state == ConversationState.CLOSING:
            route, reply = ROUTE_FAREWELL, FAREWELL_MESSAGE
        elif intent == Intent.GREETING and state == ConversationState.GREETING:
            route, reply = ROUTE_WELCOME, WELCOME_MESSAGE
        elif state.value in STATE_PROMPTS:
            route, reply = ROUTE_PROMPT, STATE_PROMPTS[state.value]
        else:
            route = ROUTE_MOOD
            enhancement = self.enhancer.enhance_mood(mood)
            reply = f"{enhancement.enhancement_message} {enhancement.suggested_action}"

        self.context.add_turn(text, reply, topic)

        result = TurnResult(
            reply=reply,
            emotion=emotion,
            intent=intent,
            state=state,
            topic=topic,
            route=route,
            turn_count=self.context.get_turn_count(),
            escalated=escalated,
            active_topics=[c.cluster_name for c in self.topics.get_active_clusters()],
            mood=mood,
        )
        self.last_result = result
        logger.debug(f"Turn {result.turn_count}: {route} ({emotion.primary_emotion.value}, {state.value})")
        return result

    # -------------------------------------------------------------------------
    # Status
    # -------------------------------------------------------------------------

    def status(self) -> Dict[str, Any]:
        """Session snapshot for status displays."""
        last = self.last_result
        return {
            "state": self.state_machine.state.value,
            "tone": self.tone.value if self.tone else None,
            "detected_mood": last.emotion.primary_emotion.value if last else None,
            "turn_count": self.context.get_turn_count(),
            "active_topics": [c.to_dict() for c in self.topics.get_active_clusters()],
            "context": self.context.summary(),
        }
