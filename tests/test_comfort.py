"""
Tests for the Comfort Engine.

Covers:
1. Total behaviour across emotion / context / tone combinations
2. The severe-distress escalation override
3. Intensity-based strategy variants and the neutral fallback
4. Context-aware reinforcement
5. Determinism and the individual pipeline steps
"""

import pytest

from companion.content.templates import (
    COMFORT_STRATEGIES,
    ENHANCEMENT_MESSAGES,
    GENTLE_PRESENCE_MESSAGE,
    REINFORCEMENT_CLAUSE,
    TONE_PHRASES,
)
from companion.core.comfort import (
    COMFORT_STEPS,
    ComfortEngine,
    ComfortRequest,
    ToneStyle,
    escalation_applies,
    generate_comfort,
    reinforcement_applies,
)
from companion.core.config import CompanionConfig
from companion.core.context import ConversationContext
from companion.core.emotion import Emotion, EmotionResult, detect_emotion


@pytest.fixture
def engine():
    return ComfortEngine()


def _context_with(*user_texts):
    context = ConversationContext()
    for text in user_texts:
        context.add_turn(text, "I'm listening.")
    return context


def _has_escalation_language(reply: str) -> bool:
    lowered = reply.lower()
    return "you matter" in lowered or "reach out" in lowered


EMOTION_CASES = [None] + [EmotionResult(e, 0.5) for e in Emotion] + [
    EmotionResult(Emotion.SAD, 0.0),
    EmotionResult(Emotion.SAD, 1.0),
]


class TestTotality:
    @pytest.mark.parametrize("emotion", EMOTION_CASES)
    @pytest.mark.parametrize("tone", list(ToneStyle) + [None, "unknown-tone"])
    def test_always_non_empty(self, engine, emotion, tone):
        for context in (None, ConversationContext(), _context_with(*["just chatting"] * 6)):
            reply = engine.generate_comfort(emotion, context, tone)
            assert isinstance(reply, str)
            assert reply.strip()

    def test_none_emotion_gives_gentle_presence(self, engine):
        reply = engine.generate_comfort(None, None, ToneStyle.SOFT)
        assert GENTLE_PRESENCE_MESSAGE in reply

    def test_context_not_mutated(self, engine):
        context = _context_with("hello", "I'm sad")
        engine.generate_comfort(EmotionResult(Emotion.SAD, 0.5), context, ToneStyle.SOFT)
        assert context.get_turn_count() == 2


class TestEscalation:
    @pytest.mark.parametrize("term", ["hopeless", "worthless", "no point", "give up"])
    @pytest.mark.parametrize("tone", list(ToneStyle))
    def test_escalation_overrides_tone_and_emotion(self, engine, term, tone):
        context = _context_with(f"honestly I feel like {term}")
        reply = engine.generate_comfort(EmotionResult(Emotion.HAPPY, 0.2), context, tone)
        assert _has_escalation_language(reply)

    def test_hopeless_example(self, engine):
        """'I feel hopeless' as the latest turn yields escalation language."""
        text = "I feel hopeless"
        context = _context_with(text)
        reply = engine.generate_comfort(detect_emotion(text), context, ToneStyle.SOFT)
        assert _has_escalation_language(reply)

    @pytest.mark.parametrize("text", [
        "I'm drowning in hopelessness",
        "Honestly the worthlessness never stops",
        "I gave up trying weeks ago",
    ])
    def test_inflected_forms_escalate(self, engine, text):
        context = _context_with(text)
        reply = engine.generate_comfort(detect_emotion(text), context, ToneStyle.SOFT)
        assert _has_escalation_language(reply)

    def test_escalation_from_pending_user_text(self, engine):
        """The utterance being answered is screened before it is in the context."""
        reply = engine.generate_comfort(
            None, ConversationContext(), ToneStyle.DIRECT, user_text="I can't go on"
        )
        assert _has_escalation_language(reply)

    def test_escalation_is_terminal(self, engine):
        context = _context_with(*["fine"] * 5 + ["I feel worthless"])
        reply = engine.generate_comfort(EmotionResult(Emotion.SAD, 0.9), context, ToneStyle.SOFT)
        assert REINFORCEMENT_CLAUSE not in reply
        assert COMFORT_STRATEGIES["sad"]["high"] not in reply

    def test_recent_turn_is_rescreened(self, engine):
        context = _context_with("I feel worthless", "ok")
        reply = engine.generate_comfort(EmotionResult(Emotion.NEUTRAL, 0.0), context)
        assert _has_escalation_language(reply)

    def test_old_turn_not_rescreened(self, engine):
        context = _context_with("I feel worthless", "ok", "ok")
        reply = engine.generate_comfort(EmotionResult(Emotion.NEUTRAL, 0.0), context)
        assert not _has_escalation_language(reply)

    def test_empty_last_input_is_safe(self, engine):
        context = _context_with("")
        assert engine.generate_comfort(EmotionResult(Emotion.SAD, 0.5), context)


class TestStrategies:
    def test_sad_example(self, engine):
        """The canonical sad utterance gets an empathetic, sorry/pain/feelings reply."""
        result = detect_emotion("I'm feeling really sad and down")
        reply = engine.generate_comfort(result, ConversationContext(), ToneStyle.EMPATHETIC)
        assert any(word in reply.lower() for word in ("sorry", "pain", "feelings"))

    def test_high_variant_above_threshold(self, engine):
        reply = engine.generate_comfort(EmotionResult(Emotion.ANXIOUS, 0.9), None)
        assert COMFORT_STRATEGIES["anxious"]["high"] in reply

    def test_low_variant_at_threshold(self, engine):
        """The high variant needs intensity strictly above the threshold."""
        reply = engine.generate_comfort(EmotionResult(Emotion.ANXIOUS, 0.7), None)
        assert COMFORT_STRATEGIES["anxious"]["low"] in reply

    @pytest.mark.parametrize("emotion", [Emotion.HAPPY, Emotion.NEUTRAL, Emotion.BORED])
    def test_unmapped_emotion_uses_neutral(self, engine, emotion):
        reply = engine.generate_comfort(EmotionResult(emotion, 0.3), None)
        assert COMFORT_STRATEGIES["neutral"]["low"] in reply

    @pytest.mark.parametrize("tone", list(ToneStyle))
    def test_tone_phrase_included(self, engine, tone):
        reply = engine.generate_comfort(EmotionResult(Emotion.STRESSED, 0.5), None, tone)
        assert TONE_PHRASES[tone.value] in reply

    def test_tone_as_string(self, engine):
        reply = engine.generate_comfort(EmotionResult(Emotion.SAD, 0.5), None, "Calming")
        assert TONE_PHRASES["calming"] in reply


class TestReinforcement:
    def test_long_conversation_reinforced(self, engine):
        context = _context_with(*["just chatting"] * 5)
        reply = engine.generate_comfort(EmotionResult(Emotion.SAD, 0.5), context, ToneStyle.SOFT)
        assert REINFORCEMENT_CLAUSE in reply

    @pytest.mark.parametrize("turns", [0, 1, 4])
    def test_short_conversation_not_reinforced(self, engine, turns):
        context = _context_with(*["just chatting"] * turns)
        reply = engine.generate_comfort(EmotionResult(Emotion.SAD, 0.5), context, ToneStyle.SOFT)
        assert REINFORCEMENT_CLAUSE not in reply

    def test_threshold_from_config(self):
        engine = ComfortEngine(config=CompanionConfig(reinforcement_turn_threshold=1))
        context = _context_with("a", "b")
        reply = engine.generate_comfort(EmotionResult(Emotion.SAD, 0.5), context)
        assert REINFORCEMENT_CLAUSE in reply


class TestDeterminismAndSteps:
    def test_deterministic(self, engine):
        context = _context_with(*["just chatting"] * 6)
        result = EmotionResult(Emotion.OVERWHELMED, 0.8)
        replies = {engine.generate_comfort(result, context, ToneStyle.HOPEFUL) for _ in range(10)}
        assert len(replies) == 1

    def test_step_order(self):
        assert [s.name for s in COMFORT_STEPS] == [
            "escalation", "presence", "strategy", "reinforcement", "support",
        ]
        assert COMFORT_STEPS[0].terminal

    def test_fired_steps_normal(self, engine):
        req = engine.build_request(EmotionResult(Emotion.SAD, 0.5), None, ToneStyle.SOFT)
        assert [name for name, _ in engine.run_steps(req)] == ["strategy", "support"]

    def test_fired_steps_escalation(self, engine):
        req = engine.build_request(
            EmotionResult(Emotion.SAD, 0.5), None, ToneStyle.SOFT, user_text="there's no point"
        )
        assert [name for name, _ in engine.run_steps(req)] == ["escalation"]

    def test_predicates_in_isolation(self):
        calm = ComfortRequest(None, _context_with("hi"), ToneStyle.SOFT)
        assert not escalation_applies(calm)
        assert not reinforcement_applies(calm)
        distressed = ComfortRequest(None, ConversationContext(), ToneStyle.SOFT, user_text="I give up")
        assert escalation_applies(distressed)

    def test_template_tables_are_read_only(self):
        with pytest.raises(TypeError):
            COMFORT_STRATEGIES["sad"]["high"] = "changed"
        with pytest.raises(TypeError):
            ENHANCEMENT_MESSAGES["grounding"]["default"] = ("changed",)
        with pytest.raises(TypeError):
            COMFORT_STRATEGIES["sad"] = {}
        assert "changed" not in COMFORT_STRATEGIES["sad"].values()

    def test_module_level_function(self):
        assert generate_comfort(None)

    @pytest.mark.parametrize("value,expected", [
        ("SOFT", ToneStyle.SOFT),
        ("soft", ToneStyle.SOFT),
        (" Direct ", ToneStyle.DIRECT),
        (None, ToneStyle.BALANCED),
        ("shouty", ToneStyle.BALANCED),
        (ToneStyle.HOPEFUL, ToneStyle.HOPEFUL),
    ])
    def test_tone_coerce(self, value, expected):
        assert ToneStyle.coerce(value) == expected
