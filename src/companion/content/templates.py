"""
Response templates for the comfort and mood engines.

Tables are keyed by the lower-case values of Emotion, ToneStyle and
EnhancementType. Everything here is read-only and shared by all sessions.
"""

from __future__ import annotations

from types import MappingProxyType

WELCOME_MESSAGE = (
    "Hi, I'm really glad you're here. This is a space where you can talk "
    "about anything on your mind, big or small. How are you feeling today?"
)

FAREWELL_MESSAGE = (
    "Thank you for spending this time with me. Take good care of yourself, "
    "and remember I'm here whenever you want to talk again."
)

GENTLE_PRESENCE_MESSAGE = (
    "I'm here with you. Whatever you're feeling right now, you don't have "
    "to sort it all out at once. Take your time."
)

ESCALATION_MESSAGE = (
    "I'm really glad you told me, and I want you to hear this clearly: "
    "You matter, and what you're going through matters. You don't have to "
    "carry this alone. Please reach out to someone you trust right now, or "
    "contact a crisis line or emergency services if you feel unsafe. "
    "I'm staying right here with you."
)

REINFORCEMENT_CLAUSE = "I can tell this has been on your mind for a while."


def _read_only(table):
    return MappingProxyType({key: MappingProxyType(inner) for key, inner in table.items()})


# =============================================================================
# COMFORT STRATEGIES: per-emotion, high-empathy and lighter variants
# =============================================================================

COMFORT_STRATEGIES = _read_only({
    "sad": {
        "high": (
            "I'm really sorry you're carrying this much pain right now. "
            "Your feelings make complete sense, and you don't have to hide "
            "them here."
        ),
        "low": (
            "I'm sorry things feel heavy today. It's okay to have these "
            "feelings, and I'm glad you shared them with me."
        ),
    },
    "anxious": {
        "high": (
            "That sounds really frightening, and it makes sense that your "
            "mind is racing. Let's slow down together: take one deep breath "
            "in, and let it out slowly."
        ),
        "low": (
            "It sounds like something is worrying you. Worries often feel "
            "bigger when they stay inside, so it helps that you're naming it."
        ),
    },
    "stressed": {
        "high": (
            "That is a lot of pressure for one person to hold. Before "
            "anything else, let's pause for a moment. You don't have to "
            "solve everything today."
        ),
        "low": (
            "It sounds like there's a fair bit on your plate. Would it help "
            "to pick just one thing to focus on first?"
        ),
    },
    "frustrated": {
        "high": (
            "I can hear how frustrating this is, and that feeling is "
            "completely valid. When something keeps not working, it's "
            "exhausting. Let's step back from it for a second."
        ),
        "low": (
            "That does sound frustrating. Sometimes a short break is all it "
            "takes to see the problem from a new angle."
        ),
    },
    "overwhelmed": {
        "high": (
            "It sounds like everything is piling up at once, and that's "
            "overwhelming. Let's make it smaller: what is the one thing that "
            "needs your attention most right now?"
        ),
        "low": (
            "That's a lot to juggle. Breaking it into smaller pieces might "
            "make it feel more manageable."
        ),
    },
    "neutral": {
        "high": (
            "Thank you for telling me about this. It sounds like it really "
            "matters to you, and I'm listening."
        ),
        "low": (
            "Thanks for sharing that with me. I'm here and listening."
        ),
    },
})

# Register phrase per tone style, added after the strategy text.
TONE_PHRASES = MappingProxyType({
    "soft": "Take all the time you need.",
    "balanced": "Let's look at this together.",
    "encouraging": "You've already taken a good step by talking about it.",
    "empathetic": "I hear you, and I'm right here with you.",
    "reassuring": "You're not alone in this.",
    "direct": "Let's focus on one thing we can do next.",
    "uplifting": "There's still a lot of good ahead of you.",
    "calming": "Let's take a slow breath together.",
    "validating": "What you're feeling is completely valid.",
    "hopeful": "Things can and do get better.",
})

SUPPORT_ELEMENTS = (
    "There's no judgement here, only support.",
    "This is a safe space to say whatever you need to.",
    "I'm right here with you, for as long as you want to talk.",
    "Talking about it is real progress, even if it doesn't feel like it.",
    "Even small steps forward count.",
)

# =============================================================================
# MOOD ENHANCEMENT TEMPLATES
# =============================================================================

# Per enhancement type: a "default" pool plus optional emotion-specific pools.
ENHANCEMENT_MESSAGES = _read_only({
    "energy_boost": {
        "default": (
            "How about a tiny reset? A glass of water and a quick stretch can "
            "do more than you'd expect.",
            "Sometimes a short walk or a favourite song is enough to shift "
            "the energy a little.",
            "Let's find something small that sparks a bit of fun today.",
        ),
        "tired": (
            "You sound worn out. Rest isn't lazy, it's how you recharge.",
            "Your body might be asking for a break. Even ten quiet minutes "
            "can help.",
        ),
        "bored": (
            "Boredom can be a sign you're ready for something new. Want to "
            "try something you've never done before?",
            "What's one thing you've been curious about lately? This could "
            "be a good moment to explore it.",
        ),
        "sad": (
            "Be gentle with yourself today. Something small and kind, like a "
            "warm drink or a cosy blanket, can help a little.",
        ),
    },
    "perspective_lift": {
        "default": (
            "When things feel tangled, it can help to ask: will this still "
            "matter a month from now?",
            "Let's zoom out for a second. What's one part of this that is "
            "actually within your control?",
            "Hard moments are real, but they are moments. This one will pass "
            "too.",
        ),
        "angry": (
            "It's okay to be angry. Once the heat settles a bit, we can look "
            "at what's really underneath it.",
        ),
    },
    "confidence_build": {
        "default": (
            "Think of a time you handled something tricky. That same "
            "strength is still in you.",
            "You know more than you give yourself credit for. Let's start "
            "with what you're sure about.",
            "Confidence grows one small win at a time. What's one small win "
            "you could get today?",
        ),
        "confused": (
            "Feeling confused just means you're learning something new. "
            "Let's untangle it one piece at a time.",
        ),
    },
    "grounding": {
        "default": (
            "Let's ground ourselves for a moment: notice five things you can "
            "see and three things you can hear.",
            "Try placing your feet flat on the floor and taking three slow "
            "breaths. You're here, and you're safe right now.",
            "It's okay to simply be where you are right now. Nothing needs to "
            "be fixed this second.",
        ),
        "lonely": (
            "Feeling lonely is really hard. I'm here with you, and reaching "
            "out like this is a brave thing to do.",
        ),
    },
})

SUGGESTED_ACTIONS = MappingProxyType({
    "energy_boost": (
        "Stand up, stretch for one minute, and drink some water.",
        "Put on a song you love and move a little.",
    ),
    "perspective_lift": (
        "Write down what's bothering you, then one thing you can control.",
        "Ask yourself what you'd tell a friend in the same spot.",
    ),
    "confidence_build": (
        "List three things you did well this week, however small.",
        "Pick one tiny task you can finish in five minutes and do it.",
    ),
    "grounding": (
        "Try the 5-4-3-2-1 senses exercise.",
        "Breathe in for four counts, hold for four, and breathe out for six.",
    ),
})

FOLLOW_UP_SUGGESTIONS = MappingProxyType({
    "energy_boost": (
        "Would you like ideas for a quick energising break?",
        "Want to talk about something that usually cheers you up?",
    ),
    "perspective_lift": (
        "Would it help to break the problem into smaller parts?",
        "Do you want to talk through what's in your control?",
    ),
    "confidence_build": (
        "Want to tell me about something you're proud of?",
        "Shall we plan one small step together?",
    ),
    "grounding": (
        "Would you like to try a short breathing exercise together?",
        "Do you want to tell me more about how you're feeling?",
    ),
})

# =============================================================================
# STATE PROMPTS
# =============================================================================

STATE_PROMPTS = MappingProxyType({
    "homework_help": (
        "Let's work through it together. Which subject is it, and which part "
        "is giving you the most trouble?"
    ),
    "advice": (
        "I'm happy to help you think it through. Can you tell me a bit more "
        "about the situation?"
    ),
})
