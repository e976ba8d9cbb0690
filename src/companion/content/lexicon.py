"""
Read-only lexicon tables for the dialogue pipeline.

Loaded once at import and never mutated: every table is a tuple or a
MappingProxyType so sessions can share them without copying.

Emotion tables are keyed by the lower-case value of ``Emotion`` members.
"""

from __future__ import annotations

from types import MappingProxyType

# =============================================================================
# EMOTION LEXICON: single-token keywords (weight 1.0)
# =============================================================================

EMOTION_KEYWORDS = MappingProxyType({
    "sad": (
        "sad", "sadness", "unhappy", "miserable", "down", "blue", "depressed",
        "crying", "cried", "tears", "gloomy", "heartbroken", "hopeless",
        "hopelessness", "empty", "low",
    ),
    "anxious": (
        "anxious", "anxiety", "worried", "worry", "worrying", "nervous",
        "uneasy", "scared", "afraid", "fear", "panic", "panicking", "dread",
    ),
    "stressed": (
        "stressed", "stress", "stressful", "pressure", "overloaded",
        "deadline", "deadlines", "tense",
    ),
    "frustrated": (
        "frustrated", "frustrating", "stuck", "annoyed", "annoying", "ugh",
        "irritated", "fed",
    ),
    "overwhelmed": (
        "overwhelmed", "overwhelming", "swamped", "buried", "drowning",
    ),
    "lonely": (
        "lonely", "alone", "isolated", "ignored", "unwanted", "lonesome",
    ),
    "angry": (
        "angry", "mad", "furious", "rage", "hate", "pissed",
    ),
    "hurt": (
        "hurt", "hurting", "wounded", "betrayed", "rejected", "pain",
        "worthless", "worthlessness",
    ),
    "tired": (
        "tired", "exhausted", "weary", "fatigued", "drained", "sleepy",
        "burnt", "burned",
    ),
    "bored": (
        "bored", "boring", "boredom", "meh", "dull",
    ),
    "confused": (
        "confused", "confusing", "puzzled", "lost", "unsure",
    ),
    "disappointed": (
        "disappointed", "disappointing", "letdown", "bummer", "underwhelmed",
    ),
    "happy": (
        "happy", "glad", "joyful", "joy", "cheerful", "delighted", "great",
        "wonderful", "awesome", "amazing", "fantastic",
    ),
    "excited": (
        "excited", "eager", "thrilled", "pumped", "stoked", "psyched",
    ),
    "grateful": (
        "grateful", "thankful", "blessed", "appreciative", "fortunate",
    ),
    "calm": (
        "calm", "relaxed", "peaceful", "serene", "chill", "content",
    ),
    "hopeful": (
        "hopeful", "optimistic", "hopefully", "hoping",
    ),
    "proud": (
        "proud", "accomplished", "achievement", "nailed",
    ),
    "curious": (
        "curious", "wondering", "interested", "intrigued",
    ),
})

# =============================================================================
# EMOTION LEXICON: multi-word phrases (weight 1.5)
# =============================================================================

EMOTION_PHRASES = MappingProxyType({
    "sad": (
        "feeling down", "feeling low", "feel empty", "not happy", "not good",
        "not okay", "not ok", "down in the dumps", "want to cry",
    ),
    "anxious": (
        "on edge", "what if", "freaking out", "can't stop worrying",
        "butterflies in my stomach",
    ),
    "stressed": (
        "stressed out", "under pressure", "so much to do", "too much work",
        "a lot on my plate",
    ),
    "frustrated": (
        "fed up", "not working", "doesn't work", "why won't", "sick of",
        "drives me crazy",
    ),
    "overwhelmed": (
        "too much", "can't keep up", "don't know where to start",
        "don't know where to begin", "everything at once",
    ),
    "lonely": (
        "no one", "nobody cares", "feel alone", "no friends", "left out",
    ),
    "angry": (
        "so angry", "pissed off", "hate it", "makes me mad",
    ),
    "hurt": (
        "heart hurts", "let me down", "broke my heart",
    ),
    "tired": (
        "need sleep", "need rest", "need a break", "worn out", "burned out",
        "burnt out",
    ),
    "bored": (
        "nothing to do", "so bored",
    ),
    "confused": (
        "don't understand", "don't get it", "makes no sense",
    ),
    "disappointed": (
        "let down", "expected better", "not what i hoped",
    ),
    "happy": (
        "feel good", "feeling good", "feel great", "feeling great",
        "good day", "making me smile",
    ),
    "excited": (
        "can't wait", "looking forward",
    ),
    "grateful": (
        "thank god", "so thankful",
    ),
    "calm": (
        "at ease", "at peace", "taking it easy",
    ),
    "hopeful": (
        "better days", "things will get better", "i hope",
    ),
    "proud": (
        "did it", "made it", "proud of myself",
    ),
    "curious": (
        "tell me about", "want to know", "how does",
    ),
})

# Tie-break order: earlier wins when raw scores are equal. Negative affect
# ranks above positive affect, NEUTRAL ranks last.
EMOTION_PRIORITY = (
    "overwhelmed", "sad", "anxious", "stressed", "frustrated", "hurt",
    "lonely", "angry", "tired", "disappointed", "confused", "bored",
    "hopeful", "grateful", "proud", "excited", "happy", "calm", "curious",
    "neutral",
)

KEYWORD_WEIGHT = 1.0
PHRASE_WEIGHT = 1.5

# =============================================================================
# INTENSITY MODIFIERS
# =============================================================================

INTENSIFIERS = MappingProxyType({
    "really": 0.2,
    "so": 0.15,
    "very": 0.15,
    "extremely": 0.25,
    "absolutely": 0.25,
    "totally": 0.2,
    "completely": 0.2,
    "incredibly": 0.25,
    "super": 0.15,
    "utterly": 0.25,
    "truly": 0.15,
})

DIMINISHERS = MappingProxyType({
    "kind of": -0.15,
    "sort of": -0.15,
    "a bit": -0.15,
    "a little": -0.15,
    "somewhat": -0.1,
    "slightly": -0.2,
    "barely": -0.25,
    "hardly": -0.25,
    "not really": -0.2,
    "not that": -0.2,
})

# Added once per run of repeated "!" / "?!" and per ALL-CAPS word.
EMPHASIS_BONUS = 0.1
MAX_EMPHASIS_BONUS = 0.3

# =============================================================================
# ESCALATION (severe distress) TERMS
# =============================================================================

ESCALATION_KEYWORDS = (
    "hopeless",
    "worthless",
    "no point",
    "give up",
    "giving up",
    "gave up",
    "can't go on",
    "cant go on",
    "can't take it anymore",
    "end it all",
    "want to die",
    "wanna die",
    "kill myself",
    "hurt myself",
    "no reason to live",
    "better off without me",
    "nothing to live for",
    "don't want to be here",
)

# =============================================================================
# TOPIC CATALOGUE
# =============================================================================

TOPIC_CATALOGUE = MappingProxyType({
    "school": (
        "homework", "assignment", "test", "quiz", "exam", "exams", "grade",
        "grades", "teacher", "class", "school", "study", "studying", "math",
        "science", "history", "english", "essay",
    ),
    "gaming": (
        "game", "games", "gaming", "play", "playing", "minecraft", "fortnite",
        "multiplayer", "level", "console",
    ),
    "feelings": (
        "feel", "feeling", "feelings", "emotion", "emotions", "mood",
        "mental", "therapy", "sad", "anxious", "stressed", "lonely",
    ),
    "creative": (
        "write", "writing", "story", "poem", "art", "drawing", "painting",
        "music", "song", "design",
    ),
    "friends and family": (
        "friend", "friends", "family", "mom", "dad", "sister", "brother",
        "parents", "relationship", "partner", "party",
    ),
    "technology": (
        "computer", "code", "coding", "programming", "app", "software",
        "internet", "phone", "robot",
    ),
    "health": (
        "health", "fitness", "exercise", "workout", "diet", "sleep",
        "sport", "running", "gym",
    ),
    "life and meaning": (
        "life", "purpose", "meaning", "future", "believe", "values",
        "philosophy",
    ),
})

GENERAL_TOPIC = "general"

STOPWORDS = frozenset((
    "a", "about", "after", "again", "all", "also", "am", "an", "and", "any",
    "are", "as", "at", "be", "been", "but", "by", "can", "can't", "could",
    "did", "do", "does", "don't", "for", "from", "get", "got", "had", "has",
    "have", "he", "her", "him", "his", "how", "i", "i'd", "i'll", "i'm",
    "i've", "if", "in", "into", "is", "it", "it's", "its", "just", "like",
    "me", "my", "myself", "no", "not", "now", "of", "off", "on", "or",
    "our", "out", "really", "she", "so", "some", "that", "that's", "the",
    "their", "them", "then", "there", "they", "this", "to", "too", "up",
    "us", "very", "was", "we", "were", "what", "when", "where", "which",
    "who", "why", "will", "with", "would", "you", "your", "yes", "yeah",
    "okay", "ok", "hi", "hello", "hey", "thanks", "thank", "bye", "today",
    "still", "much", "lot", "things", "thing", "want", "know", "think",
    "going", "gonna", "feel", "feeling", "been", "being", "more", "even",
))

# =============================================================================
# INTENT PATTERNS (checked in this order; DISTRESS is handled separately)
# =============================================================================

INTENT_PATTERNS = (
    ("farewell", (
        r"^/?(exit|quit)$",
        r"\b(bye|goodbye|good night|goodnight|see you|see ya|talk later|gotta go|catch you later)\b",
    )),
    ("homework_help", (
        r"\b(homework|assignment|essay|exam|quiz|studying)\b",
        r"\bhelp\b.*\b(math|algebra|science|biology|physics|chemistry|history|english|geography)\b",
    )),
    ("support_request", (
        r"\b(need to talk|need someone|having a hard time|rough day|bad day|struggling)\b",
        r"\b(can you help me|i need help|please help)\b",
    )),
    ("advice", (
        r"\b(advice|tips|suggestions?|what should i do|how (do|can) i|guidance)\b",
    )),
    ("gratitude", (
        r"\b(thanks|thank you|thx|ty|appreciate it|cheers)\b",
    )),
    ("greeting", (
        r"^(hi|hello|hey|howdy|yo|sup|hiya|good (morning|afternoon|evening))\b",
    )),
)

# =============================================================================
# MOOD SUBTEXT PATTERNS
# =============================================================================

SUBTEXT_PATTERNS = (
    ("dismissive", r"^(i'?m|i am|it'?s|its) (fine|okay|ok|good)[.!]*$"),
    ("hopelessness_hint", r"\b(what'?s the point|nothing works|doesn'?t matter anymore)\b"),
    ("deflection", r"\b(never mind|nevermind|don'?t worry about it|forget i said|anyway)\b"),
    ("minimising", r"\b(not a big deal|it'?s nothing|i'?m not that upset)\b"),
    ("stoic_facade", r"\b(whatever|i don'?t care|not bothered)\b"),
    ("seeking_reassurance", r"\b(is it just me|am i wrong|do you think i|is that normal)\b"),
)
