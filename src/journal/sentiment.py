"""Simple keyword-based sentiment and theme analysis for journal entries."""

from shared_types import Sentiment

from .models import DEFAULT_THEME, MAX_INTENSITY, MAX_THEMES, ClassificationResult, count_words

# Lexicon-based sentiment (no external deps needed). Matched as substrings of
# each lower-cased token, so "happiness" hits "happy" and "stressed" hits "stress".
_POSITIVE = (
    "happy", "joy", "excited", "grateful", "love",
    "wonderful", "amazing", "great", "good", "positive",
)

_NEGATIVE = (
    "sad", "angry", "frustrated", "worried", "anxious",
    "stress", "bad", "terrible", "awful", "negative",
)

# Checked in order; the first MAX_THEMES that fire are kept.
_THEME_TRIGGERS = (
    ("work", ("work", "job", "career")),
    ("family", ("family", "parent", "child")),
    ("relationships", ("friend", "relationship", "love")),
    ("stress", ("stress", "anxiety", "worry")),
    ("health", ("health", "exercise", "sleep")),
    ("creativity", ("creative", "art", "music")),
    ("growth", ("learn", "grow", "improve")),
    ("gratitude", ("thankful", "grateful", "blessed")),
)


def count_keywords(text: str) -> tuple[int, int]:
    """Count tokens hitting the positive and negative lexicons.

    A token is counted at most once per side but may count toward both.
    """
    pos = neg = 0
    for token in text.split():
        word = token.lower()
        if any(k in word for k in _POSITIVE):
            pos += 1
        if any(k in word for k in _NEGATIVE):
            neg += 1
    return pos, neg


def label_sentiment(pos: int, neg: int) -> Sentiment:
    if pos > neg:
        return Sentiment.POSITIVE
    if neg > pos:
        return Sentiment.NEGATIVE
    if pos > 0:
        return Sentiment.MIXED
    return Sentiment.NEUTRAL


def extract_themes(text: str) -> list[str]:
    """Themes whose trigger substrings appear in text, capped at MAX_THEMES.

    Returns an empty list when nothing fires; callers decide on the fallback.
    """
    lowered = text.lower()
    themes = [
        theme for theme, triggers in _THEME_TRIGGERS if any(t in lowered for t in triggers)
    ]
    return themes[:MAX_THEMES]


def insight_for(sentiment: Sentiment, word_count: int) -> str:
    return f"This entry shows {sentiment} emotions with {word_count} words."


def classify(text: str) -> ClassificationResult:
    """Analyze text offline using keyword matching.

    Deterministic and side-effect free. Themes default to ['reflection'] when
    no trigger fires; intensity is the total keyword hit count capped at 10.
    """
    pos, neg = count_keywords(text)
    sentiment = label_sentiment(pos, neg)
    word_count = count_words(text)
    themes = extract_themes(text) or [DEFAULT_THEME]

    return ClassificationResult(
        sentiment=sentiment,
        themes=themes,
        insight_note=insight_for(sentiment, word_count),
        word_count=word_count,
        intensity=min(pos + neg, MAX_INTENSITY),
        key_topics=themes[:3],
    )
