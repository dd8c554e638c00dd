"""Lexicon mood scoring for journal entries without a client-supplied score."""

import re

# English + Indonesian lexicon
_POSITIVE = {
    "great", "good", "happy", "excited", "proud", "grateful", "thankful", "calm",
    "relaxed", "peaceful", "love", "enjoy", "fun", "hopeful", "optimistic",
    "energized", "refreshed", "content", "satisfied", "cheerful", "fresh", "clear",
    "senang", "bahagia", "gembira", "bersyukur", "tenang", "damai", "lega",
    "semangat", "bangga", "puas", "nyaman", "segar", "cerah", "sejuk", "suka",
}

_NEGATIVE = {
    "bad", "terrible", "sad", "angry", "anxious", "stressed", "worried", "tired",
    "exhausted", "frustrated", "lonely", "afraid", "scared", "upset", "annoyed",
    "sick", "hopeless", "overwhelmed", "polluted", "smog", "hazy", "suffocating",
    "sedih", "marah", "cemas", "khawatir", "lelah", "capek", "stres", "takut",
    "kesal", "kecewa", "kesepian", "sakit", "pusing", "sesak", "polusi", "panas",
}

POSITIVE_THRESHOLD = 0.2
NEGATIVE_THRESHOLD = -0.2


def mood_label(score: float) -> str:
    """Bucket a mood score the way the journal analysis counts it."""
    if score > POSITIVE_THRESHOLD:
        return "positive"
    if score < NEGATIVE_THRESHOLD:
        return "negative"
    return "neutral"


def analyze_sentiment(text: str) -> dict:
    """Score text by counting lexicon hits.

    Returns:
        {score: float (-1 to 1), label: str, positive_count: int, negative_count: int}
    """
    words = set(re.findall(r"\b[a-z]+\b", text.lower()))
    pos = len(words & _POSITIVE)
    neg = len(words & _NEGATIVE)
    total = pos + neg

    score = 0.0 if total == 0 else (pos - neg) / total
    return {
        "score": round(score, 2),
        "label": mood_label(score),
        "positive_count": pos,
        "negative_count": neg,
    }
