"""Dashboard aggregations over journal rows.

Rows are plain dicts (or sqlite3.Row) as returned by ``JournalStore``.
Daily aggregations bucket by UTC calendar day; frequency aggregations rank
by count with ties kept in first-seen order.
"""

import re
from collections import Counter
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Optional

from dashboard.air_quality import extract_epa_index, is_number

UNKNOWN_EMOTION = "Unknown"
WORD_CLOUD_LIMIT = 50

# Indonesian function words (primary journal language)
ID_STOPWORDS = frozenset({
    "dan", "yang", "di", "ke", "dari", "untuk", "dengan", "atau", "pada", "ini",
    "itu", "saya", "kamu", "dia", "adalah", "akan", "dalam", "sebagai", "juga",
    "tidak", "ya", "apa", "bisa", "karena", "lebih", "sudah", "ada", "oleh",
    "mereka", "kita", "saat", "hanya", "saja", "jadi", "agar", "bagi", "setelah",
    "sebelum", "tentang", "namun", "masih", "semua", "bukan", "pun", "lah",
    "punya", "aku", "kau", "engkau", "mu", "nya",
})

EN_STOPWORDS = frozenset({
    "the", "and", "for", "are", "but", "not", "you", "all", "any", "can", "had",
    "her", "was", "one", "our", "out", "has", "have", "his", "him", "how", "its",
    "may", "who", "did", "get", "got", "let", "she", "too", "use", "that", "this",
    "with", "from", "they", "them", "then", "than", "there", "their", "what",
    "when", "where", "which", "while", "will", "would", "could", "should",
    "been", "were", "into", "just", "also", "very", "some", "more", "most",
    "about", "after", "before", "because", "only", "over", "such", "your",
})

STOPWORDS = ID_STOPWORDS | EN_STOPWORDS

_PUNCTUATION = re.compile(r"""[.,/#!$%^&*;:{}=\-_`~()?"']""")


def day_key(timestamp: Any) -> str:
    """UTC calendar date (YYYY-MM-DD) for a stored timestamp."""
    if isinstance(timestamp, datetime):
        dt = timestamp
    else:
        dt = datetime.fromisoformat(str(timestamp).replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).date().isoformat()


def to_fixed(value: float, ndigits: int = 2) -> float:
    """Round half away from zero on the exact binary value, as JS ``toFixed`` does.

    ``round()`` rounds half to even, so ``round(0.125, 2)`` gives 0.12 where the
    dashboards report 0.13.
    """
    quantum = Decimal(1).scaleb(-ndigits)
    # -0.0 collapses to 0.0
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP)) or 0.0


def mean_2dp(values: list[float]) -> Optional[float]:
    """Arithmetic mean rounded to 2 decimals; None for an empty bucket."""
    if not values:
        return None
    return to_fixed(sum(values) / len(values))


def mood_value(row) -> Optional[float]:
    value = row["mood_score"]
    return value if is_number(value) else None


def mood_trend(rows: Iterable) -> list[dict]:
    """Average mood per day, for days with at least one numeric mood."""
    daily: dict[str, list[float]] = {}
    for row in rows:
        mood = mood_value(row)
        if mood is None:
            continue
        daily.setdefault(day_key(row["created_at"]), []).append(mood)
    return [{"date": date, "avgMood": mean_2dp(scores)} for date, scores in daily.items()]


def mood_air_correlation(rows: Iterable) -> list[dict]:
    """Average mood and US-EPA index per day, outer-joined on date.

    Each row opens its day's bucket; a series with no qualifying values for
    that day reports None.
    """
    daily: dict[str, dict[str, list[float]]] = {}
    for row in rows:
        bucket = daily.setdefault(day_key(row["created_at"]), {"mood": [], "epa": []})
        mood = mood_value(row)
        if mood is not None:
            bucket["mood"].append(mood)
        epa = extract_epa_index(row["weather_data"])
        if epa is not None:
            bucket["epa"].append(epa)

    return [
        {
            "date": date,
            "avgMood": mean_2dp(bucket["mood"]),
            "avgEpaIndex": mean_2dp(bucket["epa"]),
        }
        for date, bucket in daily.items()
    ]


def emotion_composition(rows: Iterable) -> list[dict]:
    """Share of each emotion label; unlabeled rows count as ``Unknown``."""
    freq: Counter = Counter()
    for row in rows:
        freq[row["emotion_name"] or UNKNOWN_EMOTION] += 1

    total = sum(freq.values())
    return [
        {
            "emotion": emotion,
            "count": count,
            "percent": to_fixed(count / total * 100),
        }
        for emotion, count in freq.most_common()
    ]


def tokenize(text: str, stopwords: frozenset = STOPWORDS) -> list[str]:
    """Lowercase word tokens longer than 2 chars, stop-words removed."""
    words = _PUNCTUATION.sub(" ", text).lower().split()
    return [w for w in words if len(w) > 2 and w not in stopwords]


def word_cloud(
    rows: Iterable,
    limit: int = WORD_CLOUD_LIMIT,
    stopwords: frozenset = STOPWORDS,
) -> list[dict]:
    """Most frequent words across all entry contents."""
    all_text = " ".join(row["content"] or "" for row in rows)
    freq = Counter(tokenize(all_text, stopwords))
    return [{"word": word, "count": count} for word, count in freq.most_common(limit)]
