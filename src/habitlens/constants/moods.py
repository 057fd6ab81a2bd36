"""
Mood scale shared by journal entries and history charts.
Lower levels are more positive; 0 is reserved for "no entry that day".
"""

MOOD_LEVELS = [
    {"level": 1, "label": "Very Happy", "icon": "\U0001F601"},
    {"level": 2, "label": "Happy", "icon": "\U0001F60A"},
    {"level": 3, "label": "Neutral", "icon": "\U0001F610"},
    {"level": 4, "label": "Sad", "icon": "\U0001F641"},
    {"level": 5, "label": "Angry", "icon": "\U0001F621"},
]

MIN_MOOD = 1
MAX_MOOD = 5

# Sentinel for a day without a journal entry in dense chart series
NO_MOOD = 0


def is_valid_mood(score: object) -> bool:
    """Return True when ``score`` is an int on the 1..5 scale."""

    return isinstance(score, int) and not isinstance(score, bool) and MIN_MOOD <= score <= MAX_MOOD


def mood_label(score: int | None) -> str:
    """Return the display label for a score, or "No entry" for missing days."""

    for mood in MOOD_LEVELS:
        if mood["level"] == score:
            return mood["label"]
    return "No entry"
