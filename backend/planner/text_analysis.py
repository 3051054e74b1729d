"""
Heuristic text analysis for task descriptions.
Word/sentence counts and keyword hits only; no language understanding.
"""

import re
from typing import List, Optional

TEXT_COMPLEXITY_MAX = 5.0

_SENTENCE_SPLIT = re.compile(r"[.!?]+")
_TECHNICAL_TERMS = re.compile(r"\b(implement|develop|create|integrate|optimize|refactor|test)\b", re.IGNORECASE)
_FEATURE_PHRASE = re.compile(r"\b(implement|add|create|develop)\s+([^,.!?]+)", re.IGNORECASE)

PATTERN_CORE_COMPONENTS = "core-components"
PATTERN_FEATURE_BREAKDOWN = "feature-breakdown"
PATTERN_OPTIMIZATION = "optimization"

# Substring triggers per pattern tag, checked in this order
PATTERN_TRIGGERS = (
    (PATTERN_CORE_COMPONENTS, ("implement", "develop", "create")),
    (PATTERN_FEATURE_BREAKDOWN, ("feature", "functionality")),
    (PATTERN_OPTIMIZATION, ("improve", "optimize")),
)

DEFAULT_FEATURE = "Core Feature"


def count_words(text: str) -> int:
    return len(text.split())


def count_sentences(text: str) -> int:
    """Number of segments between ./!/? runs, trailing empty segment included."""
    return len(_SENTENCE_SPLIT.split(text))


def count_technical_terms(text: str) -> int:
    return len(_TECHNICAL_TERMS.findall(text))


def text_complexity(text: Optional[str]) -> float:
    """words/50 + sentences/5 + 0.5 per technical term, capped at 5. Empty text scores 0."""
    if not text:
        return 0.0
    score = count_words(text) / 50 + count_sentences(text) / 5 + count_technical_terms(text) * 0.5
    return min(TEXT_COMPLEXITY_MAX, score)


def match_patterns(description: Optional[str]) -> List[str]:
    """Pattern tags whose trigger substrings appear in description (case-insensitive)."""
    lowered = (description or "").lower()
    return [tag for tag, triggers in PATTERN_TRIGGERS if any(t in lowered for t in triggers)]


def extract_features(description: Optional[str]) -> List[str]:
    """First `<verb> <phrase>` per sentence, phrase trimmed; ['Core Feature'] if none."""
    features = []
    for sentence in _SENTENCE_SPLIT.split(description or ""):
        match = _FEATURE_PHRASE.search(sentence)
        if match:
            phrase = match.group(2).strip()
            if phrase:
                features.append(phrase)
    return features or [DEFAULT_FEATURE]
