"""Heuristic content analysis of podcast scripts.

Everything here is word-list counting: keywords by frequency,
sentiment and mood by matches against fixed vocabularies, and a
Flesch-Kincaid style readability estimate. Scores are fractions of the
total token count.
"""

from __future__ import annotations

import random
import re
from collections import Counter

from models.catalog import (
    ComplexityProfile,
    ContentAnalysis,
    MoodScores,
    SentimentScores,
    Topic,
)

_WORD_SPLIT = re.compile(r"\W+", re.ASCII)
_SENTENCE_SPLIT = re.compile(r"[.!?]+")

STOP_WORDS = frozenset(
    [
        "the", "and", "that", "have", "for", "not", "with", "you", "this", "but",
        "his", "from", "they", "she", "will", "would", "there", "their", "what",
        "about", "which", "when", "make", "like", "time", "just", "know", "take",
        "into", "year", "your", "some", "could", "them", "other", "than", "then",
        "look", "only", "come", "over", "think", "also", "back", "after", "work",
        "first", "well", "even", "want", "because", "these", "give", "most",
    ]
)

POSITIVE_WORDS = frozenset(
    ["good", "great", "excellent", "amazing", "wonderful", "positive", "happy", "joy", "love", "best"]
)
NEGATIVE_WORDS = frozenset(
    ["bad", "terrible", "awful", "horrible", "negative", "sad", "angry", "hate", "worst", "problem"]
)

# Declaration order is the tie-break order for the dominant mood.
MOOD_WORDS: dict[str, frozenset[str]] = {
    "informative": frozenset(
        ["learn", "know", "understand", "explain", "information", "fact", "research", "study", "discover"]
    ),
    "entertaining": frozenset(
        ["fun", "laugh", "joke", "funny", "entertain", "amusing", "comedy", "humor", "story"]
    ),
    "inspirational": frozenset(
        ["inspire", "motivate", "achieve", "success", "dream", "goal", "passion", "believe", "overcome"]
    ),
    "controversial": frozenset(
        ["debate", "argue", "disagree", "controversy", "opinion", "politics", "dispute", "conflict"]
    ),
    "educational": frozenset(
        ["teach", "lesson", "education", "school", "college", "university", "student", "professor", "academic"]
    ),
}

COMPLEX_WORD_LENGTH = 8


def tokenize(text: str) -> list[str]:
    """Lowercased split on non-word runs; keeps the empty edge tokens."""
    return _WORD_SPLIT.split(text.lower())


def is_stop_word(word: str) -> bool:
    return word in STOP_WORDS


def extract_keywords(text: str, limit: int = 5) -> list[str]:
    """Most frequent non-stop-word tokens longer than three characters."""
    counts = Counter(
        word for word in tokenize(text) if len(word) > 3 and not is_stop_word(word)
    )
    # sorted() is stable, so ties keep first-seen order
    ranked = sorted(counts.items(), key=lambda item: -item[1])
    return [word for word, _ in ranked[:limit]]


def _fraction(words: list[str], vocabulary: frozenset[str]) -> float:
    return sum(1 for word in words if word in vocabulary) / len(words)


def _sentiment(words: list[str]) -> SentimentScores:
    positive = _fraction(words, POSITIVE_WORDS)
    negative = _fraction(words, NEGATIVE_WORDS)
    neutral = 1 - (positive + negative)

    overall = "neutral"
    if positive > negative and positive > neutral * 0.7:
        overall = "positive"
    elif negative > positive and negative > neutral * 0.7:
        overall = "negative"

    return SentimentScores(positive=positive, neutral=neutral, negative=negative, overall=overall)


def _mood(words: list[str]) -> MoodScores:
    scores = {mood: _fraction(words, vocab) for mood, vocab in MOOD_WORDS.items()}
    dominant = max(scores, key=scores.get)
    return MoodScores(**scores, overall=dominant)


def _complexity(text: str, words: list[str]) -> tuple[ComplexityProfile, float]:
    total = len(words)
    sentence_count = len([s for s in _SENTENCE_SPLIT.split(text) if s])
    avg_words_per_sentence = total / (sentence_count or 1)

    complex_words = sum(1 for word in words if len(word) > COMPLEX_WORD_LENGTH)
    complex_ratio = complex_words / total

    if complex_ratio < 0.05:
        vocabulary_level = "basic"
    elif complex_ratio > 0.15:
        vocabulary_level = "advanced"
    else:
        vocabulary_level = "intermediate"

    if avg_words_per_sentence < 10:
        sentence_complexity = "simple"
    elif avg_words_per_sentence > 20:
        sentence_complexity = "complex"
    else:
        sentence_complexity = "moderate"

    readability = 206.835 - 1.015 * avg_words_per_sentence - 84.6 * complex_ratio

    profile = ComplexityProfile(
        vocabulary_level=vocabulary_level,
        sentence_complexity=sentence_complexity,
        technical_terms=int(complex_words * 0.3 + 0.5),
        readability_score=readability,
    )
    return profile, complex_ratio


def _audience_match(mood: MoodScores, complexity: ComplexityProfile, complex_ratio: float) -> dict[str, float]:
    return {
        "general": 0.7,
        "professionals": 0.8 if complex_ratio > 0.1 else 0.4,
        "students": 0.9 if mood.educational > 0.1 else 0.5,
        "enthusiasts": 0.85 if mood.informative > 0.15 else 0.5,
        "beginners": 0.9 if complexity.vocabulary_level == "basic" else 0.3,
    }


def analyze_content(
    script: str,
    topic_limit: int = 10,
    rng: random.Random | None = None,
) -> ContentAnalysis:
    """Analyze a script's topics, sentiment, mood, complexity and audience fit.

    Topic confidences are drawn uniformly from [0.5, 1.0); pass a seeded
    ``rng`` to make them reproducible.
    """
    rng = rng or random.Random()
    words = tokenize(script)

    topics = [
        Topic(name=keyword, confidence=rng.random() * 0.5 + 0.5)
        for keyword in extract_keywords(script, topic_limit)
    ]
    sentiment = _sentiment(words)
    mood = _mood(words)
    complexity, complex_ratio = _complexity(script, words)

    return ContentAnalysis(
        topics=topics,
        sentiment=sentiment,
        mood=mood,
        complexity=complexity,
        audience_match=_audience_match(mood, complexity, complex_ratio),
    )
