"""Shared fixtures: a sample request, its completion, and podcast factories."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from models.catalog import (
    ComplexityProfile,
    ContentAnalysis,
    ContentRating,
    MoodScores,
    Podcast,
    PodcastMetadata,
    PodcastStats,
    SentimentScores,
    Topic,
)
from models.data import Category, ScriptGenerationRequest, Tone

SAMPLE_COMPLETION = """Title: The Future of AI

Summary: Alex and Sam explore where artificial intelligence is heading.

Full Script:
Alex: Welcome to the show! Today we are talking about artificial intelligence.

Alex: Large language models learn patterns from enormous amounts of text.

Sam: And they are getting better every single year, which is amazing.

Alex: Thanks for listening, everyone!
"""

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def offline_token_count(monkeypatch):
    """tiktoken downloads its encodings on first use; keep unit tests offline."""
    monkeypatch.setattr(
        "agents.script_generator.count_tokens", lambda text, model=None: len(text.split())
    )


@pytest.fixture
def sample_request() -> ScriptGenerationRequest:
    return ScriptGenerationRequest(
        category=Category.TECH,
        length_minutes=5,
        tone=Tone.CASUAL,
        host_names=["Alex"],
        guest_names=["Sam"],
    )


@pytest.fixture
def sample_completion() -> str:
    return SAMPLE_COMPLETION


def make_analysis(
    mood: str = "informative",
    sentiment: str = "neutral",
    vocabulary_level: str = "intermediate",
    readability: float = 60.0,
    topics: tuple[str, ...] = ("ai",),
) -> ContentAnalysis:
    return ContentAnalysis(
        topics=[Topic(name=t, confidence=0.75) for t in topics],
        sentiment=SentimentScores(positive=0.0, neutral=1.0, negative=0.0, overall=sentiment),
        mood=MoodScores(
            informative=0.0,
            entertaining=0.0,
            inspirational=0.0,
            controversial=0.0,
            educational=0.0,
            overall=mood,
        ),
        complexity=ComplexityProfile(
            vocabulary_level=vocabulary_level,
            sentence_complexity="moderate",
            technical_terms=0,
            readability_score=readability,
        ),
    )


def make_podcast(
    title: str = "Sample",
    category: Category = Category.TECH,
    tone: Tone = Tone.CASUAL,
    created_offset_days: float = 0,
    is_private: bool = False,
    plays: int = 0,
    likes: int = 0,
    shares: int = 0,
    last_played: datetime | None = None,
    tags: list[str] | None = None,
    duration: float = 300.0,
    content_rating: ContentRating = ContentRating.PG,
    analysis: ContentAnalysis | None = None,
    speakers: list[str] | None = None,
    target_audience: list[str] | None = None,
    description: str = "",
) -> Podcast:
    created = BASE_TIME + timedelta(days=created_offset_days)
    return Podcast(
        title=title,
        description=description,
        duration=duration,
        created_at=created,
        updated_at=created,
        is_private=is_private,
        metadata=PodcastMetadata(
            category=category,
            tone=tone,
            content_rating=content_rating,
            content_analysis=analysis,
            speakers=speakers or [],
            target_audience=target_audience or ["general"],
        ),
        tags=tags or [],
        stats=PodcastStats(plays=plays, likes=likes, shares=shares, last_played=last_played),
    )


@pytest.fixture
def podcast_factory():
    return make_podcast


@pytest.fixture
def analysis_factory():
    return make_analysis
