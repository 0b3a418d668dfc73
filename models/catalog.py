"""Persisted catalog records: podcasts, playlists and their content analysis."""

from __future__ import annotations

import uuid
from datetime import datetime
from enum import Enum
from typing import Annotated, Literal

from pydantic import AfterValidator, BaseModel, Field

from models.data import Category, Tone, as_utc, utcnow


class ContentRating(str, Enum):
    G = "G"
    PG = "PG"
    PG_13 = "PG-13"
    R = "R"
    NC_17 = "NC-17"

    @property
    def ordinal(self) -> int:
        return CONTENT_RATING_ORDER.index(self)


CONTENT_RATING_ORDER: list[ContentRating] = [
    ContentRating.G,
    ContentRating.PG,
    ContentRating.PG_13,
    ContentRating.R,
    ContentRating.NC_17,
]


class PlaylistType(str, Enum):
    USER_CREATED = "user-created"
    AUTO_GENERATED = "auto-generated"
    RECOMMENDED = "recommended"
    TRENDING = "trending"
    FEATURED = "featured"
    MOOD_BASED = "mood-based"
    TOPIC_BASED = "topic-based"
    SYSTEM = "system"


SentimentLabel = Literal["positive", "neutral", "negative"]
VocabularyLevel = Literal["basic", "intermediate", "advanced"]
SentenceComplexity = Literal["simple", "moderate", "complex"]
SortMode = Literal["relevance", "date", "popularity", "duration"]

UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]


def _new_id() -> str:
    return str(uuid.uuid4())


# ── Content Analysis ─────────────────────────────────────────────────────────


class Topic(BaseModel):
    name: str
    confidence: float


class SentimentScores(BaseModel):
    positive: float
    neutral: float
    negative: float
    overall: SentimentLabel


class MoodScores(BaseModel):
    informative: float
    entertaining: float
    inspirational: float
    controversial: float
    educational: float
    overall: str


class ComplexityProfile(BaseModel):
    vocabulary_level: VocabularyLevel
    sentence_complexity: SentenceComplexity
    technical_terms: int
    readability_score: float


class ContentAnalysis(BaseModel):
    """Heuristic read of a script's topics, tone and difficulty."""

    topics: list[Topic] = Field(default_factory=list)
    sentiment: SentimentScores
    mood: MoodScores
    complexity: ComplexityProfile
    audience_match: dict[str, float] = Field(default_factory=dict)


# ── Podcast ──────────────────────────────────────────────────────────────────


class PodcastMetadata(BaseModel):
    category: Category
    subcategories: list[str] = Field(default_factory=list)
    tone: Tone = Tone.CONVERSATIONAL
    content_rating: ContentRating = ContentRating.PG
    language_code: str = "en"
    target_audience: list[str] = Field(default_factory=lambda: ["general"])
    content_analysis: ContentAnalysis | None = None
    transcript: str | None = None
    speakers: list[str] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)
    ai_generated: bool = False
    source_model: str | None = None
    voice_model: str | None = None


class PodcastStats(BaseModel):
    plays: int = 0
    likes: int = 0
    shares: int = 0
    comments: int = 0
    downloads: int = 0
    average_listen_time: float = 0.0
    completion_rate: float = Field(default=0.0, ge=0.0, le=1.0)
    last_played: UtcDatetime | None = None


class Podcast(BaseModel):
    id: str = Field(default_factory=_new_id)
    title: str
    description: str = ""
    cover_image_url: str | None = None
    audio_url: str | None = None
    script_id: str | None = None
    audio_id: str | None = None
    duration: float = 0.0  # seconds
    created_at: UtcDatetime = Field(default_factory=utcnow)
    updated_at: UtcDatetime = Field(default_factory=utcnow)
    published_at: UtcDatetime | None = None
    is_published: bool = False
    is_private: bool = True
    metadata: PodcastMetadata
    tags: list[str] = Field(default_factory=list)
    stats: PodcastStats = Field(default_factory=PodcastStats)


# ── Playlist ─────────────────────────────────────────────────────────────────


class Playlist(BaseModel):
    id: str = Field(default_factory=_new_id)
    name: str
    description: str = ""
    cover_image_url: str | None = None
    created_at: UtcDatetime = Field(default_factory=utcnow)
    updated_at: UtcDatetime = Field(default_factory=utcnow)
    podcast_ids: list[str] = Field(default_factory=list)
    is_public: bool = False
    creator_id: str
    type: PlaylistType = PlaylistType.USER_CREATED
    tags: list[str] = Field(default_factory=list)
    category: str | None = None
    ai_generated: bool = False
    generation_prompt: str | None = None


# ── Query options ────────────────────────────────────────────────────────────


class SearchOptions(BaseModel):
    """Filters, sort mode and page window for catalog search."""

    query: str = ""
    categories: list[Category] = Field(default_factory=list)
    tones: list[Tone] = Field(default_factory=list)
    content_ratings: list[ContentRating] = Field(default_factory=list)
    min_duration: float | None = None
    max_duration: float | None = None
    start_date: UtcDatetime | None = None
    end_date: UtcDatetime | None = None
    sort_by: SortMode = "relevance"
    limit: int = Field(default=20, ge=0)
    offset: int = Field(default=0, ge=0)
    include_private: bool = False
    creator_id: str | None = None
    tags: list[str] = Field(default_factory=list)


class ContentFilter(BaseModel):
    """Content-based criteria; every populated field must match."""

    content_ratings: list[ContentRating] = Field(default_factory=list)
    categories: list[Category] = Field(default_factory=list)
    moods: list[str] = Field(default_factory=list)
    target_audience: list[str] = Field(default_factory=list)
    min_readability: float | None = None
    max_readability: float | None = None
    sentiments: list[SentimentLabel] = Field(default_factory=list)
