"""Podcast record lifecycle: creation, updates, plays and categorization."""

from __future__ import annotations

import random
from typing import Any

from pydantic import BaseModel

from analysis.content_analyzer import analyze_content, extract_keywords
from catalog.categories import get_category_by_id
from models.catalog import ContentRating, Podcast, PodcastMetadata
from models.data import AudioAssemblyResult, Category, ScriptResult, Tone, utcnow
from utils.helpers import get_logger

log = get_logger(__name__)

_IMMUTABLE_FIELDS = ("id", "created_at")


def create_podcast_from_generated(
    script: ScriptResult,
    audio: AudioAssemblyResult,
    cover_image_url: str | None = None,
    is_published: bool = False,
    is_private: bool = True,
    tags: list[str] | None = None,
    language_code: str = "en",
    content_rating: ContentRating = ContentRating.PG,
    audio_url: str | None = None,
    script_id: str | None = None,
    audio_id: str | None = None,
) -> Podcast:
    """Build an AI-generated podcast record from a script and its audio."""
    now = utcnow()

    speakers: list[str] = []
    for segment in script.segments:
        if segment.speaker and segment.speaker not in speakers:
            speakers.append(segment.speaker)

    category = script.metadata.category
    tone = script.metadata.tone

    return Podcast(
        title=script.title,
        description=script.summary,
        cover_image_url=cover_image_url,
        audio_url=audio_url,
        script_id=script_id,
        audio_id=audio_id,
        duration=audio.total_duration,
        created_at=now,
        updated_at=now,
        published_at=now if is_published else None,
        is_published=is_published,
        is_private=is_private,
        metadata=PodcastMetadata(
            category=category,
            tone=tone,
            content_rating=content_rating,
            language_code=language_code,
            target_audience=["general"],
            transcript=script.script,
            speakers=speakers,
            keywords=extract_keywords(script.script),
            ai_generated=True,
            source_model=script.metadata.model,
            voice_model=audio.metadata.model,
        ),
        tags=[*(tags or []), category.value, tone.value, "ai-generated"],
    )


def create_empty_podcast(
    title: str,
    description: str,
    category: Category,
    tone: Tone = Tone.CONVERSATIONAL,
    cover_image_url: str | None = None,
    is_private: bool = True,
    language_code: str = "en",
    content_rating: ContentRating = ContentRating.PG,
) -> Podcast:
    category = Category(category)
    tone = Tone(tone)
    now = utcnow()
    return Podcast(
        title=title,
        description=description,
        cover_image_url=cover_image_url,
        created_at=now,
        updated_at=now,
        is_private=is_private,
        metadata=PodcastMetadata(
            category=category,
            tone=tone,
            content_rating=content_rating,
            language_code=language_code,
        ),
        tags=[category.value, tone.value],
    )


def _as_updates(value: BaseModel | dict[str, Any] | None) -> dict[str, Any]:
    # model instances contribute only the fields they were built with
    if isinstance(value, BaseModel):
        return value.model_dump(exclude_unset=True)
    return dict(value or {})


def update_podcast(podcast: Podcast, updates: dict[str, Any]) -> Podcast:
    """Return a copy with ``updates`` applied.

    ``metadata`` and ``stats`` (dicts or model instances) are merged
    field by field. ``updated_at`` is always refreshed, and
    ``published_at`` is set the first time the podcast is published.
    """
    updates = dict(updates)
    for name in _IMMUTABLE_FIELDS:
        if updates.pop(name, None) is not None:
            log.warning("Ignoring update to immutable field %r on podcast %s", name, podcast.id)

    metadata_updates = _as_updates(updates.pop("metadata", None))
    stats_updates = _as_updates(updates.pop("stats", None))
    now = utcnow()

    data = podcast.model_dump()
    data.update(updates)
    data["metadata"] = {**data["metadata"], **metadata_updates}
    data["stats"] = {**data["stats"], **stats_updates}
    data["updated_at"] = now

    if updates.get("is_published") and not podcast.is_published:
        data["published_at"] = now

    return Podcast.model_validate(data)


def record_podcast_play(podcast: Podcast, listen_seconds: float) -> Podcast:
    """Fold one listening session into the running averages."""
    stats = podcast.stats
    plays = stats.plays + 1
    average_listen_time = (stats.average_listen_time * stats.plays + listen_seconds) / plays

    if podcast.duration > 0:
        completion = (stats.completion_rate * stats.plays + listen_seconds / podcast.duration) / plays
    else:
        completion = 0.0

    return update_podcast(
        podcast,
        {
            "stats": {
                "plays": plays,
                "average_listen_time": average_listen_time,
                "completion_rate": min(1.0, completion),
                "last_played": utcnow(),
            }
        },
    )


def categorize_podcast(
    podcast: Podcast,
    script: str,
    rng: random.Random | None = None,
) -> Podcast:
    """Attach content analysis, subcategories, audiences and topic tags."""
    analysis = analyze_content(script, rng=rng)

    subcategories: list[str] = []
    info = get_category_by_id(podcast.metadata.category)
    if info is not None:
        for topic in analysis.topics:
            for sub in info.subcategories:
                if topic.name.lower() in sub.name.lower() and sub.id not in subcategories:
                    subcategories.append(sub.id)
                    break

    audience = ["general"]
    complexity = analysis.complexity
    if complexity.vocabulary_level == "advanced" or complexity.sentence_complexity == "complex":
        audience += ["professionals", "enthusiasts"]
    if analysis.mood.educational > 0.15:
        audience.append("students")
    if complexity.vocabulary_level == "basic" and complexity.sentence_complexity == "simple":
        audience.append("beginners")

    log.info(
        "Categorized podcast %s: mood=%s sentiment=%s subcategories=%s",
        podcast.id,
        analysis.mood.overall,
        analysis.sentiment.overall,
        subcategories,
    )

    return update_podcast(
        podcast,
        {
            "metadata": {
                "subcategories": subcategories,
                "target_audience": list(dict.fromkeys(audience)),
                "content_analysis": analysis,
            },
            "tags": [*podcast.tags, *(t.name for t in analysis.topics[:3]), analysis.mood.overall],
        },
    )
