"""Playlist creation, mutation and automatic generation."""

from __future__ import annotations

from typing import Any

from catalog.categories import DEFAULT_MOOD_PLAYLISTS, MOOD_PLAYLIST_SPECS
from models.catalog import Playlist, PlaylistType, Podcast
from models.data import Category, utcnow
from utils.helpers import get_logger

log = get_logger(__name__)


def create_playlist(
    name: str,
    description: str,
    creator_id: str,
    cover_image_url: str | None = None,
    podcast_ids: list[str] | None = None,
    is_public: bool = False,
    type: PlaylistType = PlaylistType.USER_CREATED,
    tags: list[str] | None = None,
    category: str | None = None,
    ai_generated: bool = False,
    generation_prompt: str | None = None,
) -> Playlist:
    now = utcnow()
    return Playlist(
        name=name,
        description=description,
        cover_image_url=cover_image_url,
        created_at=now,
        updated_at=now,
        # duplicates are dropped, first occurrence wins
        podcast_ids=list(dict.fromkeys(podcast_ids or [])),
        is_public=is_public,
        creator_id=creator_id,
        type=type,
        tags=list(tags or []),
        category=category,
        ai_generated=ai_generated,
        generation_prompt=generation_prompt,
    )


def update_playlist(playlist: Playlist, updates: dict[str, Any]) -> Playlist:
    updates = {k: v for k, v in updates.items() if k not in ("id", "created_at")}
    if "podcast_ids" in updates:
        updates["podcast_ids"] = list(dict.fromkeys(updates["podcast_ids"]))
    return Playlist.model_validate(
        {**playlist.model_dump(), **updates, "updated_at": utcnow()}
    )


def add_podcast_to_playlist(playlist: Playlist, podcast_id: str) -> Playlist:
    """Append ``podcast_id``; a playlist already containing it is returned as is."""
    if podcast_id in playlist.podcast_ids:
        return playlist
    return update_playlist(playlist, {"podcast_ids": [*playlist.podcast_ids, podcast_id]})


def remove_podcast_from_playlist(playlist: Playlist, podcast_id: str) -> Playlist:
    return update_playlist(
        playlist,
        {"podcast_ids": [pid for pid in playlist.podcast_ids if pid != podcast_id]},
    )


def _by_plays(podcasts: list[Podcast]) -> list[Podcast]:
    return sorted(podcasts, key=lambda p: p.stats.plays, reverse=True)


def _dominant_mood(podcast: Podcast) -> str | None:
    analysis = podcast.metadata.content_analysis
    return analysis.mood.overall if analysis else None


def generate_playlist(
    podcasts: list[Podcast],
    name: str,
    description: str,
    creator_id: str,
    category: Category | None = None,
    mood: str | None = None,
    target_audience: list[str] | None = None,
    max_items: int = 10,
    tags: list[str] | None = None,
    is_public: bool = False,
    cover_image_url: str | None = None,
) -> Playlist:
    """Pick the most played podcasts matching the given criteria."""
    candidates = list(podcasts)
    if category:
        category = Category(category)
        candidates = [p for p in candidates if p.metadata.category == category]
    if mood:
        candidates = [p for p in candidates if _dominant_mood(p) == mood]
    if target_audience:
        candidates = [
            p for p in candidates
            if any(a in p.metadata.target_audience for a in target_audience)
        ]

    selected = _by_plays(candidates)[:max_items]
    category_value = category.value if category else None

    return create_playlist(
        name=name,
        description=description,
        cover_image_url=cover_image_url,
        podcast_ids=[p.id for p in selected],
        is_public=is_public,
        creator_id=creator_id,
        type=PlaylistType.AUTO_GENERATED,
        tags=[t for t in [*(tags or []), category_value, mood, "auto-generated"] if t],
        category=category_value,
        ai_generated=True,
        generation_prompt=(
            f"Category: {category_value}, Mood: {mood}, "
            f"Audience: {', '.join(target_audience or [])}"
        ),
    )


def generate_mood_playlists(podcasts: list[Podcast], creator_id: str) -> list[Playlist]:
    """One public playlist per mood, holding its ten most played podcasts."""
    if not podcasts:
        return []

    playlists = []
    for name, mood, description in MOOD_PLAYLIST_SPECS:
        matching = [p for p in podcasts if _dominant_mood(p) == mood]
        selected = _by_plays(matching)[:10]
        playlists.append(
            create_playlist(
                name=name,
                description=description,
                podcast_ids=[p.id for p in selected],
                is_public=True,
                creator_id=creator_id,
                type=PlaylistType.MOOD_BASED,
                tags=[mood, "auto-generated"],
                ai_generated=True,
            )
        )
        log.debug("Mood playlist %r: %d podcasts", name, len(selected))
    return playlists


def create_default_playlists(creator_id: str) -> list[Playlist]:
    """Empty mood-based starter playlists for a new user."""
    return [
        create_playlist(
            name=template.name,
            description=template.description,
            creator_id=creator_id,
            type=PlaylistType.MOOD_BASED,
            tags=list(template.tags),
            ai_generated=True,
        )
        for template in DEFAULT_MOOD_PLAYLISTS
    ]
