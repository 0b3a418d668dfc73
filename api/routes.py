"""API routes for podcast generation and the podcast catalog."""

from __future__ import annotations

from typing import AsyncIterator

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from agents.graph import run_pipeline
from agents.script_generator import (
    generate_script as run_script_generation,
    get_podcast_categories,
    get_podcast_tones,
    list_free_models,
)
from api.schemas import (
    MoodPlaylistRequest,
    PlaylistCreateRequest,
    PlaylistItemRequest,
    PlayRequest,
    PodcastRequest,
    PodcastResponse,
    ScriptRequest,
    ScriptResponse,
)
from catalog.categories import get_all_content_ratings
from catalog.playlists import (
    add_podcast_to_playlist,
    create_playlist,
    generate_mood_playlists,
    remove_podcast_from_playlist,
)
from catalog.podcasts import record_podcast_play
from catalog.search import get_recommended_podcasts, get_trending_podcasts, search_podcasts
from models.catalog import Playlist, Podcast, SearchOptions
from models.data import GenerationError, StorageUnavailableError
from storage.provider import FileStorageProvider, PodcastQuery, StorageProvider
from tts.client import VoiceSynthesisClient, content_type_for_format
from utils.helpers import get_logger

log = get_logger(__name__)
router = APIRouter()

_storage: StorageProvider | None = None


# ── Dependencies ─────────────────────────────────────────────────────────────


def get_storage() -> StorageProvider:
    """Lazily create the process-wide file storage provider."""
    global _storage
    if _storage is None:
        try:
            _storage = FileStorageProvider()
        except StorageUnavailableError as e:
            log.error("Storage unavailable: %s", e)
            raise HTTPException(503, str(e))
    return _storage


async def get_voice_client() -> AsyncIterator[VoiceSynthesisClient]:
    async with VoiceSynthesisClient() as client:
        yield client


# ── Helpers ──────────────────────────────────────────────────────────────────


async def _require_podcast(storage: StorageProvider, podcast_id: str) -> Podcast:
    podcast = await storage.get_podcast(podcast_id)
    if podcast is None:
        raise HTTPException(404, "Podcast not found")
    return podcast


async def _require_playlist(storage: StorageProvider, playlist_id: str) -> Playlist:
    playlist = await storage.get_playlist(playlist_id)
    if playlist is None:
        raise HTTPException(404, "Playlist not found")
    return playlist


# ── Generation ───────────────────────────────────────────────────────────────


@router.post("/scripts", response_model=ScriptResponse)
async def generate_script(body: ScriptRequest):
    """Generate and parse a podcast script without synthesizing audio."""
    try:
        result = await run_script_generation(body.to_request())
    except GenerationError as e:
        log.error("Script generation failed: %s", e)
        raise HTTPException(502, str(e))
    return ScriptResponse.from_result(result)


@router.post("/podcasts/generate", response_model=PodcastResponse)
async def generate_podcast(
    body: PodcastRequest,
    storage: StorageProvider = Depends(get_storage),
    voice_client: VoiceSynthesisClient = Depends(get_voice_client),
):
    """Full pipeline: preferences → script → audio → stored podcast."""
    try:
        result = await run_pipeline(
            body.to_request(),
            storage,
            speaker_voices=[v.to_mapping() for v in body.speaker_voices],
            voice_client=voice_client,
            tags=body.tags,
            is_private=body.is_private,
        )
    except GenerationError as e:
        log.error("Podcast generation failed: %s", e)
        raise HTTPException(502, str(e))
    except StorageUnavailableError as e:
        raise HTTPException(503, str(e))

    script = result.get("script")
    audio = result.get("audio")
    return PodcastResponse(
        podcast=result.get("podcast"),
        script=ScriptResponse.from_result(script) if script else None,
        failed_segments=audio.failed_segments if audio else [],
        errors=result.get("errors", []),
    )


# ── Podcasts ─────────────────────────────────────────────────────────────────


@router.post("/podcasts/search", response_model=list[Podcast])
async def search(options: SearchOptions, storage: StorageProvider = Depends(get_storage)):
    podcasts = await storage.list_podcasts()
    return search_podcasts(podcasts, options)


@router.get("/podcasts/trending", response_model=list[Podcast])
async def trending(
    limit: int = Query(10, ge=1),
    days: float = Query(7, gt=0),
    storage: StorageProvider = Depends(get_storage),
):
    podcasts = await storage.list_podcasts(PodcastQuery(is_private=False))
    return get_trending_podcasts(podcasts, limit=limit, time_window_days=days)


@router.get("/podcasts/{podcast_id}", response_model=Podcast)
async def get_podcast(podcast_id: str, storage: StorageProvider = Depends(get_storage)):
    return await _require_podcast(storage, podcast_id)


@router.get("/podcasts/{podcast_id}/audio")
async def download_audio(podcast_id: str, storage: StorageProvider = Depends(get_storage)):
    """Stored audio of a podcast, served with its format's content type."""
    podcast = await _require_podcast(storage, podcast_id)
    data = await storage.get_audio(podcast.audio_id) if podcast.audio_id else None
    if data is None:
        raise HTTPException(404, "Audio not found")
    # audio ids end in the audio format, see agents.graph
    fmt = podcast.audio_id.rsplit(".", 1)[-1]
    return Response(content=data, media_type=content_type_for_format(fmt))


@router.get("/podcasts/{podcast_id}/recommendations", response_model=list[Podcast])
async def recommendations(
    podcast_id: str,
    limit: int = Query(5, ge=1),
    storage: StorageProvider = Depends(get_storage),
):
    reference = await _require_podcast(storage, podcast_id)
    candidates = await storage.list_podcasts(PodcastQuery(is_private=False))
    return get_recommended_podcasts(reference, candidates, limit=limit)


@router.post("/podcasts/{podcast_id}/plays", response_model=Podcast)
async def record_play(
    podcast_id: str,
    body: PlayRequest,
    storage: StorageProvider = Depends(get_storage),
):
    podcast = record_podcast_play(await _require_podcast(storage, podcast_id), body.listen_seconds)
    await storage.save_podcast(podcast)
    return podcast


# ── Playlists ────────────────────────────────────────────────────────────────


@router.post("/playlists", response_model=Playlist)
async def new_playlist(body: PlaylistCreateRequest, storage: StorageProvider = Depends(get_storage)):
    playlist = create_playlist(**body.model_dump())
    await storage.save_playlist(playlist)
    return playlist


@router.post("/playlists/mood", response_model=list[Playlist])
async def mood_playlists(body: MoodPlaylistRequest, storage: StorageProvider = Depends(get_storage)):
    """Regenerate the mood playlists from public podcasts."""
    podcasts = await storage.list_podcasts(PodcastQuery(is_private=False))
    playlists = generate_mood_playlists(podcasts, body.creator_id)
    for playlist in playlists:
        await storage.save_playlist(playlist)
    return playlists


@router.get("/playlists/{playlist_id}", response_model=Playlist)
async def get_playlist(playlist_id: str, storage: StorageProvider = Depends(get_storage)):
    return await _require_playlist(storage, playlist_id)


@router.post("/playlists/{playlist_id}/items", response_model=Playlist)
async def add_playlist_item(
    playlist_id: str,
    body: PlaylistItemRequest,
    storage: StorageProvider = Depends(get_storage),
):
    playlist = await _require_playlist(storage, playlist_id)
    await _require_podcast(storage, body.podcast_id)
    playlist = add_podcast_to_playlist(playlist, body.podcast_id)
    await storage.save_playlist(playlist)
    return playlist


@router.delete("/playlists/{playlist_id}/items/{podcast_id}", response_model=Playlist)
async def remove_playlist_item(
    playlist_id: str,
    podcast_id: str,
    storage: StorageProvider = Depends(get_storage),
):
    playlist = remove_podcast_from_playlist(await _require_playlist(storage, playlist_id), podcast_id)
    await storage.save_playlist(playlist)
    return playlist


# ── Reference data ───────────────────────────────────────────────────────────


@router.get("/categories")
async def categories():
    return get_podcast_categories()


@router.get("/tones")
async def tones():
    return get_podcast_tones()


@router.get("/content-ratings")
async def content_ratings():
    return get_all_content_ratings()


@router.get("/models")
async def models():
    """Free LLM models (possibly a fallback list)."""
    return await list_free_models()


@router.get("/voices")
async def voices(voice_client: VoiceSynthesisClient = Depends(get_voice_client)):
    """Available TTS voices (possibly a fallback list)."""
    return await voice_client.list_voices()


@router.get("/tts-models")
async def tts_models(voice_client: VoiceSynthesisClient = Depends(get_voice_client)):
    return await voice_client.list_models()
