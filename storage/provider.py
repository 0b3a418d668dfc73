"""Persistence for podcasts, playlists and their audio/image blobs."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from config.settings import settings
from models.catalog import ContentRating, Playlist, PlaylistType, Podcast
from models.data import Category, StorageUnavailableError, Tone
from utils.helpers import get_logger, read_bytes, read_text, write_file

log = get_logger(__name__)

RecordT = TypeVar("RecordT", Podcast, Playlist)


# ── Queries ──────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class PodcastQuery:
    """Equality filters for podcast listings; ``None`` fields are ignored."""

    is_private: bool | None = None
    is_published: bool | None = None
    category: Category | None = None
    tone: Tone | None = None
    content_rating: ContentRating | None = None
    language_code: str | None = None
    ai_generated: bool | None = None
    limit: int | None = None
    offset: int = 0

    def matches(self, podcast: Podcast) -> bool:
        meta = podcast.metadata
        checks = [
            (self.is_private, podcast.is_private),
            (self.is_published, podcast.is_published),
            (self.category, meta.category),
            (self.tone, meta.tone),
            (self.content_rating, meta.content_rating),
            (self.language_code, meta.language_code),
            (self.ai_generated, meta.ai_generated),
        ]
        return all(expected is None or expected == actual for expected, actual in checks)


@dataclass(frozen=True)
class PlaylistQuery:
    """Equality filters for playlist listings; ``None`` fields are ignored."""

    type: PlaylistType | None = None
    is_public: bool | None = None
    creator_id: str | None = None
    category: str | None = None
    ai_generated: bool | None = None
    limit: int | None = None
    offset: int = 0

    def matches(self, playlist: Playlist) -> bool:
        checks = [
            (self.type, playlist.type),
            (self.is_public, playlist.is_public),
            (self.creator_id, playlist.creator_id),
            (self.category, playlist.category),
            (self.ai_generated, playlist.ai_generated),
        ]
        return all(expected is None or expected == actual for expected, actual in checks)


def _page(records: list[RecordT], offset: int, limit: int | None) -> list[RecordT]:
    """Newest first, then the offset/limit window."""
    records = sorted(records, key=lambda r: r.created_at, reverse=True)
    end = None if limit is None else offset + limit
    return records[offset:end]


# ── Interface ────────────────────────────────────────────────────────────────


class StorageProvider(ABC):
    """Read/write contract the pipeline and API depend on.

    Writes to the same record id are not serialized; callers that update
    a record concurrently must coordinate themselves.
    """

    @abstractmethod
    async def save_podcast(self, podcast: Podcast) -> str: ...

    @abstractmethod
    async def get_podcast(self, podcast_id: str) -> Podcast | None: ...

    @abstractmethod
    async def delete_podcast(self, podcast_id: str) -> bool: ...

    @abstractmethod
    async def list_podcasts(self, query: PodcastQuery | None = None) -> list[Podcast]: ...

    @abstractmethod
    async def save_playlist(self, playlist: Playlist) -> str: ...

    @abstractmethod
    async def get_playlist(self, playlist_id: str) -> Playlist | None: ...

    @abstractmethod
    async def delete_playlist(self, playlist_id: str) -> bool: ...

    @abstractmethod
    async def list_playlists(self, query: PlaylistQuery | None = None) -> list[Playlist]: ...

    @abstractmethod
    async def save_audio(self, audio_id: str, data: bytes) -> str: ...

    @abstractmethod
    async def get_audio(self, audio_id: str) -> bytes | None: ...

    @abstractmethod
    async def save_image(self, image_id: str, data: bytes) -> str: ...

    @abstractmethod
    async def get_image(self, image_id: str) -> bytes | None: ...


# ── In-memory ────────────────────────────────────────────────────────────────


class InMemoryStorageProvider(StorageProvider):
    """Dict-backed provider, used by tests and short-lived sessions."""

    def __init__(self) -> None:
        self.podcasts: dict[str, Podcast] = {}
        self.playlists: dict[str, Playlist] = {}
        self.audio: dict[str, bytes] = {}
        self.images: dict[str, bytes] = {}

    async def save_podcast(self, podcast: Podcast) -> str:
        self.podcasts[podcast.id] = podcast
        return podcast.id

    async def get_podcast(self, podcast_id: str) -> Podcast | None:
        return self.podcasts.get(podcast_id)

    async def delete_podcast(self, podcast_id: str) -> bool:
        return self.podcasts.pop(podcast_id, None) is not None

    async def list_podcasts(self, query: PodcastQuery | None = None) -> list[Podcast]:
        query = query or PodcastQuery()
        matching = [p for p in self.podcasts.values() if query.matches(p)]
        return _page(matching, query.offset, query.limit)

    async def save_playlist(self, playlist: Playlist) -> str:
        self.playlists[playlist.id] = playlist
        return playlist.id

    async def get_playlist(self, playlist_id: str) -> Playlist | None:
        return self.playlists.get(playlist_id)

    async def delete_playlist(self, playlist_id: str) -> bool:
        return self.playlists.pop(playlist_id, None) is not None

    async def list_playlists(self, query: PlaylistQuery | None = None) -> list[Playlist]:
        query = query or PlaylistQuery()
        matching = [p for p in self.playlists.values() if query.matches(p)]
        return _page(matching, query.offset, query.limit)

    async def save_audio(self, audio_id: str, data: bytes) -> str:
        self.audio[audio_id] = bytes(data)
        return audio_id

    async def get_audio(self, audio_id: str) -> bytes | None:
        return self.audio.get(audio_id)

    async def save_image(self, image_id: str, data: bytes) -> str:
        self.images[image_id] = bytes(data)
        return image_id

    async def get_image(self, image_id: str) -> bytes | None:
        return self.images.get(image_id)


# ── File system ──────────────────────────────────────────────────────────────


class FileStorageProvider(StorageProvider):
    """One JSON file per record and one raw file per blob under ``root``.

    Layout::

        root/podcasts/<id>.json
        root/playlists/<id>.json
        root/audio/<id>
        root/images/<id>
    """

    def __init__(self, root: Path | str | None = None):
        self.root = Path(root) if root is not None else settings.storage_path
        try:
            for sub in ("podcasts", "playlists", "audio", "images"):
                (self.root / sub).mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageUnavailableError(f"Storage directory {self.root} is not usable: {exc}") from exc
        log.info("File storage initialized at %s", self.root)

    def _record_path(self, kind: str, record_id: str) -> Path:
        return self.root / kind / f"{record_id}.json"

    def _write_record(self, kind: str, record: BaseModel, record_id: str) -> str:
        try:
            write_file(self._record_path(kind, record_id), record.model_dump_json(indent=2))
        except OSError as exc:
            raise StorageUnavailableError(f"Failed to write {kind} record {record_id}: {exc}") from exc
        return record_id

    def _read_record(self, path: Path, model: type[RecordT]) -> RecordT | None:
        try:
            return model.model_validate_json(read_text(path))
        except ValidationError as exc:
            log.warning("Skipping unreadable record %s: %s", path.name, exc)
            return None

    def _get(self, kind: str, record_id: str, model: type[RecordT]) -> RecordT | None:
        path = self._record_path(kind, record_id)
        if not path.exists():
            return None
        return self._read_record(path, model)

    def _delete(self, kind: str, record_id: str) -> bool:
        path = self._record_path(kind, record_id)
        if not path.exists():
            return False
        path.unlink()
        log.info("Deleted %s record %s", kind, record_id)
        return True

    def _load_all(self, kind: str, model: type[RecordT]) -> list[RecordT]:
        records = []
        for path in sorted((self.root / kind).glob("*.json")):
            record = self._read_record(path, model)
            if record is not None:
                records.append(record)
        return records

    def _write_blob(self, kind: str, blob_id: str, data: bytes) -> str:
        try:
            write_file(self.root / kind / blob_id, data)
        except OSError as exc:
            raise StorageUnavailableError(f"Failed to write {kind} blob {blob_id}: {exc}") from exc
        return blob_id

    def _read_blob(self, kind: str, blob_id: str) -> bytes | None:
        return read_bytes(self.root / kind / blob_id)

    async def save_podcast(self, podcast: Podcast) -> str:
        return self._write_record("podcasts", podcast, podcast.id)

    async def get_podcast(self, podcast_id: str) -> Podcast | None:
        return self._get("podcasts", podcast_id, Podcast)

    async def delete_podcast(self, podcast_id: str) -> bool:
        return self._delete("podcasts", podcast_id)

    async def list_podcasts(self, query: PodcastQuery | None = None) -> list[Podcast]:
        query = query or PodcastQuery()
        matching = [p for p in self._load_all("podcasts", Podcast) if query.matches(p)]
        return _page(matching, query.offset, query.limit)

    async def save_playlist(self, playlist: Playlist) -> str:
        return self._write_record("playlists", playlist, playlist.id)

    async def get_playlist(self, playlist_id: str) -> Playlist | None:
        return self._get("playlists", playlist_id, Playlist)

    async def delete_playlist(self, playlist_id: str) -> bool:
        return self._delete("playlists", playlist_id)

    async def list_playlists(self, query: PlaylistQuery | None = None) -> list[Playlist]:
        query = query or PlaylistQuery()
        matching = [p for p in self._load_all("playlists", Playlist) if query.matches(p)]
        return _page(matching, query.offset, query.limit)

    async def save_audio(self, audio_id: str, data: bytes) -> str:
        return self._write_blob("audio", audio_id, data)

    async def get_audio(self, audio_id: str) -> bytes | None:
        return self._read_blob("audio", audio_id)

    async def save_image(self, image_id: str, data: bytes) -> str:
        return self._write_blob("images", image_id, data)

    async def get_image(self, image_id: str) -> bytes | None:
        return self._read_blob("images", image_id)
