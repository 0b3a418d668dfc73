"""Tests for the storage providers."""

from __future__ import annotations

import asyncio

import pytest

from catalog.playlists import create_playlist
from models.catalog import ContentRating, PlaylistType
from models.data import Category, StorageUnavailableError
from storage.provider import (
    FileStorageProvider,
    InMemoryStorageProvider,
    PlaylistQuery,
    PodcastQuery,
)


@pytest.fixture(params=["memory", "file"])
def storage(request, tmp_path):
    if request.param == "memory":
        return InMemoryStorageProvider()
    return FileStorageProvider(tmp_path / "store")


class TestPodcastRecords:
    def test_save_get_delete(self, storage, podcast_factory):
        podcast = podcast_factory(title="Stored", tags=["t"])

        async def run():
            assert await storage.save_podcast(podcast) == podcast.id
            loaded = await storage.get_podcast(podcast.id)
            deleted = await storage.delete_podcast(podcast.id)
            missing = await storage.get_podcast(podcast.id)
            deleted_again = await storage.delete_podcast(podcast.id)
            return loaded, deleted, missing, deleted_again

        loaded, deleted, missing, deleted_again = asyncio.run(run())
        assert loaded.model_dump() == podcast.model_dump()
        assert deleted is True
        assert missing is None
        assert deleted_again is False

    def test_list_sorted_newest_first_with_paging(self, storage, podcast_factory):
        podcasts = [podcast_factory(title=str(i), created_offset_days=i) for i in range(4)]

        async def run():
            for p in podcasts:
                await storage.save_podcast(p)
            return (
                await storage.list_podcasts(),
                await storage.list_podcasts(PodcastQuery(offset=1, limit=2)),
            )

        everything, page = asyncio.run(run())
        assert [p.title for p in everything] == ["3", "2", "1", "0"]
        assert [p.title for p in page] == ["2", "1"]

    def test_list_filters(self, storage, podcast_factory):
        tech = podcast_factory(title="tech", category=Category.TECH, content_rating=ContentRating.G)
        news = podcast_factory(title="news", category=Category.NEWS, is_private=True)

        async def run():
            await storage.save_podcast(tech)
            await storage.save_podcast(news)
            return (
                await storage.list_podcasts(PodcastQuery(category=Category.NEWS)),
                await storage.list_podcasts(PodcastQuery(is_private=False)),
                await storage.list_podcasts(PodcastQuery(content_rating=ContentRating.R)),
            )

        by_category, public, by_rating = asyncio.run(run())
        assert [p.title for p in by_category] == ["news"]
        assert [p.title for p in public] == ["tech"]
        assert by_rating == []


class TestPlaylistRecords:
    def test_save_list_and_filter(self, storage):
        mine = create_playlist("Mine", "", "user-1")
        theirs = create_playlist("Theirs", "", "user-2", is_public=True, type=PlaylistType.MOOD_BASED)

        async def run():
            await storage.save_playlist(mine)
            await storage.save_playlist(theirs)
            return (
                await storage.get_playlist(mine.id),
                await storage.list_playlists(PlaylistQuery(creator_id="user-2")),
                await storage.list_playlists(PlaylistQuery(type=PlaylistType.MOOD_BASED, is_public=True)),
                await storage.delete_playlist(mine.id),
                await storage.list_playlists(),
            )

        loaded, by_creator, mood, deleted, remaining = asyncio.run(run())
        assert loaded.model_dump() == mine.model_dump()
        assert [p.name for p in by_creator] == ["Theirs"]
        assert [p.name for p in mood] == ["Theirs"]
        assert deleted is True
        assert [p.name for p in remaining] == ["Theirs"]


class TestBlobs:
    def test_audio_and_images(self, storage):
        async def run():
            await storage.save_audio("a1", b"\x00\x01audio")
            await storage.save_image("i1", b"\x89PNG")
            return (
                await storage.get_audio("a1"),
                await storage.get_image("i1"),
                await storage.get_audio("missing"),
                await storage.get_image("missing"),
            )

        assert asyncio.run(run()) == (b"\x00\x01audio", b"\x89PNG", None, None)


class TestFileStorage:
    def test_persists_across_instances(self, tmp_path, podcast_factory):
        podcast = podcast_factory(title="durable")
        asyncio.run(FileStorageProvider(tmp_path).save_podcast(podcast))

        reopened = FileStorageProvider(tmp_path)
        assert asyncio.run(reopened.get_podcast(podcast.id)).model_dump() == podcast.model_dump()
        assert (tmp_path / "podcasts" / f"{podcast.id}.json").exists()

    def test_corrupt_records_are_skipped(self, tmp_path, podcast_factory):
        store = FileStorageProvider(tmp_path)
        good = podcast_factory(title="good")
        asyncio.run(store.save_podcast(good))
        (tmp_path / "podcasts" / "broken.json").write_text("{not json", encoding="utf-8")

        assert asyncio.run(store.get_podcast("broken")) is None
        assert [p.title for p in asyncio.run(store.list_podcasts())] == ["good"]

    def test_unusable_root_raises(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("occupied", encoding="utf-8")

        with pytest.raises(StorageUnavailableError):
            FileStorageProvider(blocker)
