"""Tests for the FastAPI endpoints."""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from api.main import app
from api.routes import get_storage, get_voice_client
from catalog.playlists import create_playlist
from models.data import GenerationError
from storage.provider import InMemoryStorageProvider
from tts.voice_config import RECOMMENDED_VOICES

client = TestClient(app)

SCRIPT_BODY = {
    "category": "tech",
    "length_minutes": 5,
    "tone": "casual",
    "host_names": ["Alex"],
    "guest_names": ["Sam"],
}


@pytest.fixture
def storage():
    store = InMemoryStorageProvider()
    app.dependency_overrides[get_storage] = lambda: store
    yield store
    app.dependency_overrides.clear()


@pytest.fixture
def voice_client():
    fake = MagicMock()
    fake.synthesize = AsyncMock(return_value=b"\x00" * 16384)
    fake.list_voices = AsyncMock(return_value=RECOMMENDED_VOICES["male_hosts"])
    fake.list_models = AsyncMock(return_value=[{"model_id": "m1", "name": "Model One"}])
    app.dependency_overrides[get_voice_client] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_voice_client, None)


def _llm_response(content: str) -> MagicMock:
    response = MagicMock()
    response.choices = [MagicMock(message=MagicMock(content=content))]
    return response


class TestHealthCheck:
    def test_health(self):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["version"] == "0.1.0"


class TestScripts:
    @patch("agents.script_generator.litellm")
    def test_generate_script(self, mock_litellm, sample_completion):
        mock_litellm.acompletion = AsyncMock(return_value=_llm_response(sample_completion))

        response = client.post("/api/v1/scripts", json=SCRIPT_BODY)

        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "The Future of AI"
        assert [s["type"] for s in data["segments"]] == ["intro", "main", "main", "outro"]
        assert data["segments"][2]["speaker"] == "Sam"

    @patch("api.routes.run_script_generation", new_callable=AsyncMock)
    def test_generation_failure_is_bad_gateway(self, mock_generate):
        mock_generate.side_effect = GenerationError("Failed to generate podcast script after 3 attempts: down")

        response = client.post("/api/v1/scripts", json=SCRIPT_BODY)

        assert response.status_code == 502
        assert "after 3 attempts" in response.json()["detail"]

    def test_invalid_preferences(self):
        response = client.post("/api/v1/scripts", json={**SCRIPT_BODY, "length_minutes": 0})
        assert response.status_code == 422

    def test_unknown_category(self):
        response = client.post("/api/v1/scripts", json={**SCRIPT_BODY, "category": "gardening"})
        assert response.status_code == 422


class TestGeneratePodcast:
    @patch("agents.script_generator.litellm")
    def test_pipeline_stores_podcast(self, mock_litellm, storage, voice_client, sample_completion):
        mock_litellm.acompletion = AsyncMock(return_value=_llm_response(sample_completion))

        response = client.post(
            "/api/v1/podcasts/generate",
            json={
                **SCRIPT_BODY,
                "tags": ["demo"],
                "is_private": False,
                "speaker_voices": [{"speaker_name": "Alex", "voice_id": "voice-alex"}],
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["errors"] == []
        assert data["failed_segments"] == []
        podcast_id = data["podcast"]["id"]
        assert podcast_id in storage.podcasts
        assert storage.podcasts[podcast_id].is_private is False
        assert "demo" in data["podcast"]["tags"]
        voice_ids = [call.args[1] for call in voice_client.synthesize.await_args_list]
        assert voice_ids[0] == "voice-alex"

        audio = client.get(f"/api/v1/podcasts/{podcast_id}/audio")
        assert audio.status_code == 200
        assert audio.headers["content-type"] == "audio/mpeg"
        assert audio.content == b"\x00" * 16384 * 4

    @patch("agents.script_generator.litellm")
    def test_pipeline_generation_failure(self, mock_litellm, storage, voice_client):
        mock_litellm.acompletion = AsyncMock(side_effect=RuntimeError("down"))

        response = client.post("/api/v1/podcasts/generate", json={**SCRIPT_BODY, "max_retries": 1})

        assert response.status_code == 502
        assert storage.podcasts == {}


class TestPodcasts:
    def test_get_missing_podcast(self, storage):
        assert client.get("/api/v1/podcasts/nope").status_code == 404

    def test_get_podcast(self, storage, podcast_factory):
        podcast = podcast_factory(title="Stored")
        storage.podcasts[podcast.id] = podcast

        response = client.get(f"/api/v1/podcasts/{podcast.id}")

        assert response.status_code == 200
        assert response.json()["title"] == "Stored"

    def test_audio_missing(self, storage, podcast_factory):
        podcast = podcast_factory()
        storage.podcasts[podcast.id] = podcast

        assert client.get(f"/api/v1/podcasts/{podcast.id}/audio").status_code == 404

    def test_search(self, storage, podcast_factory):
        for podcast in [
            podcast_factory(title="Robots Today", tags=["ai"]),
            podcast_factory(title="Cooking Hour"),
            podcast_factory(title="Secret Robots", is_private=True),
        ]:
            storage.podcasts[podcast.id] = podcast

        response = client.post("/api/v1/podcasts/search", json={"query": "robots"})

        assert response.status_code == 200
        assert [p["title"] for p in response.json()] == ["Robots Today"]

    def test_search_with_naive_date_range(self, storage, podcast_factory):
        podcast = podcast_factory(title="Dated")
        storage.podcasts[podcast.id] = podcast

        response = client.post(
            "/api/v1/podcasts/search",
            json={"start_date": "2020-01-01T00:00:00", "end_date": "2030-01-01T00:00:00"},
        )

        assert response.status_code == 200
        assert [p["title"] for p in response.json()] == ["Dated"]

    def test_trending_only_public(self, storage, podcast_factory):
        now = datetime.now(timezone.utc)
        hot = podcast_factory(title="hot", plays=10, last_played=now)
        hidden = podcast_factory(title="hidden", plays=100, last_played=now, is_private=True)
        cold = podcast_factory(title="cold", plays=50)
        for podcast in (hot, hidden, cold):
            storage.podcasts[podcast.id] = podcast

        response = client.get("/api/v1/podcasts/trending", params={"limit": 5, "days": 7})

        assert response.status_code == 200
        assert [p["title"] for p in response.json()] == ["hot"]

    def test_recommendations(self, storage, podcast_factory):
        reference = podcast_factory(title="ref", tags=["ai"])
        close = podcast_factory(title="close", tags=["ai"])
        storage.podcasts[reference.id] = reference
        storage.podcasts[close.id] = close

        response = client.get(f"/api/v1/podcasts/{reference.id}/recommendations")

        assert response.status_code == 200
        assert [p["title"] for p in response.json()] == ["close"]

    def test_record_play(self, storage, podcast_factory):
        podcast = podcast_factory(duration=100.0)
        storage.podcasts[podcast.id] = podcast

        response = client.post(f"/api/v1/podcasts/{podcast.id}/plays", json={"listen_seconds": 50})

        assert response.status_code == 200
        stats = response.json()["stats"]
        assert stats["plays"] == 1
        assert stats["completion_rate"] == pytest.approx(0.5)
        assert storage.podcasts[podcast.id].stats.plays == 1

    def test_negative_listen_time_rejected(self, storage, podcast_factory):
        podcast = podcast_factory()
        storage.podcasts[podcast.id] = podcast

        response = client.post(f"/api/v1/podcasts/{podcast.id}/plays", json={"listen_seconds": -1})

        assert response.status_code == 422


class TestPlaylists:
    def test_create_and_fetch(self, storage):
        response = client.post(
            "/api/v1/playlists", json={"name": "Favourites", "creator_id": "user-1", "is_public": True}
        )
        assert response.status_code == 200
        playlist_id = response.json()["id"]

        fetched = client.get(f"/api/v1/playlists/{playlist_id}")
        assert fetched.status_code == 200
        assert fetched.json()["name"] == "Favourites"

    def test_missing_playlist(self, storage):
        assert client.get("/api/v1/playlists/nope").status_code == 404

    def test_add_is_idempotent_and_remove(self, storage, podcast_factory):
        podcast = podcast_factory()
        storage.podcasts[podcast.id] = podcast
        playlist = create_playlist("Mine", "", "user-1")
        storage.playlists[playlist.id] = playlist
        url = f"/api/v1/playlists/{playlist.id}/items"

        first = client.post(url, json={"podcast_id": podcast.id})
        second = client.post(url, json={"podcast_id": podcast.id})
        assert first.json()["podcast_ids"] == [podcast.id]
        assert second.json()["podcast_ids"] == [podcast.id]

        removed = client.delete(f"{url}/{podcast.id}")
        assert removed.status_code == 200
        assert removed.json()["podcast_ids"] == []
        assert storage.playlists[playlist.id].podcast_ids == []

    def test_add_unknown_podcast(self, storage):
        playlist = create_playlist("Mine", "", "user-1")
        storage.playlists[playlist.id] = playlist

        response = client.post(f"/api/v1/playlists/{playlist.id}/items", json={"podcast_id": "ghost"})

        assert response.status_code == 404
        assert storage.playlists[playlist.id].podcast_ids == []

    def test_mood_playlists(self, storage, podcast_factory, analysis_factory):
        for i in range(3):
            podcast = podcast_factory(title=f"fun {i}", analysis=analysis_factory(mood="entertaining"))
            storage.podcasts[podcast.id] = podcast

        response = client.post("/api/v1/playlists/mood", json={})

        assert response.status_code == 200
        playlists = response.json()
        assert playlists
        assert all(p["creator_id"] == "system" for p in playlists)
        assert len(storage.playlists) == len(playlists)


class TestReferenceData:
    def test_categories_and_tones(self):
        categories = client.get("/api/v1/categories").json()
        tones = client.get("/api/v1/tones").json()
        assert {"tech", "comedy"} <= {c["id"] for c in categories}
        assert "casual" in {t["id"] for t in tones}

    def test_content_ratings(self):
        response = client.get("/api/v1/content-ratings")
        assert response.status_code == 200
        assert response.json()

    @patch("api.routes.list_free_models", new_callable=AsyncMock)
    def test_models(self, mock_models):
        mock_models.return_value = [{"id": "free/model", "name": "Free"}]
        assert client.get("/api/v1/models").json() == [{"id": "free/model", "name": "Free"}]

    def test_voices_and_tts_models(self, voice_client):
        voices = client.get("/api/v1/voices").json()
        assert [v["voice_id"] for v in voices] == [v.voice_id for v in RECOMMENDED_VOICES["male_hosts"]]
        assert client.get("/api/v1/tts-models").json() == [{"model_id": "m1", "name": "Model One"}]
