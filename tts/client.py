"""ElevenLabs text-to-speech client: synthesis plus voice management."""

from __future__ import annotations

import asyncio
import json
import time
import uuid
from datetime import datetime, timezone
from typing import Awaitable, Callable

import httpx

from config.settings import settings
from models.data import AudioFormat, SynthesisError, VoiceSettings
from tts.voice_config import DEFAULT_VOICE_SETTINGS, RECOMMENDED_VOICES, VoicePersona
from utils.helpers import get_logger
from utils.retry import retry_async

log = get_logger(__name__)

ProgressCallback = Callable[[float], None]

_CONTENT_TYPES: dict[AudioFormat, str] = {
    AudioFormat.MP3: "audio/mpeg",
    AudioFormat.WAV: "audio/wav",
    AudioFormat.PCM_24000: "audio/pcm",
    AudioFormat.PCM_44100: "audio/pcm",
}

FALLBACK_MODELS = [
    {
        "model_id": "eleven_multilingual_v2",
        "name": "Multilingual v2",
        "description": "Latest version of the multilingual model, supporting 29 languages",
        "token_cost_factor": 1.5,
    },
    {
        "model_id": "eleven_turbo_v2",
        "name": "Turbo v2",
        "description": "Fastest model with good quality, ideal for real-time applications",
        "token_cost_factor": 0.8,
    },
    {
        "model_id": "eleven_multilingual_v1",
        "name": "Multilingual v1",
        "description": "Original multilingual model",
        "token_cost_factor": 1.5,
    },
    {
        "model_id": "eleven_monolingual_v1",
        "name": "Monolingual v1",
        "description": "English-only model with high quality",
        "token_cost_factor": 1.0,
    },
    {
        "model_id": "eleven_english_v1",
        "name": "English v1",
        "description": "Legacy English model",
        "token_cost_factor": 1.0,
    },
]


def content_type_for_format(output_format: AudioFormat | str) -> str:
    return _CONTENT_TYPES[AudioFormat(output_format)]


def generate_audio_filename(prefix: str = "podcast", extension: str = "mp3") -> str:
    """Unique, sortable file name such as ``podcast_20240101T120000_1a2b3c4d.mp3``."""
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%f")
    return f"{prefix}_{timestamp}_{uuid.uuid4().hex[:8]}.{extension}"


def _fallback_subscription() -> dict:
    return {
        "tier": "free",
        "character_count": 0,
        "character_limit": 10000,
        "can_extend_character_limit": False,
        "allowed_to_extend_character_limit": False,
        "next_character_count_reset_unix": int(time.time()) + 30 * 24 * 60 * 60,
        "voice_limit": 3,
        "professional_voice_limit": 0,
        "can_extend_voice_limit": False,
        "can_use_instant_voice_cloning": True,
        "can_use_professional_voice_cloning": False,
        "currency": "USD",
        "status": "active",
    }


def _voice_from_api(voice: dict) -> VoicePersona:
    labels = voice.get("labels") or {}
    return VoicePersona(
        voice_id=voice["voice_id"],
        name=voice["name"],
        category=voice.get("category"),
        description=voice.get("description"),
        preview_url=voice.get("preview_url"),
        gender=labels.get("gender"),
        age=labels.get("age"),
        accent=labels.get("accent"),
        language=labels.get("language"),
        use_case=labels.get("use_case"),
    )


class VoiceSynthesisClient:
    """Async client for the ElevenLabs REST API.

    Only ``synthesize`` and ``clone_voice`` raise. The listing and
    info calls log the failure and return fallback data instead, so
    callers must treat their results as possibly stale.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        http_client: httpx.AsyncClient | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.api_key = api_key if api_key is not None else settings.tts_api_key
        self.base_url = (base_url or settings.tts_api_base).rstrip("/")
        self._timeout = timeout or settings.tts_timeout_seconds
        self._client = http_client
        self._owns_client = http_client is None
        self._sleep = sleep

    async def __aenter__(self) -> "VoiceSynthesisClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    def _headers(self, **extra: str) -> dict[str, str]:
        return {"xi-api-key": self.api_key, **extra}

    # ── Synthesis ────────────────────────────────────────────────────────

    async def synthesize(
        self,
        text: str,
        voice_id: str,
        voice_settings: VoiceSettings | None = None,
        model_id: str | None = None,
        output_format: AudioFormat | str | None = None,
        optimize_streaming_latency: int = 0,
        on_progress: ProgressCallback | None = None,
        max_retries: int | None = None,
    ) -> bytes:
        """Convert one span of text to audio bytes.

        Progress goes 0.1 (+0.05 per retry) → up to 0.9 while bytes
        arrive → 1.0 when done.

        Raises:
            SynthesisError: every attempt failed.
        """
        if not 0 <= optimize_streaming_latency <= 4:
            raise ValueError("optimize_streaming_latency must be between 0 and 4")

        fmt = AudioFormat(output_format or settings.tts_output_format)
        payload = {
            "text": text,
            "model_id": model_id or settings.tts_model,
            "voice_settings": (voice_settings or DEFAULT_VOICE_SETTINGS).to_payload(),
        }
        url = f"{self.base_url}/text-to-speech/{voice_id}"
        headers = self._headers(**{"Content-Type": "application/json", "Accept": content_type_for_format(fmt)})

        async def attempt(n: int) -> bytes:
            if on_progress:
                on_progress(0.1 + n * 0.05)

            received = bytearray()
            async with self.client.stream(
                "POST",
                url,
                json=payload,
                headers=headers,
                params={"optimize_streaming_latency": optimize_streaming_latency},
            ) as response:
                response.raise_for_status()
                total = int(response.headers.get("content-length") or 0)
                async for chunk in response.aiter_bytes():
                    received.extend(chunk)
                    if on_progress and total:
                        on_progress(min(0.9, 0.1 + len(received) / total * 0.8))

            if on_progress:
                on_progress(1.0)
            return bytes(received)

        audio = await retry_async(
            attempt,
            max_retries=max_retries if max_retries is not None else settings.tts_max_retries,
            error_cls=SynthesisError,
            describe="convert text to speech",
            sleep=self._sleep,
        )
        log.debug("Synthesized %d chars with voice %s → %d bytes", len(text), voice_id, len(audio))
        return audio

    # ── Voice management ─────────────────────────────────────────────────

    async def list_voices(self) -> list[VoicePersona]:
        try:
            resp = await self.client.get(f"{self.base_url}/voices", headers=self._headers())
            resp.raise_for_status()
            return [_voice_from_api(v) for v in resp.json()["voices"]]
        except Exception as exc:
            log.warning("Failed to fetch available voices (%s), using recommended voices", exc)
            return RECOMMENDED_VOICES["male_hosts"] + RECOMMENDED_VOICES["female_hosts"]

    async def clone_voice(
        self,
        name: str,
        files: list[bytes],
        description: str = "",
        labels: dict[str, str] | None = None,
    ) -> str:
        """Create an instant voice clone from audio samples; returns the new voice id."""
        data = {"name": name, "description": description}
        if labels:
            data["labels"] = json.dumps(labels)
        upload = [
            ("files", (f"sample_{i}.mp3", sample, "audio/mpeg"))
            for i, sample in enumerate(files)
        ]
        try:
            resp = await self.client.post(
                f"{self.base_url}/voices/add",
                data=data,
                files=upload,
                headers=self._headers(),
            )
            resp.raise_for_status()
            voice_id = resp.json()["voice_id"]
        except Exception as exc:
            log.error("Failed to clone voice %s: %s", name, exc)
            raise SynthesisError(f"Voice cloning failed: {exc}", attempts=1, last_error=exc) from exc

        log.info("Cloned voice %s → %s", name, voice_id)
        return voice_id

    async def edit_voice(
        self,
        voice_id: str,
        name: str | None = None,
        description: str | None = None,
        labels: dict[str, str] | None = None,
    ) -> bool:
        payload: dict = {}
        if name:
            payload["name"] = name
        if description:
            payload["description"] = description
        if labels:
            payload["labels"] = labels
        try:
            resp = await self.client.post(
                f"{self.base_url}/voices/{voice_id}/settings/edit",
                json=payload,
                headers=self._headers(**{"Content-Type": "application/json"}),
            )
            resp.raise_for_status()
            return True
        except Exception as exc:
            log.warning("Failed to edit voice %s: %s", voice_id, exc)
            return False

    async def delete_voice(self, voice_id: str) -> bool:
        try:
            resp = await self.client.delete(f"{self.base_url}/voices/{voice_id}", headers=self._headers())
            resp.raise_for_status()
            return True
        except Exception as exc:
            log.warning("Failed to delete voice %s: %s", voice_id, exc)
            return False

    async def get_subscription_info(self) -> dict:
        try:
            resp = await self.client.get(f"{self.base_url}/user/subscription", headers=self._headers())
            resp.raise_for_status()
            return resp.json()
        except Exception as exc:
            log.warning("Failed to get subscription info (%s), assuming free tier", exc)
            return _fallback_subscription()

    async def list_models(self) -> list[dict]:
        try:
            resp = await self.client.get(f"{self.base_url}/models", headers=self._headers())
            resp.raise_for_status()
            return resp.json()
        except Exception as exc:
            log.warning("Failed to get available models (%s), using fallback list", exc)
            return [dict(m) for m in FALLBACK_MODELS]
