"""Voice catalogue and speaker → voice assignment for podcast hosts and guests."""

from __future__ import annotations

from dataclasses import dataclass

from models.data import SpeakerVoiceMapping, VoiceSettings


@dataclass(frozen=True)
class VoicePersona:
    """A voice available on the TTS service."""

    voice_id: str
    name: str
    category: str | None = None
    description: str | None = None
    preview_url: str | None = None
    gender: str | None = None
    age: str | None = None
    accent: str | None = None
    language: str | None = None
    use_case: str | None = None


DEFAULT_VOICE_SETTINGS = VoiceSettings()


# ── Recommended Personas ─────────────────────────────────────────────────────

RECOMMENDED_VOICES: dict[str, list[VoicePersona]] = {
    "male_hosts": [
        VoicePersona("pNInz6obpgDQGcFmaJgB", "Adam"),
        VoicePersona("ErXwobaYiN019PkySvjV", "Antoni"),
        VoicePersona("ODq5zmih8GrVes37Dizd", "Josh"),
        VoicePersona("ZQe5CZNOzWyzPSCn5a3c", "Sam"),
    ],
    "female_hosts": [
        VoicePersona("EXAVITQu4vr4xnSDxMaL", "Bella"),
        VoicePersona("MF3mGyEYCl7XYWbV9V6O", "Elli"),
        VoicePersona("D38z5RcWu1voky8WS1ja", "Grace"),
        VoicePersona("jBpfuIE2acCO8z3wKNLl", "Rachel"),
    ],
    "male_guests": [
        VoicePersona("VR6AewLTigWG4xSOukaG", "Arnold"),
        VoicePersona("yoZ06aMxZJJ28mfd3POQ", "Daniel"),
        VoicePersona("TxGEqnHWrfWFTfGW9XjX", "Matthew"),
        VoicePersona("GBv7mTt0atIp3Br8iCZE", "Thomas"),
    ],
    "female_guests": [
        VoicePersona("XB0fDUnXU5powFXDhCwa", "Charlotte"),
        VoicePersona("21m00Tcm4TlvDq8ikWAM", "Freya"),
        VoicePersona("29vD33N1CtxCmqQRPOHJ", "Dorothy"),
        VoicePersona("z9fAnlkpzviPz146aGWa", "Glinda"),
    ],
}


def get_recommended_voices() -> dict[str, list[VoicePersona]]:
    return RECOMMENDED_VOICES


def all_recommended_voices() -> list[VoicePersona]:
    return [voice for group in RECOMMENDED_VOICES.values() for voice in group]


def map_speakers_to_voices(speaker_names: list[str]) -> list[SpeakerVoiceMapping]:
    """Give each speaker a recommended voice, cycling when names outnumber voices."""
    voices = all_recommended_voices()
    return [
        SpeakerVoiceMapping(speaker_name=name, voice_id=voices[i % len(voices)].voice_id)
        for i, name in enumerate(speaker_names)
    ]
