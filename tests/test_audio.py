"""Tests for podcast audio assembly."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import pytest

from audio.assembler import (
    ByteConcatCombiner,
    PydubCombiner,
    assemble_podcast,
    estimate_audio_duration,
)
from models.data import (
    AudioFormat,
    Segment,
    SegmentType,
    SpeakerVoiceMapping,
    SynthesisError,
    VoiceSettings,
)


class FakeVoiceClient:
    """Records synthesize calls and returns canned audio per call."""

    def __init__(self, results):
        self.results = list(results)
        self.calls: list[dict] = []
        self.aclose = AsyncMock()

    async def synthesize(self, text, voice_id, **kwargs):
        self.calls.append({"text": text, "voice_id": voice_id, **kwargs})
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


def _segments() -> list[Segment]:
    return [
        Segment(SegmentType.INTRO, "Welcome everyone.", "Alex"),
        Segment(SegmentType.MAIN, "Glad to be here.", "SAM"),
        Segment(SegmentType.MAIN, "An announcement.", None),
        Segment(SegmentType.OUTRO, "Thanks for listening.", "Jordan"),
    ]


# 48000 bytes/s for 24 kHz 16-bit mono PCM
ONE_SECOND_PCM = b"\x00\x01" * 24000


class TestDurationEstimate:
    @pytest.mark.parametrize(
        "fmt,size,seconds",
        [
            (AudioFormat.MP3, 16384, 1.0),
            (AudioFormat.WAV, 176400, 1.0),
            (AudioFormat.PCM_24000, 48000, 1.0),
            (AudioFormat.PCM_44100, 88200, 1.0),
            ("mp3", 8192, 0.5),
        ],
    )
    def test_rates(self, fmt, size, seconds):
        assert estimate_audio_duration(b"\x00" * size, fmt) == pytest.approx(seconds)


class TestAssemblePodcast:
    def test_voice_lookup_and_timeline(self):
        client = FakeVoiceClient([ONE_SECOND_PCM] * 4)
        sam_settings = VoiceSettings(stability=0.3)
        mappings = [
            SpeakerVoiceMapping("alex", "voice-alex"),
            SpeakerVoiceMapping("Sam", "voice-sam", sam_settings),
        ]
        progress: list[float] = []
        completed: list[int] = []

        result = asyncio.run(
            assemble_podcast(
                _segments(),
                mappings,
                client=client,
                output_format="pcm_24000",
                default_voice_id="voice-default",
                on_progress=progress.append,
                on_segment_complete=lambda i, audio: completed.append(i),
            )
        )

        assert [c["voice_id"] for c in client.calls] == [
            "voice-alex",
            "voice-sam",
            "voice-default",
            "voice-default",
        ]
        assert client.calls[1]["voice_settings"] == sam_settings
        assert client.calls[0]["voice_settings"] == VoiceSettings()
        assert [s.start_time for s in result.segment_audios] == pytest.approx([0, 1, 2, 3])
        assert result.total_duration == pytest.approx(4.0)
        assert result.full_audio == ONE_SECOND_PCM * 4
        assert progress == pytest.approx([0.0, 0.225, 0.45, 0.675, 1.0])
        assert completed == [0, 1, 2, 3]
        assert result.failed_segments == []
        assert {(s.name, s.voice_id) for s in result.metadata.speakers} == {
            ("alex", "voice-alex"),
            ("sam", "voice-sam"),
        }
        assert result.metadata.format == AudioFormat.PCM_24000
        client.aclose.assert_not_awaited()

    def test_failed_segment_is_skipped(self):
        client = FakeVoiceClient(
            [ONE_SECOND_PCM, SynthesisError("gave up", attempts=3), ONE_SECOND_PCM * 2, ONE_SECOND_PCM]
        )

        result = asyncio.run(
            assemble_podcast(_segments(), [], client=client, output_format="pcm_24000")
        )

        assert result.failed_segments == [1]
        assert [s.segment.content for s in result.segment_audios] == [
            "Welcome everyone.",
            "An announcement.",
            "Thanks for listening.",
        ]
        assert [s.start_time for s in result.segment_audios] == pytest.approx([0, 1, 3])
        assert result.total_duration == pytest.approx(4.0)
        assert len(result.full_audio) == len(ONE_SECOND_PCM) * 4

    def test_assembled_timeline_diverges_from_parsed_one(self):
        segments = _segments()
        for i, segment in enumerate(segments):
            segment.start_time = i * 10.0

        client = FakeVoiceClient([ONE_SECOND_PCM] * 4)
        result = asyncio.run(assemble_podcast(segments, [], client=client, output_format="pcm_24000"))

        assembled = [s.start_time for s in result.segment_audios]
        parsed = [s.segment.start_time for s in result.segment_audios]
        assert assembled != parsed
        assert parsed == [0.0, 10.0, 20.0, 30.0]

    def test_other_errors_propagate(self):
        client = FakeVoiceClient([RuntimeError("bug")])
        with pytest.raises(RuntimeError):
            asyncio.run(assemble_podcast(_segments()[:1], [], client=client, output_format="mp3"))

    def test_forwards_synthesis_options(self):
        client = FakeVoiceClient([b"x"])
        asyncio.run(
            assemble_podcast(
                _segments()[:1],
                [],
                client=client,
                model_id="eleven_turbo_v2",
                output_format="mp3",
                optimize_latency=3,
                max_retries=5,
            )
        )
        call = client.calls[0]
        assert call["model_id"] == "eleven_turbo_v2"
        assert call["output_format"] == AudioFormat.MP3
        assert call["optimize_streaming_latency"] == 3
        assert call["max_retries"] == 5

    def test_empty_segments(self):
        client = FakeVoiceClient([])
        progress: list[float] = []
        result = asyncio.run(
            assemble_podcast([], [], client=client, output_format="mp3", on_progress=progress.append)
        )
        assert result.full_audio == b""
        assert result.total_duration == 0.0
        assert progress == [1.0]


class TestCombiners:
    def test_byte_concat(self):
        assert ByteConcatCombiner().combine([b"ab", b"cd"], AudioFormat.PCM_44100) == b"abcd"

    def test_byte_concat_container_formats(self):
        assert ByteConcatCombiner().combine([b"ID3a", b"ID3b"], AudioFormat.MP3) == b"ID3aID3b"

    def test_pydub_pcm_roundtrip_length(self):
        combined = PydubCombiner().combine([ONE_SECOND_PCM, ONE_SECOND_PCM], AudioFormat.PCM_24000)
        assert combined == ONE_SECOND_PCM * 2
