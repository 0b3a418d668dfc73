"""Audio assembler: synthesize script segments and merge them into one episode."""

from __future__ import annotations

import io
from abc import ABC, abstractmethod
from typing import Callable

from pydub import AudioSegment

from config.settings import settings
from models.data import (
    AudioAssemblyResult,
    AudioFormat,
    AudioMetadata,
    Segment,
    SegmentAudio,
    SpeakerAssignment,
    SpeakerVoiceMapping,
    SynthesisError,
    VoiceSettings,
    utcnow,
)
from tts.client import VoiceSynthesisClient
from tts.voice_config import DEFAULT_VOICE_SETTINGS
from utils.helpers import get_logger

log = get_logger(__name__)

# Assumed stream rates; durations are estimated from byte length, not decoded.
_BYTES_PER_SECOND: dict[AudioFormat, float] = {
    AudioFormat.MP3: 128 * 1024 / 8,  # 128 kbps
    AudioFormat.WAV: 44100 * 2 * 2,  # 16-bit stereo @ 44.1 kHz
    AudioFormat.PCM_24000: 24000 * 2,  # 16-bit mono
    AudioFormat.PCM_44100: 44100 * 2,  # 16-bit mono
}

_PCM_SAMPLE_RATES: dict[AudioFormat, int] = {
    AudioFormat.PCM_24000: 24000,
    AudioFormat.PCM_44100: 44100,
}


def estimate_audio_duration(audio: bytes, output_format: AudioFormat | str) -> float:
    """Rough duration in seconds from buffer size and the format's nominal rate."""
    return len(audio) / _BYTES_PER_SECOND[AudioFormat(output_format)]


# ── Combiners ────────────────────────────────────────────────────────────────


class AudioCombiner(ABC):
    """Joins per-segment buffers into a single track."""

    @abstractmethod
    def combine(self, buffers: list[bytes], output_format: AudioFormat) -> bytes:
        ...


class ByteConcatCombiner(AudioCombiner):
    """Plain byte concatenation.

    Correct for headerless PCM. For mp3/wav the result keeps every
    segment's container header inline; use PydubCombiner for those.
    """

    def combine(self, buffers: list[bytes], output_format: AudioFormat) -> bytes:
        if output_format not in _PCM_SAMPLE_RATES and len(buffers) > 1:
            log.warning(
                "Byte-concatenating %d %s buffers; the result is not a well-formed container",
                len(buffers),
                output_format.value,
            )
        return b"".join(buffers)


class PydubCombiner(AudioCombiner):
    """Decode each buffer with pydub/ffmpeg and re-encode one continuous track."""

    def __init__(self, mp3_bitrate: str = "128k"):
        self.mp3_bitrate = mp3_bitrate

    def _decode(self, buffer: bytes, output_format: AudioFormat) -> AudioSegment:
        if output_format in _PCM_SAMPLE_RATES:
            return AudioSegment(
                data=buffer,
                sample_width=2,
                frame_rate=_PCM_SAMPLE_RATES[output_format],
                channels=1,
            )
        return AudioSegment.from_file(io.BytesIO(buffer), format=output_format.value)

    def combine(self, buffers: list[bytes], output_format: AudioFormat) -> bytes:
        track = AudioSegment.empty()
        for buffer in buffers:
            track += self._decode(buffer, output_format)

        if output_format in _PCM_SAMPLE_RATES:
            return track.raw_data

        out = io.BytesIO()
        if output_format == AudioFormat.MP3:
            track.export(out, format="mp3", bitrate=self.mp3_bitrate)
        else:
            track.export(out, format="wav")
        return out.getvalue()


# ── Assembly ─────────────────────────────────────────────────────────────────


async def assemble_podcast(
    segments: list[Segment],
    speaker_voices: list[SpeakerVoiceMapping],
    client: VoiceSynthesisClient | None = None,
    model_id: str | None = None,
    output_format: AudioFormat | str | None = None,
    optimize_latency: int = 0,
    max_retries: int | None = None,
    default_voice_id: str | None = None,
    on_progress: Callable[[float], None] | None = None,
    on_segment_complete: Callable[[int, bytes], None] | None = None,
    combiner: AudioCombiner | None = None,
) -> AudioAssemblyResult:
    """Synthesize every segment in order and stitch the results together.

    Segments are processed one at a time. A segment whose synthesis
    exhausts its retries is logged and skipped: it gets no audio and no
    timeline entry, and later segments start where the last good one
    ended.

    Args:
        segments: Parsed script segments.
        speaker_voices: Speaker name → voice id (names match case-insensitively).
        client: TTS client; a temporary one is created and closed if omitted.
        model_id: TTS model id. Defaults from settings.
        output_format: Audio format for every segment. Defaults from settings.
        default_voice_id: Voice for unmapped or speakerless segments.
        on_progress: Called with overall progress in [0, 1].
        on_segment_complete: Called with (segment index, audio bytes).
        combiner: How buffers are merged. Defaults to ByteConcatCombiner.

    Returns:
        AudioAssemblyResult with full audio and a reconstructed timeline (seconds).
    """
    model_id = model_id or settings.tts_model
    fmt = AudioFormat(output_format or settings.tts_output_format)
    default_voice_id = default_voice_id or settings.tts_default_voice_id
    combiner = combiner or ByteConcatCombiner()

    voice_map: dict[str, str] = {}
    settings_map: dict[str, VoiceSettings] = {}
    for mapping in speaker_voices:
        voice_map[mapping.speaker_name.lower()] = mapping.voice_id
        if mapping.voice_settings is not None:
            settings_map[mapping.voice_id] = mapping.voice_settings

    owned_client = client is None
    client = client or VoiceSynthesisClient()

    total = len(segments)
    log.info("Assembling %d segments (%s, %s)", total, model_id, fmt.value)

    segment_audios: list[SegmentAudio] = []
    failed: list[int] = []
    current_start = 0.0

    try:
        for i, segment in enumerate(segments):
            voice_id = voice_map.get((segment.speaker or "").lower(), default_voice_id)
            voice_settings = settings_map.get(voice_id, DEFAULT_VOICE_SETTINGS)

            if on_progress:
                on_progress(i / total * 0.9)

            try:
                audio = await client.synthesize(
                    segment.content,
                    voice_id,
                    voice_settings=voice_settings,
                    model_id=model_id,
                    output_format=fmt,
                    optimize_streaming_latency=optimize_latency,
                    max_retries=max_retries,
                )
            except SynthesisError as exc:
                log.error("Skipping segment %d (%s): %s", i, segment.speaker or "no speaker", exc)
                failed.append(i)
                continue

            duration = estimate_audio_duration(audio, fmt)
            segment_audios.append(
                SegmentAudio(segment=segment, audio=audio, duration=duration, start_time=current_start)
            )
            current_start += duration

            if on_segment_complete:
                on_segment_complete(i, audio)
    finally:
        if owned_client:
            await client.aclose()

    full_audio = combiner.combine([s.audio for s in segment_audios], fmt)

    if on_progress:
        on_progress(1.0)

    if failed:
        log.warning("%d of %d segments failed and were skipped", len(failed), total)
    log.info(
        "Podcast audio assembled: %d bytes, ~%.1f seconds",
        len(full_audio),
        current_start,
    )

    return AudioAssemblyResult(
        full_audio=full_audio,
        segment_audios=segment_audios,
        total_duration=current_start,
        metadata=AudioMetadata(
            format=fmt,
            model=model_id,
            generated_at=utcnow().isoformat(),
            speakers=[SpeakerAssignment(name=n, voice_id=v) for n, v in voice_map.items()],
        ),
        failed_segments=failed,
    )
