"""Shared data models used across the generation pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


# ── Enumerations ─────────────────────────────────────────────────────────────


class Category(str, Enum):
    TECH = "tech"
    COMEDY = "comedy"
    NEWS = "news"
    EDUCATION = "education"
    BUSINESS = "business"
    HEALTH = "health"
    SCIENCE = "science"
    ARTS = "arts"
    SPORTS = "sports"
    ENTERTAINMENT = "entertainment"
    HISTORY = "history"
    TRUE_CRIME = "true crime"
    FICTION = "fiction"
    POLITICS = "politics"
    PHILOSOPHY = "philosophy"
    SELF_IMPROVEMENT = "self-improvement"
    INTERVIEW = "interview"


class Tone(str, Enum):
    CASUAL = "casual"
    PROFESSIONAL = "professional"
    HUMOROUS = "humorous"
    SERIOUS = "serious"
    EDUCATIONAL = "educational"
    INSPIRATIONAL = "inspirational"
    CONVERSATIONAL = "conversational"
    DRAMATIC = "dramatic"
    INVESTIGATIVE = "investigative"


class SegmentType(str, Enum):
    INTRO = "intro"
    MAIN = "main"
    AD = "ad"
    TRANSITION = "transition"
    OUTRO = "outro"


class AudioFormat(str, Enum):
    MP3 = "mp3"
    WAV = "wav"
    PCM_24000 = "pcm_24000"
    PCM_44100 = "pcm_44100"


DEFAULT_LLM_MODEL = "meta-llama/llama-3-8b-instruct"
DEFAULT_TTS_MODEL = "eleven_multilingual_v2"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(moment: datetime) -> datetime:
    """Timestamps without a timezone are taken to be UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


# ── Errors ───────────────────────────────────────────────────────────────────


class PodcastPipelineError(Exception):
    """Base class for pipeline failures."""


class RetryExhaustedError(PodcastPipelineError):
    """An external call failed on every allowed attempt."""

    def __init__(self, message: str, attempts: int = 0, last_error: Exception | None = None):
        super().__init__(message)
        self.attempts = attempts
        self.last_error = last_error


class GenerationError(RetryExhaustedError):
    """The LLM endpoint failed on every retry attempt."""


class SynthesisError(RetryExhaustedError):
    """The text-to-speech endpoint failed on every retry attempt."""


class StorageUnavailableError(PodcastPipelineError):
    """The backing store is not present in this environment."""


# ── Script Models ────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ScriptGenerationRequest:
    """Everything the LLM needs to write one episode."""

    category: Category
    length_minutes: float
    tone: Tone
    title: str | None = None
    additional_context: str = ""
    model: str = DEFAULT_LLM_MODEL
    host_names: tuple[str, ...] = ("Host",)
    guest_names: tuple[str, ...] = ()
    include_intro: bool = True
    include_outro: bool = True
    include_ads: bool = False
    target_audience: str = "general audience"
    max_retries: int = 3

    def __post_init__(self) -> None:
        if self.length_minutes <= 0:
            raise ValueError("length_minutes must be positive")
        if not self.host_names:
            raise ValueError("at least one host name is required")
        # lists from callers are stored as tuples
        object.__setattr__(self, "host_names", tuple(self.host_names))
        object.__setattr__(self, "guest_names", tuple(self.guest_names))
        object.__setattr__(self, "category", Category(self.category))
        object.__setattr__(self, "tone", Tone(self.tone))

    @property
    def speaker_names(self) -> tuple[str, ...]:
        return self.host_names + self.guest_names


@dataclass
class Segment:
    """A contiguous span of script spoken by one speaker."""

    type: SegmentType
    content: str
    speaker: str | None = None
    duration_estimate: float = 0.0  # minutes
    start_time: float = 0.0  # minutes


@dataclass(frozen=True)
class ScriptMetadata:
    category: Category
    tone: Tone
    model: str
    word_count: int
    generated_at: str


@dataclass(frozen=True)
class ScriptResult:
    """A parsed LLM completion."""

    title: str
    script: str
    summary: str
    duration_estimate: float  # minutes
    segments: list[Segment]
    metadata: ScriptMetadata


# ── Voice / Audio Models ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class VoiceSettings:
    """ElevenLabs voice tuning values."""

    stability: float = 0.5
    similarity_boost: float = 0.75
    style: float = 0.0
    use_speaker_boost: bool = True

    def __post_init__(self) -> None:
        for name in ("stability", "similarity_boost", "style"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be within [0, 1], got {value}")

    def to_payload(self) -> dict:
        return {
            "stability": self.stability,
            "similarity_boost": self.similarity_boost,
            "style": self.style,
            "use_speaker_boost": self.use_speaker_boost,
        }


@dataclass(frozen=True)
class SpeakerVoiceMapping:
    speaker_name: str
    voice_id: str
    voice_settings: VoiceSettings | None = None


@dataclass
class SegmentAudio:
    segment: Segment
    audio: bytes
    duration: float  # seconds
    start_time: float  # seconds


@dataclass(frozen=True)
class SpeakerAssignment:
    name: str
    voice_id: str


@dataclass(frozen=True)
class AudioMetadata:
    format: AudioFormat
    model: str
    generated_at: str
    speakers: list[SpeakerAssignment] = field(default_factory=list)


@dataclass
class AudioAssemblyResult:
    """Concatenated episode audio plus the reconstructed segment timeline."""

    full_audio: bytes
    segment_audios: list[SegmentAudio]
    total_duration: float  # seconds
    metadata: AudioMetadata
    failed_segments: list[int] = field(default_factory=list)
