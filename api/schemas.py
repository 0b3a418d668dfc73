"""Pydantic request/response schemas for the API."""

from __future__ import annotations

from pydantic import BaseModel, Field

from models.catalog import Podcast
from models.data import (
    DEFAULT_LLM_MODEL,
    Category,
    ScriptGenerationRequest,
    ScriptResult,
    SegmentType,
    SpeakerVoiceMapping,
    Tone,
    VoiceSettings,
)


# ── Requests ─────────────────────────────────────────────────────────────────


class ScriptRequest(BaseModel):
    """Episode preferences for script generation."""

    category: Category
    length_minutes: float = Field(..., gt=0, description="Target episode length in minutes")
    tone: Tone
    title: str | None = Field(None, description="Optional title override")
    additional_context: str = ""
    model: str = DEFAULT_LLM_MODEL
    host_names: list[str] = Field(default_factory=lambda: ["Host"], min_length=1)
    guest_names: list[str] = Field(default_factory=list)
    include_intro: bool = True
    include_outro: bool = True
    include_ads: bool = False
    target_audience: str = "general audience"
    max_retries: int = Field(3, ge=1)

    def to_request(self) -> ScriptGenerationRequest:
        return ScriptGenerationRequest(**self.model_dump())


class VoiceSettingsInput(BaseModel):
    stability: float = Field(0.5, ge=0, le=1)
    similarity_boost: float = Field(0.75, ge=0, le=1)
    style: float = Field(0.0, ge=0, le=1)
    use_speaker_boost: bool = True


class SpeakerVoiceInput(BaseModel):
    speaker_name: str
    voice_id: str
    voice_settings: VoiceSettingsInput | None = None

    def to_mapping(self) -> SpeakerVoiceMapping:
        voice_settings = (
            VoiceSettings(**self.voice_settings.model_dump()) if self.voice_settings else None
        )
        return SpeakerVoiceMapping(self.speaker_name, self.voice_id, voice_settings)


class PodcastRequest(ScriptRequest):
    """Full pipeline request: script preferences plus voice and catalog options."""

    speaker_voices: list[SpeakerVoiceInput] = Field(
        default_factory=list,
        description="Speaker → voice assignments; recommended voices are used when empty",
    )
    tags: list[str] = Field(default_factory=list)
    is_private: bool = True

    def to_request(self) -> ScriptGenerationRequest:
        data = self.model_dump(exclude={"speaker_voices", "tags", "is_private"})
        return ScriptGenerationRequest(**data)


class PlayRequest(BaseModel):
    listen_seconds: float = Field(..., ge=0)


class PlaylistCreateRequest(BaseModel):
    name: str
    description: str = ""
    creator_id: str
    podcast_ids: list[str] = Field(default_factory=list)
    is_public: bool = False
    tags: list[str] = Field(default_factory=list)
    category: str | None = None
    cover_image_url: str | None = None


class PlaylistItemRequest(BaseModel):
    podcast_id: str


class MoodPlaylistRequest(BaseModel):
    creator_id: str = "system"


# ── Responses ────────────────────────────────────────────────────────────────


class SegmentResponse(BaseModel):
    type: SegmentType
    content: str
    speaker: str | None = None
    duration_estimate: float
    start_time: float


class ScriptResponse(BaseModel):
    """A generated, parsed script."""

    title: str
    summary: str
    script: str
    duration_estimate: float
    word_count: int
    model: str
    segments: list[SegmentResponse]

    @classmethod
    def from_result(cls, result: ScriptResult) -> "ScriptResponse":
        return cls(
            title=result.title,
            summary=result.summary,
            script=result.script,
            duration_estimate=result.duration_estimate,
            word_count=result.metadata.word_count,
            model=result.metadata.model,
            segments=[
                SegmentResponse(
                    type=s.type,
                    content=s.content,
                    speaker=s.speaker,
                    duration_estimate=s.duration_estimate,
                    start_time=s.start_time,
                )
                for s in result.segments
            ],
        )


class PodcastResponse(BaseModel):
    """Outcome of a full pipeline run."""

    podcast: Podcast | None = None
    script: ScriptResponse | None = None
    failed_segments: list[int] = []
    errors: list[str] = []


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str
    errors: list[str] = []
