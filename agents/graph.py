"""LangGraph state machine running the end-to-end podcast pipeline."""

from __future__ import annotations

import asyncio
import random
from typing import Any, Awaitable, Callable, TypedDict

from langgraph.graph import END, StateGraph

from agents.script_generator import generate_script
from audio.assembler import AudioCombiner, assemble_podcast
from catalog.podcasts import categorize_podcast, create_podcast_from_generated, update_podcast
from models.catalog import Podcast
from models.data import (
    AudioAssemblyResult,
    ScriptGenerationRequest,
    ScriptResult,
    SpeakerVoiceMapping,
)
from storage.provider import StorageProvider
from tts.client import VoiceSynthesisClient, generate_audio_filename
from tts.voice_config import map_speakers_to_voices
from utils.helpers import get_logger

log = get_logger(__name__)


# ── Graph State ──────────────────────────────────────────────────────────────


class GraphState(TypedDict):
    """State shared between all nodes in the pipeline graph."""

    request: ScriptGenerationRequest
    speaker_voices: list[SpeakerVoiceMapping]
    script: ScriptResult | None
    audio: AudioAssemblyResult | None
    podcast: Podcast | None
    errors: list[str]


def should_continue(state: GraphState) -> str:
    """Abort when the script produced nothing to synthesize."""
    script = state.get("script")
    if script is None or not script.segments:
        return "abort"
    return "continue"


# ── Build Graph ──────────────────────────────────────────────────────────────


def build_pipeline(
    storage: StorageProvider,
    voice_client: VoiceSynthesisClient | None = None,
    combiner: AudioCombiner | None = None,
    tags: list[str] | None = None,
    is_private: bool = True,
    rng: random.Random | None = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> StateGraph:
    """Build the pipeline graph: script → audio → podcast record → storage.

    Node collaborators are bound here so the compiled graph only carries
    data in its state.
    """

    async def node_generate_script(state: GraphState) -> dict[str, Any]:
        """Node 1: Generate and parse the script. GenerationError propagates."""
        script = await generate_script(state["request"], sleep=sleep)
        if not script.segments:
            log.error("Script '%s' contains no speaker segments", script.title)
            return {
                "script": script,
                "errors": state.get("errors", []) + ["Script generation: no segments parsed"],
            }
        return {"script": script}

    async def node_synthesize(state: GraphState) -> dict[str, Any]:
        """Node 2: Voice every segment and stitch the audio."""
        request = state["request"]
        speaker_voices = state.get("speaker_voices") or map_speakers_to_voices(
            list(request.speaker_names)
        )
        audio = await assemble_podcast(
            state["script"].segments,
            speaker_voices,
            client=voice_client,
            combiner=combiner,
        )
        errors = state.get("errors", [])
        if audio.failed_segments:
            errors = errors + [f"Audio synthesis: segments {audio.failed_segments} skipped"]
        return {"audio": audio, "errors": errors}

    async def node_build_podcast(state: GraphState) -> dict[str, Any]:
        """Node 3: Build the catalog record and attach content analysis."""
        script = state["script"]
        podcast = create_podcast_from_generated(
            script,
            state["audio"],
            tags=tags,
            is_private=is_private,
        )
        podcast = categorize_podcast(podcast, script.script, rng=rng)
        return {"podcast": podcast}

    async def node_persist(state: GraphState) -> dict[str, Any]:
        """Node 4: Store the audio blob and the podcast record."""
        podcast = state["podcast"]
        audio = state["audio"]

        if audio.full_audio:
            audio_id = generate_audio_filename(extension=audio.metadata.format.value)
            await storage.save_audio(audio_id, audio.full_audio)
            podcast = update_podcast(podcast, {"audio_id": audio_id})
        else:
            log.warning("No audio produced for podcast %s", podcast.id)

        await storage.save_podcast(podcast)
        log.info("Stored podcast %s ('%s')", podcast.id, podcast.title)
        return {"podcast": podcast}

    workflow = StateGraph(GraphState)

    workflow.add_node("generate_script", node_generate_script)
    workflow.add_node("synthesize", node_synthesize)
    workflow.add_node("build_podcast", node_build_podcast)
    workflow.add_node("persist", node_persist)

    workflow.set_entry_point("generate_script")

    workflow.add_conditional_edges(
        "generate_script",
        should_continue,
        {
            "continue": "synthesize",
            "abort": END,
        },
    )

    workflow.add_edge("synthesize", "build_podcast")
    workflow.add_edge("build_podcast", "persist")
    workflow.add_edge("persist", END)

    return workflow


async def run_pipeline(
    request: ScriptGenerationRequest,
    storage: StorageProvider,
    speaker_voices: list[SpeakerVoiceMapping] | None = None,
    **pipeline_options: Any,
) -> GraphState:
    """Run the full pipeline and return the final state.

    Args:
        request: Episode preferences.
        storage: Where the audio and podcast record are saved.
        speaker_voices: Explicit speaker → voice mapping. Recommended
            voices are assigned when omitted.
        **pipeline_options: Forwarded to ``build_pipeline``.

    Returns:
        Final GraphState. ``podcast`` is None when the run aborted.

    Raises:
        GenerationError: the LLM endpoint failed on every attempt.
    """
    log.info("Starting podcast pipeline: %s / %s", request.category.value, request.tone.value)

    app = build_pipeline(storage, **pipeline_options).compile()

    initial_state: GraphState = {
        "request": request,
        "speaker_voices": list(speaker_voices or []),
        "script": None,
        "audio": None,
        "podcast": None,
        "errors": [],
    }

    result = await app.ainvoke(initial_state)

    errors = result.get("errors", [])
    if errors:
        log.warning("Pipeline completed with %d warnings: %s", len(errors), errors)
    else:
        log.info("Pipeline completed successfully")

    return result
