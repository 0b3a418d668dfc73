"""Parse a free-text LLM completion into a titled, segmented script."""

from __future__ import annotations

import re

from agents.prompts import WORDS_PER_MINUTE
from models.data import (
    ScriptGenerationRequest,
    ScriptMetadata,
    ScriptResult,
    Segment,
    SegmentType,
    utcnow,
)
from utils.helpers import get_logger

log = get_logger(__name__)

_TITLE_PATTERN = re.compile(r"Title:\s*(.+?)(?:\n|$)", re.IGNORECASE)
_SUMMARY_PATTERN = re.compile(
    r"Summary:\s*(.+?)(?:\n\n|\n(?=[A-Za-z]+:))",
    re.IGNORECASE | re.DOTALL,
)
_SCRIPT_PATTERN = re.compile(r"(?:Full Script|Script):\s*(.+)", re.IGNORECASE | re.DOTALL)


def estimate_duration(text: str) -> float:
    """Speaking time in minutes at 150 words per minute."""
    return len(text.split()) / WORDS_PER_MINUTE


def default_title(request: ScriptGenerationRequest) -> str:
    category = request.category.value
    return f"{category[:1].upper()}{category[1:]} Podcast"


def _names_alternation(names: tuple[str, ...]) -> str:
    return "|".join(re.escape(name) for name in names if name)


def _extract_intro(script: str, request: ScriptGenerationRequest) -> tuple[Segment | None, int]:
    """First paragraph attributed to a host, and where it ends in ``script``."""
    names = _names_alternation(request.host_names)
    if not names:
        return None, 0

    pattern = re.compile(rf"({names})[:\s]+(.*?)(?=\n\n|\Z)", re.IGNORECASE | re.DOTALL)
    match = pattern.search(script)
    if not match:
        log.debug("No host-attributed intro paragraph found")
        return None, 0

    content = match.group(2).strip()
    segment = Segment(
        type=SegmentType.INTRO,
        content=content,
        speaker=match.group(1).strip(),
        duration_estimate=estimate_duration(content),
        start_time=0.0,
    )
    return segment, match.end()


def _extract_turns(text: str, request: ScriptGenerationRequest) -> list[tuple[str, str]]:
    """Split ``text`` on "<Speaker>: " markers into (speaker, content) turns."""
    names = _names_alternation(request.speaker_names)
    if not names:
        return []

    markers = list(re.finditer(rf"({names}):\s+", text))
    turns: list[tuple[str, str]] = []
    for i, match in enumerate(markers):
        end = markers[i + 1].start() if i + 1 < len(markers) else len(text)
        content = text[match.end():end].strip()
        if content:
            turns.append((match.group(1), content))
    return turns


def parse_script_response(raw_text: str, request: ScriptGenerationRequest) -> ScriptResult:
    """Turn a raw completion into a ScriptResult.

    Never raises on malformed input: a missing title falls back to the
    request title or "<Category> Podcast", a missing summary to "", and a
    missing script marker to the whole completion.
    """
    raw_text = raw_text or ""

    title_match = _TITLE_PATTERN.search(raw_text)
    if title_match:
        title = title_match.group(1).strip()
    else:
        title = request.title or default_title(request)
        log.debug("No 'Title:' line, using fallback title %r", title)

    summary_match = _SUMMARY_PATTERN.search(raw_text)
    summary = summary_match.group(1).strip() if summary_match else ""

    script_match = _SCRIPT_PATTERN.search(raw_text)
    if script_match:
        script = script_match.group(1).strip()
    else:
        log.debug("No script marker, treating the whole completion as the script")
        script = raw_text

    segments: list[Segment] = []
    remainder = script

    if request.include_intro:
        intro, intro_end = _extract_intro(script, request)
        if intro is not None:
            segments.append(intro)
            remainder = script[intro_end:]

    current_time = segments[0].duration_estimate if segments else 0.0

    for speaker, content in _extract_turns(remainder, request):
        duration = estimate_duration(content)
        segments.append(
            Segment(
                type=SegmentType.MAIN,
                content=content,
                speaker=speaker,
                duration_estimate=duration,
                start_time=current_time,
            )
        )
        current_time += duration

    if request.include_outro and segments:
        last = segments[-1]
        if last.type != SegmentType.OUTRO and "thank" in last.content.lower():
            last.type = SegmentType.OUTRO

    word_count = len(raw_text.split())

    log.info(
        "Parsed script %r: %d segments, %d words, ~%.1f min",
        title,
        len(segments),
        word_count,
        current_time,
    )

    return ScriptResult(
        title=title,
        script=script,
        summary=summary,
        duration_estimate=current_time,
        segments=segments,
        metadata=ScriptMetadata(
            category=request.category,
            tone=request.tone,
            model=request.model,
            word_count=word_count,
            generated_at=utcnow().isoformat(),
        ),
    )
