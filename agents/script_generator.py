"""Script generation: podcast preferences → LLM completion → parsed script."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable

import httpx
import litellm

from agents.prompts import (
    CATEGORY_DESCRIPTIONS,
    SCRIPT_GENERATOR_SYSTEM,
    TONE_DESCRIPTIONS,
    build_prompt,
    calculate_max_tokens,
)
from agents.script_parser import parse_script_response
from config.settings import settings
from models.data import GenerationError, ScriptGenerationRequest, ScriptResult
from utils.helpers import count_tokens, get_logger
from utils.retry import retry_async

log = get_logger(__name__)

FALLBACK_FREE_MODELS = [
    {"id": "meta-llama/llama-3-8b-instruct", "name": "Llama 3 (8B)"},
    {"id": "mistralai/mistral-7b-instruct", "name": "Mistral (7B)"},
    {"id": "google/gemma-7b-it", "name": "Gemma (7B)"},
]


def _litellm_model(model: str) -> str:
    """Route bare OpenRouter model ids through LiteLLM's openrouter provider."""
    return model if model.startswith("openrouter/") else f"openrouter/{model}"


def _openrouter_headers() -> dict[str, str]:
    return {
        "HTTP-Referer": settings.llm_site_url,
        "X-Title": settings.llm_app_title,
    }


async def generate_script(
    request: ScriptGenerationRequest,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> ScriptResult:
    """Generate and parse a podcast script.

    Raises:
        GenerationError: every attempt against the LLM endpoint failed.
    """
    prompt = build_prompt(request)
    max_tokens = calculate_max_tokens(request.length_minutes)
    log.info(
        "Generating %s/%s script (%g min) with %s: prompt %d tokens, budget %d",
        request.category.value,
        request.tone.value,
        request.length_minutes,
        request.model,
        count_tokens(prompt, request.model),
        max_tokens,
    )

    async def attempt(_: int) -> str:
        response = await litellm.acompletion(
            model=_litellm_model(request.model),
            messages=[
                {"role": "system", "content": SCRIPT_GENERATOR_SYSTEM},
                {"role": "user", "content": prompt},
            ],
            temperature=settings.llm_temperature,
            max_tokens=max_tokens,
            api_key=settings.llm_api_key or None,
            api_base=settings.llm_api_base,
            extra_headers=_openrouter_headers(),
        )
        content = response.choices[0].message.content
        if not content or not content.strip():
            raise ValueError("LLM returned empty script content")
        return content

    content = await retry_async(
        attempt,
        max_retries=request.max_retries,
        error_cls=GenerationError,
        describe="generate podcast script",
        sleep=sleep,
    )
    log.info("Script generated: %d characters", len(content))
    return parse_script_response(content, request)


async def list_free_models(client: httpx.AsyncClient | None = None) -> list[dict[str, str]]:
    """Models with zero prompt and completion pricing.

    Falls back to a fixed list when the models endpoint is unreachable.
    """
    headers = {
        "Authorization": f"Bearer {settings.llm_api_key}",
        **_openrouter_headers(),
    }
    try:
        if client is None:
            async with httpx.AsyncClient(timeout=30) as owned:
                resp = await owned.get(f"{settings.llm_api_base}/models", headers=headers)
        else:
            resp = await client.get(f"{settings.llm_api_base}/models", headers=headers)
        resp.raise_for_status()
        models = resp.json()["data"]
        return [
            {"id": m["id"], "name": m.get("name") or m["id"]}
            for m in models
            if float(m["pricing"]["prompt"]) == 0 and float(m["pricing"]["completion"]) == 0
        ]
    except Exception as exc:
        log.warning("Failed to fetch available models (%s), using fallback list", exc)
        return [dict(m) for m in FALLBACK_FREE_MODELS]


def get_podcast_categories() -> list[dict[str, str]]:
    return [
        {"id": c.value, "name": c.value[:1].upper() + c.value[1:], "description": d}
        for c, d in CATEGORY_DESCRIPTIONS.items()
    ]


def get_podcast_tones() -> list[dict[str, str]]:
    return [
        {"id": t.value, "name": t.value.capitalize(), "description": d}
        for t, d in TONE_DESCRIPTIONS.items()
    ]
