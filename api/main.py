"""FastAPI application entry point."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import router
from config.settings import settings
from utils.helpers import get_logger

log = get_logger(__name__)

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup/shutdown lifecycle."""
    log.info("podcast-maker starting up")
    log.info("LLM model: %s", settings.llm_model)
    log.info("TTS model: %s (%s)", settings.tts_model, settings.tts_output_format)
    log.info("Storage dir: %s", settings.storage_dir)
    if not settings.llm_api_key:
        log.warning("LLM_API_KEY is not set; script generation will fail")
    if not settings.tts_api_key:
        log.warning("TTS_API_KEY is not set; audio synthesis will fail")

    yield

    log.info("podcast-maker shutting down")


app = FastAPI(
    title="podcast-maker",
    description="AI podcast generation: scripts, multi-voice audio and a searchable catalog",
    version=VERSION,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router, prefix="/api/v1", tags=["podcasts"])


# Health check
@app.get("/health")
async def health():
    return {"status": "ok", "version": VERSION}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True,
    )
