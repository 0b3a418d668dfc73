"""Application settings loaded from environment variables / .env file."""

from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── LLM (OpenRouter via LiteLLM) ─────────────────────────────────────
    llm_model: str = "openrouter/meta-llama/llama-3-8b-instruct"
    llm_api_key: str = ""
    llm_api_base: str = "https://openrouter.ai/api/v1"
    llm_temperature: float = 0.7
    llm_max_retries: int = 3
    llm_site_url: str = "https://podcast-maker.app"
    llm_app_title: str = "Podcast Maker App"

    # ── Text-to-speech (ElevenLabs) ──────────────────────────────────────
    tts_api_key: str = ""
    tts_api_base: str = "https://api.elevenlabs.io/v1"
    tts_model: str = "eleven_multilingual_v2"
    tts_output_format: str = "mp3"
    tts_default_voice_id: str = "pNInz6obpgDQGcFmaJgB"
    tts_max_retries: int = 3
    tts_timeout_seconds: float = 60.0

    # ── Storage ──────────────────────────────────────────────────────────
    storage_dir: str = "./data/storage"

    # ── API ──────────────────────────────────────────────────────────────
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # ── Logging ──────────────────────────────────────────────────────────
    log_level: str = "INFO"

    # ── Derived paths ────────────────────────────────────────────────────
    @property
    def storage_path(self) -> Path:
        p = Path(self.storage_dir)
        p.mkdir(parents=True, exist_ok=True)
        return p


settings = Settings()
