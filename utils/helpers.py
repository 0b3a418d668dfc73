"""Shared helpers: logging, prompt token counting and storage file I/O."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import tiktoken

from config.settings import settings

LOG_FORMAT = "%(asctime)s | %(name)-20s | %(levelname)-7s | %(message)s"
FALLBACK_ENCODING = "cl100k_base"


def get_logger(name: str) -> logging.Logger:
    """Return a stdout logger at ``settings.log_level``."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(settings.log_level.upper())
    return logger


def count_tokens(text: str, model: str | None = None) -> int:
    """Approximate the token count of ``text`` for ``model``.

    Routed names like ``openrouter/meta-llama/llama-3-8b-instruct`` are
    looked up by their last path part; models tiktoken does not know
    fall back to cl100k_base.
    """
    name = (model or settings.llm_model).rsplit("/", 1)[-1]
    try:
        enc = tiktoken.encoding_for_model(name)
    except KeyError:
        enc = tiktoken.get_encoding(FALLBACK_ENCODING)
    return len(enc.encode(text))


def write_file(path: Path | str, data: str | bytes) -> Path:
    """Write UTF-8 text or raw bytes, creating parent dirs."""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(data, bytes):
        p.write_bytes(data)
    else:
        p.write_text(data, encoding="utf-8")
    return p


def read_text(path: Path | str) -> str:
    return Path(path).read_text(encoding="utf-8")


def read_bytes(path: Path | str) -> bytes | None:
    """Read a binary file, or ``None`` if it does not exist."""
    p = Path(path)
    if not p.is_file():
        return None
    return p.read_bytes()
