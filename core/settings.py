"""Runtime settings for the sentiment service, hydrated from the environment."""

from __future__ import annotations

import os
import threading
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field


_SETTINGS_CACHE: "Settings | None" = None
_SETTINGS_SIGNATURE: tuple[tuple[str, str | None], ...] | None = None
_CACHE_LOCK = threading.Lock()

_FALSEY = {"0", "false", "no", "off", "f", "n", ""}
_TRUEY = {"1", "true", "yes", "on", "t", "y"}

DEFAULT_HF_MODEL = "mrm8488/distilroberta-finetuned-financial-news-sentiment-analysis"
DEFAULT_SUBREDDITS = ("stocks", "wallstreetbets", "investing")

Backend = Literal["hf", "rule"]


def parse_bool(value: object | None, default: bool = False) -> bool:
    """Coerce user-provided strings and booleans into a boolean."""

    if value is None:
        return default
    if isinstance(value, bool):
        return value
    text = str(value).strip()
    if not text:
        return False
    lowered = text.lower()
    if lowered in _TRUEY:
        return True
    if lowered in _FALSEY:
        return False
    return default


def _coerce_int(value: object | None, default: int) -> int:
    if value is None:
        return default
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return default


def _coerce_float(value: object | None, default: float) -> float:
    if value is None:
        return default
    try:
        return float(str(value).strip())
    except (TypeError, ValueError):
        return default


def _split_csv(value: str | None, default: tuple[str, ...]) -> tuple[str, ...]:
    if not value:
        return default
    parts = tuple(part.strip() for part in value.split(",") if part.strip())
    return parts or default


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    reddit_client_id: str = Field(default="")
    reddit_client_secret: str = Field(default="")
    reddit_user_agent: str = Field(default="ticker-sentiment/1.0")
    reddit_token_cache: bool = Field(default=False)
    subreddits: tuple[str, ...] = Field(default=DEFAULT_SUBREDDITS)
    search_limit: int = Field(default=15)
    hf_token: str = Field(default="")
    hf_model: str = Field(default=DEFAULT_HF_MODEL)
    sentiment_backend: Backend = Field(default="hf")
    finnhub_key: str = Field(default="")
    cache_ttl_sec: float = Field(default=300.0)
    scoring_interval_ms: int = Field(default=100)
    http_timeout_sec: float = Field(default=10.0)
    port: int = Field(default=5000)
    log_path: str = Field(default="logs/sentiment.log")

    @property
    def reddit_configured(self) -> bool:
        return bool(self.reddit_client_id and self.reddit_client_secret)


_SIGNATURE_KEYS = (
    "REDDIT_CLIENT_ID",
    "REDDIT_CLIENT_SECRET",
    "REDDIT_USER_AGENT",
    "REDDIT_TOKEN_CACHE",
    "REDDIT_SUBREDDITS",
    "REDDIT_SEARCH_LIMIT",
    "HF_TOKEN",
    "HF_MODEL",
    "SENTIMENT_BACKEND",
    "FINNHUB_KEY",
    "SENTIMENT_CACHE_TTL_SEC",
    "SCORING_INTERVAL_MS",
    "HTTP_TIMEOUT_SEC",
    "PORT",
    "LOG_PATH",
)


def _env_signature() -> tuple[tuple[str, str | None], ...]:
    return tuple((name, os.getenv(name)) for name in _SIGNATURE_KEYS)


def _build_settings() -> Settings:
    """Internal helper to hydrate :class:`Settings` from the environment."""

    load_dotenv(override=False)

    backend = os.getenv("SENTIMENT_BACKEND", "hf").strip().lower()
    if backend not in {"hf", "rule"}:
        backend = "hf"

    return Settings(
        reddit_client_id=os.getenv("REDDIT_CLIENT_ID", "").strip(),
        reddit_client_secret=os.getenv("REDDIT_CLIENT_SECRET", "").strip(),
        reddit_user_agent=os.getenv("REDDIT_USER_AGENT", "").strip() or "ticker-sentiment/1.0",
        reddit_token_cache=parse_bool(os.getenv("REDDIT_TOKEN_CACHE"), default=False),
        subreddits=_split_csv(os.getenv("REDDIT_SUBREDDITS"), DEFAULT_SUBREDDITS),
        search_limit=max(1, _coerce_int(os.getenv("REDDIT_SEARCH_LIMIT"), 15)),
        hf_token=os.getenv("HF_TOKEN", "").strip(),
        hf_model=os.getenv("HF_MODEL", "").strip() or DEFAULT_HF_MODEL,
        sentiment_backend=backend,  # type: ignore[arg-type]
        finnhub_key=os.getenv("FINNHUB_KEY", "").strip(),
        cache_ttl_sec=max(0.0, _coerce_float(os.getenv("SENTIMENT_CACHE_TTL_SEC"), 300.0)),
        scoring_interval_ms=max(0, _coerce_int(os.getenv("SCORING_INTERVAL_MS"), 100)),
        http_timeout_sec=max(0.1, _coerce_float(os.getenv("HTTP_TIMEOUT_SEC"), 10.0)),
        port=_coerce_int(os.getenv("PORT"), 5000),
        log_path=os.getenv("LOG_PATH", "").strip() or "logs/sentiment.log",
    )


def settings_from_env() -> Settings:
    """Build :class:`Settings` from environment variables without caching."""

    return _build_settings()


def get_settings() -> Settings:
    global _SETTINGS_CACHE, _SETTINGS_SIGNATURE
    signature = _env_signature()
    with _CACHE_LOCK:
        if _SETTINGS_CACHE is None or signature != _SETTINGS_SIGNATURE:
            _SETTINGS_CACHE = _build_settings()
            _SETTINGS_SIGNATURE = signature
        return _SETTINGS_CACHE


def refresh_settings() -> Settings:
    global _SETTINGS_CACHE, _SETTINGS_SIGNATURE
    with _CACHE_LOCK:
        _SETTINGS_CACHE = _build_settings()
        _SETTINGS_SIGNATURE = _env_signature()
        return _SETTINGS_CACHE


__all__ = [
    "Backend",
    "DEFAULT_HF_MODEL",
    "DEFAULT_SUBREDDITS",
    "Settings",
    "get_settings",
    "parse_bool",
    "refresh_settings",
    "settings_from_env",
]
