"""Configuration model for the earthquake relay service."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings

LanguageCode = Literal["en", "zh", "ko", "pt", "es", "vi", "th", "id"]

# Public language code -> language key used inside the JMA name dictionaries.
JMA_LANGUAGE_MAPPING: dict[str, str] = {
    "en": "english",
    "zh": "chinese_zs",
    "ko": "korean",
    "pt": "portuguese",
    "es": "spanish",
    "vi": "vietnamese",
    "th": "thai",
    "id": "indonesian",
}

EARTHQUAKE_CACHE_TTL = 300  # 5 minutes
INDEX_LIMIT = 20


class QuakeRelayConfig(BaseSettings):
    """All configurable parameters for ingestion, caching and serving.

    Values can be set via constructor arguments, environment variables
    prefixed with QUAKE_RELAY_, or defaults.
    """

    model_config = {"env_prefix": "QUAKE_RELAY_"}

    index_url: str = Field(
        default="https://www.jma.go.jp/bosai/quake/data/list.json",
        description="URL of the JMA bulletin index document.",
    )
    detail_base_url: str = Field(
        default="https://www.jma.go.jp/bosai/quake/data/",
        description="Base URL that index document ids are resolved against.",
    )
    index_limit: int = Field(
        default=INDEX_LIMIT, ge=1, le=100, description="Most recent index entries considered."
    )
    cache_ttl_seconds: int = Field(
        default=EARTHQUAKE_CACHE_TTL, ge=1, description="Snapshot cache TTL in seconds."
    )
    refresh_interval_seconds: int = Field(
        default=60, ge=5, description="Interval of the scheduled background refresh."
    )
    request_timeout: int = Field(
        default=30, ge=1, le=300, description="HTTP request timeout in seconds."
    )
    cache_dir: Path = Field(
        default=Path.home() / ".cache" / "quake-relay",
        description="Directory backing the key-value store.",
    )
    default_language: LanguageCode = Field(
        default="en", description="Language used when none or an unknown one is requested."
    )
    single_flight: bool = Field(
        default=True,
        description="Share one in-flight refresh between concurrent cache misses.",
    )
    scheduler_enabled: bool = Field(
        default=True, description="Run the periodic background refresh."
    )


def resolve_language(language: str | None, default: str = "en") -> tuple[str, str]:
    """Return ``(public_code, dictionary_key)`` for a requested language.

    Unknown or missing codes fall back to *default*.
    """
    code = language if language in JMA_LANGUAGE_MAPPING else default
    return code, JMA_LANGUAGE_MAPPING[code]
