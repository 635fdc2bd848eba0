# snapintent/config/settings.py
"""
Application configuration for snapintent.

Goals
-----
- One explicit, validated config object built once at startup and passed to every
  adapter. No adapter reads the environment on its own.
- Environment-first: SNAPINTENT_* variables plus the usual service keys.
- Optional .env file (python-dotenv); real environment variables always win.

Environment
-----------
OPENAI_API_KEY / VOYAGE_API_KEY / OPENCAGE_API_KEY / TAVILY_API_KEY
SNAPINTENT_VISION_PROVIDER      : "openai" | "mock"          (default "openai")
SNAPINTENT_VISION_MODEL         : default "gpt-4o-mini"
SNAPINTENT_VISION_TIMEOUT_S     : default "30"
SNAPINTENT_VISION_MAX_RETRIES   : default "2" (SDK transport retries)
SNAPINTENT_VISION_MAX_TOKENS    : default "2048"
SNAPINTENT_EMBEDDING_PROVIDER   : "voyage" | "hash" | "none" (default "voyage")
SNAPINTENT_EMBEDDING_MODEL      : default "voyage-multimodal-3"
SNAPINTENT_EMBEDDING_DIMENSIONS : default "1024"
SNAPINTENT_EMBEDDING_TIMEOUT_S  : default "30"
SNAPINTENT_GEOCODER             : "opencage" | "static" | "none" (default "opencage")
SNAPINTENT_GEOCODER_TIMEOUT_S   : default "10"
SNAPINTENT_WEB_SEARCH           : "tavily" | "none"          (default "tavily")
SNAPINTENT_WEB_SEARCH_MAX_RESULTS : default "5"
SNAPINTENT_THUMB_MAX_WIDTH / SNAPINTENT_THUMB_MAX_HEIGHT / SNAPINTENT_THUMB_QUALITY
SNAPINTENT_STORE                : "memory" | "json"          (default "json")
SNAPINTENT_STORE_DIR            : default "data/store"
SNAPINTENT_LOG_LEVEL            : default "INFO"
SNAPINTENT_LOG_FILE             : optional rotating log file path

Public API
----------
- AppConfig (and nested section models)
- load_config(env=None, *, env_file=None) -> AppConfig
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal

from dotenv import dotenv_values
from pydantic import BaseModel, Field, ValidationError

ENV_PREFIX = "SNAPINTENT_"


class VisionConfig(BaseModel):
    provider: Literal["openai", "mock"] = "openai"
    api_key: str | None = Field(None, repr=False)
    model: str = "gpt-4o-mini"
    timeout_s: float = Field(30.0, gt=0)
    max_retries: int = Field(2, ge=0, le=10, description="Transport-level retries inside the OpenAI client.")
    max_tokens: int = Field(2048, ge=256)


class EmbeddingConfig(BaseModel):
    provider: Literal["voyage", "hash", "none"] = "voyage"
    api_key: str | None = Field(None, repr=False)
    endpoint: str = "https://api.voyageai.com/v1/multimodalembeddings"
    model: str = "voyage-multimodal-3"
    dimensions: int = Field(1024, ge=1)
    timeout_s: float = Field(30.0, gt=0)


class GeocodingConfig(BaseModel):
    provider: Literal["opencage", "static", "none"] = "opencage"
    api_key: str | None = Field(None, repr=False)
    endpoint: str = "https://api.opencagedata.com/geocode/v1/json"
    timeout_s: float = Field(10.0, gt=0)


class WebSearchConfig(BaseModel):
    provider: Literal["tavily", "none"] = "tavily"
    api_key: str | None = Field(None, repr=False)
    endpoint: str = "https://api.tavily.com/search"
    max_results: int = Field(5, ge=1, le=20)
    timeout_s: float = Field(20.0, gt=0)


class ThumbnailConfig(BaseModel):
    max_width: int = Field(400, ge=16)
    max_height: int = Field(400, ge=16)
    quality: int = Field(70, ge=1, le=95)


class StorageConfig(BaseModel):
    backend: Literal["memory", "json"] = "json"
    directory: Path = Path("data/store")


class LoggingConfig(BaseModel):
    level: str = "INFO"
    file: Path | None = None


class AppConfig(BaseModel):
    vision: VisionConfig = Field(default_factory=VisionConfig)
    embedding: EmbeddingConfig = Field(default_factory=EmbeddingConfig)
    geocoding: GeocodingConfig = Field(default_factory=GeocodingConfig)
    web_search: WebSearchConfig = Field(default_factory=WebSearchConfig)
    thumbnail: ThumbnailConfig = Field(default_factory=ThumbnailConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    def secrets(self) -> list[str]:
        """API keys present in this config (for log redaction)."""
        keys = (self.vision.api_key, self.embedding.api_key, self.geocoding.api_key, self.web_search.api_key)
        return [k for k in keys if k]

    def offline(self) -> AppConfig:
        """Copy that uses the deterministic local providers for every external service."""
        return self.model_copy(
            update={
                "vision": self.vision.model_copy(update={"provider": "mock"}),
                "embedding": self.embedding.model_copy(update={"provider": "hash"}),
                "geocoding": self.geocoding.model_copy(update={"provider": "static"}),
                "web_search": self.web_search.model_copy(update={"provider": "none"}),
            }
        )


# (section, field, variable); SNAPINTENT_ prefix is added for unqualified names
_ENV_MAP: tuple[tuple[str, str, str], ...] = (
    ("vision", "api_key", "OPENAI_API_KEY"),
    ("vision", "provider", "VISION_PROVIDER"),
    ("vision", "model", "VISION_MODEL"),
    ("vision", "timeout_s", "VISION_TIMEOUT_S"),
    ("vision", "max_retries", "VISION_MAX_RETRIES"),
    ("vision", "max_tokens", "VISION_MAX_TOKENS"),
    ("embedding", "api_key", "VOYAGE_API_KEY"),
    ("embedding", "provider", "EMBEDDING_PROVIDER"),
    ("embedding", "model", "EMBEDDING_MODEL"),
    ("embedding", "dimensions", "EMBEDDING_DIMENSIONS"),
    ("embedding", "timeout_s", "EMBEDDING_TIMEOUT_S"),
    ("geocoding", "api_key", "OPENCAGE_API_KEY"),
    ("geocoding", "provider", "GEOCODER"),
    ("geocoding", "timeout_s", "GEOCODER_TIMEOUT_S"),
    ("web_search", "api_key", "TAVILY_API_KEY"),
    ("web_search", "provider", "WEB_SEARCH"),
    ("web_search", "max_results", "WEB_SEARCH_MAX_RESULTS"),
    ("thumbnail", "max_width", "THUMB_MAX_WIDTH"),
    ("thumbnail", "max_height", "THUMB_MAX_HEIGHT"),
    ("thumbnail", "quality", "THUMB_QUALITY"),
    ("storage", "backend", "STORE"),
    ("storage", "directory", "STORE_DIR"),
    ("logging", "level", "LOG_LEVEL"),
    ("logging", "file", "LOG_FILE"),
)

_SERVICE_KEYS = {"OPENAI_API_KEY", "VOYAGE_API_KEY", "OPENCAGE_API_KEY", "TAVILY_API_KEY"}


def load_config(env: Mapping[str, str] | None = None, *, env_file: str | Path | None = None) -> AppConfig:
    """
    Build an AppConfig from environment variables.

    Args:
        env:      Mapping to read instead of os.environ (tests).
        env_file: Optional .env path; its values fill gaps only.

    Raises:
        FileNotFoundError: env_file given but missing.
        ValueError:        a value failed validation.
    """
    source: dict[str, str] = {}
    if env_file is not None:
        p = Path(env_file)
        if not p.exists():
            raise FileNotFoundError(f"Env file not found: {p}")
        source.update({k: v for k, v in dotenv_values(p).items() if v is not None})
    source.update(os.environ if env is None else env)

    sections: dict[str, dict[str, Any]] = {}
    for section, field, name in _ENV_MAP:
        var = name if name in _SERVICE_KEYS else f"{ENV_PREFIX}{name}"
        val = source.get(var)
        if val is None or val.strip() == "":
            continue
        sections.setdefault(section, {})[field] = val.strip()

    try:
        return AppConfig.model_validate(sections)
    except ValidationError as e:
        raise ValueError(f"Configuration validation failed:\n{e}") from e


__all__ = [
    "AppConfig",
    "VisionConfig",
    "EmbeddingConfig",
    "GeocodingConfig",
    "WebSearchConfig",
    "ThumbnailConfig",
    "StorageConfig",
    "LoggingConfig",
    "load_config",
]
