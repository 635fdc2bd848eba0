from .settings import (
    AppConfig,
    EmbeddingConfig,
    GeocodingConfig,
    LoggingConfig,
    StorageConfig,
    ThumbnailConfig,
    VisionConfig,
    WebSearchConfig,
    load_config,
)

__all__ = [
    "AppConfig",
    "EmbeddingConfig",
    "GeocodingConfig",
    "LoggingConfig",
    "StorageConfig",
    "ThumbnailConfig",
    "VisionConfig",
    "WebSearchConfig",
    "load_config",
]
