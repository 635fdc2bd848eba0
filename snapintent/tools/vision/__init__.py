"""
Vision tools package

Re-exports the provider interface/implementations and the extraction helpers:

    from snapintent.tools.vision import (
        VisionProvider,
        MockVisionProvider,
        OpenAIVisionProvider,
        IntentExtractor,
        get_vision_provider,
    )
"""

from __future__ import annotations

from snapintent.config.settings import VisionConfig

from .extraction import EXTRACTION_PROMPT, IntentExtractor, parse_extraction, strip_code_fences
from .mock_provider import MockVisionProvider
from .openai_provider import OpenAIVisionProvider
from .provider_base import VisionProvider


def get_vision_provider(config: VisionConfig) -> VisionProvider:
    if config.provider == "mock":
        return MockVisionProvider()
    return OpenAIVisionProvider(config)


__all__ = [
    "VisionProvider",
    "MockVisionProvider",
    "OpenAIVisionProvider",
    "IntentExtractor",
    "EXTRACTION_PROMPT",
    "parse_extraction",
    "strip_code_fences",
    "get_vision_provider",
]
