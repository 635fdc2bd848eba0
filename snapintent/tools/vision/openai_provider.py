# snapintent/tools/vision/openai_provider.py
"""
OpenAI Vision Provider

Production `VisionProvider` using an OpenAI multimodal chat model. One request per image:
a single user message with the instruction text and the image as a data URL.

Configuration comes from `VisionConfig` (api key, model, timeout, max tokens and the
client's own transport retries). Nothing here retries on top of the SDK.
"""

from __future__ import annotations

from typing import Any

from snapintent.config.settings import VisionConfig

from .provider_base import VisionProvider, data_url


class OpenAIVisionProvider(VisionProvider):
    def __init__(self, config: VisionConfig, *, client: Any | None = None) -> None:
        if client is None:
            if not config.api_key:
                raise RuntimeError("OPENAI_API_KEY not set for OpenAIVisionProvider.")
            from openai import OpenAI

            client = OpenAI(api_key=config.api_key, timeout=config.timeout_s, max_retries=config.max_retries)
        self._client = client
        self._model = config.model
        self._max_tokens = config.max_tokens

    def complete(self, *, image_b64: str, media_type: str, prompt: str) -> str:
        resp = self._client.chat.completions.create(
            model=self._model,
            max_tokens=self._max_tokens,
            messages=[
                {
                    "role": "user",
                    "content": [
                        {"type": "image_url", "image_url": {"url": data_url(image_b64, media_type)}},
                        {"type": "text", "text": prompt},
                    ],
                }
            ],
        )
        choices = getattr(resp, "choices", None) or []
        if not choices:
            raise RuntimeError("No choices in vision response.")
        content = choices[0].message.content
        if not isinstance(content, str) or not content.strip():
            raise RuntimeError("No text content in vision response.")
        return content
