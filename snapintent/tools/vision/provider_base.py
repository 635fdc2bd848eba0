# snapintent/tools/vision/provider_base.py
"""
Vision Provider Interface

Purpose
-------
Minimal, provider-agnostic contract for a vision-language service: send one image plus
one prompt, get the reply text back. Parsing and validation live in `extraction.py`, so
providers stay thin transport adapters and tests can swap in fakes.

Public API
----------
class VisionProvider(Protocol):
    def complete(self, *, image_b64: str, media_type: str, prompt: str) -> str

def data_url(image_b64, media_type) -> str
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class VisionProvider(Protocol):
    def complete(self, *, image_b64: str, media_type: str, prompt: str) -> str: ...


def data_url(image_b64: str, media_type: str) -> str:
    return f"data:{media_type};base64,{image_b64}"
