# tests/__init__.py
"""
Expose common test utilities so tests can import directly:
    from tests import make_place, png_bytes
"""

from .utils import make_extraction_reply, make_place, png_bytes

__all__ = ["make_place", "make_extraction_reply", "png_bytes"]
