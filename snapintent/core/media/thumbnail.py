# snapintent/core/media/thumbnail.py

from __future__ import annotations

import io

from PIL import Image, ImageOps, UnidentifiedImageError

from snapintent.core.errors import ThumbnailFailure

_RESAMPLE_LANCZOS = Image.Resampling.LANCZOS

DEFAULT_MAX_WIDTH = 400
DEFAULT_MAX_HEIGHT = 400
DEFAULT_QUALITY = 70


def make_thumbnail(
    image_bytes: bytes,
    max_width: int = DEFAULT_MAX_WIDTH,
    max_height: int = DEFAULT_MAX_HEIGHT,
    quality: int = DEFAULT_QUALITY,
) -> bytes:
    """
    Return JPEG bytes of `image_bytes` fitted inside max_width x max_height.

    Aspect ratio is kept and images are never enlarged. EXIF orientation is applied and
    transparency is flattened onto white. Raises ThumbnailFailure on any decode/encode error.
    """
    if max_width <= 0 or max_height <= 0:
        raise ThumbnailFailure(f"invalid thumbnail box {max_width}x{max_height}")
    if not 1 <= quality <= 95:
        raise ThumbnailFailure(f"invalid JPEG quality {quality}")
    if not image_bytes:
        raise ThumbnailFailure("empty image payload")

    try:
        with Image.open(io.BytesIO(image_bytes)) as src:
            img = ImageOps.exif_transpose(src)
            img = _flatten(img)
            # thumbnail() only ever shrinks
            img.thumbnail((max_width, max_height), _RESAMPLE_LANCZOS)
            out = io.BytesIO()
            img.save(out, format="JPEG", quality=quality, optimize=True)
            return out.getvalue()
    except (UnidentifiedImageError, OSError) as exc:
        raise ThumbnailFailure(f"cannot decode image: {exc}") from exc
    except Exception as exc:  # noqa: BLE001
        raise ThumbnailFailure(f"{type(exc).__name__}: {exc}") from exc


def _flatten(img: Image.Image) -> Image.Image:
    if img.mode in ("RGBA", "LA") or (img.mode == "P" and "transparency" in img.info):
        rgba = img.convert("RGBA")
        bg = Image.new("RGB", rgba.size, (255, 255, 255))
        bg.paste(rgba, mask=rgba.split()[-1])
        return bg
    if img.mode != "RGB":
        return img.convert("RGB")
    return img
