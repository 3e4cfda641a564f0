"""Image decoding and derived-path helpers shared by the renderer and placeholder encoder."""

import io
import re

from PIL import Image, ImageOps, UnidentifiedImageError

from .exceptions import DecodeError

OUTPUT_FORMAT = "WEBP"
OUTPUT_EXTENSION = "webp"
OUTPUT_CONTENT_TYPE = "image/webp"

_EXTENSION_RE = re.compile(r"\.[^.]+$")


def strip_extension(path: str) -> str:
    """Remove the trailing ``.<ext>`` from a storage path, if any."""
    return _EXTENSION_RE.sub("", path)


def derive_variant_path(path: str, variant_name: str) -> str:
    """
    Calculate the storage path of a derived variant.

    Args:
        path: Storage path of the original blob.
        variant_name: Name of the variant configuration.

    Returns:
        ``<path without extension>_<variant_name>.webp``

    Example:
        >>> derive_variant_path("abc123/2024-01-01-beach.jpg", "thumb")
        'abc123/2024-01-01-beach_thumb.webp'
    """
    return f"{strip_extension(path)}_{variant_name}.{OUTPUT_EXTENSION}"


def load_image(image_bytes: bytes) -> Image.Image:
    """
    Decode image bytes into an upright RGB or RGBA Pillow image.

    EXIF orientation is applied so that width and height are the
    displayed dimensions; re-encoded variants carry no orientation tag.

    Raises:
        DecodeError: If the bytes are empty or not a supported image.
    """
    if not image_bytes:
        raise DecodeError("image data is empty")

    try:
        image = Image.open(io.BytesIO(image_bytes))
        image.load()
        image = ImageOps.exif_transpose(image)
    except (
        UnidentifiedImageError,
        Image.DecompressionBombError,
        OSError,
        SyntaxError,
        ValueError,
    ) as exc:
        raise DecodeError(f"cannot decode image: {exc}") from exc

    if _has_alpha(image):
        return image.convert("RGBA")
    return image.convert("RGB")


def _has_alpha(image: Image.Image) -> bool:
    return image.mode in ("RGBA", "LA", "PA") or (
        image.mode == "P" and "transparency" in image.info
    )
