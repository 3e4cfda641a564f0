"""Variant rendering: decode, resize, crop and re-encode to WebP."""

import io
from dataclasses import dataclass

from PIL import Image

from .exceptions import EncodeError, translate_errors
from .geometry import compute_target_size
from .image_utils import OUTPUT_FORMAT, load_image
from .logging_config import get_logger
from .models import VariantConfig

# Fixed encoder effort so identical input always yields identical bytes.
WEBP_METHOD = 4

logger = get_logger("renderer")


@dataclass(frozen=True)
class RenderedVariant:
    """Encoded variant bytes and their pixel dimensions."""

    data: bytes
    width: int
    height: int

    @property
    def size_bytes(self) -> int:
        return len(self.data)


def resize_for_variant(image: Image.Image, config: VariantConfig) -> Image.Image:
    """Resize, and center-crop for ``cover``, an already decoded image."""
    target = compute_target_size(image.width, image.height, config)

    resized = image.resize(
        (target.resize_width, target.resize_height), Image.Resampling.LANCZOS
    )

    box = target.crop_box()
    if box is not None:
        resized = resized.crop(box)

    return resized


def encode_webp(image: Image.Image, quality: int) -> bytes:
    """
    Encode an image as WebP.

    Raises:
        EncodeError: If quality is outside 0-100 or the encoder fails.
    """
    if not 0 <= quality <= 100:
        raise EncodeError(f"quality must be between 0 and 100, got {quality}")

    output_stream = io.BytesIO()
    with translate_errors(EncodeError, "WebP encoding failed"):
        image.save(output_stream, format=OUTPUT_FORMAT, quality=quality, method=WEBP_METHOD)
    return output_stream.getvalue()


def render_variant_image(image_bytes: bytes, config: VariantConfig) -> RenderedVariant:
    """
    Produce one variant from the original image bytes.

    Args:
        image_bytes: Raw bytes of the original upload (any format Pillow reads).
        config: The variant to produce.

    Returns:
        RenderedVariant with the WebP bytes and final dimensions.

    Raises:
        DecodeError: If the source is not a decodable image.
        EncodeError: If resizing or re-encoding fails.
    """
    image = load_image(image_bytes)

    with translate_errors(EncodeError, f"resizing for '{config.name}' failed"):
        variant_image = resize_for_variant(image, config)

    data = encode_webp(variant_image, config.quality)

    logger.debug(
        f"Rendered {config.name}: {image.width}x{image.height} -> "
        f"{variant_image.width}x{variant_image.height} ({len(data)} bytes)"
    )
    return RenderedVariant(data=data, width=variant_image.width, height=variant_image.height)


def render_variant(image_bytes: bytes, config: VariantConfig) -> bytes:
    """Produce one variant and return only its encoded bytes."""
    return render_variant_image(image_bytes, config).data
