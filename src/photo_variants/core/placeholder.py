"""BlurHash placeholder encoding.

A BlurHash is a short base-83 string holding the DC colour and a small grid
of low-frequency cosine components of an image. Clients decode it into a
blurred preview while the real variant loads.
"""

import math
from typing import Tuple

import numpy as np
from PIL import Image

from .exceptions import DecodeError, PlaceholderError
from .image_utils import load_image

BASE83_ALPHABET = (
    "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    "abcdefghijklmnopqrstuvwxyz#$%*+,-.:;=?@[]^_{|}~"
)

WORKING_SIZE = 32
X_COMPONENTS = 4
Y_COMPONENTS = 3


def encode_base83(value: int, length: int) -> str:
    """Encode a non-negative integer as ``length`` base-83 characters."""
    chars = []
    for i in range(1, length + 1):
        digit = (value // (83 ** (length - i))) % 83
        chars.append(BASE83_ALPHABET[digit])
    return "".join(chars)


def decode_base83(text: str) -> int:
    value = 0
    for char in text:
        index = BASE83_ALPHABET.find(char)
        if index < 0:
            raise PlaceholderError(f"invalid base83 character: {char!r}")
        value = value * 83 + index
    return value


def srgb_to_linear(values: np.ndarray) -> np.ndarray:
    v = values.astype(np.float64) / 255.0
    return np.where(v <= 0.04045, v / 12.92, ((v + 0.055) / 1.055) ** 2.4)


def linear_to_srgb(value: float) -> int:
    v = max(0.0, min(1.0, value))
    if v <= 0.0031308:
        return int(v * 12.92 * 255 + 0.5)
    return int((1.055 * math.pow(v, 1 / 2.4) - 0.055) * 255 + 0.5)


def _sign_pow(value: float, exponent: float) -> float:
    return math.copysign(math.pow(abs(value), exponent), value)


def _encode_dc(rgb: np.ndarray) -> int:
    r, g, b = (linear_to_srgb(float(c)) for c in rgb)
    return (r << 16) + (g << 8) + b


def _encode_ac(rgb: np.ndarray, maximum_value: float) -> int:
    quantised = [
        int(max(0, min(18, math.floor(_sign_pow(float(c) / maximum_value, 0.5) * 9 + 9.5))))
        for c in rgb
    ]
    return quantised[0] * 19 * 19 + quantised[1] * 19 + quantised[2]


def encode_pixels(
    pixels: np.ndarray,
    x_components: int = X_COMPONENTS,
    y_components: int = Y_COMPONENTS,
) -> str:
    """
    Encode an ``(height, width, 3)`` uint8 RGB array as a BlurHash.

    Raises:
        PlaceholderError: If a component count is outside 1-9 or the
            array has the wrong shape.
    """
    if not (1 <= x_components <= 9 and 1 <= y_components <= 9):
        raise PlaceholderError(
            f"component counts must be between 1 and 9, got {x_components}x{y_components}"
        )
    if pixels.ndim != 3 or pixels.shape[2] != 3 or pixels.shape[0] == 0 or pixels.shape[1] == 0:
        raise PlaceholderError(f"expected an RGB pixel array, got shape {pixels.shape}")

    height, width = pixels.shape[0], pixels.shape[1]
    linear = srgb_to_linear(pixels)
    xs = np.arange(width)
    ys = np.arange(height)

    factors = []
    for j in range(y_components):
        for i in range(x_components):
            normalisation = 1.0 if i == 0 and j == 0 else 2.0
            basis = np.outer(
                np.cos(math.pi * j * ys / height), np.cos(math.pi * i * xs / width)
            )
            factor = (basis[:, :, np.newaxis] * linear).sum(axis=(0, 1))
            factors.append(factor * normalisation / (width * height))

    dc, ac = factors[0], factors[1:]

    size_flag = (x_components - 1) + (y_components - 1) * 9
    parts = [encode_base83(size_flag, 1)]

    if ac:
        actual_maximum = max(float(np.abs(f).max()) for f in ac)
        quantised_maximum = int(max(0, min(82, math.floor(actual_maximum * 166 - 0.5))))
        maximum_value = (quantised_maximum + 1) / 166
        parts.append(encode_base83(quantised_maximum, 1))
    else:
        maximum_value = 1.0
        parts.append(encode_base83(0, 1))

    parts.append(encode_base83(_encode_dc(dc), 4))
    for factor in ac:
        parts.append(encode_base83(_encode_ac(factor, maximum_value), 2))

    return "".join(parts)


def working_size(width: int, height: int, longest_side: int = WORKING_SIZE) -> Tuple[int, int]:
    """Downsampled size with ``longest_side`` on the longer edge, aspect preserved."""
    if width >= height:
        return longest_side, max(1, int(math.floor(height * longest_side / width + 0.5)))
    return max(1, int(math.floor(width * longest_side / height + 0.5))), longest_side


def encode_placeholder(
    image_bytes: bytes,
    x_components: int = X_COMPONENTS,
    y_components: int = Y_COMPONENTS,
) -> str:
    """
    Produce the BlurHash placeholder for an original image.

    The source is downsampled to 32px on its longest side before
    encoding, so cost and output length do not depend on the image size.

    Raises:
        PlaceholderError: If the image cannot be decoded or encoded.
    """
    try:
        image = load_image(image_bytes)
    except DecodeError as exc:
        raise PlaceholderError(str(exc)) from exc

    small = image.convert("RGB").resize(
        working_size(image.width, image.height), Image.Resampling.BILINEAR
    )
    pixels = np.asarray(small, dtype=np.uint8)
    return encode_pixels(pixels, x_components, y_components)


def placeholder_length(x_components: int = X_COMPONENTS, y_components: int = Y_COMPONENTS) -> int:
    return 4 + 2 * (x_components * y_components)


def decode_placeholder_average(blurhash: str) -> Tuple[int, int, int]:
    """
    Return the average (DC) sRGB colour stored in a BlurHash.

    Raises:
        PlaceholderError: If the string is not a well-formed BlurHash.
    """
    if len(blurhash) < 6:
        raise PlaceholderError("blurhash must be at least 6 characters")

    size_flag = decode_base83(blurhash[0])
    x_components = size_flag % 9 + 1
    y_components = size_flag // 9 + 1
    if len(blurhash) != placeholder_length(x_components, y_components):
        raise PlaceholderError(
            f"blurhash length {len(blurhash)} does not match "
            f"{x_components}x{y_components} components"
        )

    value = decode_base83(blurhash[2:6])
    return value >> 16, (value >> 8) & 255, value & 255
