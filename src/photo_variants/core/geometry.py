"""Target-size arithmetic for variant resizing. Pure functions, no I/O."""

import math
from typing import NamedTuple, Optional, Tuple

from .models import VariantConfig


class TargetSize(NamedTuple):
    """Resize dimensions plus the optional exact crop box size."""

    resize_width: int
    resize_height: int
    crop_width: Optional[int] = None
    crop_height: Optional[int] = None

    @property
    def crops(self) -> bool:
        return self.crop_width is not None and self.crop_height is not None

    @property
    def output_size(self) -> Tuple[int, int]:
        """Final (width, height) after resize and crop."""
        if self.crops:
            return self.crop_width, self.crop_height  # type: ignore[return-value]
        return self.resize_width, self.resize_height

    def crop_box(self) -> Optional[Tuple[int, int, int, int]]:
        """Centered (left, top, right, bottom) crop rectangle, or None."""
        if not self.crops:
            return None
        crop_width = min(self.crop_width, self.resize_width)  # type: ignore[type-var]
        crop_height = min(self.crop_height, self.resize_height)  # type: ignore[type-var]
        left = (self.resize_width - crop_width) // 2
        top = (self.resize_height - crop_height) // 2
        return left, top, left + crop_width, top + crop_height


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values, like JavaScript's Math.round."""
    return int(math.floor(value + 0.5))


def _at_least_one(value: int) -> int:
    return max(1, value)


def compute_target_size(
    source_width: int, source_height: int, config: VariantConfig
) -> TargetSize:
    """
    Compute the resize (and crop) dimensions for one variant.

    ``cover`` fills the target box and crops the overflow around the
    center: sources relatively wider than the box are resized by height,
    all others by width. ``inside`` fits the image within the box using a
    single scale factor and never crops; a missing target height is
    derived from the source aspect ratio.

    Args:
        source_width: Natural width of the decoded source.
        source_height: Natural height of the decoded source.
        config: Variant configuration supplying width, height and fit.

    Returns:
        TargetSize with every dimension clamped to at least 1px.

    Raises:
        ValueError: If a source dimension is not positive, or a cover
            config lacks a height.
    """
    if source_width <= 0 or source_height <= 0:
        raise ValueError(
            f"source dimensions must be positive, got {source_width}x{source_height}"
        )

    target_width = config.width

    if config.fit == "cover":
        if config.height is None:
            raise ValueError(f"variant '{config.name}' uses cover fit but has no height")
        target_height = config.height

        source_aspect = source_width / source_height
        target_aspect = target_width / target_height

        if source_aspect > target_aspect:
            resize_height = target_height
            resize_width = round_half_up(source_width * (target_height / source_height))
        else:
            resize_width = target_width
            resize_height = round_half_up(source_height * (target_width / source_width))

        return TargetSize(
            resize_width=_at_least_one(resize_width),
            resize_height=_at_least_one(resize_height),
            crop_width=_at_least_one(target_width),
            crop_height=_at_least_one(target_height),
        )

    effective_height = (
        config.height
        if config.height is not None
        else round_half_up(source_height * (target_width / source_width))
    )
    effective_height = _at_least_one(effective_height)

    scale = min(target_width / source_width, effective_height / source_height)

    return TargetSize(
        resize_width=_at_least_one(round_half_up(source_width * scale)),
        resize_height=_at_least_one(round_half_up(source_height * scale)),
    )
