"""Core components of the photo variants pipeline."""

from .exceptions import (
    BlobNotFoundError,
    ConfigurationError,
    DecodeError,
    EncodeError,
    FetchError,
    PersistError,
    PhotoVariantsError,
    PlaceholderError,
    RenderError,
    StorageError,
    UploadError,
    ValidationError,
)
from .geometry import TargetSize, compute_target_size
from .image_utils import derive_variant_path
from .logging_config import get_logger, setup_logger
from .models import (
    DEFAULT_VARIANTS,
    ProcessRequest,
    ProcessResult,
    VariantArtifact,
    VariantConfig,
    VariantError,
    VariantOutcome,
)
from .placeholder import encode_placeholder
from .renderer import RenderedVariant, render_variant, render_variant_image

__all__ = [
    "DEFAULT_VARIANTS",
    "ProcessRequest",
    "ProcessResult",
    "VariantArtifact",
    "VariantConfig",
    "VariantError",
    "VariantOutcome",
    "TargetSize",
    "compute_target_size",
    "derive_variant_path",
    "RenderedVariant",
    "render_variant",
    "render_variant_image",
    "encode_placeholder",
    "setup_logger",
    "get_logger",
    "PhotoVariantsError",
    "ValidationError",
    "ConfigurationError",
    "StorageError",
    "FetchError",
    "BlobNotFoundError",
    "UploadError",
    "RenderError",
    "DecodeError",
    "EncodeError",
    "PlaceholderError",
    "PersistError",
]
