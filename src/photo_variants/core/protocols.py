"""Protocol definitions for dependency injection and testability."""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence

from .models import VariantConfig, VariantOutcome


class S3ClientProtocol(Protocol):
    """Subset of the boto3 S3 client used by the blob store."""

    def get_object(self, Bucket: str, Key: str) -> Dict[str, Any]:
        """Get object from S3."""
        ...

    def put_object(
        self, Bucket: str, Key: str, Body: bytes, ContentType: str
    ) -> Dict[str, Any]:
        """Put object to S3."""
        ...

    def head_object(self, Bucket: str, Key: str) -> Dict[str, Any]:
        """Get object metadata from S3."""
        ...


class BlobStoreProtocol(Protocol):
    """Path-addressed blob storage for originals and derived variants."""

    def download(self, bucket: str, path: str) -> bytes:
        """Return the blob's bytes; raise FetchError if missing or unreadable."""
        ...

    def upload(
        self,
        bucket: str,
        path: str,
        data: bytes,
        content_type: str,
        upsert: bool = True,
    ) -> None:
        """Write the blob, overwriting when ``upsert``; raise UploadError."""
        ...


class MetadataStoreProtocol(Protocol):
    """Partial-field updates of photo records."""

    def update_photo(
        self,
        photo_id: str,
        variants: Optional[Dict[str, str]] = None,
        blurhash: Optional[str] = None,
    ) -> None:
        """Merge ``variants`` and set ``blurhash`` when given; raise PersistError."""
        ...


class LoggerProtocol(Protocol):
    """Protocol for logging operations."""

    def debug(self, message: str, context: Any = None, **kwargs: Any) -> None:
        ...

    def info(self, message: str, context: Any = None, **kwargs: Any) -> None:
        ...

    def warning(self, message: str, context: Any = None, **kwargs: Any) -> None:
        ...

    def error(self, message: str, context: Any = None, **kwargs: Any) -> None:
        ...


class ImageProcessorProtocol(Protocol):
    """Pure image operations with no I/O."""

    def render_variant(self, image_bytes: bytes, config: VariantConfig) -> Any:
        """Return a RenderedVariant for the config."""
        ...

    def encode_placeholder(self, image_bytes: bytes) -> str:
        """Return the placeholder string for the image."""
        ...


class VariantExecutor(ABC):
    """Strategy that runs one attempt per configured variant."""

    @abstractmethod
    def run(
        self,
        variants: Sequence[VariantConfig],
        attempt: Callable[[VariantConfig], VariantOutcome],
    ) -> List[VariantOutcome]:
        """Call ``attempt(config)`` for each config and return outcomes in config order."""
        ...
