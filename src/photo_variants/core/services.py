"""Service implementations for the photo variants pipeline."""

import functools
import time
from typing import Any, Dict, Mapping, Optional, Sequence, Union

from pydantic import ValidationError as PydanticValidationError

from ..processors.common import process_single_variant
from ..processors.serial import SerialVariantExecutor
from .config import check_variants
from .error_handling import VariantFailureCollector
from .exceptions import FetchError, PersistError, PlaceholderError, ValidationError, translate_errors
from .models import DEFAULT_VARIANTS, ProcessRequest, ProcessResult, VariantConfig
from .observability import LogContext, MetricsCollector, StructuredLogger, timed_step
from .placeholder import X_COMPONENTS, Y_COMPONENTS, encode_placeholder
from .protocols import (
    BlobStoreProtocol,
    ImageProcessorProtocol,
    LoggerProtocol,
    MetadataStoreProtocol,
    VariantExecutor,
)
from .renderer import RenderedVariant, render_variant_image

MISSING_FIELDS_MESSAGE = "Missing required fields: photoId, bucket, and path are required"
SUCCESS_MESSAGE = "Image processed successfully"
DISABLED_MESSAGE = "Image processing disabled; request acknowledged"


class ImageProcessorService:
    """Pure image processing service with no I/O dependencies."""

    def __init__(self, x_components: int = X_COMPONENTS, y_components: int = Y_COMPONENTS):
        self.x_components = x_components
        self.y_components = y_components

    def render_variant(self, image_bytes: bytes, config: VariantConfig) -> RenderedVariant:
        """Decode, resize, crop and re-encode one variant."""
        return render_variant_image(image_bytes, config)

    def encode_placeholder(self, image_bytes: bytes) -> str:
        """BlurHash of the image."""
        return encode_placeholder(image_bytes, self.x_components, self.y_components)


class ImagePipelineOrchestrator:
    """
    Coordinates one processing request.

    Fetch original → render each variant independently → encode
    placeholder → persist. Only request validation and the fetch of the
    original abort a request; per-variant, placeholder and persistence
    failures are logged and show up as absent entries in the result.
    """

    def __init__(
        self,
        blob_store: BlobStoreProtocol,
        metadata_store: MetadataStoreProtocol,
        variants: Sequence[VariantConfig] = DEFAULT_VARIANTS,
        image_processor: Optional[ImageProcessorProtocol] = None,
        executor: Optional[VariantExecutor] = None,
        logger: Optional[LoggerProtocol] = None,
        metrics_collector: Optional[MetricsCollector] = None,
        processing_enabled: bool = True,
    ):
        check_variants(variants)
        self._blob_store = blob_store
        self._metadata_store = metadata_store
        self._variants = tuple(variants)
        self._image_processor = image_processor or ImageProcessorService()
        self._executor = executor or SerialVariantExecutor()
        self._logger = logger or StructuredLogger("pipeline")
        self._metrics_collector = metrics_collector
        self._processing_enabled = processing_enabled

    @property
    def variants(self) -> Sequence[VariantConfig]:
        return self._variants

    def process_image(
        self, request: Union[ProcessRequest, Mapping[str, Any]]
    ) -> ProcessResult:
        """
        Process one uploaded photo.

        Args:
            request: ProcessRequest, or a mapping using the wire keys
                ``photoId``, ``bucket`` and ``path``.

        Returns:
            ProcessResult with ``success=True`` whenever the original was
            fetched, listing only the variants that were produced.

        Raises:
            ValidationError: If a required field is missing; no I/O happened.
            FetchError: If the original could not be downloaded.
        """
        start_time = time.time()
        request = self._validate(request)
        photo_id, bucket, path = request.photo_id, request.bucket, request.path

        log_context = LogContext(
            correlation_id=f"photo_{photo_id}_{int(start_time * 1000)}",
            operation="process_image",
            component="pipeline_orchestrator",
            user_id=request.user_id,
        ).with_metadata(photo_id=photo_id, bucket=bucket, path=path)

        if not self._processing_enabled:
            self._logger.warning("Processing disabled, acknowledging request", log_context)
            return ProcessResult(
                success=True,
                message=DISABLED_MESSAGE,
                photo_id=photo_id,
                processing_time_ms=_elapsed_ms(start_time),
            )

        self._logger.info(f"Processing image {photo_id} from {bucket}/{path}", log_context)

        image_bytes = self._fetch_original(bucket, path, log_context)

        attempt = functools.partial(
            process_single_variant,
            image_bytes=image_bytes,
            bucket=bucket,
            source_path=path,
            blob_store=self._blob_store,
            image_processor=self._image_processor,
            logger=self._logger,
            log_context=log_context,
            metrics_collector=self._metrics_collector,
        )
        with VariantFailureCollector(photo_id=photo_id) as collector:
            outcomes = self._executor.run(self._variants, attempt)
            for outcome in outcomes:
                collector.add(outcome)

        variants = collector.variants
        blurhash = self._encode_placeholder(image_bytes, log_context)
        persisted = self._persist(photo_id, variants, blurhash, log_context)

        processing_time_ms = _elapsed_ms(start_time)
        self._logger.info(
            f"Completed in {processing_time_ms}ms",
            log_context.with_operation("process_image"),
            variants=len(variants),
            failed=len(collector.errors),
            blurhash=blurhash is not None,
            persisted=persisted,
        )

        return ProcessResult(
            success=True,
            message=SUCCESS_MESSAGE,
            photo_id=photo_id,
            variants=dict(variants) if variants else None,
            blurhash=blurhash,
            processing_time_ms=processing_time_ms,
            outcomes=outcomes,
            persisted=persisted,
        )

    def _validate(self, request: Union[ProcessRequest, Mapping[str, Any]]) -> ProcessRequest:
        if not isinstance(request, ProcessRequest):
            try:
                request = ProcessRequest.model_validate(dict(request))
            except PydanticValidationError as exc:
                raise ValidationError(f"Invalid request: {exc}") from exc

        missing = request.missing_fields()
        if missing:
            raise ValidationError(MISSING_FIELDS_MESSAGE, missing_fields=missing)
        return request

    def _fetch_original(self, bucket: str, path: str, log_context: LogContext) -> bytes:
        context = log_context.with_operation("fetch_original")
        self._logger.info(f"Downloading original: {path}", context)
        try:
            with timed_step("fetch_original", self._metrics_collector):
                with translate_errors(FetchError, "Failed to download original image"):
                    image_bytes = self._blob_store.download(bucket, path)
        except FetchError as exc:
            self._logger.error(f"Failed to download original image: {exc}", context)
            raise
        self._logger.info(f"Downloaded {len(image_bytes)} bytes", context)
        return image_bytes

    def _encode_placeholder(self, image_bytes: bytes, log_context: LogContext) -> Optional[str]:
        context = log_context.with_operation("encode_placeholder")
        self._logger.debug("Generating BlurHash", context)
        try:
            with timed_step("encode_placeholder", self._metrics_collector):
                blurhash = self._image_processor.encode_placeholder(image_bytes)
        except PlaceholderError as exc:
            self._logger.error(f"Error generating BlurHash: {exc}", context)
            return None
        except Exception as exc:  # noqa: BLE001
            self._logger.error(f"Unexpected error generating BlurHash: {exc}", context)
            return None
        self._logger.info(f"BlurHash generated: {blurhash}", context)
        return blurhash

    def _persist(
        self,
        photo_id: str,
        variants: Dict[str, str],
        blurhash: Optional[str],
        log_context: LogContext,
    ) -> bool:
        context = log_context.with_operation("persist")
        if not variants and blurhash is None:
            self._logger.warning("Nothing produced, photo record left untouched", context)
            return False

        try:
            with timed_step("persist", self._metrics_collector):
                self._metadata_store.update_photo(
                    photo_id, variants=dict(variants) or None, blurhash=blurhash
                )
        except PersistError as exc:
            # Uploaded variants stay in place; a re-run links them.
            self._logger.error(f"Database update error: {exc}", context)
            return False
        except Exception as exc:  # noqa: BLE001
            self._logger.error(f"Unexpected database update error: {exc}", context)
            return False

        self._logger.info("Photo record updated", context)
        return True


def _elapsed_ms(start_time: float) -> int:
    return int((time.time() - start_time) * 1000)
