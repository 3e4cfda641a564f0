"""Single-variant attempt shared by all executor strategies."""

from typing import Optional

from ..core.exceptions import RenderError, StorageError
from ..core.image_utils import OUTPUT_CONTENT_TYPE, derive_variant_path
from ..core.models import VariantArtifact, VariantConfig, VariantError, VariantOutcome
from ..core.observability import LogContext, MetricsCollector, timed_step
from ..core.protocols import BlobStoreProtocol, ImageProcessorProtocol, LoggerProtocol


def _failed(config: VariantConfig, stage: str, exc: BaseException) -> VariantOutcome:
    return VariantOutcome(
        name=config.name,
        error=VariantError(
            name=config.name,
            stage=stage,
            error_type=type(exc).__name__,
            message=str(exc),
        ),
    )


def process_single_variant(
    config: VariantConfig,
    *,
    image_bytes: bytes,
    bucket: str,
    source_path: str,
    blob_store: BlobStoreProtocol,
    image_processor: ImageProcessorProtocol,
    logger: LoggerProtocol,
    log_context: LogContext,
    metrics_collector: Optional[MetricsCollector] = None,
) -> VariantOutcome:
    """
    Render one variant and upload it: Render → Encode → Upload.

    Never raises for render or upload failures; they come back as an
    error outcome so the caller can carry on with the other variants.
    """
    variant_path = derive_variant_path(source_path, config.name)
    context = log_context.with_metadata(variant=config.name, variant_path=variant_path)

    try:
        logger.debug(f"Generating {config.name} variant", context.with_operation("render_variant"))
        with timed_step("render_variant", metrics_collector, variant=config.name):
            rendered = image_processor.render_variant(image_bytes, config)
    except RenderError as exc:
        logger.error(
            f"Error generating {config.name}: {type(exc).__name__}: {exc}",
            context.with_operation("render_variant"),
        )
        return _failed(config, "render", exc)
    except Exception as exc:  # noqa: BLE001
        logger.error(
            f"Unexpected error generating {config.name}: {exc}",
            context.with_operation("render_variant"),
        )
        return _failed(config, "render", exc)

    try:
        with timed_step("upload_variant", metrics_collector, variant=config.name):
            blob_store.upload(
                bucket, variant_path, rendered.data, OUTPUT_CONTENT_TYPE, upsert=True
            )
    except StorageError as exc:
        logger.error(
            f"Failed to upload {config.name}: {exc}", context.with_operation("upload_variant")
        )
        return _failed(config, "upload", exc)
    except Exception as exc:  # noqa: BLE001
        logger.error(
            f"Unexpected error uploading {config.name}: {exc}",
            context.with_operation("upload_variant"),
        )
        return _failed(config, "upload", exc)

    logger.info(
        f"Uploaded {config.name}: {variant_path}",
        context.with_operation("upload_variant"),
        width=rendered.width,
        height=rendered.height,
        size_bytes=rendered.size_bytes,
    )
    return VariantOutcome(
        name=config.name,
        artifact=VariantArtifact(
            name=config.name,
            path=variant_path,
            width=rendered.width,
            height=rendered.height,
            size_bytes=rendered.size_bytes,
        ),
    )
