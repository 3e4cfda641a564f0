"""Factory classes for creating configured service instances."""

import logging
from typing import Any, Optional

import boto3

from ..processors import create_executor
from .config import PipelineSettings
from .database import Base, create_db_engine, create_session_factory
from .gateways import S3BlobStore, SqlMetadataStore
from .observability import MetricsCollector, StructuredLogger
from .protocols import (
    BlobStoreProtocol,
    LoggerProtocol,
    MetadataStoreProtocol,
    S3ClientProtocol,
)
from .services import ImagePipelineOrchestrator, ImageProcessorService


class LoggerFactory:
    """Factory for creating logger instances."""

    @staticmethod
    def create_logger(name: str = "pipeline", debug: bool = False) -> LoggerProtocol:
        return StructuredLogger(name, logging.DEBUG if debug else None)


class S3ClientFactory:
    """Factory for creating S3 client instances."""

    @staticmethod
    def create_s3_client(settings: Optional[PipelineSettings] = None, **kwargs: Any) -> S3ClientProtocol:
        """Create S3 client with optional endpoint and region overrides."""
        if settings is not None:
            if settings.s3_endpoint_url:
                kwargs.setdefault("endpoint_url", settings.s3_endpoint_url)
            if settings.aws_region:
                kwargs.setdefault("region_name", settings.aws_region)
        session = boto3.Session()
        return session.client("s3", **kwargs)  # type: ignore


class MetadataStoreFactory:
    """Factory for the SQL-backed metadata store."""

    @staticmethod
    def create_metadata_store(database_url: str, create_tables: bool = False) -> SqlMetadataStore:
        engine = create_db_engine(database_url)
        if create_tables:
            Base.metadata.create_all(bind=engine)
        return SqlMetadataStore(create_session_factory(engine))


class ProcessingPipelineFactory:
    """Factory for creating the complete processing pipeline."""

    @staticmethod
    def create_pipeline(
        settings: Optional[PipelineSettings] = None,
        s3_client: Optional[S3ClientProtocol] = None,
        blob_store: Optional[BlobStoreProtocol] = None,
        metadata_store: Optional[MetadataStoreProtocol] = None,
        logger: Optional[LoggerProtocol] = None,
        metrics_collector: Optional[MetricsCollector] = None,
    ) -> ImagePipelineOrchestrator:
        """Create a fully configured orchestrator; missing collaborators come from settings."""
        if settings is None:
            settings = PipelineSettings.from_env()

        if blob_store is None:
            if s3_client is None:
                s3_client = S3ClientFactory.create_s3_client(settings)
            blob_store = S3BlobStore(s3_client)

        if metadata_store is None:
            metadata_store = MetadataStoreFactory.create_metadata_store(settings.database_url)

        if logger is None:
            logger = LoggerFactory.create_logger(debug=settings.debug)

        return ImagePipelineOrchestrator(
            blob_store=blob_store,
            metadata_store=metadata_store,
            variants=settings.variants,
            image_processor=ImageProcessorService(),
            executor=create_executor(settings.executor, settings.max_workers),
            logger=logger,
            metrics_collector=metrics_collector,
            processing_enabled=settings.processing_enabled,
        )
