"""Testing utilities and fakes for the photo variants pipeline."""

from .fakes import (
    FakeImageProcessor,
    FakeLogger,
    FakeMetadataStore,
    FakeS3Client,
    S3Bucket,
    S3Object,
    create_test_image,
    setup_test_environment,
)

__all__ = [
    "FakeS3Client",
    "FakeMetadataStore",
    "FakeImageProcessor",
    "FakeLogger",
    "S3Object",
    "S3Bucket",
    "create_test_image",
    "setup_test_environment",
]
