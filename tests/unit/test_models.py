"""Tests for data models and startup configuration."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from photo_variants.core.config import PipelineSettings, check_variants
from photo_variants.core.exceptions import ConfigurationError
from photo_variants.core.models import (
    DEFAULT_VARIANTS,
    ProcessRequest,
    ProcessResult,
    VariantConfig,
)


class TestVariantConfig:
    """Tests for VariantConfig."""

    def test_default_variants(self):
        assert [(v.name, v.width, v.height, v.quality, v.fit) for v in DEFAULT_VARIANTS] == [
            ("thumb", 200, 200, 70, "cover"),
            ("medium", 800, None, 80, "inside"),
            ("large", 1600, None, 85, "inside"),
        ]

    def test_cover_requires_height(self):
        with pytest.raises(PydanticValidationError, match="no height"):
            VariantConfig(name="thumb", width=200, quality=70, fit="cover")

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"name": "", "width": 10, "quality": 50},
            {"name": "x", "width": 0, "quality": 50},
            {"name": "x", "width": 10, "height": -1, "quality": 50},
            {"name": "x", "width": 10, "quality": 101},
            {"name": "x", "width": 10, "quality": 50, "fit": "stretch"},
        ],
    )
    def test_invalid_values(self, kwargs):
        with pytest.raises(PydanticValidationError):
            VariantConfig(**kwargs)

    def test_frozen(self):
        with pytest.raises(PydanticValidationError):
            DEFAULT_VARIANTS[0].width = 10


class TestProcessRequest:
    def test_wire_names(self):
        request = ProcessRequest.model_validate(
            {"photoId": "42", "bucket": "photos", "path": "a/b.jpg", "userId": "u1"}
        )

        assert request.photo_id == "42"
        assert request.user_id == "u1"
        assert request.missing_fields() == []

    def test_numeric_photo_id_accepted(self):
        request = ProcessRequest.model_validate({"photoId": 42, "bucket": "b", "path": "p"})

        assert request.photo_id == "42"

    def test_missing_and_blank_fields(self):
        request = ProcessRequest.model_validate({"photoId": "  ", "path": "a.jpg"})

        assert request.missing_fields() == ["photoId", "bucket"]


class TestProcessResult:
    def test_response_uses_camel_case_and_drops_absent_fields(self):
        result = ProcessResult(
            success=True,
            message="Image processed successfully",
            photo_id="42",
            variants={"thumb": "a_thumb.webp"},
            processing_time_ms=12,
            persisted=True,
        )

        assert result.to_response() == {
            "success": True,
            "message": "Image processed successfully",
            "photoId": "42",
            "variants": {"thumb": "a_thumb.webp"},
            "processingTimeMs": 12,
        }


class TestPipelineSettings:
    """Tests for PipelineSettings read from the environment."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        monkeypatch.delenv("AWS_DEFAULT_REGION", raising=False)

        settings = PipelineSettings.from_env()

        assert settings.variants == DEFAULT_VARIANTS
        assert settings.executor == "serial"
        assert settings.max_workers == 3
        assert settings.processing_enabled is True
        assert settings.jwt_secret is None
        assert settings.aws_region is None
        assert settings.debug is False

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("PHOTO_VARIANTS_EXECUTOR", "multithread")
        monkeypatch.setenv("PHOTO_VARIANTS_MAX_WORKERS", "6")
        monkeypatch.setenv("PHOTO_VARIANTS_PROCESSING_ENABLED", "false")
        monkeypatch.setenv("PHOTO_VARIANTS_DATABASE_URL", "sqlite://")
        monkeypatch.setenv("PHOTO_VARIANTS_JWT_SECRET", "secret")
        monkeypatch.setenv("PHOTO_VARIANTS_S3_ENDPOINT_URL", "http://localhost:9000")
        monkeypatch.setenv("AWS_DEFAULT_REGION", "eu-west-1")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        settings = PipelineSettings.from_env()

        assert settings.executor == "multithread"
        assert settings.max_workers == 6
        assert settings.processing_enabled is False
        assert settings.database_url == "sqlite://"
        assert settings.jwt_secret == "secret"
        assert settings.s3_endpoint_url == "http://localhost:9000"
        assert settings.aws_region == "eu-west-1"
        assert settings.debug is True

    def test_unprefixed_variables_are_ignored(self, monkeypatch):
        monkeypatch.setenv("EXECUTOR", "multithread")
        monkeypatch.setenv("JWT_SECRET", "secret")

        settings = PipelineSettings.from_env()

        assert settings.executor == "serial"
        assert settings.jwt_secret is None

    def test_empty_variable_keeps_default(self, monkeypatch):
        monkeypatch.setenv("PHOTO_VARIANTS_JWT_SECRET", "")

        assert PipelineSettings.from_env().jwt_secret is None

    def test_variants_from_json(self, monkeypatch):
        monkeypatch.setenv(
            "PHOTO_VARIANTS_VARIANTS",
            '[{"name": "square", "width": 64, "height": 64, "quality": 60, "fit": "cover"}]',
        )

        settings = PipelineSettings.from_env()

        assert [v.name for v in settings.variants] == ["square"]

    def test_keyword_arguments(self):
        settings = PipelineSettings(executor="multithread", jwt_secret="secret")

        assert settings.executor == "multithread"
        assert settings.jwt_secret == "secret"

    def test_keyword_duplicate_variants_rejected(self):
        variant = VariantConfig(name="a", width=10, quality=50)

        with pytest.raises(ConfigurationError, match="Duplicate variant name: a"):
            PipelineSettings(variants=[variant, variant])

    @pytest.mark.parametrize(
        "name,value",
        [
            ("PHOTO_VARIANTS_EXECUTOR", "ray"),
            ("PHOTO_VARIANTS_MAX_WORKERS", "0"),
            ("PHOTO_VARIANTS_PROCESSING_ENABLED", "maybe"),
            ("PHOTO_VARIANTS_VARIANTS", "not json"),
            ("PHOTO_VARIANTS_VARIANTS", "[]"),
            ("PHOTO_VARIANTS_VARIANTS", '[{"name": "a", "width": 10, "quality": 50, "fit": "cover"}]'),
        ],
    )
    def test_invalid_environment(self, monkeypatch, name, value):
        monkeypatch.setenv(name, value)

        with pytest.raises(ConfigurationError):
            PipelineSettings.from_env()


class TestCheckVariants:
    def test_duplicate_names(self):
        variants = [
            VariantConfig(name="a", width=10, quality=50),
            VariantConfig(name="a", width=20, quality=50),
        ]

        with pytest.raises(ConfigurationError, match="Duplicate variant name: a"):
            check_variants(variants)

    def test_empty(self):
        with pytest.raises(ConfigurationError, match="At least one"):
            check_variants([])

    def test_defaults_are_valid(self):
        check_variants(DEFAULT_VARIANTS)
