"""Startup configuration for the photo variants service."""

from typing import List, Literal, Optional

from pydantic import AliasChoices, Field, model_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict, SettingsError

from .exceptions import ConfigurationError
from .models import DEFAULT_VARIANTS, VariantConfig


class PipelineSettings(BaseSettings):
    """
    Process-wide settings, read once at startup.

    Fields come from ``PHOTO_VARIANTS_<FIELD>`` environment variables;
    ``PHOTO_VARIANTS_VARIANTS`` holds a JSON list of variant configs.
    """

    variants: List[VariantConfig] = Field(default_factory=lambda: list(DEFAULT_VARIANTS))
    executor: Literal["serial", "multithread"] = "serial"
    max_workers: int = Field(default=3, gt=0)
    processing_enabled: bool = True
    database_url: str = "sqlite:///photos.db"
    s3_endpoint_url: Optional[str] = None
    aws_region: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("AWS_DEFAULT_REGION", "PHOTO_VARIANTS_AWS_REGION"),
    )
    jwt_secret: Optional[str] = None
    jwt_audience: Optional[str] = None
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    debug: bool = False

    model_config = SettingsConfigDict(
        env_prefix="PHOTO_VARIANTS_",
        env_ignore_empty=True,
        populate_by_name=True,
        extra="ignore",
    )

    @model_validator(mode="after")
    def _check(self) -> "PipelineSettings":
        check_variants(self.variants)
        if self.log_level.upper() == "DEBUG":
            self.debug = True
        return self

    @classmethod
    def from_env(cls) -> "PipelineSettings":
        """
        Build settings from the environment.

        Raises:
            ConfigurationError: If a variable holds an invalid value.
        """
        try:
            return cls()
        except (PydanticValidationError, SettingsError) as exc:
            raise ConfigurationError(f"Invalid configuration: {exc}") from exc


def check_variants(variants: List[VariantConfig]) -> None:
    """
    Ensure the variant list can drive the pipeline.

    Raises:
        ConfigurationError: If the list is empty or names repeat.
    """
    if not variants:
        raise ConfigurationError("At least one variant configuration is required")

    seen = set()
    for config in variants:
        if config.name in seen:
            raise ConfigurationError(f"Duplicate variant name: {config.name}")
        seen.add(config.name)
