"""Shared data models for the photo variants pipeline."""

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

FitPolicy = Literal["cover", "inside"]


class VariantConfig(BaseModel):
    """Static configuration for one derived variant."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    width: int = Field(gt=0)
    height: Optional[int] = Field(default=None, gt=0)
    quality: int = Field(ge=0, le=100)
    fit: FitPolicy = "inside"

    @model_validator(mode="after")
    def _cover_needs_height(self) -> "VariantConfig":
        if self.fit == "cover" and self.height is None:
            raise ValueError(f"variant '{self.name}' uses cover fit but has no height")
        return self


DEFAULT_VARIANTS: List[VariantConfig] = [
    VariantConfig(name="thumb", width=200, height=200, quality=70, fit="cover"),
    VariantConfig(name="medium", width=800, height=None, quality=80, fit="inside"),
    VariantConfig(name="large", width=1600, height=None, quality=85, fit="inside"),
]


class ProcessRequest(BaseModel):
    """Request to derive variants for one uploaded photo."""

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    photo_id: Optional[str] = Field(default=None, alias="photoId")
    bucket: Optional[str] = None
    path: Optional[str] = None
    user_id: Optional[str] = Field(default=None, alias="userId")

    def missing_fields(self) -> List[str]:
        """Names of required fields that are absent or blank."""
        missing = []
        for alias, value in (
            ("photoId", self.photo_id),
            ("bucket", self.bucket),
            ("path", self.path),
        ):
            if value is None or not value.strip():
                missing.append(alias)
        return missing


class VariantArtifact(BaseModel):
    """A variant that was rendered and uploaded."""

    name: str
    path: str
    width: int
    height: int
    size_bytes: int


class VariantError(BaseModel):
    """A variant attempt that failed and was skipped."""

    name: str
    stage: Literal["render", "upload"]
    error_type: str
    message: str


class VariantOutcome(BaseModel):
    """Tagged result of one variant attempt: exactly one of artifact/error."""

    name: str
    artifact: Optional[VariantArtifact] = None
    error: Optional[VariantError] = None

    @property
    def succeeded(self) -> bool:
        return self.artifact is not None


class ProcessResult(BaseModel):
    """Result of processing one photo."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    message: str
    photo_id: Optional[str] = Field(default=None, alias="photoId")
    variants: Optional[Dict[str, str]] = None
    blurhash: Optional[str] = None
    processing_time_ms: Optional[int] = Field(default=None, alias="processingTimeMs")
    outcomes: List[VariantOutcome] = Field(default_factory=list, exclude=True)
    persisted: bool = Field(default=False, exclude=True)

    def to_response(self) -> Dict[str, object]:
        """Wire representation: camelCase keys, absent fields dropped."""
        return self.model_dump(by_alias=True, exclude_none=True)
