"""Custom exceptions for the photo variants pipeline."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, List, Optional, Type


class PhotoVariantsError(Exception):
    """Base exception for all photo variants errors."""


class ValidationError(PhotoVariantsError):
    """Request is malformed; raised before any I/O happens."""

    def __init__(self, message: str, missing_fields: Optional[List[str]] = None):
        super().__init__(message)
        self.missing_fields = missing_fields or []


class ConfigurationError(PhotoVariantsError):
    """Error raised for invalid configuration options."""


class StorageError(PhotoVariantsError):
    """Error raised for blob store failures."""


class FetchError(StorageError):
    """The original blob could not be downloaded."""


class BlobNotFoundError(FetchError):
    """The original blob does not exist."""


class UploadError(StorageError):
    """A derived blob could not be written."""


class RenderError(PhotoVariantsError):
    """Base for failures while producing a variant."""


class DecodeError(RenderError):
    """Source bytes are not a decodable image."""


class EncodeError(RenderError):
    """A variant could not be re-encoded."""


class PlaceholderError(PhotoVariantsError):
    """The placeholder could not be produced."""


class PersistError(PhotoVariantsError):
    """The photo record could not be updated."""


@contextmanager
def translate_errors(
    target: Type[PhotoVariantsError], message: str = ""
) -> Iterator[Any]:
    """Re-raise anything that is not already a pipeline error as ``target``."""
    try:
        yield
    except PhotoVariantsError:
        raise
    except Exception as exc:  # noqa: BLE001
        detail = f"{message}: {exc}" if message else str(exc)
        raise target(detail) from exc
