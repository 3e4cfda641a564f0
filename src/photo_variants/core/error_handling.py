# src/photo_variants/core/error_handling.py

import logging
from typing import Any, Dict, List

from botocore.exceptions import ClientError

from .models import VariantOutcome

MISSING_OBJECT_ERROR_CODES = ("NoSuchKey", "NoSuchBucket", "404", "NotFound")


def client_error_code(error: ClientError) -> str:
    """Return the S3 error code carried by a botocore ClientError."""
    return str(error.response.get("Error", {}).get("Code", ""))


def is_missing_object(error: ClientError) -> bool:
    return client_error_code(error) in MISSING_OBJECT_ERROR_CODES


class VariantFailureCollector:
    """
    Context manager that folds variant outcomes into a success map and
    a list of failures, logging a summary when the block exits.
    """

    def __init__(self, operation_name: str = "Variant rendering", photo_id: str = ""):
        self.operation_name = operation_name
        self.photo_id = photo_id
        self.variants: Dict[str, str] = {}
        self.errors: List[Dict[str, Any]] = []
        self.logger = logging.getLogger(
            "photo-variants." + self.__class__.__name__
        )

    def __enter__(self) -> "VariantFailureCollector":
        self.logger.debug(f"Starting {self.operation_name} for photo '{self.photo_id}'.")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_type:
            self.logger.error(
                f"{self.operation_name} for photo '{self.photo_id}' failed due to an "
                f"unhandled exception: {exc_val}",
                exc_info=(exc_type, exc_val, exc_tb),
            )
        elif self.errors:
            self.logger.warning(
                f"{self.operation_name} for photo '{self.photo_id}' completed with "
                f"{len(self.errors)} error(s); {len(self.variants)} variant(s) produced."
            )
            for i, error_detail in enumerate(self.errors):
                self.logger.error(
                    f"  Error {i + 1}/{len(self.errors)} for variant "
                    f"'{error_detail['variant']}' during {error_detail['stage']}: "
                    f"{error_detail['error']}"
                )
        else:
            self.logger.info(
                f"{self.operation_name} for photo '{self.photo_id}' completed: "
                f"{len(self.variants)} variant(s) produced."
            )
        return False

    def add(self, outcome: VariantOutcome) -> None:
        """Record one outcome; artifacts go to the success map, errors to the log."""
        if outcome.artifact is not None:
            self.variants[outcome.name] = outcome.artifact.path
        elif outcome.error is not None:
            self.add_error(outcome.error.message, outcome.name, outcome.error.stage)

    def add_error(self, error_message: str, variant_name: str, stage: str = "render") -> None:
        self.errors.append(
            {"variant": variant_name, "stage": stage, "error": str(error_message)}
        )
        self.logger.debug(
            f"Error added for variant '{variant_name}' in {self.operation_name}: {error_message}"
        )

    @property
    def failed_variants(self) -> List[str]:
        return [e["variant"] for e in self.errors]
