"""HTTP interface for the photo variants pipeline."""

from .app import CORS_HEADERS, PROCESS_PATHS, create_app

__all__ = ["CORS_HEADERS", "PROCESS_PATHS", "create_app"]
