"""Variant executors with different concurrency strategies."""

from ..core.exceptions import ConfigurationError
from ..core.protocols import VariantExecutor
from .common import process_single_variant
from .multithread import ThreadPoolVariantExecutor
from .serial import SerialVariantExecutor

EXECUTOR_NAMES = ("serial", "multithread")


def create_executor(name: str = "serial", max_workers: int = 3) -> VariantExecutor:
    """Build the executor registered under ``name``."""
    if name == "serial":
        return SerialVariantExecutor()
    if name == "multithread":
        return ThreadPoolVariantExecutor(max_workers=max_workers)
    raise ConfigurationError(
        f"Unknown executor '{name}', expected one of: {', '.join(EXECUTOR_NAMES)}"
    )


__all__ = [
    "EXECUTOR_NAMES",
    "SerialVariantExecutor",
    "ThreadPoolVariantExecutor",
    "create_executor",
    "process_single_variant",
]
