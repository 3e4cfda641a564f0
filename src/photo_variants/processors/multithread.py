"""Multithreaded executor - renders variants on a thread pool."""

from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Dict, List, Sequence

from ..core.models import VariantConfig, VariantError, VariantOutcome
from ..core.protocols import VariantExecutor


class ThreadPoolVariantExecutor(VariantExecutor):
    """
    Runs variant attempts concurrently.

    Each variant writes to its own derived path and its own key of the
    variants map, so attempts share no mutable state. Pillow releases the
    GIL while resampling and encoding.
    """

    name = "multithread"

    def __init__(self, max_workers: int = 3):
        self.max_workers = max_workers

    def run(
        self,
        variants: Sequence[VariantConfig],
        attempt: Callable[[VariantConfig], VariantOutcome],
    ) -> List[VariantOutcome]:
        if not variants:
            return []

        outcomes: Dict[str, VariantOutcome] = {}
        max_workers = min(self.max_workers, len(variants))

        with ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="variant"
        ) as executor:
            future_to_config = {
                executor.submit(attempt, config): config for config in variants
            }

            for future in as_completed(future_to_config):
                config = future_to_config[future]
                try:
                    outcomes[config.name] = future.result()
                except Exception as e:  # noqa: BLE001
                    outcomes[config.name] = VariantOutcome(
                        name=config.name,
                        error=VariantError(
                            name=config.name,
                            stage="render",
                            error_type=type(e).__name__,
                            message=str(e),
                        ),
                    )

        return [outcomes[config.name] for config in variants]
