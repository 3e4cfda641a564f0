"""Serial executor - renders variants one by one in the calling thread."""

from typing import Callable, List, Sequence

from ..core.models import VariantConfig, VariantOutcome
from ..core.protocols import VariantExecutor


class SerialVariantExecutor(VariantExecutor):
    """Runs each variant attempt in configuration order."""

    name = "serial"

    def run(
        self,
        variants: Sequence[VariantConfig],
        attempt: Callable[[VariantConfig], VariantOutcome],
    ) -> List[VariantOutcome]:
        """
        Call ``attempt`` once per variant, sequentially.

        Args:
            variants: Configured variants, in order.
            attempt: Renders and uploads one variant, returning its outcome.

        Returns:
            One outcome per variant, in configuration order.
        """
        results = []

        for config in variants:
            results.append(attempt(config))

        return results
