"""PoolCollector protocol for the Prometheus custom-collector contract.

``CollectorRegistry.register`` calls ``describe()`` to reserve metric
names; every scrape calls ``collect()`` for current values.
"""

from typing import Iterable, Protocol, runtime_checkable

from prometheus_client.metrics_core import Metric


@runtime_checkable
class PoolCollector(Protocol):
    """Protocol for a collector that republishes pool statistics."""

    def describe(self) -> Iterable[Metric]:
        """Yield metric families without samples, in catalogue order."""
        ...

    def collect(self) -> Iterable[Metric]:
        """Yield one valued metric family per catalogue entry."""
        ...
