"""MetricsService protocol for the exporter's lifecycle facade."""

from typing import Optional, Protocol, runtime_checkable

from pgx_exporter.core.protocols.pool_collector import PoolCollector


@runtime_checkable
class MetricsService(Protocol):
    """Owns the pool collector, its registration and the /metrics sidecar."""

    collector: PoolCollector

    def register(self) -> None:
        """Register the collector with the metrics registry."""
        ...

    async def start(self, *, host: Optional[str] = None, port: Optional[int] = None) -> None:
        """Register the collector if needed and start serving /metrics."""
        ...

    async def stop(self) -> None:
        """Stop serving /metrics."""
        ...
