"""Prometheus-backed MetricsService implementation.

Composes the pool collector, its registry, the renderer and the sidecar
HTTP server behind a single lifecycle API so callers only deal with one
object.  Registration is an explicit step: a freshly constructed service
has built its collector but not yet put it into the registry.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from prometheus_client import CollectorRegistry

from pgx_exporter.adapters.metrics_renderer import PrometheusMetricsRenderer
from pgx_exporter.adapters.pool_collector import PrometheusPoolCollector
from pgx_exporter.core.config import settings
from pgx_exporter.core.exceptions import MetricsRegistrationError
from pgx_exporter.core.logging import logger
from pgx_exporter.core.protocols.metrics_renderer import MetricsRenderer
from pgx_exporter.core.protocols.pool_collector import PoolCollector
from pgx_exporter.core.protocols.pool_stats import PoolStatsProvider

if TYPE_CHECKING:
    from pgx_exporter.api.metrics_server import MetricsServer


class PrometheusMetricsService:
    """Facade that owns the pool collector and the /metrics sidecar.

    Satisfies the ``MetricsService`` protocol structurally.

    ``registry`` defaults to a private ``CollectorRegistry`` so the
    process-wide default registry is never touched implicitly.
    """

    collector: PoolCollector
    registry: CollectorRegistry

    def __init__(
        self,
        pool: PoolStatsProvider,
        *,
        namespace: Optional[str] = None,
        registry: Optional[CollectorRegistry] = None,
        collector: Optional[PoolCollector] = None,
    ) -> None:
        self.namespace = settings.METRICS_NAMESPACE if namespace is None else namespace
        self.registry = registry or CollectorRegistry()
        self.collector = collector or PrometheusPoolCollector(self.namespace, pool)
        self._renderer: MetricsRenderer = PrometheusMetricsRenderer(self.registry)
        self._server: MetricsServer | None = None
        self._registered = False
        self._logger = logger.with_context(component="metrics_service", namespace=self.namespace)

    @property
    def registered(self) -> bool:
        return self._registered

    def register(self) -> None:
        """Register the collector with the registry; repeated calls are no-ops.

        Raises:
            MetricsRegistrationError: if the registry rejects a metric name.
        """
        if self._registered:
            return
        try:
            self.registry.register(self.collector)
        except ValueError as e:
            raise MetricsRegistrationError(f"Failed to register pool collector: {e}") from e
        self._registered = True
        self._logger.info("Pool collector registered")

    def unregister(self) -> None:
        """Remove the collector from the registry if it was registered."""
        if not self._registered:
            return
        self.registry.unregister(self.collector)
        self._registered = False
        self._logger.info("Pool collector unregistered")

    def generate(self, accept: Optional[str] = None) -> bytes:
        """Render the registry; Prometheus text unless ``accept`` asks for OpenMetrics."""
        body, _ = self._renderer.render(accept)
        return body

    async def start(self, *, host: Optional[str] = None, port: Optional[int] = None) -> None:
        """Register the collector and start the sidecar metrics server."""
        from pgx_exporter.api.metrics_server import MetricsServer

        self.register()
        self._server = MetricsServer(
            self._renderer,
            port=settings.METRICS_PORT if port is None else port,
            host=host or settings.METRICS_HOST,
        )
        await self._server.start()

    async def stop(self) -> None:
        """Stop the sidecar server; safe when never started."""
        if self._server:
            await self._server.stop()
            self._server = None
            self._logger.info("Metrics service stopped")
