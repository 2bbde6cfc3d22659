"""Core protocols for dependency injection."""

from pgx_exporter.core.protocols.metrics_renderer import MetricsRenderer
from pgx_exporter.core.protocols.metrics_service import MetricsService
from pgx_exporter.core.protocols.pool_collector import PoolCollector
from pgx_exporter.core.protocols.pool_stats import PoolStatsProvider

__all__ = [
    "MetricsRenderer",
    "MetricsService",
    "PoolCollector",
    "PoolStatsProvider",
]
