"""Prometheus collector for connection pool statistics."""

from pgx_exporter.adapters.pool_collector import PrometheusPoolCollector, new_pool_collector
from pgx_exporter.core.pool_stat import PoolStat

__all__ = ["PoolStat", "PrometheusPoolCollector", "new_pool_collector"]
