"""Pool collector adapters."""

from pgx_exporter.adapters.pool_collector.fake import FakePoolCollector
from pgx_exporter.adapters.pool_collector.prometheus import (
    PrometheusPoolCollector,
    new_pool_collector,
)

__all__ = ["PrometheusPoolCollector", "FakePoolCollector", "new_pool_collector"]
