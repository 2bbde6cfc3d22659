"""Pool statistics adapters."""

from pgx_exporter.adapters.pool_stats.fake import FakePoolStatsProvider
from pgx_exporter.adapters.pool_stats.sqlalchemy import SqlAlchemyPoolStats

__all__ = ["SqlAlchemyPoolStats", "FakePoolStatsProvider"]
