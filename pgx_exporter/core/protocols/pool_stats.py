"""PoolStatsProvider protocol for reading connection pool statistics.

The collector depends on this protocol rather than a concrete pool
library.  Production wraps a SQLAlchemy pool; tests inject a fake pool
whose snapshot can be set directly.
"""

from typing import Protocol, runtime_checkable

from pgx_exporter.core.pool_stat import PoolStat


@runtime_checkable
class PoolStatsProvider(Protocol):
    """Protocol for a pool that can report a statistics snapshot."""

    def stat(self) -> PoolStat:
        """Return a consistent snapshot of the pool's current statistics.

        Must be safe to call concurrently with normal pool use and from
        several threads at once.
        """
        ...
