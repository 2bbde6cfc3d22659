"""Point-in-time statistics snapshot of a connection pool.

Produced by the pool side (see ``PoolStatsProvider``) and read by the
collector once per scrape.  Frozen so a snapshot can be shared between
threads and never changes after it is taken.
"""

from dataclasses import dataclass
from datetime import timedelta


@dataclass(frozen=True)
class PoolStat:
    """Connection pool counters and gauges as of one instant."""

    acquire_count: int = 0
    acquire_duration: timedelta = timedelta(0)
    acquired_conns: int = 0
    canceled_acquire_count: int = 0
    constructing_conns: int = 0
    empty_acquire_count: int = 0
    idle_conns: int = 0
    max_conns: int = 0
    # Reported by the pool, not derived here.
    total_conns: int = 0
