"""Fake PoolStatsProvider for testing.

Holds a settable ``PoolStat`` and counts ``stat()`` calls so collector
tests can assert that exactly one snapshot is taken per scrape.
"""

import dataclasses
import threading
from typing import Any

from pgx_exporter.core.pool_stat import PoolStat
from pgx_exporter.core.protocols.pool_stats import PoolStatsProvider


class FakePoolStatsProvider(PoolStatsProvider):
    """In-memory pool implementing the PoolStatsProvider protocol.

    Usage:
        pool = FakePoolStatsProvider(PoolStat(acquire_count=10, idle_conns=4))
        pool.advance(acquire_count=1)
        assert pool.stat().acquire_count == 11
    """

    def __init__(self, stat: PoolStat | None = None) -> None:
        self._lock = threading.Lock()
        self._stat = stat or PoolStat()
        self.stat_calls: int = 0

    def stat(self) -> PoolStat:
        with self._lock:
            self.stat_calls += 1
            return self._stat

    # -- test helpers --

    def set(self, stat: PoolStat) -> None:
        """Replace the snapshot returned by ``stat()``."""
        with self._lock:
            self._stat = stat

    def advance(self, **deltas: Any) -> PoolStat:
        """Add ``deltas`` to the named fields and return the new snapshot."""
        with self._lock:
            changes = {name: getattr(self._stat, name) + delta for name, delta in deltas.items()}
            self._stat = dataclasses.replace(self._stat, **changes)
            return self._stat

    def clear(self) -> None:
        """Reset the snapshot and call count."""
        with self._lock:
            self._stat = PoolStat()
            self.stat_calls = 0
