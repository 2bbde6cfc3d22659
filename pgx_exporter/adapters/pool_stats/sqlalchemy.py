"""SQLAlchemy implementation of the PoolStatsProvider protocol.

SQLAlchemy pools expose live gauges (``checkedin()``, ``checkedout()``,
``size()``) but keep no acquisition history.  ``SqlAlchemyPoolStats``
adds the cumulative counters by hooking the pool itself:

* the ``checkout`` pool event counts every successful acquire, whether it
  came from ``engine.connect()``, a Session or ``pool.connect()``;
* the ``connect`` pool event marks the end of a connection build;
* the pool's ``connect`` is wrapped to time each acquisition and to count
  empty and timed-out acquires.

``stat()`` then combines both into one ``PoolStat``.
"""

import threading
import time
from contextlib import contextmanager
from datetime import timedelta
from typing import Any, Callable, Iterator, Optional, Union

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.pool import PoolProxiedConnection, QueuePool

from pgx_exporter.core.pool_stat import PoolStat
from pgx_exporter.core.protocols.pool_stats import PoolStatsProvider


class SqlAlchemyPoolStats(PoolStatsProvider):
    """Acquisition statistics for a SQLAlchemy ``QueuePool``.

    Binding is done once, at construction; ``close()`` unbinds.  The
    binding follows the pool object, so re-create the stats after
    ``engine.dispose()`` swaps in a new pool.

    Usage:
        stats = SqlAlchemyPoolStats(engine)
        collector = PrometheusPoolCollector("app", stats)
        with engine.connect() as conn:  # counted
            ...
    """

    def __init__(
        self,
        pool: Union[QueuePool, Engine],
        *,
        max_overflow: Optional[int] = None,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        """Bind to ``pool`` (or an Engine's pool).

        Args:
            pool: The pool to observe.
            max_overflow: Overflow limit; read from the pool when omitted.
                A negative value means overflow is unbounded.
            clock: Monotonic time source used to time acquisitions.
        """
        self._pool: QueuePool = pool.pool if isinstance(pool, Engine) else pool
        if max_overflow is None:
            # QueuePool only keeps its configured limit privately.
            max_overflow = getattr(self._pool, "_max_overflow", 0)
        self._max_overflow = max_overflow
        self._clock = clock
        self._lock = threading.Lock()
        self._local = threading.local()

        self._acquire_count = 0
        self._acquire_seconds = 0.0
        self._canceled_acquire_count = 0
        self._empty_acquire_count = 0
        self._constructing = 0

        self._pool_connect = self._pool.connect
        self._pool.connect = self._timed_connect  # type: ignore[method-assign]
        event.listen(self._pool, "checkout", self._on_checkout)
        event.listen(self._pool, "connect", self._on_connect)

    @property
    def max_conns(self) -> int:
        """Configured pool bound; 0 when overflow is unbounded."""
        if self._max_overflow < 0:
            return 0
        return self._pool.size() + self._max_overflow

    def _has_headroom(self) -> bool:
        return self._max_overflow < 0 or self._pool.checkedout() < self.max_conns

    # -- pool hooks --

    def _timed_connect(self) -> PoolProxiedConnection:
        with self._lock:
            empty = self._pool.checkedin() == 0
            # An empty pool with headroom builds a new connection for us.
            building = empty and self._has_headroom()
            if building:
                self._constructing += 1
        self._local.building = building

        started = self._clock()
        try:
            conn = self._pool_connect()
        except PoolTimeoutError:
            with self._lock:
                self._canceled_acquire_count += 1
            raise
        finally:
            self._finish_building()
        elapsed = self._clock() - started

        with self._lock:
            self._acquire_seconds += elapsed
            if empty:
                self._empty_acquire_count += 1
        return conn

    def _finish_building(self) -> None:
        if getattr(self._local, "building", False):
            self._local.building = False
            with self._lock:
                self._constructing -= 1

    def _on_connect(self, dbapi_connection: Any, connection_record: Any) -> None:
        self._finish_building()

    def _on_checkout(
        self, dbapi_connection: Any, connection_record: Any, connection_proxy: Any
    ) -> None:
        with self._lock:
            self._acquire_count += 1

    def close(self) -> None:
        """Detach from the pool; later acquisitions are no longer counted."""
        event.remove(self._pool, "checkout", self._on_checkout)
        event.remove(self._pool, "connect", self._on_connect)
        self._pool.connect = self._pool_connect  # type: ignore[method-assign]

    @contextmanager
    def acquire(self) -> Iterator[PoolProxiedConnection]:
        """Check out a connection and return it to the pool on exit."""
        conn = self._pool.connect()
        try:
            yield conn
        finally:
            conn.close()

    # -- PoolStatsProvider protocol method --

    def stat(self) -> PoolStat:
        with self._lock:
            idle = self._pool.checkedin()
            # checkedout() already counts a connection the pool is building.
            acquired = max(self._pool.checkedout() - self._constructing, 0)
            return PoolStat(
                acquire_count=self._acquire_count,
                acquire_duration=timedelta(seconds=self._acquire_seconds),
                acquired_conns=acquired,
                canceled_acquire_count=self._canceled_acquire_count,
                constructing_conns=self._constructing,
                empty_acquire_count=self._empty_acquire_count,
                idle_conns=idle,
                max_conns=self.max_conns,
                total_conns=self._constructing + acquired + idle,
            )
