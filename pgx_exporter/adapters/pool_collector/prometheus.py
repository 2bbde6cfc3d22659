"""Prometheus implementation of the PoolCollector protocol.

A custom collector in the ``prometheus_client`` sense: it owns no metric
objects of its own.  ``describe()`` replays the static catalogue without
values; ``collect()`` takes a single ``pool.stat()`` snapshot and turns
every catalogue entry into a const metric family from that one snapshot.

Construction does not register anything.  Callers register explicitly:

    collector = PrometheusPoolCollector("app", pool)
    registry.register(collector)
"""

from typing import Iterator

from prometheus_client.metrics_core import CounterMetricFamily, GaugeMetricFamily, Metric

from pgx_exporter.core.exceptions import InvalidPoolError
from pgx_exporter.core.logging import logger
from pgx_exporter.core.metric_catalogue import MetricDefinition, ValueKind, build_catalogue
from pgx_exporter.core.protocols.pool_collector import PoolCollector
from pgx_exporter.core.protocols.pool_stats import PoolStatsProvider

_FAMILIES = {
    ValueKind.COUNTER: CounterMetricFamily,
    ValueKind.GAUGE: GaugeMetricFamily,
}


def _family(definition: MetricDefinition, value: float | None = None) -> Metric:
    return _FAMILIES[definition.kind](definition.name, definition.documentation, value=value)


class PrometheusPoolCollector(PoolCollector):
    """Prometheus collector for connection pool statistics."""

    def __init__(self, namespace: str, pool: PoolStatsProvider) -> None:
        """Bind the collector to ``pool`` and build its metric catalogue.

        Args:
            namespace: Metric name prefix; may be empty.
            pool: Live pool exposing a zero-argument ``stat()``.

        Raises:
            InvalidPoolError: if ``pool`` is None or has no callable ``stat``.
        """
        if pool is None or not callable(getattr(pool, "stat", None)):
            raise InvalidPoolError(
                f"PrometheusPoolCollector needs a pool with a stat() method, got {pool!r}."
            )
        self._namespace = namespace
        self._pool = pool
        self._definitions = build_catalogue(namespace)

        logger.with_context(namespace=namespace or "<none>").debug(
            f"Pool collector built with {len(self._definitions)} metrics"
        )

    @property
    def namespace(self) -> str:
        return self._namespace

    @property
    def pool(self) -> PoolStatsProvider:
        return self._pool

    @property
    def definitions(self) -> tuple[MetricDefinition, ...]:
        return self._definitions

    # -- PoolCollector protocol methods --

    def describe(self) -> Iterator[Metric]:
        for definition in self._definitions:
            yield _family(definition)

    def collect(self) -> Iterator[Metric]:
        # One snapshot per scrape keeps all values from the same instant.
        stat = self._pool.stat()
        for definition in self._definitions:
            yield _family(definition, definition.extract(stat))


def new_pool_collector(namespace: str, pool: PoolStatsProvider) -> PrometheusPoolCollector:
    """Return a new collector for ``pool`` under ``namespace`` (may be empty)."""
    return PrometheusPoolCollector(namespace, pool)
