"""Fake PoolCollector for testing.

Counts describe()/collect() calls and replays preset metric families so
service and server tests do not need a pool.
"""

from typing import Iterator

from prometheus_client.metrics_core import GaugeMetricFamily, Metric

from pgx_exporter.core.protocols.pool_collector import PoolCollector


class FakePoolCollector(PoolCollector):
    """In-memory spy implementing the PoolCollector protocol.

    Usage:
        fake = FakePoolCollector()
        registry.register(fake)
        assert fake.describe_calls == 1
    """

    def __init__(self, name: str = "fake_pgx_idle_conns", value: float = 0.0) -> None:
        self.name = name
        self.value = value
        self.describe_calls: int = 0
        self.collect_calls: int = 0

    def describe(self) -> Iterator[Metric]:
        self.describe_calls += 1
        yield GaugeMetricFamily(self.name, "Fake pool gauge")

    def collect(self) -> Iterator[Metric]:
        self.collect_calls += 1
        yield GaugeMetricFamily(self.name, "Fake pool gauge", value=self.value)

    # -- test helpers --

    def clear(self) -> None:
        """Reset all recorded state."""
        self.describe_calls = 0
        self.collect_calls = 0
