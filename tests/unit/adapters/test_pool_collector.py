"""Unit tests for the Prometheus pool collector."""

import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta

import pytest
from prometheus_client import CollectorRegistry, generate_latest

from pgx_exporter.adapters.pool_collector import (
    FakePoolCollector,
    PrometheusPoolCollector,
    new_pool_collector,
)
from pgx_exporter.adapters.pool_stats import FakePoolStatsProvider
from pgx_exporter.core.exceptions import InvalidPoolError
from pgx_exporter.core.pool_stat import PoolStat
from pgx_exporter.core.protocols import PoolCollector

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


EXAMPLE_STAT = PoolStat(
    acquire_count=10,
    acquire_duration=timedelta(seconds=2),
    acquired_conns=1,
    canceled_acquire_count=0,
    constructing_conns=0,
    empty_acquire_count=3,
    idle_conns=4,
    max_conns=5,
    total_conns=5,
)

COUNTERS = {
    "app_pgx_acquire_count",
    "app_pgx_acquire_duration",
    "app_pgx_canceled_acquire_count",
    "app_pgx_empty_acquire_count",
}


def _values(collector: PrometheusPoolCollector) -> dict[str, float]:
    """Run one collection and map family name -> sample value."""
    return {family.name: family.samples[0].value for family in collector.collect()}


class RaisingPool:
    """Pool whose stat() fails."""

    def stat(self) -> PoolStat:
        raise RuntimeError("pool closed")


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


class TestConstruction:
    """Tests for building a collector."""

    def test_none_pool_is_rejected(self):
        with pytest.raises(InvalidPoolError):
            PrometheusPoolCollector("app", None)  # type: ignore[arg-type]

    def test_pool_without_stat_is_rejected(self):
        with pytest.raises(ValueError):
            PrometheusPoolCollector("app", object())  # type: ignore[arg-type]

    def test_construction_does_not_read_the_pool(self):
        pool = FakePoolStatsProvider(EXAMPLE_STAT)
        PrometheusPoolCollector("app", pool)

        assert pool.stat_calls == 0

    def test_factory_returns_collector(self):
        pool = FakePoolStatsProvider()
        collector = new_pool_collector("app", pool)

        assert isinstance(collector, PrometheusPoolCollector)
        assert isinstance(collector, PoolCollector)
        assert collector.namespace == "app"
        assert collector.pool is pool
        assert len(collector.definitions) == 9


# ---------------------------------------------------------------------------
# describe()
# ---------------------------------------------------------------------------


class TestDescribe:
    """Tests for metadata enumeration."""

    def test_yields_families_without_samples(self):
        collector = PrometheusPoolCollector("app", FakePoolStatsProvider())

        families = list(collector.describe())

        assert len(families) == 9
        assert all(family.samples == [] for family in families)

    def test_does_not_take_a_snapshot(self):
        pool = FakePoolStatsProvider()
        collector = PrometheusPoolCollector("app", pool)

        list(collector.describe())

        assert pool.stat_calls == 0

    def test_describe_and_collect_enumerate_same_identities_in_order(self):
        collector = PrometheusPoolCollector("app", FakePoolStatsProvider(EXAMPLE_STAT))

        described = [(f.name, f.type, f.documentation) for f in collector.describe()]
        collected = [(f.name, f.type, f.documentation) for f in collector.collect()]

        assert described == collected
        assert described == [(f.name, f.type, f.documentation) for f in collector.describe()]


# ---------------------------------------------------------------------------
# collect()
# ---------------------------------------------------------------------------


class TestCollect:
    """Tests for per-scrape value collection."""

    def test_end_to_end_example(self):
        collector = PrometheusPoolCollector("app", FakePoolStatsProvider(EXAMPLE_STAT))

        emitted = [(f.name, f.samples[0].value, f.type) for f in collector.collect()]

        assert emitted == [
            ("app_pgx_acquire_count", 10.0, "counter"),
            ("app_pgx_acquire_duration", 2.0, "counter"),
            ("app_pgx_acquire_conns", 1.0, "gauge"),
            ("app_pgx_canceled_acquire_count", 0.0, "counter"),
            ("app_pgx_constructing_conns", 0.0, "gauge"),
            ("app_pgx_empty_acquire_count", 3.0, "counter"),
            ("app_pgx_idle_conns", 4.0, "gauge"),
            ("app_pgx_max_conns", 5.0, "gauge"),
            ("app_pgx_total_conns", 5.0, "gauge"),
        ]

    def test_takes_exactly_one_snapshot_per_collect(self):
        pool = FakePoolStatsProvider(EXAMPLE_STAT)
        collector = PrometheusPoolCollector("app", pool)

        list(collector.collect())

        assert pool.stat_calls == 1

    def test_samples_are_unlabelled(self):
        collector = PrometheusPoolCollector("app", FakePoolStatsProvider(EXAMPLE_STAT))

        for family in collector.collect():
            assert len(family.samples) == 1
            assert family.samples[0].labels == {}

    def test_empty_namespace_prefix(self):
        collector = PrometheusPoolCollector("", FakePoolStatsProvider(EXAMPLE_STAT))

        assert all(name.startswith("pgx_") for name in _values(collector))

    def test_namespace_prefix(self):
        collector = PrometheusPoolCollector("svc", FakePoolStatsProvider(EXAMPLE_STAT))

        assert all(name.startswith("svc_pgx_") for name in _values(collector))

    def test_total_conns_is_reported_not_recomputed(self):
        stat = PoolStat(constructing_conns=2, acquired_conns=3, idle_conns=5, total_conns=12)
        collector = PrometheusPoolCollector("app", FakePoolStatsProvider(stat))

        assert _values(collector)["app_pgx_total_conns"] == 12.0

    def test_duration_is_emitted_in_seconds(self):
        stat = PoolStat(acquire_duration=timedelta(milliseconds=1500))
        collector = PrometheusPoolCollector("app", FakePoolStatsProvider(stat))

        assert _values(collector)["app_pgx_acquire_duration"] == 1.5

    def test_counters_do_not_decrease_between_scrapes(self):
        pool = FakePoolStatsProvider(EXAMPLE_STAT)
        collector = PrometheusPoolCollector("app", pool)

        first = _values(collector)
        pool.advance(
            acquire_count=5,
            acquire_duration=timedelta(milliseconds=250),
            canceled_acquire_count=1,
            empty_acquire_count=2,
            idle_conns=-3,
            acquired_conns=3,
        )
        second = _values(collector)

        for name in COUNTERS:
            assert second[name] >= first[name]
        assert second["app_pgx_acquire_count"] == 15.0
        assert second["app_pgx_acquire_duration"] == 2.25
        assert second["app_pgx_idle_conns"] < first["app_pgx_idle_conns"]

    def test_pool_errors_propagate(self):
        collector = PrometheusPoolCollector("app", RaisingPool())

        with pytest.raises(RuntimeError, match="pool closed"):
            list(collector.collect())

    def test_concurrent_collects_are_self_consistent(self):
        """Every scrape must see one snapshot, even while the pool changes."""
        pool = FakePoolStatsProvider()
        collector = PrometheusPoolCollector("app", pool)
        stop = threading.Event()

        def writer() -> None:
            i = 0
            while not stop.is_set():
                i += 1
                pool.set(
                    PoolStat(
                        acquire_count=i,
                        empty_acquire_count=i,
                        idle_conns=i,
                        total_conns=i,
                        max_conns=i,
                    )
                )

        thread = threading.Thread(target=writer)
        thread.start()
        try:
            with ThreadPoolExecutor(max_workers=8) as executor:
                results = list(executor.map(lambda _: _values(collector), range(200)))
        finally:
            stop.set()
            thread.join()

        for values in results:
            assert len(values) == 9
            assert (
                values["app_pgx_acquire_count"]
                == values["app_pgx_empty_acquire_count"]
                == values["app_pgx_idle_conns"]
                == values["app_pgx_total_conns"]
                == values["app_pgx_max_conns"]
            )
        assert pool.stat_calls == 200


# ---------------------------------------------------------------------------
# Registry integration
# ---------------------------------------------------------------------------


class TestRegistryIntegration:
    """Tests against a real prometheus-client CollectorRegistry."""

    def test_register_uses_describe_not_collect(self):
        pool = FakePoolStatsProvider(EXAMPLE_STAT)
        registry = CollectorRegistry()

        registry.register(PrometheusPoolCollector("app", pool))

        assert pool.stat_calls == 0

    def test_duplicate_namespace_is_rejected_by_registry(self):
        registry = CollectorRegistry()
        registry.register(PrometheusPoolCollector("app", FakePoolStatsProvider()))

        with pytest.raises(ValueError):
            registry.register(PrometheusPoolCollector("app", FakePoolStatsProvider()))

    def test_distinct_namespaces_coexist(self):
        registry = CollectorRegistry()
        registry.register(PrometheusPoolCollector("primary", FakePoolStatsProvider()))
        registry.register(PrometheusPoolCollector("replica", FakePoolStatsProvider()))

    def test_sample_values_through_registry(self):
        registry = CollectorRegistry()
        registry.register(PrometheusPoolCollector("app", FakePoolStatsProvider(EXAMPLE_STAT)))

        # prometheus-client exposes counter samples with a _total suffix.
        assert registry.get_sample_value("app_pgx_acquire_count_total") == 10.0
        assert registry.get_sample_value("app_pgx_acquire_duration_total") == 2.0
        assert registry.get_sample_value("app_pgx_idle_conns") == 4.0
        assert registry.get_sample_value("app_pgx_total_conns") == 5.0

    def test_exposition_contains_types(self):
        registry = CollectorRegistry()
        registry.register(PrometheusPoolCollector("app", FakePoolStatsProvider(EXAMPLE_STAT)))

        output = generate_latest(registry).decode()

        assert "# TYPE app_pgx_max_conns gauge" in output
        assert "app_pgx_max_conns 5.0" in output
        assert "app_pgx_empty_acquire_count_total 3.0" in output


# ---------------------------------------------------------------------------
# FakePoolCollector
# ---------------------------------------------------------------------------


class TestFakePoolCollector:
    """Tests for the FakePoolCollector test helper."""

    def test_records_calls(self):
        fake = FakePoolCollector(value=3.0)
        registry = CollectorRegistry()
        registry.register(fake)

        assert registry.get_sample_value("fake_pgx_idle_conns") == 3.0
        assert fake.describe_calls == 1
        assert fake.collect_calls == 1

    def test_clear_resets_counts(self):
        fake = FakePoolCollector()
        list(fake.describe())
        list(fake.collect())

        fake.clear()

        assert fake.describe_calls == 0
        assert fake.collect_calls == 0
