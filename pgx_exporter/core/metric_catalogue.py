"""Static catalogue of the metrics published for a connection pool.

Each ``MetricDefinition`` binds a fully-qualified metric name, its help
text and Prometheus type to a ``StatField`` selector.  The collector builds
the catalogue once and replays it against a fresh ``PoolStat`` on every
scrape.
"""

import enum
from dataclasses import dataclass

from pgx_exporter.core.exceptions import DuplicateMetricError
from pgx_exporter.core.pool_stat import PoolStat

SUBSYSTEM = "pgx"


class ValueKind(str, enum.Enum):
    """Prometheus value type of a published metric."""

    COUNTER = "counter"
    GAUGE = "gauge"


class StatField(str, enum.Enum):
    """Selector for one field of a ``PoolStat``."""

    ACQUIRE_COUNT = "acquire_count"
    ACQUIRE_DURATION = "acquire_duration"
    ACQUIRED_CONNS = "acquired_conns"
    CANCELED_ACQUIRE_COUNT = "canceled_acquire_count"
    CONSTRUCTING_CONNS = "constructing_conns"
    EMPTY_ACQUIRE_COUNT = "empty_acquire_count"
    IDLE_CONNS = "idle_conns"
    MAX_CONNS = "max_conns"
    TOTAL_CONNS = "total_conns"

    def extract(self, stat: PoolStat) -> float:
        """Read this field from ``stat`` as a float (durations in seconds)."""
        if self is StatField.ACQUIRE_DURATION:
            return stat.acquire_duration.total_seconds()
        return float(getattr(stat, self.value))


@dataclass(frozen=True)
class MetricDefinition:
    """One published metric: identity, help text, type and source field."""

    name: str
    documentation: str
    kind: ValueKind
    field: StatField

    def extract(self, stat: PoolStat) -> float:
        return self.field.extract(stat)


def build_fq_name(namespace: str, subsystem: str, name: str) -> str:
    """Join the non-empty parts of a metric name with underscores.

    An empty ``name`` yields an empty string, matching the Prometheus
    client convention for fully-qualified names.
    """
    if not name:
        return ""
    return "_".join(part for part in (namespace, subsystem, name) if part)


# (suffix, help, kind, field) in publication order.
_CATALOGUE: tuple[tuple[str, str, ValueKind, StatField], ...] = (
    (
        "acquire_count",
        "The cumulative count of successful acquires from the pool.",
        ValueKind.COUNTER,
        StatField.ACQUIRE_COUNT,
    ),
    (
        "acquire_duration",
        "The total duration of all successful acquires from the pool.",
        ValueKind.COUNTER,
        StatField.ACQUIRE_DURATION,
    ),
    (
        "acquire_conns",
        "The number of currently acquired connections in the pool.",
        ValueKind.GAUGE,
        StatField.ACQUIRED_CONNS,
    ),
    (
        "canceled_acquire_count",
        "The cumulative count of acquires from the pool that were canceled by a context.",
        ValueKind.COUNTER,
        StatField.CANCELED_ACQUIRE_COUNT,
    ),
    (
        "constructing_conns",
        "The number of conns with construction in progress in the pool.",
        ValueKind.GAUGE,
        StatField.CONSTRUCTING_CONNS,
    ),
    (
        "empty_acquire_count",
        "The cumulative count of successful acquires from the pool that waited for a "
        "resource to be released or constructed because the pool was empty.",
        ValueKind.COUNTER,
        StatField.EMPTY_ACQUIRE_COUNT,
    ),
    (
        "idle_conns",
        "The number of currently idle conns in the pool.",
        ValueKind.GAUGE,
        StatField.IDLE_CONNS,
    ),
    (
        "max_conns",
        "The maximum size of the pool.",
        ValueKind.GAUGE,
        StatField.MAX_CONNS,
    ),
    (
        "total_conns",
        "The total number of resources currently in the pool. The value is the sum of "
        "constructing_conns, acquired_conns, and idle_conns.",
        ValueKind.GAUGE,
        StatField.TOTAL_CONNS,
    ),
)


def build_catalogue(namespace: str) -> tuple[MetricDefinition, ...]:
    """Build the ordered, immutable metric catalogue for ``namespace``.

    Raises:
        DuplicateMetricError: if two definitions share a fully-qualified name.
    """
    definitions = tuple(
        MetricDefinition(
            name=build_fq_name(namespace, SUBSYSTEM, suffix),
            documentation=documentation,
            kind=kind,
            field=field,
        )
        for suffix, documentation, kind, field in _CATALOGUE
    )

    seen: set[str] = set()
    for definition in definitions:
        if definition.name in seen:
            raise DuplicateMetricError(f"Metric '{definition.name}' is defined more than once.")
        seen.add(definition.name)

    return definitions
