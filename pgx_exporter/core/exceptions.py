"""Exceptions raised by the pool exporter."""


class PgxExporterError(Exception):
    """Base class for all exporter errors."""


class InvalidPoolError(PgxExporterError, ValueError):
    """Raised when a collector is constructed without a usable pool."""


class DuplicateMetricError(PgxExporterError, ValueError):
    """Raised when the metric catalogue contains the same name twice."""


class MetricsRegistrationError(PgxExporterError):
    """Raised when the metrics registry rejects the pool collector."""
