"""Metrics renderer adapters."""

from pgx_exporter.adapters.metrics_renderer.fake import FakeMetricsRenderer
from pgx_exporter.adapters.metrics_renderer.prometheus import PrometheusMetricsRenderer

__all__ = ["PrometheusMetricsRenderer", "FakeMetricsRenderer"]
