"""Prometheus implementation of the MetricsRenderer protocol.

Negotiates between the Prometheus text format and OpenMetrics with
``prometheus_client``'s own encoder selection.  OpenMetrics keeps the
pool counters' ``_total`` samples typed as counters and ends with
``# EOF``.
"""

from typing import Optional

from prometheus_client import CollectorRegistry
from prometheus_client.exposition import choose_encoder

from pgx_exporter.core.protocols.metrics_renderer import MetricsRenderer


class PrometheusMetricsRenderer(MetricsRenderer):
    """Render a CollectorRegistry in the format the scraper accepts."""

    def __init__(self, registry: CollectorRegistry) -> None:
        self._registry = registry

    def render(self, accept: Optional[str] = None) -> tuple[bytes, str]:
        encoder, content_type = choose_encoder(accept or "")
        return encoder(self._registry), content_type
