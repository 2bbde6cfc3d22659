"""MetricsRenderer protocol for serializing the pool metrics on a scrape.

The scraper's ``Accept`` header picks the exposition format, so a single
call returns both the body and the content type it was encoded with.
"""

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class MetricsRenderer(Protocol):
    """Protocol for rendering registered pool metrics for one scrape."""

    def render(self, accept: Optional[str] = None) -> tuple[bytes, str]:
        """Encode the registry for a scraper.

        Args:
            accept: The scrape request's ``Accept`` header, if any.

        Returns:
            ``(body, content_type)``; plain Prometheus text unless the
            scraper asked for OpenMetrics.
        """
        ...
