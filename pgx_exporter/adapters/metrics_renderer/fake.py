"""Fake MetricsRenderer for testing.

Records the Accept header of every render() call so server tests can
assert on negotiation without depending on prometheus-client.
"""

from typing import Optional

from pgx_exporter.core.protocols.metrics_renderer import MetricsRenderer


class FakeMetricsRenderer(MetricsRenderer):
    """In-memory spy implementing the MetricsRenderer protocol."""

    def __init__(
        self,
        body: bytes = b"# fake metrics\n",
        content_type: str = "text/plain",
        error: Exception | None = None,
    ) -> None:
        self.body = body
        self.content_type = content_type
        self.error = error
        self.accepts: list[Optional[str]] = []

    @property
    def render_calls(self) -> int:
        return len(self.accepts)

    def render(self, accept: Optional[str] = None) -> tuple[bytes, str]:
        self.accepts.append(accept)
        if self.error is not None:
            raise self.error
        return self.body, self.content_type
