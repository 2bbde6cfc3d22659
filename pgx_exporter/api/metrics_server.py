"""Sidecar HTTP server that serves ``GET /metrics`` for scrapers."""

import traceback
from typing import Optional

from aiohttp import web

from pgx_exporter.core.logging import logger
from pgx_exporter.core.protocols.metrics_renderer import MetricsRenderer


class MetricsServer:
    """aiohttp server exposing a MetricsRenderer on ``/metrics``.

    Runs next to the host application; ``start()`` and ``stop()`` are
    awaited from the host's lifecycle hooks.
    """

    def __init__(self, renderer: MetricsRenderer, port: int, host: str = "0.0.0.0") -> None:
        """Initialize the metrics server.

        Args:
            renderer: Serializes the registry on every scrape.
            port: The port to listen on; 0 lets the OS choose.
            host: The host to listen on.
        """
        self._renderer = renderer
        self._port = port
        self._host = host
        self._app = web.Application()
        self._app.add_routes([web.get("/metrics", self._handle_metrics)])
        self._runner: Optional[web.AppRunner] = None
        self._site: Optional[web.TCPSite] = None
        self._logger = logger.with_context(component="metrics_server", host=host, port=port)

    async def _handle_metrics(self, request: web.Request) -> web.Response:
        """Render the registry for one scrape.

        Returns:
            200 with the exposition body, or 500 if rendering failed.
        """
        try:
            body, content_type = self._renderer.render(request.headers.get("Accept"))
        except Exception as e:
            self._logger.error(f"Error rendering metrics: {e}\n{traceback.format_exc()}")
            return web.Response(text="Error\n", status=500)
        # Raw header: aiohttp's content_type argument rejects a charset parameter.
        return web.Response(body=body, headers={"Content-Type": content_type})

    async def start(self) -> None:
        """Start serving ``/metrics`` in the background."""
        self._runner = web.AppRunner(self._app)
        await self._runner.setup()
        self._site = web.TCPSite(self._runner, host=self._host, port=self._port)
        await self._site.start()
        self._logger.info(f"Metrics server listening on http://{self._host}:{self._port}/metrics")

    async def stop(self) -> None:
        """Stop the server gracefully; a no-op if it was never started."""
        if self._site:
            await self._site.stop()
            self._site = None
        if self._runner:
            await self._runner.cleanup()
            self._runner = None
