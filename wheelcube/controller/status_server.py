#!/usr/bin/env python3
"""
status_server.py - Read-only HTTP Status Endpoint

Serves the controller's telemetry to dashboards and scripts. There are no
POST routes; consumers can observe the vehicle but never change it.

Endpoints:
    GET /           Small status page polling /status
    GET /status     Controller status as JSON
    GET /waypoints  Waypoint path and current target as JSON

Usage:
    from wheelcube.controller.status_server import StatusServer

    server = StatusServer(controller)
    await server.start()
    ...
    await server.stop()

    # curl http://localhost:8080/status
"""

import logging
from typing import Optional

from aiohttp import web

from wheelcube.controller.config import STATUS_SERVER_CONFIG, StatusServerConfig
from wheelcube.controller.vehicle_controller import VehicleController

logger = logging.getLogger(__name__)

STATUS_PAGE = """
<html>
<head>
    <title>Vehicle Controller Status</title>
    <style>
        body { font-family: Arial, sans-serif; margin: 20px; }
        .status-box { padding: 10px; margin: 10px 0; border-radius: 5px; }
        .manual { background: #fff3cd; border: 1px solid #ffc107; }
        .auto { background: #d4edda; border: 1px solid #28a745; }
        pre { background: #f5f5f5; padding: 10px; overflow-x: auto; }
    </style>
</head>
<body>
<h1>Vehicle Controller</h1>

<div id="mode-status" class="status-box">
    Mode: <strong id="mode">loading...</strong>
    | Waypoint: <strong id="waypoint">-</strong>
    | Last input: <span id="idle">-</span>s ago
</div>
<pre id="vehicle"></pre>

<script>
function updateStatus() {
    fetch('/status')
        .then(r => r.json())
        .then(d => {
            const box = document.getElementById('mode-status');
            document.getElementById('mode').innerText = d.arbiter.mode.toUpperCase();
            document.getElementById('waypoint').innerText =
                d.navigator.current_index + ' (' + (d.navigator.direction > 0 ? '+' : '-') + ')';
            document.getElementById('idle').innerText = d.arbiter.time_since_input.toFixed(1);
            document.getElementById('vehicle').innerText = JSON.stringify(d.vehicle, null, 2);
            box.className = 'status-box ' + (d.arbiter.mode === 'manual' ? 'manual' : 'auto');
        });
}
updateStatus();
setInterval(updateStatus, 500);
</script>
</body>
</html>
"""


class StatusServer:
    """
    aiohttp server exposing controller status.

    Attributes:
        controller: Controller being observed.
        config: Server configuration.
    """

    def __init__(
        self,
        controller: VehicleController,
        config: Optional[StatusServerConfig] = None,
    ):
        """
        Initialize the status server.

        Args:
            controller: Controller to observe.
            config: Server configuration. Uses defaults if None.
        """
        self.controller = controller
        self.config = config or STATUS_SERVER_CONFIG
        self._runner: Optional[web.AppRunner] = None
        self._site: Optional[web.TCPSite] = None

    @property
    def is_running(self) -> bool:
        return self._runner is not None

    def create_app(self) -> web.Application:
        """Build the aiohttp application with all routes."""
        app = web.Application()
        app.router.add_get("/", self._handle_root)
        app.router.add_get("/status", self._handle_status)
        app.router.add_get("/waypoints", self._handle_waypoints)
        return app

    async def start(self) -> None:
        """Start the HTTP server if enabled."""
        if self.is_running:
            logger.warning("StatusServer already running")
            return

        if not self.config.enable_http:
            logger.info("HTTP status server disabled")
            return

        self._runner = web.AppRunner(self.create_app())
        await self._runner.setup()

        self._site = web.TCPSite(
            self._runner,
            self.config.http_host,
            self.config.http_port,
        )
        await self._site.start()

        logger.info(
            "HTTP status server started on http://%s:%d",
            self.config.http_host,
            self.config.http_port,
        )

    async def stop(self) -> None:
        """Stop the HTTP server."""
        if self._runner:
            await self._runner.cleanup()
            self._runner = None
            self._site = None
            logger.info("HTTP status server stopped")

    async def _handle_root(self, request: web.Request) -> web.Response:
        """Handle root endpoint with status page."""
        return web.Response(text=STATUS_PAGE, content_type="text/html")

    async def _handle_status(self, request: web.Request) -> web.Response:
        """Handle GET /status endpoint."""
        return web.json_response(self.controller.get_status())

    async def _handle_waypoints(self, request: web.Request) -> web.Response:
        """Handle GET /waypoints endpoint."""
        navigator = self.controller.navigator
        return web.json_response({
            "waypoints": navigator.waypoints.tolist(),
            **navigator.get_status(),
        })
