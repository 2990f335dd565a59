"""
HTTP liveness endpoint

A single route that answers while the process is up. It never looks at
session state.
"""

import logging
from typing import Optional

from aiohttp import web

from .config.bot_config import HealthConfig

logger = logging.getLogger(__name__)

LIVENESS_TEXT = "Bot has arrived"


async def handle_liveness(request: web.Request) -> web.Response:
    return web.Response(text=LIVENESS_TEXT)


def create_health_app() -> web.Application:
    app = web.Application()
    app.router.add_get("/", handle_liveness)
    return app


class HealthServer:
    """Runs the liveness app on the current event loop"""

    def __init__(self, config: HealthConfig):
        self.config = config
        self._runner: Optional[web.AppRunner] = None

    async def start(self):
        self._runner = web.AppRunner(create_health_app())
        await self._runner.setup()
        site = web.TCPSite(self._runner, self.config.host, self.config.port)
        await site.start()
        logger.info(f"Server started on {self.config.host}:{self.config.port}")

    async def stop(self):
        if self._runner is not None:
            await self._runner.cleanup()
            self._runner = None
            logger.info("Server stopped")
