"""HTTP server exposing the generated feed."""

from __future__ import annotations

import logging
import threading
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse, Response

from .config import MonitorConfig
from .monitor import Monitor
from .publisher import read_feed

logger = logging.getLogger(__name__)


def create_app(
    config: MonitorConfig,
    *,
    start_monitor: bool = True,
    monitor: Optional[Monitor] = None,
) -> FastAPI:
    """
    Build the app serving ``/feed.xml``.

    With `start_monitor`, the monitor loop runs in a background thread for the
    lifetime of the app and is stopped between cycles on shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if not start_monitor:
            yield
            return

        stop_event = threading.Event()
        worker = threading.Thread(
            target=(monitor or Monitor(config)).run_forever,
            kwargs={"stop_event": stop_event},
            name="rss-monitor",
            daemon=True,
        )
        worker.start()
        try:
            yield
        finally:
            stop_event.set()
            worker.join(timeout=config.timeout + 1)

    app = FastAPI(title="RSS Monitor", lifespan=lifespan)

    @app.get("/feed.xml")
    def get_feed():
        """Serve the current feed document."""
        content = read_feed(config.feeds_dir, config.feed_name)
        if content is None:
            return PlainTextResponse("Feed not yet generated", status_code=404)
        return Response(content=content, media_type="application/xml")

    return app


def serve(config: MonitorConfig) -> None:
    """Run the server (and the monitor loop) until interrupted."""
    import uvicorn

    app = create_app(config)
    logger.info("Server running on http://%s:%d", config.server.host, config.server.port)
    uvicorn.run(app, host=config.server.host, port=config.server.port, log_config=None)
