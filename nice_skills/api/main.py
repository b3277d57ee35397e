"""HTTP transport exposing the same tools as the MCP server."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI

from ..core.config import Settings, load_settings
from .context import ToolContext
from .dispatch import Dispatcher
from .routers import health, tools


class HealthPollFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        # Suppress GET /healthz access logs from liveness probes
        return "/healthz" not in record.getMessage()


logging.getLogger("uvicorn.access").addFilter(HealthPollFilter())


def create_app(context: Optional[ToolContext] = None, settings: Optional[Settings] = None) -> FastAPI:
    """Build the FastAPI app around ``context``.

    When no context is given one is built from ``settings`` (or the
    environment). The tool context is released when the app shuts down.
    """
    settings = settings or load_settings()
    context = context or ToolContext.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await context.aclose()

    app = FastAPI(title="Nice Skills", version=settings.version, lifespan=lifespan)
    app.state.dispatcher = Dispatcher(context)
    app.include_router(health.router)
    app.include_router(tools.router)
    return app
