"""Command line entry point.

Usage:
    # MCP server on stdio (what agent hosts launch)
    nice-skills

    # Same tools over HTTP
    nice-skills --transport http --port 8765
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from .core.config import Settings, load_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    # stdout carries the MCP protocol, so logs always go to stderr
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)


async def _serve_stdio(settings: Settings) -> None:
    from .api.context import ToolContext
    from .api.dispatch import Dispatcher
    from .api.server import run_stdio

    context = ToolContext.from_settings(settings)
    try:
        await run_stdio(Dispatcher(context))
    finally:
        await context.aclose()


def _serve_http(settings: Settings, host: str, port: int) -> None:
    import uvicorn

    from .api.main import create_app

    uvicorn.run(create_app(settings=settings), host=host, port=port, log_level=settings.log_level.lower())


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="nice-skills", description="Screen recording, browser and Postman automation tools.")
    parser.add_argument("--transport", choices=("stdio", "http"), default="stdio")
    parser.add_argument("--host", default=None, help="HTTP bind address (default: NICE_SKILLS_HOST or 127.0.0.1)")
    parser.add_argument("--port", type=int, default=None, help="HTTP port (default: NICE_SKILLS_PORT or 8765)")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ... (default: NICE_SKILLS_LOG_LEVEL or INFO)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings()
    except ValueError as exc:
        _configure_logging("INFO")
        logger.error(f"Invalid configuration: {exc}")
        return 2

    _configure_logging((args.log_level or settings.log_level).upper())

    try:
        if args.transport == "http":
            _serve_http(settings, args.host or settings.host, args.port or settings.port)
        else:
            asyncio.run(_serve_stdio(settings))
    except KeyboardInterrupt:
        return 0
    except Exception:
        logger.exception("Fatal error")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
