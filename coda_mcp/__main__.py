#!/usr/bin/env python3
"""
Coda MCP Server Entrypoint

Usage:
  python -m coda_mcp                      # MCP over stdio
  python -m coda_mcp --transport http     # HTTP API (FastAPI + uvicorn)
"""

import argparse
import asyncio
import logging
import sys

from .config import ConfigError, configure_logging, get_settings

logger = logging.getLogger("coda_mcp")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Coda MCP server")
    parser.add_argument(
        "--transport",
        choices=["stdio", "http"],
        default="stdio",
        help="Transport to serve tools on (default: stdio)",
    )
    parser.add_argument("--host", default=None, help="HTTP bind host (http transport only)")
    parser.add_argument("--port", type=int, default=None, help="HTTP bind port (http transport only)")
    return parser.parse_args(argv)


def main(argv=None) -> None:
    args = parse_args(argv)

    try:
        settings = get_settings()
        configure_logging(settings.log_level)

        if args.transport == "http":
            import uvicorn

            from .http_app import app

            uvicorn.run(app, host=args.host or settings.http_host, port=args.port or settings.http_port)
        else:
            from .server import run_stdio

            asyncio.run(run_stdio())
    except ConfigError as e:
        configure_logging()
        logger.error(f"Fatal error in main(): {e}")
        sys.exit(1)
    except Exception:
        logger.exception("Fatal error in main()")
        sys.exit(1)


if __name__ == "__main__":
    main()
