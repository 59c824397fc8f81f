#!/usr/bin/env python
"""
Start the SubVault HTTP API under uvicorn.

Usage:
    uv run python run_api.py
    uv run python run_api.py --reload               # Development mode
    uv run python run_api.py --log-level debug
    uv run python run_api.py --proxy-headers        # Behind a TLS-terminating proxy

Host, port and reload default to HOST / PORT / RELOAD from the environment.
"""

import argparse
import uvicorn

from shared.config import get_settings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Serve the SubVault API")
    parser.add_argument("--reload", action="store_true", help="Restart on code changes")
    parser.add_argument("--host", type=str, help="Interface to bind (default: HOST)")
    parser.add_argument("--port", type=int, help="Port to bind (default: PORT)")
    parser.add_argument(
        "--log-level",
        choices=["critical", "error", "warning", "info", "debug"],
        help="uvicorn log level (default: LOG_LEVEL)",
    )
    parser.add_argument(
        "--proxy-headers",
        action="store_true",
        help="Trust X-Forwarded-* headers for the client address and scheme",
    )
    return parser


def main():
    args = build_parser().parse_args()
    settings = get_settings()

    uvicorn.run(
        "api:app",
        host=args.host or settings.host,
        port=args.port or settings.port,
        reload=args.reload or settings.reload,
        log_level=args.log_level or settings.log_level.lower(),
        proxy_headers=args.proxy_headers,
    )


if __name__ == "__main__":
    main()
