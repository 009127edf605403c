#!/usr/bin/env python3
"""
ChatRelay server - main entry point.

Usage:
    python server.py

Optional arguments:
    --host HOST          Bind address (default: CHATRELAY_HOST or 0.0.0.0)
    --port PORT          Listen port (default: CHATRELAY_PORT or 3000)
    --log-level LEVEL    Log level (default: CHATRELAY_LOG_LEVEL or INFO)
    --announce-departures
                         Tell remaining users when someone leaves
"""
import argparse

import uvicorn

from chatrelay.app import create_app
from chatrelay.config import get_settings
from chatrelay.logger import configure_logging, logger


def parse_args(argv=None):
    settings = get_settings()
    parser = argparse.ArgumentParser(description='ChatRelay broadcast chat server')
    parser.add_argument('--host', type=str, default=settings.host,
                        help=f'Host to bind to (default: {settings.host})')
    parser.add_argument('--port', type=int, default=settings.port,
                        help=f'Port to listen on (default: {settings.port})')
    parser.add_argument('--log-level', type=str, default=settings.log_level,
                        help=f'Log level (default: {settings.log_level})')
    parser.add_argument('--announce-departures', action='store_true',
                        default=settings.announce_departures,
                        help='Broadcast a notice when a user disconnects')
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    settings = get_settings().model_copy(update={
        'host': args.host,
        'port': args.port,
        'log_level': args.log_level,
        'announce_departures': args.announce_departures,
    })
    configure_logging(settings.log_level)

    app = create_app(settings)
    logger.info(f"Server binding to {settings.host}:{settings.port}")
    try:
        uvicorn.run(app, host=settings.host, port=settings.port,
                    log_level=settings.log_level.lower())
    except KeyboardInterrupt:
        logger.info("Server shutting down...")


if __name__ == '__main__':
    main()
