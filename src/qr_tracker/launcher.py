"""Command line launcher for the QR tracker server."""

import argparse
import os
import sys
from typing import List, Optional

import uvicorn

from .config import config_manager, get_config, reset_config
from .utils.logging_config import get_logger, initialize_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="qr-tracker",
        description="Run the QR tracker HTTP service",
    )
    parser.add_argument("--host", help="Interface to bind (default from config)")
    parser.add_argument("--port", type=int, help="Port to listen on (default from config)")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--seed-demo", action="store_true", help="Start with the demonstration objects"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    # Command line flags win over file and environment settings
    if args.debug:
        os.environ["QR_TRACKER_DEBUG"] = "1"
    if args.seed_demo:
        os.environ["QR_TRACKER_SEED_DEMO"] = "1"
    if args.host:
        os.environ["QR_TRACKER_HOST"] = args.host
    if args.port:
        os.environ["QR_TRACKER_PORT"] = str(args.port)
    reset_config()

    config = get_config()
    initialize_logging()
    logger = get_logger('main')

    issues = config_manager.validate_config()
    if issues:
        for issue in issues:
            logger.error(f"Configuration problem: {issue}")
        return 1

    logger.info(f"Starting QR Tracker on http://{config.server.host}:{config.server.port}")
    uvicorn.run(
        "qr_tracker.main:app",
        host=config.server.host,
        port=config.server.port,
        reload=config.server.auto_reload,
        log_level="debug" if config.server.debug else "info",
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
