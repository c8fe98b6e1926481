"""
Dispatch server entrypoint.

Usage:
    python -m dispatch_server.main
    dispatch serve --port 4000
"""

from typing import Optional

from aiohttp import web

from .app import create_app
from .config import ServerConfig
from .logging_config import get_logger, setup_logging
from .metrics import start_metrics_server


def run(config: Optional[ServerConfig] = None) -> None:
    """Configure logging and metrics, then serve until interrupted."""
    config = config or ServerConfig.from_env()

    setup_logging(level=config.log_level, fmt=config.log_format)
    start_metrics_server(enabled=config.metrics_enabled, port=config.metrics_port)

    dispatch = create_app(config)

    logger = get_logger(__name__)
    logger.info(
        f"Dispatch server with Socket.IO running on port {config.port}",
        extra={
            "host": config.host,
            "data_file": config.data_file,
            "metrics_enabled": config.metrics_enabled,
        },
    )
    web.run_app(dispatch.app, host=config.host, port=config.port, print=None)


def main() -> None:
    run()


if __name__ == "__main__":
    main()
