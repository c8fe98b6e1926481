"""
Serve command: run the dispatch sync server.
"""

from typing import Optional

import typer

from dispatch_server.config import ServerConfig
from dispatch_server.main import run


def serve_command(
    host: Optional[str] = typer.Option(None, "--host", help="Listen address (default: DISPATCH_HOST)"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Listen port (default: PORT or 4000)"),
    data_file: Optional[str] = typer.Option(
        None, "--data-file", "-d", help="Snapshot path (default: DISPATCH_DATA_FILE)"
    ),
):
    """
    Run the sync server.

    Examples:
        dispatch serve
        dispatch serve --port 4000 --data-file /var/lib/dispatch/data.json
    """
    config = ServerConfig.from_env().with_overrides(host=host, port=port, data_file=data_file)
    run(config)
