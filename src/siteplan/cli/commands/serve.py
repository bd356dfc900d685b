"""Web server command."""

from typing import Optional

import click


@click.command()
@click.option("--host", default=None, help="Host to bind to (default: [server] host)")
@click.option("--port", type=int, default=None, help="Port to bind to (default: [server] port)")
@click.option("--reload", is_flag=True, help="Enable auto-reload")
@click.pass_context
def serve(ctx: click.Context, host: Optional[str], port: Optional[int], reload: bool) -> None:
    """Run the REST API server."""
    from siteplan.cli.console import print_info
    from siteplan.core.config import get_config
    from siteplan.server.api import run_server

    settings = get_config()
    host = host or settings.get("server", "host", "127.0.0.1")
    port = port or settings.get("server", "port", 8000)
    reload = reload or bool(settings.get("server", "reload", False))

    print_info(f"Serving siteplan API on http://{host}:{port}")
    run_server(
        host=host,
        port=port,
        reload=reload,
        config_path=(ctx.obj or {}).get("config_path"),
        log_level=str(settings.get("logging", "level", "INFO")).lower(),
    )
