"""Web server CLI command."""

import click

from cli.config import load_config_model


@click.command()
@click.option("--host", default=None, help="Bind address (default from config)")
@click.option("--port", default=None, type=int, help="Port (default from config)")
@click.option("--reload", is_flag=True, help="Auto-reload on code changes")
def serve(host: str | None, port: int | None, reload: bool):
    """Run the HTTP API."""
    import uvicorn

    web_cfg = load_config_model().web
    uvicorn.run(
        "web.app:app",
        host=host or web_cfg.host,
        port=port or web_cfg.port,
        reload=reload,
    )
