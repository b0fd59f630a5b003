"""Server command for the pgw CLI."""

import typer
import uvicorn
from rich.console import Console
from rich.table import Table

from provider_gateway.core.config.config import get_config
from provider_gateway.core.logging import configure_root_logging


def start(
    host: str = typer.Option(None, "--host", help="Override host"),
    port: int = typer.Option(None, "--port", help="Override port"),
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload for development"),
) -> None:
    """Start the gateway server."""
    console = Console()
    cfg = get_config()

    # Override config if provided
    server_host = host or cfg.host
    server_port = port or cfg.port

    table = Table(title="Provider Gateway Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Server URL", f"http://{server_host}:{server_port}")
    table.add_row("App Config", cfg.app_config_path)
    table.add_row("Credentials File", cfg.credentials_file or "(in-memory)")
    table.add_row("Proxy", cfg.proxy or "(none)")
    table.add_row("Token Config TTL", f"{cfg.token_config_cache_ttl:g}s")

    console.print(table)

    configure_root_logging(cfg.log_level)
    uvicorn.run(
        "provider_gateway.main:app",
        host=server_host,
        port=server_port,
        reload=reload,
        log_level=cfg.log_level.lower(),
    )
