"""Main CLI entry point for provider-gateway."""

import logging

import typer
from rich.console import Console
from rich.table import Table

from provider_gateway.cli.commands import server
from provider_gateway.core.config.config import Config, get_config
from provider_gateway.core.config.validation import validate_all
from provider_gateway.core.exceptions import ProviderGatewayError
from provider_gateway.core.provider.resolver import PROVIDER_CONFIG_MAP, get_provider_config

app = typer.Typer(
    name="pgw",
    help="Provider Gateway CLI - inspect provider resolution and run the gateway",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.command(name="start")(server.start)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Provider Gateway CLI."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG)


@app.command()
def version() -> None:
    """Show version information."""
    from provider_gateway import __version__

    console = Console()
    console.print(f"[bold cyan]pgw[/bold cyan] version [green]{__version__}[/green]")


@app.command()
def resolve(provider: str = typer.Argument(..., help="Provider identifier to resolve")) -> None:
    """Show how a provider identifier is resolved."""
    console = Console()
    try:
        resolved = get_provider_config(provider, get_config().app_config)
    except ProviderGatewayError as e:
        console.print(f"[bold red]{e}[/bold red]")
        raise typer.Exit(code=1) from e

    table = Table(title=f"Resolution of '{provider}'")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Canonical provider", resolved.override_provider)
    table.add_row("Initializer", getattr(resolved.get_options, "__name__", "?"))
    custom = resolved.custom_endpoint_config
    table.add_row("Custom endpoint", custom.name if custom else "-")
    if custom:
        table.add_row("Base URL", custom.base_url or "-")
    console.print(table)


@app.command()
def endpoints() -> None:
    """List built-in providers and declared custom endpoints."""
    console = Console()
    cfg = get_config()

    table = Table(title="Providers")
    table.add_column("Name", style="cyan")
    table.add_column("Kind")
    table.add_column("Base URL", style="green")
    table.add_column("Model fetch")

    for name in PROVIDER_CONFIG_MAP:
        table.add_row(name, "built-in", "-", "-")
    for endpoint in cfg.app_config.endpoints.custom:
        table.add_row(
            endpoint.name,
            "custom",
            endpoint.base_url or "-",
            "yes" if endpoint.models.fetch else "no",
        )

    console.print(table)
    console.print(f"[dim]App config: {cfg.app_config_path}[/dim]")


@app.command(name="config")
def show_config() -> None:
    """Show environment settings and report invalid values."""
    console = Console()

    table = Table(title="Environment")
    table.add_column("Variable", style="cyan")
    table.add_column("Value", style="green")
    for name, value in sorted(Config.env_summary().items()):
        table.add_row(name, value if value is not None else "[dim](default)[/dim]")
    console.print(table)

    errors = validate_all()
    for error in errors:
        console.print(f"[bold red]{error}[/bold red]")
    if errors:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
