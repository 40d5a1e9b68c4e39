"""Command line interface for Relaygate."""

import typer
from rich.console import Console
from rich.table import Table

from .app import configure_logging
from .config import settings

app = typer.Typer(help="Relaygate - single-endpoint HTTP relay")
console = Console()


@app.command()
def serve(
    host: str = typer.Option(settings.api_host, "--host", help="Host to bind to"),
    port: int = typer.Option(settings.api_port, "--port", help="Port to bind to"),
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
) -> None:
    """Start the relay server."""
    if debug:
        settings.debug = True
        settings.log_level = "DEBUG"
    configure_logging(settings)

    import uvicorn

    console.print(f"[bold blue]Server is listening on {host}:{port}[/bold blue]")

    uvicorn.run(
        "relaygate.app:app",
        host=host,
        port=port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


@app.command()
def config_check() -> None:
    """Show the effective configuration."""
    table = Table(title="Configuration Status")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="yellow")

    table.add_row(
        "Allowed Origins", ", ".join(settings.allowed_origins) or "(none)"
    )
    table.add_row("Max Redirects", str(settings.max_redirects))
    table.add_row("Upstream Timeout", f"{settings.upstream_timeout}s")
    table.add_row("Listen Address", f"{settings.api_host}:{settings.api_port}")
    table.add_row("Log Level", settings.log_level)
    table.add_row("Debug", "yes" if settings.debug else "no")

    console.print(table)

    if not settings.allowed_origins:
        console.print(
            "[yellow]No origins allowed: only requests without an Origin header will be relayed[/yellow]"
        )


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
