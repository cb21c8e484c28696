"""Command-line interface for pfproxy."""

import asyncio
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from pfproxy import Resolver, ServiceConfig, build_cashtag, __version__
from pfproxy.config import LogFormat
from pfproxy.exceptions import PfproxyError
from pfproxy.logging import configure_logging

app = typer.Typer(
    name="pfproxy",
    help="Profile avatar resolver and image proxy",
    add_completion=False,
)
console = Console()


def version_callback(value: bool):
    if value:
        console.print(f"pfproxy version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
):
    """pfproxy - profile avatar resolver and image proxy."""
    pass


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Listen port"),
    headless: bool = typer.Option(
        True, "--headless/--no-headless", help="Run browser in headless mode"
    ),
):
    """Run the HTTP server."""
    from pfproxy.api import main as run_server

    config = ServiceConfig(headless=headless)
    if host:
        config.host = host
    if port:
        config.port = port
    run_server(config)


@app.command()
def resolve(
    users: list[str] = typer.Argument(..., help="Profile handles to resolve"),
    headless: bool = typer.Option(
        True, "--headless/--no-headless", help="Run browser in headless mode"
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress output, only show errors"
    ),
):
    """Resolve one or more handles to their avatar URLs."""
    config = ServiceConfig(
        headless=headless,
        log_format=LogFormat.CONSOLE if not quiet else LogFormat.JSON,
        log_level="INFO" if not quiet else "ERROR",
    )
    configure_logging(config)

    async def run():
        table = Table(show_header=True)
        table.add_column("Handle")
        table.add_column("Avatar")
        table.add_column("Status", style="dim")
        failures = 0

        async with Resolver(config) as resolver:
            for user in users:
                try:
                    result = await resolver.resolve(user)
                except PfproxyError as e:
                    failures += 1
                    console.print(f"[red]✗[/red] {user}: {e}")
                    continue

                status = "blocked" if result.blocked else ("cached" if result.cached else "fresh")
                table.add_row(f"@{result.name}", result.avatar or "-", status)

        if table.row_count:
            console.print(table)
        console.print(f"\n[bold]Resolved {len(users) - failures}/{len(users)} handles[/bold]")
        if failures:
            raise typer.Exit(1)

    asyncio.run(run())


@app.command()
def cashtag(tag: str = typer.Argument(..., help="Cashtag, with or without $")):
    """Print the confirmation link for a cashtag."""
    try:
        result = build_cashtag(tag)
    except PfproxyError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    console.print(f"[bold]{result.cashtag}[/bold]")
    console.print(f"  {result.confirm_url}")


if __name__ == "__main__":
    app()
