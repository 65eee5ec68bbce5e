"""Thin CLI wrapper for freepik_seedream.

This module provides the command-line interface using Typer.
Serving is delegated to the mcp_server and web packages; the one-shot
commands call FreepikClient directly.
"""

import asyncio
import json
import logging
from collections.abc import Coroutine
from enum import Enum
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.logging import RichHandler

from freepik_seedream import __version__
from freepik_seedream.client import FreepikClient, SearchQuery
from freepik_seedream.config import (
    Settings,
    get_settings,
    print_settings_json,
    resolve_api_key,
)
from freepik_seedream.errors import ConfigurationError, FreepikError
from freepik_seedream.types import AspectRatio, ContentType, SearchOrder, TaskKind

app = typer.Typer(
    name="freepik-mcp",
    help="Freepik Seedream MCP - image generation and stock search as MCP tools",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)


class Transport(str, Enum):
    """Transports the serve command can run."""

    STDIO = "stdio"
    HTTP = "http"


def configure_logging(level: str) -> None:
    """Send log records to stderr; stdout may carry the stdio transport."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, rich_tracebacks=True)],
        force=True,
    )


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"freepik-seedream-mcp version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Freepik Seedream MCP - image generation and stock search as MCP tools."""


@app.command()
def config(
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
) -> None:
    """Show effective configuration."""
    settings = get_settings()
    if json_output:
        console.print(print_settings_json(settings))
        return

    key_display = "(set)" if settings.api_key_value() else "[red](not set)[/red]"
    console.print("[bold]Effective Configuration:[/bold]")
    console.print()
    console.print("[bold]Vendor:[/bold]")
    console.print(f"  API key:             {key_display}")
    console.print(f"  Base URL:            {settings.base_url}")
    console.print(f"  Request timeout:     {settings.request_timeout}")
    console.print()
    console.print("[bold]Polling:[/bold]")
    console.print(f"  Interval (seconds):  {settings.poll_interval}")
    console.print(f"  Max attempts:        {settings.poll_max_attempts}")
    console.print()
    console.print("[bold]HTTP transport:[/bold]")
    console.print(f"  Host:                {settings.host}")
    console.print(f"  Port:                {settings.port}")
    console.print(f"  Log level:           {settings.log_level}")


@app.command()
def serve(
    transport: Annotated[
        Transport,
        typer.Option("--transport", "-t", help="stdio, or http for SSE + streamable HTTP"),
    ] = Transport.STDIO,
    host: Annotated[
        str | None,
        typer.Option("--host", help="Bind address (http only)"),
    ] = None,
    port: Annotated[
        int | None,
        typer.Option("--port", "-p", help="Listening port (http only)"),
    ] = None,
) -> None:
    """Run the MCP server."""
    settings = get_settings()
    configure_logging(settings.log_level)

    if transport is Transport.STDIO:
        from mcp_server.server import run_stdio

        asyncio.run(run_stdio(settings))
        return

    import uvicorn

    from web.app import create_app

    uvicorn.run(
        create_app(settings),
        host=host or settings.host,
        port=port or settings.port,
        log_level=settings.log_level.lower(),
    )


def _client(settings: Settings) -> FreepikClient:
    try:
        api_key = resolve_api_key(settings)
    except ConfigurationError as e:
        err_console.print(f"[red]{e}. Set FREEPIK_API_KEY.[/red]")
        raise typer.Exit(code=2) from e
    return FreepikClient(
        api_key, base_url=settings.base_url, timeout=settings.request_timeout
    )


@app.command()
def generate(
    prompt: Annotated[str, typer.Argument(help="Text description of the image")],
    aspect_ratio: Annotated[
        AspectRatio,
        typer.Option("--aspect-ratio", "-a", help="Image aspect ratio"),
    ] = AspectRatio.SQUARE_1_1,
    guidance_scale: Annotated[
        float,
        typer.Option("--guidance-scale", "-g", min=1, max=10, help="Prompt adherence"),
    ] = 2.5,
    wait: Annotated[
        bool,
        typer.Option("--wait/--no-wait", help="Wait for the image"),
    ] = True,
) -> None:
    """Generate an image with Seedream 4."""
    settings = get_settings()

    async def run() -> None:
        async with _client(settings) as client:
            task = await client.text_to_image(
                prompt, aspect_ratio=aspect_ratio, guidance_scale=guidance_scale
            )
            console.print(f"Task: [green]{task.task_id}[/green] ({task.status})")
            if not wait:
                return
            with console.status("Waiting for image..."):
                done = await client.wait_for_completion(
                    task.task_id,
                    TaskKind.TEXT_TO_IMAGE,
                    max_attempts=settings.poll_max_attempts,
                    interval=settings.poll_interval,
                )
            console.print(f"URL: {done.first_url or '(none)'}")

    _run(run())


@app.command()
def status(
    task_id: Annotated[str, typer.Argument(help="Task ID to check")],
    kind: Annotated[
        TaskKind,
        typer.Option("--type", help="Type of task"),
    ] = TaskKind.TEXT_TO_IMAGE,
) -> None:
    """Check the status of a generation task."""
    settings = get_settings()

    async def run() -> None:
        async with _client(settings) as client:
            task = await client.check_status(task_id, kind)
            console.print(f"Status: {task.status}")
            if task.first_url:
                console.print(f"Image URL: {task.first_url}")

    _run(run())


@app.command()
def search(
    term: Annotated[str, typer.Argument(help="Search term")],
    limit: Annotated[
        int,
        typer.Option("--limit", "-n", min=1, max=200, help="Number of results"),
    ] = 20,
    order: Annotated[
        SearchOrder,
        typer.Option("--order", help="Sort order"),
    ] = SearchOrder.RELEVANCE,
    content_type: Annotated[
        ContentType,
        typer.Option("--content-type", help="Filter by content type"),
    ] = ContentType.ALL,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
) -> None:
    """Search Freepik stock resources."""
    settings = get_settings()

    async def run() -> None:
        async with _client(settings) as client:
            page = await client.search_resources(
                SearchQuery(
                    term=term, limit=limit, order=order, content_type=content_type
                )
            )

        if json_output:
            output = [r.model_dump(mode="json", exclude_none=True) for r in page.resources]
            console.print(json.dumps({"total": page.total, "resources": output}, indent=2))
            return

        console.print(f"[bold]Found {page.total} result(s) for \"{term}\":[/bold]")
        console.print()
        for r in page.resources:
            console.print(f"  [green]{r.id}[/green] {r.title or ''}")
            if r.author_name:
                console.print(f"    Author: {r.author_name}")
            if r.preview_url:
                console.print(f"    Preview: {r.preview_url}")

    _run(run())


def _run(coro: Coroutine[Any, Any, None]) -> None:
    try:
        asyncio.run(coro)
    except FreepikError as e:
        err_console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1) from e


if __name__ == "__main__":
    app()
