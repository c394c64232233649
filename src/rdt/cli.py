"""CLI entry point for reddit-daily-threads."""
from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import typer

from rdt import __version__

app = typer.Typer(
    name="rdt",
    help="Export recent comments from subreddit daily discussion threads.",
    no_args_is_help=True,
)


def version_callback(value: bool):
    if value:
        typer.echo(f"reddit-daily-threads {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(None, "--version", callback=version_callback, is_eager=True),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """reddit-daily-threads: daily discussion comment exports for people and MCP clients."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


@app.command()
def export(
    interval_hours: Optional[float] = typer.Argument(None, help="Hours to look back (default from config: 24)"),
    subreddit: Optional[str] = typer.Option(None, "--subreddit", "-s", help="Subreddit to export"),
    score_threshold: Optional[int] = typer.Option(None, "--score-threshold", help="Drop comments scoring at or below this"),
    posts: Optional[int] = typer.Option(None, "--posts", "-n", help="Number of daily threads to read"),
    output_dir: Optional[Path] = typer.Option(None, "--output-dir", "-o", help="Directory for the export file"),
    stdout: bool = typer.Option(False, "--stdout", help="Print the export instead of writing a file"),
) -> None:
    """Export recent daily-thread comments to a Markdown file."""
    from rdt.config import Settings
    from rdt.errors import RDTError
    from rdt.exporter import client_from_settings, export_daily_comments

    settings = Settings.load()

    # Resolve options: CLI flag > config > default
    _interval = interval_hours or settings.interval_hours
    _subreddit = subreddit or settings.subreddit

    try:
        result = export_daily_comments(
            client_from_settings(settings),
            _subreddit,
            interval_hours=_interval,
            score_threshold=score_threshold if score_threshold is not None else settings.score_threshold,
            posts_to_fetch=posts if posts is not None else settings.posts_to_fetch,
            excluded_authors=settings.excluded_authors,
            write_to_file=not stdout,
            output_dir=output_dir or settings.output_dir,
        )
    except RDTError as e:
        typer.echo(f"Export failed: {e}", err=True)
        raise typer.Exit(1)

    if stdout:
        typer.echo(result.content)
    else:
        typer.echo(f"Exported to {result.path}")


@app.command()
def rpc(
    request: Optional[str] = typer.Argument(None, help="JSON-RPC request (read from stdin if omitted)"),
) -> None:
    """Dispatch a single JSON-RPC request and print the response."""
    from rdt.jsonrpc import dispatch, http_status

    raw = request if request is not None else sys.stdin.read()
    response = dispatch(raw)
    typer.echo(json.dumps(response, indent=2))
    if http_status(response) != 200:
        raise typer.Exit(1)


@app.command()
def mcp(
    transport: str = typer.Option("stdio", "--transport", "-t", help="Transport: stdio"),
) -> None:
    """Start the MCP server."""
    import asyncio

    from rdt.mcp_server import run_stdio

    if transport == "stdio":
        asyncio.run(run_stdio())
    else:
        typer.echo(f"Transport '{transport}' not yet supported. Use 'stdio'.")
        raise typer.Exit(1)
