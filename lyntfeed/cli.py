"""Command-line interface for lyntfeed."""

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from lyntfeed import FeedConfig, save_json, __version__
from lyntfeed.core.chain import resolve_chain
from lyntfeed.core.snowflake import decode
from lyntfeed.models.item import ItemReadResult, ItemView
from lyntfeed.store import create_item_store

app = typer.Typer(
    name="lyntfeed",
    help="Short-form post service",
    add_completion=False,
)
console = Console()


def version_callback(value: bool):
    if value:
        console.print(f"lyntfeed version {__version__}")
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
    """lyntfeed - short-form post service."""
    pass


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(8000, "--port", "-p", help="Bind port"),
):
    """Run the HTTP API."""
    import uvicorn

    from lyntfeed.api import create_app

    uvicorn.run(create_app(FeedConfig()), host=host, port=port)


@app.command()
def show(
    item_id: str = typer.Argument(..., help="Lynt id"),
    viewer: str = typer.Option("", "--viewer", help="User id for per-viewer fields"),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write the lynt and its chain to a JSON file"
    ),
):
    """Show a lynt and its chain without counting a view."""
    config = FeedConfig()

    async def run():
        async with create_item_store(config) as store:
            view = await store.fetch_for_read(item_id, viewer)
            if view is None:
                console.print(f"[red]Lynt {item_id} not found[/red]")
                raise typer.Exit(1)
            chain = await resolve_chain(store, viewer, view.parent_id, config.max_chain_depth)

        for ancestor in chain:
            _print_item(ancestor, dim=True)
        _print_item(view)

        if output:
            result = ItemReadResult(**view.model_dump(), referenced_lynts=chain)
            save_json(result, output)
            console.print(f"[dim]Saved to {output}[/dim]")

    asyncio.run(run())


@app.command("decode-id")
def decode_id(
    item_id: str = typer.Argument(..., help="Snowflake id"),
):
    """Print the timestamp, node and sequence encoded in an id."""
    config = FeedConfig()
    try:
        parts = decode(item_id, config.id_epoch_ms)
    except ValueError:
        console.print(f"[red]Not a valid id: {item_id}[/red]")
        raise typer.Exit(1)

    table = Table(title=item_id, show_header=False)
    table.add_column("Field", style="dim")
    table.add_column("Value")
    table.add_row("Created", parts.created_at.isoformat())
    table.add_row("Node", str(parts.node_id))
    table.add_row("Sequence", str(parts.sequence))
    console.print(table)


def _print_item(item: ItemView, dim: bool = False):
    """Print one lynt as a table."""
    author = item.author_handle or item.author_id
    style = "dim" if dim else None

    table = Table(title=f"@{author} · {item.id}", show_header=False, style=style)
    table.add_column("Field", style="dim")
    table.add_column("Value")

    table.add_row("Content", item.content or "-")
    table.add_row("Created", item.created_at.isoformat())
    table.add_row("Views", f"{item.views:,}")
    table.add_row("Likes", f"{item.like_count:,}")
    table.add_row("Repost of", item.parent_id or "-")
    table.add_row("Image", "yes" if item.has_image else "no")

    console.print(table)


if __name__ == "__main__":
    app()
