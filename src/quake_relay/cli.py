"""CLI interface using Typer."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from quake_relay import __version__
from quake_relay.cache import FileKeyValueStore, MemoryKeyValueStore, SnapshotCache
from quake_relay.config import QuakeRelayConfig
from quake_relay.dictionary import import_dictionaries
from quake_relay.errors import QuakeRelayError
from quake_relay.exporters import export_json
from quake_relay.pipeline import EarthquakeService

app = typer.Typer(
    name="quake-relay",
    help="Translated JMA earthquake bulletins.",
    add_completion=False,
)
console = Console()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[logging.StreamHandler()],
    )


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"quake-relay {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=_version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Quake Relay — translated JMA earthquake bulletins."""


@app.command()
def fetch(
    lang: Annotated[
        str,
        typer.Option("--lang", "-l", help="Display language (en, zh, ko, pt, es, vi, th, id)."),
    ] = "en",
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the response body to this JSON file."),
    ] = None,
    no_cache: Annotated[
        bool,
        typer.Option("--no-cache", help="Do not write the snapshot to the on-disk cache."),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging."),
    ] = False,
) -> None:
    """Fetch the latest bulletins from JMA and print them."""
    _setup_logging(verbose)

    config = QuakeRelayConfig()
    store = FileKeyValueStore(config.cache_dir)
    snapshot_store = MemoryKeyValueStore() if no_cache else store
    service = EarthquakeService(config, SnapshotCache(snapshot_store), store)

    try:
        payload = asyncio.run(service.get_earthquakes(lang, force=True))
    except QuakeRelayError as exc:
        console.print(f"[red]Refresh failed:[/red] {exc}")
        raise typer.Exit(code=1) from None

    if output is not None:
        export_json(payload, output)

    detailed = payload["data"]["detailed"]
    basic = payload["data"]["basic"]
    if not detailed and not basic:
        console.print("[yellow]No bulletins available.[/yellow]")
        raise typer.Exit()

    console.print()
    table = Table(title="JMA Earthquake Bulletins")
    table.add_column("Time", style="dim")
    table.add_column("Epicenter", style="bold")
    table.add_column("Mag", justify="right", style="red")
    table.add_column("Max Int", justify="right")
    table.add_column("Prefectures", justify="right")
    table.add_column("Tsunami")

    for quake in detailed + basic:
        tsunami = quake["comments"]["has_tsunami_warning"]
        table.add_row(
            quake["time"],
            quake["location"]["name"],
            quake["magnitude"],
            quake.get("max_intensity", "-"),
            str(len(quake.get("regions", []))),
            "[red]yes[/red]" if tsunami else "[green]no[/green]",
        )

    console.print(table)
    if output is not None:
        console.print(f"\nJSON written to [bold]{output}[/bold]")
    console.print(f"Detailed: {len(detailed)}  Basic: {len(basic)}")


@app.command("import-dictionaries")
def import_dictionaries_command(
    directory: Annotated[
        Path,
        typer.Argument(
            help="Directory containing epi.json, pref.json and city.json.",
            exists=True,
            file_okay=False,
        ),
    ],
) -> None:
    """Load name dictionaries into the translation store."""
    _setup_logging(False)
    config = QuakeRelayConfig()
    counts = import_dictionaries(FileKeyValueStore(config.cache_dir), directory)
    if not counts:
        console.print("[yellow]No dictionary files found.[/yellow]")
        raise typer.Exit(code=1)
    for name, count in counts.items():
        console.print(f"{name}: {count} codes")


@app.command()
def serve(
    host: Annotated[str, typer.Option("--host", help="Bind address.")] = "127.0.0.1",
    port: Annotated[int, typer.Option("--port", "-p", help="Bind port.")] = 8000,
) -> None:
    """Run the HTTP API with the background refresh."""
    import uvicorn

    uvicorn.run("quake_relay.api:app", host=host, port=port)
