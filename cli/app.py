from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import render_import, render_trip
from datastore.trip_store import build_default_table
from logging_config import configure_logging
from services.trip_parser import TripParser
from storage.log_files import LogFileStore


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Utilities for importing wheel telemetry logs.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        typer.secho("CLI state is uninitialized.", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    return state


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Importer API base URL (defaults to API_BASE_URL env or http://localhost:8000).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Seconds to wait for API responses.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log import details."),
) -> None:
    """Entry point for the CLI."""
    configure_logging("DEBUG" if verbose else "WARNING", force=True)
    config = load_config(base_url=base_url, timeout=timeout)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("parse")
def parse_command(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Path to a wheel log."),
    store: bool = typer.Option(
        True,
        "--store/--no-store",
        help="Persist the trip summary in the local trip table.",
    ),
) -> None:
    """Decode a local log and print its trip summary."""
    log_store = LogFileStore(name="local")
    log_store.put_object(file.name, file.read_bytes())
    parser = TripParser(log_store, repository=build_default_table() if store else None)

    result = parser.parse(file.name, file.name)
    trip = result.trip.model_dump(mode="json") if result.trip else None
    render_import(
        {
            "file_name": file.name,
            "sample_count": len(result.samples),
            "trip": trip,
            "error": result.error,
        }
    )
    if result.error:
        raise typer.Exit(code=1)


@app.command("upload")
def upload_command(
    ctx: typer.Context,
    file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Path to a wheel log."),
) -> None:
    """Upload a log to the service and import it."""
    state = _get_state(ctx)
    typer.echo(f"Uploading {file} to {state.config.base_url} ...")
    file_name = state.client.upload_log(file)
    typer.secho(f"Upload accepted. file_name={file_name}", fg=typer.colors.GREEN)
    payload = state.client.import_log(file_name)
    typer.echo()
    render_import(payload)
    if payload.get("error"):
        raise typer.Exit(code=1)


@app.command("trip")
def trip_command(
    ctx: typer.Context,
    file_name: str = typer.Argument(..., help="File name the log was imported under."),
) -> None:
    """Fetch the stored trip summary for a log."""
    state = _get_state(ctx)
    render_trip(state.client.get_trip(file_name))
