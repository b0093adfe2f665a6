from __future__ import annotations

from typing import Any, Dict, Iterable, Optional

import typer

_TRIP_FIELDS = (
    "file_name",
    "duration",
    "distance",
    "max_speed",
    "max_speed_gps",
    "avg_speed",
    "max_current",
    "max_power",
    "max_pwm",
    "consumption_total",
    "consumption_by_km",
)


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def render_trip(trip: Optional[Dict[str, Any]]) -> None:
    echo_heading("Trip Summary")
    if not trip:
        typer.echo("No trip summary stored.")
        return
    echo_key_values((key, trip.get(key)) for key in _TRIP_FIELDS)


def render_import(payload: Dict[str, Any]) -> None:
    echo_heading("Import Result")
    echo_key_values(
        [
            ("file_name", payload.get("file_name")),
            ("sample_count", payload.get("sample_count")),
        ]
    )
    typer.echo()
    render_trip(payload.get("trip"))

    error = payload.get("error")
    typer.echo()
    echo_heading("Errors")
    if error:
        typer.secho(f"  - {error}", fg=typer.colors.RED)
    else:
        typer.echo("No errors recorded.")
