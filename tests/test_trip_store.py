"""Unit tests for the JSON-backed trip table."""

from __future__ import annotations

import json

import pytest

from app.schemas import TripSummary
from datastore.trip_store import TripAlreadyExistsError, TripNotFoundError, TripTable


def _sample_trip(file_name: str = "ride.csv") -> TripSummary:
    return TripSummary(
        file_name=file_name,
        duration=42,
        distance=12000,
        max_speed=38.5,
        avg_speed=21.2,
        consumption_total=512.0,
        consumption_by_km=42.6,
    )


def test_insert_and_get_round_trip_returns_deep_copy() -> None:
    table = TripTable(name="trips")
    table.insert(_sample_trip())

    fetched = table.get_by_file_name("ride.csv")

    assert fetched is not None
    assert fetched.duration == 42
    assert fetched.created_at is not None
    assert fetched.created_at == fetched.updated_at

    fetched.duration = 1
    fetched_again = table.get_by_file_name("ride.csv")
    assert fetched_again is not None
    assert fetched_again.duration == 42


def test_get_returns_none_when_missing() -> None:
    table = TripTable(name="trips")

    assert table.get_by_file_name("missing.csv") is None
    assert table.count("missing.csv") == 0


def test_insert_twice_is_rejected() -> None:
    table = TripTable(name="trips")
    table.insert(_sample_trip())

    with pytest.raises(TripAlreadyExistsError):
        table.insert(_sample_trip())
    assert table.count("ride.csv") == 1


def test_update_requires_existing_trip() -> None:
    table = TripTable(name="trips")

    with pytest.raises(TripNotFoundError):
        table.update(_sample_trip())


def test_update_keeps_creation_time() -> None:
    table = TripTable(name="trips")
    table.insert(_sample_trip())
    stored = table.get_by_file_name("ride.csv")
    assert stored is not None

    stored.duration = 50
    stored.created_at = None
    table.update(stored)

    updated = table.get_by_file_name("ride.csv")
    assert updated is not None
    assert updated.duration == 50
    assert updated.created_at is not None
    assert updated.updated_at is not None
    assert updated.updated_at >= updated.created_at


def test_insert_persists_to_disk_and_reloads(tmp_path) -> None:
    path = tmp_path / "trips.json"
    table = TripTable(name="trips", persistence_path=path)

    table.insert(_sample_trip())

    payload = json.loads(path.read_text())
    assert payload["ride.csv"]["distance"] == 12000

    reloaded = TripTable(name="trips", persistence_path=path).get_by_file_name("ride.csv")
    assert reloaded is not None
    assert reloaded.max_speed == 38.5


def test_corrupt_file_starts_empty(tmp_path) -> None:
    path = tmp_path / "trips.json"
    path.write_text("{not json")

    table = TripTable(name="trips", persistence_path=path)

    assert table.scan() == []


def test_scan_returns_all_trips() -> None:
    table = TripTable(name="trips")
    table.insert(_sample_trip("a.csv"))
    table.insert(_sample_trip("b.csv"))

    assert sorted(trip.file_name for trip in table.scan()) == ["a.csv", "b.csv"]
