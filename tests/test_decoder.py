"""Unit tests for row decoding and the lenient field parsers."""

from __future__ import annotations

import pytest

from models.records import LogHeader
from services.decoder import (
    decode_row,
    parse_float_or,
    parse_int_or,
    parse_time_of_day,
)
from services.errors import RowDecodeError, TimeFormatError
from services.header import resolve_header

FULL_HEADER = (
    "date,time,latitude,longitude,gps_speed,gps_alt,gps_heading,gps_distance,"
    "speed,voltage,phase_current,current,power,torque,pwm,battery_level,distance,"
    "totaldistance,system_temp,temp2,tilt,roll,mode,alert"
)
FULL_ROW = (
    "2024-05-01,18:30:15.250,55.7512,37.6184,24.5,151.2,90,1200,"
    "25.1,84.3,30.2,12.5,1053.75,40,38.5,87,1432,"
    "812345,41,38,0.5,-1.2,2,"
)


def test_parse_float_or_accepts_numbers() -> None:
    assert parse_float_or("12.5") == 12.5
    assert parse_float_or(" -3 ") == -3.0
    assert parse_float_or("1e3") == 1000.0


@pytest.mark.parametrize("token", [None, "", "   ", "abc", "nan", "inf", "1,5"])
def test_parse_float_or_falls_back_to_default(token) -> None:
    assert parse_float_or(token) == 0.0
    assert parse_float_or(token, 7.5) == 7.5


def test_parse_int_or_is_strict() -> None:
    assert parse_int_or("42") == 42
    assert parse_int_or(" -7 ") == -7
    assert parse_int_or("12.5") == 0
    assert parse_int_or("1e3") == 0
    assert parse_int_or(None, 3) == 3


def test_parse_time_of_day_returns_deciseconds_since_midnight() -> None:
    assert parse_time_of_day("00:00:00.000") == 0.0
    assert parse_time_of_day("00:00:10.000") == 100.0
    assert parse_time_of_day("01:02:03.456") == 37234.56
    assert parse_time_of_day("23:59:59.999") == 863999.99


@pytest.mark.parametrize(
    "value",
    ["", "1:02:03.456", "01:02:03", "01:02:03.45", "25:00:00.000", "12:60:00.000", "noon"],
)
def test_parse_time_of_day_rejects_other_formats(value: str) -> None:
    with pytest.raises(TimeFormatError):
        parse_time_of_day(value)


def test_decode_row_maps_every_field() -> None:
    columns = resolve_header(FULL_HEADER, "full.csv")

    sample = decode_row(FULL_ROW + "\r\n", columns)

    assert sample.time_string == "18:30:15.250"
    assert sample.time == parse_time_of_day("18:30:15.250")
    assert sample.latitude == 55.7512
    assert sample.longitude == 37.6184
    assert sample.altitude == 151.2
    assert sample.battery_level == 87
    assert sample.voltage == 84.3
    assert sample.current == 12.5
    assert sample.power == 1053.75
    assert sample.speed == 25.1
    assert sample.speed_gps == 24.5
    assert sample.temperature == 41
    assert sample.pwm == 38.5
    assert sample.distance == 1432


def test_decode_row_defaults_unmapped_fields() -> None:
    columns = resolve_header("TIME,LATITUDE,LONGITUDE,DISTANCE", "minimal.csv")

    sample = decode_row("00:00:10.000,1.1,2.1,150", columns)

    assert sample.distance == 150
    assert sample.speed == 0.0
    assert sample.power == 0.0
    assert sample.battery_level == 0
    assert sample.temperature == 0


@pytest.mark.parametrize(
    "field, attribute",
    [
        ("GPS_ALT", "altitude"),
        ("BATTERY_LEVEL", "battery_level"),
        ("VOLTAGE", "voltage"),
        ("CURRENT", "current"),
        ("POWER", "power"),
        ("SPEED", "speed"),
        ("GPS_SPEED", "speed_gps"),
        ("SYSTEM_TEMP", "temperature"),
        ("PWM", "pwm"),
        ("DISTANCE", "distance"),
        ("LATITUDE", "latitude"),
    ],
)
def test_decode_row_defaults_malformed_optional_field(field: str, attribute: str) -> None:
    header = ["TIME", "LATITUDE", "LONGITUDE"]
    if field not in header:
        header.append(field)
    columns = resolve_header(",".join(header), "bad.csv")
    row = ["00:00:01.000", "1.0", "2.0"] + ["x"] * (len(header) - 3)
    row[columns[LogHeader[field]]] = "not-a-number"

    sample = decode_row(",".join(row), columns)

    assert getattr(sample, attribute) == 0
    assert sample.longitude == 2.0


def test_decode_row_rejects_short_rows() -> None:
    columns = resolve_header("TIME,LATITUDE,LONGITUDE,SPEED", "short.csv")

    with pytest.raises(RowDecodeError, match="expected at least 4"):
        decode_row("00:00:01.000,1.0,2.0", columns)


def test_decode_row_requires_time_column() -> None:
    columns = resolve_header("LATITUDE,LONGITUDE", "no_time.csv")

    with pytest.raises(RowDecodeError, match="no TIME column"):
        decode_row("1.0,2.0", columns)


def test_decode_row_rejects_bad_time() -> None:
    columns = resolve_header("TIME,LATITUDE,LONGITUDE", "bad_time.csv")

    with pytest.raises(RowDecodeError):
        decode_row("later,1.0,2.0", columns)


def test_samples_are_immutable() -> None:
    columns = resolve_header("TIME,LATITUDE,LONGITUDE", "frozen.csv")
    sample = decode_row("00:00:01.000,1.0,2.0", columns)

    with pytest.raises(AttributeError):
        sample.speed = 10.0  # type: ignore[misc]


@pytest.mark.parametrize("token", ["1_000", "0x10", "١٢"])
def test_parse_float_or_rejects_other_number_notations(token: str) -> None:
    assert parse_float_or(token) == 0.0


def test_decode_row_ignores_width_of_unused_columns() -> None:
    columns = resolve_header("TIME,LATITUDE,LONGITUDE,DISTANCE,MODE,ALERT", "modes.csv")

    sample = decode_row("00:00:00.000,1.0,2.0,100", columns)

    assert sample.distance == 100
    assert sample.longitude == 2.0
