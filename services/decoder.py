"""Decoding of wheel log rows into samples.

Optional numeric fields are parsed leniently: an unmapped column, a blank cell
or a malformed number yields the field default. A row whose structure is
broken (too few cells, no usable TIME value) raises ``RowDecodeError``.
"""

from __future__ import annotations

import re
from typing import Callable, Optional, TypeVar

from models.records import LogHeader, LogSample
from services.errors import RowDecodeError, TimeFormatError
from services.header import DELIMITER, ColumnIndexMap

T = TypeVar("T")

_TIME_PATTERN = re.compile(r"^(\d{2}):(\d{2}):(\d{2})\.(\d{3})$")
_INT_PATTERN = re.compile(r"^[+-]?\d+$", re.ASCII)
_FLOAT_PATTERN = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$", re.ASCII)

_FLOAT_FIELDS = {
    "latitude": LogHeader.LATITUDE,
    "longitude": LogHeader.LONGITUDE,
    "altitude": LogHeader.GPS_ALT,
    "voltage": LogHeader.VOLTAGE,
    "current": LogHeader.CURRENT,
    "power": LogHeader.POWER,
    "speed": LogHeader.SPEED,
    "speed_gps": LogHeader.GPS_SPEED,
    "pwm": LogHeader.PWM,
}

_INT_FIELDS = {
    "battery_level": LogHeader.BATTERY_LEVEL,
    "temperature": LogHeader.SYSTEM_TEMP,
    "distance": LogHeader.DISTANCE,
}

_DECODED_FIELDS = (
    LogHeader.TIME,
    *_FLOAT_FIELDS.values(),
    *_INT_FIELDS.values(),
)


def _parse_or(parse: Callable[[str], T], token: Optional[str], default: T) -> T:
    if token is None:
        return default
    candidate = token.strip()
    if not candidate:
        return default
    try:
        return parse(candidate)
    except ValueError:
        return default


def _strict_float(value: str) -> float:
    if not _FLOAT_PATTERN.match(value):
        raise ValueError(f"Not a decimal number: {value!r}")
    return float(value)


def _strict_int(value: str) -> int:
    if not _INT_PATTERN.match(value):
        raise ValueError(f"Not an integer: {value!r}")
    return int(value)


def parse_float_or(token: Optional[str], default: float = 0.0) -> float:
    return _parse_or(_strict_float, token, default)


def parse_int_or(token: Optional[str], default: int = 0) -> int:
    return _parse_or(_strict_int, token, default)


def parse_time_of_day(value: str) -> float:
    """Convert an ``HH:mm:ss.SSS`` string into deciseconds since midnight."""
    match = _TIME_PATTERN.match(value)
    if match is None:
        raise TimeFormatError(f"Unparseable time {value!r}, expected HH:mm:ss.SSS")
    hours, minutes, seconds, millis = (int(part) for part in match.groups())
    if hours > 23 or minutes > 59 or seconds > 59:
        raise TimeFormatError(f"Time {value!r} is out of range")
    total_ms = ((hours * 60 + minutes) * 60 + seconds) * 1000 + millis
    return total_ms / 100


def decode_row(line: str, columns: ColumnIndexMap) -> LogSample:
    """Decode one data line into a ``LogSample``."""
    row = line.rstrip("\r\n").split(DELIMITER)

    decoded = [
        columns[field] for field in _DECODED_FIELDS if field in columns
    ]
    if decoded:
        last_position = max(decoded)
        if len(row) <= last_position:
            raise RowDecodeError(
                f"Row has {len(row)} fields, expected at least {last_position + 1}"
            )

    time_position = columns.get(LogHeader.TIME)
    if time_position is None:
        raise RowDecodeError("Log has no TIME column")
    time_string = row[time_position]

    def cell(field: LogHeader) -> Optional[str]:
        position = columns.get(field)
        return None if position is None else row[position]

    values: dict[str, object] = {
        name: parse_float_or(cell(field)) for name, field in _FLOAT_FIELDS.items()
    }
    values.update(
        (name, parse_int_or(cell(field))) for name, field in _INT_FIELDS.items()
    )

    return LogSample(
        time_string=time_string,
        time=parse_time_of_day(time_string),
        **values,  # type: ignore[arg-type]
    )
