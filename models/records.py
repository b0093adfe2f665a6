"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class LogHeader(Enum):
    """Column identifiers a wheel recorder may write into a log header."""

    DATE = "date"
    TIME = "time"
    LATITUDE = "latitude"
    LONGITUDE = "longitude"
    GPS_SPEED = "gps_speed"
    GPS_ALT = "gps_alt"
    GPS_HEADING = "gps_heading"
    GPS_DISTANCE = "gps_distance"
    SPEED = "speed"
    VOLTAGE = "voltage"
    PHASE_CURRENT = "phase_current"
    CURRENT = "current"
    POWER = "power"
    TORQUE = "torque"
    PWM = "pwm"
    BATTERY_LEVEL = "battery_level"
    DISTANCE = "distance"
    TOTALDISTANCE = "totaldistance"
    SYSTEM_TEMP = "system_temp"
    TEMP2 = "temp2"
    TILT = "tilt"
    ROLL = "roll"
    MODE = "mode"
    ALERT = "alert"

    @classmethod
    def lookup(cls, token: str) -> Optional["LogHeader"]:
        """Case-insensitive match of a header token, ``None`` when unknown."""
        return cls.__members__.get(token.strip().upper())


@dataclass(frozen=True, slots=True)
class LogSample:
    """A single decoded row of a wheel log."""

    time_string: str
    time: float
    latitude: float = 0.0
    longitude: float = 0.0
    altitude: float = 0.0
    battery_level: int = 0
    voltage: float = 0.0
    current: float = 0.0
    power: float = 0.0
    speed: float = 0.0
    speed_gps: float = 0.0
    temperature: int = 0
    pwm: float = 0.0
    distance: int = 0
