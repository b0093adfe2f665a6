"""Pydantic schemas for persisted trips and the HTTP API layer."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class TripSummary(BaseModel):
    """Derived statistics for one imported log, keyed by its file name."""

    file_name: str = Field(..., min_length=1)
    duration: int = Field(default=0, description="Trip length in minutes.")
    distance: int = Field(
        default=0, description="Distance covered, in the device's distance units."
    )
    max_speed_gps: float = 0.0
    max_current: float = 0.0
    max_pwm: float = 0.0
    max_power: float = 0.0
    max_speed: float = 0.0
    avg_speed: float = 0.0
    consumption_total: float = 0.0
    consumption_by_km: float = 0.0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class LogUploadResponse(BaseModel):
    """Immediate response payload after storing a log file."""

    file_name: str = Field(..., description="Key under which the log was stored.")


class LogListResponse(BaseModel):
    file_names: List[str] = Field(default_factory=list)


class SampleModel(BaseModel):
    """Wire representation of a decoded log row."""

    time_string: str
    time: float
    latitude: float
    longitude: float
    altitude: float
    battery_level: int
    voltage: float
    current: float
    power: float
    speed: float
    speed_gps: float
    temperature: int
    pwm: float
    distance: int


class ImportResponse(BaseModel):
    """Outcome of importing a stored log."""

    file_name: str
    sample_count: int = Field(..., ge=0)
    error: Optional[str] = Field(
        default=None, description="Human-readable failure, if the import was not clean."
    )
    trip: Optional[TripSummary] = None
    samples: Optional[List[SampleModel]] = None
