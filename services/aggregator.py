"""Trip statistics derived from a decoded sample sequence."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from app.schemas import TripSummary
from datastore.trip_store import TripRepository
from models.records import LogSample
from services.errors import AggregationError

logger = logging.getLogger(__name__)

DECISECONDS_PER_MINUTE = 600.0
CONSUMPTION_DIVISOR = 36.0
DISTANCE_SCALE = 1000.0


@dataclass
class TripStats:
    """Single-pass accumulation over a non-empty sample sequence."""

    first: LogSample
    last: LogSample
    max_distance: int
    max_speed_gps: float
    max_current: float
    max_pwm: float
    max_power: float
    max_speed: float
    speed_total: float
    power_total: float
    count: int

    @classmethod
    def collect(cls, samples: Sequence[LogSample]) -> "TripStats":
        first = samples[0]
        stats = cls(
            first=first,
            last=samples[-1],
            max_distance=first.distance,
            max_speed_gps=first.speed_gps,
            max_current=first.current,
            max_pwm=first.pwm,
            max_power=first.power,
            max_speed=first.speed,
            speed_total=0.0,
            power_total=0.0,
            count=0,
        )
        for sample in samples:
            stats.max_distance = max(stats.max_distance, sample.distance)
            stats.max_speed_gps = max(stats.max_speed_gps, sample.speed_gps)
            stats.max_current = max(stats.max_current, sample.current)
            stats.max_pwm = max(stats.max_pwm, sample.pwm)
            stats.max_power = max(stats.max_power, sample.power)
            stats.max_speed = max(stats.max_speed, sample.speed)
            stats.speed_total += sample.speed
            stats.power_total += sample.power
            stats.count += 1
        return stats

    @property
    def duration(self) -> int:
        return int((self.last.time - self.first.time) / DECISECONDS_PER_MINUTE)

    @property
    def distance(self) -> int:
        return self.max_distance - self.first.distance

    @property
    def avg_speed(self) -> float:
        return self.speed_total / self.count

    @property
    def avg_power(self) -> float:
        return self.power_total / self.count


class TripAggregator:
    """Computes trip statistics and upserts them by file name."""

    def __init__(self, repository: TripRepository) -> None:
        self.repository = repository

    def upsert(self, file_name: str, samples: Sequence[LogSample]) -> Optional[TripSummary]:
        """Store statistics for ``samples`` under ``file_name``.

        Returns ``None`` without touching the repository for an empty sequence.
        When a statistic cannot be computed the fields assigned before it are
        still written, then ``AggregationError`` is raised.
        """
        if not samples:
            logger.info("No samples decoded, skipping trip statistics", extra={"file_name": file_name})
            return None

        trip = self.repository.get_by_file_name(file_name)
        if trip is None:
            trip = TripSummary(file_name=file_name)
            self.repository.insert(trip)

        failure: Optional[ArithmeticError] = None
        try:
            self._assign(trip, TripStats.collect(samples))
        except ArithmeticError as exc:
            failure = exc

        self.repository.update(trip)

        if failure is not None:
            raise AggregationError(
                f"Trip statistics for {file_name} are incomplete: {failure}", file_name
            ) from failure

        logger.info(
            "Trip statistics updated",
            extra={
                "file_name": file_name,
                "sample_count": len(samples),
                "duration": trip.duration,
                "distance": trip.distance,
            },
        )
        return trip

    @staticmethod
    def _assign(trip: TripSummary, stats: TripStats) -> None:
        # Assignment order matters: a failing field leaves the earlier ones set.
        trip.duration = stats.duration
        trip.distance = stats.distance
        trip.max_speed_gps = stats.max_speed_gps
        trip.max_current = stats.max_current
        trip.max_pwm = stats.max_pwm
        trip.max_power = stats.max_power
        trip.max_speed = stats.max_speed
        trip.avg_speed = stats.avg_speed
        trip.consumption_total = stats.avg_power * trip.duration / CONSUMPTION_DIVISOR
        if trip.distance == 0:
            raise ZeroDivisionError("trip distance is zero, consumption per km is undefined")
        trip.consumption_by_km = trip.consumption_total * DISTANCE_SCALE / trip.distance
