from __future__ import annotations
import json
import logging
from datetime import datetime, timezone
from functools import lru_cache
from pathlib import Path
from threading import Lock
from typing import Dict, Optional, Protocol

from app.schemas import TripSummary
from settings import get_settings

logger = logging.getLogger(__name__)


class TripAlreadyExistsError(KeyError):
    pass


class TripNotFoundError(KeyError):
    pass


class TripRepository(Protocol):
    """Storage the trip parser needs for summaries keyed by file name."""

    def get_by_file_name(self, file_name: str) -> Optional[TripSummary]:
        ...

    def insert(self, trip: TripSummary) -> None:
        ...

    def update(self, trip: TripSummary) -> None:
        ...


class TripTable:

    def __init__(self, name: str, persistence_path: Optional[Path] = None) -> None:
        self.name = name
        self._items: Dict[str, TripSummary] = {}
        self.persistence_path = persistence_path
        self._lock = Lock()
        if persistence_path:
            persistence_path.parent.mkdir(parents=True, exist_ok=True)
            self._load_from_disk()

    def get_by_file_name(self, file_name: str) -> Optional[TripSummary]:
        with self._lock:
            item = self._items.get(file_name)
            if item is None:
                return None
            return item.model_copy(deep=True)

    def insert(self, trip: TripSummary) -> None:
        with self._lock:
            if trip.file_name in self._items:
                raise TripAlreadyExistsError(
                    f"Trip for {trip.file_name!r} already exists in table {self.name!r}."
                )
            now = datetime.now(timezone.utc)
            self._items[trip.file_name] = trip.model_copy(
                update={"created_at": now, "updated_at": now}, deep=True
            )
            self._persist()

    def update(self, trip: TripSummary) -> None:
        with self._lock:
            existing = self._items.get(trip.file_name)
            if existing is None:
                raise TripNotFoundError(
                    f"Trip for {trip.file_name!r} not found in table {self.name!r}."
                )
            self._items[trip.file_name] = trip.model_copy(
                update={
                    "created_at": existing.created_at,
                    "updated_at": datetime.now(timezone.utc),
                },
                deep=True,
            )
            self._persist()

    def count(self, file_name: str) -> int:
        with self._lock:
            return 1 if file_name in self._items else 0

    def scan(self) -> list[TripSummary]:
        """Return deep copies of all stored trips."""

        with self._lock:
            return [item.model_copy(deep=True) for item in self._items.values()]

    def _persist(self) -> None:
        if not self.persistence_path:
            return
        payload = {
            file_name: item.model_dump(mode="json")
            for file_name, item in self._items.items()
        }
        self.persistence_path.write_text(json.dumps(payload, indent=2, sort_keys=True))

    def _load_from_disk(self) -> None:
        if not self.persistence_path or not self.persistence_path.exists():
            return

        try:
            raw = self.persistence_path.read_text() or "{}"
            data = json.loads(raw)
        except (OSError, json.JSONDecodeError):
            logger.warning(
                "Ignoring unreadable trip table file %s", self.persistence_path
            )
            data = {}

        for file_name, payload in data.items():
            self._items[file_name] = TripSummary.model_validate(payload)


@lru_cache
def build_default_table(
    name: Optional[str] = None,
    path: Optional[str] = None,
) -> TripTable:
    settings = get_settings()
    table_name = settings.trip_table_name if name is None else name
    table_path = settings.trip_table_path if path is None else path
    persistence = Path(table_path) if table_path else None
    return TripTable(name=table_name, persistence_path=persistence)
