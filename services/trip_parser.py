"""Import orchestration for wheel logs."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from threading import Lock
from typing import List, Optional

from app.schemas import TripSummary
from datastore.trip_store import TripRepository, build_default_table
from models.records import LogSample
from services.aggregator import TripAggregator
from services.decoder import decode_row
from services.errors import (
    AggregationError,
    HeaderError,
    RowDecodeError,
    StreamOpenError,
)
from services.header import resolve_header
from storage.log_files import LogFileStore, build_default_store

logger = logging.getLogger(__name__)


@dataclass
class ParseResult:
    """Samples decoded from a log together with the failure, if any."""

    samples: List[LogSample] = field(default_factory=list)
    error: Optional[str] = None
    trip: Optional[TripSummary] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class LastErrorRegister:
    """Single-slot error message that is cleared when read."""

    def __init__(self) -> None:
        self._message: Optional[str] = None
        self._lock = Lock()

    def record(self, message: str) -> None:
        with self._lock:
            self._message = message

    def clear(self) -> None:
        with self._lock:
            self._message = None

    def consume(self) -> str:
        with self._lock:
            message, self._message = self._message, None
        return message or ""


class TripParser:
    """Turns a stored wheel log into samples and a persisted trip summary."""

    def __init__(
        self,
        store: LogFileStore,
        repository: Optional[TripRepository] = None,
    ) -> None:
        self.store = store
        self.repository = repository
        self.aggregator = TripAggregator(repository) if repository is not None else None
        self.last_error = LastErrorRegister()

    def parse(self, file_identity: str, display_name: Optional[str] = None) -> ParseResult:
        """Decode ``file_identity`` and update its trip summary. Never raises."""
        file_name = display_name or file_identity
        self.last_error.clear()
        result = ParseResult()
        context = {"file_name": file_name}

        try:
            with self.store.open_stream(file_identity) as stream:
                columns = resolve_header(stream.readline() or None, file_name)
                for row_number, line in enumerate(stream, start=2):
                    try:
                        result.samples.append(decode_row(line, columns))
                    except RowDecodeError as exc:
                        raise RowDecodeError(f"Line {row_number}: {exc}") from exc
        except StreamOpenError as exc:
            return self._fail(result, str(exc), "stream", context)
        except HeaderError as exc:
            return self._fail(result, str(exc), "header", context)
        except RowDecodeError as exc:
            return self._fail(result, str(exc), "row", context)
        except Exception as exc:  # noqa: BLE001 - I/O and unexpected read failures
            return self._fail(result, f"Cannot read {file_name}: {exc}", "stream", context)

        logger.info(
            "Decoded wheel log",
            extra={**context, "sample_count": len(result.samples)},
        )

        if self.aggregator is None:
            return result

        try:
            result.trip = self.aggregator.upsert(file_name, result.samples)
        except AggregationError as exc:
            result.trip = self._stored_trip(file_name)
            return self._fail(result, str(exc), "aggregation", context)
        except Exception as exc:  # noqa: BLE001 - repository failures are reported, not raised
            return self._fail(
                result, f"Cannot store trip for {file_name}: {exc}", "aggregation", context
            )

        return result

    def parse_file(self, file_identity: str, display_name: Optional[str] = None) -> List[LogSample]:
        """Return the decoded samples; failures are left in ``consume_last_error``."""
        return self.parse(file_identity, display_name).samples

    def consume_last_error(self) -> str:
        return self.last_error.consume()

    def _stored_trip(self, file_name: str) -> Optional[TripSummary]:
        if self.repository is None:
            return None
        try:
            return self.repository.get_by_file_name(file_name)
        except Exception:  # noqa: BLE001 - the aggregation error is already being reported
            logger.exception("Cannot reload trip after failed aggregation", extra={"file_name": file_name})
            return None

    def _fail(self, result: ParseResult, message: str, reason: str, context: dict) -> ParseResult:
        result.error = message
        self.last_error.record(message)
        logger.error(
            message,
            extra={**context, "reason": reason, "sample_count": len(result.samples)},
        )
        return result


@lru_cache
def build_default_parser() -> TripParser:
    """Factory that wires the parser with the settings-driven store and table."""
    return TripParser(store=build_default_store(), repository=build_default_table())
