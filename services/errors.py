"""Failures raised while importing a wheel log."""

from __future__ import annotations


class TripImportError(Exception):
    """Base class for every failure the trip parser turns into a message."""


class StreamOpenError(TripImportError):
    """The log file could not be opened for reading."""


class HeaderError(TripImportError):
    """The header line cannot be used to decode the file."""

    def __init__(self, message: str, file_name: str) -> None:
        super().__init__(message)
        self.file_name = file_name


class EmptyLogError(HeaderError):
    def __init__(self, file_name: str) -> None:
        super().__init__(f"File {file_name} is empty.", file_name)


class MissingGpsDataError(HeaderError):
    def __init__(self, file_name: str) -> None:
        super().__init__(f"File {file_name} has no GPS data.", file_name)


class RowDecodeError(TripImportError, ValueError):
    """A line could not be decoded into a sample at all."""


class TimeFormatError(RowDecodeError):
    pass


class AggregationError(TripImportError):
    """Trip statistics could not be fully computed or persisted."""

    def __init__(self, message: str, file_name: str) -> None:
        super().__init__(message)
        self.file_name = file_name
