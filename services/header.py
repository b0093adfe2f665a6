"""Header line resolution for wheel logs."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Mapping, Optional

from models.records import LogHeader
from services.errors import EmptyLogError, MissingGpsDataError

logger = logging.getLogger(__name__)

DELIMITER = ","

ColumnIndexMap = Mapping[LogHeader, int]

_REQUIRED_COLUMNS = (LogHeader.LATITUDE, LogHeader.LONGITUDE)


def resolve_header(line: Optional[str], file_name: str) -> ColumnIndexMap:
    """Map recognized header tokens to their column positions.

    Unknown tokens are ignored. Raises ``MissingGpsDataError`` when the header
    lacks latitude or longitude, and ``EmptyLogError`` when there is no header.
    """
    if line is None or not line.strip():
        raise EmptyLogError(file_name)

    columns: dict[LogHeader, int] = {}
    ignored: list[str] = []
    for position, token in enumerate(line.rstrip("\r\n").split(DELIMITER)):
        field = LogHeader.lookup(token)
        if field is None:
            ignored.append(token)
            continue
        columns[field] = position

    if ignored:
        logger.debug(
            "Ignoring unrecognized header columns: %s",
            ", ".join(ignored),
            extra={"file_name": file_name},
        )

    if any(field not in columns for field in _REQUIRED_COLUMNS):
        raise MissingGpsDataError(file_name)

    return MappingProxyType(columns)
