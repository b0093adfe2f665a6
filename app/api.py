"""HTTP route definitions for the service."""

from __future__ import annotations

from dataclasses import asdict
from pathlib import Path

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status

from app.schemas import (
    ImportResponse,
    LogListResponse,
    LogUploadResponse,
    SampleModel,
    TripSummary,
)
from datastore.trip_store import TripTable, build_default_table
from services.errors import StreamOpenError
from services.trip_parser import TripParser, build_default_parser

router = APIRouter()


def get_parser() -> TripParser:
    return build_default_parser()


def get_table() -> TripTable:
    return build_default_table()


@router.post(
    "/logs",
    status_code=status.HTTP_201_CREATED,
    response_model=LogUploadResponse,
    summary="Store a wheel log file for later import.",
)
def upload_log(
    file: UploadFile = File(..., description="CSV log written by the wheel recorder."),
    parser: TripParser = Depends(get_parser),
) -> LogUploadResponse:
    file_name = Path(file.filename or "wheel_log.csv").name
    contents = file.file.read()
    if not contents:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Uploaded file is empty.",
        )
    try:
        parser.store.put_object(file_name, contents)
    except StreamOpenError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    return LogUploadResponse(file_name=file_name)


@router.get(
    "/logs",
    response_model=LogListResponse,
    summary="List stored wheel logs.",
)
def list_logs(parser: TripParser = Depends(get_parser)) -> LogListResponse:
    return LogListResponse(file_names=list(parser.store.list_objects()))


@router.post(
    "/logs/{file_name}/import",
    response_model=ImportResponse,
    summary="Decode a stored log and refresh its trip summary.",
)
def import_log(
    file_name: str,
    include_samples: bool = Query(False, description="Return decoded samples too."),
    parser: TripParser = Depends(get_parser),
) -> ImportResponse:
    if not parser.store.exists(file_name):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Log {file_name!r} not found.",
        )
    result = parser.parse(file_name, file_name)
    samples = None
    if include_samples:
        samples = [SampleModel(**asdict(sample)) for sample in result.samples]
    return ImportResponse(
        file_name=file_name,
        sample_count=len(result.samples),
        error=result.error,
        trip=result.trip,
        samples=samples,
    )


@router.get(
    "/trips",
    response_model=list[TripSummary],
    summary="List stored trip summaries.",
)
def list_trips(table: TripTable = Depends(get_table)) -> list[TripSummary]:
    return sorted(table.scan(), key=lambda trip: trip.file_name)


@router.get(
    "/trips/{file_name}",
    response_model=TripSummary,
    summary="Fetch the trip summary of an imported log.",
)
def get_trip(file_name: str, table: TripTable = Depends(get_table)) -> TripSummary:
    trip = table.get_by_file_name(file_name)
    if trip is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Trip for {file_name!r} not found.",
        )
    return trip


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}
