from __future__ import annotations
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.api import router
from logging_config import configure_logging
from services.trip_parser import build_default_parser


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    build_default_parser()
    try:
        yield
    finally:
        build_default_parser.cache_clear()


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(
        title="Wheel Trip Importer",
        description="Imports wheel telemetry logs and keeps per-trip statistics.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.include_router(router)
    return app


app = create_app()
