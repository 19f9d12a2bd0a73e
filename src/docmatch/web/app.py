"""FastAPI service exposing duplicate detection over HTTP."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import List

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, ConfigDict, Field

from docmatch.config import AppConfig, StorageConfig
from docmatch.errors import ConfigurationError, DocMatchError, EnumerationError
from docmatch.matching.matcher import DEFAULT_THRESHOLD
from docmatch.pipeline import compare
from docmatch.sources.filesystem import FilesystemSource
from docmatch.sources.storage import StorageSource
from docmatch.utils.files import DEFAULT_EXTENSIONS

LOGGER = logging.getLogger(__name__)

TEXT_MEDIA_TYPE = "text/plain; charset=utf-8"

app = FastAPI(title="DocMatch", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


class ComparePayload(BaseModel):
    first_folder: Path
    second_folder: Path
    threshold: float = Field(DEFAULT_THRESHOLD, ge=0.0, le=1.0)
    with_content: bool = True
    extensions: List[str] = Field(default_factory=lambda: list(DEFAULT_EXTENSIONS), min_length=1)


class StorageComparePayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    first_prefix: str = Field(..., alias="firstPrefix")
    second_prefix: str = Field(..., alias="secondPrefix")
    threshold: float = Field(DEFAULT_THRESHOLD, ge=0.0, le=1.0)
    extensions: List[str] = Field(default_factory=lambda: list(DEFAULT_EXTENSIONS), min_length=1)


@app.on_event("startup")
async def startup_event() -> None:
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")


@app.post("/compare", response_class=PlainTextResponse)
async def compare_folders(payload: ComparePayload) -> PlainTextResponse:
    first = payload.first_folder.expanduser()
    second = payload.second_folder.expanduser()
    config = AppConfig(
        threshold=payload.threshold,
        with_content=payload.with_content,
        extensions=tuple(payload.extensions),
    )

    try:
        report = await asyncio.to_thread(
            compare,
            FilesystemSource(first, extensions=config.extensions),
            FilesystemSource(second, extensions=config.extensions),
            config,
        )
    except EnumerationError as exc:
        LOGGER.error("Enumeration failed: %s", exc)
        raise HTTPException(status_code=404, detail=str(exc)) from exc

    return PlainTextResponse(report, media_type=TEXT_MEDIA_TYPE)


@app.post("/storage/compare", response_class=PlainTextResponse)
async def compare_storage(payload: StorageComparePayload) -> PlainTextResponse:
    try:
        storage_config = StorageConfig.from_env()
    except ConfigurationError as exc:
        LOGGER.error("%s", exc)
        return PlainTextResponse(
            "Storage credentials not configured", status_code=500, media_type=TEXT_MEDIA_TYPE
        )

    # Remote listings carry no text, so matching uses name and size only.
    config = AppConfig(
        threshold=payload.threshold, with_content=False, extensions=tuple(payload.extensions)
    )
    first = StorageSource(storage_config, payload.first_prefix, extensions=config.extensions)
    second = StorageSource(storage_config, payload.second_prefix, extensions=config.extensions)
    try:
        with first, second:
            report = await asyncio.to_thread(compare, first, second, config)
    except DocMatchError as exc:
        LOGGER.error("Storage comparison failed: %s", exc)
        return PlainTextResponse("Error in compare", status_code=500, media_type=TEXT_MEDIA_TYPE)

    return PlainTextResponse(report, media_type=TEXT_MEDIA_TYPE)
