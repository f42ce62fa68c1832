"""Crash log API endpoints.

Exposes the crash log table with optional uid/type constraints, and ad-hoc
parsing of report text submitted by the caller.
"""

import logging
from pathlib import Path
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel, Field

from crashlogs.config import Settings, get_settings
from crashlogs.exceptions import BadRequestError, NotFoundError
from crashlogs.parsers.base import CrashCategory
from crashlogs.parsers.registry import get_registry, load_builtin_parsers
from crashlogs.services.crash_logs import QueryConstraints, generate_crash_logs

logger = logging.getLogger(__name__)
router = APIRouter()


# Pydantic schemas
class CrashLogListResponse(BaseModel):
    """Crash log table rows; each item only holds the fields it populated."""

    items: list[dict[str, str]]
    total: int


class CrashParseRequest(BaseModel):
    """Report text to parse without touching the filesystem."""

    content: str = Field(..., description="Full text of the crash report")
    path: str = Field(..., min_length=1, description="Path recorded as crash_path")
    category: CrashCategory | None = Field(
        None,
        description="Category label to stamp on the record",
    )
    parser_hint: str | None = Field(
        None,
        description="Parser name hint (e.g., 'apple_crash')",
    )


@router.get("", response_model=CrashLogListResponse)
async def list_crash_logs(
    settings: Annotated[Settings, Depends(get_settings)],
    uid: Annotated[str | None, Query(pattern=r"^\d+$", description="Owner uid")] = None,
    type: Annotated[CrashCategory | None, Query(description="Category label")] = None,
) -> CrashLogListResponse:
    """List parsed crash reports from the well-known diagnostics directories."""
    constraints = QueryConstraints(uid=uid, type=type)
    records = await run_in_threadpool(generate_crash_logs, constraints, settings)
    items = [record.to_dict() for record in records]
    return CrashLogListResponse(items=items, total=len(items))


@router.post("/parse", response_model=dict[str, str])
async def parse_crash_log(request: CrashParseRequest) -> dict[str, str]:
    """Parse submitted crash report text into a sparse record."""
    load_builtin_parsers()
    registry = get_registry()

    if request.parser_hint and registry.get(request.parser_hint) is None:
        raise NotFoundError("Parser", request.parser_hint)

    parser = registry.find_parser(
        file_path=Path(request.path),
        content=request.content,
        hint=request.parser_hint,
    )
    if parser is None:
        raise BadRequestError(f"No parser can handle '{request.path}'")

    record = parser.parse_content(request.content, request.path)
    logger.debug("Parsed submitted report %s with %s", request.path, parser.name)
    if request.category is not None:
        record.type = request.category.value
    return record.to_dict()
