"""Parser registry API endpoints."""

from fastapi import APIRouter
from pydantic import BaseModel

from crashlogs.exceptions import NotFoundError
from crashlogs.parsers.registry import get_registry, load_builtin_parsers

router = APIRouter()


class ParserInfo(BaseModel):
    name: str
    description: str
    extensions: list[str]


class ParsersListResponse(BaseModel):
    parsers: list[ParserInfo]
    total: int


@router.get("", response_model=ParsersListResponse)
async def list_parsers() -> ParsersListResponse:
    """List the parsers that POST /crashes/parse can choose from."""
    load_builtin_parsers()
    parsers = [ParserInfo(**info) for info in get_registry().describe()]
    return ParsersListResponse(parsers=parsers, total=len(parsers))


@router.get("/{name}", response_model=ParserInfo)
async def get_parser_info(name: str) -> ParserInfo:
    load_builtin_parsers()
    for info in get_registry().describe():
        if info["name"] == name:
            return ParserInfo(**info)
    raise NotFoundError("Parser", name)
