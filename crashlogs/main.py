"""FastAPI application serving the crash log table.

Run with ``uvicorn crashlogs.main:app``.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from crashlogs import __version__
from crashlogs.api.v1 import router as api_v1_router
from crashlogs.config import get_settings
from crashlogs.exceptions import setup_exception_handlers
from crashlogs.parsers.registry import get_registry, load_builtin_parsers

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    load_builtin_parsers()
    logger.info(
        "%s %s serving crash reports from %s with %d parser(s)",
        settings.app_name,
        __version__,
        settings.system_root,
        len(get_registry()),
    )
    yield


app = FastAPI(
    title=settings.app_name,
    description="Structured records from macOS and iOS crash reports",
    version=settings.app_version,
    docs_url="/docs" if settings.debug else None,
    redoc_url=None,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)
setup_exception_handlers(app)
app.include_router(api_v1_router, prefix="/api/v1")


@app.get("/health")
async def health_check():
    return {"status": "healthy", "app": settings.app_name, "version": settings.app_version}


@app.get("/")
async def root():
    """Entry points of the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "crashes": "/api/v1/crashes",
        "parsers": "/api/v1/parsers",
    }
