"""
FastAPI backend for Hydro Search Params.
Run locally: uvicorn app:app --reload
"""
from __future__ import annotations
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from pipeline.catalog import load_catalog_entries
from pipeline.config import AppConfig, load_config
from pipeline.errors import HydroSearchError, InvalidRequest
from pipeline.main import search
from pipeline.stac import build_stac_query, datetime_interval, search_stac

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # ConfigurationError here stops the server before it serves anything.
    if getattr(app.state, "config", None) is None:
        app.state.config = load_config()
    logger.info("Configuration loaded: %r", app.state.config)
    yield


# =============================================================================
# FASTAPI APP
# =============================================================================
app = FastAPI(
    title="Hydro Search Params",
    description="Natural language to hydrology search parameters",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_config(request: Request) -> AppConfig:
    return request.app.state.config


# =============================================================================
# REQUEST/RESPONSE MODELS
# =============================================================================
class SearchParamsResponse(BaseModel):
    collections: list[str]
    startDate: str | None = None
    endDate: str | None = None
    boundingBox: list[str] | None = None


class ErrorResponse(BaseModel):
    code: str
    message: str


class StacSearchRequest(BaseModel):
    collections: list[str] | None = None
    bbox: list[float | str] | None = None
    datetime: str | None = None
    # /searchparams dates; used when datetime is not given
    startDate: str | None = None
    endDate: str | None = None


# =============================================================================
# ERROR HANDLERS
# =============================================================================
def _error(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"code": code, "message": message})


@app.exception_handler(InvalidRequest)
async def invalid_request_handler(request: Request, exc: InvalidRequest):
    return _error(400, "BAD_REQUEST", str(exc))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return _error(400, "BAD_REQUEST", str(exc.errors()))


@app.exception_handler(HydroSearchError)
async def pipeline_error_handler(request: Request, exc: HydroSearchError):
    logger.error("Request %s failed: %s", request.url.path, exc)
    return _error(500, "INTERNAL_SERVER_ERROR", str(exc))


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("Unexpected error on %s", request.url.path)
    return _error(500, "INTERNAL_SERVER_ERROR", str(exc) or exc.__class__.__name__)


# =============================================================================
# ROUTES
# =============================================================================
@app.get(
    "/searchparams",
    response_model=SearchParamsResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def search_params(
    requestString: Optional[str] = None,
    model: Optional[str] = None,
    config: AppConfig = Depends(get_config),
):
    """Translate a free-text hydrology query into collections, dates and bbox."""
    result = search(requestString, config, model=model)
    return result.to_response()


@app.get("/api/collections")
def list_collections(config: AppConfig = Depends(get_config)):
    """Return catalog metadata keyed by collection id."""
    entries = load_catalog_entries(config.catalog_path)
    logger.info("Serving %d collections", len(entries))
    return entries


@app.post("/api/stac")
def stac_search(req: StacSearchRequest, config: AppConfig = Depends(get_config)):
    """Forward extracted parameters to the STAC item search."""
    interval = req.datetime or datetime_interval(req.startDate, req.endDate)
    query = build_stac_query(req.collections, req.bbox, interval)
    return search_stac(query, config.stac_url)


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "Hydro Search Params"}


# =============================================================================
# MAIN
# =============================================================================
if __name__ == "__main__":
    import uvicorn
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    uvicorn.run(app, host="0.0.0.0", port=8080)
