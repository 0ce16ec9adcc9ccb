from __future__ import annotations

import time
from http import HTTPStatus
from typing import Mapping, Optional

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.responses import FileResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.staticfiles import NotModifiedResponse, StaticFiles

from .config import Settings, get_settings
from .documents import lookup_document
from .models import LookupStatus

logger = structlog.get_logger(__name__)

# Every method is answered on "/"; anything else falls through to 404.
RESPONDER_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

HTML_MEDIA_TYPE = "text/html; charset=utf-8"

# Only used for its conditional-request check; it serves no directory.
CONDITIONAL = StaticFiles(check_dir=False)


# === Helpers ===


def error_response(status_code: int, headers: Optional[Mapping[str, str]] = None) -> PlainTextResponse:
    body = f"{status_code} {HTTPStatus(status_code).phrase}"
    return PlainTextResponse(body, status_code=status_code, headers=headers)


# === Application ===


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(title="pageserve", version="1.0.0", docs_url=None, redoc_url=None, openapi_url=None)
    app.state.settings = settings

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        logger.info(
            "request",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )
        return response

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> PlainTextResponse:
        return error_response(exc.status_code, headers=exc.headers)

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception) -> PlainTextResponse:
        logger.exception("unhandled error", method=request.method, path=request.url.path)
        return error_response(500)

    @app.api_route("/", methods=RESPONDER_METHODS, include_in_schema=False)
    def index(request: Request) -> Response:
        lookup = lookup_document(settings.index_file)
        if lookup.status is LookupStatus.UNREADABLE:
            logger.error("document unreadable", path=str(lookup.path), reason=lookup.detail)
            return error_response(lookup.status_code)
        if not lookup.found:
            logger.warning("document not found", path=str(lookup.path), reason=lookup.detail)
            return error_response(lookup.status_code)

        response = FileResponse(lookup.path, stat_result=lookup.stat, media_type=HTML_MEDIA_TYPE)
        if request.method in ("GET", "HEAD") and CONDITIONAL.is_not_modified(response.headers, request.headers):
            return NotModifiedResponse(response.headers)
        return response

    return app


app = create_app()
