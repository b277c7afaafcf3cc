"""HTTP Middleware - CORS, gzip pass-through, content type by suffix, request timing.

Invariants:
    - Content-Type is only set from the URI suffix when the handler left it unset
    - Cache-Control (30 days) only on 200 responses for static asset suffixes
    - Every request logs "<METHOD> <URI> took <ms>" when log_requests is on
    - Gzip compresses only when the client sends Accept-Encoding: gzip

Design Decisions:
    - Starlette GZipMiddleware is the pass-through compression decorator
    - Registration order: gzip innermost, CORS outermost
"""

import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from app.config import Settings

logger = logging.getLogger(__name__)

CACHE_CONTROL = "public, max-age=2592000"  # 30 days

_SUFFIX_TYPES = (
    (".css", "text/css"),
    (".html", "text/html"),
    (".ico", "image/x-icon"),
    (".png", "image/png"),
    (".jpg", "image/jpeg"),
    (".jpeg", "image/jpeg"),
    (".wasm", "application/wasm"),
    (".js", "application/javascript"),
)


def sniff_content_type(uri: str) -> tuple[str | None, bool]:
    """Media type guessed from the request URI, plus whether it is cacheable."""
    for suffix, media_type in _SUFFIX_TYPES:
        if uri.endswith(suffix):
            return media_type, True
    if uri.endswith("json"):  # .json or ?json
        return "application/json", False
    return None, False


def register_middleware(app: FastAPI, settings: Settings) -> None:
    """Register all middleware on the FastAPI app."""
    app.add_middleware(GZipMiddleware, minimum_size=settings.gzip_minimum_size)

    @app.middleware("http")
    async def content_headers_and_timing(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        uri = request.url.path
        if request.url.query:
            uri = f"{uri}?{request.url.query}"
        if response.status_code == 200:
            media_type, cacheable = sniff_content_type(uri)
            if media_type and "content-type" not in response.headers:
                response.headers["Content-Type"] = media_type
            if cacheable:
                response.headers["Cache-Control"] = CACHE_CONTROL
        if settings.log_requests:
            elapsed_ms = (time.perf_counter() - start) * 1000
            logger.info(
                f"{request.method} {uri} took {elapsed_ms:.2f}ms",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "duration_ms": round(elapsed_ms, 3),
                },
            )
        return response

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["ETag", "Location", "Id"],
    )
