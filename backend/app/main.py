"""StoreIt FastAPI application factory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app import __version__
from app.config import settings
from app.services import init_services, shutdown_services
from app.services.appwrite_client import AppwriteError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI):
    """Startup / shutdown lifecycle."""
    _setup_logging()
    init_services()
    logger.info("StoreIt v%s started, listening on %s:%s", __version__, settings.host, settings.port)

    try:
        yield
    finally:
        shutdown_services()
        logger.info("StoreIt shutting down")


def _setup_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    # Request lines from httpx are logged per backend call
    for noisy in ("httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


async def _appwrite_error_handler(request: Request, exc: AppwriteError) -> JSONResponse:
    """Backend 4xx pass through; anything else is a bad gateway."""
    code = exc.code if 400 <= exc.code < 500 else status.HTTP_502_BAD_GATEWAY
    logger.warning("%s %s -> %s: %s", request.method, request.url.path, code, exc)
    return JSONResponse(status_code=code, content={"detail": exc.message, "type": exc.type})


def create_app() -> FastAPI:
    """Application factory."""
    from app.api.routes import api_router

    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        debug=settings.debug,
        lifespan=_lifespan,
    )

    # CORS; the session cookie needs credentials
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Revalidate-Path"],
    )

    app.add_exception_handler(AppwriteError, _appwrite_error_handler)
    app.include_router(api_router, prefix=settings.api_prefix)

    return app


app = create_app()


def run(**kwargs: Any) -> None:
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        workers=settings.uvicorn_workers,
        log_level=settings.log_level.lower(),
        **kwargs,
    )


if __name__ == "__main__":
    run()
