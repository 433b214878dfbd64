"""
Gateway Service - Main Application
Sole externally reachable entry point; forwards /api traffic to the product service
"""

import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from gateway import __version__
from gateway.config import Settings, get_settings
from gateway.proxy import build_timeout
from gateway.routes import api, health
from gateway.utils.backend_client import BackendClient
from shared.utils.logger import RequestLogger, get_logger, request_timer, setup_logging

logger = get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Build the gateway application.

    Args:
        settings: Gateway settings, read from the environment when omitted
        transport: httpx transport for the backend client; the default
            network transport is used when omitted
    """
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_format)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan events"""
        logger.info(
            "Starting Gateway Service",
            port=settings.port,
            backend_url=settings.backend_url,
            environment=settings.environment,
        )
        backend = BackendClient(
            settings.backend_url,
            build_timeout(settings.backend_timeout, settings.backend_connect_timeout),
            transport=transport,
        )
        await backend.open()
        app.state.backend = backend

        yield

        await backend.close()
        logger.info("Gateway Service shutdown complete")

    # No docs routes: every path outside /health and /api is a 404
    app = FastAPI(
        title="Storefront - Gateway",
        description="Public entry point forwarding /api requests to the product service",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )
    app.state.settings = settings

    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    request_logger = RequestLogger(settings.service_name)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log all completed requests"""
        with request_timer() as timer:
            response = await call_next(request)
        request_logger.log_request(
            request.method,
            request.url.path,
            response.status_code,
            timer.elapsed,
            client_ip=request.client.host if request.client else None,
        )
        return response

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler"""
        logger.error(
            "Unhandled exception",
            error=str(exc),
            method=request.method,
            path=request.url.path,
            exc_info=exc,
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "message": "An unexpected error occurred"
            }
        )

    app.include_router(health.router, tags=["Health"])
    app.include_router(api.router, tags=["Proxy"])

    return app


def main():
    """Run the gateway under uvicorn"""
    import uvicorn

    try:
        settings = get_settings()
    except ValidationError as e:
        print(f"Invalid gateway configuration:\n{e}", file=sys.stderr)
        sys.exit(1)

    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        access_log=False,
    )


if __name__ == "__main__":
    main()
