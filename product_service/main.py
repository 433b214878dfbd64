"""
Product Service - Main Application
Stores and lists product records; reachable only from the gateway
"""

import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from pymongo.errors import PyMongoError

from product_service import __version__
from product_service.config import Settings, get_settings
from product_service.routes import health, products
from product_service.utils.database import ProductStore
from shared.utils.logger import RequestLogger, get_logger, request_timer, setup_logging

logger = get_logger(__name__)


def describe_validation_errors(exc: RequestValidationError) -> list:
    """Flatten pydantic errors into field/message pairs"""
    details = []
    for error in exc.errors():
        # Drop the leading "body" location segment
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        details.append({
            "field": ".".join(loc) or "body",
            "message": error.get("msg", "Invalid value"),
        })
    return details


def create_app(settings: Optional[Settings] = None, store: Optional[ProductStore] = None) -> FastAPI:
    """
    Build the product service application.

    Args:
        settings: Service settings, read from the environment when omitted
        store: Already constructed product store; when omitted one is built
            from the settings, connected at startup and closed at shutdown
    """
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_format)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan events"""
        logger.info("Starting Product Service", port=settings.port, environment=settings.environment)

        owned_store = None
        if getattr(app.state, "store", None) is None:
            owned_store = ProductStore(
                settings.mongo_url,
                settings.mongo_database,
                settings.products_collection,
                settings.mongo_timeout_ms,
            )
            try:
                await owned_store.connect()
            except Exception as e:
                logger.critical(
                    "Cannot reach MongoDB at startup",
                    database=settings.mongo_database,
                    error=str(e),
                )
                raise
            app.state.store = owned_store

        yield

        if owned_store is not None:
            await owned_store.close()
            app.state.store = None
        logger.info("Product Service shutdown complete")

    app = FastAPI(
        title="Storefront - Product Service",
        description="Stores and lists product records",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store

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

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Report invalid input as a bad request"""
        details = describe_validation_errors(exc)
        logger.info("Rejected invalid request", path=request.url.path, details=details)
        return JSONResponse(
            status_code=400,
            content={
                "error": "Invalid product",
                "message": "Request body must be an object with a non-empty name and a non-negative price",
                "details": details,
            }
        )

    @app.exception_handler(PyMongoError)
    async def database_exception_handler(request: Request, exc: PyMongoError):
        """Report store failures as service unavailable"""
        logger.error(
            "Database operation failed",
            error=str(exc),
            method=request.method,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=503,
            content={
                "error": "Database unavailable",
                "message": "The product store could not complete the request"
            }
        )

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
    app.include_router(products.router, tags=["Products"])

    return app


def main():
    """Run the product service under uvicorn"""
    import uvicorn

    try:
        settings = get_settings()
    except ValidationError as e:
        print(f"Invalid product service configuration:\n{e}", file=sys.stderr)
        sys.exit(1)

    # uvicorn exits non-zero when the lifespan startup raises
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        access_log=False,
    )


if __name__ == "__main__":
    main()
