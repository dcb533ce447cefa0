"""FastAPI application server."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from storefront_core.api.middleware import RequestLoggingMiddleware
from storefront_core.api.repository import ProductRepository
from storefront_core.api.routes import router
from storefront_core.config import get_settings
from storefront_core.exceptions import StorefrontError
from storefront_core.observability.logging import configure_logging

logger = logging.getLogger(__name__)


def create_app(repository: ProductRepository | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        repository: Products to serve. Defaults to the products in
            ``settings.catalog_file``, or an empty repository.
    """
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging(settings)
        logger.info(f"Starting {settings.service_name} with {len(app.state.repository)} products")
        yield
        logger.info("Shutdown complete")

    app = FastAPI(
        title=settings.service_name,
        version=settings.service_version,
        description="Storefront catalog filtering and cart stock reconciliation API.",
        lifespan=lifespan,
    )
    if repository is None:
        repository = (
            ProductRepository.from_json(settings.catalog_file)
            if settings.catalog_file
            else ProductRepository()
        )
    app.state.repository = repository

    # Domain exception handler: map StorefrontError to JSON response
    @app.exception_handler(StorefrontError)
    async def storefront_error_handler(request: Request, exc: StorefrontError):
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "message": exc.message, "detail": exc.detail},
        )

    app.add_middleware(RequestLoggingMiddleware)
    app.include_router(router)

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "storefront_core.api.server:app",
        host="0.0.0.0",
        port=8000,
    )
