"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ledger.config import Config
from ledger.datasources import DataSource, HyperliquidDataSource
from ledger.errors import LedgerError
from ledger.api import router
from ledger.api.dependencies import set_datasource

logger = logging.getLogger(__name__)


async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    """Render a LedgerError as a JSON error body with its status code."""
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, "status": exc.status_code},
    )


def create_app(
    config: Config | None = None,
    datasource: DataSource | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Application configuration. If None, loads from environment.
        datasource: Data source to serve from. If None, a HyperliquidDataSource
            is built from the config.

    Returns:
        Configured FastAPI application
    """
    if config is None:
        config = Config.from_env()

    if datasource is None:
        datasource = HyperliquidDataSource(
            api_url=config.hyperliquid_api_url,
            page_size=config.page_size,
            timeout=config.request_timeout,
            max_retries=config.max_retries,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler for startup/shutdown."""
        # Startup
        logger.info("Starting Hyperliquid PnL Ledger API")
        logger.info(f"Using Hyperliquid API: {config.hyperliquid_api_url}")

        set_datasource(datasource)

        yield

        # Shutdown
        logger.info("Shutting down...")
        await datasource.close()
        set_datasource(None)

    app = FastAPI(
        title="Hyperliquid PnL Ledger API",
        description="Account timeline reconstruction and PnL tracking for Hyperliquid",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["Content-Type"],
    )

    app.add_exception_handler(LedgerError, ledger_error_handler)

    # Include API routes
    app.include_router(router)

    # Health check endpoint
    @app.get("/health")
    async def health_check():
        return {"status": "healthy"}

    return app
