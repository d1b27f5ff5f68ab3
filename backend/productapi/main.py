"""
Product API — FastAPI Application Factory
==========================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes configuration, middleware registration, route mounting
       and lifecycle management in one place.
How:   Factory pattern: create_app() returns a configured FastAPI instance
       that owns its own ProductStore.
Who:   Called by uvicorn (productapi.main:app) and by the test suite.

Application Architecture:
    ┌───────────────────────────────────────────────────────┐
    │                     FastAPI App                       │
    │                                                       │
    │  Middleware Chain:                                    │
    │  ┌──────────┐ ┌─────────┐ ┌────────────┐ ┌─────────┐  │
    │  │ Req ID   │→│ Logging │→│ Normalizer │→│ API Key │  │
    │  └──────────┘ └─────────┘ └────────────┘ └─────────┘  │
    │                                                       │
    │  Routes:                                              │
    │  GET /   ·   /api/products (list/create)              │
    │  /api/products/stats   ·   /api/products/{id}         │
    │                                                       │
    │  Exception Handlers:                                  │
    │  ProductAPIError → its status │ HTTPException │ 500   │
    └───────────────────────────────────────────────────────┘

    State:
        app.state.settings: Settings used to build this app
        app.state.store:    ProductStore, the in-memory product data
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI

from productapi import __version__
from productapi.config import Settings, settings as default_settings
from productapi.middleware.auth import APIKeyMiddleware
from productapi.middleware.errors import ErrorNormalizerMiddleware, register_exception_handlers
from productapi.middleware.logging import RequestLoggingMiddleware
from productapi.middleware.request_id import RequestIDMiddleware
from productapi.routes import products, root
from productapi.services.product_store import ProductStore

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str) -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during app startup, before anything else logs.
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Our access log replaces uvicorn's
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup:
        1. Setup logging
        2. Warn about weak configuration (default API key)
        3. Log the listening address and store size
    Shutdown:
        Nothing to release; the store dies with the process.
    """
    app_settings: Settings = app.state.settings
    setup_logging(app_settings.log_level)
    logger.info("=" * 60)
    logger.info("Product API %s starting up (%s)", __version__, app_settings.environment)

    try:
        app_settings.validate_required_for_production()
    except ValueError as e:
        # Don't exit: local development runs on the defaults
        logger.warning("Configuration warning: %s", str(e))

    logger.info("Loaded %d products", len(app.state.store))
    logger.info("Server is running on http://%s:%d", app_settings.host, app_settings.port)
    logger.info("=" * 60)

    yield

    logger.info("Product API shutting down...")


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    settings: Optional[Settings] = None,
    store: Optional[ProductStore] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Configuration; the module-level singleton when omitted.
        store:    Product data; a fresh store (seeded per settings) when omitted.

    Returns:
        Fully configured FastAPI instance. Every call yields an independent
        app with its own store, so tests never share data.
    """
    if settings is None:
        settings = default_settings
    if store is None:
        store = ProductStore.with_sample_data() if settings.seed_sample_data else ProductStore()

    app = FastAPI(
        title="Product API",
        description="CRUD API over an in-memory product catalogue, protected by an API key.",
        version=__version__,
        # Interactive docs cannot send x-api-key; the schema stays available behind it
        docs_url=None,
        redoc_url=None,
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added = first to execute. Execution order:
    # RequestID → Logging → ErrorNormalizer → APIKey → routes
    app.add_middleware(APIKeyMiddleware, api_key=settings.api_key)
    app.add_middleware(ErrorNormalizerMiddleware, debug=settings.is_development)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(root.router)
    app.include_router(products.router)

    return app


# uvicorn expects `productapi.main:app` to be importable
app = create_app()
