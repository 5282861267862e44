"""
FastAPI application initialization and configuration.

The HTTP surface of the mock API. Every route goes through the same
`ApiClient` the state slices use, so HTTP callers see the same latency,
injected failures and `{error, timestamp}` bodies.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import AsyncEngine

from api.client import ApiClient
from api.routes import health
from api.routes.v1 import assessments, candidates, jobs
from core.config import settings
from core.middleware import (
    ErrorHandlingMiddleware,
    StructuredLoggingMiddleware,
    setup_error_handlers,
    setup_logging,
)
from core.simulation import SimulatedNetwork
from database.engine import close_db, db_engine, init_db
from database.seed import initialize_database, load_seed_file
from database.store import RecordStore

# Setup structured logging (do this first, before anything else)
setup_logging(
    log_level=settings.log_level,
    json_logs=settings.json_logs,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables and seed on startup; dispose of the engine on shutdown."""
    logger.info(f"Starting {settings.app_name} in {settings.app_env} environment")

    await init_db(app.state.engine)

    seed_data = app.state.seed_data
    if seed_data is None and settings.seed_path:
        seed_data = load_seed_file(settings.seed_path)
    if seed_data:
        counts = await initialize_database(app.state.api_client.store, seed_data)
        logger.info(f"Seed results: {counts}")

    yield

    logger.info(f"Shutting down {settings.app_name}")
    await close_db(app.state.engine)


def create_app(
    api_client: Optional[ApiClient] = None,
    engine: Optional[AsyncEngine] = None,
    seed_data: Optional[dict[str, list[dict[str, Any]]]] = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        api_client: Client to serve; built on the configured database and
            simulated network when omitted
        engine: Engine behind `api_client`'s store, whose tables are created
            at startup; the configured engine when omitted
        seed_data: Seed document applied at startup; falls back to
            `SEED_PATH` when omitted
    """
    app = FastAPI(
        title=settings.app_name,
        description="Mock ATS API over a local record store",
        version="0.1.0",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )
    app.state.engine = engine or db_engine
    app.state.seed_data = seed_data
    app.state.api_client = api_client or ApiClient(RecordStore(), SimulatedNetwork.from_settings())

    # Setup error handlers (before middleware)
    setup_error_handlers(app, debug=settings.debug)

    # Middleware runs in reverse order of registration: the last one added is outermost
    # 1. Error handling (right outside the routes, so logging sees its responses)
    app.add_middleware(ErrorHandlingMiddleware, debug=settings.debug)

    # 2. Structured logging
    app.add_middleware(
        StructuredLoggingMiddleware,
        log_request_body=settings.log_request_body,
        log_response_body=settings.log_response_body,
        max_body_size=settings.log_max_body_size,
    )

    # 3. CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router, tags=["Health"])
    app.include_router(jobs.router, prefix=settings.api_prefix)
    app.include_router(candidates.router, prefix=settings.api_prefix)
    app.include_router(assessments.router, prefix=settings.api_prefix)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
