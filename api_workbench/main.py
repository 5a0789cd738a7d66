"""
API Workbench - FastAPI Application Entry Point

A Postman-like tool for defining HTTP requests with environment variables
and authentication, and executing them against live servers.
"""

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings, load_settings
from .database import create_db_engine, create_session_factory, init_db
from .exceptions import register_exception_handlers
from .logging_config import configure_logging
from .middleware import RateLimitMiddleware, TokenBucket
from .routers import collections, environments, execute, methods
from .services.http_executor import HttpExecutor, RequestEngine, create_http_client


logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Application settings; loaded from the environment if omitted
        http_client: Client for outbound requests; a pooled client with the
            configured timeout is created if omitted. The app closes it on
            shutdown either way.
    """
    if settings is None:
        settings = load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler for startup and shutdown events."""
        db_engine = create_db_engine(settings.database_url)
        init_db(db_engine)
        app.state.session_factory = create_session_factory(db_engine)

        client = http_client
        if client is None:
            client = create_http_client(
                timeout=settings.request_timeout,
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
            )
        app.state.engine = RequestEngine(HttpExecutor(client))
        logger.info("API Workbench started")
        try:
            yield
        finally:
            await app.state.engine.aclose()
            db_engine.dispose()

    app = FastAPI(
        title="API Workbench",
        description="Define, store and execute HTTP requests with environments and authentication",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    if settings.rate_limit > 0:
        app.add_middleware(
            RateLimitMiddleware,
            bucket=TokenBucket(settings.rate_limit, settings.rate_limit_burst),
        )

    register_exception_handlers(app)

    @app.get("/")
    async def root():
        """Root endpoint returning API information."""
        return {
            "name": "API Workbench",
            "version": "1.0.0",
            "docs": "/docs"
        }

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    app.include_router(collections.router)
    app.include_router(environments.router)
    app.include_router(execute.router)
    app.include_router(methods.router)

    return app


def run() -> None:
    """Console entry point: configure logging and serve with uvicorn."""
    import uvicorn

    settings = load_settings()
    configure_logging(settings)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_config=None)
