"""FastAPI application factory for the Relaygate service."""

import logging
from contextlib import asynccontextmanager

import httpx
import structlog
from fastapi import FastAPI

from .config import Settings, settings as default_settings
from .origin import OriginGate, OriginGateMiddleware
from .routers import health_router, proxy_router


def configure_logging(settings: Settings) -> None:
    """Configure structlog for the service."""
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer()
            if settings.debug
            else structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, settings.log_level.upper())
        ),
        logger_factory=structlog.WriteLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def create_upstream_client(settings: Settings) -> httpx.AsyncClient:
    """Shared client for upstream calls; redirects are opted into per request."""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.upstream_timeout),
        follow_redirects=False,
        max_redirects=settings.max_redirects,
    )


def create_app(
    settings: Settings | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or default_settings
    configure_logging(settings)
    logger = structlog.get_logger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        client = http_client or create_upstream_client(settings)
        app.state.http_client = client
        logger.info(
            "Relay started",
            allowed_origins=sorted(settings.allowed_origins),
            max_redirects=settings.max_redirects,
        )
        try:
            yield
        finally:
            await client.aclose()
            logger.info("Relay stopped")

    # Initialize FastAPI app
    app = FastAPI(
        title="Relaygate",
        description="Single-endpoint HTTP relay with header and redirect controls",
        version="0.1.0",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    # Origin gate runs before every route
    app.add_middleware(
        OriginGateMiddleware, gate=OriginGate(settings.allowed_origins)
    )

    # Include routers
    app.include_router(health_router)
    app.include_router(proxy_router)

    return app


# Create the app instance
app = create_app()
