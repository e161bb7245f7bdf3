"""
FastAPI Callback Authentication Service
Logins decided by an external HTTP callback
"""

import time
from contextlib import asynccontextmanager
from typing import Optional

import httpx
import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app

from callback_auth.api.v1.router import api_router
from callback_auth.core.config import ConfigurationService, Settings, get_settings
from callback_auth.core.exceptions import ConfigurationError
from callback_auth.core.logging import setup_logging
from callback_auth.services.provider import CallbackAuthenticationProvider

logger = structlog.get_logger()

VERSION = "1.0.0"


def create_app(
    settings: Optional[Settings] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> FastAPI:
    """
    Build the application.

    ``http_client`` is shared by every login; when omitted one is created at
    startup and closed at shutdown.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan events"""
        setup_logging(settings)
        config = ConfigurationService(settings)
        mock_mode = config.use_mock_service()
        logger.info("Starting Callback Authentication Service", version=VERSION, mock_mode=mock_mode)

        # Fail startup rather than every login when the callback is unusable
        if not mock_mode:
            config.callback_uri()

        client = http_client or httpx.AsyncClient()
        app.state.provider = CallbackAuthenticationProvider.from_settings(settings, client)

        logger.info("Callback authentication service started successfully")

        yield

        logger.info("Shutting down Callback Authentication Service")
        app.state.provider = None
        if http_client is None:
            await client.aclose()

    app = FastAPI(
        title="Callback Authentication Service",
        description="Delegates login decisions to an HTTP callback",
        version=VERSION,
        docs_url="/docs" if settings.ENVIRONMENT == "development" else None,
        redoc_url="/redoc" if settings.ENVIRONMENT == "development" else None,
        lifespan=lifespan,
    )
    app.state.provider = None

    if settings.CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.CORS_ORIGINS,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.include_router(api_router, prefix="/api/v1")

    if settings.METRICS_ENABLED:
        app.mount("/metrics", make_asgi_app())

    @app.get("/health")
    async def health_check(request: Request):
        """Health check endpoint for Docker and load balancers"""
        ready = request.app.state.provider is not None
        content = {
            "status": "healthy" if ready else "unhealthy",
            "service": settings.SERVICE_NAME,
            "version": VERSION,
            "timestamp": time.time(),
            "mock_mode": settings.CALLBACK_USE_MOCK_SERVICE,
        }
        if ready:
            return content
        return JSONResponse(status_code=503, content=content)

    @app.get("/")
    async def root():
        """Root endpoint"""
        return {
            "message": "Callback Authentication Service",
            "version": VERSION,
            "docs": "/docs" if settings.ENVIRONMENT == "development" else "disabled",
            "health": "/health",
        }

    @app.exception_handler(ConfigurationError)
    async def configuration_exception_handler(request: Request, exc: ConfigurationError):
        logger.error(
            "Callback authentication is misconfigured",
            path=request.url.path,
            property=exc.property_name,
            error=str(exc),
        )
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "message": "An unexpected error occurred"},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler"""
        logger.error(
            "Unhandled exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_info=True,
        )
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "message": "An unexpected error occurred"},
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "callback_auth.main:app",
        host="0.0.0.0",
        port=8002,
        reload=settings.ENVIRONMENT == "development",
        log_level=settings.LOG_LEVEL.lower(),
    )
