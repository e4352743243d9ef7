"""
FastAPI application for the rangekit time range service
Main application entry point with middleware, routes, and startup configuration
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse, Response
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST, Counter, Histogram

from rangekit import __version__
from rangekit.api import health, ranges
from rangekit.config.settings import Settings, get_settings
from rangekit.utils.errors import ErrorCode, create_error_response
from rangekit.utils.logging import setup_logging

# Setup structured logging
logger = structlog.get_logger(__name__)

# Prometheus metrics
request_count = Counter('http_requests_total', 'Total HTTP requests', ['method', 'endpoint', 'status'])
request_duration = Histogram('http_request_duration_seconds', 'HTTP request duration')


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown events"""
    settings = app.state.settings
    setup_logging(settings.log_level, settings.use_json_logs)
    app.state.started_at = datetime.now(timezone.utc)
    logger.info(
        "Starting rangekit time range service",
        environment=settings.environment,
        default_timezone=settings.default_timezone,
        fiscal_year_start_month=settings.fiscal_year_start_month,
    )

    yield

    logger.info("Shutting down rangekit time range service")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application; tests pass their own settings"""
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Resolve, describe and size query intervals for dashboard time ranges",
        version=__version__,
        debug=settings.debug,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        lifespan=lifespan
    )
    app.state.settings = settings

    # Add middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(GZipMiddleware, minimum_size=1000)

    @app.middleware("http")
    async def metrics_middleware(request: Request, call_next):
        """Prometheus metrics collection middleware"""
        with request_duration.time():
            response = await call_next(request)

        request_count.labels(
            method=request.method,
            endpoint=request.url.path,
            status=response.status_code
        ).inc()

        return response

    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        """Request logging middleware"""
        logger.info(
            "HTTP request",
            method=request.method,
            path=request.url.path,
            client=request.client.host if request.client else None
        )

        response = await call_next(request)

        logger.info(
            "HTTP response",
            status_code=response.status_code,
            method=request.method,
            path=request.url.path
        )

        return response

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Global exception handler"""
        logger.error(
            "Unhandled exception",
            exc_info=exc,
            path=request.url.path,
            method=request.method
        )

        if settings.is_production:
            body = create_error_response(ErrorCode.INTERNAL_ERROR)
        else:
            body = create_error_response(
                ErrorCode.INTERNAL_ERROR,
                f"Internal server error: {str(exc)}",
                {"type": exc.__class__.__name__}
            )
        return JSONResponse(status_code=500, content={"detail": body})

    # Include routers
    app.include_router(health.router, prefix="/health", tags=["Health"])
    app.include_router(ranges.router, prefix="/api/v1", tags=["Time Ranges"])

    @app.get("/metrics")
    async def metrics():
        """Prometheus metrics endpoint"""
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.get("/")
    async def root() -> Dict[str, Any]:
        """Root endpoint with API information"""
        return {
            "message": settings.app_name,
            "version": __version__,
            "description": "Time range resolution, description and query interval service",
            "docs_url": "/docs" if not settings.is_production else "Contact admin for API documentation",
            "health_check": "/health",
            "metrics": "/metrics"
        }

    return app


app = create_app()


if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(
        "rangekit.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
        workers=1 if settings.is_development else 4,
        log_level=settings.log_level.lower()
    )
