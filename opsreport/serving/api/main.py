"""
FastAPI Application Factory

Creates and configures the reporting API application.
"""

from typing import Any, Dict, Optional

from fastapi import FastAPI
from fastapi.middleware.gzip import GZipMiddleware

from opsreport.config import get_settings
from opsreport.serving.api.middleware import RequestLoggingMiddleware, SecurityHeadersMiddleware
from opsreport.serving.api.routes import health_router, reports_router


def create_api_app(lifespan: Optional[Any] = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        lifespan: Optional lifespan context manager

    Returns:
        Configured FastAPI app instance
    """
    settings = get_settings()
    app = FastAPI(
        title="Operations Reporting API",
        description="Collection, fleet, receivables, inventory and operations reports",
        version=settings.version,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        lifespan=lifespan,
    )

    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)

    app.include_router(health_router, prefix="/api/v1", tags=["Health"])
    app.include_router(reports_router, prefix="/api/v1/reports", tags=["Reports"])

    @app.get("/api/v1/info")
    async def api_info() -> Dict[str, str]:
        """API information endpoint."""
        return {
            "name": "Operations Reporting API",
            "version": settings.version,
            "environment": settings.app_env,
            "documentation": "/docs",
        }

    return app
