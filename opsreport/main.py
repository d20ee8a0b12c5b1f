"""
FastAPI Production Application

Main entry point for the Operations Reporting API.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
import structlog

from opsreport.config import get_settings
from opsreport.config.logging import configure_logging
from opsreport.serving.api import create_api_app

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    configure_logging()
    settings = get_settings()
    logger.info(
        "Starting Operations Reporting API",
        version=settings.version,
        environment=settings.app_env,
    )
    yield
    logger.info("Shutting down...")


app = create_api_app(lifespan=lifespan)


def run() -> None:
    """Console entry point: serve the API with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "opsreport.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.is_development and settings.debug,
        log_config=None,
        access_log=True,
    )


if __name__ == "__main__":
    run()
