"""
FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.middleware import SlowAPIMiddleware

from finance_dashboard import __version__
from finance_dashboard.ai.client import build_ai_client
from finance_dashboard.api.router import api_router
from finance_dashboard.auth.google import build_google_client
from finance_dashboard.config import settings
from finance_dashboard.database import init_db
from finance_dashboard.errors import register_exception_handlers
from finance_dashboard.logging_config import configure_logging
from finance_dashboard.middleware import RequestLogMiddleware, build_limiter

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.log_level)
    init_db()
    app.state.ai_client = build_ai_client(settings)
    app.state.google_client = build_google_client(settings)
    logger.info(f"{settings.app_name} {__version__} started")
    yield


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=__version__,
    description="Personal finance tracker with natural-language transaction entry",
    lifespan=lifespan,
)

# Rate limiting inside the access log
app.state.limiter = build_limiter(settings)
app.add_middleware(SlowAPIMiddleware)
app.add_middleware(RequestLogMiddleware)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include API router
app.include_router(api_router, prefix="/api")


@app.get("/")
def read_root():
    """Root endpoint."""
    return {
        "name": settings.app_name,
        "version": __version__,
        "status": "running"
    }


@app.get("/api/health")
def health_check():
    """Health check endpoint."""
    return {
        "status": "ok",
        "app_name": settings.app_name
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("finance_dashboard.main:app", host=settings.api_host, port=settings.api_port)
