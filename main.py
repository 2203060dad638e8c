import logging
import os
from urllib.parse import urlparse
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from contextlib import asynccontextmanager

from app.core.config import settings
from app.core.database import init_db
from app.core.errors import APIError, api_error_handler, unhandled_error_handler
from app.core.logging_config import setup_logging
from app.api.endpoints import users

setup_logging(settings.LOG_LEVEL, json_logs=settings.JSON_LOGS)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    """
    logger.info("Starting up Jobify API...")
    init_db()
    logger.info(f"Media backend: {settings.MEDIA_BACKEND}")

    yield

    logger.info("Shutting down Jobify API...")


# Create FastAPI application
app = FastAPI(
    title=settings.PROJECT_NAME,
    version="1.0.0",
    description="User profiles and application stats for the Jobify job board",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Errors raised from dependencies (e.g. a missing token) use the same body shape
app.add_exception_handler(APIError, api_error_handler)
app.add_exception_handler(Exception, unhandled_error_handler)

# Include routers
app.include_router(users.router, prefix=settings.API_V1_STR)

# Serve locally stored avatars at the URLs LocalMediaHost hands out
if settings.MEDIA_BACKEND == "local":
    os.makedirs(settings.LOCAL_MEDIA_DIR, exist_ok=True)
    app.mount(
        urlparse(settings.LOCAL_MEDIA_BASE_URL).path.rstrip("/"),
        StaticFiles(directory=settings.LOCAL_MEDIA_DIR),
        name="avatars",
    )


@app.get("/")
async def root():
    """Root endpoint - API health check"""
    return {
        "message": "Jobify API",
        "version": "1.0.0",
        "status": "healthy"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,  # Enable auto-reload during development
        log_level="info"
    )
