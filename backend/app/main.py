from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware

from app.config import settings
from app.errors import SerializationError, ValidationFailed
from app.logger import app_logger, session_logger
from app.redis_client import get_redis
from app.responses import json_response
from app.routers import auth, videos, playlists

# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    docs_url="/docs" if not settings.is_production else None,
    redoc_url="/redoc" if not settings.is_production else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
    max_age=600,  # Cache preflight requests for 10 minutes
)

if settings.is_production:
    app.add_middleware(
        TrustedHostMiddleware,
        allowed_hosts=[settings.public_host.split(":")[0], settings.server_name],
    )

app.include_router(auth.router, tags=["Authentication"])
app.include_router(videos.router, tags=["Videos"])
app.include_router(playlists.router, tags=["Playlists"])


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies get the same 400 payload as missing fields."""
    app_logger.warning(f"Invalid request to {request.url.path}: {exc.errors()}")
    error = ValidationFailed()
    return json_response({"error": error.message}, status_code=error.status_code)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Anything that escapes a route still answers with the JSON error body."""
    app_logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=exc)
    error = SerializationError()
    return json_response({"error": error.message}, status_code=error.status_code)


@app.on_event("startup")
async def startup_event():
    """Run on application startup."""
    app_logger.info(f"Starting {settings.app_name}")
    app_logger.info(f"Environment: {settings.environment}")
    app_logger.info(f"Debug mode: {settings.debug}")


@app.on_event("shutdown")
async def shutdown_event():
    """Run on application shutdown."""
    app_logger.info("Shutting down application")

    try:
        get_redis().close()
        session_logger.info("Redis connection closed")
    except Exception as e:
        session_logger.warning(f"Error closing Redis connection: {e}")


@app.get("/health")
def health_check():
    """Detailed health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.app_name,
        "version": "1.0.0",
        "environment": settings.environment,
        "session_store": "connected" if get_redis().ping() else "disconnected",
    }
