"""
Main FastAPI Application Entry Point
"""

from fastapi import FastAPI, Request, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging
import traceback

from rxengine.config import settings
from rxengine.database import SessionLocal, health_check as database_health_check, init_db
from rxengine.routers import admin_config, admin_prescriptions, prescriptions
from rxengine.services.config_service import ConfigService
from rxengine.services.errors import PrescriptionError

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info(f"Starting {settings.APP_NAME}")

    # Create all tables (this only creates tables that don't exist)
    try:
        init_db()
        logger.info("Database tables verified/created")
    except Exception as e:
        logger.error(f"Failed to create database tables: {e}")

    db = SessionLocal()
    try:
        ConfigService(db).initialize_defaults()
        logger.info("Configuration initialized")
    except Exception as e:
        logger.error(f"Failed to initialize configuration: {e}")
    finally:
        db.close()

    yield

    logger.info(f"Shutting down {settings.APP_NAME}")


app = FastAPI(
    title=settings.APP_NAME,
    description="Prescription review, expiry tracking and smart reorder",
    version=settings.APP_VERSION,
    lifespan=lifespan,
    docs_url="/api/docs" if settings.DEBUG else None,
    redoc_url="/api/redoc" if settings.DEBUG else None,
)


@app.exception_handler(PrescriptionError)
async def prescription_error_handler(request: Request, exc: PrescriptionError):
    """Return domain errors as JSON with a stable error code."""
    logger.info(f"{request.method} {request.url.path} refused: {exc.code}")
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": exc.message,
            "code": exc.code,
            "prescription_id": exc.prescription_id,
        }
    )


# Global exception handler to catch and log all unhandled exceptions
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Catch all unhandled exceptions and return proper JSON response with logging."""
    error_trace = traceback.format_exc()
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc}")
    logger.error(f"Stack trace:\n{error_trace}")

    # Don't catch HTTPException, let FastAPI handle those
    if isinstance(exc, HTTPException):
        raise exc

    error_message = "An unexpected error occurred"
    if settings.DEBUG:
        error_message = str(exc)

    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "error_type": type(exc).__name__,
            "message": error_message,
            "path": str(request.url.path),
        }
    )


# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT"],
    allow_headers=["*"],
)

app.include_router(prescriptions.router, prefix="/api/prescriptions", tags=["Prescriptions"])
app.include_router(admin_prescriptions.router, prefix="/api/admin/prescriptions", tags=["Admin Prescriptions"])
app.include_router(admin_config.router, prefix="/api/admin/config", tags=["Admin Configuration"])


@app.get("/health")
async def health_check():
    """Simple health check for load balancers."""
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "database": "ok" if database_health_check() else "unavailable",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("rxengine.main:app", host="0.0.0.0", port=8000, reload=settings.DEBUG)
