"""
VerifyHub - Main FastAPI application
"""
import os

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.orm import Session
import structlog

from verifyhub.core.config import settings
from verifyhub.core.database import check_connection, get_db, init_db
from verifyhub.core.logging_config import configure_logging
from verifyhub.core.middleware import (
    CorrelationIDMiddleware,
    LoggingMiddleware,
    ExceptionHandlerMiddleware,
    error_body,
)
from verifyhub.core.exceptions import VerifyHubException
from verifyhub.core.timeutils import utcnow
from verifyhub.candidates.router import router as candidates_router
from verifyhub.dashboard.router import router as dashboard_router
from verifyhub.verifications.router import router as verifications_router

# Configure logging
configure_logging()
logger = structlog.get_logger()

# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Background verification tracking for HR teams",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
)

# Add middleware
app.add_middleware(ExceptionHandlerMiddleware)
app.add_middleware(LoggingMiddleware)
app.add_middleware(CorrelationIDMiddleware)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(VerifyHubException)
async def verifyhub_exception_handler(request: Request, exc: VerifyHubException):
    """Handle VerifyHub exceptions"""
    if exc.status_code >= 500:
        logger.error("request_error", path=request.url.path, error=exc.message, details=exc.details)
    return JSONResponse(status_code=exc.status_code, content=error_body(exc))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Report malformed input as 400 with the same body shape"""
    errors = [
        {"field": ".".join(str(p) for p in err.get("loc", [])[1:]), "message": err.get("msg")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={"message": "Invalid request", "type": "ValidationError", "details": {"errors": errors}},
    )


# Health check
@app.get("/health")
def health_check(db: Session = Depends(get_db)):
    """Store connectivity probe"""
    timestamp = utcnow().isoformat()
    if check_connection(db):
        return {"status": "ok", "database": "connected", "timestamp": timestamp}
    return JSONResponse(
        status_code=503,
        content={"status": "error", "database": "disconnected", "timestamp": timestamp},
    )


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.APP_VERSION,
        "docs": "/api/docs",
    }


# Include routers
app.include_router(candidates_router)
app.include_router(verifications_router)
app.include_router(dashboard_router)

# Locally stored documents and resumes
os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")


# Startup event
@app.on_event("startup")
async def startup_event():
    """Initialize on startup"""
    logger.info("application_starting", version=settings.APP_VERSION)
    init_db()
    logger.info("database_initialized")


# Shutdown event
@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown"""
    logger.info("application_shutting_down")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "verifyhub.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )
