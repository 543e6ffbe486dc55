"""
Driver Qualification History Analysis - FastAPI Application.

Main entry point for the API server.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import get_settings
from app.core.exceptions import FormStoreUnavailableError
from app.api.routes import history_router, forms_router

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Debug mode: {settings.debug}")
    logger.info(f"Clock timezone: {settings.timezone}")

    yield

    # Shutdown
    from app.services.form.store import get_form_store

    await get_form_store().close()
    logger.info("Shutting down application")


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
## Driver Qualification History Analysis

Address and employment history checks for commercial driver applications.

### Features
- **Residency Check**: Does the current address cover the last 3 years?
- **Gap Detection**: Uncovered spans in address and employment history
- **Overlap Detection**: Date ranges claimed by two entries at once
- **Coverage**: Total months of employment against the 36-month requirement
- **Form Navigation**: Step gating until gaps are fixed or acknowledged

### Quick Start
1. Check addresses via `/api/v1/history/residency/gaps`
2. Check jobs via `/api/v1/history/employment/gaps`
3. Drive the form via `/api/v1/forms/{session_id}/next`
    """,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Health check endpoint
@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.app_name,
        "version": settings.app_version,
    }


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information."""
    return {
        "message": "Driver Qualification History Analysis",
        "version": settings.app_version,
        "docs": "/docs",
        "health": "/health",
    }


# Include routers
app.include_router(history_router, prefix="/api/v1")
app.include_router(forms_router, prefix="/api/v1")


# Exception handlers
@app.exception_handler(FormStoreUnavailableError)
async def form_store_exception_handler(request: Request, exc: FormStoreUnavailableError):
    """Form progress storage is down."""
    logger.error(f"Form store unavailable: {exc}")
    return JSONResponse(
        status_code=503,
        content={"detail": "Form progress storage unavailable"},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "message": str(exc) if settings.debug else "An error occurred",
        },
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
    )
